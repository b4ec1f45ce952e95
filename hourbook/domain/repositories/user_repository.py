"""
User repository interface.
Defines the contract for profile row persistence.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from hourbook.domain.models.user import User


class UserRepositoryInterface(ABC):
    """
    Repository interface for User aggregate.
    Profiles are never hard-deleted, so there is no delete operation.
    """

    @abstractmethod
    def save(self, user: User) -> User:
        """
        Insert or update a profile row.
        Returns the stored user.
        """
        pass

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    def list_all(self) -> List[User]:
        """All profiles ordered by full name."""
        pass
