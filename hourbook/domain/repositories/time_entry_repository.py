"""
Time entry repository interface.
Defines the contract for time entry persistence. Entries are created and deleted, never updated.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from hourbook.domain.models.time_entry import TimeEntry


class TimeEntryRepository(ABC):
    """
    Repository interface for TimeEntry entities.
    Reads return entries enriched with project and user join data, newest date first.
    """

    @abstractmethod
    def add(self, entry: TimeEntry) -> TimeEntry:
        pass

    @abstractmethod
    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        pass

    @abstractmethod
    def list_all(self) -> List[TimeEntry]:
        pass

    @abstractmethod
    def list_by_project(self, project_id: int) -> List[TimeEntry]:
        pass

    @abstractmethod
    def list_by_projects(self, project_ids: List[int]) -> List[TimeEntry]:
        pass

    @abstractmethod
    def list_by_user(self, user_id: str) -> List[TimeEntry]:
        pass

    @abstractmethod
    def delete(self, entry_id: int) -> bool:
        pass

    @abstractmethod
    def delete_by_project(self, project_id: int) -> int:
        """Remove every entry of a project; returns how many were removed."""
        pass
