"""
User repository implementation using SQLAlchemy.
"""

from typing import Optional, List

from hourbook.domain.models.user import User
from hourbook.domain.repositories.user_repository import UserRepositoryInterface
from hourbook.infrastructure.db.models import UserModel
from hourbook.infrastructure.mappers.user_mapper import UserMapper
from .base import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository, UserRepositoryInterface):
    """SQLAlchemy implementation of user repository."""

    def __init__(self, session):
        super().__init__(session)
        self.mapper = UserMapper()

    def save(self, user: User) -> User:
        """Insert the profile row or update it when the id already exists."""
        with self._store_operation("users.save"):
            model = self.session.query(UserModel).filter_by(id=user.id).first()
            if model is None:
                model = self.mapper.domain_to_model(user)
                self.session.add(model)
            else:
                self.mapper.update_model(model, user)

            self.session.flush()
            self.session.refresh(model)
            return self.mapper.model_to_domain(model)

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        with self._store_operation("users.get_by_id"):
            model = self.session.query(UserModel).filter_by(id=user_id).first()
            return self.mapper.model_to_domain(model) if model else None

    def get_by_email(self, email: str) -> Optional[User]:
        with self._store_operation("users.get_by_email"):
            model = self.session.query(UserModel).filter_by(email=email).first()
            return self.mapper.model_to_domain(model) if model else None

    def list_all(self) -> List[User]:
        with self._store_operation("users.list_all"):
            models = self.session.query(UserModel).order_by(UserModel.full_name).all()
            return [self.mapper.model_to_domain(model) for model in models]
