"""
User mapper for converting between domain entities and database models.
"""

from hourbook.domain.models.user import User, UserRole
from hourbook.infrastructure.db.models import UserModel


class UserMapper:
    """Maps between User domain entity and UserModel database model."""

    def domain_to_model(self, user: User) -> UserModel:
        """Convert User domain entity to UserModel."""
        return UserModel(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            role=user.role.value,
            hourly_rate=user.hourly_rate,
            created_at=user.created_at,
            updated_at=user.updated_at
        )

    def update_model(self, model: UserModel, user: User) -> None:
        """Copy the mutable profile fields onto an existing row."""
        model.full_name = user.full_name
        model.role = user.role.value
        model.hourly_rate = user.hourly_rate
        model.updated_at = user.updated_at

    def model_to_domain(self, model: UserModel) -> User:
        """Convert UserModel to User domain entity."""
        return User(
            id=model.id,
            email=model.email,
            full_name=model.full_name,
            role=UserRole(model.role) if model.role else UserRole.EMPLOYEE,
            hourly_rate=model.hourly_rate,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
