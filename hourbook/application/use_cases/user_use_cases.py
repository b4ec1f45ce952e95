"""
User use cases for the application layer.
Implements profile bootstrap, self-service profile edits and the admin user directory.
"""

import logging
from typing import List, Optional

from hourbook.application.cache import EntityCache
from hourbook.application.dto.user_dto import (
    UpdateHourlyRateRequestDTO,
    UpdateProfileNameRequestDTO,
    UserResponseDTO,
)
from hourbook.application.use_cases.base_use_case import (
    AuthorizedUseCase,
    QueryUseCase,
    UpdateUseCase,
    CommandUseCase,
)
from hourbook.domain.models.base import EntityNotFoundError
from hourbook.domain.models.user import User, UserRole
from hourbook.domain.repositories.user_repository import UserRepositoryInterface
from hourbook.domain.services.access_policy import View
from hourbook.domain.services.auth_service import AuthIdentity

logger = logging.getLogger(__name__)

USER = "user"


def user_to_dto(user: User) -> UserResponseDTO:
    return UserResponseDTO(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        role=user.role.value,
        hourly_rate=user.hourly_rate,
        created_at=user.created_at
    )


class EnsureProfileUseCase(CommandUseCase[AuthIdentity, User]):
    """
    Return the caller's profile row, creating it from identity metadata when missing.
    A profile created here is always an employee.
    """

    def __init__(self, user_repository: UserRepositoryInterface, cache: Optional[EntityCache] = None):
        super().__init__()
        self.user_repository = user_repository
        self.cache = cache or EntityCache()

    async def _execute_command_logic(self, request: AuthIdentity) -> User:
        user = self.cache.get(USER, request.user_id, self.user_repository.get_by_id)
        if user is not None:
            return user

        user = User.from_auth_user(
            user_id=request.user_id,
            email=request.email,
            metadata=request.metadata,
            role=UserRole.EMPLOYEE
        )
        self.user_repository.save(user)
        logger.info(f"Created missing profile for user {request.user_id}")
        return self.cache.refetch(USER, request.user_id, self.user_repository.get_by_id)


class GetCurrentUserUseCase(AuthorizedUseCase, QueryUseCase[None, UserResponseDTO]):
    """Use case for reading the caller's own profile."""

    def __init__(self, user_repository: UserRepositoryInterface, cache: Optional[EntityCache] = None):
        super().__init__()
        self.user_repository = user_repository
        self.cache = cache or EntityCache()

    async def _check_authorization(self, request) -> None:
        self._require(View.PROFILE, owner_id=self.current_user_id)

    async def _execute_business_logic(self, request) -> UserResponseDTO:
        user = self.cache.get(USER, self.current_user_id, self.user_repository.get_by_id)
        if not user:
            raise EntityNotFoundError("User", self.current_user_id)
        return user_to_dto(user)


class _ProfileUpdateUseCase(AuthorizedUseCase, UpdateUseCase):
    """Shared plumbing for edits a user makes to their own profile."""

    def __init__(self, user_repository: UserRepositoryInterface, cache: Optional[EntityCache] = None):
        super().__init__()
        self.user_repository = user_repository
        self.cache = cache or EntityCache()

    async def _check_authorization(self, request) -> None:
        self._require(View.PROFILE, owner_id=self.current_user_id, write=True)

    def _load_own_profile(self) -> User:
        user = self.cache.get(USER, self.current_user_id, self.user_repository.get_by_id)
        if not user:
            raise EntityNotFoundError("User", self.current_user_id)
        return user

    def _store(self, user: User) -> UserResponseDTO:
        self.user_repository.save(user)
        return user_to_dto(self.cache.refetch(USER, user.id, self.user_repository.get_by_id))


class UpdateProfileNameUseCase(_ProfileUpdateUseCase):
    """Use case for changing the caller's display name."""

    async def _execute_command_logic(self, request: UpdateProfileNameRequestDTO) -> UserResponseDTO:
        user = self._load_own_profile()
        user.rename(request.full_name)
        return self._store(user)


class UpdateHourlyRateUseCase(_ProfileUpdateUseCase):
    """Use case for changing the caller's personal hourly rate."""

    async def _execute_command_logic(self, request: UpdateHourlyRateRequestDTO) -> UserResponseDTO:
        user = self._load_own_profile()
        user.change_hourly_rate(request.hourly_rate)
        return self._store(user)


class ListUsersUseCase(AuthorizedUseCase, QueryUseCase[None, List[UserResponseDTO]]):
    """Admin user directory. Read-only."""

    def __init__(self, user_repository: UserRepositoryInterface, cache: Optional[EntityCache] = None):
        super().__init__()
        self.user_repository = user_repository
        self.cache = cache or EntityCache()

    async def _check_authorization(self, request) -> None:
        self._require(View.USER_DIRECTORY)

    async def _execute_business_logic(self, request) -> List[UserResponseDTO]:
        users = self.cache.get_list(USER, "all", self.user_repository.list_all)
        return [user_to_dto(user) for user in users]
