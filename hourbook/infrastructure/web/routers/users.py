"""
User router.
The caller's own profile, and the read-only user directory for admins.
"""

from typing import Annotated, List
from fastapi import APIRouter, Depends

from hourbook.application.cache import EntityCache
from hourbook.application.dto.user_dto import (
    UpdateHourlyRateRequestDTO,
    UpdateProfileNameRequestDTO,
    UserResponseDTO,
)
from hourbook.application.use_cases.user_use_cases import (
    GetCurrentUserUseCase,
    ListUsersUseCase,
    UpdateHourlyRateUseCase,
    UpdateProfileNameUseCase,
)
from hourbook.domain.services.access_policy import Caller
from hourbook.infrastructure.auth.dependencies import (
    get_current_caller,
    get_entity_cache,
    get_user_repository,
)
from hourbook.infrastructure.repositories import SQLAlchemyUserRepository
from hourbook.infrastructure.web.middleware.error_handler import unwrap


router = APIRouter()

UserRepository = Annotated[SQLAlchemyUserRepository, Depends(get_user_repository)]
CurrentCaller = Annotated[Caller, Depends(get_current_caller)]
Cache = Annotated[EntityCache, Depends(get_entity_cache)]


@router.get("/me", response_model=UserResponseDTO)
async def get_profile(caller: CurrentCaller, repository: UserRepository, cache: Cache):
    use_case = GetCurrentUserUseCase(repository, cache).set_caller(caller)
    return unwrap(await use_case.execute())


@router.patch("/me/name", response_model=UserResponseDTO)
async def update_name(
    request: UpdateProfileNameRequestDTO,
    caller: CurrentCaller,
    repository: UserRepository,
    cache: Cache
):
    """
    Change the display name.

    - **full_name**: New name, not blank
    """
    use_case = UpdateProfileNameUseCase(repository, cache).set_caller(caller)
    return unwrap(await use_case.execute(request))


@router.patch("/me/hourly-rate", response_model=UserResponseDTO)
async def update_hourly_rate(
    request: UpdateHourlyRateRequestDTO,
    caller: CurrentCaller,
    repository: UserRepository,
    cache: Cache
):
    """
    Change the personal hourly rate shown in time tracking.

    - **hourly_rate**: Positive number
    """
    use_case = UpdateHourlyRateUseCase(repository, cache).set_caller(caller)
    return unwrap(await use_case.execute(request))


@router.get("", response_model=List[UserResponseDTO])
async def list_users(caller: CurrentCaller, repository: UserRepository, cache: Cache):
    """User directory. Admins only."""
    use_case = ListUsersUseCase(repository, cache).set_caller(caller)
    return unwrap(await use_case.execute())
