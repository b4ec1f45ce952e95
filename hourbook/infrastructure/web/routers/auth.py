"""
Authentication router for user authentication endpoints.
Handles registration with a role, sign-in, sign-out and password changes.
"""

from typing import Annotated
from fastapi import APIRouter, Depends, status

from hourbook.application.cache import EntityCache
from hourbook.application.dto.base_dto import MessageResponseDTO
from hourbook.application.dto.user_dto import (
    SessionResponseDTO,
    SignInRequestDTO,
    SignUpRequestDTO,
    SignUpResponseDTO,
    UpdatePasswordRequestDTO,
)
from hourbook.application.use_cases.auth_use_cases import (
    SignInUseCase,
    SignOutUseCase,
    SignUpUseCase,
    UpdatePasswordUseCase,
)
from hourbook.config import get_settings
from hourbook.domain.services.access_policy import Caller
from hourbook.domain.services.auth_service import IdentityProvider
from hourbook.infrastructure.auth.dependencies import (
    get_access_token,
    get_current_caller,
    get_entity_cache,
    get_identity_provider,
    get_user_repository,
)
from hourbook.infrastructure.repositories import SQLAlchemyUserRepository
from hourbook.infrastructure.web.middleware.error_handler import unwrap


router = APIRouter()


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=SignUpResponseDTO)
async def sign_up(
    request: SignUpRequestDTO,
    identity_provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
    user_repository: Annotated[SQLAlchemyUserRepository, Depends(get_user_repository)]
):
    """
    Register a new account.

    - **email**: Valid email address
    - **password**: At least the configured minimum length
    - **full_name**: Display name
    - **role**: admin or employee
    """
    use_case = SignUpUseCase(
        identity_provider,
        user_repository,
        min_password_length=get_settings().min_password_length
    )
    return unwrap(await use_case.execute(request))


@router.post("/signin", response_model=SessionResponseDTO)
async def sign_in(
    request: SignInRequestDTO,
    identity_provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
    user_repository: Annotated[SQLAlchemyUserRepository, Depends(get_user_repository)],
    cache: Annotated[EntityCache, Depends(get_entity_cache)]
):
    """
    Sign in with email and password.
    A missing profile is created on the way.
    """
    use_case = SignInUseCase(identity_provider, user_repository, cache)
    return unwrap(await use_case.execute(request))


@router.post("/signout", response_model=MessageResponseDTO)
async def sign_out(
    caller: Annotated[Caller, Depends(get_current_caller)],
    token: Annotated[str, Depends(get_access_token)],
    identity_provider: Annotated[IdentityProvider, Depends(get_identity_provider)]
):
    use_case = SignOutUseCase(identity_provider).set_caller(caller)
    return unwrap(await use_case.execute(token))


@router.post("/update-password", response_model=MessageResponseDTO)
async def update_password(
    request: UpdatePasswordRequestDTO,
    caller: Annotated[Caller, Depends(get_current_caller)],
    token: Annotated[str, Depends(get_access_token)],
    identity_provider: Annotated[IdentityProvider, Depends(get_identity_provider)]
):
    """
    Change the caller's password.

    - **new_password**: New password
    - **confirm_password**: Must match new_password
    """
    use_case = UpdatePasswordUseCase(
        identity_provider,
        min_password_length=get_settings().min_password_length
    ).set_caller(caller)
    return unwrap(await use_case.with_token(token).execute(request))
