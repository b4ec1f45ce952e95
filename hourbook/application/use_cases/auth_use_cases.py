"""
Authentication use cases for the application layer.
Sign-up, sign-in, sign-out and password changes are delegated to the identity provider.
"""

import logging
from typing import Optional

from hourbook.application.cache import EntityCache
from hourbook.application.dto.base_dto import MessageResponseDTO
from hourbook.application.dto.user_dto import (
    SessionResponseDTO,
    SignInRequestDTO,
    SignUpRequestDTO,
    SignUpResponseDTO,
    UpdatePasswordRequestDTO,
)
from hourbook.application.use_cases.base_use_case import (
    AuthorizedUseCase,
    CommandUseCase,
)
from hourbook.application.use_cases.user_use_cases import USER, user_to_dto
from hourbook.domain.models.user import User
from hourbook.domain.repositories.user_repository import UserRepositoryInterface
from hourbook.domain.services.access_policy import View
from hourbook.domain.services.auth_service import (
    MSG_SIGNUP_DONE,
    MSG_SIGNUP_PENDING,
    IdentityProvider,
    validate_password,
    validate_signup,
)

logger = logging.getLogger(__name__)


class SignUpUseCase(CommandUseCase[SignUpRequestDTO, SignUpResponseDTO]):
    """
    Register an account with the chosen role.
    The profile row is written straight away so the role survives a pending email confirmation.
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        user_repository: UserRepositoryInterface,
        min_password_length: int = 6
    ):
        super().__init__()
        self.identity_provider = identity_provider
        self.user_repository = user_repository
        self.min_password_length = min_password_length

    async def _execute_command_logic(self, request: SignUpRequestDTO) -> SignUpResponseDTO:
        metadata = validate_signup(
            request.email,
            request.password,
            request.full_name,
            request.role,
            self.min_password_length
        )

        identity = await self.identity_provider.sign_up(request.email, request.password, metadata)

        if self.user_repository.get_by_id(identity.user_id) is None:
            self.user_repository.save(User(
                id=identity.user_id,
                email=identity.email or request.email,
                full_name=metadata["full_name"],
                role=metadata["role"]
            ))
            logger.info(f"Registered {metadata['role']} {identity.user_id}")

        return SignUpResponseDTO(
            user_id=identity.user_id,
            email=identity.email or request.email,
            pending_confirmation=not identity.email_confirmed,
            message=MSG_SIGNUP_DONE if identity.email_confirmed else MSG_SIGNUP_PENDING
        )


class SignInUseCase(CommandUseCase[SignInRequestDTO, SessionResponseDTO]):
    """Sign in and return the session together with the (possibly new) profile."""

    def __init__(
        self,
        identity_provider: IdentityProvider,
        user_repository: UserRepositoryInterface,
        cache: Optional[EntityCache] = None
    ):
        super().__init__()
        self.identity_provider = identity_provider
        self.user_repository = user_repository
        self.cache = cache or EntityCache()

    async def _execute_command_logic(self, request: SignInRequestDTO) -> SessionResponseDTO:
        session = await self.identity_provider.sign_in(request.email, request.password)
        identity = session.identity

        user = self.cache.get(USER, identity.user_id, self.user_repository.get_by_id)
        if user is None:
            self.user_repository.save(User.from_auth_user(identity.user_id, identity.email, identity.metadata))
            user = self.cache.refetch(USER, identity.user_id, self.user_repository.get_by_id)

        return SessionResponseDTO(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            user=user_to_dto(user)
        )


class SignOutUseCase(AuthorizedUseCase, CommandUseCase[str, MessageResponseDTO]):

    def __init__(self, identity_provider: IdentityProvider):
        super().__init__()
        self.identity_provider = identity_provider

    async def _execute_command_logic(self, access_token: str) -> MessageResponseDTO:
        await self.identity_provider.sign_out(access_token)
        return MessageResponseDTO(message="Je bent uitgelogd.")


class UpdatePasswordUseCase(AuthorizedUseCase, CommandUseCase[UpdatePasswordRequestDTO, MessageResponseDTO]):
    """Change the caller's own password; the new one must be confirmed."""

    def __init__(self, identity_provider: IdentityProvider, min_password_length: int = 6):
        super().__init__()
        self.identity_provider = identity_provider
        self.min_password_length = min_password_length
        self.access_token: Optional[str] = None

    def with_token(self, access_token: str) -> "UpdatePasswordUseCase":
        self.access_token = access_token
        return self

    async def _check_authorization(self, request) -> None:
        self._require(View.PROFILE, owner_id=self.current_user_id, write=True)

    async def _execute_command_logic(self, request: UpdatePasswordRequestDTO) -> MessageResponseDTO:
        password = validate_password(
            request.new_password,
            request.confirm_password,
            min_length=self.min_password_length,
            check_confirmation=True
        )
        await self.identity_provider.update_password(self.access_token, password)
        return MessageResponseDTO(message="Wachtwoord succesvol bijgewerkt.")
