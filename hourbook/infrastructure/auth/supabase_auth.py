"""
Supabase authentication service.
Implements the identity provider port against Supabase Auth.
"""

import logging
from typing import Optional, Dict, Any
from fastapi.concurrency import run_in_threadpool
from supabase import create_client, Client

from hourbook.config import get_settings
from hourbook.domain.models.base import AuthenticationError
from hourbook.domain.services.auth_service import (
    AuthIdentity,
    AuthSession,
    IdentityProvider,
    map_auth_error,
)

logger = logging.getLogger(__name__)


def _identity_from_user(user: Any) -> AuthIdentity:
    return AuthIdentity(
        user_id=str(user.id),
        email=user.email or "",
        metadata=dict(user.user_metadata or {}),
        email_confirmed=bool(getattr(user, "email_confirmed_at", None))
    )


class SupabaseAuthService(IdentityProvider):
    """Identity provider backed by Supabase Auth."""

    def __init__(self):
        self.settings = get_settings()
        self._client: Optional[Client] = None
        self._admin_client: Optional[Client] = None

    @property
    def supabase(self) -> Client:
        if self._client is None:
            self._client = create_client(
                self.settings.supabase_url,
                self.settings.supabase_anon_key
            )
        return self._client

    @property
    def supabase_admin(self) -> Client:
        """Service-role client for operations on behalf of a verified user."""
        if self._admin_client is None:
            self._admin_client = create_client(
                self.settings.supabase_url,
                self.settings.supabase_service_key
            )
        return self._admin_client

    def _fail(self, operation: str, error: Exception) -> AuthenticationError:
        logger.warning(f"Supabase {operation} failed: {error}")
        return map_auth_error(str(error), self.settings.min_password_length)

    async def sign_up(self, email: str, password: str, metadata: Dict[str, Any]) -> AuthIdentity:
        try:
            response = await run_in_threadpool(
                self.supabase.auth.sign_up,
                {
                    "email": email,
                    "password": password,
                    "options": {
                        "email_redirect_to": f"{self.settings.site_url}/auth/callback",
                        "data": metadata
                    }
                }
            )
        except Exception as e:
            raise self._fail("sign up", e)

        if response.user is None:
            raise AuthenticationError("Account aanmaken mislukt. Probeer het opnieuw.")

        return _identity_from_user(response.user)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            response = await run_in_threadpool(
                self.supabase.auth.sign_in_with_password,
                {"email": email, "password": password}
            )
        except Exception as e:
            raise self._fail("sign in", e)

        if response.user is None or response.session is None:
            raise map_auth_error("Invalid login credentials")

        return AuthSession(
            identity=_identity_from_user(response.user),
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token
        )

    async def sign_out(self, access_token: str) -> None:
        try:
            await run_in_threadpool(self.supabase_admin.auth.admin.sign_out, access_token)
        except Exception as e:
            # The access token still expires on its own.
            logger.warning(f"Supabase sign out failed: {e}")

    async def get_user(self, access_token: str) -> Optional[AuthIdentity]:
        try:
            response = await run_in_threadpool(self.supabase.auth.get_user, access_token)
        except Exception as e:
            logger.info(f"Supabase rejected access token: {e}")
            return None

        if response is None or response.user is None:
            return None
        return _identity_from_user(response.user)

    async def update_password(self, access_token: str, new_password: str) -> None:
        identity = await self.get_user(access_token)
        if identity is None:
            raise AuthenticationError("Authenticatie vereist")

        try:
            await run_in_threadpool(
                self.supabase_admin.auth.admin.update_user_by_id,
                identity.user_id,
                {"password": new_password}
            )
        except Exception as e:
            raise self._fail("password update", e)
