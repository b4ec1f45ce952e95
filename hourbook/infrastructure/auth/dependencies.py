"""
Authentication dependencies for FastAPI.
Resolves the caller from the bearer token and wires request-scoped repositories and services.
"""

import logging
from typing import Annotated, Any, Dict

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from hourbook.application.cache import EntityCache
from hourbook.application.use_cases.user_use_cases import EnsureProfileUseCase
from hourbook.config import get_settings
from hourbook.domain.models.base import AuthenticationError, AuthorizationError
from hourbook.domain.services.access_policy import Caller, View, require
from hourbook.domain.services.auth_service import AuthIdentity, IdentityProvider
from hourbook.domain.services.billing_service import BillingService
from hourbook.domain.services.export_service import ExportService
from hourbook.domain.services.invoice_gateway import InvoiceGateway
from hourbook.domain.services.lifecycle_service import LifecycleService, TransitionPolicy
from hourbook.infrastructure.auth.jwt_handler import JWTHandler
from hourbook.infrastructure.auth.supabase_auth import SupabaseAuthService
from hourbook.infrastructure.db.database import get_db
from hourbook.infrastructure.invoicing.providers import SimulatedInvoiceGateway
from hourbook.infrastructure.repositories import (
    SQLAlchemyInvoiceDispatchRepository,
    SQLAlchemyProjectRepository,
    SQLAlchemyTimeEntryRepository,
    SQLAlchemyUserRepository,
)

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)

# Global instances
_jwt_handler = None
_identity_provider = None
_invoice_gateway = None


def get_jwt_handler() -> JWTHandler:
    """Dependency to get JWT handler."""
    global _jwt_handler
    if _jwt_handler is None:
        _jwt_handler = JWTHandler()
    return _jwt_handler


def get_identity_provider() -> IdentityProvider:
    """Dependency to get the identity provider."""
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = SupabaseAuthService()
    return _identity_provider


def get_invoice_gateway() -> InvoiceGateway:
    global _invoice_gateway
    if _invoice_gateway is None:
        _invoice_gateway = SimulatedInvoiceGateway(
            delay_seconds=get_settings().invoice_send_delay_seconds
        )
    return _invoice_gateway


# Services configured from settings

def get_billing_service() -> BillingService:
    return BillingService(fallback_project_rate=get_settings().default_project_hourly_rate)


def get_lifecycle_service() -> LifecycleService:
    return LifecycleService(TransitionPolicy(get_settings().status_transition_policy))


def get_export_service() -> ExportService:
    settings = get_settings()
    return ExportService(
        currency_symbol=settings.currency_symbol,
        tax_rate_id=settings.moneybird_tax_rate_id
    )


def get_entity_cache() -> EntityCache:
    """One cache per request; FastAPI reuses it for every dependency of that request."""
    return EntityCache()


# Repositories bound to the request's database session

def get_user_repository(session: Annotated[Session, Depends(get_db)]) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(session)


def get_project_repository(session: Annotated[Session, Depends(get_db)]) -> SQLAlchemyProjectRepository:
    return SQLAlchemyProjectRepository(session)


def get_time_entry_repository(session: Annotated[Session, Depends(get_db)]) -> SQLAlchemyTimeEntryRepository:
    return SQLAlchemyTimeEntryRepository(session)


def get_dispatch_repository(session: Annotated[Session, Depends(get_db)]) -> SQLAlchemyInvoiceDispatchRepository:
    return SQLAlchemyInvoiceDispatchRepository(session)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": message, "redirect_to": "/auth/login"},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_access_token(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)]
) -> str:
    """Raw bearer token of the request."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Authenticatie vereist")
    return credentials.credentials


async def get_current_user_payload(
    token: Annotated[str, Depends(get_access_token)],
    jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
) -> Dict[str, Any]:
    """
    FastAPI dependency to get current user's full token payload.

    Raises:
        HTTPException: If the token does not verify
    """
    try:
        return jwt_handler.verify_token(token)
    except AuthenticationError as e:
        logger.info(f"Rejected access token: {e.message}")
        raise _unauthorized("Sessie verlopen, log opnieuw in")


async def get_current_user_id(
    payload: Annotated[Dict[str, Any], Depends(get_current_user_payload)]
) -> str:
    return payload["sub"]


async def get_current_caller(
    payload: Annotated[Dict[str, Any], Depends(get_current_user_payload)],
    user_repository: Annotated[SQLAlchemyUserRepository, Depends(get_user_repository)],
    cache: Annotated[EntityCache, Depends(get_entity_cache)]
) -> Caller:
    """
    Caller of the request with the role from their profile row.
    A verified user without a profile gets an employee profile on first use.
    """
    identity = AuthIdentity(
        user_id=payload["sub"],
        email=payload.get("email") or "",
        metadata=dict(payload.get("user_metadata") or {})
    )

    result = await EnsureProfileUseCase(user_repository, cache).execute(identity)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"message": result.error, "code": result.error_code}
        )

    user = result.data
    return Caller(user_id=user.id, role=user.role.value)


async def require_admin(
    caller: Annotated[Caller, Depends(get_current_caller)]
) -> Caller:
    """Gate for admin-only routes; employees are sent back to the board."""
    try:
        require(caller, None, View.BILLING)
    except AuthorizationError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"message": e.message, "redirect_to": e.redirect_to}
        )
    return caller
