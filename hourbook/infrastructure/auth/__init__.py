"""
Authentication infrastructure module.
Handles JWT validation, the Supabase identity provider and request dependencies.
"""

from .jwt_handler import JWTHandler
from .supabase_auth import SupabaseAuthService
from .dependencies import (
    get_access_token,
    get_current_user_id,
    get_current_user_payload,
    get_current_caller,
    get_identity_provider,
    require_admin,
)

__all__ = [
    "JWTHandler",
    "SupabaseAuthService",
    "get_access_token",
    "get_current_user_id",
    "get_current_user_payload",
    "get_current_caller",
    "get_identity_provider",
    "require_admin",
]
