"""
JWT token handler for Supabase authentication.
Validates access tokens locally and extracts user information.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt as jose_jwt

from hourbook.config import get_settings
from hourbook.domain.models.base import AuthenticationError


class JWTHandler:
    """Handles JWT token validation and user extraction."""

    def __init__(self, jwt_secret: Optional[str] = None):
        self.settings = get_settings()
        self.jwt_secret = jwt_secret or self.settings.supabase_jwt_secret
        self.jwt_algorithm = "HS256"

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a Supabase JWT token.

        Raises:
            AuthenticationError: If token is invalid or expired
        """
        if token.startswith('Bearer '):
            token = token[7:]

        try:
            payload = jose_jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                options={"verify_exp": True, "verify_aud": False}
            )
        except JWTError as e:
            raise AuthenticationError(f"Invalid JWT token: {str(e)}")

        if 'sub' not in payload:
            raise AuthenticationError("Token missing user ID (sub claim)")

        if 'exp' not in payload:
            raise AuthenticationError("Token missing expiration (exp claim)")

        return payload

    def get_user_id(self, token: str) -> str:
        payload = self.verify_token(token)
        return payload['sub']

    def get_token_payload(self, token: str) -> Optional[Dict[str, Any]]:
        """Get full token payload, or None when the token does not verify."""
        try:
            return self.verify_token(token)
        except AuthenticationError:
            return None

    def generate_test_token(
        self,
        user_id: str,
        email: str = "test@example.com",
        full_name: Optional[str] = None,
        expires_minutes: int = 60
    ) -> str:
        """Generate a token shaped like a Supabase access token, for development and tests."""
        now = datetime.now(timezone.utc)
        expire = now + timedelta(minutes=expires_minutes)

        payload = {
            "sub": user_id,
            "email": email,
            "user_metadata": {"full_name": full_name} if full_name else {},
            "role": "authenticated",
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
            "aud": "authenticated",
            "iss": "supabase"
        }

        return jose_jwt.encode(
            payload,
            self.jwt_secret,
            algorithm=self.jwt_algorithm
        )
