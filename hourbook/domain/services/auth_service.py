"""
Authentication service for user management.
Identity is delegated to an external provider; this module defines the port it must
implement and the rules applied before and after calling it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from hourbook.domain.models.base import AuthenticationError, ValidationError
from hourbook.domain.models.user import UserRole


MSG_ALREADY_REGISTERED = "Dit email adres is al geregistreerd"
MSG_INVALID_CREDENTIALS = "Ongeldige inloggegevens"
MSG_PASSWORD_TOO_SHORT = "Wachtwoord moet minimaal {length} karakters lang zijn"
MSG_PASSWORD_MISMATCH = "Wachtwoorden komen niet overeen"
MSG_INVALID_EMAIL = "Ongeldig email adres"
MSG_REQUIRED_FIELDS = "Email, wachtwoord en naam zijn verplicht"
MSG_GENERIC = "Er is een onverwachte fout opgetreden. Probeer het opnieuw."
MSG_SIGNUP_PENDING = (
    "Account aangemaakt! Controleer je email om je account te bevestigen en log daarna in."
)
MSG_SIGNUP_DONE = "Account succesvol aangemaakt! Je kunt nu inloggen."


@dataclass
class AuthIdentity:
    """Identity as reported by the provider."""

    user_id: str
    email: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    email_confirmed: bool = True


@dataclass
class AuthSession:
    identity: AuthIdentity
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


class IdentityProvider(ABC):
    """
    Identity provider interface.
    Implementations raise AuthenticationError with the provider's raw message;
    map_auth_error turns that into a user-facing one.
    """

    @abstractmethod
    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: Dict[str, Any]
    ) -> AuthIdentity:
        pass

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthSession:
        pass

    @abstractmethod
    async def sign_out(self, access_token: str) -> None:
        pass

    @abstractmethod
    async def get_user(self, access_token: str) -> Optional[AuthIdentity]:
        """Return the identity behind a token, or None when it is not valid."""
        pass

    @abstractmethod
    async def update_password(self, access_token: str, new_password: str) -> None:
        pass


def map_auth_error(raw_message: Optional[str], min_password_length: int = 6) -> AuthenticationError:
    """Translate a provider error message into a localized AuthenticationError."""
    text = (raw_message or "").lower()

    if "already registered" in text or "already been registered" in text or "already exists" in text:
        return AuthenticationError(MSG_ALREADY_REGISTERED, AuthenticationError.ALREADY_REGISTERED)

    if "invalid login credentials" in text or "invalid credentials" in text:
        return AuthenticationError(MSG_INVALID_CREDENTIALS, AuthenticationError.INVALID_CREDENTIALS)

    if "password" in text:
        return AuthenticationError(MSG_PASSWORD_TOO_SHORT.format(length=min_password_length))

    if "email" in text:
        return AuthenticationError(MSG_INVALID_EMAIL)

    return AuthenticationError(MSG_GENERIC)


def validate_password(
    password: Optional[str],
    confirmation: Optional[str] = None,
    min_length: int = 6,
    check_confirmation: bool = False
) -> str:
    """Validate a new password before it is sent to the provider."""
    if not password or len(password) < min_length:
        raise ValidationError(MSG_PASSWORD_TOO_SHORT.format(length=min_length), "password")
    if check_confirmation and password != confirmation:
        raise ValidationError(MSG_PASSWORD_MISMATCH, "confirm_password")
    return password


def validate_signup(
    email: Optional[str],
    password: Optional[str],
    full_name: Optional[str],
    role: Any = UserRole.EMPLOYEE,
    min_password_length: int = 6
) -> Dict[str, Any]:
    """Check sign-up input and return the metadata stored with the identity."""
    if not email or not password or not (full_name or "").strip():
        raise ValidationError(MSG_REQUIRED_FIELDS)
    if "@" not in email:
        raise ValidationError(MSG_INVALID_EMAIL, "email")
    validate_password(password, min_length=min_password_length)
    return {
        "full_name": full_name.strip(),
        "role": UserRole.parse(role or UserRole.EMPLOYEE).value,
    }
