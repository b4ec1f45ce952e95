"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, TypeVar, Generic, List
from dataclasses import dataclass
from datetime import datetime

from hourbook.domain.events.base import DomainEvent, publish_event
from hourbook.domain.models.base import (
    DomainException,
    ValidationError,
    BusinessRuleViolation,
    EntityNotFoundError,
    AuthorizationError,
    AuthenticationError,
    StoreError,
)
from hourbook.domain.services.access_policy import Caller, View, require

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')

GENERIC_ERROR_MESSAGE = "Er is een onverwachte fout opgetreden. Probeer het opnieuw."


@dataclass
class UseCaseResult(Generic[T]):
    """Result wrapper for use case operations."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def success_result(cls, data: T, metadata: Optional[Dict[str, Any]] = None) -> "UseCaseResult[T]":
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def error_result(
        cls,
        error: str,
        error_code: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "UseCaseResult[T]":
        """Create an error result."""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata
        )

    @classmethod
    def from_exception(cls, exc: Exception) -> "UseCaseResult[T]":
        """Create error result from exception."""
        if isinstance(exc, ValidationError):
            return cls.error_result(exc.message, "VALIDATION_ERROR", {"field": exc.field})
        elif isinstance(exc, AuthorizationError):
            return cls.error_result(exc.message, exc.code, {"redirect_to": exc.redirect_to})
        elif isinstance(exc, AuthenticationError):
            return cls.error_result(exc.message, exc.code, {"kind": exc.kind})
        elif isinstance(exc, DomainException):
            return cls.error_result(exc.message, exc.code)
        else:
            return cls.error_result(GENERIC_ERROR_MESSAGE, "UNKNOWN_ERROR")

    @property
    def redirect_to(self) -> Optional[str]:
        return (self.metadata or {}).get("redirect_to")


class BaseUseCase(ABC, Generic[T, R]):
    """
    Base class for all use cases.
    execute() never raises; every failure comes back as an error result.
    """

    def __init__(self):
        self.execution_start: Optional[datetime] = None
        self.execution_end: Optional[datetime] = None

    async def execute(self, request: T = None) -> UseCaseResult[R]:
        """
        Execute the use case with proper error handling and logging.
        """
        self.execution_start = datetime.utcnow()

        try:
            await self._validate_request(request)

            result = await self._execute_business_logic(request)

            self.execution_end = datetime.utcnow()
            execution_time = (self.execution_end - self.execution_start).total_seconds()

            return UseCaseResult.success_result(
                result,
                metadata={
                    "execution_time_seconds": execution_time,
                    "executed_at": self.execution_end.isoformat()
                }
            )

        except Exception as exc:
            self.execution_end = datetime.utcnow()
            execution_time = (self.execution_end - self.execution_start).total_seconds()

            self._log_failure(exc)

            error_result = UseCaseResult.from_exception(exc)
            error_result.metadata = {
                **(error_result.metadata or {}),
                "execution_time_seconds": execution_time,
                "failed_at": self.execution_end.isoformat(),
                "exception_type": type(exc).__name__
            }

            return error_result

    def _log_failure(self, exc: Exception) -> None:
        name = self.__class__.__name__
        if isinstance(exc, StoreError):
            logger.error(f"{name} failed on store operation '{exc.operation}': {exc.detail}")
        elif isinstance(exc, (AuthorizationError, AuthenticationError)):
            logger.info(f"{name} denied: {exc.message}")
        elif isinstance(exc, (ValidationError, BusinessRuleViolation, EntityNotFoundError)):
            logger.warning(f"{name} rejected: {exc.message}")
        else:
            logger.exception(f"{name} failed unexpectedly: {exc}")

    async def _validate_request(self, request: T) -> None:
        """
        Validate the request. Override in subclasses if needed.
        """
        if request is None:
            return
        if hasattr(request, 'model_validate'):
            # Pydantic models
            request.model_validate(request.model_dump())
        elif hasattr(request, 'validate'):
            request.validate()

    @abstractmethod
    async def _execute_business_logic(self, request: T) -> R:
        """
        Execute the core business logic. Must be implemented by subclasses.
        """
        pass


class QueryUseCase(BaseUseCase[T, R]):
    """
    Base class for query use cases (read operations).
    """
    pass


class CommandUseCase(BaseUseCase[T, R]):
    """
    Base class for command use cases (write operations).
    Events recorded during the command are published only after it succeeded.
    """

    def __init__(self):
        super().__init__()
        self.events: List[DomainEvent] = []

    async def _execute_business_logic(self, request: T) -> R:
        self.events = []
        result = await self._execute_command_logic(request)
        await self._publish_events()
        return result

    @abstractmethod
    async def _execute_command_logic(self, request: T) -> R:
        """Execute the command logic. Must be implemented by subclasses."""
        pass

    def _record_event(self, event: DomainEvent) -> None:
        self.events.append(event)

    async def _publish_events(self) -> None:
        """Publish collected domain events."""
        for event in self.events:
            await publish_event(event)
        self.events.clear()


class CreateUseCase(CommandUseCase[T, R]):
    """Base class for entity creation use cases."""
    pass


class UpdateUseCase(CommandUseCase[T, R]):
    """Base class for entity update use cases."""
    pass


class DeleteUseCase(CommandUseCase[T, R]):
    """Base class for entity deletion use cases."""
    pass


# Authorization mixin
class AuthorizedUseCase(BaseUseCase[T, R]):
    """
    Mixin for use cases that require an authenticated caller.
    """

    def __init__(self):
        super().__init__()
        self.caller: Optional[Caller] = None

    def set_caller(self, caller: Caller) -> "AuthorizedUseCase":
        """Set the current user context."""
        self.caller = caller
        return self

    @property
    def current_user_id(self) -> Optional[str]:
        return self.caller.user_id if self.caller else None

    async def _validate_request(self, request: T) -> None:
        """Validate request with authorization check."""
        if self.caller is None or not self.caller.user_id:
            raise AuthorizationError("Authenticatie vereist", redirect_to="/auth/login")

        await super()._validate_request(request)
        await self._check_authorization(request)

    async def _check_authorization(self, request: T) -> None:
        """Check if the current user is authorized. Override in subclasses."""
        pass

    def _require(self, view: View, owner_id: Optional[str] = None, write: bool = False) -> None:
        require(self.caller, owner_id, view, write=write)
