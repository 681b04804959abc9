"""Error types and the central error service.

Failures that reach the user are classified into an ``AppError`` subclass.
The technical side (status codes, URLs, offending fields) goes to the log,
while the UI only shows the message and a few suggested actions.
"""

import json
import time
from collections import Counter, deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

import httpx
import structlog

log = structlog.stdlib.get_logger()


class ErrorCategory(Enum):
    """What part of the system an error came from."""
    NETWORK = "network"
    PARSE = "parse"
    CONFIGURATION = "configuration"
    UNEXPECTED = "unexpected"


class ErrorSeverity(Enum):
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def status_fallback_message(status_code: int) -> str:
    """Message for a non-2xx response whose body says nothing useful."""
    return f"Request failed with status code {status_code}"


@dataclass(frozen=True)
class UserFriendlyError:
    """What the UI is allowed to show about an error."""
    message: str
    category: ErrorCategory
    severity: ErrorSeverity
    suggested_actions: tuple[str, ...] = ()
    technical_details: str | None = None

    def format(self, include_suggestions: bool = True, max_suggestions: int = 3) -> str:
        """Render the message, optionally followed by suggested actions."""
        if not include_suggestions or not self.suggested_actions:
            return self.message
        lines = [self.message, "", "Suggested actions:"]
        lines.extend(f"  • {action}" for action in self.suggested_actions[:max_suggestions])
        return "\n".join(lines)


class AppError(Exception):
    """Base class for classified application errors.

    Subclasses set ``category`` and ``default_actions``. Anything passed in
    ``details`` is rendered into ``technical_details`` for the log.
    """

    category: ClassVar[ErrorCategory] = ErrorCategory.UNEXPECTED
    default_actions: ClassVar[tuple[str, ...]] = ("Try again",)

    def __init__(
        self,
        message: str,
        *,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        suggested_actions: tuple[str, ...] | None = None,
        details: dict[str, Any] | None = None,
        operation: str | None = None,
        component: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.suggested_actions = suggested_actions if suggested_actions is not None else self.default_actions
        self.details: dict[str, Any] = {k: v for k, v in (details or {}).items() if v is not None}
        self.operation = operation
        self.component = component

    @property
    def technical_details(self) -> str | None:
        if not self.details:
            return None
        return "\n".join(f"{key}: {value}" for key, value in self.details.items())

    def to_user_friendly(self) -> UserFriendlyError:
        return UserFriendlyError(
            message=self.message,
            category=self.category,
            severity=self.severity,
            suggested_actions=tuple(self.suggested_actions),
            technical_details=self.technical_details,
        )


def _describe(error: BaseException | None) -> str | None:
    return f"{type(error).__name__}: {error}" if error is not None else None


class NetworkError(AppError):
    """The catalog could not be reached, or answered with an error status."""

    category = ErrorCategory.NETWORK
    default_actions = (
        "Check your internet connection",
        "Verify the API base URL in the configuration",
        "Try again in a few moments",
    )

    _STATUS_ACTIONS: ClassVar[dict[int, tuple[str, ...]]] = {
        401: ("Check that the API key is set and valid",),
        403: ("Check that the API key is set and valid",),
        404: ("The resource path may be wrong", "Check the games_path setting"),
    }

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            message,
            suggested_actions=self._actions_for(status_code),
            details={"Status": status_code, "URL": url, "Cause": _describe(cause)},
        )
        self.url = url
        self.status_code = status_code
        self.cause = cause

    @classmethod
    def _actions_for(cls, status_code: int | None) -> tuple[str, ...] | None:
        if status_code is None:
            return None
        if status_code >= 500:
            return ("The catalog server is experiencing issues", "Try again later")
        return cls._STATUS_ACTIONS.get(status_code)


class ResponseParseError(AppError):
    """A response body does not have the expected shape."""

    category = ErrorCategory.PARSE
    default_actions = (
        "The catalog API may have changed its response format",
        "Check that the base URL points at a compatible API",
    )

    def __init__(self, message: str, *, field: str | None = None, value: Any = None) -> None:
        super().__init__(
            message,
            details={"Field": field, "Value": repr(value)[:100] if value is not None else None},
        )
        self.field = field
        self.value = value


class ConfigurationError(AppError):
    """The effective configuration cannot be used."""

    category = ErrorCategory.CONFIGURATION
    default_actions = (
        "Check the configuration file and command-line options",
        "Remove the configuration file to go back to defaults",
    )

    def __init__(
        self,
        message: str,
        *,
        setting: str | None = None,
        current_value: Any = None,
        expected: str | None = None,
    ) -> None:
        actions = self.default_actions + ((f"Expected: {expected}",) if expected else ())
        super().__init__(
            message,
            suggested_actions=actions,
            details={"Setting": setting, "Current": current_value},
        )
        self.setting = setting
        self.current_value = current_value
        self.expected = expected


class ErrorHandlingService:
    """Classifies, logs and remembers errors."""

    def __init__(self, history_size: int = 100) -> None:
        """Initialize the error handling service.

        Args:
            history_size: Number of errors kept for ``get_recent_errors``
        """
        self._history: deque[tuple[float, AppError]] = deque(maxlen=history_size)

    def handle_error(
        self,
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any] | None = None,
    ) -> UserFriendlyError:
        """Classify and log an error, returning what the user may see.

        Args:
            error: The exception that occurred
            operation: The operation being performed
            component: The component where the error occurred
            context: Additional context; a ``url`` key is attached to network errors

        Returns:
            User-friendly error representation
        """
        app_error = self.convert_to_app_error(error, operation, component, context)

        log_method = log.warning if app_error.severity is ErrorSeverity.WARNING else log.error
        log_method(
            "Error occurred",
            error_message=app_error.message,
            category=app_error.category.value,
            severity=app_error.severity.value,
            operation=operation,
            component=component,
            technical_details=app_error.technical_details,
            context=context,
        )

        self._history.append((time.time(), app_error))
        return app_error.to_user_friendly()

    def convert_to_app_error(
        self,
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any] | None = None,
    ) -> AppError:
        """Map an exception onto the ``AppError`` hierarchy."""
        if isinstance(error, AppError):
            return error

        url = (context or {}).get("url")

        if isinstance(error, httpx.HTTPStatusError):
            status_code = error.response.status_code
            return NetworkError(
                status_fallback_message(status_code),
                url=str(error.request.url),
                status_code=status_code,
                cause=error,
            )
        if isinstance(error, httpx.TimeoutException):
            return NetworkError("The catalog server did not answer in time.", url=url, cause=error)
        if isinstance(error, httpx.ConnectError):
            return NetworkError("Unable to connect to the catalog server.", url=url, cause=error)
        if isinstance(error, httpx.RequestError):
            return NetworkError("A network error occurred while contacting the catalog.", url=url, cause=error)
        if isinstance(error, json.JSONDecodeError):
            return ResponseParseError("The server response is not valid JSON.", field="body")

        return AppError(
            "An unexpected error occurred. Please try again.",
            details={"Error": _describe(error)},
            operation=operation,
            component=component,
        )

    def get_recent_errors(self, count: int = 10) -> list[AppError]:
        """Most recent errors, oldest first."""
        return [error for _, error in list(self._history)[-count:]]

    def count_by_category(self) -> dict[ErrorCategory, int]:
        return dict(Counter(error.category for _, error in self._history))


_error_service: ErrorHandlingService | None = None


def get_error_service() -> ErrorHandlingService:
    """Get the process-wide error handling service."""
    global _error_service
    if _error_service is None:
        _error_service = ErrorHandlingService()
    return _error_service


def handle_error(
    error: Exception,
    operation: str,
    component: str,
    context: dict[str, Any] | None = None,
) -> UserFriendlyError:
    """Shortcut for ``get_error_service().handle_error``."""
    return get_error_service().handle_error(error, operation, component, context)
