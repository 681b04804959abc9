"""Service layer for catalog access, state and ambient concerns."""

from .cancellation import CancellationToken
from .catalog import GameCatalog, GameCatalogClient, parse_games_response
from .config import ConfigurationService, ValidationResult
from .errors import (
    AppError,
    ConfigurationError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    NetworkError,
    ResponseParseError,
    UserFriendlyError,
    get_error_service,
    handle_error,
    status_fallback_message,
)
from .games_hook import GamesHook
from .http_client import HttpClientService

__all__ = [
    "AppError",
    "CancellationToken",
    "ConfigurationError",
    "ConfigurationService",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "GameCatalog",
    "GameCatalogClient",
    "GamesHook",
    "HttpClientService",
    "NetworkError",
    "ResponseParseError",
    "UserFriendlyError",
    "ValidationResult",
    "get_error_service",
    "handle_error",
    "parse_games_response",
    "status_fallback_message",
]
