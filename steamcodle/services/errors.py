"""Error handling module for the Steamcodle application.

This module provides:
- Custom exception classes for the game's failure modes (network, upstream
  payloads, candidate exhaustion, daily limit, configuration)
- User-friendly error message generation with suggested actions
- A centralized error handling service used by the UI layer
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

log = structlog.stdlib.get_logger()

DAILY_LIMIT_MESSAGE = "Daily limit reached. Come back tomorrow."


class ErrorCategory(Enum):
    """Categories of errors for classification and handling."""
    NETWORK = "network"
    UPSTREAM = "upstream"
    SELECTION = "selection"
    DAILY_LIMIT = "daily_limit"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    STORAGE = "storage"
    UNEXPECTED = "unexpected"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class UserFriendlyError:
    """User-friendly error representation with suggested actions."""
    message: str
    category: ErrorCategory
    severity: ErrorSeverity
    suggested_actions: list[str]
    technical_details: str | None = None
    recoverable: bool = True


class AppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNEXPECTED,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        suggested_actions: list[str] | None = None,
        technical_details: str | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.suggested_actions = suggested_actions or []
        self.technical_details = technical_details
        self.recoverable = recoverable

    def to_user_friendly(self) -> UserFriendlyError:
        """Convert to user-friendly error representation."""
        return UserFriendlyError(
            message=self.message,
            category=self.category,
            severity=self.severity,
            suggested_actions=self.suggested_actions,
            technical_details=self.technical_details,
            recoverable=self.recoverable,
        )


class NetworkError(AppError):
    """Exception for transport failures and non-success HTTP statuses."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        suggested_actions = [
            "Check your internet connection",
            "Try again in a few moments",
        ]
        if status_code == 429:
            suggested_actions = [
                "Steam is rate limiting requests",
                "Wait a minute before starting a new game",
            ]
        elif status_code is not None and status_code >= 500:
            suggested_actions = [
                "The Steam store is experiencing issues",
                "Try again later",
            ]

        technical_details = None
        if original_error:
            technical_details = f"{type(original_error).__name__}: {original_error}"
        if url:
            technical_details = f"URL: {url}" + (f"\n{technical_details}" if technical_details else "")
        if status_code:
            technical_details = f"Status: {status_code}" + (f"\n{technical_details}" if technical_details else "")

        super().__init__(
            message=message,
            category=ErrorCategory.NETWORK,
            severity=ErrorSeverity.ERROR,
            suggested_actions=suggested_actions,
            technical_details=technical_details,
            recoverable=True,
        )
        self.original_error = original_error
        self.url = url
        self.status_code = status_code


class UpstreamError(AppError):
    """Exception for upstream payloads that fail envelope validation."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        app_id: int | None = None,
    ) -> None:
        technical_details = None
        if url:
            technical_details = f"URL: {url}"
        if app_id is not None:
            technical_details = (technical_details or "") + f"\nApp: {app_id}"

        super().__init__(
            message=message,
            category=ErrorCategory.UPSTREAM,
            severity=ErrorSeverity.WARNING,
            suggested_actions=[
                "The Steam store returned unexpected data",
                "Start a new game to try another title",
            ],
            technical_details=technical_details,
            recoverable=True,
        )
        self.url = url
        self.app_id = app_id


class NoEligibleTitlesError(AppError):
    """Raised when the selector exhausts its attempt budget without a match."""

    def __init__(self, message: str = "No eligible Steam games available at the moment.") -> None:
        super().__init__(
            message=message,
            category=ErrorCategory.SELECTION,
            severity=ErrorSeverity.ERROR,
            suggested_actions=["Start a new game to try again"],
            recoverable=True,
        )


class DailyLimitError(AppError):
    """Raised when the day-scoped cap has been reached."""

    def __init__(self, daily_cap: int | None = None) -> None:
        super().__init__(
            message=DAILY_LIMIT_MESSAGE,
            category=ErrorCategory.DAILY_LIMIT,
            severity=ErrorSeverity.WARNING,
            suggested_actions=["Come back after midnight UTC"],
            technical_details=f"Cap: {daily_cap}" if daily_cap is not None else None,
            recoverable=False,
        )
        self.daily_cap = daily_cap


class ValidationError(AppError):
    """Exception for validation-related errors."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        technical_details = None
        if field:
            technical_details = f"Field: {field}"
        if value is not None:
            technical_details = (technical_details or "") + f"\nValue: {str(value)[:100]}"

        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.WARNING,
            suggested_actions=["Review the input requirements"],
            technical_details=technical_details,
            recoverable=True,
        )
        self.field = field
        self.value = value


class ConfigurationError(AppError):
    """Exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        expected: str | None = None,
    ) -> None:
        suggested_actions = [
            "Check the configuration settings",
            "Reset to default values if needed",
        ]
        if expected:
            suggested_actions.append(f"Expected: {expected}")

        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            suggested_actions=suggested_actions,
            technical_details=f"Setting: {setting}" if setting else None,
            recoverable=False,
        )
        self.setting = setting
        self.expected = expected


class ErrorHandlingService:
    """Centralized error handling service.

    Converts arbitrary exceptions into user-friendly errors and logs the
    technical details.
    """

    def __init__(self) -> None:
        log.info("Error handling service initialized")

    def handle_error(
        self,
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any] | None = None,
    ) -> UserFriendlyError:
        """Handle an error and return a user-friendly representation.

        Args:
            error: The exception that occurred
            operation: The operation being performed
            component: The component where the error occurred
            context: Additional context information

        Returns:
            User-friendly error representation
        """
        app_error = self._convert_to_app_error(error, context)
        self._log_error(app_error, operation, component, context)
        return app_error.to_user_friendly()

    def _convert_to_app_error(
        self,
        error: Exception,
        context: dict[str, Any] | None,
    ) -> AppError:
        """Convert a standard exception to an AppError."""
        import httpx

        if isinstance(error, AppError):
            return error

        url = context.get("url") if context else None
        if isinstance(error, httpx.TimeoutException):
            return NetworkError(
                message="The request timed out. Steam may be slow or unavailable.",
                original_error=error,
                url=url,
            )
        if isinstance(error, httpx.HTTPStatusError):
            status_code = error.response.status_code
            return NetworkError(
                message=self._get_http_error_message(status_code),
                original_error=error,
                url=str(error.request.url) if error.request else url,
                status_code=status_code,
            )
        if isinstance(error, httpx.RequestError):
            return NetworkError(
                message="A network error occurred. Please check your connection.",
                original_error=error,
                url=url,
            )
        if isinstance(error, json.JSONDecodeError):
            return UpstreamError(message="Invalid JSON received. The data could not be parsed.", url=url)
        if isinstance(error, OSError):
            return AppError(
                message=f"Could not access local data: {error}",
                category=ErrorCategory.STORAGE,
                technical_details=f"{type(error).__name__}: {error}",
            )
        if isinstance(error, ValueError):
            return ValidationError(message=str(error), field=context.get("field") if context else None)

        return AppError(
            message="An unexpected error occurred. Please try again.",
            category=ErrorCategory.UNEXPECTED,
            severity=ErrorSeverity.ERROR,
            technical_details=f"{type(error).__name__}: {error}",
        )

    @staticmethod
    def _get_http_error_message(status_code: int) -> str:
        """Get a user-friendly message for HTTP status codes."""
        messages = {
            403: "Access denied by the Steam store.",
            404: "The requested Steam resource was not found.",
            429: "Too many requests. Please wait before trying again.",
            500: "The Steam store encountered an error. Please try again later.",
            502: "The game server could not reach Steam. Please try again later.",
            503: "The Steam store is temporarily unavailable. Please try again later.",
            504: "The Steam store took too long to respond. Please try again.",
        }
        return messages.get(status_code, f"HTTP error {status_code} occurred.")

    def _log_error(
        self,
        error: AppError,
        operation: str,
        component: str,
        context: dict[str, Any] | None,
    ) -> None:
        """Log error with full technical details."""
        log_method = log.warning if error.severity == ErrorSeverity.WARNING else log.error
        log_method(
            "Error occurred",
            error_message=error.message,
            category=error.category.value,
            severity=error.severity.value,
            operation=operation,
            component=component,
            technical_details=error.technical_details,
            recoverable=error.recoverable,
            context=context,
        )

    def create_user_message(
        self,
        error: UserFriendlyError,
        include_suggestions: bool = True,
    ) -> str:
        """Create a formatted user message from an error."""
        parts = [error.message]
        if include_suggestions and error.suggested_actions:
            parts.append("\nSuggested actions:")
            for action in error.suggested_actions[:3]:
                parts.append(f"  • {action}")
        return "\n".join(parts)


_error_service: ErrorHandlingService | None = None


def get_error_service() -> ErrorHandlingService:
    """Get the global error handling service instance."""
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
    """Convenience function to handle errors using the global service."""
    return get_error_service().handle_error(error, operation, component, context)
