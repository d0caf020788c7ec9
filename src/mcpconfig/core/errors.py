"""
Unified error handling for mcpconfig.

Every error raised by the core carries an exit code so the CLI can map
failures consistently.

Exit Codes:
- 0: Success
- 10: Configuration error (missing path template, bad registry)
- 11: Client error (unknown client id)
- 12: Validation error
- 13: Storage / filesystem error
- 14: Distribution error (one or more clients failed)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Callable, TypeVar

import structlog

if TYPE_CHECKING:
    from mcpconfig.distribution.models import DistributionOutcome

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    CONFIG_ERROR = 10
    CLIENT_ERROR = 11
    VALIDATION_ERROR = 12
    STORAGE_ERROR = 13
    DISTRIBUTION_ERROR = 14
    UNKNOWN_ERROR = 127


class McpConfigError(Exception):
    """Base exception for mcpconfig errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ClientError(McpConfigError):
    """Raised when one or more client ids are not known to the registry."""

    exit_code = ExitCode.CLIENT_ERROR

    def __init__(self, message: str, client_ids: list[str] | str):
        if isinstance(client_ids, str):
            client_ids = [client_ids]
        super().__init__(message, {"client_ids": list(client_ids)})
        self.client_ids = list(client_ids)


class ConfigurationError(McpConfigError):
    """Raised when a client descriptor has no path for the current platform."""

    exit_code = ExitCode.CONFIG_ERROR

    def __init__(
        self,
        message: str,
        client_id: str | None = None,
        platform: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, {"client_id": client_id, "platform": platform, **(details or {})})
        self.client_id = client_id
        self.platform = platform


class MissingEnvironmentError(McpConfigError):
    """Raised when a required platform variable (HOME, APPDATA) is absent."""

    exit_code = ExitCode.CONFIG_ERROR

    def __init__(self, message: str, variable: str):
        super().__init__(message, {"variable": variable})
        self.variable = variable


class FileSystemError(McpConfigError):
    """Raised when reading, writing or creating a directory fails."""

    exit_code = ExitCode.STORAGE_ERROR

    def __init__(self, message: str, path: str, operation: str):
        super().__init__(message, {"path": path, "operation": operation})
        self.path = path
        self.operation = operation


class StorageError(McpConfigError):
    """Raised when a persisted document cannot be parsed."""

    exit_code = ExitCode.STORAGE_ERROR

    def __init__(self, message: str, path: str, storage_type: str):
        super().__init__(message, {"path": path, "storage_type": storage_type})
        self.path = path
        self.storage_type = storage_type


class ValidationError(McpConfigError):
    """Raised for empty or malformed keys."""

    exit_code = ExitCode.VALIDATION_ERROR

    def __init__(self, message: str, field: str, value: Any = None):
        super().__init__(message, {"field": field, "value": value})
        self.field = field
        self.value = value


class DistributionError(McpConfigError):
    """Raised after a distribution run in which at least one client failed.

    Carries every failing outcome, not just the first one.
    """

    exit_code = ExitCode.DISTRIBUTION_ERROR

    def __init__(self, failures: list[DistributionOutcome]):
        self.failures = failures
        self.client_ids = [outcome.client_id for outcome in failures]
        summary = "; ".join(f"{o.client_id}: {o.error}" for o in failures)
        super().__init__(
            f"Distribution failed for {len(failures)} client(s): {summary}",
            {"clients": self.client_ids},
        )


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI command functions that converts errors to exit codes.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog

    Usage:
        @main_with_error_handling()
        def my_command() -> int:
            return 0
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except McpConfigError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=e.exit_code,
                    )
                from mcpconfig.cli.ux import error as print_error

                print_error(format_error_message(e))
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130  # Standard exit code for SIGINT
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=ExitCode.UNKNOWN_ERROR,
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: McpConfigError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    details = {k: v for k, v in error.details.items() if v is not None}
    if details:
        detail_str = ", ".join(f"{k}={v}" for k, v in details.items())
        msg = f"{msg} ({detail_str})"
    return msg
