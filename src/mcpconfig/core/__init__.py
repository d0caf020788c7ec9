"""Core modules for mcpconfig - centralized definitions and utilities."""

from mcpconfig.core.errors import (
    ClientError,
    ConfigurationError,
    DistributionError,
    ExitCode,
    FileSystemError,
    McpConfigError,
    MissingEnvironmentError,
    StorageError,
    ValidationError,
    format_error_message,
    main_with_error_handling,
)
from mcpconfig.core.scope import Scope

__all__ = [
    # Errors
    "ExitCode",
    "McpConfigError",
    "ClientError",
    "ConfigurationError",
    "DistributionError",
    "FileSystemError",
    "MissingEnvironmentError",
    "StorageError",
    "ValidationError",
    "main_with_error_handling",
    "format_error_message",
    # Scope
    "Scope",
]
