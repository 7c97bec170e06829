# This file makes the 'utils' directory a Python package.

from .errors import (
    EditResult,
    AppError,
    FileIOError,
    ProcessingError,
    ConfigurationError,
    ErrorCategory,
    handle_errors,
    format_user_error,
)

from .history import EditHistory, HistoryEntry

__all__ = [
    # Errors
    'EditResult',
    'AppError',
    'FileIOError',
    'ProcessingError',
    'ConfigurationError',
    'ErrorCategory',
    'handle_errors',
    'format_user_error',
    # History
    'EditHistory',
    'HistoryEntry',
]
