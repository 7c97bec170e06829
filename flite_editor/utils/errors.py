# Error types and result signals
"""
Two kinds of failure exist in the editor.

User input never raises. Curve and history operations answer with an
``EditResult``; anything but ``EditResult.OK`` means the edit was not applied
and the state is unchanged.

Storage and pixel-processing failures are exceptions derived from ``AppError``.
``handle_errors`` turns them into a logged fallback at the boundaries where a
failure should degrade instead of propagating (reading the edits file).
"""

import functools
import traceback
from typing import Any, Callable, Optional, TypeVar
from enum import Enum

from .logger import get_logger

logger = get_logger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


class EditResult(Enum):
    """Outcome of an interactive edit. Everything except OK is advisory."""
    OK = "ok"
    CURVE_FULL = "curve full"
    ENDPOINT_LOCKED = "cannot delete endpoint"
    DUPLICATE_X = "point already exists at this input level"
    NO_POINT = "no point at this position"
    NO_IMAGE = "no image selected"
    NOTHING_TO_UNDO = "nothing to undo"
    NOTHING_TO_REDO = "nothing to redo"
    CROSS_IMAGE = "history entry belongs to another image"

    @property
    def ok(self) -> bool:
        return self is EditResult.OK


class ErrorCategory(Enum):
    RECOVERABLE = "recoverable"
    USER_INPUT = "user_input"
    FILE_IO = "file_io"
    PROCESSING = "processing"
    CONFIGURATION = "configuration"


class AppError(Exception):
    """
    Base class for editor exceptions.

    Args:
        message: Technical description, used for logs.
        category: Where the failure came from.
        original_error: The low-level exception this one wraps, if any.
        user_message: Short text fit for a status bar. Defaults to ``message``.
    """

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.RECOVERABLE,
                 original_error: Optional[Exception] = None, user_message: Optional[str] = None):
        super().__init__(message)
        self.category = category
        self.original_error = original_error
        self.user_message = user_message or message

    def __str__(self) -> str:
        message = self.args[0]
        if self.original_error is None:
            return message
        return f"{message} (caused by: {type(self.original_error).__name__})"


class FileIOError(AppError):
    """Reading or writing an image or the edits file failed."""

    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        kwargs.setdefault('category', ErrorCategory.FILE_IO)
        super().__init__(message, **kwargs)
        self.file_path = file_path


class ProcessingError(AppError):
    """A pixel buffer could not be processed (wrong shape or dtype)."""

    def __init__(self, message: str, step: Optional[str] = None, **kwargs):
        kwargs.setdefault('category', ErrorCategory.PROCESSING)
        super().__init__(message, **kwargs)
        self.step = step


class ConfigurationError(AppError):
    """A value in ``config.settings`` is unusable."""

    def __init__(self, message: str, setting_name: Optional[str] = None, **kwargs):
        kwargs.setdefault('category', ErrorCategory.CONFIGURATION)
        super().__init__(message, **kwargs)
        self.setting_name = setting_name


def handle_errors(fallback_value: Any = None, category: ErrorCategory = ErrorCategory.RECOVERABLE,
                  log_level: str = "warning", reraise: bool = False,
                  user_message: Optional[str] = None) -> Callable[[F], F]:
    """
    Decorator that logs unexpected exceptions and returns a fallback.

    ``AppError`` subclasses always propagate unchanged.

    Args:
        fallback_value: Returned on failure. A callable is called to build it,
            so ``dict`` gives a fresh empty dict each time.
        category: Logged with the failure, and set on the wrapping error when reraising.
        log_level: Name of the logger method to use ('debug' ... 'exception').
        reraise: Raise an ``AppError`` wrapping the failure instead of returning the fallback.
        user_message: Status-bar text for the wrapping error.
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except AppError:
                raise
            except Exception as e:
                log = getattr(logger, log_level, logger.warning)
                log("%s error in %s.%s: %s", category.value, func.__module__, func.__qualname__, e)
                if log_level == "exception":
                    logger.debug("Traceback:\n%s", traceback.format_exc())

                if reraise:
                    raise AppError(str(e), category=category, original_error=e,
                                   user_message=user_message) from e
                return fallback_value() if callable(fallback_value) else fallback_value

        return wrapper  # type: ignore
    return decorator


def format_user_error(error, context: Optional[str] = None) -> str:
    """
    Short message for an EditResult or an exception.

    Args:
        error: An EditResult, an AppError, or any other exception.
        context: What was being done, e.g. "exporting IMG_0001.jpg".
    """
    if isinstance(error, EditResult):
        return error.value.capitalize()
    if isinstance(error, AppError):
        return error.user_message

    suffix = f" while {context}" if context else ""
    if isinstance(error, FileNotFoundError):
        return f"File not found{suffix}"
    if isinstance(error, PermissionError):
        return f"Permission denied{suffix}"
    if context:
        return f"Error {context}: {error}"
    return f"An error occurred: {error}"
