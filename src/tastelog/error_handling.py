"""
Standardized Error Handling for Tastelog

Provides the exception hierarchy and the fallback helpers used at module
boundaries.
"""

import logging
import re
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar

from pydantic import ValidationError

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Whole words that mark an uncoded store failure as temporary
TRANSIENT_PATTERN = re.compile(r"\b(connection|busy|lock|locked|timeout|timed out)\b")


class ErrorCodes:
    """Machine-readable RecordStoreError codes."""
    CONNECTION = "connection"
    BUSY = "busy"
    LOCKED = "locked"
    TIMEOUT = "timeout"
    READ_FAILED = "read_failed"
    WRITE_FAILED = "write_failed"

    TRANSIENT = (CONNECTION, BUSY, LOCKED, TIMEOUT)


class TasteLogError(Exception):
    """Base exception for Tastelog."""
    pass


class RecordStoreError(TasteLogError):
    """Record store failures (unreachable, unreadable, write errors)."""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class RecordNotFoundError(RecordStoreError):
    """No record exists with the requested id."""
    pass


class DataValidationError(TasteLogError):
    """Invalid record input."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value

    @classmethod
    def from_pydantic(cls, error: ValidationError) -> 'DataValidationError':
        """Collapse a pydantic ValidationError into one message."""
        errors = error.errors()
        messages = []
        for item in errors:
            location = ".".join(str(part) for part in item.get("loc", ())) or "record"
            messages.append(f"{location}: {item.get('msg')}")

        first = errors[0] if errors else {}
        loc = first.get("loc") or ()
        return cls(
            ", ".join(messages) or str(error),
            field=str(loc[0]) if loc else None,
            value=first.get("input"),
        )


def is_transient_store_error(error: BaseException) -> bool:
    """
    Decide whether a store failure is worth retrying.

    Connection drops and lock/busy conditions are retried; missing records and
    validation failures are not. A coded error is judged by its code alone;
    an uncoded one by whole words in its message.
    """
    if not isinstance(error, RecordStoreError) or isinstance(error, RecordNotFoundError):
        return False
    if error.code is not None:
        return error.code in ErrorCodes.TRANSIENT
    return TRANSIENT_PATTERN.search(str(error).lower()) is not None


def safe_async(
    fallback: Callable[[], T],
    error_message: str = "Operation failed"
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorator for coroutine functions that must never raise.

    Args:
        fallback: Factory for the value returned on error
        error_message: Error message to log

    Returns:
        Decorator producing a wrapped coroutine function
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.error(f"{error_message}: {type(e).__name__} - {e}")
                return fallback()

        return wrapper

    return decorator


__all__ = [
    'ErrorCodes',
    'TasteLogError',
    'RecordStoreError',
    'RecordNotFoundError',
    'DataValidationError',
    'is_transient_store_error',
    'safe_async',
]
