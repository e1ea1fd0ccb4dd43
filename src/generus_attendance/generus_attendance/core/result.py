from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Optional

from .enums import ErrorCode
from .exceptions import DomainError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Result:
    """Outcome of a mutating use case.

    Expected failures (not found, inactive, duplicate check-in, invalid input)
    travel back to the caller as values; only infrastructure errors are raised.
    """

    success: bool
    message: str
    data: Any = None
    error: Optional[ErrorCode] = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "Result":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, err: DomainError, data: Any = None) -> "Result":
        return cls(success=False, message=str(err), data=data, error=err.code)


def as_result(success_message: str) -> Callable:
    """Wrap a service method so its return value becomes ``Result.ok`` and any
    ``DomainError`` it raises becomes ``Result.fail``."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                data = fn(*args, **kwargs)
            except DomainError as e:
                logger.info("%s rejected: %s (%s)", fn.__qualname__, e, e.code.value)
                return Result.fail(e)
            return Result.ok(success_message, data=data)

        return wrapper

    return decorator
