"""Application-layer errors — misuse of the storage API."""

from __future__ import annotations

from typing import Any

from txoutbox.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """The caller used the library in a way it does not allow."""

    default_code = "application_error"


class ArgumentError(ApplicationError, ValueError):
    """An argument was missing or out of range.

    Raised synchronously, before any database round trip.
    """

    default_code = "invalid_argument"

    def __init__(self, argument: str, message: str, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.argument = argument
        self.detail.setdefault("argument", argument)


class BatchAlreadyResolvedError(ApplicationError):
    """``complete()`` was called on a batch that was already completed or disposed."""

    default_code = "batch_already_resolved"


class TransactionContextError(ApplicationError):
    """A transaction context was completed after it had been disposed."""

    default_code = "transaction_context_error"


__all__ = [
    "ApplicationError",
    "ArgumentError",
    "BatchAlreadyResolvedError",
    "TransactionContextError",
]
