"""Kernel – framework-agnostic building blocks."""

from txoutbox.kernel.errors import (
    ApplicationError,
    ArgumentError,
    BaseError,
    BatchAlreadyResolvedError,
    InfrastructureError,
    SerializationError,
    TransactionContextError,
)

__all__ = [
    "ApplicationError",
    "ArgumentError",
    "BaseError",
    "BatchAlreadyResolvedError",
    "InfrastructureError",
    "SerializationError",
    "TransactionContextError",
]
