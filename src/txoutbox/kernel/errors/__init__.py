"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── ApplicationError             (application.py)
    │   ├── ArgumentError
    │   ├── BatchAlreadyResolvedError
    │   └── TransactionContextError
    └── InfrastructureError          (infrastructure.py)
        └── SerializationError

Database errors raised by SQLAlchemy are never wrapped; they reach the caller
unchanged.
"""

from txoutbox.kernel.errors.application import (
    ApplicationError,
    ArgumentError,
    BatchAlreadyResolvedError,
    TransactionContextError,
)
from txoutbox.kernel.errors.base import BaseError
from txoutbox.kernel.errors.infrastructure import InfrastructureError, SerializationError

__all__ = [
    "ApplicationError",
    "ArgumentError",
    "BaseError",
    "BatchAlreadyResolvedError",
    "InfrastructureError",
    "SerializationError",
    "TransactionContextError",
]
