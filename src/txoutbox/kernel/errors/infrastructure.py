"""Infrastructure errors — failures outside the caller's control."""

from __future__ import annotations

from typing import Any

from txoutbox.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """I/O or codec failure that is not caused by invalid arguments."""

    default_code = "infrastructure_error"


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize message headers."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


__all__ = ["InfrastructureError", "SerializationError"]
