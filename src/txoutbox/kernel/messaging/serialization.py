"""Kernel messaging – header codec port and its JSON implementation."""
from __future__ import annotations

import abc
import json
from collections.abc import Mapping

from txoutbox.kernel.errors import SerializationError


class HeaderSerializer(abc.ABC):
    """Port: turn a header mapping into an opaque string and back."""

    @abc.abstractmethod
    def serialize(self, headers: Mapping[str, str]) -> str: ...

    @abc.abstractmethod
    def deserialize(self, data: str | None) -> dict[str, str]: ...


class JsonHeaderSerializer(HeaderSerializer):
    """Stores headers as a compact JSON object.

    ``None`` and the empty string both decode to an empty mapping, so rows
    written by other tools with a ``NULL`` ``Headers`` column still load.
    """

    def serialize(self, headers: Mapping[str, str]) -> str:
        for key, value in headers.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise SerializationError(
                    f"Header {key!r} must map a string to a string, got {type(value).__name__}",
                    payload_type="headers",
                )
        return json.dumps(dict(headers), ensure_ascii=False, separators=(",", ":"))

    def deserialize(self, data: str | None) -> dict[str, str]:
        if not data:
            return {}
        try:
            decoded = json.loads(data)
        except json.JSONDecodeError as exc:
            raise SerializationError("Headers are not valid JSON", payload_type="headers", cause=exc) from exc
        if not isinstance(decoded, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in decoded.items()
        ):
            raise SerializationError("Headers must be a JSON object of strings", payload_type="headers")
        return decoded


__all__ = ["HeaderSerializer", "JsonHeaderSerializer"]
