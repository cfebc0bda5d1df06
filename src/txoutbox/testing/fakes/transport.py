"""Testing fakes – InMemoryTransport."""
from __future__ import annotations

import dataclasses

from txoutbox.kernel.messaging import Headers


@dataclasses.dataclass(frozen=True)
class SentMessage:
    destination_address: str
    headers: Headers
    body: bytes


class InMemoryTransport:
    """Records sent messages; can be told to fail for chosen destinations."""

    def __init__(self, failing_destinations: set[str] | None = None) -> None:
        self._sent: list[SentMessage] = []
        self.failing_destinations: set[str] = set(failing_destinations or ())

    async def send(self, destination_address: str, headers: Headers, body: bytes) -> None:
        if destination_address in self.failing_destinations:
            raise RuntimeError(f"destination {destination_address!r} is unreachable")
        self._sent.append(SentMessage(destination_address, dict(headers), body))

    @property
    def sent(self) -> list[SentMessage]:
        return list(self._sent)

    def clear(self) -> None:
        self._sent.clear()

    def to(self, destination_address: str) -> list[SentMessage]:
        return [m for m in self._sent if m.destination_address == destination_address]


__all__ = ["InMemoryTransport", "SentMessage"]
