"""Kernel messaging – outgoing/claimed message values and the transport port."""
from __future__ import annotations

import abc
import dataclasses
from typing import Protocol, TypeAlias

DestinationAddress: TypeAlias = str
Headers: TypeAlias = dict[str, str]


@dataclasses.dataclass(frozen=True)
class OutgoingMessage:
    """A message to be stored in the outbox and delivered later."""

    destination_address: DestinationAddress
    headers: Headers = dataclasses.field(default_factory=dict)
    body: bytes = b""


@dataclasses.dataclass(frozen=True)
class OutboxMessage:
    """A message claimed from the outbox, ready to be handed to a transport."""

    id: int
    destination_address: DestinationAddress
    headers: Headers = dataclasses.field(default_factory=dict)
    body: bytes = b""


class Transport(Protocol):
    """Port: deliver a single message to its destination."""

    async def send(self, destination_address: str, headers: Headers, body: bytes) -> None: ...


class OutboxDispatcher(abc.ABC):
    """Port: reads pending outbox messages and publishes them."""

    @abc.abstractmethod
    async def dispatch_pending(self) -> int: ...


__all__ = [
    "DestinationAddress",
    "Headers",
    "OutboxDispatcher",
    "OutboxMessage",
    "OutgoingMessage",
    "Transport",
]
