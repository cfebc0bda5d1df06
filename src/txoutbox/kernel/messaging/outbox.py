"""Kernel messaging – outbox storage port and the claimed message batch."""
from __future__ import annotations

import abc
from collections.abc import Iterable, Iterator, Sequence
from enum import Enum
from typing import Any, Awaitable, Callable, TypeAlias, overload

from txoutbox.kernel.errors import BatchAlreadyResolvedError
from txoutbox.kernel.messaging.message import OutboxMessage, OutgoingMessage

BatchAction: TypeAlias = Callable[[], Awaitable[None]]


class BatchState(str, Enum):
    OPEN = "OPEN"
    COMPLETED = "COMPLETED"
    DISPOSED = "DISPOSED"


class OutboxMessageBatch(Sequence[OutboxMessage]):
    """Messages claimed from the outbox, bound to the claiming transaction.

    The batch exclusively owns the connection and transaction scope that
    performed the claim. Exactly one of two things ends its life:

    * :meth:`complete` commits the claim, so the messages count as dispatched,
      and releases the resources;
    * :meth:`dispose` releases the resources without committing, so the
      messages become claimable again.

    ``dispose`` is idempotent and is what ``async with`` runs on exit, which
    makes it safe to call from any cleanup path::

        async with await storage.get_next_message_batch() as batch:
            for message in batch:
                await transport.send(message.destination_address, message.headers, message.body)
            await batch.complete()
    """

    def __init__(
        self,
        complete: BatchAction | None,
        messages: Iterable[OutboxMessage],
        dispose: BatchAction | None = None,
    ) -> None:
        self._complete_action = complete
        self._dispose_action = dispose
        self._messages: tuple[OutboxMessage, ...] = tuple(messages)
        self._state = BatchState.OPEN

    @classmethod
    def empty(cls, dispose: BatchAction | None = None) -> "OutboxMessageBatch":
        """A batch with no messages whose ``complete`` only runs *dispose*."""
        return cls(None, (), dispose)

    @property
    def state(self) -> BatchState:
        return self._state

    @property
    def messages(self) -> tuple[OutboxMessage, ...]:
        return self._messages

    async def complete(self) -> None:
        """Commit the claim and release the connection and transaction scope."""
        if self._complete_action is None:
            # nothing was claimed: completing an empty batch is always a no-op
            if self._state is BatchState.OPEN:
                self._state = BatchState.COMPLETED
                await self._release()
            return
        if self._state is not BatchState.OPEN:
            raise BatchAlreadyResolvedError(
                f"Cannot complete a batch that is already {self._state.value.lower()}",
                detail={"messages": len(self._messages)},
            )
        try:
            await self._complete_action()
        except BaseException:
            self._state = BatchState.DISPOSED
            await self._release()
            raise
        self._state = BatchState.COMPLETED
        await self._release()

    async def dispose(self) -> None:
        """Release the resources; roll back unless :meth:`complete` succeeded."""
        if self._state is not BatchState.OPEN:
            return
        self._state = BatchState.DISPOSED
        await self._release()

    async def _release(self) -> None:
        action, self._dispose_action = self._dispose_action, None
        if action is not None:
            await action()

    async def __aenter__(self) -> "OutboxMessageBatch":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.dispose()

    @overload
    def __getitem__(self, index: int) -> OutboxMessage: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[OutboxMessage]: ...

    def __getitem__(self, index: int | slice) -> OutboxMessage | Sequence[OutboxMessage]:
        return self._messages[index]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[OutboxMessage]:
        return iter(self._messages)

    def __repr__(self) -> str:
        return f"OutboxMessageBatch(messages={len(self._messages)}, state={self._state.value})"


class OutboxStorage(abc.ABC):
    """Port: durable staging area for outgoing messages."""

    @abc.abstractmethod
    async def initialize(self) -> None: ...

    @abc.abstractmethod
    async def save(
        self,
        outgoing_messages: Iterable[OutgoingMessage],
        message_id: str | None = None,
        source_queue: str | None = None,
        correlation_id: str | None = None,
    ) -> None: ...

    @abc.abstractmethod
    async def save_using(self, outgoing_messages: Iterable[OutgoingMessage], connection: Any) -> None: ...

    @abc.abstractmethod
    async def get_next_message_batch(
        self,
        correlation_id: str | None = None,
        max_message_batch_size: int = 100,
    ) -> OutboxMessageBatch: ...


__all__ = [
    "BatchAction",
    "BatchState",
    "OutboxMessageBatch",
    "OutboxStorage",
]
