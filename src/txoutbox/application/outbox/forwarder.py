"""Application outbox – OutboxForwarder."""
from __future__ import annotations

import asyncio
import contextlib

from txoutbox.config.settings import OutboxSettings
from txoutbox.kernel.errors import ArgumentError
from txoutbox.kernel.messaging import OutboxDispatcher, OutboxStorage, Transport
from txoutbox.observability.logging import get_logger

logger = get_logger(__name__)


class OutboxForwarder(OutboxDispatcher):
    """Moves messages from an outbox to a transport, one batch at a time.

    A batch is completed only when every message in it was sent. A failed
    send disposes the batch so that all of its messages, including the ones
    already sent, are claimed again later: delivery is at-least-once.
    """

    def __init__(
        self,
        storage: OutboxStorage,
        transport: Transport,
        *,
        batch_size: int = 100,
        correlation_id: str | None = None,
        poll_interval: float = 1.0,
    ) -> None:
        if batch_size <= 0:
            raise ArgumentError("batch_size", f"batch_size must be >= 1, got {batch_size}")
        if poll_interval <= 0:
            raise ArgumentError("poll_interval", f"poll_interval must be > 0, got {poll_interval}")
        self._storage = storage
        self._transport = transport
        self._batch_size = batch_size
        self._correlation_id = correlation_id
        self._poll_interval = poll_interval

    @classmethod
    def from_settings(
        cls,
        storage: OutboxStorage,
        transport: Transport,
        settings: OutboxSettings,
        *,
        correlation_id: str | None = None,
    ) -> "OutboxForwarder":
        """Build a forwarder polling with ``OUTBOX_BATCH_SIZE`` and ``OUTBOX_POLL_INTERVAL_SECONDS``."""
        return cls(
            storage,
            transport,
            batch_size=settings.batch_size,
            correlation_id=correlation_id,
            poll_interval=settings.poll_interval_seconds,
        )

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    async def dispatch_pending(self) -> int:
        """Send one batch; return how many messages were dispatched."""
        batch = await self._storage.get_next_message_batch(
            correlation_id=self._correlation_id,
            max_message_batch_size=self._batch_size,
        )
        async with batch:
            if not batch:
                return 0
            for message in batch:
                try:
                    await self._transport.send(message.destination_address, message.headers, message.body)
                except Exception as exc:
                    logger.warning(
                        "outbox.dispatch_failed",
                        message_id=message.id,
                        destination=message.destination_address,
                        batch_size=len(batch),
                        error=repr(exc),
                    )
                    raise
            await batch.complete()
            return len(batch)

    async def run(self, stop_event: asyncio.Event) -> None:
        """Forward batches until *stop_event* is set.

        Waits ``poll_interval`` seconds whenever the outbox was empty or a
        batch failed, and claims again immediately otherwise.
        """
        while not stop_event.is_set():
            try:
                dispatched = await self.dispatch_pending()
            except Exception:  # noqa: BLE001 – the batch was handed back, keep polling
                logger.exception("outbox.batch_disposed", correlation_id=self._correlation_id)
                dispatched = 0
            if dispatched == 0:
                with contextlib.suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(stop_event.wait(), timeout=self._poll_interval)
        logger.info("outbox.forwarder_stopped", correlation_id=self._correlation_id)


__all__ = ["OutboxForwarder"]
