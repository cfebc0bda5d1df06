"""Kernel messaging – message values, outbox port, batch, header codec."""
from txoutbox.kernel.messaging.message import (
    DestinationAddress,
    Headers,
    OutboxDispatcher,
    OutboxMessage,
    OutgoingMessage,
    Transport,
)
from txoutbox.kernel.messaging.outbox import (
    BatchAction,
    BatchState,
    OutboxMessageBatch,
    OutboxStorage,
)
from txoutbox.kernel.messaging.serialization import HeaderSerializer, JsonHeaderSerializer

__all__ = [
    "BatchAction",
    "BatchState",
    "DestinationAddress",
    "HeaderSerializer",
    "Headers",
    "JsonHeaderSerializer",
    "OutboxDispatcher",
    "OutboxMessage",
    "OutboxMessageBatch",
    "OutboxStorage",
    "OutgoingMessage",
    "Transport",
]
