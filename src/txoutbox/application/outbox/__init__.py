"""Application outbox – forwarding claimed batches to a transport."""
from txoutbox.application.outbox.forwarder import OutboxForwarder

__all__ = ["OutboxForwarder"]
