"""Application – dispatch loop built on the outbox storage port."""

from txoutbox.application.outbox import OutboxForwarder

__all__ = ["OutboxForwarder"]
