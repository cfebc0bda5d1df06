"""Testing fakes – in-memory doubles for kernel ports."""
from txoutbox.testing.fakes.transport import InMemoryTransport, SentMessage

__all__ = ["InMemoryTransport", "SentMessage"]
