"""Testing – doubles for writing tests against txoutbox."""
from txoutbox.testing.fakes import InMemoryTransport, SentMessage

__all__ = ["InMemoryTransport", "SentMessage"]
