"""Unit tests for kernel messaging – messages, header codec, batch lifecycle."""

from __future__ import annotations

import asyncio

import pytest

from txoutbox.kernel.errors import BatchAlreadyResolvedError, SerializationError
from txoutbox.kernel.messaging import (
    BatchState,
    JsonHeaderSerializer,
    OutboxMessage,
    OutboxMessageBatch,
    OutgoingMessage,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _messages(n: int = 2) -> list[OutboxMessage]:
    return [OutboxMessage(id=i, destination_address=f"queue-{i}", headers={"n": str(i)}, body=bytes([i])) for i in range(1, n + 1)]


class _Recorder:
    def __init__(self, fail_on_complete: bool = False) -> None:
        self.calls: list[str] = []
        self._fail_on_complete = fail_on_complete

    async def complete(self) -> None:
        self.calls.append("complete")
        if self._fail_on_complete:
            raise RuntimeError("commit failed")

    async def dispose(self) -> None:
        self.calls.append("dispose")


# ---------------------------------------------------------------------------
# Message values
# ---------------------------------------------------------------------------


class TestMessages:
    def test_outgoing_defaults(self) -> None:
        msg = OutgoingMessage("orders")
        assert msg.headers == {}
        assert msg.body == b""

    def test_outgoing_is_frozen(self) -> None:
        msg = OutgoingMessage("orders")
        with pytest.raises((AttributeError, TypeError)):
            msg.destination_address = "other"  # type: ignore[misc]

    def test_outbox_message_equality(self) -> None:
        a = OutboxMessage(1, "q", {"k": "v"}, b"x")
        b = OutboxMessage(1, "q", {"k": "v"}, b"x")
        assert a == b


# ---------------------------------------------------------------------------
# JsonHeaderSerializer
# ---------------------------------------------------------------------------


class TestJsonHeaderSerializer:
    def test_round_trip(self) -> None:
        s = JsonHeaderSerializer()
        headers = {"rbs2-msg-id": "abc", "unicode": "æøå"}
        assert s.deserialize(s.serialize(headers)) == headers

    def test_serialize_is_compact(self) -> None:
        assert JsonHeaderSerializer().serialize({"k": "v"}) == '{"k":"v"}'

    def test_none_and_empty_decode_to_empty_mapping(self) -> None:
        s = JsonHeaderSerializer()
        assert s.deserialize(None) == {}
        assert s.deserialize("") == {}

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(SerializationError):
            JsonHeaderSerializer().deserialize("{not json")

    def test_non_object_raises(self) -> None:
        with pytest.raises(SerializationError):
            JsonHeaderSerializer().deserialize("[1, 2]")

    def test_non_string_values_rejected(self) -> None:
        with pytest.raises(SerializationError):
            JsonHeaderSerializer().serialize({"k": 1})  # type: ignore[dict-item]
        with pytest.raises(SerializationError):
            JsonHeaderSerializer().deserialize('{"k": 1}')


# ---------------------------------------------------------------------------
# OutboxMessageBatch
# ---------------------------------------------------------------------------


class TestOutboxMessageBatch:
    def test_behaves_as_sequence(self) -> None:
        batch = OutboxMessageBatch(None, _messages(3))
        assert len(batch) == 3
        assert batch[0].id == 1
        assert [m.id for m in batch] == [1, 2, 3]
        assert bool(batch) is True

    def test_complete_runs_complete_then_dispose(self) -> None:
        rec = _Recorder()
        batch = OutboxMessageBatch(rec.complete, _messages(), rec.dispose)
        asyncio.run(batch.complete())
        assert rec.calls == ["complete", "dispose"]
        assert batch.state is BatchState.COMPLETED

    def test_dispose_is_idempotent(self) -> None:
        rec = _Recorder()
        batch = OutboxMessageBatch(rec.complete, _messages(), rec.dispose)

        async def run() -> None:
            await batch.dispose()
            await batch.dispose()

        asyncio.run(run())
        assert rec.calls == ["dispose"]
        assert batch.state is BatchState.DISPOSED

    def test_dispose_after_complete_is_noop(self) -> None:
        rec = _Recorder()
        batch = OutboxMessageBatch(rec.complete, _messages(), rec.dispose)

        async def run() -> None:
            await batch.complete()
            await batch.dispose()

        asyncio.run(run())
        assert rec.calls == ["complete", "dispose"]

    def test_complete_after_dispose_raises(self) -> None:
        rec = _Recorder()
        batch = OutboxMessageBatch(rec.complete, _messages(), rec.dispose)

        async def run() -> None:
            await batch.dispose()
            with pytest.raises(BatchAlreadyResolvedError):
                await batch.complete()

        asyncio.run(run())
        assert rec.calls == ["dispose"]

    def test_complete_twice_raises(self) -> None:
        rec = _Recorder()
        batch = OutboxMessageBatch(rec.complete, _messages(), rec.dispose)

        async def run() -> None:
            await batch.complete()
            with pytest.raises(BatchAlreadyResolvedError):
                await batch.complete()

        asyncio.run(run())
        assert rec.calls == ["complete", "dispose"]

    def test_failed_complete_still_releases(self) -> None:
        rec = _Recorder(fail_on_complete=True)
        batch = OutboxMessageBatch(rec.complete, _messages(), rec.dispose)

        with pytest.raises(RuntimeError, match="commit failed"):
            asyncio.run(batch.complete())
        assert rec.calls == ["complete", "dispose"]
        assert batch.state is BatchState.DISPOSED

    def test_context_manager_disposes_on_exit(self) -> None:
        rec = _Recorder()

        async def run() -> None:
            async with OutboxMessageBatch(rec.complete, _messages(), rec.dispose) as batch:
                assert len(batch) == 2

        asyncio.run(run())
        assert rec.calls == ["dispose"]

    def test_context_manager_after_complete_does_not_dispose_twice(self) -> None:
        rec = _Recorder()

        async def run() -> None:
            async with OutboxMessageBatch(rec.complete, _messages(), rec.dispose) as batch:
                await batch.complete()

        asyncio.run(run())
        assert rec.calls == ["complete", "dispose"]


class TestEmptyBatch:
    def test_empty_has_no_messages(self) -> None:
        batch = OutboxMessageBatch.empty()
        assert len(batch) == 0
        assert not batch

    def test_complete_and_dispose_are_noops(self) -> None:
        async def run() -> None:
            batch = OutboxMessageBatch.empty()
            await batch.complete()
            await batch.dispose()
            await batch.complete()

        asyncio.run(run())

    def test_dispose_then_complete_is_noop(self) -> None:
        async def run() -> None:
            batch = OutboxMessageBatch.empty()
            await batch.dispose()
            await batch.complete()
            assert batch.state is BatchState.DISPOSED

        asyncio.run(run())

    def test_empty_with_dispose_action_runs_it_once(self) -> None:
        rec = _Recorder()

        async def run() -> None:
            batch = OutboxMessageBatch.empty(rec.dispose)
            await batch.complete()
            await batch.dispose()

        asyncio.run(run())
        assert rec.calls == ["dispose"]
