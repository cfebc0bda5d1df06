"""SQLAlchemy adapter – SqlAlchemyOutboxStorage.

Messages are staged in one table and claimed with::

    DELETE FROM outbox WHERE "Id" IN (
        SELECT "Id" FROM outbox [WHERE "CorrelationId" = :c]
        ORDER BY "Id" LIMIT :k FOR UPDATE SKIP LOCKED
    ) RETURNING "Id", "DestinationAddress", "Headers", "Body"

Concurrent claimers skip each other's locked rows instead of waiting, so they
never block and never return overlapping batches. The delete only becomes
permanent when the returned batch is completed.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import LargeBinary, String, Table, bindparam, delete, insert, select
from sqlalchemy.exc import SQLAlchemyError

from txoutbox.adapters.sqlalchemy.connection import SqlAlchemyConnectionProvider
from txoutbox.adapters.sqlalchemy.schema import ADDRESS_LENGTH, CORRELATION_ID_LENGTH, TableName, outbox_table
from txoutbox.config.settings import OutboxSettings
from txoutbox.kernel.errors import ArgumentError
from txoutbox.kernel.messaging import (
    HeaderSerializer,
    JsonHeaderSerializer,
    OutboxMessage,
    OutboxMessageBatch,
    OutboxStorage,
    OutgoingMessage,
)
from txoutbox.kernel.transactions import ConnectionProvider, TransactionScope
from txoutbox.observability.logging import get_logger

logger = get_logger(__name__)


def next_power_of_two(value: int) -> int:
    """Smallest power of two >= *value* (and >= 1)."""
    if value <= 1:
        return 1
    return 1 << (value - 1).bit_length()


def _check_length(argument: str, value: str | None, limit: int) -> None:
    if value is not None and len(value) > limit:
        raise ArgumentError(
            argument,
            f"{argument} is {len(value)} characters long, the limit is {limit}",
            detail={"length": len(value), "limit": limit},
        )


class SqlAlchemyOutboxStorage(OutboxStorage):
    """Outbox storage backed by a single SQL table (PostgreSQL dialect).

    Parameters
    ----------
    connection_provider:
        Async callable returning a transactional connection for a
        :class:`~txoutbox.kernel.transactions.TransactionContext`, usually a
        :class:`SqlAlchemyConnectionProvider`.
    table_name:
        ``TableName`` or a string accepted by :meth:`TableName.parse`.
    header_serializer:
        Codec for the ``Headers`` column; JSON by default.
    """

    def __init__(
        self,
        connection_provider: ConnectionProvider,
        table_name: TableName | str,
        header_serializer: HeaderSerializer | None = None,
    ) -> None:
        if connection_provider is None:
            raise ArgumentError("connection_provider", "A connection provider is required")
        if table_name is None:
            raise ArgumentError("table_name", "A table name is required")
        self._connection_provider = connection_provider
        self._table_name = table_name if isinstance(table_name, TableName) else TableName.parse(table_name)
        self._table: Table = outbox_table(self._table_name)
        self._header_serializer = header_serializer or JsonHeaderSerializer()
        self._initialized = False

    @classmethod
    def from_settings(cls, settings: OutboxSettings, **engine_kwargs: Any) -> "SqlAlchemyOutboxStorage":
        """Build a storage and its connection provider from :class:`OutboxSettings`."""
        provider = SqlAlchemyConnectionProvider(settings.database_url, echo=settings.echo_sql, **engine_kwargs)
        return cls(provider, settings.table_name)

    @property
    def table_name(self) -> TableName:
        return self._table_name

    @property
    def table(self) -> Table:
        return self._table

    # ------------------------------------------------------------------
    # Table bootstrap
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Create the outbox table unless it already exists.

        Tolerates another process creating the table at the same time: a
        failed ``CREATE TABLE`` is ignored when the table exists afterwards.
        """
        if self._initialized:
            return
        async with TransactionScope() as scope:
            connection = await self._connection_provider(scope.transaction_context)
            try:
                if await connection.has_table(self._table_name.name, schema=self._table_name.schema):
                    logger.debug("outbox.table_exists", table=str(self._table_name))
                    self._initialized = True
                    return
                try:
                    await connection.run_sync(self._table.create)
                    await connection.complete()
                except SQLAlchemyError as exc:
                    # the failed transaction must be gone before looking again
                    await connection.dispose()
                    if not await self._table_exists():
                        raise
                    logger.info("outbox.table_created_concurrently", table=str(self._table_name), error=repr(exc))
                else:
                    logger.info("outbox.table_created", table=str(self._table_name))
            finally:
                await connection.dispose()
            await scope.complete()
        self._initialized = True

    async def _table_exists(self) -> bool:
        async with TransactionScope() as scope:
            connection = await self._connection_provider(scope.transaction_context)
            try:
                return await connection.has_table(self._table_name.name, schema=self._table_name.schema)
            finally:
                await connection.dispose()

    # ------------------------------------------------------------------
    # Appender
    # ------------------------------------------------------------------

    async def save(
        self,
        outgoing_messages: Iterable[OutgoingMessage],
        message_id: str | None = None,
        source_queue: str | None = None,
        correlation_id: str | None = None,
    ) -> None:
        """Store *outgoing_messages* in a transaction of their own.

        An empty sequence is valid: it records that *message_id* was handled
        without producing anything to send.
        """
        if outgoing_messages is None:
            raise ArgumentError("outgoing_messages", "outgoing_messages must not be None")
        messages = self._validated(outgoing_messages, message_id, source_queue, correlation_id)

        async with TransactionScope() as scope:
            connection = await self._connection_provider(scope.transaction_context)
            try:
                await self._insert(connection, messages, message_id, source_queue, correlation_id)
                await connection.complete()
            finally:
                await connection.dispose()
            await scope.complete()

    async def save_using(self, outgoing_messages: Iterable[OutgoingMessage], connection: Any) -> None:
        """Store *outgoing_messages* on the caller's connection.

        *connection* is anything with an async ``execute`` (``AsyncConnection``,
        ``AsyncSession`` or a :class:`SqlAlchemyDbConnection`). Committing is
        left to the caller, which is what ties the messages to its business
        transaction.
        """
        if outgoing_messages is None:
            raise ArgumentError("outgoing_messages", "outgoing_messages must not be None")
        if connection is None:
            raise ArgumentError("connection", "connection must not be None")
        messages = self._validated(outgoing_messages)
        await self._insert(connection, messages)

    def _validated(
        self,
        outgoing_messages: Iterable[OutgoingMessage],
        message_id: str | None = None,
        source_queue: str | None = None,
        correlation_id: str | None = None,
    ) -> list[OutgoingMessage]:
        _check_length("correlation_id", correlation_id, CORRELATION_ID_LENGTH)
        _check_length("message_id", message_id, ADDRESS_LENGTH)
        _check_length("source_queue", source_queue, ADDRESS_LENGTH)
        messages = list(outgoing_messages)
        for message in messages:
            if not message.destination_address:
                raise ArgumentError("destination_address", "Every outgoing message needs a destination address")
            _check_length("destination_address", message.destination_address, ADDRESS_LENGTH)
        return messages

    async def _insert(
        self,
        executor: Any,
        messages: list[OutgoingMessage],
        message_id: str | None = None,
        source_queue: str | None = None,
        correlation_id: str | None = None,
    ) -> None:
        for message in messages:
            headers = self._header_serializer.serialize(message.headers)
            body = bytes(message.body)
            statement = self._insert_statement(
                headers_size=next_power_of_two(len(headers)),
                body_size=next_power_of_two(len(body)),
            )
            await executor.execute(
                statement,
                {
                    "correlation_id": correlation_id,
                    "message_id": message_id,
                    "source_queue": source_queue,
                    "destination_address": message.destination_address,
                    "headers": headers,
                    "body": body,
                },
            )
        if messages:
            logger.debug(
                "outbox.saved",
                table=str(self._table_name),
                count=len(messages),
                message_id=message_id,
                correlation_id=correlation_id,
            )

    def _insert_statement(self, *, headers_size: int, body_size: int) -> Any:
        # sizes are rounded up so that statements are reused across similar payloads
        return insert(self._table).values(
            CorrelationId=bindparam("correlation_id", type_=String(CORRELATION_ID_LENGTH)),
            MessageId=bindparam("message_id", type_=String(ADDRESS_LENGTH)),
            SourceQueue=bindparam("source_queue", type_=String(ADDRESS_LENGTH)),
            DestinationAddress=bindparam("destination_address", type_=String(ADDRESS_LENGTH)),
            Headers=bindparam("headers", type_=String(headers_size)),
            Body=bindparam("body", type_=LargeBinary(body_size)),
        )

    # ------------------------------------------------------------------
    # Batch claimer
    # ------------------------------------------------------------------

    async def get_next_message_batch(
        self,
        correlation_id: str | None = None,
        max_message_batch_size: int = 100,
    ) -> OutboxMessageBatch:
        """Claim up to *max_message_batch_size* of the oldest pending messages.

        The returned batch owns the claiming connection and transaction
        scope. Complete it to make the claim permanent; dispose it (or leave
        its ``async with`` block) to hand the messages back.
        """
        if max_message_batch_size <= 0:
            raise ArgumentError(
                "max_message_batch_size",
                f"Cannot retrieve {max_message_batch_size} messages - please pass in a value >= 1",
            )
        _check_length("correlation_id", correlation_id, CORRELATION_ID_LENGTH)

        # ownership of the scope and the connection passes to the batch
        scope = TransactionScope()
        try:
            connection = await self._connection_provider(scope.transaction_context)

            async def dispose() -> None:
                try:
                    await connection.dispose()
                finally:
                    await scope.dispose()

            try:
                messages = await self._claim(connection, max_message_batch_size, correlation_id)

                if not messages:
                    await dispose()
                    return OutboxMessageBatch.empty()

                async def complete() -> None:
                    await connection.complete()
                    await scope.complete()
                    logger.debug("outbox.batch_completed", table=str(self._table_name), count=len(messages))

                logger.debug(
                    "outbox.batch_claimed",
                    table=str(self._table_name),
                    count=len(messages),
                    correlation_id=correlation_id,
                )
                return OutboxMessageBatch(complete, messages, dispose)
            except BaseException:
                await connection.dispose()
                raise
        except BaseException:
            await scope.dispose()
            raise

    async def _claim(self, connection: Any, max_message_batch_size: int, correlation_id: str | None) -> list[OutboxMessage]:
        result = await connection.execute(self._claim_statement(max_message_batch_size, correlation_id))
        rows = sorted(result.all(), key=lambda row: row.Id)
        return [
            OutboxMessage(
                id=row.Id,
                destination_address=row.DestinationAddress,
                headers=self._header_serializer.deserialize(row.Headers),
                body=bytes(row.Body) if row.Body is not None else b"",
            )
            for row in rows
        ]

    def _claim_statement(self, max_message_batch_size: int, correlation_id: str | None) -> Any:
        t = self._table
        candidates = select(t.c.Id).order_by(t.c.Id.asc())
        if correlation_id is not None:
            candidates = candidates.where(
                t.c.CorrelationId == bindparam("correlation_id", correlation_id, type_=String(CORRELATION_ID_LENGTH))
            )
        candidates = candidates.limit(max_message_batch_size).with_for_update(skip_locked=True)
        return (
            delete(t)
            .where(t.c.Id.in_(candidates))
            .returning(t.c.Id, t.c.DestinationAddress, t.c.Headers, t.c.Body)
        )


__all__ = ["SqlAlchemyOutboxStorage", "next_power_of_two"]
