"""SQLAlchemy adapter – SqlAlchemyConnectionProvider and SqlAlchemyDbConnection."""
from __future__ import annotations

from typing import Any, Callable

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncTransaction, create_async_engine

from txoutbox.kernel.errors import ArgumentError
from txoutbox.kernel.transactions import TransactionContext
from txoutbox.observability.logging import get_logger

logger = get_logger(__name__)

CONNECTION_ITEM_KEY = "txoutbox.sqlalchemy.connection"


class SqlAlchemyDbConnection:
    """An ``AsyncConnection`` with one open transaction.

    :meth:`complete` commits; :meth:`dispose` rolls back whatever was not
    committed and closes the connection. Both may be called any number of
    times.
    """

    def __init__(self, connection: AsyncConnection, transaction: AsyncTransaction) -> None:
        self._connection = connection
        self._transaction = transaction
        self._completed = False
        self._disposed = False

    @property
    def connection(self) -> AsyncConnection:
        return self._connection

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def disposed(self) -> bool:
        return self._disposed

    async def execute(self, statement: Any, parameters: Any = None) -> Any:
        return await self._connection.execute(statement, parameters)

    async def run_sync(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return await self._connection.run_sync(fn, *args, **kwargs)

    async def has_table(self, name: str, schema: str | None = None) -> bool:
        return await self._connection.run_sync(lambda conn: inspect(conn).has_table(name, schema=schema))

    async def complete(self) -> None:
        if self._completed:
            return
        await self._transaction.commit()
        self._completed = True

    async def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        try:
            if self._transaction.is_active:
                await self._transaction.rollback()
        finally:
            await self._connection.close()

    async def __aenter__(self) -> "SqlAlchemyDbConnection":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.dispose()


class SqlAlchemyConnectionProvider:
    """Hands out transactional connections from an async engine.

    A context gets one connection, kept in ``context.items`` and returned
    again on every later call with the same context. The connection is
    enlisted in the context: completing the context commits it, disposing
    the context releases it, even when the caller lost track of the
    connection object::

        async with TransactionScope() as scope:
            connection = await provider(scope.transaction_context)
            await storage.save_using(messages, connection)
            await scope.complete()
    """

    def __init__(
        self,
        database_url: str | None = None,
        *,
        engine: AsyncEngine | None = None,
        **engine_kwargs: Any,
    ) -> None:
        if engine is None:
            if not database_url:
                raise ArgumentError("database_url", "Either database_url or engine is required")
            engine = create_async_engine(database_url, **engine_kwargs)
        self._engine = engine

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def __call__(self, context: TransactionContext) -> SqlAlchemyDbConnection:
        if context is None:
            raise ArgumentError("context", "A transaction context is required")
        current = context.items.get(CONNECTION_ITEM_KEY)
        if current is not None and not current.disposed:
            return current

        connection = await self._engine.connect()
        try:
            transaction = await connection.begin()
        except Exception:
            await connection.close()
            raise
        db_connection = SqlAlchemyDbConnection(connection, transaction)
        context.items[CONNECTION_ITEM_KEY] = db_connection

        async def commit(_: TransactionContext) -> None:
            if not db_connection.disposed:
                await db_connection.complete()

        async def release(_: TransactionContext) -> None:
            await db_connection.dispose()

        context.on_commit(commit)
        context.on_disposed(release)
        logger.debug("outbox.connection_opened", context_id=context.id)
        return db_connection

    async def dispose(self) -> None:
        await self._engine.dispose()


__all__ = ["CONNECTION_ITEM_KEY", "SqlAlchemyConnectionProvider", "SqlAlchemyDbConnection"]
