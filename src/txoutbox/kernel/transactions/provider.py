"""Kernel transactions – connection provider ports."""
from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

from txoutbox.kernel.transactions.context import TransactionContext


@runtime_checkable
class DbConnection(Protocol):
    """A database connection with one open transaction.

    Besides running statements, the outbox storage needs ``has_table`` and
    ``run_sync`` to bootstrap its table. ``run_sync`` calls *fn* with a
    synchronous SQLAlchemy ``Connection`` as first argument.
    """

    async def execute(self, statement: Any, parameters: Any = None) -> Any: ...

    async def has_table(self, name: str, schema: str | None = None) -> bool: ...

    async def run_sync(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any: ...

    async def complete(self) -> None:
        """Commit the transaction."""
        ...

    async def dispose(self) -> None:
        """Roll back unless completed, then close. Safe to call repeatedly."""
        ...


class ConnectionProvider(Protocol):
    """Port: hand out a connection bound to an explicit transaction context."""

    async def __call__(self, context: TransactionContext) -> DbConnection: ...


__all__ = ["ConnectionProvider", "DbConnection"]
