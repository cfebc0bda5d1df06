"""Kernel transactions – TransactionScope."""
from __future__ import annotations

from typing import Any

from txoutbox.kernel.transactions.context import TransactionContext


class TransactionScope:
    """Owns one :class:`TransactionContext` for the duration of a unit of work.

    Completion is explicit: leaving an ``async with`` block disposes the
    context without completing it, so anything not explicitly committed with
    :meth:`complete` is rolled back::

        async with TransactionScope() as scope:
            connection = await provider(scope.transaction_context)
            ...
            await connection.complete()
            await scope.complete()
    """

    def __init__(self) -> None:
        self.transaction_context = TransactionContext()

    async def complete(self) -> None:
        await self.transaction_context.complete()

    async def dispose(self) -> None:
        await self.transaction_context.dispose()

    async def __aenter__(self) -> "TransactionScope":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.dispose()


__all__ = ["TransactionScope"]
