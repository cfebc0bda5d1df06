"""Kernel transactions – TransactionContext."""
from __future__ import annotations

from typing import Any, Awaitable, Callable, TypeAlias
from uuid import uuid4

from txoutbox.kernel.errors import TransactionContextError

ContextCallback: TypeAlias = Callable[["TransactionContext"], Awaitable[None]]


class TransactionContext:
    """Explicit transaction context handed to every connection provider call.

    Resources enlisted in a context register callbacks: ``on_commit`` ones run
    when the context is completed, ``on_disposed`` ones when it is disposed.
    Both run at most once, in registration order.
    """

    def __init__(self) -> None:
        self.id = str(uuid4())
        self.items: dict[str, Any] = {}
        self._on_commit: list[ContextCallback] = []
        self._on_disposed: list[ContextCallback] = []
        self._completed = False
        self._disposed = False

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def disposed(self) -> bool:
        return self._disposed

    def on_commit(self, callback: ContextCallback) -> None:
        self._on_commit.append(callback)

    def on_disposed(self, callback: ContextCallback) -> None:
        self._on_disposed.append(callback)

    async def complete(self) -> None:
        if self._disposed:
            raise TransactionContextError(
                "Cannot complete a transaction context that has been disposed",
                detail={"context_id": self.id},
            )
        if self._completed:
            return
        self._completed = True
        callbacks, self._on_commit = self._on_commit, []
        for callback in callbacks:
            await callback(self)

    async def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        callbacks, self._on_disposed = self._on_disposed, []
        errors: list[BaseException] = []
        for callback in callbacks:
            try:
                await callback(self)
            except Exception as exc:  # noqa: BLE001 – every resource gets released
                errors.append(exc)
        if errors:
            raise errors[0]

    def __repr__(self) -> str:
        return f"TransactionContext(id={self.id!r}, completed={self._completed}, disposed={self._disposed})"


__all__ = ["ContextCallback", "TransactionContext"]
