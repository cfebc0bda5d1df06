"""Kernel transactions – explicit transaction context, scope and provider ports."""
from txoutbox.kernel.transactions.context import ContextCallback, TransactionContext
from txoutbox.kernel.transactions.provider import ConnectionProvider, DbConnection
from txoutbox.kernel.transactions.scope import TransactionScope

__all__ = [
    "ConnectionProvider",
    "ContextCallback",
    "DbConnection",
    "TransactionContext",
    "TransactionScope",
]
