"""SQLAlchemy adapter – connection provider, outbox table and storage."""
from txoutbox.adapters.sqlalchemy.connection import (
    CONNECTION_ITEM_KEY,
    SqlAlchemyConnectionProvider,
    SqlAlchemyDbConnection,
)
from txoutbox.adapters.sqlalchemy.outbox import SqlAlchemyOutboxStorage, next_power_of_two
from txoutbox.adapters.sqlalchemy.schema import TableName, outbox_table

__all__ = [
    "CONNECTION_ITEM_KEY",
    "SqlAlchemyConnectionProvider",
    "SqlAlchemyDbConnection",
    "SqlAlchemyOutboxStorage",
    "TableName",
    "next_power_of_two",
    "outbox_table",
]
