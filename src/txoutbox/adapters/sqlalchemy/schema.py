"""SQLAlchemy adapter – outbox table definition and TableName."""
from __future__ import annotations

import dataclasses

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    Identity,
    Integer,
    LargeBinary,
    MetaData,
    String,
    Table,
    Text,
    false,
)

from txoutbox.kernel.errors import ArgumentError

CORRELATION_ID_LENGTH = 16
ADDRESS_LENGTH = 255


@dataclasses.dataclass(frozen=True)
class TableName:
    """A table name, optionally qualified by a schema."""

    name: str
    schema: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ArgumentError("table_name", "Table name must not be empty")

    @classmethod
    def parse(cls, value: str) -> "TableName":
        """Parse ``table``, ``schema.table`` or ``"schema"."table"``."""
        parts = [part.strip().strip('"') for part in value.split(".")]
        if len(parts) == 1:
            return cls(parts[0])
        if len(parts) == 2:
            return cls(parts[1], parts[0] or None)
        raise ArgumentError("table_name", f"Cannot parse table name {value!r}")

    def __str__(self) -> str:
        if self.schema is None:
            return f'"{self.name}"'
        return f'"{self.schema}"."{self.name}"'


def outbox_table(table_name: TableName, metadata: MetaData | None = None) -> Table:
    """Return the Core ``Table`` for an outbox stored under *table_name*.

    ``Sent`` is part of the schema but is never read or written: claimed rows
    are deleted, not flagged.
    """
    return Table(
        table_name.name,
        metadata if metadata is not None else MetaData(),
        # SQLite only auto-assigns ids for an INTEGER PRIMARY KEY
        Column("Id", BigInteger().with_variant(Integer, "sqlite"), Identity(), primary_key=True),
        Column("CorrelationId", String(CORRELATION_ID_LENGTH), nullable=True),
        Column("MessageId", String(ADDRESS_LENGTH), nullable=True),
        Column("SourceQueue", String(ADDRESS_LENGTH), nullable=True),
        Column("DestinationAddress", String(ADDRESS_LENGTH), nullable=False),
        Column("Headers", Text, nullable=True),
        Column("Body", LargeBinary, nullable=True),
        Column("Sent", Boolean, nullable=False, server_default=false()),
        schema=table_name.schema,
    )


__all__ = ["ADDRESS_LENGTH", "CORRELATION_ID_LENGTH", "TableName", "outbox_table"]
