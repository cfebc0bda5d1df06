"""Config settings – OutboxSettings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from txoutbox.config.settings.base import Settings
from txoutbox.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class OutboxSettings(Settings):
    """Settings for the SQL outbox, read from ``OUTBOX_*`` variables."""

    _prefix: ClassVar[str] = "OUTBOX"

    database_url: str
    table_name: str = "outbox"
    batch_size: int = 100
    poll_interval_seconds: float = 1.0
    echo_sql: bool = False

    def _validate(self) -> None:
        if not self.table_name.strip():
            raise InvalidSettingValueError(self.env_var("table_name"), self.table_name, "must not be empty")
        if self.batch_size < 1:
            raise InvalidSettingValueError(self.env_var("batch_size"), self.batch_size, "must be >= 1")
        if self.poll_interval_seconds <= 0:
            raise InvalidSettingValueError(self.env_var("poll_interval_seconds"), self.poll_interval_seconds, "must be > 0")


__all__ = ["OutboxSettings"]
