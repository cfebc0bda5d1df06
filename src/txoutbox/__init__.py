"""
txoutbox – transactional outbox storage on SQL row locks.

Import path convention::

    from txoutbox.kernel.messaging import OutgoingMessage, OutboxMessageBatch
    from txoutbox.adapters.sqlalchemy import SqlAlchemyConnectionProvider, SqlAlchemyOutboxStorage
    from txoutbox.application.outbox import OutboxForwarder
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
