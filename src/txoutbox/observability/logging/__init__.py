"""Observability – structured logging helpers."""
from txoutbox.observability.logging.factory import JsonLoggerFactory
from txoutbox.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]
