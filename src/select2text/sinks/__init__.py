"""Sink capabilities and the delivery dispatcher."""

from .base import SinkCapability
from .dispatcher import (
    CLIPBOARD_FALLBACK_THRESHOLD,
    CLIPBOARD_TRUNCATION_MARKER,
    VERY_LARGE_THRESHOLD,
    DeliveryOutcome,
    DeliveryReport,
    SinkDispatcher,
    default_export_name,
    describe_size,
)
from .local import LocalSinkCapability

__all__ = [
    "CLIPBOARD_FALLBACK_THRESHOLD",
    "CLIPBOARD_TRUNCATION_MARKER",
    "DeliveryOutcome",
    "DeliveryReport",
    "LocalSinkCapability",
    "SinkCapability",
    "SinkDispatcher",
    "VERY_LARGE_THRESHOLD",
    "default_export_name",
    "describe_size",
]
