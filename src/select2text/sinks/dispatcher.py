"""Delivery of finished export documents with a layered fallback chain.

File delivery is a single write that either succeeds or fails. Clipboard
delivery is attempted on a transient, size-limited medium and falls back in
order:

1. Content longer than the fallback threshold is retried once, truncated to
   the threshold with a marker appended.
2. The user is offered to save the full content to a file instead.

Content longer than the very-large threshold needs the user's confirmation
before the clipboard is touched at all; declining cancels the delivery.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from select2text.exceptions import CancelledByUser, Select2TextError, SinkError
from select2text.progress import ProgressCallback, ProgressReporter
from select2text.types import OutputFormat, PathType, SinkKind

from .base import SinkCapability

logger = logging.getLogger(__name__)

CLIPBOARD_FALLBACK_THRESHOLD = 1024 * 1024
VERY_LARGE_THRESHOLD = 10 * 1024 * 1024
CLIPBOARD_TRUNCATION_MARKER = "\n\n[... Content truncated for clipboard compatibility ...]"


class DeliveryOutcome(str, Enum):
    """Final state of one delivery.

    Values:
        SUCCESS: Delivered to the requested sink as-is
        SUCCESS_WITH_FALLBACK: Delivered, but truncated or to a fallback file
        FAILED: Not delivered; every fallback was exhausted or declined
        CANCELLED: The user chose not to proceed
    """

    SUCCESS = "success"
    SUCCESS_WITH_FALLBACK = "success_with_fallback"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class DeliveryReport:
    """Result of :meth:`SinkDispatcher.deliver`.

    Attributes:
        outcome: How the delivery ended.
        destination: File the content was written to, if any.
        message: Human-readable summary for the user.
        error: The underlying failure for FAILED outcomes.
        truncated: True if the delivered content was shortened.
    """

    outcome: DeliveryOutcome
    destination: Optional[PathType] = None
    message: str = ""
    error: Optional[Select2TextError] = None
    truncated: bool = False

    @property
    def succeeded(self) -> bool:
        return self.outcome in (DeliveryOutcome.SUCCESS, DeliveryOutcome.SUCCESS_WITH_FALLBACK)


def default_export_name(output_format: OutputFormat, today: Optional[date] = None) -> str:
    """Return the suggested file name for an export.

    Example:
        >>> default_export_name(OutputFormat.MARKDOWN, date(2024, 3, 9))
        'llm-context-export-2024-03-09.md'
    """
    today = today or date.today()
    return f"llm-context-export-{today.isoformat()}{output_format.file_extension}"


def describe_size(characters: int) -> str:
    """Describe a content length in MB with one decimal.

    Example:
        >>> describe_size(12 * 1024 * 1024 + 300 * 1024)
        '12.3MB'
    """
    return f"{characters / (1024 * 1024):.1f}MB"


class SinkDispatcher:
    """Orchestrates delivery of content through a :class:`SinkCapability`.

    The dispatcher never raises for delivery problems; every path through the
    fallback chain ends in a :class:`DeliveryReport`.

    Attributes:
        capability (SinkCapability): The primitives used to deliver content.
        output_format (OutputFormat): Format of the content, used for the
            suggested fallback file name.

    Example:
        >>> dispatcher = SinkDispatcher(LocalSinkCapability())  # doctest: +SKIP
        >>> report = asyncio.run(dispatcher.deliver(result.content, SinkKind.CLIPBOARD))  # doctest: +SKIP
        >>> report.outcome  # doctest: +SKIP
        <DeliveryOutcome.SUCCESS: 'success'>
    """

    def __init__(
        self,
        capability: SinkCapability,
        output_format: OutputFormat = OutputFormat.MARKDOWN,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        self.capability = capability
        self.output_format = output_format
        self.progress_callback = progress_callback

    async def deliver(
        self, content: str, sink: SinkKind, destination: Optional[PathType] = None
    ) -> DeliveryReport:
        """Deliver content to a file or to the clipboard-like primary medium.

        Args:
            content: The export document.
            sink: Where to deliver it.
            destination: Target file for the FILE sink. When omitted the user
                is prompted; declining cancels.

        Returns:
            DeliveryReport: The outcome of the delivery.
        """
        progress = ProgressReporter(self.progress_callback)
        try:
            if sink == SinkKind.FILE:
                report = await self._deliver_file(content, destination, progress)
            else:
                report = await self._deliver_clipboard(content, progress)
        except CancelledByUser as e:
            logger.info("Delivery cancelled: %s", e)
            report = DeliveryReport(DeliveryOutcome.CANCELLED, message=e.message)

        if report.outcome == DeliveryOutcome.FAILED:
            logger.error("%s", report.message)
        else:
            logger.info("Delivery finished: %s", report.outcome.value)
        progress.report(100, report.message)
        return report

    async def _deliver_file(
        self, content: str, destination: Optional[PathType], progress: ProgressReporter
    ) -> DeliveryReport:
        if destination is None:
            destination = await self.capability.prompt_destination(default_export_name(self.output_format))
            if destination is None:
                raise CancelledByUser()
        progress.report(50, "Writing file...")
        try:
            await self.capability.write_file(destination, content)
        except SinkError as e:
            return DeliveryReport(DeliveryOutcome.FAILED, message=e.message, error=e)
        return DeliveryReport(DeliveryOutcome.SUCCESS, destination=destination, message=f"Export saved to {destination}")

    async def _deliver_clipboard(self, content: str, progress: ProgressReporter) -> DeliveryReport:
        progress.report(0, "Preparing clipboard operation...")
        if len(content) > VERY_LARGE_THRESHOLD:
            if not await self.capability.confirm_large_content(describe_size(len(content))):
                raise CancelledByUser()

        progress.report(50, "Copying to clipboard...")
        try:
            await self.capability.write_primary(content)
            return DeliveryReport(DeliveryOutcome.SUCCESS, message="Content copied to clipboard successfully!")
        except SinkError as e:
            primary_error = e
        logger.warning("Primary clipboard operation failed: %s", primary_error)

        if len(content) > CLIPBOARD_FALLBACK_THRESHOLD:
            truncated = content[:CLIPBOARD_FALLBACK_THRESHOLD] + CLIPBOARD_TRUNCATION_MARKER
            try:
                await self.capability.write_primary(truncated)
                return DeliveryReport(
                    DeliveryOutcome.SUCCESS_WITH_FALLBACK,
                    message="Content was truncated and copied to clipboard due to size limitations.",
                    truncated=True,
                )
            except SinkError as e:
                logger.warning("Truncated clipboard retry failed: %s", e)

        progress.report(75, "Offering to save as file...")
        failure = f"Clipboard operation failed: {primary_error.message}"
        destination = await self.capability.prompt_destination(default_export_name(self.output_format))
        if destination is None:
            return DeliveryReport(DeliveryOutcome.FAILED, message=failure, error=primary_error)
        try:
            await self.capability.write_file(destination, content)
        except SinkError as e:
            return DeliveryReport(DeliveryOutcome.FAILED, message=f"{failure}; {e.message}", error=e)
        return DeliveryReport(
            DeliveryOutcome.SUCCESS_WITH_FALLBACK,
            destination=destination,
            message=f"Content saved to {destination}",
        )
