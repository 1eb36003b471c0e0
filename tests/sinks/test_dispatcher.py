import asyncio
from datetime import date

import pytest

from select2text.sinks import (
    CLIPBOARD_FALLBACK_THRESHOLD,
    CLIPBOARD_TRUNCATION_MARKER,
    VERY_LARGE_THRESHOLD,
    DeliveryOutcome,
    SinkDispatcher,
    default_export_name,
    describe_size,
)
from select2text.types import OutputFormat, SinkKind


def deliver(sink, content, kind=SinkKind.CLIPBOARD, destination=None, output_format=OutputFormat.MARKDOWN):
    progress = []
    dispatcher = SinkDispatcher(sink, output_format, lambda p, m: progress.append(p))
    report = asyncio.run(dispatcher.deliver(content, kind, destination))
    return report, progress


def test_clipboard_success(fake_sink):
    sink = fake_sink()
    report, progress = deliver(sink, "hello")
    assert report.outcome == DeliveryOutcome.SUCCESS
    assert report.succeeded
    assert not report.truncated
    assert sink.primary_writes == ["hello"]
    assert sink.confirmations == []
    assert progress[-1] == 100


def test_content_at_threshold_is_not_truncated(fake_sink):
    sink = fake_sink()
    content = "a" * CLIPBOARD_FALLBACK_THRESHOLD
    report, _ = deliver(sink, content)
    assert report.outcome == DeliveryOutcome.SUCCESS
    assert sink.primary_writes == [content]


def test_content_at_threshold_failing_skips_truncated_retry(fake_sink):
    sink = fake_sink(primary_results=[False])
    content = "a" * CLIPBOARD_FALLBACK_THRESHOLD
    report, _ = deliver(sink, content)
    assert sink.primary_writes == [content]
    assert sink.prompts == ["llm-context-export-%s.md" % date.today().isoformat()]
    assert report.outcome == DeliveryOutcome.SUCCESS_WITH_FALLBACK
    assert sink.file_writes == [("fallback.md", content)]


def test_one_over_threshold_retries_once_truncated(fake_sink):
    sink = fake_sink(primary_results=[False, True])
    content = "b" * (CLIPBOARD_FALLBACK_THRESHOLD + 1)
    report, _ = deliver(sink, content)
    assert len(sink.primary_writes) == 2
    assert sink.primary_writes[1] == "b" * CLIPBOARD_FALLBACK_THRESHOLD + CLIPBOARD_TRUNCATION_MARKER
    assert report.outcome == DeliveryOutcome.SUCCESS_WITH_FALLBACK
    assert report.truncated
    assert sink.prompts == []


def test_truncated_retry_failure_falls_back_to_file(fake_sink):
    sink = fake_sink(primary_results=[False, False])
    content = "c" * (CLIPBOARD_FALLBACK_THRESHOLD + 10)
    report, _ = deliver(sink, content)
    assert len(sink.primary_writes) == 2
    assert report.outcome == DeliveryOutcome.SUCCESS_WITH_FALLBACK
    assert report.destination == "fallback.md"
    assert not report.truncated
    # The fallback file gets the full content
    assert sink.file_writes == [("fallback.md", content)]


def test_declined_fallback_fails(fake_sink):
    sink = fake_sink(primary_results=[False], destination=None)
    report, progress = deliver(sink, "small")
    assert report.outcome == DeliveryOutcome.FAILED
    assert not report.succeeded
    assert report.message == "Clipboard operation failed: clipboard unavailable"
    assert report.error is not None
    assert sink.file_writes == []
    assert progress[-1] == 100


def test_failed_fallback_write_fails(fake_sink):
    sink = fake_sink(primary_results=[False], file_succeeds=False)
    report, _ = deliver(sink, "small")
    assert report.outcome == DeliveryOutcome.FAILED
    assert report.message == "Clipboard operation failed: clipboard unavailable; disk full"


def test_very_large_content_needs_confirmation(fake_sink):
    sink = fake_sink(confirm=False)
    content = "d" * (VERY_LARGE_THRESHOLD + 1)
    report, _ = deliver(sink, content)
    assert report.outcome == DeliveryOutcome.CANCELLED
    assert sink.confirmations == ["10.0MB"]
    assert sink.primary_writes == []


def test_very_large_content_confirmed(fake_sink):
    sink = fake_sink(confirm=True)
    report, _ = deliver(sink, "e" * (VERY_LARGE_THRESHOLD + 1))
    assert report.outcome == DeliveryOutcome.SUCCESS
    assert len(sink.primary_writes) == 1


def test_file_sink_with_destination(fake_sink, tmp_path):
    sink = fake_sink()
    target = tmp_path / "out.md"
    report, progress = deliver(sink, "doc", SinkKind.FILE, destination=target)
    assert report.outcome == DeliveryOutcome.SUCCESS
    assert report.destination == target
    assert sink.file_writes == [(str(target), "doc")]
    assert sink.prompts == []
    assert sink.primary_writes == []
    assert progress == [50.0, 100.0]


def test_file_sink_prompts_for_destination(fake_sink):
    sink = fake_sink(destination="chosen.txt")
    report, _ = deliver(sink, "doc", SinkKind.FILE, output_format=OutputFormat.PLAIN_TEXT)
    assert sink.prompts[0].endswith(".txt")
    assert report.destination == "chosen.txt"


def test_file_sink_declined_prompt_cancels(fake_sink):
    sink = fake_sink(destination=None)
    report, _ = deliver(sink, "doc", SinkKind.FILE)
    assert report.outcome == DeliveryOutcome.CANCELLED
    assert sink.file_writes == []


def test_file_sink_write_failure(fake_sink):
    sink = fake_sink(file_succeeds=False)
    report, _ = deliver(sink, "doc", SinkKind.FILE, destination="out.md")
    assert report.outcome == DeliveryOutcome.FAILED
    assert report.message == "disk full"


@pytest.mark.parametrize(
    "output_format,expected",
    [(OutputFormat.MARKDOWN, "llm-context-export-2024-12-31.md"), (OutputFormat.PLAIN_TEXT, "llm-context-export-2024-12-31.txt")],
)
def test_default_export_name(output_format, expected):
    assert default_export_name(output_format, date(2024, 12, 31)) == expected


def test_describe_size():
    assert describe_size(1024 * 1024) == "1.0MB"
    assert describe_size(512 * 1024) == "0.5MB"
