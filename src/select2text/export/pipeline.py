"""Export pipeline turning a list of selected paths into one formatted document.

The pipeline validates its configuration before any I/O, filters the selected
paths down to eligible text files, then reads them in fixed-size batches and
accumulates the formatted output in bounded chunks. Per-file read failures are
rendered inline and never abort the run.
"""

import logging
import posixpath
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from select2text.configuration import ConfigurationInput, ExportConfiguration, validate_export_configuration
from select2text.content_classifier import decode_file_content, is_binary_by_extension, language_hint
from select2text.exceptions import PathError, ReadError
from select2text.exclusion_rules.glob_rules import GlobExclusionRules
from select2text.export.chunked_buffer import ChunkedOutputBuffer
from select2text.export.structure import render_structure
from select2text.file_tree.tree_model import TreeModel
from select2text.host import Host, normalize_path
from select2text.output_strategies import get_strategy
from select2text.progress import ProgressCallback, ProgressReporter
from select2text.token_counter import TokenCounter
from select2text.types import NodeKind

logger = logging.getLogger(__name__)

BATCH_SIZE = 10
CHUNK_SIZE = 1024 * 1024
TRUNCATION_RATIO = 0.8
TRUNCATION_MARKER = "\n\n[... Content truncated due to size limit ...]"

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ExportResult:
    """The finished export document and its metadata.

    Attributes:
        content: The complete document text.
        total_files: Number of files read successfully.
        total_bytes: Combined size in bytes of those files before truncation.
        generated_at: Timestamp embedded in the header.
        truncated_files: Paths whose content was truncated, in export order.
        token_count: Approximate tokens in ``content``, None unless a tokenizer was requested.
    """

    content: str
    total_files: int
    total_bytes: int
    generated_at: datetime
    truncated_files: List[str] = field(default_factory=list)
    token_count: Optional[int] = None


def truncate_content(text: str, max_file_bytes: int) -> str:
    """Cut text to 80% of ``max_file_bytes`` UTF-8 bytes and append the truncation marker.

    A multi-byte character straddling the cut is dropped whole.

    Example:
        >>> truncate_content("abcdefghij", 5)
        'abcd\\n\\n[... Content truncated due to size limit ...]'
    """
    limit = int(max_file_bytes * TRUNCATION_RATIO)
    kept = text.encode("utf-8")[:limit].decode("utf-8", errors="ignore")
    return kept + TRUNCATION_MARKER


class ExportPipeline:
    """Generates export documents from selected paths read through a host.

    Attributes:
        host (Host): Supplies file metadata and bytes.
        tree_model (Optional[TreeModel]): When given, node kinds are taken from
            the tree instead of asking the host.
        tokenizer_model (Optional[str]): Model name for optional token counting.
        clock (Callable[[], datetime]): Source of the header timestamp.

    Example:
        >>> pipeline = ExportPipeline(host)  # doctest: +SKIP
        >>> result = asyncio.run(pipeline.generate_export(["src/main.ts"], config))  # doctest: +SKIP
        >>> result.total_files  # doctest: +SKIP
        1
    """

    def __init__(
        self,
        host: Host,
        tree_model: Optional[TreeModel] = None,
        tokenizer_model: Optional[str] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.host = host
        self.tree_model = tree_model
        self.tokenizer_model = tokenizer_model
        self.clock = clock or _utc_now

    async def generate_export(
        self,
        selected_paths: Sequence[str],
        configuration: ConfigurationInput,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> ExportResult:
        """Build the export document for ``selected_paths``.

        Args:
            selected_paths: Paths to export, relative to the host root. Files are
                processed in this order. Directories are skipped, never expanded.
            configuration: An ExportConfiguration or a mapping accepted by
                :func:`~select2text.configuration.validate_export_configuration`.
            progress_callback: Called with ``(percent, message)`` at each phase.
                Values never decrease and the last one is exactly 100.

        Returns:
            ExportResult: The document and its metadata.

        Raises:
            ConfigurationError: If the configuration is invalid. Raised before any I/O.
            TokenizerNotAvailableError: If a tokenizer was requested but tiktoken is missing.
        """
        config = validate_export_configuration(configuration)
        counter = TokenCounter(self.tokenizer_model) if self.tokenizer_model else None
        strategy = get_strategy(config.format)
        progress = ProgressReporter(progress_callback)
        buffer = ChunkedOutputBuffer(CHUNK_SIZE)

        def emit(fragment: str) -> None:
            buffer.append(fragment)
            if counter is not None:
                counter.count(fragment)

        eligible = await self.filter_eligible(selected_paths, config)
        logger.info("Exporting %d of %d selected paths", len(eligible), len(selected_paths))

        generated_at = self.clock()
        emit(strategy.format_header(generated_at))

        if config.include_structure:
            progress.report(10, "Generating directory structure...")
            emit(strategy.format_structure(render_structure(eligible)))

        total_files = 0
        total_bytes = 0
        truncated_files: List[str] = []
        for batch_start in range(0, len(eligible), BATCH_SIZE):
            batch = eligible[batch_start : batch_start + BATCH_SIZE]  # noqa: E203
            logger.debug("Processing batch of %d files starting at %d", len(batch), batch_start)
            for offset, path in enumerate(batch):
                index = batch_start + offset
                progress.report(20 + index / len(eligible) * 70, f"Processing {posixpath.basename(path)}...")
                try:
                    data = await self.host.read_file_bytes(path)
                except ReadError as e:
                    logger.warning("Error processing file %s: %s", path, e)
                    emit(strategy.format_error(path, str(e)))
                    continue
                except PathError as e:
                    logger.debug("Skipping %s: %s", path, e)
                    continue

                text = decode_file_content(data)
                if len(data) > config.max_file_bytes:
                    text = truncate_content(text, config.max_file_bytes)
                    truncated_files.append(path)
                    logger.debug("Truncated %s (%d bytes)", path, len(data))
                emit(strategy.format_file(path, text, language_hint(path)))
                total_files += 1
                total_bytes += len(data)

        emit(strategy.format_footer(total_files, total_bytes, truncated_files))

        progress.report(95, "Finalizing export...")
        content = buffer.getvalue()
        logger.debug("Assembled %d characters in %d chunks", len(content), buffer.chunk_count)
        progress.report(100, "Export complete!")
        logger.info("Export complete: %d files, %d bytes, %d truncated", total_files, total_bytes, len(truncated_files))

        return ExportResult(
            content=content,
            total_files=total_files,
            total_bytes=total_bytes,
            generated_at=generated_at,
            truncated_files=truncated_files,
            token_count=counter.get_total_tokens() if counter is not None else None,
        )

    async def filter_eligible(self, selected_paths: Sequence[str], config: ExportConfiguration) -> List[str]:
        """Reduce selected paths to the eligible files, preserving input order.

        Directories, binary files, paths matching an exclude pattern and, when
        include patterns are given, paths matching none of them are dropped.
        Paths that are invalid or can no longer be resolved are skipped.
        Repeated paths are kept once, at their first position.
        """
        rules = GlobExclusionRules(config.exclude_patterns, config.include_patterns)
        eligible: List[str] = []
        seen = set()
        for raw_path in selected_paths:
            try:
                path = normalize_path(raw_path)
                kind = await self._resolve_kind(path)
            except PathError as e:
                logger.debug("Could not process %s: %s", raw_path, e)
                continue

            if path in seen:
                continue
            seen.add(path)

            if kind == NodeKind.DIRECTORY:
                logger.debug("Skipping directory: %s", path)
                continue
            if is_binary_by_extension(path):
                logger.debug("Skipping binary file: %s", path)
                continue
            if rules.has_rules() and rules.exclude(path):
                logger.debug("Skipping %s by include/exclude patterns", path)
                continue
            eligible.append(path)
        return eligible

    async def _resolve_kind(self, path: str) -> NodeKind:
        if self.tree_model is not None:
            node = self.tree_model.find_by_path(path)
            if node is not None:
                return node.kind
        stat = await self.host.stat_path(path)
        return stat.kind
