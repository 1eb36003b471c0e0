"""Export pipeline and its building blocks."""

from .chunked_buffer import ChunkedOutputBuffer
from .pipeline import (
    BATCH_SIZE,
    CHUNK_SIZE,
    TRUNCATION_MARKER,
    ExportPipeline,
    ExportResult,
    ProgressCallback,
    truncate_content,
)
from .structure import StructureNode, build_structure, render_structure

__all__ = [
    "BATCH_SIZE",
    "CHUNK_SIZE",
    "ChunkedOutputBuffer",
    "ExportPipeline",
    "ExportResult",
    "ProgressCallback",
    "StructureNode",
    "TRUNCATION_MARKER",
    "build_structure",
    "render_structure",
    "truncate_content",
]
