"""Orchestration of one interactive export session.

An :class:`ExportSession` owns the tree model, the selection set and the
collaborators needed to turn user intents (toggle a node, expand a directory,
run an export) into state changes and events for a presentation layer.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Set, Tuple

from select2text.configuration import ConfigurationInput, ExportConfiguration, validate_export_configuration
from select2text.exceptions import NoSelectionError, PathError, ReadError
from select2text.exclusion_rules.base_rules import BaseExclusionRules
from select2text.export.pipeline import Clock, ExportPipeline, ExportResult
from select2text.file_tree.selection_engine import SelectionEngine
from select2text.file_tree.selection_set import SelectionSet
from select2text.file_tree.tree_model import TreeModel
from select2text.file_tree.tree_node import SelectionDelta
from select2text.host import Host, normalize_path
from select2text.progress import ProgressCallback
from select2text.sinks.base import SinkCapability
from select2text.sinks.dispatcher import DeliveryReport, SinkDispatcher
from select2text.types import ROOT_PATH, PathType

logger = logging.getLogger(__name__)

DELIVERY_PROGRESS_START = 95.0


@dataclass
class SessionListener:
    """Callables that receive session events. Any of them may be omitted.

    Attributes:
        selection_changed: Called as ``(path, selected, indeterminate)`` for every node whose state changed.
        progress: Called as ``(percent, message)`` during export and delivery. When the
            document is delivered, building it covers 0-95 and delivery 95-100.
        export_finished: Called as ``(result, report)`` once delivery has ended.
    """

    selection_changed: Optional[Callable[[str, bool, bool], None]] = None
    progress: Optional[Callable[[float, str], None]] = None
    export_finished: Optional[Callable[[ExportResult, DeliveryReport], None]] = None


class ExportSession:
    """Keeps a tree, its selection and the export collaborators together.

    Selection changes are applied synchronously and reported as deltas, both as
    return values and through the listener. Directory loads and exports await
    the host one request at a time.

    Attributes:
        host (Host): Supplies the file tree and file contents.
        capability (SinkCapability): Delivers finished exports.
        model (TreeModel): The lazily loaded tree.
        selection (SelectionSet): Selected file paths.
        listener (SessionListener): Receives events.

    Example:
        >>> session = ExportSession(LocalFileSystemHost("."), LocalSinkCapability())  # doctest: +SKIP
        >>> asyncio.run(session.open())  # doctest: +SKIP
        >>> session.toggle_selection("README.md", True)  # doctest: +SKIP
        [SelectionDelta(path='README.md', selected=True, indeterminate=False), ...]
    """

    def __init__(
        self,
        host: Host,
        capability: SinkCapability,
        exclusion_rules: Optional[BaseExclusionRules] = None,
        listener: Optional[SessionListener] = None,
        tokenizer_model: Optional[str] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.host = host
        self.capability = capability
        self.model = TreeModel(exclusion_rules)
        self.selection = SelectionSet()
        self.listener = listener or SessionListener()
        self.pipeline = ExportPipeline(host, self.model, tokenizer_model=tokenizer_model, clock=clock)

    @property
    def engine(self) -> SelectionEngine:
        return SelectionEngine(self.model)

    async def open(self) -> None:
        """Load the root listing and build a fresh tree."""
        entries = await self.host.list_children(ROOT_PATH)
        self.model.build_root(self.host.root_name, entries)
        logger.info("Opened %s with %d top-level entries", self.host.root_name, len(self.model) - 1)

    async def refresh(self) -> List[SelectionDelta]:
        """Rebuild the tree from the host and restore the selection.

        Directories that were expanded are expanded again, shallowest first,
        if they still exist. Remembered file selections and selected
        directories that had never been expanded are re-applied; paths that
        disappeared are dropped.

        Returns:
            List[SelectionDelta]: Selection changes made while restoring.
        """
        expanded = [node.path for node in self.model.iter_nodes() if node.is_dir and node.loaded]
        pending_dirs = list(self.model.iter_selected_unloaded_directories())

        await self.open()
        for path in sorted(expanded, key=lambda p: p.count("/")):
            if path != ROOT_PATH and path in self.model:
                await self._load_children(path)

        deltas = self.selection.restore_into(self.model)
        for path in pending_dirs:
            deltas.extend(self.engine.set_selected(path, True))
        self.selection.refresh_from(self.model)
        self._notify(deltas)
        logger.info("Refreshed tree, %d selected files restored", len(self.selection))
        return deltas

    def toggle_selection(self, path: str, selected: bool) -> List[SelectionDelta]:
        """Select or clear a node and everything loaded below it.

        Unknown paths are a no-op.
        """
        try:
            path = normalize_path(path)
        except PathError as e:
            logger.debug("Ignoring selection change: %s", e)
            return []
        return self._apply(self.engine.set_selected(path, selected))

    def select_all(self) -> List[SelectionDelta]:
        return self._apply(self.engine.select_all())

    def deselect_all(self) -> List[SelectionDelta]:
        return self._apply(self.engine.deselect_all())

    async def expand_directory(self, path: str) -> List[SelectionDelta]:
        """Load a directory's children if they have not been loaded yet.

        Unknown paths, files and already loaded directories are a no-op, as
        are directories the host can no longer list.
        """
        try:
            path = normalize_path(path)
        except PathError as e:
            logger.debug("Ignoring expand request: %s", e)
            return []
        node = self.model.find_by_path(path)
        if node is None or not node.is_dir or node.loaded:
            return []
        return await self._load_children(path)

    async def _load_children(self, path: str) -> List[SelectionDelta]:
        try:
            entries = await self.host.list_children(path)
        except PathError as e:
            logger.debug("Directory %s disappeared: %s", path, e)
            return []
        except ReadError as e:
            logger.warning("Could not list %s: %s", path, e)
            return []
        # The tree may have been rebuilt while the listing was in flight;
        # attach_children ignores paths it no longer holds
        return self._apply(self.model.attach_children(path, entries))

    async def collect_export_paths(self) -> List[str]:
        """Expand selected, never-loaded directories and list the selected files.

        Directories are loaded level by level until no selected directory is
        left unexpanded. Each directory is attempted at most once.

        Returns:
            List[str]: Selected file paths in tree order.
        """
        attempted: Set[str] = set()
        while True:
            pending = [path for path in self.model.iter_selected_unloaded_directories() if path not in attempted]
            if not pending:
                break
            for path in pending:
                attempted.add(path)
                await self._load_children(path)
        return list(self.model.iter_selected_files())

    async def select_path(self, path: str, selected: bool = True) -> List[SelectionDelta]:
        """Select or clear a path that may lie inside directories not loaded yet.

        Ancestors are expanded first. Paths the host does not report, or that
        the exclusion rules hide, are a no-op.
        """
        try:
            path = normalize_path(path)
        except PathError as e:
            logger.debug("Ignoring selection change: %s", e)
            return []
        segments = [] if path == ROOT_PATH else path.split("/")[:-1]
        for depth in range(1, len(segments) + 1):
            await self.expand_directory("/".join(segments[:depth]))
        if path not in self.model:
            logger.warning("Path not found or excluded: %s", path)
            return []
        return self.toggle_selection(path, selected)

    async def generate(self, configuration: ConfigurationInput) -> ExportResult:
        """Build the export document for the current selection without delivering it.

        Raises:
            ConfigurationError: If the configuration is invalid.
            NoSelectionError: If no file is selected.
        """
        return await self._generate(validate_export_configuration(configuration), self.listener.progress)

    async def _generate(self, config: ExportConfiguration, progress: Optional[ProgressCallback]) -> ExportResult:
        paths = await self.collect_export_paths()
        if not paths:
            raise NoSelectionError()
        return await self.pipeline.generate_export(paths, config, progress)

    async def run_export(
        self, configuration: ConfigurationInput, destination: Optional[PathType] = None
    ) -> Tuple[ExportResult, DeliveryReport]:
        """Export the current selection and deliver it.

        Args:
            configuration: Export settings; validated before anything is read.
            destination: Target file for file delivery. Prompted for when omitted.

        Returns:
            Tuple[ExportResult, DeliveryReport]: The document and how its delivery ended.

        Raises:
            ConfigurationError: If the configuration is invalid.
            NoSelectionError: If no file is selected.
        """
        config = validate_export_configuration(configuration)
        result = await self._generate(config, self._export_progress)

        dispatcher = SinkDispatcher(self.capability, config.format, self._delivery_progress)
        report = await dispatcher.deliver(result.content, config.sink, destination)
        if self.listener.export_finished is not None:
            self.listener.export_finished(result, report)
        return result, report

    def _export_progress(self, percent: float, message: str) -> None:
        if self.listener.progress is not None:
            self.listener.progress(percent * DELIVERY_PROGRESS_START / 100, message)

    def _delivery_progress(self, percent: float, message: str) -> None:
        if self.listener.progress is not None:
            self.listener.progress(DELIVERY_PROGRESS_START + percent * 0.05, message)

    def _apply(self, deltas: List[SelectionDelta]) -> List[SelectionDelta]:
        self.selection.apply(self.model, deltas)
        self._notify(deltas)
        return deltas

    def _notify(self, deltas: Iterable[SelectionDelta]) -> None:
        if self.listener.selection_changed is None:
            return
        for delta in deltas:
            self.listener.selection_changed(delta.path, delta.selected, delta.indeterminate)
