"""Export configuration, its validation boundary and calling-layer policies.

:func:`validate_export_configuration` is the strict boundary used by the core
engine: it never repairs a bad value. The preset, migration and summary helpers
below it are policies a calling layer may choose to apply on top.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Tuple, Union

from select2text.exceptions import ConfigurationError
from select2text.types import OutputFormat, PathType, SinkKind

logger = logging.getLogger(__name__)

KIB = 1024
MIB = 1024 * KIB

DEFAULT_MAX_FILE_BYTES = 1 * MIB
DEFAULT_TRUNCATE_THRESHOLD_BYTES = 10 * MIB

# Python field name -> accepted mapping keys, snake_case first
_FIELD_KEYS = {
    "format": ("format",),
    "sink": ("sink", "outputMethod", "output_method"),
    "include_structure": ("include_structure", "includeDirectoryStructure", "includeStructure"),
    "max_file_bytes": ("max_file_bytes", "maxFileSize", "maxFileBytes"),
    "truncate_threshold_bytes": ("truncate_threshold_bytes", "truncateThreshold", "truncateThresholdBytes"),
    "exclude_patterns": ("exclude_patterns", "excludePatterns"),
    "include_patterns": ("include_patterns", "includePatterns"),
}

_FORMAT_ALIASES = {
    "md": OutputFormat.MARKDOWN,
    "markdown": OutputFormat.MARKDOWN,
    "txt": OutputFormat.PLAIN_TEXT,
    "text": OutputFormat.PLAIN_TEXT,
}

_SINK_ALIASES = {
    "file": SinkKind.FILE,
    "clipboard": SinkKind.CLIPBOARD,
}


@dataclass(frozen=True)
class ExportConfiguration:
    """Settings for one export run.

    Instances are immutable. Build them directly, or from a mapping through
    :func:`validate_export_configuration`, which rejects invalid values.

    Attributes:
        format: Textual layout of the exported document.
        sink: Destination of the finished document.
        include_structure: Whether a directory structure block is emitted.
        max_file_bytes: Files larger than this many bytes are truncated.
        truncate_threshold_bytes: Carried for callers; reported in summaries.
        exclude_patterns: Globs; matching files are dropped.
        include_patterns: Globs; when non-empty, only matching files are kept.

    Example:
        >>> config = ExportConfiguration(OutputFormat.MARKDOWN, SinkKind.FILE)
        >>> config.max_file_bytes
        1048576
        >>> config.include_patterns
        ()
    """

    format: OutputFormat
    sink: SinkKind
    include_structure: bool = True
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    truncate_threshold_bytes: int = DEFAULT_TRUNCATE_THRESHOLD_BYTES
    exclude_patterns: Tuple[str, ...] = field(default_factory=tuple)
    include_patterns: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Return the configuration as a plain mapping using the camelCase wire keys."""
        return {
            "format": self.format.value,
            "outputMethod": self.sink.value,
            "includeDirectoryStructure": self.include_structure,
            "maxFileSize": self.max_file_bytes,
            "truncateThreshold": self.truncate_threshold_bytes,
            "excludePatterns": list(self.exclude_patterns),
            "includePatterns": list(self.include_patterns),
        }


ConfigurationInput = Union[ExportConfiguration, Mapping[str, Any]]


def _lookup(mapping: Mapping[str, Any], name: str) -> Tuple[bool, Any]:
    for key in _FIELD_KEYS[name]:
        if key in mapping:
            return True, mapping[key]
    return False, None


def _parse_enum(value: Any, enum_type: type, aliases: Mapping[str, Any]) -> Any:
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        return aliases.get(value)
    return None


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_pattern_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value)


def _as_mapping(config: ConfigurationInput) -> Mapping[str, Any]:
    if isinstance(config, ExportConfiguration):
        return {
            "format": config.format,
            "sink": config.sink,
            "include_structure": config.include_structure,
            "max_file_bytes": config.max_file_bytes,
            "truncate_threshold_bytes": config.truncate_threshold_bytes,
            "exclude_patterns": config.exclude_patterns,
            "include_patterns": config.include_patterns,
        }
    return config


def validate_export_configuration(config: ConfigurationInput) -> ExportConfiguration:
    """Validate a configuration and return it as an :class:`ExportConfiguration`.

    Every problem found is collected before raising, so a single error reports
    all of them. Nothing is coerced: an unknown format, a non-positive size or
    a pattern list that is not a list of strings is rejected.

    Args:
        config: An ExportConfiguration, or a mapping using camelCase or
            snake_case keys. ``format`` and ``sink`` (``outputMethod``) are
            required; everything else defaults.

    Returns:
        ExportConfiguration: The validated configuration.

    Raises:
        ConfigurationError: If any field is invalid.

    Example:
        >>> validate_export_configuration({"format": "md", "outputMethod": "clipboard"}).sink
        <SinkKind.CLIPBOARD: 'clipboard'>
        >>> validate_export_configuration({"format": "pdf", "sink": "file", "maxFileSize": 0})
        Traceback (most recent call last):
            ...
        select2text.exceptions.ConfigurationError: Configuration validation failed: \
format must be one of: md, txt, max_file_bytes must be a positive integer
    """
    if not isinstance(config, (ExportConfiguration, Mapping)):
        raise ConfigurationError([f"configuration must be a mapping, got {type(config).__name__}"])

    mapping = _as_mapping(config)
    problems: List[str] = []
    values: Dict[str, Any] = {}

    _, raw_format = _lookup(mapping, "format")
    values["format"] = _parse_enum(raw_format, OutputFormat, _FORMAT_ALIASES)
    if values["format"] is None:
        problems.append("format must be one of: md, txt")

    _, raw_sink = _lookup(mapping, "sink")
    values["sink"] = _parse_enum(raw_sink, SinkKind, _SINK_ALIASES)
    if values["sink"] is None:
        problems.append("sink must be one of: file, clipboard")

    present, include_structure = _lookup(mapping, "include_structure")
    if present:
        if isinstance(include_structure, bool):
            values["include_structure"] = include_structure
        else:
            problems.append("include_structure must be a boolean")

    for name in ("max_file_bytes", "truncate_threshold_bytes"):
        present, value = _lookup(mapping, name)
        if present:
            if _is_positive_int(value):
                values[name] = value
            else:
                problems.append(f"{name} must be a positive integer")

    for name in ("exclude_patterns", "include_patterns"):
        present, value = _lookup(mapping, name)
        if present:
            if _is_pattern_list(value):
                values[name] = tuple(value)
            else:
                problems.append(f"{name} must be a list of strings")

    if problems:
        raise ConfigurationError(problems)
    return ExportConfiguration(**values)


def at_any_depth(*patterns: str) -> Tuple[str, ...]:
    """Pair each glob with a ``**/`` form so it matches at the root and in subdirectories.

    Example:
        >>> at_any_depth("*.md")
        ('*.md', '**/*.md')
    """
    expanded: List[str] = []
    for pattern in patterns:
        expanded.extend((pattern, "**/" + pattern))
    return tuple(expanded)


def default_configuration() -> ExportConfiguration:
    """Return the configuration used when the caller supplies none."""
    return ExportConfiguration(
        format=OutputFormat.MARKDOWN,
        sink=SinkKind.FILE,
        include_structure=True,
        max_file_bytes=DEFAULT_MAX_FILE_BYTES,
        truncate_threshold_bytes=DEFAULT_TRUNCATE_THRESHOLD_BYTES,
        exclude_patterns=at_any_depth("node_modules/**", ".git/**", "dist/**", "build/**", "*.log"),
    )


PRESETS: Dict[str, ExportConfiguration] = {
    "minimal": ExportConfiguration(
        format=OutputFormat.PLAIN_TEXT,
        sink=SinkKind.FILE,
        include_structure=False,
        max_file_bytes=512 * KIB,
        truncate_threshold_bytes=5 * MIB,
        exclude_patterns=at_any_depth(
            "node_modules/**",
            ".git/**",
            "dist/**",
            "build/**",
            "out/**",
            "*.log",
            "*.map",
            "coverage/**",
            ".nyc_output/**",
        ),
        include_patterns=at_any_depth("*.ts", "*.js", "*.json", "*.md"),
    ),
    "comprehensive": ExportConfiguration(
        format=OutputFormat.MARKDOWN,
        sink=SinkKind.FILE,
        include_structure=True,
        max_file_bytes=2 * MIB,
        truncate_threshold_bytes=20 * MIB,
        exclude_patterns=at_any_depth("node_modules/**", ".git/**", "*.log"),
    ),
    "documentation": ExportConfiguration(
        format=OutputFormat.MARKDOWN,
        sink=SinkKind.FILE,
        include_structure=True,
        max_file_bytes=1 * MIB,
        truncate_threshold_bytes=10 * MIB,
        exclude_patterns=at_any_depth("node_modules/**", ".git/**", "dist/**", "build/**", "src/**", "lib/**"),
        include_patterns=at_any_depth("*.md", "*.txt", "*.rst", "README*", "CHANGELOG*", "LICENSE*"),
    ),
    "source-only": ExportConfiguration(
        format=OutputFormat.MARKDOWN,
        sink=SinkKind.FILE,
        include_structure=True,
        max_file_bytes=1 * MIB,
        truncate_threshold_bytes=15 * MIB,
        exclude_patterns=at_any_depth(
            "node_modules/**",
            ".git/**",
            "dist/**",
            "build/**",
            "out/**",
            "*.log",
            "*.map",
            "coverage/**",
            "docs/**",
            "*.md",
            "*.txt",
        ),
        include_patterns=at_any_depth(
            "*.ts",
            "*.js",
            "*.tsx",
            "*.jsx",
            "*.py",
            "*.java",
            "*.c",
            "*.cpp",
            "*.h",
            "*.hpp",
            "*.cs",
            "*.go",
            "*.rs",
            "*.php",
            "*.rb",
        ),
    ),
}


def get_preset(name: str) -> ExportConfiguration:
    """Look up a built-in preset by name.

    Raises:
        ConfigurationError: If no preset has that name.

    Example:
        >>> get_preset("minimal").format
        <OutputFormat.PLAIN_TEXT: 'txt'>
    """
    try:
        preset = PRESETS[name]
    except KeyError:
        raise ConfigurationError([f"unknown preset '{name}' (available: {', '.join(sorted(PRESETS))})"])
    logger.info("Loaded configuration preset %s", name)
    return preset


def migrate_configuration(config: Mapping[str, Any]) -> Dict[str, Any]:
    """Repair common invalid values in a configuration mapping.

    Invalid formats and sinks are reset to ``md`` and ``file``, non-positive
    sizes to their defaults, and pattern values that are not lists to empty
    lists. Each repair is logged at INFO. Missing keys stay missing.

    Returns:
        Dict[str, Any]: A new mapping; the input is left untouched.
    """
    migrated = dict(config)

    for key in _FIELD_KEYS["format"]:
        if key in migrated and _parse_enum(migrated[key], OutputFormat, _FORMAT_ALIASES) is None:
            logger.info("Migrating invalid format %r to 'md'", migrated[key])
            migrated[key] = OutputFormat.MARKDOWN.value

    for key in _FIELD_KEYS["sink"]:
        if key in migrated and _parse_enum(migrated[key], SinkKind, _SINK_ALIASES) is None:
            logger.info("Migrating invalid sink %r to 'file'", migrated[key])
            migrated[key] = SinkKind.FILE.value

    size_defaults = {
        "max_file_bytes": DEFAULT_MAX_FILE_BYTES,
        "truncate_threshold_bytes": DEFAULT_TRUNCATE_THRESHOLD_BYTES,
    }
    for name, default in size_defaults.items():
        for key in _FIELD_KEYS[name]:
            if key in migrated and not _is_positive_int(migrated[key]):
                logger.info("Migrating invalid %s %r to default", key, migrated[key])
                migrated[key] = default

    for name in ("exclude_patterns", "include_patterns"):
        for key in _FIELD_KEYS[name]:
            if key in migrated and not _is_pattern_list(migrated[key]):
                logger.info("Migrating invalid %s to empty list", key)
                migrated[key] = []

    return migrated


def validate_and_migrate(config: Mapping[str, Any]) -> ExportConfiguration:
    """Validate a mapping, repairing it if needed, and fall back to defaults.

    Example:
        >>> validate_and_migrate({"format": "pdf", "sink": "clipboard"}).format
        <OutputFormat.MARKDOWN: 'md'>
        >>> validate_and_migrate({}) == default_configuration()
        True
    """
    try:
        return validate_export_configuration(config)
    except ConfigurationError as e:
        logger.warning("Configuration validation failed, attempting migration: %s", e)

    try:
        return validate_export_configuration(migrate_configuration(config))
    except ConfigurationError as e:
        logger.warning("Configuration migration failed, using defaults: %s", e)
        return default_configuration()


def load_configuration_file(path: PathType) -> ExportConfiguration:
    """Load a stored configuration from a JSON file.

    The file holds a JSON object with the same camelCase or snake_case keys
    :func:`validate_export_configuration` accepts. Keys it leaves out take
    their default values, and invalid values are repaired as described in
    :func:`validate_and_migrate`.

    Raises:
        ConfigurationError: If the file cannot be read or does not hold a JSON object.
    """
    try:
        with open(path, encoding="utf-8") as f:
            stored = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError([f"cannot read configuration file {path}: {e}"])
    if not isinstance(stored, dict):
        raise ConfigurationError([f"configuration file {path} must hold a JSON object"])
    logger.info("Loaded configuration file %s", path)
    return validate_and_migrate({**default_configuration().to_dict(), **stored})


def with_overrides(config: ExportConfiguration, **changes: Any) -> ExportConfiguration:
    """Return a validated copy of ``config`` with some fields replaced.

    Raises:
        ConfigurationError: If the result is invalid.
    """
    return validate_export_configuration(replace(config, **changes))


def configuration_summary(config: ExportConfiguration) -> str:
    """Describe a configuration in one line.

    Example:
        >>> configuration_summary(get_preset("comprehensive"))
        'Format: MD, Output: File, Max file size: 2048 KB, Truncate threshold: 20 MB, \
Directory structure: Yes, Exclude patterns: 6'
    """
    parts = [
        f"Format: {config.format.value.upper()}",
        f"Output: {'Clipboard' if config.sink == SinkKind.CLIPBOARD else 'File'}",
        f"Max file size: {round(config.max_file_bytes / KIB)} KB",
        f"Truncate threshold: {round(config.truncate_threshold_bytes / MIB)} MB",
        f"Directory structure: {'Yes' if config.include_structure else 'No'}",
    ]
    if config.exclude_patterns:
        parts.append(f"Exclude patterns: {len(config.exclude_patterns)}")
    if config.include_patterns:
        parts.append(f"Include patterns: {len(config.include_patterns)}")
    return ", ".join(parts)
