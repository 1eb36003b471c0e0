"""Command-line interface for select2text.

This module provides the command-line front end: it opens a directory through
the local filesystem host, selects the requested paths, runs the export
pipeline and delivers the document to stdout, a file or the clipboard.

Exit Codes:
    0: Successful completion, including delivery through a fallback
    1: Runtime error or failed delivery
    2: Command-line syntax error or invalid configuration
    130: Cancelled by the user or interrupted by SIGINT (Ctrl+C)

Example:
    # Export a whole project to stdout
    $ select2text /path/to/project

    # Copy two files to the clipboard
    $ select2text -c /path/to/project src/main.ts README.md
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from select2text.cli.argparser import create_parser, validate_args
from select2text.configuration import (
    ExportConfiguration,
    configuration_summary,
    default_configuration,
    get_preset,
    load_configuration_file,
    with_overrides,
)
from select2text.exceptions import (
    ConfigurationError,
    NoSelectionError,
    Select2TextError,
    TokenizerNotAvailableError,
)
from select2text.exclusion_rules.git_rules import default_noise_rules
from select2text.export.pipeline import ExportResult
from select2text.host import LocalFileSystemHost
from select2text.session import ExportSession, SessionListener
from select2text.sinks.dispatcher import DeliveryOutcome
from select2text.sinks.local import LocalSinkCapability
from select2text.types import ROOT_PATH, OutputFormat, SinkKind

logger = logging.getLogger("select2text")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_CANCELLED = 130


def setup_logging(verbosity: int) -> None:
    """Send log records to stderr at a level chosen by the number of -v flags."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s", stream=sys.stderr)


def build_configuration(args: argparse.Namespace) -> ExportConfiguration:
    """Combine the configuration file, preset or defaults with command-line overrides.

    The delivery target always comes from the command line.

    Raises:
        ConfigurationError: If the result is invalid.
    """
    if args.config is not None:
        base = load_configuration_file(args.config)
    elif args.preset:
        base = get_preset(args.preset)
    else:
        base = default_configuration()
    changes = {
        "sink": SinkKind.CLIPBOARD if args.clipboard else SinkKind.FILE,
        "exclude_patterns": base.exclude_patterns + tuple(args.exclude),
        "include_patterns": base.include_patterns + tuple(args.include),
    }
    if args.format:
        changes["format"] = OutputFormat(args.format)
    if args.no_structure:
        changes["include_structure"] = False
    if args.max_file_size is not None:
        changes["max_file_bytes"] = args.max_file_size
    return with_overrides(base, **changes)


def format_summary(result: ExportResult) -> str:
    """Format export metadata into a human-readable report.

    Example:
        >>> from datetime import datetime
        >>> print(format_summary(ExportResult("", 3, 4096, datetime(2024, 1, 1), ["big.log"])))
        Files: 3
        Size: 4 KB
        Truncated: 1
    """
    lines = [
        f"Files: {result.total_files}",
        f"Size: {round(result.total_bytes / 1024)} KB",
    ]
    if result.token_count is not None:
        lines.append(f"Tokens: {result.token_count}")
    if result.truncated_files:
        lines.append(f"Truncated: {len(result.truncated_files)}")
    return "\n".join(lines)


def _log_progress(percent: float, message: str) -> None:
    logger.info("%3d%% %s", percent, message)


async def run(args: argparse.Namespace, session: ExportSession) -> int:
    """Select the requested paths, export them and deliver the document.

    Returns:
        int: The process exit code.
    """
    config = build_configuration(args)
    logger.info(configuration_summary(config))

    await session.open()
    paths: List[str] = args.paths or [ROOT_PATH]
    for path in paths:
        await session.select_path(path, True)

    if args.output is None and not args.clipboard:
        result = await session.generate(config)
        sys.stdout.write(result.content)
        sys.stdout.flush()
        print(format_summary(result), file=sys.stderr)
        return EXIT_OK

    result, report = await session.run_export(config, destination=args.output)
    if report.outcome == DeliveryOutcome.CANCELLED:
        print(report.message, file=sys.stderr)
        return EXIT_CANCELLED
    if report.outcome == DeliveryOutcome.FAILED:
        print(f"Error: {report.message}", file=sys.stderr)
        return EXIT_FAILURE
    if report.truncated:
        print(f"Warning: {report.message}", file=sys.stderr)
    else:
        print(report.message, file=sys.stderr)
    print(format_summary(result), file=sys.stderr)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the select2text command-line interface.

    Exit codes:
        0: Successful completion, including delivery through a fallback
        1: Runtime error or failed delivery
        2: Command-line syntax error or invalid configuration
        130: Cancelled by the user or interrupted by SIGINT (Ctrl+C)
    """
    ignore_rules = default_noise_rules()
    parser = create_parser(ignore_rules)
    # argparse exits with 2 on syntax errors and 0 for --version
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        validate_args(args)
        session = ExportSession(
            LocalFileSystemHost(args.root, follow_symlinks=args.follow_symlinks),
            LocalSinkCapability(assume_yes=args.yes),
            exclusion_rules=ignore_rules,
            listener=SessionListener(progress=_log_progress),
            tokenizer_model=args.tokenizer,
        )
        exit_code = asyncio.run(run(args, session))
    except (ConfigurationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_USAGE)
    except NoSelectionError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_FAILURE)
    except TokenizerNotAvailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_FAILURE)
    except KeyboardInterrupt:
        print(file=sys.stderr)
        sys.exit(EXIT_CANCELLED)
    except (Select2TextError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_FAILURE)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
