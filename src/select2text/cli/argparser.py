"""Command-line argument parsing for select2text.

This module defines the command-line interface for select2text,
handling argument parsing and validation.
"""

import argparse
from pathlib import Path
from typing import Any, List, Optional, Sequence, Type, Union

from select2text import __version__
from select2text.configuration import PRESETS
from select2text.exclusion_rules.git_rules import GitIgnoreExclusionRules


def create_ignore_action(ignore_rules: GitIgnoreExclusionRules) -> Type[argparse.Action]:
    """Create a custom action class that feeds gitignore rules to the tree filter.

    Rules are added as arguments are processed, preserving the order of
    -e/--ignore-file and -g/--ignore options as they appear on the command line.

    Args:
        ignore_rules: The rules object to update during parsing.

    Returns:
        A custom action class for use with argparse.
    """

    class IgnoreRulesAction(argparse.Action):
        def __init__(self, option_strings: List[str], dest: str, **kwargs: Any) -> None:
            super().__init__(option_strings, dest, **kwargs)

        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Union[str, Sequence[Any], None],
            option_string: Optional[str] = None,
        ) -> None:
            if values is None:
                return
            if option_string in ("-e", "--ignore-file"):
                try:
                    ignore_rules.load_rules(Path(str(values)))
                except FileNotFoundError as e:
                    parser.error(str(e))
            else:
                ignore_rules.add_rule(str(values))

            recorded = getattr(namespace, self.dest, None) or []
            setattr(namespace, self.dest, recorded + [values])

    return IgnoreRulesAction


def create_parser(ignore_rules: GitIgnoreExclusionRules) -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Args:
        ignore_rules: Gitignore-style rules, pre-loaded with the default noise
            denylist, that the parser extends with -e and -g options.

    Returns:
        An ArgumentParser instance configured with select2text's options.
    """
    description = """
    select2text: Export a selection of files as one document suitable for LLMs.

    Selects files and directories under ROOT and renders them into a single
    Markdown or plain text document: an optional directory structure overview,
    one section per file, and a summary footer. Directories are expanded
    recursively; binary files and common noise (version control metadata,
    dependency and build folders, log files) are skipped.

    Size Limits:
    Files larger than the maximum file size are truncated to 80% of it and
    listed in the summary. Clipboard delivery of very large documents asks for
    confirmation, retries with truncated content and finally offers to save to
    a file instead.
    """

    epilog = """
    Examples:
      # Export a whole project to stdout as Markdown
      select2text /path/to/project

      # Export selected files and directories
      select2text /path/to/project src/main.ts README.md docs

      # Plain text to a file, without the structure block
      select2text -f txt -S -o context.txt /path/to/project

      # Copy to the clipboard, answering yes to every prompt
      select2text -c -y /path/to/project src

      # Start from a preset and narrow it down
      select2text -p source-only -x "**/*.test.ts" /path/to/project

      # Start from a stored JSON configuration
      select2text -C export-settings.json /path/to/project

      # Only export files matching include patterns
      select2text -i "**/*.py" -i "*.toml" /path/to/project

      # Hide entries using .gitignore files or patterns
      select2text -e .gitignore -g "*.min.js" /path/to/project

      # Follow symbolic links to directories inside the project
      select2text -L /path/to/project

      # Report the token count of the document
      select2text -t gpt-4 /path/to/project
    """

    parser = argparse.ArgumentParser(
        prog="select2text",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"select2text {__version__}", help="Show the version and exit"
    )

    IgnoreAction = create_ignore_action(ignore_rules)

    parser.add_argument(
        "root",
        type=Path,
        metavar="ROOT",
        help="The directory to export from. All paths in the output are relative to it.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Files or directories to select, relative to ROOT. Defaults to everything.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["md", "txt"],
        help="Output format (default: md, or the preset's format).",
    )
    sink = parser.add_mutually_exclusive_group()
    sink.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="Write the document to FILE. If neither -o nor -c is given, it is written to stdout.",
    )
    sink.add_argument(
        "-c",
        "--clipboard",
        action="store_true",
        help="Copy the document to the clipboard.",
    )
    base = parser.add_mutually_exclusive_group()
    base.add_argument(
        "-p",
        "--preset",
        choices=sorted(PRESETS),
        help="Start from a built-in configuration preset.",
    )
    base.add_argument(
        "-C",
        "--config",
        type=Path,
        metavar="FILE",
        help=(
            "Start from a configuration stored in a JSON FILE (keys: format, outputMethod, "
            "includeDirectoryStructure, maxFileSize, truncateThreshold, excludePatterns, includePatterns). "
            "Missing keys take their defaults and invalid values are reset."
        ),
    )
    parser.add_argument(
        "-x",
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob pattern of files to leave out (e.g. '**/*.map'). Can be specified multiple times.",
    )
    parser.add_argument(
        "-i",
        "--include",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob pattern of files to keep; when given, all other files are left out. Can be specified multiple times.",
    )
    parser.add_argument(
        "-e",
        "--ignore-file",
        dest="ignore",
        type=Path,
        metavar="FILE",
        action=IgnoreAction,
        help="Hide entries matching the rules in a .gitignore-style FILE (can be specified multiple times).",
    )
    parser.add_argument(
        "-g",
        "--ignore",
        dest="ignore",
        metavar="PATTERN",
        action=IgnoreAction,
        help=(
            "Hide entries matching a gitignore-style pattern, including directory markers (build/) and "
            "negations (!keep.log). Processed in order with -e/--ignore-file."
        ),
    )
    parser.add_argument(
        "-S",
        "--no-structure",
        action="store_true",
        help="Leave out the directory structure block.",
    )
    parser.add_argument(
        "-L",
        "--follow-symlinks",
        action="store_true",
        help=(
            "Follow symbolic links to directories. By default they are left out. Links pointing outside "
            "ROOT and links back to one of their own parent directories are always left out."
        ),
    )
    parser.add_argument(
        "-m",
        "--max-file-size",
        type=int,
        metavar="BYTES",
        help="Truncate files larger than BYTES (default: 1048576).",
    )
    parser.add_argument(
        "-t",
        "--tokenizer",
        metavar="MODEL",
        help="Tokenizer model to use for counting tokens (e.g., gpt-4). Specifying this enables token counting.",
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Answer yes to every prompt (large clipboard content, save-to-file fallback).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr; repeat for debug output.",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs additional validation beyond what argparse can handle.

    Raises:
        ValueError: If any arguments fail validation.
    """
    if args.max_file_size is not None and args.max_file_size <= 0:
        raise ValueError("-m/--max-file-size must be a positive number of bytes")
    if not args.root.is_dir():
        raise ValueError(f"ROOT is not a directory: {args.root}")
