"""Gitignore-style rules that hide noise entries while a tree is enumerated."""

from os import PathLike
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern  # type: ignore

from select2text.types import PathType

from .base_rules import BaseExclusionRules

# Well-known noise that hosts never need to surface in a tree
DEFAULT_NOISE_PATTERNS = (
    "node_modules/",
    ".git/",
    "dist/",
    "build/",
    "out/",
    "*.log",
    ".DS_Store",
    "Thumbs.db",
)


class GitIgnoreExclusionRules(BaseExclusionRules):
    """Ordered gitignore patterns evaluated with pathspec.

    The tree model consults these rules for every child it enumerates, probing
    directories with a trailing slash so that directory-only patterns such as
    ``build/`` hide the ``build`` directory but not a file called ``build``.
    Rules are evaluated the way Git evaluates them: the last matching pattern
    wins, so a later ``!keep.log`` re-includes what an earlier ``*.log`` hid.

    Patterns can come from ignore files, from individual strings, or both;
    they are kept in the order they were added.

    Attributes:
        spec (PathSpec): The compiled patterns.

    Example:
        >>> rules = GitIgnoreExclusionRules(patterns=["build/", "*.log", "!keep.log"])
        >>> rules.exclude("web/build/")
        True
        >>> rules.exclude("build")
        False
        >>> rules.exclude("keep.log")
        False
    """

    def __init__(
        self,
        rules_files: Optional[Union[PathType, Sequence[PathType]]] = None,
        patterns: Sequence[str] = (),
    ):
        """Build rules from ignore files first, then literal patterns.

        Raises:
            FileNotFoundError: If an ignore file does not exist.
        """
        self.spec = PathSpec.from_lines(GitWildMatchPattern, [])
        if rules_files is not None:
            self.load_rules(rules_files)
        for pattern in patterns:
            self.add_rule(pattern)

    def exclude(self, path: str) -> bool:
        return self.spec.match_file(path)

    def has_rules(self) -> bool:
        return len(self.spec.patterns) > 0

    def _patterns(self) -> List[GitWildMatchPattern]:
        # PathSpec may hold its patterns in a tuple
        if not isinstance(self.spec.patterns, list):
            self.spec.patterns = list(self.spec.patterns)
        return self.spec.patterns

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Append the patterns of one or more ignore files.

        Blank lines and ``#`` comments are skipped, as Git does.

        Raises:
            FileNotFoundError: If a file does not exist. Files before it have
                already been loaded.
        """
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            path = Path(rules_file)
            if not path.exists():
                raise FileNotFoundError(f"Rules file not found: {path}")
            lines = path.read_text().splitlines()
            self._patterns().extend(PathSpec.from_lines(GitWildMatchPattern, lines).patterns)

    def add_rule(self, rule: str) -> None:
        """Append one gitignore pattern, e.g. ``"*.min.js"`` or ``"!vendor/keep.js"``."""
        self._patterns().append(GitWildMatchPattern(rule))


def default_noise_rules() -> GitIgnoreExclusionRules:
    """Build the fixed noise denylist applied during child enumeration.

    Example:
        >>> rules = default_noise_rules()
        >>> rules.exclude(".git/")
        True
        >>> rules.exclude("src/main.py")
        False
    """
    return GitIgnoreExclusionRules(patterns=DEFAULT_NOISE_PATTERNS)
