"""Exclusion rules built from user include/exclude glob patterns."""

from typing import Sequence, Tuple

from select2text.pattern_matcher import matches_any

from .base_rules import BaseExclusionRules


class GlobExclusionRules(BaseExclusionRules):
    """Exclusion rules driven by ordered include and exclude glob lists.

    A path is excluded when it matches any exclude pattern, or when include
    patterns are configured and the path matches none of them. Patterns use the
    anchored glob syntax of :mod:`select2text.pattern_matcher`, not .gitignore
    syntax.

    Attributes:
        exclude_patterns (Tuple[str, ...]): Patterns that remove a path.
        include_patterns (Tuple[str, ...]): Patterns a path must match when non-empty.

    Example:
        >>> rules = GlobExclusionRules(exclude_patterns=["**/*.min.js"], include_patterns=["src/**"])
        >>> rules.exclude("src/app.js")
        False
        >>> rules.exclude("src/vendor/jquery.min.js")
        True
        >>> rules.exclude("README.md")
        True
    """

    def __init__(self, exclude_patterns: Sequence[str] = (), include_patterns: Sequence[str] = ()) -> None:
        self.exclude_patterns: Tuple[str, ...] = tuple(exclude_patterns)
        self.include_patterns: Tuple[str, ...] = tuple(include_patterns)

    def exclude(self, path: str) -> bool:
        if matches_any(path, self.exclude_patterns):
            return True
        if self.include_patterns and not matches_any(path, self.include_patterns):
            return True
        return False

    def has_rules(self) -> bool:
        return bool(self.exclude_patterns or self.include_patterns)
