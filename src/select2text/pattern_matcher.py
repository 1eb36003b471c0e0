"""Glob-style matching of relative paths.

Patterns are translated to anchored, case-sensitive regular expressions:

- ``**`` matches any sequence of characters, including path separators
- ``*`` matches any sequence of characters within one path segment
- ``?`` matches exactly one character other than a path separator
- every other character, ``.`` included, matches itself literally

Matching is performed against the full path, so ``*.py`` matches ``setup.py``
but not ``src/setup.py``.
"""

import re
from functools import lru_cache
from typing import Iterable, Pattern


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> Pattern[str]:
    """Translate a glob pattern into a compiled, anchored regular expression.

    Args:
        pattern: The glob pattern to translate.

    Returns:
        The compiled regular expression.

    Example:
        >>> compile_pattern("src/**/*.py").pattern
        '^src/.*/[^/]*\\\\.py$'
    """
    parts = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "*":
            if pattern.startswith("**", i):
                parts.append(".*")
                i += 2
                continue
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(char))
        i += 1
    return re.compile("^" + "".join(parts) + "$")


def matches(path: str, pattern: str) -> bool:
    """Check whether a relative path matches a glob pattern.

    Args:
        path: Slash-separated path relative to the tree root.
        pattern: Glob pattern to match against.

    Returns:
        bool: True if the whole path matches the pattern.

    Example:
        >>> matches("src/a.ts", "**/*.ts")
        True
        >>> matches("src/a.ts", "test/**")
        False
        >>> matches("src/a.ts", "*.ts")
        False
    """
    return compile_pattern(pattern).match(path) is not None


def matches_any(path: str, patterns: Iterable[str]) -> bool:
    """Check whether a path matches at least one of the given patterns.

    An empty pattern collection matches nothing.

    Example:
        >>> matches_any("README.md", ["*.txt", "*.md"])
        True
        >>> matches_any("README.md", [])
        False
    """
    return any(matches(path, pattern) for pattern in patterns)
