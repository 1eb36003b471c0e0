"""Exclusion rules for filtering files and directories."""

from .base_rules import BaseExclusionRules
from .git_rules import DEFAULT_NOISE_PATTERNS, GitIgnoreExclusionRules, default_noise_rules
from .glob_rules import GlobExclusionRules

__all__ = [
    "BaseExclusionRules",
    "DEFAULT_NOISE_PATTERNS",
    "GitIgnoreExclusionRules",
    "GlobExclusionRules",
    "default_noise_rules",
]
