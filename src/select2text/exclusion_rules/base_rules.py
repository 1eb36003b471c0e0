from abc import ABC, abstractmethod


class BaseExclusionRules(ABC):
    """
    Contract shared by the rule objects that decide which paths are left out.

    Two kinds of rules implement it: the gitignore-style denylist the tree
    model applies while listing a directory, and the user's glob
    include/exclude lists the export pipeline applies to selected files.
    Both take slash-separated paths relative to the tree root.

    Example:
        >>> from select2text.exclusion_rules.glob_rules import GlobExclusionRules
        >>> rules = GlobExclusionRules(exclude_patterns=["*.lock"])
        >>> rules.exclude("poetry.lock")
        True
        >>> rules.exclude("src/poetry.lock")
        False
    """

    @abstractmethod
    def exclude(self, path: str) -> bool:
        """
        Decide whether a path is left out.

        Args:
            path (str): Path relative to the tree root. Directory paths may carry a
                trailing slash when the rule type distinguishes directories.

        Returns:
            bool: True if the path is left out.
        """
        pass

    def has_rules(self) -> bool:
        """
        Report whether any rule is configured. Rule types that can be empty override this.
        """
        return True
