"""Selection to text export utilities.

This package provides tools for selecting an arbitrary subset of a file tree
and converting it into a single formatted document suitable for use with
Large Language Models (LLMs).
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("select2text")
except PackageNotFoundError:
    __version__ = "unknown"
