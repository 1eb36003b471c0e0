from typing import Iterable, List, Optional


class Select2TextError(Exception):
    """
    Base class for all errors raised by select2text.

    Every error carries a human-readable message and, where one exists, the
    underlying exception that caused it.

    Attributes:
        message (str): Human-readable description of the failure.
        cause (Optional[BaseException]): The underlying exception, if any.

    Example:
        >>> error = Select2TextError("Something failed")
        >>> str(error)
        'Something failed'
        >>> error.cause is None
        True
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class ConfigurationError(Select2TextError, ValueError):
    """
    Exception raised when an export configuration fails validation.

    Configuration errors are fatal and are raised before any I/O takes place.
    All problems found during validation are collected so that they can be
    reported together.

    Attributes:
        problems (List[str]): Individual validation failures.

    Example:
        >>> error = ConfigurationError(["format must be one of: md, txt"])
        >>> str(error)
        'Configuration validation failed: format must be one of: md, txt'
        >>> error.problems
        ['format must be one of: md, txt']
    """

    def __init__(self, problems: Iterable[str]) -> None:
        self.problems: List[str] = list(problems)
        super().__init__(f"Configuration validation failed: {', '.join(self.problems)}")


class PathError(Select2TextError):
    """
    Exception raised when a path cannot be resolved.

    Path errors are always recovered locally: selection operations treat them
    as no-ops and the export pipeline skips the path without counting it.

    Attributes:
        path (str): The path that could not be resolved.
    """

    def __init__(self, path: str, message: Optional[str] = None, cause: Optional[BaseException] = None) -> None:
        self.path = path
        super().__init__(message or f"Path not found: {path}", cause)


class PathNotFoundError(PathError):
    """
    Exception raised by a host when a path no longer exists.

    Example:
        >>> error = PathNotFoundError("src/gone.py")
        >>> str(error)
        'Path not found: src/gone.py'
    """

    pass


class InvalidPathError(PathError, ValueError):
    """
    Exception raised when a path would escape the tree root.

    Paths must be relative, must not contain ``..`` segments and must not
    contain empty segments.

    Example:
        >>> str(InvalidPathError("../etc/passwd"))
        'Invalid file path: ../etc/passwd'
    """

    def __init__(self, path: str) -> None:
        super().__init__(path, f"Invalid file path: {path}")


class ReadError(Select2TextError):
    """
    Exception raised when a file's bytes cannot be read.

    During an export this is a per-file, recoverable failure: the file is
    rendered as an inline error block and excluded from the totals.

    Attributes:
        path (str): The file that could not be read.

    Example:
        >>> error = ReadError("secret.txt", PermissionError("Permission denied"))
        >>> str(error)
        'Failed to read file secret.txt: Permission denied'
    """

    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        self.path = path
        detail = str(cause) if cause is not None else "unknown error"
        super().__init__(f"Failed to read file {path}: {detail}", cause)


class SinkError(Select2TextError):
    """
    Exception raised when a sink write fails.

    A failed primary (clipboard-like) write drives the dispatcher's fallback
    chain. It only becomes a terminating failure once every fallback has been
    exhausted or declined.

    Attributes:
        sink (str): Name of the sink that failed.
    """

    def __init__(self, sink: str, message: str, cause: Optional[BaseException] = None) -> None:
        self.sink = sink
        super().__init__(message, cause)


class CancelledByUser(Select2TextError):
    """
    Exception used when the user declines to continue an operation.

    This is a distinct outcome, not a failure. It is never reported to the
    caller as an error.
    """

    def __init__(self, message: str = "Operation cancelled by user") -> None:
        super().__init__(message)


class NoSelectionError(Select2TextError):
    """
    Exception raised when an export is requested with nothing selected.

    Example:
        >>> str(NoSelectionError())
        'No files selected for export'
    """

    def __init__(self, message: str = "No files selected for export") -> None:
        super().__init__(message)


class TokenizerNotAvailableError(Exception):
    """
    Exception raised when attempting to use token counting functionality without the required tokenizer package.

    This exception is raised when the `tiktoken` package is not installed but token counting
    functionality is requested. The tiktoken package is an optional dependency that must be
    explicitly installed using the 'token_counting' extra.

    Attributes:
        message (str): Detailed error message including installation instructions.

    Example:
        >>> error = TokenizerNotAvailableError()
        >>> str(error).startswith('Tokenizer (tiktoken) is not installed')
        True
    """

    def __init__(self, message: str = "Tokenizer (tiktoken) is not installed.") -> None:
        self.message = (
            f"{message} To enable token counting, install select2text with the 'token_counting' "
            "extra: 'pip install select2text[token_counting]'."
        )
        super().__init__(self.message)


class TokenizationError(Exception):
    """
    Exception raised when token counting fails during execution.

    Example:
        >>> error = TokenizationError("Failed to tokenize: invalid input")
        >>> str(error)
        'Failed to tokenize: invalid input'
    """

    pass
