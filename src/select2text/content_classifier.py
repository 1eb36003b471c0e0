"""Extension-based content classification.

Decides whether a file is eligible for textual export and which language tag
annotates its body. Classification looks only at the file name; directory
status comes from the tree model or the host, never from the path string.
"""

import codecs
import posixpath

# Common binary file extensions (high confidence)
BINARY_EXTENSIONS = frozenset(
    {
        # Executables and object files
        ".exe",
        ".dll",
        ".so",
        ".dylib",
        ".bin",
        ".obj",
        ".o",
        ".a",
        ".lib",
        ".class",
        # Images
        ".jpg",
        ".jpeg",
        ".png",
        ".gif",
        ".bmp",
        ".tiff",
        ".ico",
        ".svg",
        ".webp",
        ".psd",
        # Audio and video
        ".mp3",
        ".wav",
        ".flac",
        ".ogg",
        ".aac",
        ".mp4",
        ".avi",
        ".mov",
        ".wmv",
        ".flv",
        ".webm",
        ".mkv",
        # Office documents
        ".pdf",
        ".doc",
        ".docx",
        ".xls",
        ".xlsx",
        ".ppt",
        ".pptx",
        # Archives
        ".zip",
        ".rar",
        ".7z",
        ".tar",
        ".gz",
        ".bz2",
        ".xz",
        ".iso",
    }
)

LANGUAGE_HINTS = {
    ".js": "javascript",
    ".ts": "typescript",
    ".jsx": "jsx",
    ".tsx": "tsx",
    ".py": "python",
    ".java": "java",
    ".c": "c",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".php": "php",
    ".rb": "ruby",
    ".go": "go",
    ".rs": "rust",
    ".swift": "swift",
    ".kt": "kotlin",
    ".scala": "scala",
    ".html": "html",
    ".css": "css",
    ".scss": "scss",
    ".sass": "sass",
    ".less": "less",
    ".xml": "xml",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".ini": "ini",
    ".cfg": "ini",
    ".conf": "ini",
    ".sh": "bash",
    ".bash": "bash",
    ".zsh": "zsh",
    ".fish": "fish",
    ".ps1": "powershell",
    ".sql": "sql",
    ".md": "markdown",
    ".dockerfile": "dockerfile",
    ".gitignore": "gitignore",
    ".env": "bash",
}


def file_extension(path: str) -> str:
    """Return the lower-cased extension of the last path segment.

    Dotfiles such as ``.gitignore`` are treated as their own extension.

    Example:
        >>> file_extension("src/App.TSX")
        '.tsx'
        >>> file_extension(".gitignore")
        '.gitignore'
        >>> file_extension("Makefile")
        ''
    """
    name = posixpath.basename(path)
    dot = name.rfind(".")
    if dot == -1:
        return ""
    return name[dot:].lower()


def is_binary_by_extension(path: str) -> bool:
    """Check whether a path names a binary file according to its extension.

    Args:
        path: File path relative to the tree root.

    Returns:
        bool: True if the extension is on the binary denylist.

    Example:
        >>> is_binary_by_extension("assets/logo.PNG")
        True
        >>> is_binary_by_extension("src/main.ts")
        False
    """
    return file_extension(path) in BINARY_EXTENSIONS


def language_hint(path: str) -> str:
    """Return the short language tag used to annotate a file's body.

    Returns:
        str: The language tag, or an empty string for unknown extensions.

    Example:
        >>> language_hint("src/main.ts")
        'typescript'
        >>> language_hint("notes.unknown")
        ''
    """
    return LANGUAGE_HINTS.get(file_extension(path), "")


def decode_file_content(data: bytes) -> str:
    """Decode file bytes to text, honouring a byte order mark when present.

    UTF-8 and UTF-16 byte order marks are detected and stripped. Anything
    else is decoded as UTF-8 with undecodable bytes replaced.

    Example:
        >>> decode_file_content(codecs.BOM_UTF8 + b"hi")
        'hi'
        >>> decode_file_content(codecs.BOM_UTF16_LE + "hi".encode("utf-16-le"))
        'hi'
        >>> decode_file_content(b"caf\\xc3\\xa9")
        'café'
    """
    if data.startswith(codecs.BOM_UTF8):
        return data[len(codecs.BOM_UTF8) :].decode("utf-8", errors="replace")  # noqa: E203
    if data.startswith(codecs.BOM_UTF16_LE):
        return data[len(codecs.BOM_UTF16_LE) :].decode("utf-16-le", errors="replace")  # noqa: E203
    if data.startswith(codecs.BOM_UTF16_BE):
        return data[len(codecs.BOM_UTF16_BE) :].decode("utf-16-be", errors="replace")  # noqa: E203
    return data.decode("utf-8", errors="replace")
