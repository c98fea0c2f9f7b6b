"""File handler module: path validation, encoding-aware read/write, directory listing.

Provides the file I/O infrastructure behind opening, saving and browsing
documents.  All sync functions are pure (no side effects besides file I/O).
Async wrappers compose validation + I/O via run_sync().
"""

from pathlib import Path

from charset_normalizer import from_bytes

from mdmirror.core.async_utils import run_sync
from mdmirror.models import DirectoryEntry

# =============================================================================
# Path Validation
# =============================================================================


def validate_file_path(path_str: str) -> Path:
    """Validate and resolve an input file path.

    Args:
        path_str: Path string to an existing file (relative paths are
            resolved against the working directory).

    Returns:
        Resolved Path object pointing to the real file.

    Raises:
        ValueError: If path doesn't exist or is not a file.
    """
    resolved = Path(path_str).expanduser().resolve()
    if not resolved.exists():
        raise ValueError(f"File not found: {path_str}")
    if not resolved.is_file():
        raise ValueError(f"Path is not a file: {path_str}")
    return resolved


def validate_output_path(
    path_str: str, base_dir: str | None = None
) -> Path:
    """Validate an output file path (file need not exist, but parent must).

    Args:
        path_str: Path string for the output file.
        base_dir: Optional base directory; output must be under this directory.

    Returns:
        Resolved Path object for the output file.

    Raises:
        ValueError: If parent doesn't exist, path is a directory, or path is
            outside base_dir.
    """
    resolved = Path(path_str).expanduser().resolve()
    if not resolved.parent.exists():
        raise ValueError(
            f"Output parent directory not found: {resolved.parent}"
        )
    if resolved.is_dir():
        raise ValueError(f"Output path is a directory: {path_str}")
    if base_dir is not None:
        base_resolved = Path(base_dir).resolve()
        if not resolved.is_relative_to(base_resolved):
            raise ValueError(
                f"Output path is outside base directory: {resolved} not under {base_resolved}"
            )
    return resolved


def validate_directory_path(path_str: str) -> Path:
    """Validate and resolve a directory to browse.

    Raises:
        ValueError: If path doesn't exist or is not a directory.
    """
    resolved = Path(path_str).expanduser().resolve()
    if not resolved.exists():
        raise ValueError(f"Directory not found: {path_str}")
    if not resolved.is_dir():
        raise ValueError(f"Path is not a directory: {path_str}")
    return resolved


# =============================================================================
# File Read/Write
# =============================================================================


def read_file_with_encoding(path: Path) -> tuple[str, str]:
    """Read a file with automatic encoding detection.

    Reads raw bytes first, then uses charset-normalizer to detect encoding.
    Defaults to UTF-8 for empty files or when detection fails.

    Args:
        path: Path to the file to read.

    Returns:
        Tuple of (content_string, detected_encoding).
    """
    raw = path.read_bytes()
    if not raw:
        return ("", "utf-8")

    result = from_bytes(raw).best()
    if result is None:
        # Detection failed, fall back to utf-8
        encoding = "utf-8"
        content = raw.decode(encoding, errors="replace")
    else:
        encoding = result.encoding
        # ascii is a strict subset of utf-8
        if encoding == "ascii":
            encoding = "utf-8"
        content = str(result)
    return (content, encoding)


def write_file(
    path: Path, content: str, encoding: str = "utf-8"
) -> int:
    """Write content to a file, creating parent directories as needed.

    Args:
        path: Path to the output file.
        content: String content to write.
        encoding: Encoding to use (default: utf-8).

    Returns:
        Number of bytes written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    encoded = content.encode(encoding)
    path.write_bytes(encoded)
    return len(encoded)


# =============================================================================
# Document Types
# =============================================================================

# Extensions shown as documents in the directory browser
MARKDOWN_EXTENSIONS = frozenset(
    {".md", ".markdown", ".mdown", ".mkd", ".mkdn", ".txt"}
)

# Extensions accepted when a file is dropped onto the editor
DROP_EXTENSIONS = frozenset({".md", ".markdown", ".txt"})


def is_markdown_file(name: str) -> bool:
    """Return True if *name* has a Markdown (or plain text) extension."""
    return Path(name).suffix.lower() in MARKDOWN_EXTENSIONS


def is_droppable_file(name: str) -> bool:
    """Return True if a dropped file named *name* may be opened."""
    return Path(name).suffix.lower() in DROP_EXTENSIONS


# =============================================================================
# Directory Listing
# =============================================================================

_SKIPPED_NAMES = frozenset({"node_modules", "dist"})
MAX_LIST_DEPTH = 5


def _is_skipped(name: str) -> bool:
    return name.startswith(".") or name in _SKIPPED_NAMES


def _entry_sort_key(entry: DirectoryEntry) -> tuple[int, str]:
    return (0 if entry.kind == "directory" else 1, entry.name.lower())


def list_directory(
    root: Path, max_depth: int = MAX_LIST_DEPTH
) -> list[DirectoryEntry]:
    """Recursively list *root* for the directory browser.

    Hidden entries, ``node_modules`` and ``dist`` are skipped.  Directories
    come before files, each group sorted case-insensitively by name.
    Directories deeper than *max_depth* are listed without children.

    Args:
        root: Directory to list.
        max_depth: Maximum recursion depth.

    Returns:
        Sorted top-level entries.
    """
    return _list_level(root, root, 0, max_depth)


def _list_level(
    root: Path, directory: Path, depth: int, max_depth: int
) -> list[DirectoryEntry]:
    entries: list[DirectoryEntry] = []
    for child in directory.iterdir():
        if _is_skipped(child.name):
            continue
        relative = child.relative_to(root).as_posix()
        if child.is_dir():
            children = (
                _list_level(root, child, depth + 1, max_depth)
                if depth < max_depth
                else []
            )
            entries.append(
                DirectoryEntry(
                    name=child.name,
                    kind="directory",
                    path=relative,
                    children=children,
                )
            )
        else:
            entries.append(
                DirectoryEntry(name=child.name, kind="file", path=relative)
            )
    entries.sort(key=_entry_sort_key)
    return entries


# =============================================================================
# Async Wrappers
# =============================================================================


async def read_file_async(path_str: str) -> tuple[str, str, Path]:
    """Async wrapper: validate path, read file with encoding detection.

    Args:
        path_str: Path string to an existing file.

    Returns:
        Tuple of (content_string, detected_encoding, resolved_path).

    Raises:
        ValueError: If path validation fails.
    """
    resolved = await run_sync(validate_file_path, path_str)
    content, encoding = await run_sync(
        read_file_with_encoding, resolved
    )
    return (content, encoding, resolved)


async def write_file_async(
    path_str: str, content: str, encoding: str = "utf-8"
) -> tuple[Path, int]:
    """Async wrapper: validate output path, write file.

    Args:
        path_str: Path string for the output file.
        content: String content to write.
        encoding: Encoding to use (default: utf-8).

    Returns:
        Tuple of (resolved_path, bytes_written).

    Raises:
        ValueError: If output path validation fails.
    """
    resolved = await run_sync(validate_output_path, path_str)
    count = await run_sync(write_file, resolved, content, encoding)
    return (resolved, count)


async def list_directory_async(
    path_str: str, max_depth: int = MAX_LIST_DEPTH
) -> tuple[Path, list[DirectoryEntry]]:
    """Async wrapper: validate directory, list it recursively.

    Raises:
        ValueError: If directory validation fails.
    """
    resolved = await run_sync(validate_directory_path, path_str)
    entries = await run_sync(list_directory, resolved, max_depth)
    return (resolved, entries)
