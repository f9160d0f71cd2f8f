"""Source enumeration and reading for the docs folder."""

import logging
import os
from typing import List

from docsync.errors import EnumerationError, ReadError

logger = logging.getLogger(__name__)


def has_extension(name: str, extension: str) -> bool:
    """Case-insensitive suffix check, e.g. `has_extension("A.MD", ".md")`."""
    return name.lower().endswith(extension.lower())


def list_source_files(directory: str, extension: str) -> List[str]:
    """
    List eligible file names in a directory.

    Only regular files whose name ends with `extension` (case-insensitive)
    are returned; subdirectories are skipped. Order is not significant.

    Args:
        directory: Source directory path.
        extension: Managed suffix including the dot, e.g. ".md".

    Returns:
        File base names.

    Raises:
        EnumerationError: If the directory cannot be listed.
    """
    try:
        with os.scandir(directory) as entries:
            names = [
                entry.name
                for entry in entries
                if entry.is_file() and has_extension(entry.name, extension)
            ]
    except OSError as e:
        raise EnumerationError(f"Cannot list source directory {directory}: {e}") from e

    logger.info(f"Found {len(names)} {extension} files in {directory}")
    return names


def read_source_file(directory: str, name: str) -> str:
    """
    Read a source file as UTF-8 text.

    Newlines are kept exactly as on disk so the byte size matches the file.
    Undecodable bytes are replaced instead of failing.

    Raises:
        ReadError: If the file cannot be opened or read.
    """
    path = os.path.join(directory, name)
    try:
        with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
            return f.read()
    except OSError as e:
        raise ReadError(f"Cannot read source file {path}: {e}") from e
