import logging
import os
import re
from pathlib import Path
from typing import List, NamedTuple, Optional, Pattern, Union


logger = logging.getLogger("textexporter")


class FileInfo(NamedTuple):
    """A directory entry that matched a descriptor filename pattern."""
    path: Path
    size: int
    mtime: float


def find_matching_files(directory: Union[str, Path], pattern: Pattern[str]) -> List[FileInfo]:
    """List regular files directly inside ``directory`` whose name matches ``pattern``.

    Args:
        directory: Directory to scan (not recursive)
        pattern: Compiled regex applied to the bare filename with ``match``

    Returns:
        FileInfo entries sorted by filename

    Raises:
        FileNotFoundError: If the directory doesn't exist
        NotADirectoryError: If the path is not a directory
    """
    dir_path = Path(directory)
    matches: List[FileInfo] = []

    with os.scandir(dir_path) as entries:
        for entry in entries:
            if not pattern.match(entry.name):
                continue
            try:
                if not entry.is_file():
                    continue
                stat_info = entry.stat()
            except OSError:
                # Vanished or unreadable between listing and stat
                continue
            matches.append(
                FileInfo(
                    path=dir_path / entry.name,
                    size=stat_info.st_size,
                    mtime=stat_info.st_mtime,
                )
            )

    matches.sort(key=lambda info: info.path.name)
    return matches


def select_newest(directory: Union[str, Path], pattern: Pattern[str]) -> Optional[Path]:
    """Return the most recently modified file matching ``pattern``, or None.

    Equal modification times fall back to the greatest filename so the choice
    never depends on directory listing order.
    """
    candidates = find_matching_files(directory, pattern)
    if not candidates:
        return None

    newest = max(candidates, key=lambda info: (info.mtime, info.path.name))
    if len(candidates) > 1:
        logger.debug(
            "%d files match %s in %s; using newest %s",
            len(candidates),
            pattern.pattern,
            directory,
            newest.path.name,
        )
    return newest.path


def compile_descriptor_pattern(prefix: str, identifier: str, extension: str = "xml") -> Pattern[str]:
    """Build the ``<prefix>_<identifier>_<10 chars>.<extension>`` filename pattern."""
    return re.compile(
        rf"^{re.escape(prefix)}_{identifier}_.{{10}}\.{re.escape(extension)}$",
        re.IGNORECASE,
    )
