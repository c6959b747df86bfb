"""Structural contracts for snippet library readers and writers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol, Union, runtime_checkable

from .snippet import Index

GroupCallback = Callable[[str, int, int, int], None]


@dataclass
class WriteStats:
    """Counts for one writer run."""

    groups: int = 0
    written: int = 0
    skipped: int = 0
    wrapped: int = 0


@runtime_checkable
class Reader(Protocol):
    """Loads a vendor's on-disk snippet library into the canonical Index."""

    @property
    def source_format(self) -> str:
        """Return identifier for the source format (e.g., 'textexpander')."""
        ...

    def read(self, source: Union[str, Path]) -> Index:
        ...


@runtime_checkable
class Writer(Protocol):
    """Serializes a canonical Index into a vendor's on-disk layout."""

    @property
    def target_format(self) -> str:
        """Return identifier for the target format (e.g., 'autokey')."""
        ...

    def write(
        self,
        target: Union[str, Path],
        index: Index,
        *,
        on_group_complete: Optional[GroupCallback] = None,
    ) -> WriteStats:
        """Write every group of ``index`` under ``target``.

        ``on_group_complete`` receives the group title, the number of snippets
        written for it, and the 1-based position and total group count.
        """
        ...


__all__ = ["GroupCallback", "Reader", "WriteStats", "Writer"]
