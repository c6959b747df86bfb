"""Exceptions raised while converting a snippet library."""

from __future__ import annotations


class TextExporterError(Exception):
    """Base class for conversion failures.

    ``group_uuid`` and ``snippet_uuid`` locate the failing record when it is known,
    so a lenient run can report exactly what was skipped.
    """

    def __init__(
        self,
        message: str,
        *,
        group_uuid: str | None = None,
        snippet_uuid: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.group_uuid = group_uuid
        self.snippet_uuid = snippet_uuid

    def __str__(self) -> str:
        return self.message


class SourceNotFoundError(TextExporterError, FileNotFoundError):
    """The source path, or the index descriptor inside it, does not exist."""


class MalformedSourceError(TextExporterError, ValueError):
    """A source descriptor could not be parsed into the expected structure."""


class GroupNotFoundError(TextExporterError, FileNotFoundError):
    """The index references a group with no matching descriptor file."""


class UnknownCodeError(TextExporterError, ValueError):
    """A numeric type or mode code has no canonical mapping."""

    def __init__(self, kind: str, code: object, **context: str | None) -> None:
        super().__init__(f"Unknown {kind} code: {code!r}", **context)
        self.kind = kind
        self.code = code


class TargetUnwritableError(TextExporterError, OSError):
    """The target tree could not be created or written."""


__all__ = [
    "GroupNotFoundError",
    "MalformedSourceError",
    "SourceNotFoundError",
    "TargetUnwritableError",
    "TextExporterError",
    "UnknownCodeError",
]
