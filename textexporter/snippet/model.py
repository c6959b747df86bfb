from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class SnippetType(str, Enum):
    UNSUPPORTED = "unsupported"
    TEXT = "text"
    RICHTEXT = "richtext"
    APPLESCRIPT = "applescript"
    SHELL_SCRIPT = "shell_script"
    JAVASCRIPT = "javascript"
    PYTHON = "python"


class AbbreviationMode(str, Enum):
    ADAPTIVE = "adaptive"
    CASE_SENSITIVE = "case-sensitive"
    CASE_INSENSITIVE = "case-insensitive"


class OutputMethod(str, Enum):
    KEYBOARD = "keyboard"
    CLIPBOARD = "clipboard"


SUPPORTED_TYPES = frozenset(
    {
        SnippetType.TEXT,
        SnippetType.JAVASCRIPT,
        SnippetType.PYTHON,
        SnippetType.SHELL_SCRIPT,
    }
)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class SnippetMeta(_Frozen):
    title: str = ""
    description: str = ""
    # Kept exactly as the source stored them.
    created: datetime | str | None = Field(default_factory=_utc_now)
    updated: datetime | str | None = Field(default_factory=_utc_now)
    usage_count: int = Field(default=0, ge=0)


class Abbreviation(_Frozen):
    text: str | None = None
    mode: AbbreviationMode = AbbreviationMode.ADAPTIVE
    overwrite: bool = True
    trigger: str | None = "[\\w]"


class Hotkey(_Frozen):
    modifiers: Tuple[str, ...] = ()
    key: str | None = None


class SnippetInput(_Frozen):
    abbreviation: Abbreviation = Field(default_factory=Abbreviation)
    hotkey: Hotkey = Field(default_factory=Hotkey)


class WindowFilter(_Frozen):
    regex: str | None = None
    recursive: bool = False


class SnippetOutput(_Frozen):
    method: OutputMethod = OutputMethod.KEYBOARD
    prompt: bool = False
    window_filter: WindowFilter = Field(default_factory=WindowFilter)


class Snippet(_Frozen):
    """One expansion rule: how it is triggered, how it is delivered and what it inserts."""

    uuid: str | None = None
    meta: SnippetMeta = Field(default_factory=SnippetMeta)
    type: SnippetType = SnippetType.TEXT
    input: SnippetInput = Field(default_factory=SnippetInput)
    output: SnippetOutput = Field(default_factory=SnippetOutput)
    data: str | None = None

    @property
    def is_supported(self) -> bool:
        """Whether the snippet carries semantics a writer can reproduce."""
        return self.type in SUPPORTED_TYPES


class Group(_Frozen):
    uuid: str | None = None
    title: str = Field(..., min_length=1)
    snippets: Tuple[Snippet, ...] = ()


class Index(_Frozen):
    """Root of a snippet library. Group order is the processing order."""

    groups: Tuple[Group, ...] = ()

    @property
    def snippet_count(self) -> int:
        return sum(len(group.snippets) for group in self.groups)


__all__ = [
    "Abbreviation",
    "AbbreviationMode",
    "Group",
    "Hotkey",
    "Index",
    "OutputMethod",
    "SUPPORTED_TYPES",
    "Snippet",
    "SnippetInput",
    "SnippetMeta",
    "SnippetOutput",
    "SnippetType",
    "WindowFilter",
]
