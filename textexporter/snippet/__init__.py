"""Canonical snippet library model shared by readers and writers."""

from .model import (
    SUPPORTED_TYPES,
    Abbreviation,
    AbbreviationMode,
    Group,
    Hotkey,
    Index,
    OutputMethod,
    Snippet,
    SnippetInput,
    SnippetMeta,
    SnippetOutput,
    SnippetType,
    WindowFilter,
)

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
