"""Pydantic models for the AutoKey ``.<label>.json`` item sidecar."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MODE_ABBREVIATION = 1
MODE_HOTKEY = 3


class _SidecarModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class AutoKeyAbbreviation(_SidecarModel):
    abbreviations: List[str] = Field(default_factory=list)
    backspace: bool = True
    ignore_case: bool = False
    immediate: bool = False
    trigger_inside: bool = False
    # Trigger on: all non-word "[\w]", space and enter "[^ \n]", tab "[^\t]"
    word_chars: str | None = "[\\w]"


class AutoKeyHotkey(_SidecarModel):
    # <shift>, <ctrl>, <alt>, <super>, <hyper>, <meta>
    modifiers: List[str] = Field(default_factory=list)
    hot_key: str | None = None


class AutoKeyFilter(_SidecarModel):
    regex: str | None = None
    is_recursive: bool = False


class AutoKeyMeta(_SidecarModel):
    """Item settings AutoKey reads from the hidden sidecar next to a phrase or script."""

    type: Literal["phrase", "script"] = "phrase"
    description: str = ""
    modes: List[int] = Field(default_factory=list)
    usage_count: int = 0
    prompt: bool = False
    omit_trigger: bool = True
    match_case: bool = False
    show_in_tray_menu: bool = False
    abbreviation: AutoKeyAbbreviation = Field(default_factory=AutoKeyAbbreviation)
    hotkey: AutoKeyHotkey = Field(default_factory=AutoKeyHotkey)
    filter: AutoKeyFilter = Field(default_factory=AutoKeyFilter)
    # Keyboard "kb", clipboard "<ctrl>+v", "<ctrl>+<shift>+v" or "<shift>+<insert>"
    send_mode: str | None = "kb"

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=4)


__all__ = [
    "AutoKeyAbbreviation",
    "AutoKeyFilter",
    "AutoKeyHotkey",
    "AutoKeyMeta",
    "MODE_ABBREVIATION",
    "MODE_HOTKEY",
]
