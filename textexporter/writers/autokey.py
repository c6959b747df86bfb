from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Set, Union

from ..errors import TargetUnwritableError
from ..protocols import GroupCallback, WriteStats
from ..snippet import AbbreviationMode, Group, Index, OutputMethod, Snippet, SnippetType
from .autokey_model import (
    MODE_ABBREVIATION,
    MODE_HOTKEY,
    AutoKeyAbbreviation,
    AutoKeyFilter,
    AutoKeyHotkey,
    AutoKeyMeta,
)
from .wrapper import make_executable, needs_wrapper, render_wrapper, wrapper_path

logger = logging.getLogger("textexporter")

EXTENSIONS: Mapping[SnippetType, str] = MappingProxyType(
    {
        SnippetType.TEXT: "txt",
        SnippetType.JAVASCRIPT: "js",
        SnippetType.PYTHON: "py",
        SnippetType.SHELL_SCRIPT: "sh",
    }
)

CLIPBOARD_PASTE = "<ctrl>+v"
KEYBOARD_TYPE = "kb"

SEND_MODES: Mapping[str, Mapping[OutputMethod, str]] = MappingProxyType(
    {
        # Existing converter output pastes everything
        "compat": MappingProxyType(
            {OutputMethod.KEYBOARD: CLIPBOARD_PASTE, OutputMethod.CLIPBOARD: CLIPBOARD_PASTE}
        ),
        "distinct": MappingProxyType(
            {OutputMethod.KEYBOARD: KEYBOARD_TYPE, OutputMethod.CLIPBOARD: CLIPBOARD_PASTE}
        ),
    }
)

FALLBACK_LABEL = "snippet"

_NON_WORD = re.compile(r"\W")
_PATH_SEPARATORS = {sep for sep in ("/", os.sep, os.altsep) if sep}


@dataclass(frozen=True)
class TransposedSnippet:
    """A snippet mapped onto AutoKey's item layout, before files are named."""

    label: str
    ext: str
    meta: AutoKeyMeta
    data: str
    source_type: SnippetType


class AutoKeyWriter:
    """Write a canonical Index as AutoKey folders.

    Each group becomes a folder. Each supported snippet becomes a hidden
    ``.<label>.json`` sidecar plus a ``<label>.<ext>`` data file. JavaScript and
    shell snippets also get a ``<label>.py`` wrapper, since AutoKey only runs
    Python.
    """

    target_format = "autokey"

    def __init__(self, *, send_mode: str = "compat") -> None:
        if send_mode not in SEND_MODES:
            raise ValueError(f"Unknown send mode policy: {send_mode}")
        self.send_mode = send_mode

    def write(
        self,
        target: Union[str, Path],
        index: Index,
        *,
        on_group_complete: Optional[GroupCallback] = None,
    ) -> WriteStats:
        target_path = Path(target)
        _ensure_dir(target_path)

        stats = WriteStats()
        claimed_dirs: Set[str] = set()
        total_groups = len(index.groups)

        for position, group in enumerate(index.groups, start=1):
            group_dir = self._claim_group_dir(target_path, group, claimed_dirs)
            written = self.write_group(group_dir, group, stats)
            stats.groups += 1

            if on_group_complete is not None:
                on_group_complete(group.title, written, position, total_groups)

        logger.info(
            "Wrote %d snippets (%d wrapped, %d skipped) in %d groups to %s",
            stats.written,
            stats.wrapped,
            stats.skipped,
            stats.groups,
            target_path,
        )
        return stats

    def write_group(self, group_dir: Path, group: Group, stats: WriteStats) -> int:
        """Write the supported snippets of ``group`` into ``group_dir``."""
        claimed_labels: Set[str] = set()
        written = 0

        for snippet in group.snippets:
            if not snippet.is_supported:
                logger.debug(
                    "Skipping unsupported %s snippet %s in group %s",
                    snippet.type.value,
                    snippet.uuid,
                    group.title,
                )
                stats.skipped += 1
                continue

            transposed = self.transpose(snippet)
            label = self.unique_label(group_dir, transposed, claimed_labels)
            claimed_labels.add(label.casefold())
            transposed = replace(transposed, label=label)

            self.write_snippet(group_dir, transposed)
            if needs_wrapper(transposed.source_type):
                stats.wrapped += 1
            written += 1

        stats.written += written
        return written

    def write_snippet(self, group_dir: Path, transposed: TransposedSnippet) -> None:
        _write_text(sidecar_path(group_dir, transposed.label), transposed.meta.to_json())

        data_file = group_dir / f"{transposed.label}.{transposed.ext}"
        _write_text(data_file, transposed.data)

        if needs_wrapper(transposed.source_type):
            try:
                make_executable(data_file)
            except OSError as exc:
                raise TargetUnwritableError(f"Cannot mark {data_file} executable: {exc}") from exc
            _write_text(wrapper_path(group_dir, transposed.label), render_wrapper(data_file))

    def unique_label(
        self,
        group_dir: Path,
        transposed: TransposedSnippet,
        claimed: Set[str],
    ) -> str:
        """Pick the first free label among ``label``, ``label_1``, ``label_2``, ...

        A label is taken once a snippet in this run claimed it, or when its sidecar
        exists on disk with different content. A sidecar identical to the one about
        to be written is left over from an earlier run of the same snippet and is
        reused, so re-running a conversion does not fan out into suffixed copies.
        """
        meta_json = transposed.meta.to_json()
        candidate = transposed.label
        suffix = 0

        while not _label_available(group_dir, candidate, meta_json, claimed):
            suffix += 1
            candidate = f"{transposed.label}_{suffix}"

        return candidate

    def transpose(self, snippet: Snippet) -> TransposedSnippet:
        abbreviation = snippet.input.abbreviation
        hotkey = snippet.input.hotkey
        window_filter = snippet.output.window_filter
        has_trigger = abbreviation.trigger is not None

        meta = AutoKeyMeta(
            type=transpose_type(snippet.type),
            description=snippet.meta.title,
            modes=transpose_modes(snippet),
            usage_count=snippet.meta.usage_count,
            prompt=snippet.output.prompt,
            omit_trigger=abbreviation.overwrite,
            # Adaptive case is the closest AutoKey has to "match phrase case"
            match_case=abbreviation.mode == AbbreviationMode.ADAPTIVE,
            show_in_tray_menu=False,
            abbreviation=AutoKeyAbbreviation(
                abbreviations=[abbreviation.text] if abbreviation.text is not None else [],
                backspace=abbreviation.overwrite,
                ignore_case=abbreviation.mode == AbbreviationMode.CASE_INSENSITIVE,
                immediate=has_trigger,
                trigger_inside=has_trigger,
                word_chars=abbreviation.trigger,
            ),
            hotkey=AutoKeyHotkey(modifiers=list(hotkey.modifiers), hot_key=hotkey.key),
            filter=AutoKeyFilter(regex=window_filter.regex, is_recursive=window_filter.recursive),
            send_mode=SEND_MODES[self.send_mode][snippet.output.method],
        )
        logger.debug("Transposed snippet %s (%s)", snippet.uuid, snippet.type.value)

        return TransposedSnippet(
            label=transpose_label(snippet.meta.title),
            ext=EXTENSIONS[snippet.type],
            meta=meta,
            data=snippet.data or "",
            source_type=snippet.type,
        )

    def _claim_group_dir(self, target_path: Path, group: Group, claimed: Set[str]) -> Path:
        base = directory_name(group.title)
        candidate = base
        suffix = 0
        # Case-insensitive volumes (the macOS default) would fold "Work" and "work" together
        while candidate.casefold() in claimed:
            suffix += 1
            candidate = f"{base}_{suffix}"
        claimed.add(candidate.casefold())

        if candidate != base:
            logger.warning(
                "Group %s (%s) shares folder name %s with an earlier group; writing to %s",
                group.title,
                group.uuid,
                base,
                candidate,
            )

        group_dir = target_path / candidate
        _ensure_dir(group_dir)
        return group_dir


def transpose_type(snippet_type: SnippetType) -> str:
    if snippet_type == SnippetType.PYTHON:
        return "script"
    return "phrase"


def transpose_modes(snippet: Snippet) -> list[int]:
    modes = []
    if snippet.input.abbreviation.text is not None:
        modes.append(MODE_ABBREVIATION)
    if snippet.input.hotkey.key is not None:
        modes.append(MODE_HOTKEY)
    return modes


def transpose_label(title: str) -> str:
    return _NON_WORD.sub("", title) or FALLBACK_LABEL


def directory_name(title: str) -> str:
    name = title
    name = name.replace("\x00", "_")
    for separator in _PATH_SEPARATORS:
        name = name.replace(separator, "_")
    if name in {".", ".."}:
        name = name.replace(".", "_")
    return name


def sidecar_path(target_dir: Path, label: str) -> Path:
    return target_dir / f".{label}.json"


def _label_available(group_dir: Path, candidate: str, meta_json: str, claimed: Set[str]) -> bool:
    if candidate.casefold() in claimed:
        return False

    sidecar = sidecar_path(group_dir, candidate)
    if not sidecar.exists():
        return True

    try:
        return sidecar.read_text(encoding="utf-8") == meta_json
    except (OSError, UnicodeDecodeError):
        return False


def _ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except (OSError, ValueError) as exc:
        raise TargetUnwritableError(f"Cannot create directory {path}: {exc}") from exc


def _write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except (OSError, ValueError) as exc:
        raise TargetUnwritableError(f"Cannot write {path}: {exc}") from exc


__all__ = [
    "AutoKeyWriter",
    "EXTENSIONS",
    "SEND_MODES",
    "TransposedSnippet",
    "directory_name",
    "sidecar_path",
    "transpose_label",
    "transpose_modes",
    "transpose_type",
]
