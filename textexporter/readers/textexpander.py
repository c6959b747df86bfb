from __future__ import annotations

import logging
import plistlib
import re
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union
from xml.parsers.expat import ExpatError

from pydantic import ValidationError

from ..errors import (
    GroupNotFoundError,
    MalformedSourceError,
    SourceNotFoundError,
    UnknownCodeError,
)
from ..exception_handler import ErrorHandler
from ..snippet import (
    Abbreviation,
    AbbreviationMode,
    Group,
    Index,
    Snippet,
    SnippetInput,
    SnippetMeta,
    SnippetType,
)
from ..utils.file_loader import compile_descriptor_pattern, select_newest

logger = logging.getLogger("textexporter")

TYPE_CODES: Mapping[int, SnippetType] = MappingProxyType(
    {
        0: SnippetType.TEXT,
        1: SnippetType.RICHTEXT,
        2: SnippetType.APPLESCRIPT,
        3: SnippetType.SHELL_SCRIPT,
    }
)

MODE_CODES: Mapping[int, AbbreviationMode] = MappingProxyType(
    {
        0: AbbreviationMode.CASE_SENSITIVE,
        1: AbbreviationMode.CASE_INSENSITIVE,
        2: AbbreviationMode.ADAPTIVE,
    }
)

UUID4_PATTERN = r"[A-F\d]{8}-[A-F\d]{4}-4[A-F\d]{3}-[89AB][A-F\d]{3}-[A-F\d]{12}"
INDEX_PATTERN = compile_descriptor_pattern("index", UUID4_PATTERN)


def transpose_type(code: Any, **context: Optional[str]) -> SnippetType:
    """Map a TextExpander ``snippetType`` code to the canonical snippet type."""
    return _lookup(TYPE_CODES, "type", code, context)


def transpose_mode(code: Any, **context: Optional[str]) -> AbbreviationMode:
    """Map a TextExpander ``abbreviationMode`` code to the canonical matching mode."""
    return _lookup(MODE_CODES, "mode", code, context)


def _lookup(table: Mapping[int, Any], kind: str, code: Any, context: Dict[str, Optional[str]]) -> Any:
    # bool is an int subclass; plist <true/> must not read as code 1
    if isinstance(code, bool) or not isinstance(code, int):
        raise UnknownCodeError(kind, code, **context)
    try:
        return table[code]
    except KeyError:
        raise UnknownCodeError(kind, code, **context) from None


class TextExpanderReader:
    """Read a TextExpander settings folder into the canonical snippet Index.

    The settings folder holds one ``index_<uuid>_<suffix>.xml`` descriptor listing
    the groups and one ``group_<uuid>_<suffix>.xml`` descriptor per group. Both are
    XML property lists. When several files match, the newest one wins.
    """

    source_format = "textexpander"

    def __init__(self, *, strict: bool = True, error_handler: ErrorHandler | None = None) -> None:
        self.strict = strict
        self.error_handler = error_handler or ErrorHandler()

    def read(self, source: Union[str, Path]) -> Index:
        source_path = Path(source)
        if not source_path.exists():
            raise SourceNotFoundError(f"Source path not found: {source}")

        index_file = source_path
        if source_path.is_dir():
            index_file = self.find_index_file(source_path)

        return self.parse_index(index_file)

    def find_index_file(self, settings_dir: Path) -> Path:
        index_file = select_newest(settings_dir, INDEX_PATTERN)
        if index_file is None:
            raise SourceNotFoundError(f"No TextExpander index descriptor found in {settings_dir}")
        logger.debug("Using index descriptor %s", index_file.name)
        return index_file

    def find_group_file(self, settings_dir: Path, group_uuid: str) -> Path:
        pattern = compile_descriptor_pattern("group", re.escape(group_uuid))
        group_file = select_newest(settings_dir, pattern)
        if group_file is None:
            raise GroupNotFoundError(
                f"No group descriptor for group {group_uuid} in {settings_dir}",
                group_uuid=group_uuid,
            )
        return group_file

    def parse_index(self, index_file: Path) -> Index:
        settings_dir = index_file.parent
        index_plist = _load_plist(index_file)
        group_refs = _require(index_plist, "groupsTE5", list, index_file)

        groups: List[Group] = []
        for group_ref in group_refs:
            group_uuid = title = None
            if isinstance(group_ref, dict):
                group_uuid = group_ref.get("uuidString")
                title = group_ref.get("name")
            try:
                if not isinstance(group_ref, dict):
                    raise MalformedSourceError(f"{index_file.name}: group reference is not a dictionary")
                groups.append(self._read_group(settings_dir, group_ref, index_file))
            except (GroupNotFoundError, MalformedSourceError, UnknownCodeError) as exc:
                if self.strict:
                    raise
                self.error_handler.collect_group_error(
                    exc,
                    group_uuid if isinstance(group_uuid, str) else None,
                    title if isinstance(title, str) else None,
                    _failure_stage(exc),
                )

        index = Index(groups=tuple(groups))
        logger.info(
            "Loaded %d snippets from %d groups in %s",
            index.snippet_count,
            len(index.groups),
            settings_dir,
        )
        return index

    def _read_group(self, settings_dir: Path, group_ref: Dict[str, Any], index_file: Path) -> Group:
        group_uuid = _require(group_ref, "uuidString", str, index_file)
        title = _require(group_ref, "name", str, index_file, group_uuid=group_uuid)

        group_file = self.find_group_file(settings_dir, group_uuid)
        snippets = self.parse_group(group_file, group_uuid=group_uuid)

        try:
            return Group(uuid=group_uuid, title=title, snippets=tuple(snippets))
        except ValidationError as exc:
            raise MalformedSourceError(
                f"{index_file.name}: invalid group {group_uuid}: {exc.errors()[0]['msg']}",
                group_uuid=group_uuid,
            ) from exc

    def parse_group(self, group_file: Path, *, group_uuid: Optional[str] = None) -> List[Snippet]:
        group_plist = _load_plist(group_file, group_uuid=group_uuid)
        records = _require(group_plist, "snippetPlists", list, group_file, group_uuid=group_uuid)

        snippets: List[Snippet] = []
        for record in records:
            if not isinstance(record, dict):
                raise MalformedSourceError(
                    f"{group_file.name}: snippet record is not a dictionary",
                    group_uuid=group_uuid,
                )
            snippets.append(self._parse_snippet(record, group_file, group_uuid))

        logger.debug("Parsed %d snippets from %s", len(snippets), group_file.name)
        return snippets

    def _parse_snippet(
        self,
        record: Dict[str, Any],
        group_file: Path,
        group_uuid: Optional[str],
    ) -> Snippet:
        snippet_uuid = _require(record, "uuidString", str, group_file, group_uuid=group_uuid)
        context = {"group_uuid": group_uuid, "snippet_uuid": snippet_uuid}

        if "snippetType" not in record:
            raise MalformedSourceError(f"{group_file.name}: snippet is missing 'snippetType'", **context)
        snippet_type = transpose_type(record["snippetType"], **context)

        abbreviation_fields: Dict[str, Any] = {"text": record.get("abbreviation")}
        if "abbreviationMode" in record:
            abbreviation_fields["mode"] = transpose_mode(record["abbreviationMode"], **context)

        meta_fields: Dict[str, Any] = {"title": record.get("label") or ""}
        if "creationDate" in record:
            meta_fields["created"] = record["creationDate"]
        if "modificationDate" in record:
            meta_fields["updated"] = record["modificationDate"]

        try:
            return Snippet(
                uuid=snippet_uuid,
                meta=SnippetMeta(**meta_fields),
                type=snippet_type,
                input=SnippetInput(abbreviation=Abbreviation(**abbreviation_fields)),
                data=record.get("plainText"),
            )
        except ValidationError as exc:
            raise MalformedSourceError(
                f"{group_file.name}: invalid snippet {snippet_uuid}: {exc.errors()[0]['msg']}",
                **context,
            ) from exc


def _load_plist(path: Path, *, group_uuid: Optional[str] = None) -> Dict[str, Any]:
    try:
        with path.open("rb") as handle:
            data = plistlib.load(handle)
    except (plistlib.InvalidFileException, ExpatError, ValueError) as exc:
        raise MalformedSourceError(f"{path.name} is not a valid property list: {exc}", group_uuid=group_uuid) from exc
    except OSError as exc:
        raise MalformedSourceError(f"{path.name} could not be read: {exc}", group_uuid=group_uuid) from exc

    if not isinstance(data, dict):
        raise MalformedSourceError(f"{path.name}: top-level object is not a dictionary", group_uuid=group_uuid)
    return data


def _require(
    container: Dict[str, Any],
    key: str,
    expected: type,
    source_file: Path,
    **context: Optional[str],
) -> Any:
    value = container.get(key)
    if not isinstance(value, expected):
        raise MalformedSourceError(
            f"{source_file.name}: expected '{key}' to be {expected.__name__}, got {type(value).__name__}",
            **context,
        )
    return value


def _failure_stage(exc: Exception) -> str:
    if isinstance(exc, GroupNotFoundError):
        return "resolve"
    if isinstance(exc, UnknownCodeError):
        return "transpose"
    return "parse"


__all__ = [
    "INDEX_PATTERN",
    "MODE_CODES",
    "TYPE_CODES",
    "TextExpanderReader",
    "transpose_mode",
    "transpose_type",
]
