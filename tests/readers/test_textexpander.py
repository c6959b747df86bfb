import datetime
import time

import pytest

from textexporter.errors import (
    GroupNotFoundError,
    MalformedSourceError,
    SourceNotFoundError,
    UnknownCodeError,
)
from textexporter.exception_handler import ErrorHandler
from textexporter.readers import TextExpanderReader, get_reader
from textexporter.readers.textexpander import (
    MODE_CODES,
    TYPE_CODES,
    transpose_mode,
    transpose_type,
)
from textexporter.snippet import AbbreviationMode, SnippetType


def test_type_codes_map_to_canonical_types():
    assert {code: transpose_type(code) for code in range(4)} == {
        0: SnippetType.TEXT,
        1: SnippetType.RICHTEXT,
        2: SnippetType.APPLESCRIPT,
        3: SnippetType.SHELL_SCRIPT,
    }
    assert len(set(TYPE_CODES.values())) == len(TYPE_CODES)


def test_mode_codes_map_to_canonical_modes():
    assert {code: transpose_mode(code) for code in range(3)} == {
        0: AbbreviationMode.CASE_SENSITIVE,
        1: AbbreviationMode.CASE_INSENSITIVE,
        2: AbbreviationMode.ADAPTIVE,
    }
    assert len(set(MODE_CODES.values())) == len(MODE_CODES)


@pytest.mark.parametrize("code", [4, -1, "0", None, True, 1.0])
def test_unknown_type_code_raises(code):
    with pytest.raises(UnknownCodeError) as excinfo:
        transpose_type(code)

    assert excinfo.value.kind == "type"
    assert excinfo.value.code == code


def test_unknown_mode_code_raises_with_context():
    with pytest.raises(UnknownCodeError) as excinfo:
        transpose_mode(7, group_uuid="G", snippet_uuid="S")

    assert excinfo.value.kind == "mode"
    assert excinfo.value.group_uuid == "G"
    assert excinfo.value.snippet_uuid == "S"


def test_read_directory_builds_index_in_descriptor_order(settings_builder, settings_dir, make_record):
    settings_builder.add_group(
        "Work",
        [
            make_record("Be right back", abbreviation="brb", mode=2, text="Be right back"),
            make_record("Greeting", abbreviation="hi", mode=1, snippet_type=3, text="echo hi"),
        ],
    )
    settings_builder.add_group("Home", [make_record("Rich", snippet_type=1)])
    settings_builder.write_index()

    index = TextExpanderReader().read(settings_dir)

    assert [group.title for group in index.groups] == ["Work", "Home"]
    work = index.groups[0]
    assert work.uuid == settings_builder.group_refs[0]["uuidString"]
    assert [snippet.meta.title for snippet in work.snippets] == ["Be right back", "Greeting"]

    brb = work.snippets[0]
    assert brb.type == SnippetType.TEXT
    assert brb.input.abbreviation.text == "brb"
    assert brb.input.abbreviation.mode == AbbreviationMode.ADAPTIVE
    assert brb.data == "Be right back"
    assert brb.meta.created == "2016-03-01T10:00:00Z"
    assert brb.meta.updated == "2016-03-02T11:30:00Z"

    greeting = work.snippets[1]
    assert greeting.type == SnippetType.SHELL_SCRIPT
    assert greeting.input.abbreviation.mode == AbbreviationMode.CASE_INSENSITIVE

    rich = index.groups[1].snippets[0]
    assert rich.type == SnippetType.RICHTEXT
    assert rich.data is None


def test_read_accepts_index_file_path(settings_builder, make_record):
    settings_builder.add_group("Work", [make_record("One", abbreviation="one", text="1")])
    index_file = settings_builder.write_index()

    index = TextExpanderReader().read(index_file)

    assert index.groups[0].snippets[0].data == "1"


def test_date_values_are_passed_through(settings_builder, settings_dir, make_record):
    created = datetime.datetime(2015, 6, 1, 8, 0, 0)
    settings_builder.add_group("Work", [make_record("Dated", creationDate=created)])
    settings_builder.write_index()

    snippet = TextExpanderReader().read(settings_dir).groups[0].snippets[0]

    assert snippet.meta.created == created


def test_newest_group_descriptor_wins(settings_builder, settings_dir, make_record):
    now = time.time()
    group_uuid = settings_builder.add_group(
        "Work",
        [make_record("Old", text="old")],
        suffix="aaaaaaaaaa",
        mtime=now - 100,
    )
    settings_builder.write_group(
        group_uuid,
        [make_record("New", text="new")],
        suffix="bbbbbbbbbb",
        mtime=now,
    )
    settings_builder.write_index()

    index = TextExpanderReader().read(settings_dir)

    assert [snippet.data for snippet in index.groups[0].snippets] == ["new"]


def test_newest_index_descriptor_wins(settings_builder, settings_dir, make_record):
    now = time.time()
    settings_builder.add_group("Current", [make_record("A", text="a")])
    settings_builder.write_index(mtime=now)
    settings_builder.write_index(suffix="9999999999", mtime=now - 100, groups=[])

    index = TextExpanderReader().read(settings_dir)

    assert [group.title for group in index.groups] == ["Current"]


def test_missing_source_raises(tmp_path):
    with pytest.raises(SourceNotFoundError):
        TextExpanderReader().read(tmp_path / "missing")


def test_directory_without_index_raises(settings_dir):
    (settings_dir / "notes.txt").write_text("nothing here")

    with pytest.raises(SourceNotFoundError):
        TextExpanderReader().read(settings_dir)


def test_missing_group_descriptor_raises(settings_builder, settings_dir):
    group_uuid = settings_builder.add_group_ref("Ghost")
    settings_builder.write_index()

    with pytest.raises(GroupNotFoundError) as excinfo:
        TextExpanderReader().read(settings_dir)

    assert excinfo.value.group_uuid == group_uuid


def test_unparseable_index_raises(settings_dir):
    (settings_dir / "index_8A0C3E5D-1B2F-4C3D-9E8F-0A1B2C3D4E5F_0123456789.xml").write_text(
        "<plist><dict><key>groupsTE5</key>"
    )

    with pytest.raises(MalformedSourceError):
        TextExpanderReader().read(settings_dir)


def test_index_without_group_list_raises(settings_builder, settings_dir):
    settings_builder.write_plist(
        settings_dir / "index_8A0C3E5D-1B2F-4C3D-9E8F-0A1B2C3D4E5F_0123456789.xml",
        {"groups": []},
    )

    with pytest.raises(MalformedSourceError):
        TextExpanderReader().read(settings_dir)


def test_snippet_without_type_raises(settings_builder, settings_dir, make_record):
    record = make_record("Typeless")
    del record["snippetType"]
    group_uuid = settings_builder.add_group("Work", [record])
    settings_builder.write_index()

    with pytest.raises(MalformedSourceError) as excinfo:
        TextExpanderReader().read(settings_dir)

    assert excinfo.value.group_uuid == group_uuid
    assert excinfo.value.snippet_uuid == record["uuidString"]


def test_unknown_type_code_in_group_raises(settings_builder, settings_dir, make_record):
    settings_builder.add_group("Work", [make_record("Future", snippet_type=9)])
    settings_builder.write_index()

    with pytest.raises(UnknownCodeError):
        TextExpanderReader().read(settings_dir)


def test_empty_group_name_is_malformed(settings_builder, settings_dir, make_record):
    settings_builder.add_group("", [make_record("A", text="a")])
    settings_builder.write_index()

    with pytest.raises(MalformedSourceError):
        TextExpanderReader().read(settings_dir)


def test_lenient_reader_skips_and_records_failing_groups(settings_builder, settings_dir, make_record):
    settings_builder.add_group("Good", [make_record("A", text="a")])
    bad_record = make_record("Broken", mode=5)
    bad_uuid = settings_builder.add_group("Bad", [bad_record])
    settings_builder.add_group_ref("Missing")
    settings_builder.add_group("Also good", [make_record("B", text="b")])
    settings_builder.write_index()
    handler = ErrorHandler()

    index = TextExpanderReader(strict=False, error_handler=handler).read(settings_dir)

    assert [group.title for group in index.groups] == ["Good", "Also good"]
    summary = handler.get_error_summary()
    assert summary["total_errors"] == 2
    assert summary["error_types"] == {"UnknownCodeError": 1, "GroupNotFoundError": 1}
    first, second = summary["failed_groups"]
    assert first["group"] == "Bad"
    assert first["group_uuid"] == bad_uuid
    assert first["snippet_uuid"] == bad_record["uuidString"]
    assert first["stage"] == "transpose"
    assert second["group"] == "Missing"
    assert second["stage"] == "resolve"


def test_lenient_reader_skips_group_reference_that_is_not_a_dictionary(settings_builder, settings_dir, make_record):
    settings_builder.add_group("Good", [make_record("A", text="a")])
    settings_builder.write_index(groups=[*settings_builder.group_refs, "oops"])
    handler = ErrorHandler()

    index = TextExpanderReader(strict=False, error_handler=handler).read(settings_dir)

    assert [group.title for group in index.groups] == ["Good"]
    summary = handler.get_error_summary()
    assert summary["error_types"] == {"MalformedSourceError": 1}
    failure = summary["failed_groups"][0]
    assert failure["group"] == "unknown"
    assert failure["group_uuid"] is None
    assert failure["stage"] == "parse"


def test_strict_reader_rejects_group_reference_that_is_not_a_dictionary(settings_builder, settings_dir):
    settings_builder.write_index(groups=["oops"])

    with pytest.raises(MalformedSourceError, match="group reference is not a dictionary"):
        TextExpanderReader().read(settings_dir)

def test_get_reader_returns_registered_reader():
    reader = get_reader("textexpander", strict=False)

    assert isinstance(reader, TextExpanderReader)
    assert reader.strict is False


def test_get_reader_rejects_unknown_format():
    with pytest.raises(KeyError):
        get_reader("typinator")
