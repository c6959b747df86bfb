import os
import plistlib
import uuid
from pathlib import Path

import pytest


def _new_uuid() -> str:
    return str(uuid.uuid4()).upper()


def snippet_record(
    label,
    *,
    abbreviation=None,
    snippet_type=0,
    mode=2,
    text=None,
    uuid_string=None,
    **extra,
):
    # Property lists cannot hold None, so absent fields are left out
    record = {
        "uuidString": uuid_string or _new_uuid(),
        "label": label,
        "snippetType": snippet_type,
        "abbreviationMode": mode,
        "creationDate": "2016-03-01T10:00:00Z",
        "modificationDate": "2016-03-02T11:30:00Z",
    }
    if abbreviation is not None:
        record["abbreviation"] = abbreviation
    if text is not None:
        record["plainText"] = text
    record.update(extra)
    return record


class SettingsBuilder:
    """Lay out a TextExpander settings folder under a temporary directory."""

    def __init__(self, root: Path):
        self.root = root
        self.group_refs = []

    def add_group(self, name, snippets, *, group_uuid=None, suffix="abcdefghij", mtime=None):
        group_uuid = group_uuid or _new_uuid()
        self.group_refs.append({"uuidString": group_uuid, "name": name})
        self.write_group(group_uuid, snippets, suffix=suffix, mtime=mtime)
        return group_uuid

    def add_group_ref(self, name, group_uuid=None):
        group_uuid = group_uuid or _new_uuid()
        self.group_refs.append({"uuidString": group_uuid, "name": name})
        return group_uuid

    def write_group(self, group_uuid, snippets, *, suffix="abcdefghij", mtime=None):
        path = self.root / f"group_{group_uuid}_{suffix}.xml"
        self.write_plist(path, {"snippetPlists": list(snippets)}, mtime=mtime)
        return path

    def write_index(self, *, index_uuid=None, suffix="0123456789", mtime=None, groups=None):
        index_uuid = index_uuid or _new_uuid()
        path = self.root / f"index_{index_uuid}_{suffix}.xml"
        payload = {"groupsTE5": self.group_refs if groups is None else groups}
        self.write_plist(path, payload, mtime=mtime)
        return path

    @staticmethod
    def write_plist(path, payload, *, mtime=None):
        with open(path, "wb") as handle:
            plistlib.dump(payload, handle)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path


@pytest.fixture
def settings_dir(tmp_path):
    path = tmp_path / "Settings.textexpandersettings"
    path.mkdir()
    return path


@pytest.fixture
def settings_builder(settings_dir):
    return SettingsBuilder(settings_dir)


@pytest.fixture
def make_record():
    return snippet_record


@pytest.fixture
def target_dir(tmp_path):
    return tmp_path / "autokey"
