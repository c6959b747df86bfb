"""Python wrappers that let AutoKey run scripts written in other languages.

AutoKey only executes Python. A wrapped script is run as a subprocess and its
trimmed standard output is typed through AutoKey's ``keyboard`` API.
"""

from __future__ import annotations

import stat
from pathlib import Path

from ..snippet import SnippetType

WRAPPED_TYPES = frozenset({SnippetType.JAVASCRIPT, SnippetType.SHELL_SCRIPT})

WRAPPER_EXTENSION = "py"

_EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def needs_wrapper(snippet_type: SnippetType) -> bool:
    return snippet_type in WRAPPED_TYPES


def render_wrapper(script_path: Path) -> str:
    """Return the Python source that runs ``script_path`` and types its output."""
    script = str(script_path.resolve())
    return "\n".join(
        [
            "import subprocess",
            f"out = subprocess.check_output([{script!r}], universal_newlines=True).strip()",
            "keyboard.send_keys(out)",
            "",
        ]
    )


def wrapper_path(target_dir: Path, label: str) -> Path:
    return target_dir / f"{label}.{WRAPPER_EXTENSION}"


def make_executable(path: Path) -> None:
    path.chmod(path.stat().st_mode | _EXECUTE_BITS)


__all__ = [
    "WRAPPED_TYPES",
    "make_executable",
    "needs_wrapper",
    "render_wrapper",
    "wrapper_path",
]
