# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for class script discovery in archives and directories."""

import zipfile
from pathlib import Path

import pytest

from csa.errors import ScriptSourceError
from csa.settings import AnalysisSettings
from csa.sources import (
    ScriptSelector,
    read_archive_scripts,
    read_directory_scripts,
    read_scripts,
)

SCRIPT = "'Base'.subclass(function (I) {});"


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _write_archive(path: Path, members: dict[str, bytes]) -> Path:
    with zipfile.ZipFile(path, "w") as archive:
        for name, content in members.items():
            archive.writestr(name, content)
    return path


@pytest.mark.parametrize(
    "path,expected",
    [
        ("my.module/_/Widget.js", ("my.module", "Widget")),
        ("my.module/_/ui/Button.js", ("my.module", "ui.Button")),
        ("my.module/_/a/b/Deep.js", ("my.module", "a.b.Deep")),
        ("plain/_/Widget.js", None),
        (".hidden/_/Widget.js", None),
        ("my.module/lib/Widget.js", None),
        ("my.module/_/Widget.txt", None),
        ("my.module/Widget.js", None),
        ("outer/my.module/_/Widget.js", None),
    ],
)
def test_src_001_selector_resolves_module_and_class(
    path: str, expected: tuple[str, str] | None
) -> None:
    selector = ScriptSelector(AnalysisSettings())

    assert selector.match(path) == expected


def test_src_002_selector_honors_class_home_and_excludes() -> None:
    selector = ScriptSelector(
        AnalysisSettings(class_home="classes", exclude=("**/legacy/**", "*.test/"))
    )

    assert selector.match("my.module/classes/Widget.js") == ("my.module", "Widget")
    assert selector.match("my.module/_/Widget.js") is None
    assert selector.match("my.module/classes/legacy/Old.js") is None
    assert selector.match("my.test/classes/Widget.js") is None


def test_src_003_reads_archive_members_sorted(tmp_path: Path) -> None:
    archive_path = _write_archive(
        tmp_path / "modules.zip",
        {
            "zeta.module/_/Last.js": SCRIPT.encode("utf-8"),
            "alpha.module/_/": b"",
            "alpha.module/_/First.js": SCRIPT.encode("utf-8"),
            "alpha.module/README.md": b"# readme",
            "nodot/_/Skipped.js": SCRIPT.encode("utf-8"),
        },
    )

    scripts = read_archive_scripts(archive_path, AnalysisSettings())

    assert [(script.module_name, script.class_name) for script in scripts] == [
        ("alpha.module", "First"),
        ("zeta.module", "Last"),
    ]
    assert scripts[0].path == "alpha.module/_/First.js"
    assert scripts[0].source == SCRIPT


def test_src_004_reads_directory_layout(tmp_path: Path) -> None:
    _write_file(tmp_path / "my.module" / "_" / "Widget.js", SCRIPT)
    _write_file(tmp_path / "my.module" / "_" / "ui" / "Button.js", SCRIPT)
    _write_file(tmp_path / "my.module" / "notes.js", SCRIPT)
    _write_file(tmp_path / "other" / "_" / "Ignored.js", SCRIPT)

    scripts = read_directory_scripts(tmp_path, AnalysisSettings())

    assert [script.path for script in scripts] == [
        "my.module/_/Widget.js",
        "my.module/_/ui/Button.js",
    ]
    assert scripts[1].class_name == "ui.Button"


def test_src_005_read_scripts_dispatches_on_path_kind(tmp_path: Path) -> None:
    _write_file(tmp_path / "tree" / "my.module" / "_" / "Widget.js", SCRIPT)
    archive_path = _write_archive(
        tmp_path / "modules.zip", {"my.module/_/Widget.js": SCRIPT.encode("utf-8")}
    )

    from_directory = read_scripts(tmp_path / "tree", AnalysisSettings())
    from_archive = read_scripts(archive_path, AnalysisSettings())

    assert from_directory == from_archive


def test_src_006_rejects_paths_that_are_not_archives(tmp_path: Path) -> None:
    plain = tmp_path / "modules.txt"
    _write_file(plain, "not an archive")

    with pytest.raises(ScriptSourceError):
        read_scripts(plain, AnalysisSettings())


def test_src_007_rejects_scripts_that_are_not_utf8(tmp_path: Path) -> None:
    archive_path = _write_archive(
        tmp_path / "modules.zip", {"my.module/_/Widget.js": b"\xff\xfe'Base'"}
    )

    with pytest.raises(ScriptSourceError) as excinfo:
        read_scripts(archive_path, AnalysisSettings())

    assert "my.module/_/Widget.js" in str(excinfo.value)


def test_src_008_settings_reject_invalid_values() -> None:
    with pytest.raises(ValueError):
        AnalysisSettings(class_home="")
    with pytest.raises(ValueError):
        AnalysisSettings(class_home="a/b")
    with pytest.raises(ValueError):
        AnalysisSettings(remark_marker="@@")
    with pytest.raises(ValueError):
        AnalysisSettings(remark_marker=" ")
