# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the class script analysis CLI harness."""

import io
import json
import re
import zipfile
from pathlib import Path

from cli.analysis_harness import run

WIDGET = "\n".join(
    [
        "//@ A widget.",
        "'Base'.subclass(function (I) {",
        "  I.have({ count: 0 });",
        "});",
    ]
)


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _strip_ansi(text: str) -> str:
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


def _module_tree(root: Path) -> Path:
    _write_file(root / "my.module" / "_" / "Widget.js", WIDGET)
    _write_file(root / "my.module" / "_" / "ui" / "Button.js", WIDGET)
    return root


def test_cli_001_requires_a_command() -> None:
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run([], stdout=stdout, stderr=stderr)

    assert exit_code == 2


def test_cli_002_fails_when_path_is_missing(tmp_path: Path) -> None:
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["analyze", "--path", str(tmp_path / "missing")], stdout=stdout, stderr=stderr
    )

    assert exit_code == 2
    assert "Path does not exist" in stderr.getvalue()


def test_cli_003_json_output_holds_analysis_tree(tmp_path: Path) -> None:
    root = _module_tree(tmp_path / "modules")
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["analyze", "--path", str(root), "--format", "json"], stdout=stdout, stderr=stderr
    )

    assert exit_code == 0
    payload = json.loads(_strip_ansi(stdout.getvalue()))
    assert payload["errors"] == []
    classes = payload["analysis"]["_"]["my.module"]["_"]
    assert set(classes) == {"Widget", "ui.Button"}
    assert classes["Widget"]["super"] == "Base"
    assert classes["Widget"]["remarks"][0]["text"] == "@ A widget."


def test_cli_004_json_output_file_is_written(tmp_path: Path) -> None:
    root = _module_tree(tmp_path / "modules")
    output_path = tmp_path / "out" / "analysis.json"
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        [
            "analyze",
            "--path",
            str(root),
            "--format",
            "json",
            "--output",
            str(output_path),
        ],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 0
    assert stdout.getvalue() == ""
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert "Widget" in payload["analysis"]["_"]["my.module"]["_"]


def test_cli_005_table_output_lists_classes(tmp_path: Path) -> None:
    root = _module_tree(tmp_path / "modules")
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(["analyze", "--path", str(root)], stdout=stdout, stderr=stderr)

    assert exit_code == 0
    output = _strip_ansi(stdout.getvalue())
    assert "my.module" in output
    assert "Widget" in output
    assert "instanceVariables=1" in output


def test_cli_006_failed_scripts_are_reported_with_exit_code_one(tmp_path: Path) -> None:
    archive_path = tmp_path / "modules.zip"
    with zipfile.ZipFile(archive_path, "w") as archive:
        archive.writestr("my.module/_/Widget.js", WIDGET)
        archive.writestr("my.module/_/Broken.js", "var x = 1;")
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["analyze", "--path", str(archive_path), "--format", "json"],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 1
    assert "analyzer_error: my.module/_/Broken.js: Bad script: ~my.module/Broken" in (
        stderr.getvalue()
    )
    payload = json.loads(_strip_ansi(stdout.getvalue()))
    assert payload["errors"][0]["kind"] == "bad_script"
    assert set(payload["analysis"]["_"]["my.module"]["_"]) == {"Widget"}


def test_cli_007_invalid_settings_fail_fast(tmp_path: Path) -> None:
    root = _module_tree(tmp_path / "modules")
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["analyze", "--path", str(root), "--remark-marker", "@@"],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 2
    assert "Invalid settings" in stderr.getvalue()


def test_cli_008_non_archive_file_is_rejected(tmp_path: Path) -> None:
    plain = tmp_path / "modules.txt"
    _write_file(plain, "not an archive")
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(["analyze", "--path", str(plain)], stdout=stdout, stderr=stderr)

    assert exit_code == 2
    assert "Not an archive or directory" in stderr.getvalue()


def test_cli_009_exclude_and_class_home_options_apply(tmp_path: Path) -> None:
    root = tmp_path / "modules"
    _write_file(root / "my.module" / "classes" / "Widget.js", WIDGET)
    _write_file(root / "my.module" / "classes" / "legacy" / "Old.js", WIDGET)
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        [
            "analyze",
            "--path",
            str(root),
            "--format",
            "json",
            "--class-home",
            "classes",
            "--exclude",
            "**/legacy/**",
        ],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 0
    payload = json.loads(_strip_ansi(stdout.getvalue()))
    assert set(payload["analysis"]["_"]["my.module"]["_"]) == {"Widget"}
