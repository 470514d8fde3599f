# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Locate and read class scripts from module archives and directories.

Class scripts live at ``<module>/<class home>/<path>.js`` where the module
name contains a dot after its first character. The class name is the path
below the class home with separators replaced by dots.
"""

import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path

import pathspec

from csa.errors import ScriptSourceError
from csa.settings import CLASS_SCRIPT_SUFFIX, AnalysisSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassScript:
    """Represent the source of one class script.

    Attributes:
        module_name: Module that owns the script.
        class_name: Dotted class name derived from the script path.
        source: Script source text.
        path: Archive member or directory-relative POSIX path.
    """

    module_name: str
    class_name: str
    source: str
    path: str


class ScriptSelector:
    """Match member paths against the class script convention."""

    def __init__(self, settings: AnalysisSettings) -> None:
        """Initialize selector.

        Args:
            settings: Class home and exclude patterns.
        """
        self._class_home = settings.class_home
        self._include = pathspec.GitIgnoreSpec.from_lines(
            [f"*.*/{settings.class_home}/**/*{CLASS_SCRIPT_SUFFIX}"]
        )
        self._exclude = pathspec.GitIgnoreSpec.from_lines(list(settings.exclude))

    def match(self, path: str) -> tuple[str, str] | None:
        """Resolve module and class name of a class script path.

        Args:
            path: Archive member or relative file path.

        Returns:
            Tuple of module name and class name, or ``None`` when the path is
            not a class script.
        """
        normalized = path.replace("\\", "/").lstrip("/")
        if not self._include.match_file(normalized):
            return None
        if self._exclude.match_file(normalized):
            logger.debug(f"Excluded class script (path={normalized})")
            return None
        module_name, _, rest = normalized.partition("/")
        if module_name.find(".") <= 0:
            return None
        class_path = rest[len(self._class_home) + 1 : -len(CLASS_SCRIPT_SUFFIX)]
        if not class_path:
            return None
        return module_name, class_path.replace("/", ".")


def read_scripts(path: Path, settings: AnalysisSettings) -> list[ClassScript]:
    """Read class scripts from a zip archive or an unpacked directory.

    Args:
        path: Archive file or directory.
        settings: Analysis settings.

    Returns:
        Class scripts sorted by path.

    Raises:
        ScriptSourceError: If the path is neither or cannot be read.
    """
    if path.is_dir():
        return read_directory_scripts(path, settings)
    if path.is_file() and zipfile.is_zipfile(path):
        return read_archive_scripts(path, settings)
    raise ScriptSourceError(f"Not an archive or directory: {path}")


def read_archive_scripts(archive_path: Path, settings: AnalysisSettings) -> list[ClassScript]:
    """Read class scripts from a zip archive.

    Args:
        archive_path: Zip archive path.
        settings: Analysis settings.

    Returns:
        Class scripts sorted by member path.

    Raises:
        ScriptSourceError: If the archive or a member cannot be read.
    """
    selector = ScriptSelector(settings)
    scripts: list[ClassScript] = []
    try:
        with zipfile.ZipFile(archive_path) as archive:
            for info in sorted(archive.infolist(), key=lambda item: item.filename):
                if info.is_dir():
                    continue
                identity = selector.match(info.filename)
                if identity is None:
                    continue
                source = _decode(archive.read(info), info.filename)
                scripts.append(
                    ClassScript(
                        module_name=identity[0],
                        class_name=identity[1],
                        source=source,
                        path=info.filename,
                    )
                )
    except (OSError, zipfile.BadZipFile) as exc:
        raise ScriptSourceError(f"Failed to read archive {archive_path}: {exc}") from exc
    logger.info(f"Read class scripts from archive (path={archive_path} scripts={len(scripts)})")
    return scripts


def read_directory_scripts(root_path: Path, settings: AnalysisSettings) -> list[ClassScript]:
    """Read class scripts from a directory laid out like a module archive.

    Args:
        root_path: Directory holding module directories.
        settings: Analysis settings.

    Returns:
        Class scripts sorted by relative path.

    Raises:
        ScriptSourceError: If a class script cannot be read.
    """
    selector = ScriptSelector(settings)
    scripts: list[ClassScript] = []
    for file_path in sorted(root_path.rglob(f"*{CLASS_SCRIPT_SUFFIX}")):
        if not file_path.is_file():
            continue
        relative = file_path.relative_to(root_path).as_posix()
        identity = selector.match(relative)
        if identity is None:
            continue
        try:
            raw = file_path.read_bytes()
        except OSError as exc:
            raise ScriptSourceError(f"Failed to read class script {relative}: {exc}") from exc
        scripts.append(
            ClassScript(
                module_name=identity[0],
                class_name=identity[1],
                source=_decode(raw, relative),
                path=relative,
            )
        )
    logger.info(f"Read class scripts from directory (path={root_path} scripts={len(scripts)})")
    return scripts


def _decode(raw: bytes, path: str) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ScriptSourceError(f"Class script is not UTF-8: {path}") from exc
