# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Analysis settings shared by the source reader and the analyzer."""

from dataclasses import dataclass

DEFAULT_CLASS_HOME = "_"
DEFAULT_REMARK_MARKER = "@"
CLASS_SCRIPT_SUFFIX = ".js"


@dataclass(frozen=True)
class AnalysisSettings:
    """Describe how class scripts are located and documented.

    Attributes:
        class_home: Directory below each module that holds class scripts.
        remark_marker: Character that turns a comment into a remark.
        exclude: Gitignore-style patterns of class script paths to skip.
    """

    class_home: str = DEFAULT_CLASS_HOME
    remark_marker: str = DEFAULT_REMARK_MARKER
    exclude: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.class_home or "/" in self.class_home:
            raise ValueError(f"class_home must be one directory name: {self.class_home!r}")
        if len(self.remark_marker) != 1 or self.remark_marker.isspace():
            raise ValueError(
                f"remark_marker must be one visible character: {self.remark_marker!r}"
            )
