# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Collect remarks from the comments of a class script."""

from csa.model import Remark
from csa.settings import DEFAULT_REMARK_MARKER
from csa.syntax import ScriptTree


def is_remark_text(text: str, marker: str = DEFAULT_REMARK_MARKER) -> bool:
    """Check whether comment text is a remark.

    Args:
        text: Comment text without delimiters.
        marker: Remark marker character.

    Returns:
        True when the trimmed text is non-empty and starts with the marker.
    """
    trimmed = text.strip()
    return bool(trimmed) and trimmed.startswith(marker)


def collect_remarks(tree: ScriptTree, marker: str = DEFAULT_REMARK_MARKER) -> list[Remark]:
    """Collect marker-prefixed comments in discovery order.

    Args:
        tree: Parsed class script.
        marker: Remark marker character.

    Returns:
        Remarks with their start positions; ordinary comments are dropped.
        Remark text is kept as written, surrounding whitespace included.
    """
    return [
        Remark(text=comment.text, from_=comment.start)
        for comment in tree.comments
        if is_remark_text(comment.text, marker)
    ]
