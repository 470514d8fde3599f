# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Attach remarks to the declarations they document.

Attachment is purely positional. Every bucket of every class is merged
against the full sorted remark list on its own; a remark documents an entry
when it lies between the start of the entry's object literal (or the end of
the previous entry) and the start of the entry itself.
"""

import logging
from collections.abc import Iterable, Sequence

from csa.model import ClassAnalysis, Declaration, DeclarationSite, Remark

logger = logging.getLogger(__name__)


def attach_remarks(remarks: Sequence[Remark], analysis: ClassAnalysis) -> None:
    """Attach remarks to a root class analysis in place.

    Args:
        remarks: Remarks of the class script in discovery order.
        analysis: Root class analysis with nested classes already resolved.
    """
    if not remarks:
        return
    class_remarks: list[Remark] = []
    if analysis.from_ is not None:
        for remark in remarks:
            if not remark.from_ < analysis.from_:
                break
            class_remarks.append(remark)
    if class_remarks:
        analysis.remarks = class_remarks
    _place_class_remarks(sorted(remarks, key=lambda remark: remark.from_), analysis)
    logger.debug(
        f"Placed remarks (class={analysis.class_name} remarks={len(remarks)} "
        f"class_remarks={len(class_remarks)})"
    )


def _place_class_remarks(sorted_remarks: list[Remark], analysis: ClassAnalysis) -> None:
    for bucket in analysis.aspects.values():
        place_remarks(sorted_remarks, bucket.entries.values())
    if analysis.nested:
        for nested in analysis.nested.values():
            _place_class_remarks(sorted_remarks, nested)
        place_remarks(sorted_remarks, analysis.nested.values())


def place_remarks(
    sorted_remarks: Sequence[Remark],
    entries: Iterable[Declaration | ClassAnalysis],
) -> None:
    """Merge sorted remarks against the entries of one bucket.

    Args:
        sorted_remarks: All remarks of the script, sorted by position.
        entries: Declarations or nested classes of one bucket.
    """
    placed: list[tuple[DeclarationSite, list[Remark]]] = sorted(
        ((entry.site, entry.remarks) for entry in entries if entry.site is not None),
        key=lambda item: item[0].from_,
    )
    # either run out of remarks or run out of entries
    i, j = 0, 0
    while i < len(sorted_remarks) and j < len(placed):
        position = sorted_remarks[i].from_
        site, entry_remarks = placed[j]
        if position < site.inside:
            i += 1
        elif position < site.from_:
            entry_remarks.append(sorted_remarks[i])
            i += 1
        elif position < site.to:
            # inside the entry itself
            i += 1
        else:
            j += 1
