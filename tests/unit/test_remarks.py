# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for remark collection and end-to-end remark placement."""

import pytest

from csa.assembler import analyze_class_script
from csa.position import SourcePosition
from csa.remarks import collect_remarks, is_remark_text
from csa.settings import AnalysisSettings
from csa.syntax import parse_script

REMARKED_SCRIPT = "\n".join(
    [
        "//@ Widgets render themselves.",
        "'Base'.subclass(function (I, We) {",
        "  I.have({",
        "    //@ Number of renders.",
        "    count: 0,",
        "    // plain comment",
        "    label: null",
        "  });",
        "  I.know({",
        "    /*@ Render once. */",
        "    render: function () {",
        "      //@ inside the method body",
        "      return this.count;",
        "    }",
        "  });",
        "  //@ trailing remark",
        "});",
    ]
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("@ note", True),
        ("@x", True),
        ("@", True),
        (" @ note", True),
        ("\t@ tabbed ", True),
        ("   ", False),
        ("", False),
        ("note @", False),
    ],
)
def test_rmk_001_trimmed_remark_text_starts_with_marker(text: str, expected: bool) -> None:
    assert is_remark_text(text) is expected


def test_rmk_002_collects_remarks_in_document_order() -> None:
    remarks = collect_remarks(parse_script(REMARKED_SCRIPT))

    assert [remark.text for remark in remarks] == [
        "@ Widgets render themselves.",
        "@ Number of renders.",
        "@ Render once. ",
        "@ inside the method body",
        "@ trailing remark",
    ]
    assert remarks[0].from_ == SourcePosition(line=1, column=0)
    assert remarks[1].from_ == SourcePosition(line=4, column=4)


def test_rmk_003_custom_marker_selects_other_comments() -> None:
    tree = parse_script("//! custom\n//@ default\n'Base'.subclass(function (I) {});")

    remarks = collect_remarks(tree, marker="!")

    assert [remark.text for remark in remarks] == ["! custom"]


def test_rmk_004_remarks_attach_to_class_and_declarations() -> None:
    analysis = analyze_class_script("my.module", "Widget", REMARKED_SCRIPT)

    assert [remark.text for remark in analysis.remarks] == ["@ Widgets render themselves."]
    variables = analysis.fixed("instanceVariables").entries
    assert [remark.text for remark in variables["count"].remarks] == ["@ Number of renders."]
    assert variables["label"].remarks == []
    methods = analysis.fixed("instanceMethods").entries
    assert [remark.text for remark in methods["render"].remarks] == ["@ Render once. "]


def test_rmk_005_remarks_serialize_with_text_and_start() -> None:
    tree = analyze_class_script("my.module", "Widget", REMARKED_SCRIPT).to_tree()

    count = tree["instanceVariables"]["_"]["count"]
    assert count["remarks"] == [{"text": "@ Number of renders.", "from": {"line": 4, "column": 4}}]
    assert "remarks" not in tree["instanceVariables"]["_"]["label"]


def test_rmk_006_settings_marker_applies_to_analysis() -> None:
    source = "//! About widgets.\n'Base'.subclass(function (I) {});"

    default = analyze_class_script("my.module", "Widget", source)
    custom = analyze_class_script(
        "my.module", "Widget", source, AnalysisSettings(remark_marker="!")
    )

    assert default.remarks == []
    assert [remark.text for remark in custom.remarks] == ["! About widgets."]


def test_rmk_007_spaced_remarks_attach_with_text_kept() -> None:
    source = "\n".join(
        [
            "// @ About widgets.",
            "'Base'.subclass(function (I) {",
            "  I.have({",
            "    // @ the count",
            "    count: 0,",
            "    /* @ the label */",
            "    label: null",
            "  });",
            "});",
        ]
    )

    analysis = analyze_class_script("my.module", "Widget", source)

    assert [remark.text for remark in analysis.remarks] == [" @ About widgets."]
    variables = analysis.fixed("instanceVariables").entries
    assert [remark.text for remark in variables["count"].remarks] == [" @ the count"]
    assert [remark.text for remark in variables["label"].remarks] == [" @ the label "]


def test_rmk_008_columns_count_characters_not_bytes() -> None:
    source = "\n".join(
        [
            "'Bäse'.subclass(function (I) {",
            "  I.have({ /*@ größe */ size: 0 });",
            "});",
        ]
    )

    analysis = analyze_class_script("my.module", "Widget", source)

    assert analysis.from_ == SourcePosition(line=1, column=16)
    size = analysis.fixed("instanceVariables").entries["size"]
    assert size.remarks[0].from_ == SourcePosition(line=2, column=11)
    assert size.site.from_ == SourcePosition(line=2, column=24)
