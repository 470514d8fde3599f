# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Analysis tree of class scripts."""

from dataclasses import dataclass, field
from typing import Any, Literal

from csa.position import SourcePosition

Side = Literal["instance", "class"]

SUPER_SENTINEL = "super"
NESTED_SEPARATOR = "._."

FIXED_ASPECT_NAMES: tuple[str, ...] = (
    "instanceVariables",
    "classVariables",
    "instanceAccessors",
    "classAccessors",
    "instanceMethods",
    "classMethods",
    "instanceConstants",
    "classConstants",
    "instanceRefinements",
    "classRefinements",
    "flags",
    "package",
)


@dataclass(frozen=True)
class DeclarationSite:
    """Locate one declaration inside a keyword call.

    Attributes:
        inside: Start of the object literal passed to the keyword call.
        from_: Start of the declaration.
        to: End of the declaration.
    """

    inside: SourcePosition
    from_: SourcePosition
    to: SourcePosition

    def to_tree(self) -> dict[str, Any]:
        return {
            "inside": self.inside.to_tree(),
            "from": self.from_.to_tree(),
            "to": self.to.to_tree(),
        }


@dataclass(frozen=True)
class Remark:
    """Represent a documentation comment.

    Attributes:
        text: Comment text without delimiters, marker included.
        from_: Start of the comment.
    """

    text: str
    from_: SourcePosition

    def to_tree(self) -> dict[str, Any]:
        return {"text": self.text, "from": self.from_.to_tree()}


@dataclass
class Declaration:
    """Represent one declared member of a class.

    Attributes:
        site: Where the member was declared.
        remarks: Remarks attached by the attachment engine.
    """

    site: DeclarationSite
    remarks: list[Remark] = field(default_factory=list)

    def to_tree(self) -> dict[str, Any]:
        tree = self.site.to_tree()
        if self.remarks:
            tree["remarks"] = [remark.to_tree() for remark in self.remarks]
        return tree


@dataclass
class FlagDeclaration(Declaration):
    """Represent a boolean flag declared with ``am``."""

    value: bool = False

    def to_tree(self) -> dict[str, Any]:
        tree = super().to_tree()
        tree["value"] = self.value
        return tree


@dataclass(frozen=True)
class FixedAspect:
    """Aspect with a name from the fixed vocabulary."""

    name: str

    def __post_init__(self) -> None:
        if self.name not in FIXED_ASPECT_NAMES:
            raise ValueError(f"Unknown fixed aspect: {self.name}")


@dataclass(frozen=True)
class GenericAspect:
    """Aspect of a keyword outside the fixed vocabulary."""

    side: Side
    keyword: str


Aspect = FixedAspect | GenericAspect


@dataclass
class AspectBucket:
    """Named collection of declarations of one aspect."""

    entries: dict[str, Declaration] = field(default_factory=dict)

    def to_tree(self) -> dict[str, Any]:
        return {"_": {name: entry.to_tree() for name, entry in self.entries.items()}}


@dataclass
class ClassAnalysis:
    """Represent the analysis of one, possibly nested, class.

    Attributes:
        module_name: Module that owns the class script.
        class_name: Qualified class name.
        superclass: Superclass name, or ``"super"`` for the bare function form.
        from_: Start of the function that encodes the class body.
        site: Declaration site within the parent; set for nested classes only.
        aspects: Declaration buckets keyed by aspect.
        nested: Nested classes keyed by member name.
        remarks: Remarks attached to the class itself.
    """

    module_name: str
    class_name: str
    superclass: str | None = None
    from_: SourcePosition | None = None
    site: DeclarationSite | None = None
    aspects: dict[Aspect, AspectBucket] = field(default_factory=dict)
    nested: dict[str, "ClassAnalysis"] = field(default_factory=dict)
    remarks: list[Remark] = field(default_factory=list)

    def bucket(self, aspect: Aspect) -> AspectBucket:
        """Return the bucket of an aspect, creating it on first use."""
        existing = self.aspects.get(aspect)
        if existing is None:
            existing = self.aspects[aspect] = AspectBucket()
        return existing

    def fixed(self, name: str) -> AspectBucket | None:
        return self.aspects.get(FixedAspect(name))

    def generic(self, side: Side, keyword: str) -> AspectBucket | None:
        return self.aspects.get(GenericAspect(side=side, keyword=keyword))

    def to_tree(self) -> dict[str, Any]:
        """Render the analysis as plain mappings for serialization.

        Fixed aspects render under their own name, generic aspects under
        ``instance``/``class`` keyed by keyword, nested classes under
        ``nested``. Every collection uses the ``{"_": {...}}`` wrapper.
        """
        tree: dict[str, Any] = self.site.to_tree() if self.site is not None else {}
        tree["super"] = self.superclass
        if self.from_ is not None:
            tree["from"] = self.from_.to_tree()
        if self.remarks:
            tree["remarks"] = [remark.to_tree() for remark in self.remarks]
        for aspect, bucket in self.aspects.items():
            if isinstance(aspect, FixedAspect):
                tree[aspect.name] = bucket.to_tree()
            else:
                side_tree = tree.setdefault(aspect.side, {"_": {}})
                side_tree["_"][aspect.keyword] = bucket.to_tree()
        if self.nested:
            tree["nested"] = {
                "_": {name: child.to_tree() for name, child in self.nested.items()}
            }
        return tree


@dataclass
class ModuleAnalysis:
    """Class analyses of one module keyed by class name."""

    module_name: str
    classes: dict[str, ClassAnalysis] = field(default_factory=dict)

    def to_tree(self) -> dict[str, Any]:
        return {"_": {name: analysis.to_tree() for name, analysis in self.classes.items()}}


@dataclass
class ArchiveAnalysis:
    """Module analyses of one archive keyed by module name."""

    modules: dict[str, ModuleAnalysis] = field(default_factory=dict)

    def to_tree(self) -> dict[str, Any]:
        return {"_": {name: module.to_tree() for name, module in self.modules.items()}}
