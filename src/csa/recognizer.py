# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Recognize class scripts and classify their keyword-call declarations.

A class script holds one statement: either a bare function ``function (I, We)
{...}`` or a call ``'Super'.subclass(function (I, We) {...})``. The first
function parameter names the instance side, the second the class side. Inside
the body, calls such as ``I.have({...})`` or ``We.know({...})`` open a keyword
context whose direct object members are filed into aspect buckets.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from tree_sitter import Node

from csa.errors import BadFlagError, BadScriptError, TooManyStatementsError, class_identity
from csa.model import (
    NESTED_SEPARATOR,
    SUPER_SENTINEL,
    ClassAnalysis,
    Declaration,
    DeclarationSite,
    FixedAspect,
    FlagDeclaration,
    GenericAspect,
    Side,
)
from csa.syntax import (
    ScriptTree,
    boolean_value,
    call_arguments,
    call_callee,
    function_body,
    function_parameters,
    is_arrow_function,
    is_boolean_literal,
    is_call_expression,
    is_function_declaration,
    is_function_expression,
    is_identifier,
    is_member_expression,
    is_null_literal,
    is_object_literal,
    is_object_member,
    is_string_literal,
    member_key,
    member_object,
    member_property_name,
    member_value,
    node_text,
    same_node,
    statement_expression,
    string_value,
    unwrap_parentheses,
)

logger = logging.getLogger(__name__)

_SIDED_ASPECT_SUFFIXES: dict[str, str] = {
    "have": "Variables",
    "access": "Accessors",
    "refine": "Refinements",
}
_PACKAGE_KEYWORDS: set[str] = {"setup", "share"}


class RecognizerPhase(Enum):
    """Phases of one recognizer invocation."""

    AWAITING_CLASS = "awaiting_class"
    AWAITING_KEYWORD = "awaiting_keyword"
    KEYWORD_OPEN = "keyword_open"


@dataclass(frozen=True)
class KeywordContext:
    """Describe the currently open keyword call.

    Attributes:
        call: Keyword call node; the context closes when the walk leaves it.
        literal: Object literal argument whose direct members are declarations.
        side: Side bound to the identifier the keyword was called on.
        keyword: Keyword name, e.g. ``have`` or ``know``.
    """

    call: Node
    literal: Node
    side: Side
    keyword: str


class RecognizerState:
    """Track phase, bound sides and the open keyword of one invocation."""

    def __init__(self) -> None:
        self.phase = RecognizerPhase.AWAITING_CLASS
        self.sides: dict[str, Side] = {}
        self.keyword: KeywordContext | None = None

    def match_class(self, sides: dict[str, Side]) -> None:
        """Record the matched class shape and its side parameter names."""
        self._expect(RecognizerPhase.AWAITING_CLASS)
        self.sides = sides
        self.phase = RecognizerPhase.AWAITING_KEYWORD

    def open_keyword(self, context: KeywordContext) -> None:
        self._expect(RecognizerPhase.AWAITING_KEYWORD)
        self.keyword = context
        self.phase = RecognizerPhase.KEYWORD_OPEN

    def close_keyword(self, node: Node) -> bool:
        """Close the open keyword when ``node`` is its call node.

        Returns:
            True when the keyword context was closed.
        """
        if self.keyword is None or not same_node(self.keyword.call, node):
            return False
        self.keyword = None
        self.phase = RecognizerPhase.AWAITING_KEYWORD
        return True

    def _expect(self, phase: RecognizerPhase) -> None:
        if self.phase is not phase:
            raise RuntimeError(
                f"Invalid recognizer transition (phase={self.phase.value} expected={phase.value})"
            )


def script_sides(parameters: list[Node]) -> dict[str, Side]:
    """Bind the first two identifier parameters to instance and class side.

    Args:
        parameters: Parameter nodes of the class body function.

    Returns:
        Mapping of parameter name to side.
    """
    sides: dict[str, Side] = {}
    for index, parameter in enumerate(parameters[:2]):
        if is_identifier(parameter):
            sides[node_text(parameter)] = "class" if index else "instance"
    return sides


class ClassScriptRecognizer:
    """Build the analysis of one class from its syntax tree."""

    def __init__(self, module_name: str, class_name: str) -> None:
        """Initialize recognizer for one class identity.

        Args:
            module_name: Module that owns the class script.
            class_name: Qualified class name.
        """
        self._module_name = module_name
        self._class_name = class_name
        self._state = RecognizerState()

    @property
    def phase(self) -> RecognizerPhase:
        return self._state.phase

    def recognize(self, tree: ScriptTree) -> ClassAnalysis:
        """Recognize a top-level class script.

        Args:
            tree: Parsed class script.

        Returns:
            Analysis of the class and its nested classes.

        Raises:
            TooManyStatementsError: If the script holds more than one statement.
            BadScriptError: If the statement is not a recognized class shape.
            BadFlagError: If an ``am`` declaration is not a boolean literal.
        """
        if len(tree.statements) > 1:
            raise TooManyStatementsError(self._module_name, self._class_name)
        if not tree.statements:
            raise BadScriptError(self._module_name, self._class_name)
        statement = tree.statements[0]
        if is_function_declaration(statement):
            superclass, function = SUPER_SENTINEL, statement
        else:
            superclass, function = self._match_class_expression(
                statement_expression(statement)
            )
        analysis = ClassAnalysis(
            module_name=self._module_name, class_name=self._class_name
        )
        self._analyze_body(tree, analysis, superclass=superclass, function=function)
        return analysis

    def recognize_nested(
        self, tree: ScriptTree, value: Node, inside: Node, member: Node
    ) -> ClassAnalysis:
        """Recognize a class nested as the value of a ``nest`` member.

        Args:
            tree: Parsed class script that holds the nested class.
            value: Member value encoding the nested class.
            inside: Object literal of the open ``nest`` keyword call.
            member: Object member that declares the nested class.

        Returns:
            Analysis of the nested class with its declaration site set.
        """
        superclass, function = self._match_class_expression(unwrap_parentheses(value))
        analysis = ClassAnalysis(
            module_name=self._module_name,
            class_name=self._class_name,
            site=DeclarationSite(
                inside=tree.start_of(inside),
                from_=tree.start_of(function),
                to=tree.end_of(member),
            ),
        )
        self._analyze_body(tree, analysis, superclass=superclass, function=function)
        return analysis

    def _match_class_expression(self, expression: Node | None) -> tuple[str, Node]:
        if is_function_expression(expression):
            return SUPER_SENTINEL, expression
        if is_call_expression(expression):
            callee = call_callee(expression)
            arguments = call_arguments(expression)
            script = arguments[-1] if arguments else None
            if (
                is_member_expression(callee)
                and is_string_literal(member_object(callee))
                and member_property_name(callee) == "subclass"
                and (is_function_expression(script) or is_arrow_function(script))
            ):
                return string_value(member_object(callee)), script
        raise BadScriptError(self._module_name, self._class_name)

    def _analyze_body(
        self, tree: ScriptTree, analysis: ClassAnalysis, superclass: str, function: Node
    ) -> None:
        analysis.superclass = superclass
        analysis.from_ = tree.start_of(function)
        self._state.match_class(script_sides(function_parameters(function)))
        logger.debug(
            f"Matched class shape (class={class_identity(self._module_name, self._class_name)} "
            f"super={superclass} sides={sorted(self._state.sides)})"
        )
        body = function_body(function)
        if body is not None:
            self._scan(tree, body, analysis)

    def _scan(self, tree: ScriptTree, body: Node, analysis: ClassAnalysis) -> None:
        stack: list[tuple[Node, bool]] = [(body, False)]
        while stack:
            node, leaving = stack.pop()
            if leaving:
                self._state.close_keyword(node)
                continue
            self._enter(tree, node, analysis)
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))

    def _enter(self, tree: ScriptTree, node: Node, analysis: ClassAnalysis) -> None:
        state = self._state
        if state.phase is RecognizerPhase.AWAITING_KEYWORD:
            context = self._match_keyword_call(node)
            if context is not None:
                state.open_keyword(context)
        elif (
            state.keyword is not None
            and is_object_member(node)
            and same_node(node.parent, state.keyword.literal)
        ):
            self._classify_member(tree, node, state.keyword, analysis)

    def _match_keyword_call(self, node: Node) -> KeywordContext | None:
        if not is_call_expression(node):
            return None
        callee = call_callee(node)
        if not is_member_expression(callee):
            return None
        target = member_object(callee)
        if not is_identifier(target):
            return None
        side = self._state.sides.get(node_text(target))
        keyword = member_property_name(callee)
        arguments = call_arguments(node)
        if side is None or keyword is None or len(arguments) != 1:
            return None
        if not is_object_literal(arguments[0]):
            return None
        return KeywordContext(call=node, literal=arguments[0], side=side, keyword=keyword)

    def _classify_member(
        self,
        tree: ScriptTree,
        member: Node,
        context: KeywordContext,
        analysis: ClassAnalysis,
    ) -> None:
        name, computed = member_key(member)
        if computed or name is None:
            return
        value = member_value(member)
        keyword, side = context.keyword, context.side
        if keyword == "nest":
            analysis.nested[name] = resolve_nested_class(
                tree, analysis, name, value, inside=context.literal, member=member
            )
            return
        site = DeclarationSite(
            inside=tree.start_of(context.literal),
            from_=tree.start_of(member),
            to=tree.end_of(member),
        )
        if keyword == "am":
            if not is_boolean_literal(value):
                raise BadFlagError(name, self._module_name, self._class_name)
            declaration: Declaration = FlagDeclaration(site=site, value=boolean_value(value))
            analysis.bucket(FixedAspect("flags")).entries[name] = declaration
        elif keyword in _SIDED_ASPECT_SUFFIXES:
            aspect = FixedAspect(f"{side}{_SIDED_ASPECT_SUFFIXES[keyword]}")
            analysis.bucket(aspect).entries[name] = Declaration(site=site)
        elif keyword == "know":
            # null marks a constant whose value is supplied elsewhere
            suffix = "Constants" if is_null_literal(value) else "Methods"
            analysis.bucket(FixedAspect(f"{side}{suffix}")).entries[name] = Declaration(
                site=site
            )
        elif keyword in _PACKAGE_KEYWORDS:
            analysis.bucket(FixedAspect("package")).entries[name] = Declaration(site=site)
        else:
            analysis.bucket(GenericAspect(side=side, keyword=keyword)).entries[name] = (
                Declaration(site=site)
            )


def resolve_nested_class(
    tree: ScriptTree,
    parent: ClassAnalysis,
    member_name: str,
    value: Node,
    inside: Node,
    member: Node,
) -> ClassAnalysis:
    """Analyze a nested class with a fresh recognizer in the parent's module.

    Args:
        tree: Parsed class script that holds the nested class.
        parent: Analysis of the enclosing class.
        member_name: Name of the ``nest`` member.
        value: Member value encoding the nested class.
        inside: Object literal of the ``nest`` keyword call.
        member: Object member node.

    Returns:
        Analysis addressed as ``<parent>._.<member>``.
    """
    nested_name = f"{parent.class_name}{NESTED_SEPARATOR}{member_name}"
    recognizer = ClassScriptRecognizer(parent.module_name, nested_name)
    return recognizer.recognize_nested(tree, value, inside=inside, member=member)
