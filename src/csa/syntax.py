# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Syntax tree provider for class scripts backed by tree-sitter.

The recognizer only talks to the helpers in this module, so node kinds and
field names of the JavaScript grammar stay in one place. Positions use 1-based
lines and 0-based columns counted in UTF-16 code units, the way JavaScript
indexes strings, for nodes and comments alike.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

import tree_sitter_javascript as tsjavascript
from tree_sitter import Language, Node, Parser

from csa.position import SourcePosition

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tsjavascript.language())

_COMMENT = "comment"
_SKIPPED_TOP_LEVEL: set[str] = {_COMMENT, "hash_bang_line"}
_FUNCTION_EXPRESSIONS: set[str] = {"function_expression", "function"}
_MEMBER_NODES: set[str] = {"pair", "method_definition", "shorthand_property_identifier"}
_SIMPLE_ESCAPES: dict[str, str] = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}
_LINE_CONTINUATIONS: tuple[str, ...] = ("\r\n", "\n", "\r", "\u2028", "\u2029")


@dataclass(frozen=True)
class SourceComment:
    """Represent one comment of a parsed script.

    Attributes:
        text: Comment text without its delimiters.
        start: Position of the comment opener.
        end: Position after the comment.
    """

    text: str
    start: SourcePosition
    end: SourcePosition


@dataclass(frozen=True)
class ScriptTree:
    """Represent one parsed class script.

    Attributes:
        root: Program node.
        statements: Top-level statements after the directive prologue.
        comments: All comments in document order.
        lines: UTF-8 encoded source lines, used to turn byte columns into
            character columns.
    """

    root: Node
    statements: list[Node]
    comments: list[SourceComment]
    lines: tuple[bytes, ...]

    def start_of(self, node: Node) -> SourcePosition:
        return self.position(node.start_point)

    def end_of(self, node: Node) -> SourcePosition:
        return self.position(node.end_point)

    def position(self, point: tuple[int, int]) -> SourcePosition:
        """Convert a tree-sitter point into a source position.

        Args:
            point: Zero-based row and byte column.

        Returns:
            Position with a 1-based line and a UTF-16 code unit column.
        """
        row, column = point
        prefix = self.lines[row][:column] if row < len(self.lines) else b""
        text = prefix.decode("utf-8", errors="replace")
        return SourcePosition(line=row + 1, column=len(text.encode("utf-16-le")) // 2)


class SyntaxParseError(ValueError):
    """Represent source text the JavaScript grammar rejects."""

    def __init__(self, line: int) -> None:
        self.line = line
        super().__init__(f"Unparsable source near line {line}")


def parse_script(source: str) -> ScriptTree:
    """Parse class script source into a syntax tree.

    Args:
        source: Script source text.

    Returns:
        Parsed script tree with statements and comments.

    Raises:
        SyntaxParseError: If the grammar reports error or missing nodes.
    """
    encoded = source.encode("utf-8")
    parser = Parser(JS_LANGUAGE)
    tree = parser.parse(encoded)
    root = tree.root_node
    if root.has_error:
        raise SyntaxParseError(line=_first_error_line(root))
    statements = [
        child for child in root.named_children if child.type not in _SKIPPED_TOP_LEVEL
    ]
    while statements and _is_directive(statements[0]):
        statements.pop(0)
    script = ScriptTree(
        root=root,
        statements=statements,
        comments=[],
        lines=tuple(encoded.split(b"\n")),
    )
    script.comments.extend(
        SourceComment(
            text=_strip_comment_delimiters(node_text(node)),
            start=script.start_of(node),
            end=script.end_of(node),
        )
        for node in iter_nodes(root)
        if node.type == _COMMENT
    )
    return script


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def node_text(node: Node) -> str:
    return (node.text or b"").decode("utf-8")


def same_node(lhs: Node | None, rhs: Node | None) -> bool:
    """Check node identity within one tree."""
    if lhs is None or rhs is None:
        return False
    return lhs.id == rhs.id


def is_string_literal(node: Node | None) -> bool:
    return node is not None and node.type == "string"


def string_value(node: Node) -> str:
    """Return the value of a string literal with escape sequences decoded.

    Args:
        node: String literal node.

    Returns:
        Literal value, e.g. ``My'Base`` for ``'My\\'Base'``.
    """
    parts: list[str] = []
    for child in node.named_children:
        if child.type == "escape_sequence":
            parts.append(decode_escape(node_text(child)))
        elif child.type != _COMMENT:
            parts.append(node_text(child))
    # surrogate pairs decode to one code point
    return "".join(parts).encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")


def decode_escape(sequence: str) -> str:
    """Decode one JavaScript string escape sequence such as ``\\n`` or ``\\u{1F600}``."""
    body = sequence[1:]
    if not body:
        return ""
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    if body.startswith(_LINE_CONTINUATIONS):
        return ""
    if body[0] == "x" and len(body) == 3:
        return chr(int(body[1:], 16))
    if body[0] == "u" and len(body) > 1:
        return chr(int(body[1:].strip("{}"), 16))
    if body.isdigit() and set(body) <= set("01234567"):
        return chr(int(body, 8))
    return body


def is_identifier(node: Node | None) -> bool:
    return node is not None and node.type == "identifier"


def is_member_expression(node: Node | None) -> bool:
    return node is not None and node.type == "member_expression"


def is_call_expression(node: Node | None) -> bool:
    return node is not None and node.type == "call_expression"


def is_object_literal(node: Node | None) -> bool:
    return node is not None and node.type == "object"


def is_boolean_literal(node: Node | None) -> bool:
    return node is not None and node.type in {"true", "false"}


def boolean_value(node: Node) -> bool:
    return node.type == "true"


def is_null_literal(node: Node | None) -> bool:
    return node is not None and node.type == "null"


def is_function_expression(node: Node | None) -> bool:
    return node is not None and node.type in _FUNCTION_EXPRESSIONS


def is_arrow_function(node: Node | None) -> bool:
    return node is not None and node.type == "arrow_function"


def is_function_declaration(node: Node | None) -> bool:
    return node is not None and node.type == "function_declaration"


def statement_expression(statement: Node) -> Node | None:
    """Return the expression of an expression statement, parentheses removed."""
    if statement.type != "expression_statement":
        return None
    return unwrap_parentheses(_first_named(statement))


def unwrap_parentheses(node: Node | None) -> Node | None:
    while node is not None and node.type == "parenthesized_expression":
        node = _first_named(node)
    return node


def call_callee(node: Node) -> Node | None:
    return node.child_by_field_name("function")


def call_arguments(node: Node) -> list[Node]:
    """Return the argument nodes of a call expression, comments excluded."""
    arguments = node.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return []
    return [child for child in arguments.named_children if child.type != _COMMENT]


def member_object(node: Node) -> Node | None:
    return node.child_by_field_name("object")


def member_property_name(node: Node) -> str | None:
    prop = node.child_by_field_name("property")
    if prop is None:
        return None
    return node_text(prop)


def function_parameters(node: Node) -> list[Node]:
    """Return the declared parameters of a function-like node."""
    single = node.child_by_field_name("parameter")
    if single is not None:
        return [single]
    params = node.child_by_field_name("parameters")
    if params is None:
        return []
    return [child for child in params.named_children if child.type != _COMMENT]


def function_body(node: Node) -> Node | None:
    return node.child_by_field_name("body")


def object_members(node: Node) -> list[Node]:
    """Return direct property and method members of an object literal."""
    return [child for child in node.named_children if child.type in _MEMBER_NODES]


def is_object_member(node: Node) -> bool:
    return node.type in _MEMBER_NODES


def member_key(member: Node) -> tuple[str | None, bool]:
    """Resolve the key of an object member.

    Args:
        member: Pair, method or shorthand member node.

    Returns:
        Tuple of key name and whether the key is computed. The name is
        ``None`` for computed keys.
    """
    if member.type == "shorthand_property_identifier":
        return node_text(member), False
    key = member.child_by_field_name("key" if member.type == "pair" else "name")
    if key is None:
        return None, False
    if key.type == "computed_property_name":
        return None, True
    if is_string_literal(key):
        return string_value(key), False
    return node_text(key), False


def member_value(member: Node) -> Node:
    """Return the value node of an object member.

    Method and shorthand members are their own value.
    """
    if member.type == "pair":
        value = member.child_by_field_name("value")
        if value is not None:
            return value
    return member


def _first_named(node: Node) -> Node | None:
    for child in node.named_children:
        if child.type != _COMMENT:
            return child
    return None


def _is_directive(statement: Node) -> bool:
    expression = _first_named(statement) if statement.type == "expression_statement" else None
    return is_string_literal(expression)


def _strip_comment_delimiters(text: str) -> str:
    if text.startswith("//"):
        return text[2:]
    if text.startswith("/*"):
        return text[2:-2] if text.endswith("*/") and len(text) >= 4 else text[2:]
    return text


def _first_error_line(root: Node) -> int:
    for node in iter_nodes(root):
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
    return 1
