"""Syntax tree nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

NO_NAME_FILE = "FILE"


class NodeType(Enum):
    SYMBOL = auto()
    CAPTURE = auto()
    GET_FIELD = auto()
    KEYWORD = auto()
    STRING = auto()
    NUMBER = auto()
    LIST = auto()
    CLOSURE = auto()
    MACRO = auto()
    SPREAD = auto()
    UNUSED = auto()


class Keyword(Enum):
    FUN = "Fun"
    LET = "Let"
    MUT = "Mut"
    SET = "Set"
    IF = "If"
    WHILE = "While"
    BEGIN = "Begin"
    IMPORT = "Import"
    QUOTE = "Quote"
    DEL = "Del"


NodeValue = Union[str, float, Keyword, None]

_PREFIXED = {
    NodeType.SYMBOL: "(Symbol) ",
    NodeType.CAPTURE: "(Capture) ",
    NodeType.GET_FIELD: "(GetField) ",
    NodeType.SPREAD: "(Spread) ",
}

_ORDERED_VALUES = {
    NodeType.SYMBOL,
    NodeType.CAPTURE,
    NodeType.GET_FIELD,
    NodeType.STRING,
    NodeType.NUMBER,
    NodeType.SPREAD,
}


@dataclass(eq=False)
class Node:
    """A node of the syntax tree: a typed value with optional children."""

    node_type: NodeType
    value: NodeValue = None
    children: list[Node] = field(default_factory=list)
    line: int = 0
    col: int = 0
    filename: str = NO_NAME_FILE

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.node_type is NodeType.NUMBER and isinstance(self.value, int):
            self.value = float(self.value)

    def append(self, node: Node) -> None:
        self.children.append(node)

    def set_pos(self, line: int, col: int) -> None:
        self.line = line
        self.col = col

    def copy(self) -> Node:
        """Return a deep copy of this node and its children."""
        return Node(
            self.node_type,
            self.value,
            [child.copy() for child in self.children],
            self.line,
            self.col,
            self.filename,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return (
            self.node_type is other.node_type
            and self.value == other.value
            and self.children == other.children
        )

    def __lt__(self, other: Node) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        if self.node_type is not other.node_type:
            return self.node_type.value < other.node_type.value
        if self.node_type in _ORDERED_VALUES:
            return self.value < other.value  # type: ignore[operator]
        if self.node_type in (NodeType.LIST, NodeType.MACRO):
            return self.children < other.children
        return False

    def __str__(self) -> str:
        kind = self.node_type
        if kind is NodeType.STRING:
            return f'"{self.value}"'
        if kind in _PREFIXED:
            return f"{_PREFIXED[kind]}{self.value}"
        if kind is NodeType.NUMBER:
            return f"{self.value:g}"
        if kind is NodeType.LIST:
            return "( " + "".join(f"{child} " for child in self.children) + ")"
        if kind is NodeType.MACRO:
            return "( Macro " + "".join(f"{child} " for child in self.children) + ")"
        if kind is NodeType.CLOSURE:
            return "Closure"
        if kind is NodeType.KEYWORD:
            return self.value.value  # type: ignore[union-attr]
        if kind is NodeType.UNUSED:
            return "(Unused)"
        return "~\\._./~"


def true_node() -> Node:
    return Node(NodeType.SYMBOL, "true")


def false_node() -> Node:
    return Node(NodeType.SYMBOL, "false")


def nil_node() -> Node:
    return Node(NodeType.SYMBOL, "nil")


def list_node() -> Node:
    return Node(NodeType.SYMBOL, "list")


def format_node_list(nodes) -> str:
    """Format a sequence of nodes the way a list node is printed."""
    return "( " + "".join(f"{node} " for node in nodes) + ")"