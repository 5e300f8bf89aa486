"""Syntax tree optimisations applied before compilation."""

from __future__ import annotations

from collections.abc import Iterator

from arkfront.node import Keyword, Node, NodeType

FEATURE_REMOVE_UNUSED_VARS = 1 << 4

_DECLARATIONS = (Keyword.LET, Keyword.MUT)


def _global_declarations(node: Node) -> Iterator[tuple[Node, Node, int]]:
    """Yield (declaration, parent, index) for global let/mut, last first."""
    for index, child in reversed(list(enumerate(node.children))):
        if not child.children or child.children[0].node_type is not NodeType.KEYWORD:
            continue
        keyword = child.children[0].value
        if keyword is Keyword.BEGIN:
            yield from _global_declarations(child)
        elif keyword in _DECLARATIONS:
            yield child, node, index


class Optimizer:
    """Removes global variables that are declared but never used."""

    def __init__(self, options: int = 0) -> None:
        self._options = options
        self._ast = Node(NodeType.LIST)
        self._appearances: dict[str, int] = {}

    def feed(self, ast: Node) -> None:
        """Optimise a copy of ``ast``; the result is available from :meth:`ast`."""
        self._ast = ast.copy()
        if self._options & FEATURE_REMOVE_UNUSED_VARS:
            self._remove_unused()

    def ast(self) -> Node:
        return self._ast

    def _remove_unused(self) -> None:
        if self._ast.node_type is not NodeType.LIST:
            return

        self._appearances = {
            decl.children[1].value: 0 for decl, _, _ in _global_declarations(self._ast)
        }
        self._count_occurrences(self._ast)

        for decl, parent, index in list(_global_declarations(self._ast)):
            name = decl.children[1].value
            is_value = len(decl.children) > 2 and decl.children[2].node_type is not NodeType.LIST
            if self._appearances.get(name) == 1 and is_value:
                del parent.children[index]

    def _count_occurrences(self, node: Node) -> None:
        if node.node_type in (NodeType.SYMBOL, NodeType.CAPTURE):
            if node.value in self._appearances:
                self._appearances[node.value] += 1
        elif node.node_type is NodeType.LIST:
            for child in node.children:
                self._count_occurrences(child)