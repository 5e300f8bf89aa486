"""Macro executors: the strategies used to expand each kind of macro call."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import Protocol

from arkfront.node import Keyword, Node, NodeType, list_node, nil_node


class MacroHost(Protocol):
    """The operations an executor needs from the macro processor."""

    def find_nearest_macro(self, name: str) -> Node | None: ...

    def register_macro(self, node: Node) -> None: ...

    def is_truthy(self, node: Node) -> bool: ...

    def evaluate(self, node: Node, is_not_body: bool) -> Node: ...

    def unify(self, mapping: dict[str, Node], target: Node, parent: Node | None, index: int) -> None: ...

    def raise_error(self, message: str, node: Node) -> None: ...

    def apply_macro(self, node: Node) -> bool: ...

    def is_predefined(self, symbol: str) -> bool: ...


def _replace(target: Node, source: Node) -> None:
    """Overwrite ``target`` in place with a copy of ``source``."""
    if target is source:
        return
    src = source.copy()
    target.node_type = src.node_type
    target.value = src.value
    target.children = src.children
    target.line = src.line
    target.col = src.col
    target.filename = src.filename


def _empty_list() -> Node:
    return Node(NodeType.LIST, children=[list_node()])


class MacroExecutor(ABC):
    """Base class for the expansion strategies of the macro processor."""

    def __init__(self, processor: MacroHost, debug: int = 0) -> None:
        self._processor = processor
        self._debug = debug

    @abstractmethod
    def can_handle(self, node: Node) -> bool:
        """Tell whether this executor knows how to expand ``node``."""

    @abstractmethod
    def apply_macro(self, node: Node) -> bool:
        """Expand ``node`` in place; return True if it was expanded."""

    def find_nearest_macro(self, name: str) -> Node | None:
        return self._processor.find_nearest_macro(name)

    def register_macro(self, node: Node) -> None:
        self._processor.register_macro(node)

    def is_truthy(self, node: Node) -> bool:
        return self._processor.is_truthy(node)

    def evaluate(self, node: Node, is_not_body: bool) -> Node:
        return self._processor.evaluate(node, is_not_body)

    def unify(self, mapping: dict[str, Node], target: Node, parent: Node | None) -> None:
        self._processor.unify(mapping, target, parent, 0)

    def raise_error(self, message: str, node: Node) -> None:
        self._processor.raise_error(message, node)

    def apply_macro_proxy(self, node: Node) -> bool:
        return self._processor.apply_macro(node)

    def is_predefined(self, symbol: str) -> bool:
        return self._processor.is_predefined(symbol)

    def _trace(self, name: str) -> None:
        if self._debug >= 3:
            print(f"Found macro for {name}", file=sys.stderr)


class SymbolExecutor(MacroExecutor):
    """Replaces a symbol bound by a value macro with that value."""

    def can_handle(self, node: Node) -> bool:
        return node.node_type is NodeType.SYMBOL

    def apply_macro(self, node: Node) -> bool:
        macro = self.find_nearest_macro(node.value)
        if macro is None:
            return False
        self._trace(node.value)
        if len(macro.children) == 2:
            _replace(node, macro.children[1])
            return True
        return False


class ConditionalExecutor(MacroExecutor):
    """Expands compile-time ``if`` macros."""

    def can_handle(self, node: Node) -> bool:
        return (
            node.node_type is NodeType.MACRO
            and bool(node.children)
            and node.children[0].node_type is NodeType.KEYWORD
        )

    def apply_macro(self, node: Node) -> bool:
        if node.children[0].value is not Keyword.IF:
            return False

        condition = self.evaluate(node.children[1].copy(), True)
        if_true = node.children[2].copy()
        has_else = len(node.children) > 3
        if_false = node.children[3].copy() if has_else else nil_node()

        if self.is_truthy(condition):
            _replace(node, if_true)
        elif has_else:
            _replace(node, if_false)
        else:
            node.children.clear()
            node.node_type = NodeType.UNUSED

        if node.node_type is NodeType.MACRO:
            self.register_macro(node)
        return True


class ListExecutor(MacroExecutor):
    """Expands calls to function-like macros and predefined macros."""

    def can_handle(self, node: Node) -> bool:
        return (
            node.node_type is NodeType.LIST
            and bool(node.children)
            and node.children[0].node_type is NodeType.SYMBOL
        )

    def apply_macro(self, node: Node) -> bool:
        first = node.children[0]
        macro = self.find_nearest_macro(first.value)

        if macro is not None:
            self._trace(first.value)
            if len(macro.children) == 2:
                self.apply_macro_proxy(first)
            elif len(macro.children) == 3:
                self._expand(node, macro)
                return True
        elif self.is_predefined(first.value):
            _replace(node, self.evaluate(node, False))
            return True
        return False

    def _expand(self, node: Node, macro: Node) -> None:
        body = macro.children[2].copy()
        params = macro.children[1].children
        bound: dict[str, Node] = {}
        extra = 0
        pos = 0

        for arg in node.children[1:]:
            if pos >= len(params):
                extra += 1
                continue
            param = params[pos]
            if param.node_type is NodeType.SYMBOL:
                bound[param.value] = arg.copy()
                pos += 1
            elif param.node_type is NodeType.SPREAD:
                # the spread is always the last parameter, so it takes the rest
                bound.setdefault(param.value, _empty_list()).append(arg.copy())

        ends_with_spread = bool(params) and params[-1].node_type is NodeType.SPREAD
        if ends_with_spread and not extra and len(bound) + 1 == len(params):
            bound[params[-1].value] = _empty_list()
        elif extra or len(bound) != len(params):
            name = macro.children[0].value
            got = len(bound) + extra
            if ends_with_spread:
                message = f"Macro `{name}' got {got} argument(s) but needed at least {len(params) - 1}"
            else:
                message = f"Macro `{name}' got {got} argument(s) but needed {len(params)}"
            self.raise_error(message, macro)

        if bound:
            self.unify(bound, body, None)

        _replace(node, self.evaluate(body, False))
        self.apply_macro_proxy(node)


class MacroExecutorPipeline:
    """Tries each executor in turn until one expands the node."""

    def __init__(self, executors: list[MacroExecutor]) -> None:
        self._executors = list(executors)

    def apply_macro(self, node: Node) -> bool:
        return any(
            executor.can_handle(node) and executor.apply_macro(node)
            for executor in self._executors
        )