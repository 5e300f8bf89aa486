"""Compile-time macro processing of the syntax tree."""

from __future__ import annotations

import math
import operator
from collections.abc import Callable
from dataclasses import dataclass, field

from arkfront.errors import MacroProcessingError
from arkfront.executors import (
    ConditionalExecutor,
    ListExecutor,
    MacroExecutorPipeline,
    SymbolExecutor,
)
from arkfront.node import (
    Keyword,
    Node,
    NodeType,
    false_node,
    list_node,
    nil_node,
    true_node,
)

PREDEFINED_MACROS = frozenset({"symcat", "argcount"})

_CONSTANT_SYMBOLS = frozenset({"true", "false", "nil", "list"})
_NOT_CONSTANT = (NodeType.CAPTURE, NodeType.GET_FIELD, NodeType.CLOSURE)
_FUNCTION_BINDERS = (Keyword.LET, Keyword.MUT, Keyword.SET)

_TYPE_NAMES = {
    NodeType.SYMBOL: "Symbol",
    NodeType.CAPTURE: "Capture",
    NodeType.GET_FIELD: "GetField",
    NodeType.KEYWORD: "Keyword",
    NodeType.STRING: "String",
    NodeType.NUMBER: "Number",
    NodeType.LIST: "List",
    NodeType.CLOSURE: "Closure",
    NodeType.MACRO: "Macro",
    NodeType.SPREAD: "Spread",
    NodeType.UNUSED: "Unused",
}


def _divide(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


_COMPARATORS: dict[str, Callable[[Node, Node], bool]] = {
    "=": lambda a, b: a == b,
    "!=": lambda a, b: not a == b,
    "<": lambda a, b: a < b,
    ">": lambda a, b: not a < b and not a == b,
    "<=": lambda a, b: a < b or a == b,
    ">=": lambda a, b: not a < b,
}

_OPERATIONS: dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": _divide,
}


@dataclass
class _Scope:
    depth: int
    macros: dict[str, Node] = field(default_factory=dict)


def _assign(target: Node, source: Node) -> None:
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


def _type_name(node: Node) -> str:
    return _TYPE_NAMES.get(node.node_type, "???")


def _is_begin(node: Node) -> bool:
    return (
        node.node_type is NodeType.LIST
        and bool(node.children)
        and node.children[0].node_type is NodeType.KEYWORD
        and node.children[0].value is Keyword.BEGIN
    )


def _remove_begin(node: Node, index: int) -> int:
    """Splice the begin block at ``index`` into ``node``.

    Return the index of the last spliced element.
    """
    block = node.children[index]
    if node.node_type is not NodeType.LIST or not _is_begin(block):
        return index
    node.children[index:index + 1] = block.children[1:]
    return index + len(block.children) - 2


class MacroProcessor:
    """Registers macros found in a syntax tree and expands their uses."""

    def __init__(self, debug: int = 0, options: int = 0) -> None:
        self._debug = debug
        self._options = options
        self._ast = Node(NodeType.LIST)
        self._scopes: list[_Scope] = []
        self._defined_functions: dict[object, Node] = {}
        self._pipeline = MacroExecutorPipeline([
            SymbolExecutor(self),
            ConditionalExecutor(self),
            ListExecutor(self),
        ])

    def feed(self, ast: Node) -> None:
        """Expand the macros of a copy of ``ast``; see :meth:`ast`."""
        if self._debug >= 2:
            print("Processing macros...")
        self._ast = ast.copy()
        self.process(self._ast, 0)
        if self._debug >= 3:
            print("(MacroProcessor) AST after processing macros")
            print(self._ast)

    def ast(self) -> Node:
        return self._ast

    # ------------------------------------------------------------------
    # macro scopes

    def _current_scope(self) -> _Scope:
        if not self._scopes:
            self._scopes.append(_Scope(0))
        return self._scopes[-1]

    def find_nearest_macro(self, name: str) -> Node | None:
        """Return the innermost macro called ``name``, if any."""
        for scope in reversed(self._scopes):
            found = scope.macros.get(name)
            if found is not None:
                return found
        return None

    def delete_nearest_macro(self, name: str) -> None:
        """Forget the innermost macro called ``name``."""
        for scope in reversed(self._scopes):
            if name in scope.macros:
                del scope.macros[name]
                return

    def is_predefined(self, symbol: str) -> bool:
        return symbol in PREDEFINED_MACROS

    def raise_error(self, message: str, node: Node) -> None:
        raise MacroProcessingError(message, node)

    # ------------------------------------------------------------------
    # registration

    def register_macro(self, node: Node) -> None:
        """Register the macro definition ``node`` in the current scope."""
        children = node.children
        if len(children) < 2:
            self.raise_error("invalid macro, missing value", node)

        first, second = children[0], children[1]

        if len(children) == 2:
            if first.node_type is not NodeType.SYMBOL:
                self.raise_error("can not define a macro without a symbol", first)
            if first.value != "undef":
                self._current_scope().macros[first.value] = node.copy()
            elif second.node_type is NodeType.SYMBOL:
                self.delete_nearest_macro(second.value)
            else:
                self.raise_error("can not undefine a macro without it's name", second)
            return

        if len(children) == 3 and first.node_type is NodeType.SYMBOL:
            if second.node_type is not NodeType.LIST:
                self.raise_error("invalid macro argument's list", second)
            self._check_parameters(second)
            self._current_scope().macros[first.value] = node.copy()
            return

        if len(children) in (3, 4) and first.node_type is NodeType.KEYWORD:
            if first.value is Keyword.IF:
                self.apply_macro(node)
                return
            self.raise_error("the only authorized keyword in macros is `if'", first)

        self.raise_error("unrecognized macro form", node)

    def _check_parameters(self, params: Node) -> None:
        had_spread = False
        for param in params.children:
            if param.node_type is NodeType.SPREAD:
                if had_spread:
                    self.raise_error("got another spread argument, only one is allowed", param)
                had_spread = True
            elif param.node_type is not NodeType.SYMBOL:
                self.raise_error("invalid macro argument's list, expected symbols", param)
            elif had_spread:
                self.raise_error(
                    "got another argument after a spread argument, which is invalid", param
                )

    def _register_func_def(self, node: Node) -> None:
        if node.node_type is not NodeType.LIST or not node.children:
            return
        head = node.children[0]
        if head.node_type is not NodeType.KEYWORD or head.value not in _FUNCTION_BINDERS:
            return
        if len(node.children) < 3:
            return
        inner = node.children[2]
        if inner.node_type is not NodeType.LIST or len(inner.children) < 2:
            return
        if inner.children[0].node_type is NodeType.KEYWORD and inner.children[0].value is Keyword.FUN:
            self._defined_functions[node.children[1].value] = inner.children[1].copy()

    # ------------------------------------------------------------------
    # tree walking

    def process(self, node: Node, depth: int) -> None:
        """Register and expand the macros found under ``node``."""
        if node.node_type is not NodeType.LIST:
            return

        has_created = False
        self._register_func_def(node)

        i = 0
        while i < len(node.children):
            child = node.children[i]
            if child.node_type is NodeType.MACRO:
                if (self._scopes and self._scopes[-1].depth < depth) or not has_created:
                    has_created = True
                    self._scopes.append(_Scope(depth))

                had = _is_begin(child)
                self.register_macro(child)
                if _is_begin(child) and not had:
                    _remove_begin(node, i)
                elif child.node_type in (NodeType.MACRO, NodeType.UNUSED):
                    del node.children[i]
                continue

            added_begin = False
            if self._scopes:
                had = _is_begin(child)
                applied = self.apply_macro(child)
                if child.node_type is NodeType.UNUSED:
                    del node.children[i]
                    continue
                if applied:
                    self._recur_apply(child)
                added_begin = _is_begin(child) and not had

            self.process(child, depth + 1)
            self._register_func_def(child)

            if added_begin:
                i = _remove_begin(node, i)
            i += 1

        if self._scopes and self._scopes[-1].depth == depth:
            self._scopes.pop()

    def apply_macro(self, node: Node) -> bool:
        """Expand ``node`` in place; return True if a macro applied."""
        return self._pipeline.apply_macro(node)

    def _recur_apply(self, node: Node) -> None:
        if self.apply_macro(node) and node.node_type is NodeType.LIST:
            for child in node.children:
                self._recur_apply(child)

    def unify(
        self,
        mapping: dict[str, Node],
        target: Node,
        parent: Node | None,
        index: int = 0,
    ) -> None:
        """Substitute the bound symbols of ``mapping`` inside ``target``."""
        kind = target.node_type
        if kind is NodeType.SYMBOL:
            bound = mapping.get(target.value)
            if bound is not None:
                _assign(target, bound)
        elif kind in (NodeType.LIST, NodeType.MACRO):
            i = 0
            while i < len(target.children):
                before = len(target.children)
                self.unify(mapping, target.children[i], target, i)
                i += 1 + len(target.children) - before
        elif kind is NodeType.SPREAD:
            expanded = target.copy()
            expanded.node_type = NodeType.SYMBOL
            self.unify(mapping, expanded, parent)
            if expanded.node_type is not NodeType.LIST:
                self.raise_error(
                    "Got a non-list while trying to apply the spread operator", expanded
                )
            if parent is None:
                self.raise_error("Can not apply the spread operator outside of a list", target)
            parent.children[index:index + 1] = expanded.children[1:]

    # ------------------------------------------------------------------
    # evaluation

    def is_truthy(self, node: Node) -> bool:
        kind = node.node_type
        if kind is NodeType.SYMBOL:
            return node.value == "true"
        if kind is NodeType.NUMBER:
            return node.value != 0.0
        if kind is NodeType.STRING:
            return len(node.value) != 0
        if kind is NodeType.SPREAD:
            self.raise_error("Can not determine the truth value of a spreaded symbol", node)
        return False

    def evaluate(self, node: Node, is_not_body: bool) -> Node:
        """Evaluate ``node`` at compile time as far as possible."""
        if node.node_type is NodeType.SYMBOL:
            found = self.find_nearest_macro(node.value)
            if found is not None and len(found.children) == 2:
                return found.children[1].copy()
            return node

        if (
            node.node_type is NodeType.LIST
            and len(node.children) > 1
            and node.children[0].node_type is NodeType.SYMBOL
        ):
            result = self._evaluate_call(node, is_not_body)
            if result is not None:
                return result

        if node.node_type is NodeType.LIST and node.children:
            node.children = [self.evaluate(child, is_not_body) for child in node.children]
        return node

    def _evaluate_call(self, node: Node, is_not_body: bool) -> Node | None:
        name = node.children[0].value
        size = len(node.children)

        if self.find_nearest_macro(name) is not None:
            self.apply_macro(node.children[0])
            if node.children[0].node_type is NodeType.UNUSED:
                del node.children[0]
            return None

        if is_not_body and name in _COMPARATORS:
            one, two = self._evaluate_pair(node, name, "condition", is_not_body)
            return true_node() if _COMPARATORS[name](one, two) else false_node()

        if is_not_body and name in _OPERATIONS:
            one, two = self._evaluate_pair(node, name, "operation", is_not_body)
            if one.node_type is NodeType.NUMBER and two.node_type is NodeType.NUMBER:
                return Node(NodeType.NUMBER, _OPERATIONS[name](one.value, two.value))
            return node

        if is_not_body and name == "not":
            if size != 2:
                self.raise_error(
                    f"Interpreting a `not' condition with {size - 1} arguments, instead of 1.", node
                )
            truth = self.is_truthy(self.evaluate(node.children[1], is_not_body))
            return false_node() if truth else true_node()

        if is_not_body and name in ("and", "or"):
            if size < 3:
                self.raise_error(
                    f"Interpreting a `{name}' chain with {size - 1} arguments, expected at least 2.",
                    node,
                )
            wanted = name == "or"
            for arg in node.children[1:]:
                if self.is_truthy(self.evaluate(arg, is_not_body)) == wanted:
                    return true_node() if wanted else false_node()
            return false_node() if wanted else true_node()

        handlers = {
            "len": self._eval_len,
            "@": self._eval_at,
            "head": self._eval_head,
            "tail": self._eval_tail,
            "symcat": self._eval_symcat,
            "argcount": self._eval_argcount,
        }
        handler = handlers.get(name)
        if handler is None:
            return None
        return handler(node, is_not_body)

    def _evaluate_pair(self, node: Node, name: str, kind: str, is_not_body: bool) -> tuple[Node, Node]:
        if len(node.children) != 3:
            self.raise_error(
                f"Interpreting a `{name}' {kind} with {len(node.children) - 1} arguments, "
                "instead of 2.",
                node,
            )
        one = self.evaluate(node.children[1], is_not_body)
        two = self.evaluate(node.children[2], is_not_body)
        return one, two

    def _check_single_argument(self, node: Node, name: str) -> None:
        if len(node.children) > 2:
            self.raise_error(
                f"When expanding `{name}' inside a macro, got {len(node.children) - 1} "
                "arguments, needed only 1",
                node,
            )

    def _is_constant(self, node: Node) -> bool:
        kind = node.node_type
        if kind is NodeType.SYMBOL:
            return node.value in _CONSTANT_SYMBOLS or self.find_nearest_macro(node.value) is not None
        if kind is NodeType.LIST:
            return all(self._is_constant(child) for child in node.children)
        return kind not in _NOT_CONSTANT

    def _eval_len(self, node: Node, is_not_body: bool) -> Node | None:
        self._check_single_argument(node, "len")
        target = node.children[1]
        if target.node_type is NodeType.LIST and self._is_constant(target):
            count = len(target.children)
            if target.children and target.children[0] == list_node():
                count -= 1
            _assign(node, Node(NodeType.NUMBER, float(count)))
        return None

    def _eval_at(self, node: Node, is_not_body: bool) -> Node | None:
        if len(node.children) != 3:
            self.raise_error(
                f"Interpreting a `@' with {len(node.children) - 1} arguments, instead of 2.", node
            )
        sublist = self.evaluate(node.children[1], is_not_body)
        idx = self.evaluate(node.children[2], is_not_body)

        if (
            sublist.node_type is NodeType.LIST
            and idx.node_type is NodeType.NUMBER
            and math.isfinite(idx.value)
        ):
            position = int(idx.value)
            size = len(sublist.children)
            if size > 0 and sublist.children[0] == list_node() and position >= 0:
                position += 1
            if position < 0 and size + position >= 0 and -position < size:
                return sublist.children[size + position].copy()
            if 0 <= position < size:
                return sublist.children[position].copy()
        return None

    def _eval_head(self, node: Node, is_not_body: bool) -> Node | None:
        self._check_single_argument(node, "head")
        sublist = node.children[1]
        if sublist.node_type is NodeType.LIST:
            items = sublist.children
            if items and items[0] == list_node():
                head = items[1] if len(items) > 1 else nil_node()
            elif items:
                head = items[0]
            else:
                head = nil_node()
            _assign(node, head)
        return None

    def _eval_tail(self, node: Node, is_not_body: bool) -> Node | None:
        self._check_single_argument(node, "tail")
        if node.children[1].node_type is NodeType.LIST:
            sublist = node.children[1].copy()
            items = sublist.children
            if items and items[0] == list_node():
                if len(items) > 1:
                    del items[1]
                    tail = sublist
                else:
                    tail = _empty_list()
            elif items:
                del items[0]
                tail = sublist
            else:
                tail = _empty_list()
            _assign(node, tail)
        return None

    def _eval_symcat(self, node: Node, is_not_body: bool) -> Node | None:
        size = len(node.children)
        if size <= 2:
            self.raise_error(
                f"When expanding `symcat', expected at least 2 arguments, got {size - 1} arguments",
                node,
            )
        first = node.children[1]
        if first.node_type is not NodeType.SYMBOL:
            self.raise_error(
                "When expanding `symcat', expected the first argument to be a Symbol, got a "
                + _type_name(first),
                node,
            )

        parts = [first.value]
        for arg in node.children[2:]:
            value = self.evaluate(arg, True)
            if value.node_type is NodeType.NUMBER:
                # identifiers must not contain '.'
                parts.append(str(int(value.value)))
            elif value.node_type in (NodeType.STRING, NodeType.SYMBOL):
                parts.append(value.value)
            else:
                self.raise_error(
                    "When expanding `symcat', expected either a Number, String or Symbol, got a "
                    + _type_name(value),
                    value,
                )

        node.node_type = NodeType.SYMBOL
        node.value = "".join(parts)
        node.children = []
        return None

    def _eval_argcount(self, node: Node, is_not_body: bool) -> Node | None:
        name = node.children[1].value
        params = self._defined_functions.get(name)
        if params is None:
            self.raise_error(
                "When expanding `argcount', expected a known function name, got unbound variable "
                + str(name),
                node,
            )
        _assign(node, Node(NodeType.NUMBER, float(len(params.children))))
        return None