"""Error types and context rendering for compile errors."""

from __future__ import annotations

from pathlib import Path

from arkfront.node import NO_NAME_FILE, Node, NodeType


def _split_lines(code: str) -> list[str]:
    lines = code.split("\n")
    if code.endswith("\n"):
        lines.pop()
    return lines


def make_context(code: str, line: int, col_start: int, sym_size: int) -> str:
    """Render the lines around ``line`` of ``code`` with a marker row."""
    lines = _split_lines(code)
    out = []
    for offset in range(-3, 3):
        idx = line + offset
        if 0 <= idx < len(lines):
            out.append(f"{idx + 1:>5} | {lines[idx]}\n")
        if offset == 0:
            padding = 0 if sym_size > col_start else col_start
            out.append("      | " + " " * padding + "\n")
    return "".join(out)


def make_node_based_error_ctx(message: str, node: Node) -> str:
    """Describe an error located at ``node``."""
    parts = [message, "\n"]
    has_file = node.filename != NO_NAME_FILE
    if has_file:
        parts.append(f"In file {node.filename}\n")
    parts.append(f"On line {node.line + 1}:{node.col}, got `{node}'\n")

    size = 1
    if node.node_type in (NodeType.SYMBOL, NodeType.STRING, NodeType.SPREAD):
        size = len(node.value)

    if has_file:
        code = Path(node.filename).read_text(encoding="utf-8")
        parts.append(make_context(code, node.line, node.col, size))
    return "".join(parts)


def make_token_based_error_ctx(match: str, line: int, col: int, code: str) -> str:
    """Describe an error located at a token in ``code``."""
    return f"On line {line + 1}:{col}\n" + make_context(code, line, col, len(match))


class TokenizingError(Exception):
    """Raised when source text cannot be split into tokens."""

    def __init__(self, message: str, match: str, line: int, col: int, code: str) -> None:
        super().__init__(make_token_based_error_ctx(match, line, col, code) + message)
        self.message = message
        self.match = match
        self.line = line
        self.col = col


class MacroProcessingError(Exception):
    """Raised when a macro cannot be registered or expanded."""

    def __init__(self, message: str, node: Node) -> None:
        super().__init__(make_node_based_error_ctx(message, node))
        self.message = message
        self.node = node