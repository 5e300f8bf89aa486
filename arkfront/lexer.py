"""Split source text into tokens."""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from enum import Enum, auto

from arkfront.errors import TokenizingError
from arkfront.node import Keyword


class TokenType(Enum):
    GROUPING = auto()
    STRING = auto()
    NUMBER = auto()
    OPERATOR = auto()
    IDENTIFIER = auto()
    CAPTURE = auto()
    GET_FIELD = auto()
    KEYWORD = auto()
    SKIP = auto()
    COMMENT = auto()
    SHORTHAND = auto()
    SPREAD = auto()
    MISMATCH = auto()


@dataclass
class Token:
    type: TokenType
    token: str
    line: int
    col: int


_OPERATORS = frozenset({
    "+", "-", "*", "/", ">", "<", "<=", ">=", "!=", "=",
    "len", "empty?", "tail", "head", "nil?", "assert",
    "toNumber", "toString", "@", "and", "or", "mod",
    "type", "hasField", "not",
})
_KEYWORDS = frozenset(kw.value.lower() for kw in Keyword)
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_NOT_IN_IDENTIFIER = frozenset(" \t\v\n()[]{}\"'#.&")
_GROUPING = frozenset("()[]{}")
_SEPARATORS = frozenset(" \t\v\n")
_SIMPLE_ESCAPES = {
    '"': '"', "n": "\n", "a": "\a", "b": "\b", "t": "\t",
    "r": "\r", "f": "\f", "\\": "\\", "0": "\0",
}


def _is_identifier(text: str) -> bool:
    return (
        bool(text)
        and not ("0" <= text[0] <= "9")
        and not any(c in _NOT_IN_IDENTIFIER for c in text)
    )


def guess_type(text: str) -> TokenType:
    """Classify a raw token."""
    if not text:
        return TokenType.MISMATCH
    if _NUMBER_RE.fullmatch(text):
        return TokenType.NUMBER
    if text in _OPERATORS:
        return TokenType.OPERATOR
    if text in _KEYWORDS:
        return TokenType.KEYWORD
    if text.startswith("#"):
        return TokenType.COMMENT
    if text.startswith("&") and _is_identifier(text[1:]):
        return TokenType.CAPTURE
    if text.startswith("...") and _is_identifier(text[3:]):
        return TokenType.SPREAD
    if text.startswith(".") and _is_identifier(text[1:]):
        return TokenType.GET_FIELD
    if _is_identifier(text):
        return TokenType.IDENTIFIER
    return TokenType.MISMATCH


def _end_of_control_char(sequence: str) -> bool:
    if not sequence:
        return False
    head = sequence[0]
    if head == "u":
        return len(sequence) == 5
    if head == "U":
        return len(sequence) == 9
    return head in _SIMPLE_ESCAPES


def _decode_codepoint(hex_digits: str) -> str:
    if not hex_digits or any(c not in string.hexdigits for c in hex_digits):
        return ""
    codepoint = int(hex_digits, 16)
    if codepoint == 0 or codepoint > 0x10FFFF:
        return ""
    return chr(codepoint)


class Lexer:
    """Turns source code into a list of tokens."""

    def __init__(self, debug: int = 0) -> None:
        self._debug = debug
        self._tokens: list[Token] = []

    def tokens(self) -> list[Token]:
        return self._tokens

    def feed(self, code: str) -> None:
        """Tokenize ``code``, appending to the token list."""
        line = character = 0
        saved_line = saved_char = 0
        in_string = in_ctrl_char = in_comment = False
        buffer = ""
        ctrl_char = ""

        def error(message: str, col: int) -> TokenizingError:
            return TokenizingError(message, buffer, line, col, code)

        def flush() -> None:
            nonlocal buffer
            kind = guess_type(buffer)
            if kind is TokenType.MISMATCH:
                raise error(f"invalid token '{buffer}'", character)
            if kind in (TokenType.CAPTURE, TokenType.GET_FIELD):
                buffer = buffer[1:]
            self._tokens.append(Token(kind, buffer, saved_line, saved_char))
            buffer = ""

        def close_string() -> None:
            nonlocal buffer, in_string
            buffer += '"'
            in_string = False
            self._tokens.append(Token(TokenType.STRING, buffer, saved_line, saved_char))
            buffer = ""

        for pos, current in enumerate(code):
            if self._debug >= 5:
                print(
                    f"buffer: {buffer} - ctrl_char: {ctrl_char} - current: '{current}'"
                    f" - line: {line}, char: {character}"
                )

            if not in_string:
                if in_comment:
                    buffer += current
                elif current in _GROUPING:
                    if buffer:
                        flush()
                    self._tokens.append(Token(TokenType.GROUPING, current, line, character))
                elif current == '"':
                    if buffer:
                        flush()
                    in_string = True
                    buffer = '"'
                    saved_line, saved_char = line, character
                elif current == "'" or (
                    current == "!"
                    and pos + 1 < len(code)
                    and code[pos + 1] != "="
                    and not buffer
                ):
                    self._tokens.append(Token(TokenType.SHORTHAND, current, line, character))
                elif current == "#":
                    if buffer:
                        flush()
                    in_comment = True
                    buffer = "#"
                elif current in _SEPARATORS:
                    if buffer:
                        flush()
                elif current == "&":
                    if buffer:
                        flush()
                    buffer = "&"
                elif current == ".":
                    if buffer and not ("0" <= buffer[0] <= "9") and buffer[0] not in "+-.":
                        flush()
                    buffer += current
                else:
                    if not buffer:
                        saved_line, saved_char = line, character
                    buffer += current
            elif not in_ctrl_char:
                if current == "\\":
                    in_ctrl_char = True
                elif current == '"':
                    close_string()
                else:
                    buffer += current
            elif current == " " or _end_of_control_char(ctrl_char):
                buffer += self._decode_escape(ctrl_char, error, character)
                ctrl_char = ""
                in_ctrl_char = False
                if current == '"':
                    close_string()
                elif current == "\\":
                    in_ctrl_char = True
                else:
                    buffer += current
            else:
                ctrl_char += current

            if current == "\n":
                line += 1
                character = 0
                if in_comment:
                    in_comment = False
                    buffer = ""
            else:
                character += 1

        if buffer:
            flush()

        if self._debug > 3:
            for token in self._tokens:
                print(
                    f"TokenType: {token.type.name}\tLine: {token.line}\n"
                    f"[{token.col}\t]\tToken: {token.token}"
                )

    @staticmethod
    def _decode_escape(ctrl_char: str, error, character: int) -> str:
        if not ctrl_char:
            raise error("empty control character '\\' in string", character)
        if len(ctrl_char) == 1:
            if ctrl_char in _SIMPLE_ESCAPES:
                return _SIMPLE_ESCAPES[ctrl_char]
            raise error(f"unknown control character '\\{ctrl_char}' in string", character)

        head = ctrl_char[0]
        if head == "x":
            return ""
        if head in "uU":
            digits = ctrl_char[1:]
            if head == "U":
                digits = digits.lstrip("0")
            decoded = _decode_codepoint(digits)
            if not decoded:
                raise error(
                    f"invalid escape sequence \\{ctrl_char} in string, expected hexadecimal "
                    f'number that in utf8 range, got a "{ctrl_char}"',
                    character + 1,
                )
            return decoded
        raise error(f"unknown control character '\\{ctrl_char}' in string", character)