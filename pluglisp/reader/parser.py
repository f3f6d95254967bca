"""
  Lisp Reader, Lexer and Parser

- Streaming, lazy parsing: `lex` yields tokens, `TokenStream.parse_expr`
  builds one expression at a time.
- Emits the immutable Expr tree from pluglisp.types.expr:

    - ( ... )     -> ListExpr
    - [ ... ]     -> BracketExpr
    - { ... }     -> HashMapExpr (flattened key/value pairs)
    - 'x          -> (quote x)
    - `x          -> (quasiquote x)
    - ~x / ~@x    -> (unquote x) / (unquote-splicing x)
    - :name       -> KeywordExpr
    - true/false  -> BooleanExpr
    - integers longer than 15 digits -> BigNumberExpr
"""

from __future__ import annotations

import re
from bisect import bisect_right
from typing import Iterator, Optional

from pluglisp.errors import PlugLispSyntaxError
from pluglisp.types.expr import (
    BigNumberExpr,
    BooleanExpr,
    BracketExpr,
    Expr,
    HashMapExpr,
    KeywordExpr,
    ListExpr,
    NumberExpr,
    Position,
    StringExpr,
    SymbolExpr,
)

TOKEN_RE = re.compile(
    r"(?P<comment>;[^\n]*)"  # single-line comment
    r"|(?P<lparen>\()"
    r"|(?P<rparen>\))"
    r"|(?P<lbracket>\[)"
    r"|(?P<rbracket>\])"
    r"|(?P<lbrace>\{)"
    r"|(?P<rbrace>\})"
    r"|(?P<quote>')"
    r"|(?P<quasiquote>`)"
    r"|(?P<unquote_splicing>~@)"
    r"|(?P<unquote>~)"
    r'|(?P<string>"(?:\\.|[^\\"])*")'  # double-quoted strings
    r'|(?P<unterminated>"(?:\\.|[^\\"])*\Z)'  # string running to end of input
    r'|(?P<atom>[^\s()\[\]{}\'"`~;,]+)'  # numbers, keywords, symbols
)

WHITESPACE_RE = re.compile(r"[\s,]+")

NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
INTEGER_RE = re.compile(r"[+-]?\d+")

# Integer literals longer than this are read as BigNumber
MAX_FLOAT_DIGITS = 15

QUOTE_FORMS: dict[str, str] = {
    "quote": "quote",
    "quasiquote": "quasiquote",
    "unquote": "unquote",
    "unquote_splicing": "unquote-splicing",
}

CLOSERS: dict[str, str] = {"rparen": ")", "rbracket": "]", "rbrace": "}"}

ESCAPES: dict[str, str] = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}


class Token:
    __slots__ = ("kind", "text", "position")

    def __init__(self, kind: str, text: str, position: Position):
        self.kind = kind
        self.text = text
        self.position = position

    def __repr__(self) -> str:
        return f"Token({self.kind!r}, {self.text!r}, {self.position})"


class _LineIndex:
    """Maps string offsets to 1-based line/column positions."""

    def __init__(self, source: str):
        self.starts = [0] + [m.end() for m in re.finditer(r"\n", source)]

    def position(self, offset: int) -> Position:
        line = bisect_right(self.starts, offset)
        return Position(line, offset - self.starts[line - 1] + 1)


def lex(source: str) -> Iterator[Token]:
    """Token generator. Whitespace, commas and comments are skipped."""
    lines = _LineIndex(source)
    pos = 0
    n = len(source)
    while pos < n:
        ws = WHITESPACE_RE.match(source, pos)
        if ws:
            pos = ws.end()
            continue
        m = TOKEN_RE.match(source, pos)
        if not m:
            raise PlugLispSyntaxError(
                f"unexpected character {source[pos]!r} at {lines.position(pos)}"
            )
        kind = m.lastgroup or ""
        if kind == "unterminated":
            raise PlugLispSyntaxError(
                f"unterminated string starting at {lines.position(pos)}", incomplete=True
            )
        if kind != "comment":
            yield Token(kind, m.group(kind), lines.position(pos))
        pos = m.end()


def _unescape(body: str, position: Position) -> str:
    out: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            if nxt not in ESCAPES:
                raise PlugLispSyntaxError(f"invalid escape \\{nxt} in string at {position}")
            out.append(ESCAPES[nxt])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def parse_atom(text: str, position: Position | None = None) -> Expr:
    if NUMBER_RE.fullmatch(text):
        if INTEGER_RE.fullmatch(text) and len(text.lstrip("+-")) > MAX_FLOAT_DIGITS:
            return BigNumberExpr(text, position)
        return NumberExpr(float(text), position)
    if text.startswith(":"):
        if len(text) == 1:
            raise PlugLispSyntaxError(f"invalid keyword: empty keyword name at {position}")
        return KeywordExpr(text[1:], position)
    if text == "true":
        return BooleanExpr(True, position)
    if text == "false":
        return BooleanExpr(False, position)
    return SymbolExpr(text, position)


class TokenStream:
    """Lookahead stream over lexer tokens."""

    def __init__(self, tokens: Iterator[Token]):
        self.tokens = tokens
        self.buffer: list[Token] = []

    def peek(self) -> Optional[Token]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None
        return self.buffer[0]

    def next(self) -> Optional[Token]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, None)

    def parse_expr(self) -> Optional[Expr]:
        """Parse one expression, or return None at end of input."""
        token = self.next()
        if token is None:
            return None
        return self._parse_token(token)

    def _parse_token(self, token: Token) -> Expr:
        match token.kind:
            case "lparen":
                return ListExpr(self._parse_sequence("rparen", token), token.position)
            case "lbracket":
                return BracketExpr(self._parse_sequence("rbracket", token), token.position)
            case "lbrace":
                elements = self._parse_sequence("rbrace", token)
                if len(elements) % 2 != 0:
                    raise PlugLispSyntaxError(
                        f"hash map literal at {token.position} requires an even number of forms"
                    )
                return HashMapExpr(elements, token.position)
            case "quote" | "quasiquote" | "unquote" | "unquote_splicing":
                quoted = self.parse_expr()
                if quoted is None:
                    raise PlugLispSyntaxError(
                        f"expected expression after {token.text} at {token.position}",
                        incomplete=True,
                    )
                head = SymbolExpr(QUOTE_FORMS[token.kind], token.position)
                return ListExpr((head, quoted), token.position)
            case "string":
                return StringExpr(_unescape(token.text[1:-1], token.position), token.position)
            case "atom":
                return parse_atom(token.text, token.position)
            case "rparen" | "rbracket" | "rbrace":
                raise PlugLispSyntaxError(f"unexpected '{token.text}' at {token.position}")
        raise PlugLispSyntaxError(f"unexpected token {token.text!r} at {token.position}")

    def _parse_sequence(self, closer: str, opener: Token) -> tuple[Expr, ...]:
        elements: list[Expr] = []
        while True:
            token = self.next()
            if token is None:
                raise PlugLispSyntaxError(
                    f"unclosed '{opener.text}' opened at {opener.position}", incomplete=True
                )
            if token.kind == closer:
                return tuple(elements)
            if token.kind in CLOSERS:
                raise PlugLispSyntaxError(
                    f"mismatched '{token.text}' at {token.position}, expected '{CLOSERS[closer]}'"
                )
            elements.append(self._parse_token(token))


def read_all(source: str) -> list[Expr]:
    """Parse every expression in `source`."""
    stream = TokenStream(lex(source))
    exprs: list[Expr] = []
    while (expr := stream.parse_expr()) is not None:
        exprs.append(expr)
    return exprs


def read_one(source: str) -> Expr:
    exprs = read_all(source)
    if len(exprs) != 1:
        raise PlugLispSyntaxError(f"expected exactly one expression, found {len(exprs)}")
    return exprs[0]
