"""
Tokenizer and recursive-descent parser for WHERE conditions.

Grammar (lowest to highest precedence)::

    condition   := or_expr EOF
    or_expr     := and_expr ( "||" and_expr )*
    and_expr    := equality ( "&&" equality )*
    equality    := relational ( ("==" | "===" | "!=" | "!==") relational )*
    relational  := unary ( ("<" | ">" | "<=" | ">=") unary )*
    unary       := ("!" | "-") unary | primary
    primary     := NUMBER | STRING | "true" | "false" | "null" | "(" or_expr ")"

Strings are delimited by double or single quotes and have no escape sequences.
Any other identifier or character is a syntax error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List

from gridquery.algebra.expressions import BinaryOp, Expression, Literal, UnaryOp
from gridquery.exceptions import ConditionSyntaxError

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
  | (?P<string>"[^"]*"|'[^']*')
  | (?P<op>===|!==|==|!=|>=|<=|&&|\|\||[<>!\-])
  | (?P<lparen>\()
  | (?P<rparen>\))
  | (?P<word>[A-Za-z_][A-Za-z0-9_]*)
    """,
    re.VERBOSE,
)

_KEYWORDS: dict[str, Any] = {"true": True, "false": False, "null": None}

_EQUALITY_OPS = ("==", "===", "!=", "!==")
_RELATIONAL_OPS = ("<", ">", "<=", ">=")


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    position: int


def tokenize(text: str) -> List[Token]:
    """Split a condition string into tokens, ending with an ``eof`` token.

    Raises:
        ConditionSyntaxError: On any character or word outside the grammar
    """
    tokens: List[Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise ConditionSyntaxError(f"Unexpected character {text[pos]!r} at {pos}", pos)
        kind = match.lastgroup
        value = match.group()
        if kind == "word" and value not in _KEYWORDS:
            raise ConditionSyntaxError(f"Unknown identifier {value!r} at {pos}", pos)
        if kind != "ws":
            tokens.append(Token(kind=kind, text=value, position=pos))
        pos = match.end()
    tokens.append(Token(kind="eof", text="", position=len(text)))
    return tokens


class _Parser:
    def __init__(self, tokens: List[Token]) -> None:
        self.tokens = tokens
        self.index = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind != "eof":
            self.index += 1
        return token

    def _match_op(self, *ops: str) -> str | None:
        token = self.current
        if token.kind == "op" and token.text in ops:
            self._advance()
            return token.text
        return None

    def parse(self) -> Expression:
        if self.current.kind == "eof":
            raise ConditionSyntaxError("Empty condition", 0)
        node = self._or_expr()
        if self.current.kind != "eof":
            token = self.current
            raise ConditionSyntaxError(
                f"Unexpected token {token.text!r} at {token.position}", token.position
            )
        return node

    def _or_expr(self) -> Expression:
        node = self._and_expr()
        while self._match_op("||"):
            node = BinaryOp(op="||", left=node, right=self._and_expr())
        return node

    def _and_expr(self) -> Expression:
        node = self._equality()
        while self._match_op("&&"):
            node = BinaryOp(op="&&", left=node, right=self._equality())
        return node

    def _equality(self) -> Expression:
        node = self._relational()
        while (op := self._match_op(*_EQUALITY_OPS)) is not None:
            node = BinaryOp(op=op, left=node, right=self._relational())
        return node

    def _relational(self) -> Expression:
        node = self._unary()
        while (op := self._match_op(*_RELATIONAL_OPS)) is not None:
            node = BinaryOp(op=op, left=node, right=self._unary())
        return node

    def _unary(self) -> Expression:
        op = self._match_op("!", "-")
        if op is not None:
            return UnaryOp(op=op, operand=self._unary())
        return self._primary()

    def _primary(self) -> Expression:
        token = self._advance()
        match token.kind:
            case "number":
                text = token.text
                if any(c in text for c in ".eE"):
                    return Literal(float(text))
                return Literal(int(text))
            case "string":
                return Literal(token.text[1:-1])
            case "word":
                return Literal(_KEYWORDS[token.text])
            case "lparen":
                node = self._or_expr()
                if self.current.kind != "rparen":
                    raise ConditionSyntaxError(
                        f"Expected ')' at {self.current.position}", self.current.position
                    )
                self._advance()
                return node
            case "eof":
                raise ConditionSyntaxError("Unexpected end of condition", token.position)
            case _:
                raise ConditionSyntaxError(
                    f"Unexpected token {token.text!r} at {token.position}", token.position
                )


def parse_condition(text: str) -> Expression:
    """Parse a condition string into an expression tree.

    Example:
        >>> str(parse_condition('"West" == "West" && 2000 > 1000'))
        '(("West" == "West") && (2000 > 1000))'

    Raises:
        ConditionSyntaxError: If text is not a valid condition
    """
    if not isinstance(text, str):
        raise ConditionSyntaxError(f"Condition must be a string, got: {type(text).__name__}")
    return _Parser(tokenize(text)).parse()
