"""
Recursive descent parser for propositional formulas.

Accepted spellings (ASCII and Unicode are interchangeable):

    NOT       ~  ¬  !
    AND       &  ^  ∧
    OR        |  ∨
    IMPLIES   ->  =>  →
    IFF       <->  <=>  ↔

Precedence, loosest first: IFF (left-assoc) < IMPLIES (right-assoc) <
OR (left-assoc) < AND (left-assoc) < NOT (prefix). Atoms match
``[A-Za-z][A-Za-z0-9_]*``.

Usage:
    from logic.parser import parse, try_parse

    formula = parse("P -> (Q & R)")
    outcome = try_parse("P ->")
    outcome.ok          # False
    outcome.error.token # 'EOF'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Tuple

from .formula import Atom, Binary, Connective, Formula, Not
from .operators import PROPOSITIONAL_OPERATORS, input_spellings


class FormulaSyntaxError(ValueError):
    """Malformed formula text.

    ``position`` is the character offset of the offending token and
    ``token`` its kind name: ``"EOF"`` at end of input, ``"UNKNOWN"`` when
    the character could not be tokenized at all, ``"DEPTH"`` when the
    formula nests deeper than the parser can follow.
    """

    def __init__(self, message: str, position: int, token: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.position = position
        self.token = token


UNKNOWN_TOKEN = "UNKNOWN"
DEPTH_TOKEN = "DEPTH"


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

class TokenKind(Enum):
    ATOM = auto()
    NOT = auto()
    AND = auto()
    OR = auto()
    IMPLIES = auto()
    IFF = auto()
    LPAREN = auto()
    RPAREN = auto()
    EOF = auto()


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    value: str
    pos: int


_ATOM_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9_]*")
_WHITESPACE = re.compile(r"\s+")

# Longest spelling first so "<->" wins over "<" and "->".
_OPERATOR_SPELLINGS = sorted(
    ((spelling, TokenKind[op_id]) for spelling, op_id in input_spellings().items()),
    key=lambda item: -len(item[0]),
)


def tokenize(s: str) -> List[Token]:
    """Tokenize formula text, ending with an EOF token at ``len(s)``."""
    tokens: List[Token] = []
    pos = 0
    while pos < len(s):
        m = _WHITESPACE.match(s, pos)
        if m:
            pos = m.end()
            continue
        m = _ATOM_PATTERN.match(s, pos)
        if m:
            tokens.append(Token(TokenKind.ATOM, m.group(), pos))
            pos = m.end()
            continue
        if s[pos] == "(":
            tokens.append(Token(TokenKind.LPAREN, "(", pos))
            pos += 1
            continue
        if s[pos] == ")":
            tokens.append(Token(TokenKind.RPAREN, ")", pos))
            pos += 1
            continue
        for spelling, kind in _OPERATOR_SPELLINGS:
            if s.startswith(spelling, pos):
                tokens.append(Token(kind, spelling, pos))
                pos += len(spelling)
                break
        else:
            raise FormulaSyntaxError(
                f"Unexpected character {s[pos]!r} at position {pos}", pos, UNKNOWN_TOKEN
            )
    tokens.append(Token(TokenKind.EOF, "", pos))
    return tokens


# ---------------------------------------------------------------------------
# Recursive Descent Parser
# ---------------------------------------------------------------------------

class Parser:
    """One method per precedence level, each calling the next tighter one."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def current(self) -> Token:
        return self.tokens[self.pos]

    def consume(self, kind: TokenKind) -> Token:
        tok = self.current()
        if tok.kind != kind:
            raise FormulaSyntaxError(
                f"Expected {kind.name} but found {_describe(tok)} at position {tok.pos}",
                tok.pos,
                tok.kind.name,
            )
        self.pos += 1
        return tok

    def parse(self) -> Formula:
        formula = self.parse_iff()
        tok = self.current()
        if tok.kind != TokenKind.EOF:
            raise FormulaSyntaxError(
                f"Unexpected {_describe(tok)} at position {tok.pos}", tok.pos, tok.kind.name
            )
        return formula

    def parse_iff(self) -> Formula:
        """Parse biconditional (lowest precedence, left-associative)."""
        left = self.parse_implies()
        while self.current().kind == TokenKind.IFF:
            self.consume(TokenKind.IFF)
            left = Binary(Connective.IFF, left, self.parse_implies())
        return left

    def parse_implies(self) -> Formula:
        """Parse implication (right-associative)."""
        left = self.parse_or()
        if self.current().kind == TokenKind.IMPLIES:
            self.consume(TokenKind.IMPLIES)
            return Binary(Connective.IMPLIES, left, self.parse_implies())
        return left

    def parse_or(self) -> Formula:
        left = self.parse_and()
        while self.current().kind == TokenKind.OR:
            self.consume(TokenKind.OR)
            left = Binary(Connective.OR, left, self.parse_and())
        return left

    def parse_and(self) -> Formula:
        left = self.parse_unary()
        while self.current().kind == TokenKind.AND:
            self.consume(TokenKind.AND)
            left = Binary(Connective.AND, left, self.parse_unary())
        return left

    def parse_unary(self) -> Formula:
        if self.current().kind == TokenKind.NOT:
            self.consume(TokenKind.NOT)
            return Not(self.parse_unary())
        return self.parse_primary()

    def parse_primary(self) -> Formula:
        """Parse atoms and parenthesized expressions."""
        tok = self.current()
        if tok.kind == TokenKind.ATOM:
            self.consume(TokenKind.ATOM)
            return Atom(tok.value)
        if tok.kind == TokenKind.LPAREN:
            self.consume(TokenKind.LPAREN)
            formula = self.parse_iff()
            self.consume(TokenKind.RPAREN)
            return formula
        raise FormulaSyntaxError(
            f"Unexpected {_describe(tok)} at position {tok.pos}", tok.pos, tok.kind.name
        )


_DISPLAY_SYMBOLS = {op.id: op.symbol for op in PROPOSITIONAL_OPERATORS}
_SPELLING_SYMBOLS = {spelling: _DISPLAY_SYMBOLS[op_id] for spelling, op_id in input_spellings().items()}
_SPELLING_PATTERN = re.compile(
    "|".join(re.escape(spelling) for spelling, _ in _OPERATOR_SPELLINGS)
)


def normalize_symbols(s: str) -> str:
    """
    Canonical spelling of formula text for string comparison.

    Whitespace is dropped and every accepted connective spelling is mapped
    to its display symbol, so ``"p -> q"`` and ``"p→q"`` compare equal.
    The text does not need to parse.
    """
    compact = _WHITESPACE.sub("", s)
    return _SPELLING_PATTERN.sub(lambda m: _SPELLING_SYMBOLS[m.group()], compact)


def token_signature(s: str) -> Optional[Tuple[Tuple[str, str], ...]]:
    """
    Token sequence of formula text with connectives in display spelling.

    Unlike ``normalize_symbols`` this keeps atom boundaries, so ``"P Q"``
    and ``"PQ"`` differ. Returns None when the text does not tokenize.
    """
    try:
        tokens = tokenize(s)
    except FormulaSyntaxError:
        return None
    return tuple(
        (tok.kind.name, _DISPLAY_SYMBOLS.get(tok.kind.name, tok.value))
        for tok in tokens
        if tok.kind != TokenKind.EOF
    )


def _describe(tok: Token) -> str:
    if tok.kind == TokenKind.EOF:
        return "end of input"
    return f"token {tok.kind.name} ({tok.value!r})"


def parse(text: str) -> Formula:
    """Parse formula text into a Formula, raising FormulaSyntaxError."""
    tokens = tokenize(text)
    try:
        return Parser(tokens).parse()
    except RecursionError as e:
        raise FormulaSyntaxError(
            "Formula is nested too deeply to parse", 0, DEPTH_TOKEN
        ) from e


# ---------------------------------------------------------------------------
# Result-style API
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParseOutcome:
    """Either a parsed formula or the syntax error that prevented it."""

    formula: Optional[Formula] = None
    error: Optional[FormulaSyntaxError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Formula:
        if self.error is not None:
            raise self.error
        assert self.formula is not None
        return self.formula


def try_parse(text: str) -> ParseOutcome:
    """Parse without raising on malformed input."""
    try:
        return ParseOutcome(formula=parse(text))
    except FormulaSyntaxError as e:
        return ParseOutcome(error=e)


__all__ = [
    "FormulaSyntaxError",
    "TokenKind",
    "Token",
    "tokenize",
    "Parser",
    "parse",
    "normalize_symbols",
    "token_signature",
    "UNKNOWN_TOKEN",
    "DEPTH_TOKEN",
    "ParseOutcome",
    "try_parse",
]
