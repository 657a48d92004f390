"""
Formula model for propositional logic.

A formula is an immutable tree built from three node kinds:

    Atom(name)                      propositional variable (P, Q, rain_1, ...)
    Not(operand)                    negation
    Binary(operator, left, right)   AND, OR, IMPLIES, IFF

Nodes are frozen dataclasses, so structural equality and hashing come for
free and two atoms are equal exactly when their names are equal.

Usage:
    from logic.formula import Atom, Not, Binary, Connective, format_formula

    f = Binary(Connective.IMPLIES, Atom("P"), Not(Atom("Q")))
    format_formula(f)   # 'P → ¬Q'
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union


# ---------------------------------------------------------------------------
# Connectives
# ---------------------------------------------------------------------------

class Connective(str, Enum):
    """Binary connectives of propositional logic."""
    AND = "AND"
    OR = "OR"
    IMPLIES = "IMPLIES"
    IFF = "IFF"


# Higher binds tighter.
PRECEDENCE: Dict[Connective, int] = {
    Connective.IFF: 1,
    Connective.IMPLIES: 2,
    Connective.OR: 3,
    Connective.AND: 4,
}

RIGHT_ASSOCIATIVE = frozenset({Connective.IMPLIES})

NOT_SYMBOL = "¬"

CONNECTIVE_SYMBOLS: Dict[Connective, str] = {
    Connective.AND: "∧",
    Connective.OR: "∨",
    Connective.IMPLIES: "→",
    Connective.IFF: "↔",
}


# ---------------------------------------------------------------------------
# AST Node Types
# ---------------------------------------------------------------------------

class FormulaNode:
    """Common base of all formula nodes."""

    __slots__ = ()

    def __str__(self) -> str:
        return format_formula(self)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class Atom(FormulaNode):
    """Propositional variable."""
    name: str


@dataclass(frozen=True, slots=True)
class Not(FormulaNode):
    """Negation."""
    operand: "Formula"


@dataclass(frozen=True, slots=True)
class Binary(FormulaNode):
    """Binary connective applied to two subformulas."""
    operator: Connective
    left: "Formula"
    right: "Formula"


Formula = Union[Atom, Not, Binary]


def conjunction(left: Formula, right: Formula) -> Binary:
    return Binary(Connective.AND, left, right)


def disjunction(left: Formula, right: Formula) -> Binary:
    return Binary(Connective.OR, left, right)


def implication(left: Formula, right: Formula) -> Binary:
    return Binary(Connective.IMPLIES, left, right)


def biconditional(left: Formula, right: Formula) -> Binary:
    return Binary(Connective.IFF, left, right)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def format_formula(formula: Formula) -> str:
    """
    Render a formula with Unicode connectives and minimal parentheses.

    A binary child is parenthesised when its connective binds looser than
    the parent's (left child) or looser-or-equal (right child). That keeps
    left-associative chains like ``P ∧ Q ∧ R`` bare while still printing
    ``P → (Q → R)`` for the right-nested implication the parser builds.
    IMPLIES is right-associative, so a left child implication of equal
    precedence is parenthesised too: ``(P → Q) → R``.
    """
    if isinstance(formula, Atom):
        return formula.name

    if isinstance(formula, Not):
        inner = format_formula(formula.operand)
        if isinstance(formula.operand, Binary):
            return f"{NOT_SYMBOL}({inner})"
        return f"{NOT_SYMBOL}{inner}"

    if isinstance(formula, Binary):
        parent = PRECEDENCE[formula.operator]
        left = format_formula(formula.left)
        right = format_formula(formula.right)
        if isinstance(formula.left, Binary):
            child = PRECEDENCE[formula.left.operator]
            if child < parent or (child == parent and formula.operator in RIGHT_ASSOCIATIVE):
                left = f"({left})"
        if isinstance(formula.right, Binary) and PRECEDENCE[formula.right.operator] <= parent:
            right = f"({right})"
        return f"{left} {CONNECTIVE_SYMBOLS[formula.operator]} {right}"

    raise TypeError(f"Unknown formula type: {type(formula)}")


__all__ = [
    "Connective",
    "PRECEDENCE",
    "RIGHT_ASSOCIATIVE",
    "NOT_SYMBOL",
    "CONNECTIVE_SYMBOLS",
    "FormulaNode",
    "Atom",
    "Not",
    "Binary",
    "Formula",
    "conjunction",
    "disjunction",
    "implication",
    "biconditional",
    "format_formula",
]
