"""
Normal-form conversion (NNF, CNF, DNF).

Three composable rewrite passes, each a pure Formula -> Formula:

1. eliminate_implications   A → B  ≡  ¬A ∨ B
                            A ↔ B  ≡  (¬A ∨ B) ∧ (¬B ∨ A)
2. push_negations_inward    ¬¬A ≡ A, ¬(A ∧ B) ≡ ¬A ∨ ¬B, ¬(A ∨ B) ≡ ¬A ∧ ¬B
3. distribution             A ∨ (B ∧ C) ≡ (A ∨ B) ∧ (A ∨ C)   (CNF)
                            A ∧ (B ∨ C) ≡ (A ∧ B) ∨ (A ∧ C)   (DNF)

    to_nnf = 2 ∘ 1
    to_cnf = distribute OR over AND ∘ to_nnf
    to_dnf = distribute AND over OR ∘ to_nnf

Every pass strictly reduces its own measure (implication count, negation
depth, distance from the target form), so each terminates. Distribution can
blow up exponentially; classroom formulas are small.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from .formula import (
    Atom,
    Binary,
    Connective,
    Formula,
    Not,
    conjunction,
    disjunction,
)


class NormalForm(str, Enum):
    NNF = "NNF"
    CNF = "CNF"
    DNF = "DNF"


# ---------------------------------------------------------------------------
# Pass 1: implications and biconditionals
# ---------------------------------------------------------------------------

def eliminate_implications(formula: Formula) -> Formula:
    if isinstance(formula, Atom):
        return formula
    if isinstance(formula, Not):
        return Not(eliminate_implications(formula.operand))

    left = eliminate_implications(formula.left)
    right = eliminate_implications(formula.right)
    if formula.operator == Connective.IMPLIES:
        return disjunction(Not(left), right)
    if formula.operator == Connective.IFF:
        return conjunction(disjunction(Not(left), right), disjunction(Not(right), left))
    return Binary(formula.operator, left, right)


# ---------------------------------------------------------------------------
# Pass 2: negation normal form
# ---------------------------------------------------------------------------

def push_negations_inward(formula: Formula) -> Formula:
    """
    Drive every negation down to an atom.

    The input must already be free of → and ↔ (see eliminate_implications);
    a ValueError is raised otherwise.
    """
    if isinstance(formula, Atom):
        return formula

    if isinstance(formula, Binary):
        _require_basic(formula)
        return Binary(
            formula.operator,
            push_negations_inward(formula.left),
            push_negations_inward(formula.right),
        )

    operand = formula.operand
    if isinstance(operand, Atom):
        return formula
    if isinstance(operand, Not):
        # ¬¬A ≡ A
        return push_negations_inward(operand.operand)

    _require_basic(operand)
    if operand.operator == Connective.AND:
        return push_negations_inward(disjunction(Not(operand.left), Not(operand.right)))
    return push_negations_inward(conjunction(Not(operand.left), Not(operand.right)))


def _require_basic(formula: Binary) -> None:
    if formula.operator not in (Connective.AND, Connective.OR):
        raise ValueError(
            f"push_negations_inward expects no {formula.operator.value}; "
            "run eliminate_implications first"
        )


# ---------------------------------------------------------------------------
# Pass 3: distribution
# ---------------------------------------------------------------------------

def _distribute(formula: Formula, outer: Connective, inner: Connective) -> Formula:
    """
    Distribute ``outer`` over ``inner`` in an NNF formula, bottom up.

    For CNF ``outer`` is OR and ``inner`` is AND; for DNF the reverse.
    """
    if not isinstance(formula, Binary):
        return formula
    left = _distribute(formula.left, outer, inner)
    right = _distribute(formula.right, outer, inner)
    if formula.operator == outer:
        return _distribute_node(left, right, outer, inner)
    return Binary(formula.operator, left, right)


def _distribute_node(left: Formula, right: Formula, outer: Connective, inner: Connective) -> Formula:
    # Both children are already in the target form; a new split can expose
    # another one, so recurse into the freshly built halves.
    if isinstance(right, Binary) and right.operator == inner:
        return Binary(
            inner,
            _distribute_node(left, right.left, outer, inner),
            _distribute_node(left, right.right, outer, inner),
        )
    if isinstance(left, Binary) and left.operator == inner:
        return Binary(
            inner,
            _distribute_node(left.left, right, outer, inner),
            _distribute_node(left.right, right, outer, inner),
        )
    return Binary(outer, left, right)


def distribute_or_over_and(formula: Formula) -> Formula:
    return _distribute(formula, Connective.OR, Connective.AND)


def distribute_and_over_or(formula: Formula) -> Formula:
    return _distribute(formula, Connective.AND, Connective.OR)


# ---------------------------------------------------------------------------
# Pipelines
# ---------------------------------------------------------------------------

def to_nnf(formula: Formula) -> Formula:
    return push_negations_inward(eliminate_implications(formula))


def to_cnf(formula: Formula) -> Formula:
    """Conjunction of disjunctions of literals: (A ∨ B) ∧ (C ∨ ¬D) ∧ ..."""
    return distribute_or_over_and(to_nnf(formula))


def to_dnf(formula: Formula) -> Formula:
    """Disjunction of conjunctions of literals: (A ∧ B) ∨ (C ∧ ¬D) ∨ ..."""
    return distribute_and_over_or(to_nnf(formula))


def convert(formula: Formula, form: NormalForm) -> Formula:
    if form == NormalForm.NNF:
        return to_nnf(formula)
    if form == NormalForm.CNF:
        return to_cnf(formula)
    return to_dnf(formula)


# ---------------------------------------------------------------------------
# Shape predicates
# ---------------------------------------------------------------------------

def _is_literal(formula: Formula) -> bool:
    return isinstance(formula, Atom) or (isinstance(formula, Not) and isinstance(formula.operand, Atom))


def is_nnf(formula: Formula) -> bool:
    if _is_literal(formula):
        return True
    if isinstance(formula, Binary) and formula.operator in (Connective.AND, Connective.OR):
        return is_nnf(formula.left) and is_nnf(formula.right)
    return False


def _is_flat(formula: Formula, connective: Connective) -> bool:
    """A literal or a tree of ``connective`` over literals."""
    if _is_literal(formula):
        return True
    if isinstance(formula, Binary) and formula.operator == connective:
        return _is_flat(formula.left, connective) and _is_flat(formula.right, connective)
    return False


def is_cnf(formula: Formula) -> bool:
    return all(_is_flat(clause, Connective.OR) for clause in _split(formula, Connective.AND))


def is_dnf(formula: Formula) -> bool:
    return all(_is_flat(term, Connective.AND) for term in _split(formula, Connective.OR))


def is_in_form(formula: Formula, form: NormalForm) -> bool:
    if form == NormalForm.NNF:
        return is_nnf(formula)
    if form == NormalForm.CNF:
        return is_cnf(formula)
    return is_dnf(formula)


# ---------------------------------------------------------------------------
# Clause extraction
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Literal:
    variable: str
    negated: bool = False


Clause = List[Literal]


def _split(formula: Formula, connective: Connective) -> List[Formula]:
    if isinstance(formula, Binary) and formula.operator == connective:
        return _split(formula.left, connective) + _split(formula.right, connective)
    return [formula]


def _literals(formula: Formula, connective: Connective) -> Clause:
    literals: Clause = []
    for part in _split(formula, connective):
        if isinstance(part, Atom):
            literals.append(Literal(part.name))
        elif isinstance(part, Not) and isinstance(part.operand, Atom):
            literals.append(Literal(part.operand.name, negated=True))
    return literals


def extract_cnf_clauses(formula: Formula) -> List[Clause]:
    """Clauses of the CNF of ``formula``; each clause is a disjunction of literals."""
    return [_literals(clause, Connective.OR) for clause in _split(to_cnf(formula), Connective.AND)]


def extract_dnf_clauses(formula: Formula) -> List[Clause]:
    """Terms of the DNF of ``formula``; each term is a conjunction of literals."""
    return [_literals(term, Connective.AND) for term in _split(to_dnf(formula), Connective.OR)]


__all__ = [
    "NormalForm",
    "eliminate_implications",
    "push_negations_inward",
    "distribute_or_over_and",
    "distribute_and_over_or",
    "to_nnf",
    "to_cnf",
    "to_dnf",
    "convert",
    "is_nnf",
    "is_cnf",
    "is_dnf",
    "is_in_form",
    "Literal",
    "Clause",
    "extract_cnf_clauses",
    "extract_dnf_clauses",
]
