"""
Truth-table evaluator for propositional formulas.

Row order is part of the contract: variables are sorted, variable 0 is the
most significant bit of a descending binary counter, so row 0 assigns every
variable True and the last row assigns every variable False. Grading of
truth-table exercises relies on row ``i`` meaning the same assignment
everywhere.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Set, Tuple

from .config import get_config
from .formula import Atom, Binary, Connective, Formula, Not

logger = logging.getLogger(__name__)

TruthAssignment = Dict[str, bool]


class TruthTableTooLarge(ValueError):
    """
    Raised when a formula has more variables than the configured limit.

    Enumeration costs 2**n evaluations, so untrusted input is capped before
    any row is built.
    """

    def __init__(self, variable_count: int, limit: int):
        super().__init__(
            f"Formula has {variable_count} variables; truth tables are limited to {limit}"
        )
        self.variable_count = variable_count
        self.limit = limit


@dataclass(frozen=True, slots=True)
class TruthTableRow:
    assignment: TruthAssignment
    result: bool


@dataclass(frozen=True, slots=True)
class TruthTable:
    variables: Tuple[str, ...]
    rows: Tuple[TruthTableRow, ...]

    def results(self) -> Tuple[bool, ...]:
        return tuple(row.result for row in self.rows)


def get_variables(formula: Formula) -> Set[str]:
    """Distinct atom names in the formula."""
    if isinstance(formula, Atom):
        return {formula.name}
    if isinstance(formula, Not):
        return get_variables(formula.operand)
    if isinstance(formula, Binary):
        return get_variables(formula.left) | get_variables(formula.right)
    raise TypeError(f"Unknown formula type: {type(formula)}")


def evaluate(formula: Formula, assignment: TruthAssignment) -> bool:
    """Truth value of the formula; atoms missing from the assignment are False."""
    if isinstance(formula, Atom):
        return bool(assignment.get(formula.name, False))
    if isinstance(formula, Not):
        return not evaluate(formula.operand, assignment)
    if isinstance(formula, Binary):
        left = evaluate(formula.left, assignment)
        right = evaluate(formula.right, assignment)
        if formula.operator == Connective.AND:
            return left and right
        if formula.operator == Connective.OR:
            return left or right
        if formula.operator == Connective.IMPLIES:
            return (not left) or right
        if formula.operator == Connective.IFF:
            return left == right
        raise ValueError(f"Unknown connective: {formula.operator}")
    raise TypeError(f"Unknown formula type: {type(formula)}")


def assignment_for_row(variables: Tuple[str, ...], index: int) -> TruthAssignment:
    """Assignment at row ``index`` of a table over ``variables``."""
    n = len(variables)
    value = (2 ** n) - 1 - index
    return {name: bool((value >> (n - 1 - j)) & 1) for j, name in enumerate(variables)}


def generate_truth_table(
    formula: Formula,
    variables: Optional[Iterable[str]] = None,
) -> TruthTable:
    """
    Enumerate every assignment and evaluate the formula under each.

    Args:
        formula: Formula to tabulate.
        variables: Optional column set; must include every atom of the
            formula. Extra names become columns the formula ignores.

    Returns:
        TruthTable with ``2**n`` rows in descending-counter order (one row
        when the formula has no atoms).

    Raises:
        TruthTableTooLarge: if ``n`` exceeds ``EngineConfig.max_variables``.
    """
    own = get_variables(formula)
    if variables is None:
        names = tuple(sorted(own))
    else:
        names = tuple(sorted(set(variables)))
        missing = own.difference(names)
        if missing:
            raise ValueError(f"Variables missing from column set: {sorted(missing)}")

    limit = get_config().max_variables
    if len(names) > limit:
        logger.warning("Rejected truth table over %d variables (limit %d)", len(names), limit)
        raise TruthTableTooLarge(len(names), limit)

    rows = []
    for i in range(2 ** len(names)):
        assignment = assignment_for_row(names, i)
        rows.append(TruthTableRow(assignment, evaluate(formula, assignment)))
    return TruthTable(variables=names, rows=tuple(rows))


__all__ = [
    "TruthAssignment",
    "TruthTableTooLarge",
    "TruthTableRow",
    "TruthTable",
    "get_variables",
    "evaluate",
    "assignment_for_row",
    "generate_truth_table",
]
