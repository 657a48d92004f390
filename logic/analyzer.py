"""
Semantic analysis of propositional formulas.

Every semantic answer here is read off a truth table produced by
``logic.evaluator``; nothing walks the AST to guess truth values on its own.
Equivalence and entailment are decided by tabulating the biconditional or
implication of the two formulas, which automatically covers the union of
their variables.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .config import get_config
from .evaluator import TruthAssignment, generate_truth_table, get_variables
from .formula import (
    Atom,
    Binary,
    Formula,
    Not,
    biconditional,
    format_formula,
    implication,
)
from .normal_forms import to_cnf, to_dnf, to_nnf


class Classification(str, Enum):
    TAUTOLOGY = "TAUTOLOGY"
    CONTRADICTION = "CONTRADICTION"
    CONTINGENT = "CONTINGENT"


# ---------------------------------------------------------------------------
# Classification and models
# ---------------------------------------------------------------------------

def _classify(results: Tuple[bool, ...]) -> Classification:
    if all(results):
        return Classification.TAUTOLOGY
    if not any(results):
        return Classification.CONTRADICTION
    return Classification.CONTINGENT


def classify_formula(formula: Formula) -> Classification:
    return _classify(generate_truth_table(formula).results())


def is_tautology(formula: Formula) -> bool:
    return classify_formula(formula) == Classification.TAUTOLOGY


def is_contradiction(formula: Formula) -> bool:
    return classify_formula(formula) == Classification.CONTRADICTION


def is_satisfiable(formula: Formula) -> bool:
    return any(generate_truth_table(formula).results())


def get_models(formula: Formula) -> List[TruthAssignment]:
    """Assignments under which the formula is true, in table order."""
    return [row.assignment for row in generate_truth_table(formula).rows if row.result]


def get_counter_models(formula: Formula) -> List[TruthAssignment]:
    """Assignments under which the formula is false, in table order."""
    return [row.assignment for row in generate_truth_table(formula).rows if not row.result]


def are_equivalent(f1: Formula, f2: Formula) -> bool:
    """True iff ``f1 ↔ f2`` is a tautology."""
    return is_tautology(biconditional(f1, f2))


def implies(f1: Formula, f2: Formula) -> bool:
    """True iff ``f1 → f2`` is a tautology (f1 entails f2)."""
    return is_tautology(implication(f1, f2))


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------

def get_subformulas(formula: Formula) -> List[Formula]:
    """Every node in pre-order, root first; repeated shapes are kept."""
    result: List[Formula] = [formula]
    if isinstance(formula, Not):
        result.extend(get_subformulas(formula.operand))
    elif isinstance(formula, Binary):
        result.extend(get_subformulas(formula.left))
        result.extend(get_subformulas(formula.right))
    return result


def formula_to_string(formula: Formula) -> str:
    return format_formula(formula)


def get_formula_depth(formula: Formula) -> int:
    if isinstance(formula, Atom):
        return 0
    if isinstance(formula, Not):
        return 1 + get_formula_depth(formula.operand)
    return 1 + max(get_formula_depth(formula.left), get_formula_depth(formula.right))


def count_connectives(formula: Formula) -> int:
    if isinstance(formula, Atom):
        return 0
    if isinstance(formula, Not):
        return 1 + count_connectives(formula.operand)
    return 1 + count_connectives(formula.left) + count_connectives(formula.right)


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FormulaAnalysis:
    """Everything the analysis panel shows for one formula."""

    formula: str
    classification: Classification
    variables: Tuple[str, ...]
    model_count: int
    row_count: int
    depth: int
    connective_count: int
    nnf: str
    cnf: str
    dnf: str

    @property
    def satisfiable(self) -> bool:
        return self.model_count > 0


def analyze_formula(formula: Formula) -> FormulaAnalysis:
    table = generate_truth_table(formula)
    results = table.results()

    return FormulaAnalysis(
        formula=format_formula(formula),
        classification=_classify(results),
        variables=table.variables,
        model_count=sum(results),
        row_count=len(results),
        depth=get_formula_depth(formula),
        connective_count=count_connectives(formula),
        nnf=format_formula(to_nnf(formula)),
        cnf=format_formula(to_cnf(formula)),
        dnf=format_formula(to_dnf(formula)),
    )


@dataclass(frozen=True)
class FormulaComparison:
    """Side-by-side verdict for two formulas."""

    equivalent: bool
    left_implies_right: bool
    right_implies_left: bool
    variables: Tuple[str, ...]
    # Assignments where the two formulas disagree.
    counterexamples: Tuple[TruthAssignment, ...]


def compare_formulas(f1: Formula, f2: Formula, limit: Optional[int] = None) -> FormulaComparison:
    if limit is None:
        limit = get_config().counterexample_limit
    differences = get_counter_models(biconditional(f1, f2))
    return FormulaComparison(
        equivalent=not differences,
        left_implies_right=implies(f1, f2),
        right_implies_left=implies(f2, f1),
        variables=tuple(sorted(get_variables(f1) | get_variables(f2))),
        counterexamples=tuple(differences[:limit]),
    )


__all__ = [
    "Classification",
    "classify_formula",
    "is_tautology",
    "is_contradiction",
    "is_satisfiable",
    "get_models",
    "get_counter_models",
    "are_equivalent",
    "implies",
    "get_subformulas",
    "formula_to_string",
    "get_formula_depth",
    "count_connectives",
    "FormulaAnalysis",
    "analyze_formula",
    "FormulaComparison",
    "compare_formulas",
]
