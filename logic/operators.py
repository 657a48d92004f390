"""
Operator catalog.

Lists every logical operator the classroom UI can display, grouped by logic
family. Only the five propositional connectives below carry ``input_symbols``
that the parser accepts; everything else is display-only and is never
evaluated by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class LogicType(str, Enum):
    PROPOSITIONAL = "PROPOSITIONAL"
    MODAL = "MODAL"
    FIRST_ORDER = "FIRST_ORDER"
    TEMPORAL = "TEMPORAL"
    DEONTIC = "DEONTIC"
    EPISTEMIC = "EPISTEMIC"


class Difficulty(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"


@dataclass(frozen=True, slots=True)
class LogicOperator:
    """One catalog entry."""

    id: str
    symbol: str
    name: str
    logic_type: LogicType
    arity: int
    precedence: int  # higher binds tighter
    description: str
    example: str
    difficulty: Difficulty
    alt_symbols: Tuple[str, ...] = ()
    input_symbols: Tuple[str, ...] = ()

    @property
    def parseable(self) -> bool:
        return bool(self.input_symbols)


# ---------------------------------------------------------------------------
# Propositional connectives (parsed and evaluated)
# ---------------------------------------------------------------------------

PROPOSITIONAL_OPERATORS: List[LogicOperator] = [
    LogicOperator(
        id="NOT",
        symbol="¬",
        name="Negation",
        logic_type=LogicType.PROPOSITIONAL,
        arity=1,
        precedence=5,
        description="Flips the truth value: if P is true, ¬P is false.",
        example="¬P",
        difficulty=Difficulty.BEGINNER,
        alt_symbols=("~", "!", "NOT"),
        input_symbols=("~", "¬", "!"),
    ),
    LogicOperator(
        id="AND",
        symbol="∧",
        name="Conjunction",
        logic_type=LogicType.PROPOSITIONAL,
        arity=2,
        precedence=4,
        description="True only when both operands are true.",
        example="P ∧ Q",
        difficulty=Difficulty.BEGINNER,
        alt_symbols=("&", "&&", "^", "AND"),
        input_symbols=("&", "^", "∧"),
    ),
    LogicOperator(
        id="OR",
        symbol="∨",
        name="Disjunction",
        logic_type=LogicType.PROPOSITIONAL,
        arity=2,
        precedence=3,
        description="True when at least one operand is true.",
        example="P ∨ Q",
        difficulty=Difficulty.BEGINNER,
        alt_symbols=("|", "||", "OR"),
        input_symbols=("|", "∨"),
    ),
    LogicOperator(
        id="IMPLIES",
        symbol="→",
        name="Implication",
        logic_type=LogicType.PROPOSITIONAL,
        arity=2,
        precedence=2,
        description="False only when the antecedent is true and the consequent is false.",
        example="P → Q",
        difficulty=Difficulty.BEGINNER,
        alt_symbols=("->", "=>", "⊃"),
        input_symbols=("->", "=>", "→"),
    ),
    LogicOperator(
        id="IFF",
        symbol="↔",
        name="Biconditional",
        logic_type=LogicType.PROPOSITIONAL,
        arity=2,
        precedence=1,
        description="True when both operands have the same truth value.",
        example="P ↔ Q",
        difficulty=Difficulty.BEGINNER,
        alt_symbols=("<->", "<=>", "≡"),
        input_symbols=("<->", "<=>", "↔"),
    ),
]


# ---------------------------------------------------------------------------
# Display-only operators
# ---------------------------------------------------------------------------

def _display(id: str, symbol: str, name: str, logic_type: LogicType, arity: int,
             description: str, example: str, difficulty: Difficulty) -> LogicOperator:
    return LogicOperator(
        id=id,
        symbol=symbol,
        name=name,
        logic_type=logic_type,
        arity=arity,
        precedence=5 if arity == 1 else 2,
        description=description,
        example=example,
        difficulty=difficulty,
    )


DISPLAY_OPERATORS: List[LogicOperator] = [
    _display("NECESSARY", "□", "Necessity", LogicType.MODAL, 1,
             "The proposition holds in every accessible world.", "□P", Difficulty.INTERMEDIATE),
    _display("POSSIBLE", "◇", "Possibility", LogicType.MODAL, 1,
             "The proposition holds in some accessible world.", "◇P", Difficulty.INTERMEDIATE),
    _display("FORALL", "∀", "Universal quantifier", LogicType.FIRST_ORDER, 1,
             "The property holds for every element of the domain.", "∀x P(x)", Difficulty.INTERMEDIATE),
    _display("EXISTS", "∃", "Existential quantifier", LogicType.FIRST_ORDER, 1,
             "The property holds for at least one element of the domain.", "∃x P(x)", Difficulty.INTERMEDIATE),
    _display("ALWAYS", "G", "Globally", LogicType.TEMPORAL, 1,
             "The proposition holds at every future instant.", "G P", Difficulty.ADVANCED),
    _display("EVENTUALLY", "F", "Eventually", LogicType.TEMPORAL, 1,
             "The proposition holds at some future instant.", "F P", Difficulty.ADVANCED),
    _display("UNTIL", "U", "Until", LogicType.TEMPORAL, 2,
             "The left operand holds until the right one does.", "P U Q", Difficulty.ADVANCED),
    _display("OBLIGATORY", "O", "Obligation", LogicType.DEONTIC, 1,
             "It is obligatory that the proposition holds.", "O P", Difficulty.ADVANCED),
    _display("PERMITTED", "P", "Permission", LogicType.DEONTIC, 1,
             "It is permitted that the proposition holds.", "P P", Difficulty.ADVANCED),
    _display("KNOWS", "K", "Knowledge", LogicType.EPISTEMIC, 1,
             "The agent knows that the proposition is true.", "K_a P", Difficulty.EXPERT),
    _display("BELIEVES", "B", "Belief", LogicType.EPISTEMIC, 1,
             "The agent believes that the proposition is true.", "B_a P", Difficulty.EXPERT),
]

ALL_OPERATORS: List[LogicOperator] = PROPOSITIONAL_OPERATORS + DISPLAY_OPERATORS


def operators_by_type(logic_type: LogicType) -> List[LogicOperator]:
    return [op for op in ALL_OPERATORS if op.logic_type == logic_type]


def operator_by_id(operator_id: str) -> Optional[LogicOperator]:
    for op in ALL_OPERATORS:
        if op.id == operator_id:
            return op
    return None


def operator_by_symbol(symbol: str) -> Optional[LogicOperator]:
    """Find an operator by its display symbol or any alternative spelling."""
    for op in ALL_OPERATORS:
        if symbol == op.symbol or symbol in op.alt_symbols or symbol in op.input_symbols:
            return op
    return None


def input_spellings() -> Dict[str, str]:
    """Map every parser-accepted spelling to its operator id."""
    spellings: Dict[str, str] = {}
    for op in PROPOSITIONAL_OPERATORS:
        for spelling in op.input_symbols:
            spellings[spelling] = op.id
    return spellings


__all__ = [
    "LogicType",
    "Difficulty",
    "LogicOperator",
    "PROPOSITIONAL_OPERATORS",
    "DISPLAY_OPERATORS",
    "ALL_OPERATORS",
    "operators_by_type",
    "operator_by_id",
    "operator_by_symbol",
    "input_spellings",
]
