"""
Exercise types and their content/solution schemas.

Exercises arrive from the storage layer as loosely shaped JSON: a ``type``
tag, a ``content`` object and a ``solution`` object whose shapes depend on
the tag (either may also arrive as a JSON string). ``decode_exercise``
validates both against the pydantic models registered for the tag, so the
grader only ever sees typed data.

Field names follow the stored JSON (camelCase); the models also accept the
snake_case attribute names.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from logic.normal_forms import NormalForm


class GradingError(Exception):
    """Invalid exercise data or a failure while grading one submission."""
    pass


class ExerciseType(str, Enum):
    EQUIVALENCE = "EQUIVALENCE"                 # write an equivalent formula
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    SYMBOL_ARRANGEMENT = "SYMBOL_ARRANGEMENT"   # build a formula from given symbols
    FORMULATION = "FORMULATION"                 # natural language -> formula
    VALIDATION = "VALIDATION"                   # is this argument valid?
    TRUTH_TABLE = "TRUTH_TABLE"                 # fill in hidden cells
    PROOF = "PROOF"
    NORMAL_FORM = "NORMAL_FORM"                 # convert to CNF/DNF/NNF
    IDENTIFY_FALLACY = "IDENTIFY_FALLACY"


# ---------------------------------------------------------------------------
# Type metadata
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ExerciseTypeInfo:
    id: ExerciseType
    name: str
    description: str
    difficulty: str  # EASY | MEDIUM | HARD
    interactive: bool
    supports_partial_credit: bool


EXERCISE_TYPES: Dict[ExerciseType, ExerciseTypeInfo] = {
    info.id: info
    for info in (
        ExerciseTypeInfo(ExerciseType.EQUIVALENCE, "Logical Equivalence",
                         "Write a formula logically equivalent to the given one.",
                         "MEDIUM", False, False),
        ExerciseTypeInfo(ExerciseType.MULTIPLE_CHOICE, "Multiple Choice",
                         "Select the correct answer among the options.",
                         "EASY", False, True),
        ExerciseTypeInfo(ExerciseType.SYMBOL_ARRANGEMENT, "Symbol Arrangement",
                         "Arrange the symbols to build a well-formed formula.",
                         "MEDIUM", True, False),
        ExerciseTypeInfo(ExerciseType.FORMULATION, "Formulation",
                         "Translate the natural-language statement into formal logic.",
                         "HARD", False, True),
        ExerciseTypeInfo(ExerciseType.VALIDATION, "Argument Validation",
                         "Decide whether the argument is logically valid.",
                         "HARD", False, True),
        ExerciseTypeInfo(ExerciseType.TRUTH_TABLE, "Truth Table",
                         "Fill in the missing cells of the truth table.",
                         "MEDIUM", True, True),
        ExerciseTypeInfo(ExerciseType.PROOF, "Proof Construction",
                         "Build a step-by-step derivation of the conclusion.",
                         "HARD", True, True),
        ExerciseTypeInfo(ExerciseType.NORMAL_FORM, "Normal Form Conversion",
                         "Convert the formula to the requested normal form (CNF/DNF/NNF).",
                         "MEDIUM", False, False),
        ExerciseTypeInfo(ExerciseType.IDENTIFY_FALLACY, "Identify Fallacy",
                         "Identify which logical fallacy the argument commits.",
                         "MEDIUM", False, False),
    )
}


def exercise_types_by_difficulty(difficulty: str) -> List[ExerciseType]:
    return [t for t, info in EXERCISE_TYPES.items() if info.difficulty == difficulty]


# ---------------------------------------------------------------------------
# Content / solution schemas
# ---------------------------------------------------------------------------

class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class EquivalenceContent(_Schema):
    # Older exercises store the target under "formula"; some builders put it
    # in the solution instead.
    target_formula: Optional[str] = Field(
        default=None, min_length=1, validation_alias=AliasChoices("targetFormula", "target_formula", "formula")
    )


class EquivalenceSolution(_Schema):
    target_formula: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("targetFormula", "target_formula")
    )


class ChoiceOption(_Schema):
    id: str
    text: str = ""
    is_formula: bool = Field(default=False, alias="isFormula")


class MultipleChoiceContent(_Schema):
    question: str = ""
    options: List[ChoiceOption] = Field(default_factory=list)
    allow_multiple: bool = Field(default=False, alias="allowMultiple")
    randomize_order: bool = Field(default=False, alias="randomizeOrder")


class MultipleChoiceSolution(_Schema):
    correct_option_ids: List[str] = Field(..., min_length=1, alias="correctOptionIds")
    explanations: Dict[str, str] = Field(default_factory=dict)


class AvailableSymbol(_Schema):
    id: str
    symbol: str
    count: int = Field(default=1, ge=0)


class SymbolArrangementContent(_Schema):
    instruction: str = ""
    available_symbols: List[AvailableSymbol] = Field(default_factory=list, alias="availableSymbols")
    target_description: Optional[str] = Field(default=None, alias="targetDescription")


class AcceptedFormulasSolution(_Schema):
    """Solution shape shared by the formula-writing exercise types."""

    correct_formulas: List[str] = Field(..., min_length=1, alias="correctFormulas")


class FormulationContent(_Schema):
    natural_language: str = Field(..., alias="naturalLanguage")
    variables: Dict[str, str] = Field(default_factory=dict)
    hint: Optional[str] = None


class ValidationContent(_Schema):
    premises: List[str] = Field(default_factory=list)
    conclusion: str
    argument_in_natural_language: Optional[str] = Field(default=None, alias="argumentInNaturalLanguage")


class ValidationSolution(_Schema):
    is_valid: bool = Field(..., alias="isValid")
    explanation: str = ""
    counterexample: Optional[Dict[str, bool]] = None


class HiddenCell(_Schema):
    row: int = Field(..., ge=0)
    column: str  # variable name or "result"


class TruthTableContent(_Schema):
    formula: str
    hidden_cells: List[HiddenCell] = Field(default_factory=list, alias="hiddenCells")
    show_intermediate_columns: bool = Field(default=False, alias="showIntermediateColumns")


class TruthTableSolution(_Schema):
    # column name -> value per row
    values: Dict[str, List[bool]]


class NormalFormContent(_Schema):
    formula: str
    target_form: NormalForm = Field(..., alias="targetForm")


class ProofStep(_Schema):
    formula: str
    justification: str = ""
    line_refs: List[int] = Field(default_factory=list, alias="lineRefs")


class ProofContent(_Schema):
    premises: List[str] = Field(default_factory=list)
    conclusion: str
    allowed_rules: List[str] = Field(default_factory=list, alias="allowedRules")
    max_steps: Optional[int] = Field(default=None, ge=1, alias="maxSteps")


class ProofSolution(_Schema):
    # Instructor-authored reference derivation; shown to students, never used
    # to check their steps.
    proof_steps: List[ProofStep] = Field(default_factory=list, alias="proofSteps")


class FallacyOption(_Schema):
    id: str
    name: str = ""
    description: str = ""


class IdentifyFallacyContent(_Schema):
    argument: str = ""
    options: List[FallacyOption] = Field(default_factory=list)


class IdentifyFallacySolution(_Schema):
    correct_fallacy_id: str = Field(..., min_length=1, alias="correctFallacyId")
    explanation: str = ""


SCHEMAS: Dict[ExerciseType, Tuple[Type[_Schema], Type[_Schema]]] = {
    ExerciseType.EQUIVALENCE: (EquivalenceContent, EquivalenceSolution),
    ExerciseType.MULTIPLE_CHOICE: (MultipleChoiceContent, MultipleChoiceSolution),
    ExerciseType.SYMBOL_ARRANGEMENT: (SymbolArrangementContent, AcceptedFormulasSolution),
    ExerciseType.FORMULATION: (FormulationContent, AcceptedFormulasSolution),
    ExerciseType.VALIDATION: (ValidationContent, ValidationSolution),
    ExerciseType.TRUTH_TABLE: (TruthTableContent, TruthTableSolution),
    ExerciseType.PROOF: (ProofContent, ProofSolution),
    ExerciseType.NORMAL_FORM: (NormalFormContent, AcceptedFormulasSolution),
    ExerciseType.IDENTIFY_FALLACY: (IdentifyFallacyContent, IdentifyFallacySolution),
}


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Exercise:
    """A decoded exercise: content and solution typed for ``type``."""

    type: ExerciseType
    content: Any
    solution: Any
    explanation: Optional[str] = None


def _load_json(value: Any, field: str) -> Any:
    if value is None:
        return {}
    if isinstance(value, (str, bytes)):
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise GradingError(f"Exercise {field} is not valid JSON: {e}") from e
    return value


def decode_exercise(raw: Mapping[str, Any]) -> Exercise:
    """
    Validate a stored exercise record.

    Args:
        raw: mapping with ``type``, ``content``, ``solution`` and optional
            ``explanation``; content and solution may be JSON strings.

    Raises:
        GradingError: unknown type or content/solution not matching the
            schema registered for it.
    """
    try:
        exercise_type = ExerciseType(raw.get("type"))
    except ValueError as e:
        raise GradingError(f"Unknown exercise type: {raw.get('type')!r}") from e

    content_model, solution_model = SCHEMAS[exercise_type]
    content_data = _load_json(raw.get("content"), "content")
    solution_data = _load_json(raw.get("solution"), "solution")
    # Legacy records keep the equivalence target on the exercise itself.
    if exercise_type == ExerciseType.EQUIVALENCE and raw.get("formula") and isinstance(content_data, dict):
        content_data = {"formula": raw["formula"], **content_data}

    try:
        content = content_model.model_validate(content_data)
        solution = solution_model.model_validate(solution_data)
    except ValidationError as e:
        raise GradingError(
            f"Invalid {exercise_type.value} exercise: {e.error_count()} schema error(s): {e.errors()[0]['msg']}"
        ) from e

    explanation = raw.get("explanation")
    return Exercise(
        type=exercise_type,
        content=content,
        solution=solution,
        explanation=str(explanation) if explanation else None,
    )


__all__ = [
    "GradingError",
    "ExerciseType",
    "ExerciseTypeInfo",
    "EXERCISE_TYPES",
    "exercise_types_by_difficulty",
    "EquivalenceContent",
    "EquivalenceSolution",
    "ChoiceOption",
    "MultipleChoiceContent",
    "MultipleChoiceSolution",
    "AvailableSymbol",
    "SymbolArrangementContent",
    "AcceptedFormulasSolution",
    "FormulationContent",
    "ValidationContent",
    "ValidationSolution",
    "HiddenCell",
    "TruthTableContent",
    "TruthTableSolution",
    "NormalFormContent",
    "ProofStep",
    "ProofContent",
    "ProofSolution",
    "FallacyOption",
    "IdentifyFallacyContent",
    "IdentifyFallacySolution",
    "SCHEMAS",
    "Exercise",
    "decode_exercise",
]
