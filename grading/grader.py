"""
Grading dispatcher.

``grade(exercise, answer)`` scores one student submission. It is a pure
function: the exercise (raw stored record or decoded ``Exercise``) and the
raw answer go in, a ``GradingResult`` comes out. Correctness of formula
answers is always semantic (truth-table equivalence), never string equality
alone.

Grading never raises. Invalid exercise data, malformed answers and any
failure inside a type-specific grader are logged and reported as an
incorrect result with score 0.

Answer shapes per exercise type:

    EQUIVALENCE          formula text
    MULTIPLE_CHOICE      option id, or list of option ids
    SYMBOL_ARRANGEMENT   formula text, or list of symbols in order
    FORMULATION          formula text
    NORMAL_FORM          formula text
    VALIDATION           bool (or "valid"/"invalid", "true"/"false", ...)
    TRUTH_TABLE          {"row-column": bool} or {row: {column: bool}}
    PROOF                list of step formulas (text or {"formula": ...})
    IDENTIFY_FALLACY     fallacy id
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from logic.analyzer import are_equivalent, get_counter_models, implies, is_tautology
from logic.evaluator import generate_truth_table
from logic.formula import Formula, biconditional, conjunction
from logic.normal_forms import is_in_form
from logic.parser import ParseOutcome, normalize_symbols, parse, token_signature, try_parse

from .exercises import Exercise, ExerciseType, GradingError, decode_exercise

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradingResult:
    is_correct: bool
    score: float
    feedback: str
    explanation: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys the web layer expects."""
        data: Dict[str, Any] = {
            "isCorrect": self.is_correct,
            "score": self.score,
            "feedback": self.feedback,
        }
        if self.explanation is not None:
            data["explanation"] = self.explanation
        if self.details is not None:
            data["details"] = self.details
        return data


def _correct(feedback: str, explanation: Optional[str] = None, **details: Any) -> GradingResult:
    return GradingResult(True, 1.0, feedback, explanation, details or None)


def _incorrect(feedback: str, explanation: Optional[str] = None, score: float = 0.0, **details: Any) -> GradingResult:
    return GradingResult(False, score, feedback, explanation, details or None)


# ---------------------------------------------------------------------------
# Answer coercion
# ---------------------------------------------------------------------------

_TRUE_WORDS = {"true", "t", "v", "1", "yes", "valid"}
_FALSE_WORDS = {"false", "f", "0", "no", "invalid"}


def _answer_text(answer: Any) -> str:
    if isinstance(answer, str):
        return answer.strip()
    if isinstance(answer, Mapping) and isinstance(answer.get("formula"), str):
        return answer["formula"].strip()
    if isinstance(answer, (list, tuple)) and all(isinstance(part, str) for part in answer):
        # Symbol arrangement submits the placed symbols in order.
        return " ".join(part.strip() for part in answer)
    raise GradingError("Expected a formula as text")


def _answer_bool(answer: Any) -> bool:
    if isinstance(answer, bool):
        return answer
    if isinstance(answer, Mapping) and "isValid" in answer:
        return _answer_bool(answer["isValid"])
    if isinstance(answer, int) and answer in (0, 1):
        return bool(answer)
    if isinstance(answer, str):
        word = answer.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise GradingError(f"Expected a true/false answer, got {answer!r}")


def _answer_ids(answer: Any) -> List[str]:
    if isinstance(answer, str):
        return [answer]
    if isinstance(answer, Mapping):
        answer = answer.get("selected", answer.get("selectedOptionIds", []))
    if isinstance(answer, (list, tuple, set, frozenset)):
        return [str(item) for item in answer]
    raise GradingError(f"Expected option id(s), got {answer!r}")


def _parse_exercise_formula(text: str, what: str) -> Formula:
    outcome = try_parse(text)
    if not outcome.ok:
        raise GradingError(f"Exercise {what} {text!r} is not a valid formula: {outcome.error}")
    return outcome.unwrap()


def _syntax_error(outcome: ParseOutcome, explanation: Optional[str]) -> GradingResult:
    error = outcome.error
    return _incorrect(
        f"Syntax error: {error.message}",
        explanation,
        position=error.position,
        token=error.token,
    )


# ---------------------------------------------------------------------------
# Type-specific graders
# ---------------------------------------------------------------------------

def _grade_equivalence(exercise: Exercise, answer: Any) -> GradingResult:
    target_text = exercise.content.target_formula or exercise.solution.target_formula
    if not target_text:
        raise GradingError("Equivalence exercise has no target formula")
    target = _parse_exercise_formula(target_text, "target formula")
    student = try_parse(_answer_text(answer))
    if not student.ok:
        return _syntax_error(student, exercise.explanation)

    if are_equivalent(student.unwrap(), target):
        return _correct("Correct! Your formula is logically equivalent.", exercise.explanation)

    # First assignment where the two formulas disagree.
    counterexample = get_counter_models(biconditional(student.unwrap(), target))[0]
    return _incorrect(
        "Incorrect. Your formula is not equivalent; check the truth table.",
        exercise.explanation,
        counterexample=counterexample,
    )


def _grade_multiple_choice(exercise: Exercise, answer: Any) -> GradingResult:
    content, solution = exercise.content, exercise.solution
    selected = set(_answer_ids(answer))
    correct = set(solution.correct_option_ids)
    option_explanations = {
        option_id: text for option_id, text in solution.explanations.items() if option_id in selected
    }
    extra = {"optionExplanations": option_explanations} if option_explanations else {}

    if not content.allow_multiple:
        if selected == correct:
            return _correct("Correct!", exercise.explanation, **extra)
        return _incorrect("Incorrect answer.", exercise.explanation, **extra)

    correct_selected = len(selected & correct)
    incorrect_selected = len(selected - correct)
    total_correct = len(correct)
    score = max(0.0, (correct_selected - incorrect_selected) / total_correct)
    details = dict(
        correctSelected=correct_selected,
        incorrectSelected=incorrect_selected,
        totalCorrect=total_correct,
        **extra,
    )
    if correct_selected == total_correct and incorrect_selected == 0:
        return _correct("Correct! You selected every right option.", exercise.explanation, **details)
    return _incorrect(
        f"Partially correct: {correct_selected} of {total_correct} right options selected, "
        f"{incorrect_selected} wrong.",
        exercise.explanation,
        score=score,
        **details,
    )


def _same_spelling(answer: str, candidate: str) -> bool:
    """Token-for-token match up to connective spelling and whitespace."""
    answer_tokens = token_signature(answer)
    candidate_tokens = token_signature(candidate)
    if answer_tokens is None or candidate_tokens is None:
        return normalize_symbols(answer) == normalize_symbols(candidate)
    return answer_tokens == candidate_tokens


def _match_accepted(
    exercise: Exercise, answer: Any
) -> Tuple[Optional[GradingResult], Optional[Formula], Optional[str]]:
    """
    Match an answer against the solution's accepted formulas.

    Returns ``(syntax_error_result, student_formula, match)`` where ``match``
    is ``"exact"``, ``"equivalent"`` or None.
    """
    text = _answer_text(answer)
    accepted = exercise.solution.correct_formulas
    student = try_parse(text)

    if any(_same_spelling(text, candidate) for candidate in accepted):
        return None, student.formula, "exact"
    if not student.ok:
        return _syntax_error(student, exercise.explanation), None, None

    for candidate in accepted:
        outcome = try_parse(candidate)
        if not outcome.ok:
            logger.debug("Skipping unparsable accepted formula %r: %s", candidate, outcome.error)
            continue
        if are_equivalent(student.unwrap(), outcome.unwrap()):
            return None, student.unwrap(), "equivalent"
    return None, student.unwrap(), None


def _grade_accepted_formulas(exercise: Exercise, answer: Any) -> GradingResult:
    error, _, match = _match_accepted(exercise, answer)
    if error is not None:
        return error
    if match is None:
        return _incorrect("Incorrect. Your formula does not match any accepted answer.", exercise.explanation)
    return _correct("Correct!", exercise.explanation, match=match)


def _grade_normal_form(exercise: Exercise, answer: Any) -> GradingResult:
    target_form = exercise.content.target_form
    error, student, match = _match_accepted(exercise, answer)
    if error is not None:
        return error
    in_form = student is not None and is_in_form(student, target_form)
    if match is None:
        return _incorrect(
            "Incorrect. Your formula is not equivalent to the expected result.",
            exercise.explanation,
            inTargetForm=in_form,
        )
    feedback = "Correct!"
    if student is not None and not in_form:
        feedback = f"Correct, your formula is equivalent, but it is not written in {target_form.value}."
    return _correct(feedback, exercise.explanation, match=match, inTargetForm=in_form)


def _grade_validation(exercise: Exercise, answer: Any) -> GradingResult:
    solution = exercise.solution
    explanation = exercise.explanation or solution.explanation or None
    submitted = _answer_bool(answer)
    extra = {"counterexample": solution.counterexample} if solution.counterexample else {}

    if submitted == solution.is_valid:
        verdict = "valid" if solution.is_valid else "invalid"
        return _correct(f"Correct! The argument is {verdict}.", explanation, **extra)
    return _incorrect("Incorrect. Review the argument's premises and conclusion.", explanation, **extra)


def _truth_table_answers(answer: Any) -> Dict[Tuple[int, str], Any]:
    """Flatten the accepted truth-table answer shapes into {(row, column): value}."""
    cells: Dict[Tuple[int, str], Any] = {}
    if isinstance(answer, Mapping):
        for key, value in answer.items():
            if isinstance(value, Mapping):
                for column, cell in value.items():
                    cells[(int(key), str(column))] = cell
            else:
                row, _, column = str(key).partition("-")
                cells[(int(row), column)] = value
    elif isinstance(answer, (list, tuple)):
        for item in answer:
            cells[(int(item["row"]), str(item["column"]))] = item["value"]
    else:
        raise GradingError("Expected truth table cells")
    return cells


def _cell_value(value: Any) -> Optional[bool]:
    try:
        return _answer_bool(value)
    except GradingError:
        return None


def _grade_truth_table(exercise: Exercise, answer: Any) -> GradingResult:
    hidden = exercise.content.hidden_cells
    values = exercise.solution.values
    if not hidden:
        raise GradingError("Truth table exercise has no hidden cells")

    try:
        submitted = _truth_table_answers(answer)
    except (KeyError, TypeError, ValueError) as e:
        raise GradingError(f"Malformed truth table answer: {e}") from e

    correct = 0
    wrong: List[str] = []
    for cell in hidden:
        column = values.get(cell.column)
        if column is None or cell.row >= len(column):
            raise GradingError(f"Solution has no value for row {cell.row}, column {cell.column!r}")
        if _cell_value(submitted.get((cell.row, cell.column))) == column[cell.row]:
            correct += 1
        else:
            wrong.append(f"{cell.row}-{cell.column}")

    total = len(hidden)
    details = dict(correctCells=correct, totalCells=total, incorrectCells=wrong)
    if correct == total:
        return _correct("Correct! Every cell is right.", exercise.explanation, **details)
    return _incorrect(
        f"{correct} of {total} cells are correct.",
        exercise.explanation,
        score=correct / total,
        **details,
    )


def _proof_steps(answer: Any) -> List[str]:
    if isinstance(answer, Mapping):
        answer = answer.get("steps", [])
    if not isinstance(answer, (list, tuple)):
        raise GradingError("Expected a list of proof steps")
    steps = []
    for step in answer:
        if isinstance(step, Mapping):
            step = step.get("formula", "")
        steps.append(str(step).strip())
    return steps


def _grade_proof(exercise: Exercise, answer: Any) -> GradingResult:
    """
    Check a derivation semantically.

    No inference rules are verified: each step only has to be entailed by
    the premises, and the last step has to be equivalent to the conclusion.
    """
    content = exercise.content
    premises = [_parse_exercise_formula(p, "premise") for p in content.premises]
    conclusion = _parse_exercise_formula(content.conclusion, "conclusion")
    steps = _proof_steps(answer)
    if not steps:
        return _incorrect("No proof steps submitted.", exercise.explanation)

    def entailed(step: Formula) -> bool:
        if not premises:
            return is_tautology(step)
        return implies(reduce(conjunction, premises), step)

    supported = 0
    unsupported: List[int] = []
    last: Optional[Formula] = None
    for index, text in enumerate(steps, start=1):
        outcome = try_parse(text)
        last = outcome.formula
        if outcome.ok and entailed(outcome.unwrap()):
            supported += 1
        else:
            unsupported.append(index)

    reaches_conclusion = last is not None and are_equivalent(last, conclusion)
    within_limit = content.max_steps is None or len(steps) <= content.max_steps
    score = supported / len(steps)
    if not (reaches_conclusion and within_limit):
        score /= 2
    details = dict(
        supportedSteps=supported,
        totalSteps=len(steps),
        unsupportedSteps=unsupported,
        reachesConclusion=reaches_conclusion,
        withinStepLimit=within_limit,
        referenceSteps=len(exercise.solution.proof_steps),
    )

    if not unsupported and reaches_conclusion and within_limit:
        return _correct("Correct! Every step follows and you reached the conclusion.", exercise.explanation, **details)
    if unsupported:
        feedback = f"Steps {', '.join(map(str, unsupported))} do not follow from the premises."
    elif not reaches_conclusion:
        feedback = "Every step follows, but the last step is not the conclusion."
    else:
        feedback = f"The proof uses {len(steps)} steps; at most {content.max_steps} are allowed."
    return _incorrect(feedback, exercise.explanation, score=score, **details)


def _grade_identify_fallacy(exercise: Exercise, answer: Any) -> GradingResult:
    solution = exercise.solution
    explanation = exercise.explanation or solution.explanation or None
    if isinstance(answer, Mapping):
        answer = answer.get("fallacyId")
    if not isinstance(answer, str):
        raise GradingError(f"Expected a fallacy id, got {answer!r}")

    if answer.strip() == solution.correct_fallacy_id:
        return _correct("Correct! You identified the fallacy.", explanation)
    return _incorrect("Incorrect. That is not the fallacy in this argument.", explanation)


_GRADERS: Dict[ExerciseType, Callable[[Exercise, Any], GradingResult]] = {
    ExerciseType.EQUIVALENCE: _grade_equivalence,
    ExerciseType.MULTIPLE_CHOICE: _grade_multiple_choice,
    ExerciseType.SYMBOL_ARRANGEMENT: _grade_accepted_formulas,
    ExerciseType.FORMULATION: _grade_accepted_formulas,
    ExerciseType.NORMAL_FORM: _grade_normal_form,
    ExerciseType.VALIDATION: _grade_validation,
    ExerciseType.TRUTH_TABLE: _grade_truth_table,
    ExerciseType.PROOF: _grade_proof,
    ExerciseType.IDENTIFY_FALLACY: _grade_identify_fallacy,
}


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

def grade(exercise: Union[Exercise, Mapping[str, Any]], answer: Any) -> GradingResult:
    """
    Grade one submission.

    Args:
        exercise: decoded Exercise, or a stored record with ``type``,
            ``content``, ``solution`` and optional ``explanation``.
        answer: the student's raw answer (shape depends on the type).

    Returns:
        GradingResult; never raises.
    """
    exercise_type = None
    try:
        if not isinstance(exercise, Exercise):
            exercise = decode_exercise(exercise)
        exercise_type = exercise.type
        logger.debug("Grading %s submission", exercise_type.value)
        return _GRADERS[exercise_type](exercise, answer)
    except GradingError as e:
        logger.warning("Grading failed (%s): %s", exercise_type, e)
        return _incorrect(f"Could not grade this answer: {e}")
    except Exception as e:
        logger.warning("Unexpected grading failure (%s)", exercise_type, exc_info=True)
        return _incorrect(f"Could not grade this answer: {e}")


# ---------------------------------------------------------------------------
# Authoring helpers
# ---------------------------------------------------------------------------

def truth_table_solution(formula_text: str) -> Dict[str, List[bool]]:
    """
    Build the ``values`` block of a TRUTH_TABLE solution from a formula.

    One list per variable plus ``"result"``, in the evaluator's row order.
    """
    table = generate_truth_table(parse(formula_text))
    values: Dict[str, List[bool]] = {
        name: [row.assignment[name] for row in table.rows] for name in table.variables
    }
    values["result"] = [row.result for row in table.rows]
    return values


__all__ = [
    "GradingResult",
    "GradingError",
    "grade",
    "truth_table_solution",
]
