"""
Tests for grading/exercises.py schema decoding.
"""

import json

import pytest

from grading.exercises import (
    EXERCISE_TYPES,
    SCHEMAS,
    ExerciseType,
    GradingError,
    MultipleChoiceContent,
    decode_exercise,
    exercise_types_by_difficulty,
)
from logic.normal_forms import NormalForm


class TestExerciseTypes:

    def test_catalog_covers_every_type(self):
        assert set(EXERCISE_TYPES) == set(ExerciseType)
        assert set(SCHEMAS) == set(ExerciseType)

    def test_by_difficulty(self):
        assert exercise_types_by_difficulty("EASY") == [ExerciseType.MULTIPLE_CHOICE]
        assert ExerciseType.PROOF in exercise_types_by_difficulty("HARD")
        assert exercise_types_by_difficulty("IMPOSSIBLE") == []


class TestDecodeExercise:

    def test_equivalence(self):
        exercise = decode_exercise({
            "type": "EQUIVALENCE",
            "content": {"targetFormula": "P -> Q"},
            "solution": {},
            "explanation": "Material implication.",
        })
        assert exercise.type == ExerciseType.EQUIVALENCE
        assert exercise.content.target_formula == "P -> Q"
        assert exercise.explanation == "Material implication."

    def test_equivalence_legacy_formula_field(self):
        exercise = decode_exercise({"type": "EQUIVALENCE", "formula": "P & Q", "content": {}, "solution": {}})
        assert exercise.content.target_formula == "P & Q"

    def test_equivalence_target_in_solution(self):
        exercise = decode_exercise({"type": "EQUIVALENCE", "content": {}, "solution": {"targetFormula": "P -> Q"}})
        assert exercise.content.target_formula is None
        assert exercise.solution.target_formula == "P -> Q"

    def test_content_target_wins_over_legacy_field(self):
        exercise = decode_exercise({
            "type": "EQUIVALENCE",
            "formula": "P & Q",
            "content": {"targetFormula": "P | Q"},
            "solution": {},
        })
        assert exercise.content.target_formula == "P | Q"

    def test_json_string_payloads(self):
        exercise = decode_exercise({
            "type": "MULTIPLE_CHOICE",
            "content": json.dumps({"question": "Which?", "options": [{"id": "a", "text": "P"}], "allowMultiple": True}),
            "solution": json.dumps({"correctOptionIds": ["a"]}),
        })
        assert isinstance(exercise.content, MultipleChoiceContent)
        assert exercise.content.allow_multiple
        assert exercise.solution.correct_option_ids == ["a"]

    def test_snake_case_field_names(self):
        exercise = decode_exercise({
            "type": "MULTIPLE_CHOICE",
            "content": {"allow_multiple": True},
            "solution": {"correct_option_ids": ["b"]},
        })
        assert exercise.content.allow_multiple
        assert exercise.solution.correct_option_ids == ["b"]

    def test_truth_table(self):
        exercise = decode_exercise({
            "type": "TRUTH_TABLE",
            "content": {"formula": "P & Q", "hiddenCells": [{"row": 0, "column": "result"}]},
            "solution": {"values": {"result": [True, False, False, False]}},
        })
        assert exercise.content.hidden_cells[0].row == 0
        assert exercise.content.hidden_cells[0].column == "result"

    def test_normal_form_target(self):
        exercise = decode_exercise({
            "type": "NORMAL_FORM",
            "content": {"formula": "P -> Q", "targetForm": "CNF"},
            "solution": {"correctFormulas": ["~P | Q"]},
        })
        assert exercise.content.target_form == NormalForm.CNF

    def test_proof(self):
        exercise = decode_exercise({
            "type": "PROOF",
            "content": {"premises": ["P -> Q", "P"], "conclusion": "Q", "maxSteps": 3},
            "solution": {"proofSteps": [{"formula": "Q", "justification": "MP", "lineRefs": [1, 2]}]},
        })
        assert exercise.content.max_steps == 3
        assert exercise.solution.proof_steps[0].line_refs == [1, 2]

    def test_decoded_models_are_frozen(self):
        exercise = decode_exercise({
            "type": "IDENTIFY_FALLACY",
            "content": {"argument": "..."},
            "solution": {"correctFallacyId": "ad_hominem"},
        })
        with pytest.raises(Exception):
            exercise.solution.correct_fallacy_id = "straw_man"


class TestDecodeErrors:

    def test_unknown_type(self):
        with pytest.raises(GradingError, match="Unknown exercise type"):
            decode_exercise({"type": "ESSAY", "content": {}, "solution": {}})

    def test_missing_type(self):
        with pytest.raises(GradingError):
            decode_exercise({"content": {}, "solution": {}})

    def test_invalid_json_string(self):
        with pytest.raises(GradingError, match="not valid JSON"):
            decode_exercise({"type": "VALIDATION", "content": "{oops", "solution": {}})

    def test_missing_required_field(self):
        with pytest.raises(GradingError, match="VALIDATION"):
            decode_exercise({"type": "VALIDATION", "content": {"premises": ["P"]}, "solution": {"isValid": True}})

    def test_empty_correct_options(self):
        with pytest.raises(GradingError):
            decode_exercise({"type": "MULTIPLE_CHOICE", "content": {}, "solution": {"correctOptionIds": []}})

    def test_negative_hidden_row(self):
        with pytest.raises(GradingError):
            decode_exercise({
                "type": "TRUTH_TABLE",
                "content": {"formula": "P", "hiddenCells": [{"row": -1, "column": "P"}]},
                "solution": {"values": {"P": [True, False]}},
            })

    def test_unknown_target_form(self):
        with pytest.raises(GradingError):
            decode_exercise({
                "type": "NORMAL_FORM",
                "content": {"formula": "P", "targetForm": "ANF"},
                "solution": {"correctFormulas": ["P"]},
            })
