"""
Tests for logic/normal_forms.py rewrite passes and shape predicates.
"""

import pytest

from logic.analyzer import are_equivalent
from logic.formula import format_formula
from logic.normal_forms import (
    Literal,
    NormalForm,
    convert,
    eliminate_implications,
    extract_cnf_clauses,
    extract_dnf_clauses,
    is_cnf,
    is_dnf,
    is_in_form,
    is_nnf,
    push_negations_inward,
    to_cnf,
    to_dnf,
    to_nnf,
)
from logic.parser import parse


def show(formula):
    return format_formula(formula)


class TestEliminateImplications:

    def test_implication(self):
        assert show(eliminate_implications(parse("P -> Q"))) == "¬P ∨ Q"

    def test_biconditional(self):
        assert show(eliminate_implications(parse("P <-> Q"))) == "(¬P ∨ Q) ∧ (¬Q ∨ P)"

    def test_nested_under_negation(self):
        assert show(eliminate_implications(parse("~(P -> Q)"))) == "¬(¬P ∨ Q)"

    def test_leaves_basic_connectives_alone(self):
        f = parse("~P & (Q | R)")
        assert eliminate_implications(f) == f


class TestPushNegations:

    def test_de_morgan_and(self):
        assert show(push_negations_inward(parse("~(P & Q)"))) == "¬P ∨ ¬Q"

    def test_de_morgan_or(self):
        assert show(push_negations_inward(parse("~(P | Q)"))) == "¬P ∧ ¬Q"

    def test_double_negation(self):
        assert push_negations_inward(parse("~~~P")) == parse("~P")

    def test_rejects_implication(self):
        with pytest.raises(ValueError):
            push_negations_inward(parse("P -> Q"))

    def test_rejects_negated_biconditional(self):
        with pytest.raises(ValueError):
            push_negations_inward(parse("~(P <-> Q)"))


class TestPipelines:

    def test_nnf_of_negated_implication(self):
        assert show(to_nnf(parse("~(P -> Q)"))) == "P ∧ ¬Q"

    def test_cnf_distributes_or_over_and(self):
        cnf = to_cnf(parse("(A & B) | (C & D)"))
        assert show(cnf) == "(A ∨ C) ∧ (B ∨ C) ∧ ((A ∨ D) ∧ (B ∨ D))"
        assert is_cnf(cnf)

    def test_dnf_distributes_and_over_or(self):
        assert show(to_dnf(parse("P & (Q | R)"))) == "P ∧ Q ∨ P ∧ R"

    def test_cnf_of_already_cnf_is_unchanged(self):
        f = parse("(P | Q) & ~R")
        assert to_cnf(f) == f

    @pytest.mark.parametrize("form", list(NormalForm))
    def test_convert_dispatches(self, form):
        f = parse("(P -> Q) <-> ~R")
        converted = convert(f, form)
        assert is_in_form(converted, form)
        assert are_equivalent(f, converted)

    @pytest.mark.parametrize(
        "text",
        ["P <-> Q", "~(P & (Q -> R))", "(P | Q) -> (R & S)", "~~(P <-> ~Q)"],
    )
    def test_conversions_preserve_meaning(self, text):
        f = parse(text)
        assert are_equivalent(f, to_nnf(f))
        assert are_equivalent(f, to_cnf(f))
        assert are_equivalent(f, to_dnf(f))


class TestShapePredicates:

    def test_literals_are_in_every_form(self):
        for text in ("P", "~P"):
            f = parse(text)
            assert is_nnf(f) and is_cnf(f) and is_dnf(f)

    def test_nnf(self):
        assert is_nnf(parse("~P & (Q | ~R)"))
        assert not is_nnf(parse("~~P"))
        assert not is_nnf(parse("~(P & Q)"))
        assert not is_nnf(parse("P -> Q"))

    def test_cnf(self):
        assert is_cnf(parse("(P | Q) & ~R"))
        assert is_cnf(parse("P | Q | ~R"))
        assert not is_cnf(parse("P & (Q | R & S)"))
        assert not is_cnf(parse("~(P | Q)"))

    def test_dnf(self):
        assert is_dnf(parse("P & Q | ~R"))
        assert is_dnf(parse("P & ~Q"))
        assert not is_dnf(parse("(P | Q) & R"))

    def test_is_in_form(self):
        f = parse("(P | Q) & R")
        assert is_in_form(f, NormalForm.CNF)
        assert is_in_form(f, NormalForm.NNF)
        assert not is_in_form(f, NormalForm.DNF)


class TestClauseExtraction:

    def test_cnf_clauses(self):
        assert extract_cnf_clauses(parse("(A & B) | C")) == [
            [Literal("A"), Literal("C")],
            [Literal("B"), Literal("C")],
        ]

    def test_cnf_single_clause(self):
        assert extract_cnf_clauses(parse("P -> Q")) == [
            [Literal("P", negated=True), Literal("Q")],
        ]

    def test_dnf_terms(self):
        assert extract_dnf_clauses(parse("P -> Q")) == [
            [Literal("P", negated=True)],
            [Literal("Q")],
        ]

    def test_dnf_of_conjunction_is_one_term(self):
        assert extract_dnf_clauses(parse("P & ~Q")) == [
            [Literal("P"), Literal("Q", negated=True)],
        ]
