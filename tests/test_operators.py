"""
Tests for the operator catalog in logic/operators.py.
"""

from logic.formula import CONNECTIVE_SYMBOLS, NOT_SYMBOL, PRECEDENCE, Connective
from logic.operators import (
    ALL_OPERATORS,
    DISPLAY_OPERATORS,
    PROPOSITIONAL_OPERATORS,
    LogicType,
    input_spellings,
    operator_by_id,
    operator_by_symbol,
    operators_by_type,
)
from logic.parser import TokenKind, tokenize


class TestCatalog:

    def test_ids_are_unique(self):
        ids = [op.id for op in ALL_OPERATORS]
        assert len(ids) == len(set(ids))

    def test_only_propositional_operators_are_parseable(self):
        assert all(op.parseable for op in PROPOSITIONAL_OPERATORS)
        assert not any(op.parseable for op in DISPLAY_OPERATORS)

    def test_every_logic_family_is_listed(self):
        for logic_type in LogicType:
            assert operators_by_type(logic_type)

    def test_display_symbols_match_formatter(self):
        assert operator_by_id("NOT").symbol == NOT_SYMBOL
        for connective, symbol in CONNECTIVE_SYMBOLS.items():
            assert operator_by_id(connective.value).symbol == symbol

    def test_precedence_matches_formula_model(self):
        for connective in Connective:
            assert operator_by_id(connective.value).precedence == PRECEDENCE[connective]


class TestLookups:

    def test_operator_by_id_unknown(self):
        assert operator_by_id("XOR") is None

    def test_operator_by_symbol_alternatives(self):
        assert operator_by_symbol("->").id == "IMPLIES"
        assert operator_by_symbol("⊃").id == "IMPLIES"
        assert operator_by_symbol("≡").id == "IFF"
        assert operator_by_symbol("□").id == "NECESSARY"

    def test_operator_by_symbol_unknown(self):
        assert operator_by_symbol("⊕") is None


class TestInputSpellings:

    def test_spellings_cover_catalog(self):
        spellings = input_spellings()
        assert spellings["~"] == "NOT"
        assert spellings["^"] == "AND"
        assert spellings["|"] == "OR"
        assert spellings["=>"] == "IMPLIES"
        assert spellings["<=>"] == "IFF"

    def test_every_spelling_tokenizes_to_its_operator(self):
        for spelling, op_id in input_spellings().items():
            tokens = tokenize(f"P {spelling} Q" if op_id != "NOT" else f"{spelling}P")
            kinds = {t.kind for t in tokens}
            assert TokenKind[op_id] in kinds
