from .formula import Atom, Not, Binary, Connective, Formula, format_formula
from .parser import FormulaSyntaxError, ParseOutcome, parse, try_parse
from .evaluator import (
    TruthTable,
    TruthTableRow,
    TruthTableTooLarge,
    evaluate,
    generate_truth_table,
    get_variables,
)
from .analyzer import (
    Classification,
    analyze_formula,
    are_equivalent,
    classify_formula,
    compare_formulas,
    count_connectives,
    formula_to_string,
    get_counter_models,
    get_formula_depth,
    get_models,
    get_subformulas,
    implies,
    is_contradiction,
    is_satisfiable,
    is_tautology,
)
from .normal_forms import NormalForm, to_cnf, to_dnf, to_nnf
