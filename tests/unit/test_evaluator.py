"""Unit tests for the derived-field evaluator."""

import logging
from datetime import date, datetime

import pytest

from form_builder.runtime import evaluator as evaluator_module
from form_builder.runtime.evaluator import (
    PatternFormulaEvaluator,
    evaluate_derived_field,
    normalize_label,
)
from form_builder.schemas.form import DerivedFieldFormula

from form_factories import make_field

NOW = datetime(2024, 6, 1)


def formula(expression, depends_on):
    return DerivedFieldFormula(expression=expression, depends_on=depends_on)


@pytest.fixture
def number_fields():
    return [
        make_field("f1", type="number", label="Field One"),
        make_field("f2", type="number", label="Field Two"),
        make_field("f3", type="text", label="Notes"),
    ]


class TestNormalizeLabel:
    @pytest.mark.parametrize(
        "label,expected",
        [
            ("Field One", "field_one"),
            ("Birth  Date", "birth_date"),
            ("  Padded ", "_padded_"),
            ("Price\tNet", "price_net"),
            ("AGE", "age"),
        ],
    )
    def test_normalize(self, label, expected):
        assert normalize_label(label) == expected


class TestFunctionCalls:
    def test_sum_of_dependencies(self, number_fields):
        result = evaluate_derived_field(
            formula("sum(field_one, field_two)", ["f1", "f2"]),
            {"f1": 3, "f2": 4},
            number_fields,
            now=NOW,
        )
        assert result == 7

    def test_sum_treats_non_numeric_as_zero(self, number_fields):
        result = evaluate_derived_field(
            formula("sum(field_one, notes)", ["f1", "f3"]),
            {"f1": 3, "f3": "hello"},
            number_fields,
            now=NOW,
        )
        assert result == 3

    def test_avg(self, number_fields):
        result = evaluate_derived_field(
            formula("avg(field_one, field_two)", ["f1", "f2"]),
            {"f1": 3, "f2": 4},
            number_fields,
            now=NOW,
        )
        assert result == 3.5

    def test_numeric_literal_arguments(self, number_fields):
        result = evaluate_derived_field(
            formula("max(field_one, 10)", ["f1"]),
            {"f1": 3},
            number_fields,
            now=NOW,
        )
        assert result == 10

    @pytest.mark.parametrize(
        "expression,expected",
        [("round(field_one)", 3), ("floor(field_one)", 2), ("ceil(field_one)", 3)],
    )
    def test_rounding_functions(self, number_fields, expression, expected):
        result = evaluate_derived_field(
            formula(expression, ["f1"]), {"f1": 2.5}, number_fields, now=NOW
        )
        assert result == expected

    def test_today_uses_evaluation_clock(self, number_fields):
        result = evaluate_derived_field(formula("today()", ["f1"]), {"f1": 1}, number_fields, now=NOW)
        assert result == date(2024, 6, 1)

    def test_unknown_function_yields_none(self, number_fields):
        result = evaluate_derived_field(
            formula("median(field_one)", ["f1"]), {"f1": 1}, number_fields, now=NOW
        )
        assert result is None

    def test_function_error_is_logged_and_yields_none(self, number_fields, caplog):
        with caplog.at_level(logging.ERROR):
            result = evaluate_derived_field(
                formula("floor(notes)", ["f3"]), {"f3": "text"}, number_fields, now=NOW
            )

        assert result is None
        assert "Error evaluating derived field formula" in caplog.text


class TestAge:
    def test_age_from_iso_string(self, age_fields, fixed_now):
        result = evaluate_derived_field(
            age_fields[1].formula, {"birthDate": "2000-01-01"}, age_fields, now=fixed_now
        )
        assert result == 24

    def test_age_from_date_object(self, age_fields, fixed_now):
        result = evaluate_derived_field(
            age_fields[1].formula, {"birthDate": date(2000, 6, 2)}, age_fields, now=fixed_now
        )
        assert result == 23

    def test_age_with_empty_birth_date_is_not_computable(self, age_fields, fixed_now):
        result = evaluate_derived_field(
            age_fields[1].formula, {"birthDate": ""}, age_fields, now=fixed_now
        )
        assert result is None

    def test_age_with_unreadable_date_yields_none(self, age_fields, fixed_now):
        result = evaluate_derived_field(
            age_fields[1].formula, {"birthDate": "someday"}, age_fields, now=fixed_now
        )
        assert result is None

    @pytest.mark.parametrize("birth_date", ["", None, "someday"])
    def test_missing_birth_date_is_not_an_error(self, age_fields, fixed_now, caplog, birth_date):
        with caplog.at_level(logging.DEBUG):
            evaluate_derived_field(age_fields[1].formula, {"birthDate": birth_date}, age_fields, now=fixed_now)

        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    def test_default_clock_is_used_without_now(self, age_fields):
        evaluator = PatternFormulaEvaluator(clock=lambda: datetime(2010, 1, 2))

        result = evaluator.evaluate(age_fields[1].formula, {"birthDate": "2000-01-01"}, age_fields)

        assert result == 10


class TestArithmetic:
    def test_runs_on_installed_json_logic_engine(self, caplog):
        fields = [
            make_field("p", type="number", label="Price"),
            make_field("s", type="number", label="Shipping"),
        ]

        with caplog.at_level(logging.DEBUG):
            result = evaluate_derived_field(
                formula("(price + shipping) * 2", ["p", "s"]), {"p": 10, "s": 2.5}, fields, now=NOW
            )

        assert result == 25
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    @pytest.mark.parametrize(
        "value,expected",
        [(0.00005, 0.0001), (1.5e-7, 3e-7), (1e16, 2e16), (1e20, 2e20)],
    )
    def test_floats_outside_plain_notation_range(self, number_fields, value, expected):
        result = evaluate_derived_field(
            formula("field_one * 2", ["f1"]), {"f1": value}, number_fields, now=NOW
        )
        assert result == pytest.approx(expected)

    def test_addition_of_dependencies(self, number_fields):
        result = evaluate_derived_field(
            formula("field_one + field_two", ["f1", "f2"]), {"f1": 3, "f2": 4}, number_fields, now=NOW
        )
        assert result == 7

    def test_precedence_and_parentheses(self, number_fields):
        result = evaluate_derived_field(
            formula("(field_one + field_two) * 2 - field_one / 3", ["f1", "f2"]),
            {"f1": 3, "f2": 4},
            number_fields,
            now=NOW,
        )
        assert result == 13

    def test_fractional_result(self, number_fields):
        result = evaluate_derived_field(
            formula("field_one / field_two", ["f1", "f2"]), {"f1": 3, "f2": 4}, number_fields, now=NOW
        )
        assert result == 0.75

    def test_negative_values(self, number_fields):
        result = evaluate_derived_field(
            formula("field_one - field_two", ["f1", "f2"]), {"f1": -3, "f2": -4}, number_fields, now=NOW
        )
        assert result == 1

    def test_whole_word_substitution_only(self):
        fields = [
            make_field("a", type="number", label="rate"),
            make_field("b", type="number", label="rate total"),
        ]

        result = evaluate_derived_field(
            formula("rate_total - rate", ["a", "b"]), {"a": 2, "b": 10}, fields, now=NOW
        )

        assert result == 8

    def test_unsafe_expression_is_refused(self, number_fields, monkeypatch):
        calls = []
        monkeypatch.setattr(evaluator_module, "jsonLogic", lambda *args: calls.append(args))

        result = evaluate_derived_field(
            formula("field_one + alert(1)", ["f1"]), {"f1": 3}, number_fields, now=NOW
        )

        assert result is None
        assert calls == []

    def test_non_numeric_dependency_is_not_substituted(self, number_fields):
        result = evaluate_derived_field(
            formula("notes * 2", ["f3"]), {"f3": "7"}, number_fields, now=NOW
        )
        assert result is None

    def test_division_by_zero_yields_none(self, number_fields, caplog):
        with caplog.at_level(logging.ERROR):
            result = evaluate_derived_field(
                formula("field_one / field_two", ["f1", "f2"]), {"f1": 3, "f2": 0}, number_fields, now=NOW
            )

        assert result is None
        assert "Error evaluating arithmetic expression" in caplog.text

    def test_power_operator_is_rejected(self, number_fields):
        result = evaluate_derived_field(
            formula("field_one ** 2", ["f1"]), {"f1": 3}, number_fields, now=NOW
        )
        assert result is None

    def test_refused_arithmetic_falls_through_to_function_call(self, number_fields):
        result = evaluate_derived_field(
            formula("sum(field_one, field_two) + notes", ["f1", "f2", "f3"]),
            {"f1": 3, "f2": 4, "f3": "x"},
            number_fields,
            now=NOW,
        )
        assert result == 7


class TestBranchPrecedence:
    def test_age_branch_wins_over_arithmetic(self, fixed_now):
        fields = [make_field("b", type="date", label="born")]

        result = evaluate_derived_field(formula("age(born) - 1", ["b"]), {"b": "2000-01-01"}, fields, now=fixed_now)

        assert result == 24

    def test_direct_reference(self, number_fields):
        result = evaluate_derived_field(formula("notes", ["f3"]), {"f3": "copied"}, number_fields, now=NOW)
        assert result == "copied"

    def test_function_name_is_not_a_reference(self, number_fields):
        result = evaluate_derived_field(formula("today", ["f1"]), {"f1": 1}, number_fields, now=NOW)
        assert result is None

    def test_builtins_shadow_same_named_labels(self):
        fields = [make_field("s", type="number", label="Sum")]

        result = evaluate_derived_field(formula("sum", ["s"]), {"s": 5}, fields, now=NOW)

        assert result is None

    def test_unmatched_expression_yields_none(self, number_fields):
        result = evaluate_derived_field(formula("something else", ["f1"]), {"f1": 1}, number_fields, now=NOW)
        assert result is None


class TestContext:
    def test_empty_depends_on_yields_none(self, number_fields):
        result = evaluate_derived_field(formula("today()", []), {}, number_fields, now=NOW)
        assert result is None

    def test_unknown_dependency_is_skipped(self, number_fields):
        result = evaluate_derived_field(
            formula("sum(field_one, ghost)", ["f1", "ghost"]), {"f1": 2}, number_fields, now=NOW
        )
        assert result == 2

    def test_colliding_labels_last_dependency_wins(self):
        fields = [
            make_field("x1", type="number", label="Amount"),
            make_field("x2", type="number", label="amount"),
        ]

        first_wins = evaluate_derived_field(formula("amount", ["x2", "x1"]), {"x1": 1, "x2": 2}, fields, now=NOW)
        second_wins = evaluate_derived_field(formula("amount", ["x1", "x2"]), {"x1": 1, "x2": 2}, fields, now=NOW)

        assert first_wins == 1
        assert second_wins == 2

    def test_dependencies_not_listed_are_invisible(self, number_fields):
        result = evaluate_derived_field(
            formula("field_two", ["f1"]), {"f1": 1, "f2": 2}, number_fields, now=NOW
        )
        assert result is None
