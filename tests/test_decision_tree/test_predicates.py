"""Tests for predicate selection and evaluation."""

from __future__ import annotations

import pytest
from pytest_check import check

from dtkit.decision_tree.predicates import (
    EQUALS,
    GREATER_OR_EQUAL,
    evaluate_predicate,
    predicate_for_kind,
)
from dtkit.exceptions import TypeMismatchError


class TestPredicateForKind:
    """Tests for `predicate_for_kind`: the predicate is chosen from the attribute kind."""

    def test_categorical_uses_equals(self) -> None:
        """Categorical attributes split on equality."""
        assert predicate_for_kind("categorical") == EQUALS == "=="

    def test_numeric_uses_greater_or_equal(self) -> None:
        """Numeric attributes split on a greater-or-equal threshold."""
        assert predicate_for_kind("numeric") == GREATER_OR_EQUAL == ">="


class TestEvaluatePredicate:
    """Tests for `evaluate_predicate`."""

    @pytest.mark.parametrize(
        ("value", "pivot", "expected"),
        [
            (20, 20, True),
            (30, 20, True),
            (1, 20, False),
            (20.0, 20, True),
            (19.99, 20, False),
            (21, 20.5, True),
            (-1, 0.0, False),
        ],
    )
    def test_greater_or_equal_compares_numerically(self, value: float, pivot: float, expected: bool) -> None:
        """`>=` compares ints and floats by numeric value.

        Args:
            value (float): The record value.
            pivot (float): The node pivot.
            expected (bool): Expected outcome.
        """
        assert evaluate_predicate(">=", value, pivot) is expected

    def test_equals_on_strings(self) -> None:
        """`==` compares strings by value."""
        with check:
            assert evaluate_predicate("==", "male", "male") is True
        with check:
            assert evaluate_predicate("==", "female", "male") is False

    def test_equals_on_numbers(self) -> None:
        """`==` between two numbers compares numerically."""
        with check:
            assert evaluate_predicate("==", 3, 3.0) is True
        with check:
            assert evaluate_predicate("==", 3, 4) is False

    @pytest.mark.parametrize(
        ("predicate", "value", "pivot"),
        [
            ("==", 3, "3"),
            ("==", "3", 3),
            (">=", "30", 20),
            (">=", 30, "20"),
            (">=", "b", "a"),
            (">=", True, 0),
            ("==", None, "male"),
        ],
    )
    def test_incompatible_types_raise_type_mismatch(self, predicate: str, value: object, pivot: object) -> None:
        """Comparing values of incompatible kinds is an error, not a silent False.

        Args:
            predicate (str): The predicate kind.
            value (object): The record value.
            pivot (object): The node pivot.
        """
        with pytest.raises(TypeMismatchError) as exc_info:
            evaluate_predicate(predicate, value, pivot, attribute="age")  # type: ignore[arg-type]
        assert exc_info.value.attribute == "age"

    def test_unknown_predicate_raises_value_error(self) -> None:
        """Only `==` and `>=` are predicate kinds."""
        with pytest.raises(ValueError, match="Unexpected predicate"):
            evaluate_predicate("<", 1, 2)  # type: ignore[arg-type]
