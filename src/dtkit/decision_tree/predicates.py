"""Split predicates: the `==` and `>=` comparisons used by tree nodes."""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import Any, Final, Literal, TypeAlias

from dtkit.decision_tree.values import AttributeKind, Value, is_numeric
from dtkit.exceptions import TypeMismatchError

PredicateKind: TypeAlias = Literal["==", ">="]

EQUALS: Final[PredicateKind] = "=="
GREATER_OR_EQUAL: Final[PredicateKind] = ">="

_PREDICATE_FOR_KIND: dict[AttributeKind, PredicateKind] = {
    "categorical": EQUALS,
    "numeric": GREATER_OR_EQUAL,
}

_PREDICATE_OPS: dict[PredicateKind, Callable[[Any, Any], bool]] = {
    EQUALS: operator.eq,
    GREATER_OR_EQUAL: operator.ge,
}


def predicate_for_kind(kind: AttributeKind) -> PredicateKind:
    """Return the predicate used to split on an attribute of the given kind.

    Args:
        kind (AttributeKind): The attribute kind from the record schema.

    Returns:
        PredicateKind: `"=="` for categorical attributes, `">="` for numeric ones.
    """
    return _PREDICATE_FOR_KIND[kind]


def evaluate_predicate(
    predicate: PredicateKind,
    value: Value,
    pivot: Value,
    *,
    attribute: str | None = None,
) -> bool:
    """Evaluate `value <predicate> pivot`.

    `==` accepts two strings or two numbers. `>=` accepts two numbers only;
    `int` and `float` compare by numeric value. Any other pairing is an
    error rather than a silent `False`.

    Args:
        predicate (PredicateKind): The comparison to apply.
        value (Value): The record's attribute value.
        pivot (Value): The node's pivot value.
        attribute (str | None): Attribute being compared, used in error messages.

    Returns:
        bool: Whether the record matches the predicate.

    Raises:
        TypeMismatchError: If `value` and `pivot` cannot be compared with `predicate`.
        ValueError: If `predicate` is not a recognized predicate kind.

    Examples:
        >>> evaluate_predicate(">=", 30, 20)
        True
        >>> evaluate_predicate(">=", 19.5, 20)
        False
        >>> evaluate_predicate("==", "male", "female")
        False
    """
    compare = _PREDICATE_OPS.get(predicate)
    if compare is None:
        raise ValueError(f"Unexpected predicate: {predicate!r}")
    _validate_comparable(predicate, value, pivot, attribute=attribute)
    return bool(compare(value, pivot))


def _validate_comparable(
    predicate: PredicateKind,
    value: Value,
    pivot: Value,
    *,
    attribute: str | None,
) -> None:
    """Raise TypeMismatchError when `value` and `pivot` are not comparable under `predicate`.

    Args:
        predicate (PredicateKind): The comparison being applied.
        value (Value): The record's attribute value.
        pivot (Value): The node's pivot value.
        attribute (str | None): Attribute being compared, used in error messages.

    Raises:
        TypeMismatchError: If the value types do not fit the predicate.
    """
    if is_numeric(value) and is_numeric(pivot):
        return
    if predicate == EQUALS and isinstance(value, str) and isinstance(pivot, str):
        return
    expected = "a numeric value" if is_numeric(pivot) else f"a value comparable with {pivot!r} using '{predicate}'"
    raise TypeMismatchError(attribute=attribute, value=value, expected=expected)
