"""Record value types and ingestion-time attribute classification.

Every attribute value is one of a closed set of types: `str` (categorical)
or `int` / `float` (numeric). Attribute kinds are classified once, when the
training set is ingested, into a `RecordSchema`; split search then reads the
kind from the schema instead of inspecting values in its inner loop.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping, Sequence
from typing import Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from dtkit.exceptions import AttributeMissingError, EmptyTrainingSetError, TypeMismatchError

# ---------------------------------------------------------------------------
# Public type aliases
# ---------------------------------------------------------------------------

Value: TypeAlias = str | int | float

Record: TypeAlias = Mapping[str, Value]

AttributeKind: TypeAlias = Literal["categorical", "numeric"]

_SUPPORTED_VALUES: str = "a str, int or float value"

# ---------------------------------------------------------------------------
# Public interface -- Value access and classification
# ---------------------------------------------------------------------------


def attribute_value(record: Record, attribute: str) -> Value:
    """Return the value of `attribute` in `record`.

    Args:
        record (Record): The record to read from.
        attribute (str): Attribute name to look up.

    Returns:
        Value: The attribute value.

    Raises:
        AttributeMissingError: If the record has no such attribute.
    """
    try:
        return record[attribute]
    except KeyError:
        raise AttributeMissingError(attribute=attribute, available_attributes=record.keys()) from None


def is_numeric(value: object) -> bool:
    """Return `True` if `value` is a supported numeric value.

    `bool` is a subclass of `int` in Python but is not a supported value type.

    Args:
        value (object): The value to test.

    Returns:
        bool: Whether `value` is an `int` or `float` (numpy scalars included).
    """
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def classify_value(value: object, *, attribute: str | None = None) -> AttributeKind:
    """Classify a single value as categorical or numeric.

    Args:
        value (object): The value to classify.
        attribute (str | None): Attribute the value belongs to, used in error messages.

    Returns:
        AttributeKind: `"categorical"` for strings, `"numeric"` for ints and floats.

    Raises:
        TypeMismatchError: If the value is a `bool`, `None`, NaN, or any other
            unsupported type.

    Examples:
        >>> classify_value("female")
        'categorical'
        >>> classify_value(250)
        'numeric'
    """
    if isinstance(value, str):
        return "categorical"
    if is_numeric(value):
        if math.isnan(value):  # type: ignore[arg-type]
            raise TypeMismatchError(attribute=attribute, value=value, expected="a non-NaN numeric value")
        return "numeric"
    raise TypeMismatchError(attribute=attribute, value=value, expected=_SUPPORTED_VALUES)


def to_builtin(value: Value) -> Value:
    """Convert numpy numeric scalars to the equivalent builtin `int` or `float`.

    Args:
        value (Value): A supported value.

    Returns:
        Value: `value` as a builtin `str`, `int` or `float`.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, numbers.Integral):
        return int(value)
    return float(value)


# ---------------------------------------------------------------------------
# Public models
# ---------------------------------------------------------------------------


class RecordSchema(BaseModel):
    """Attribute universe of a training set with each attribute's kind.

    Attributes are kept in first-appearance order across the training set,
    which fixes the order in which split candidates are enumerated.

    Attributes:
        attributes (dict[str, AttributeKind]): Mapping of attribute name to kind.

    Examples:
        >>> schema = RecordSchema(attributes={"weight": "numeric", "sex": "categorical"})
        >>> schema.kind_of("weight")
        'numeric'
    """

    model_config = ConfigDict(frozen=True)

    attributes: dict[str, AttributeKind] = Field(
        description="Mapping of attribute name to its kind, in first-appearance order.",
    )

    @property
    def attribute_names(self) -> list[str]:
        """Attribute names in first-appearance order."""
        return list(self.attributes)

    def kind_of(self, attribute: str) -> AttributeKind:
        """Return the kind of `attribute`.

        Args:
            attribute (str): Attribute name.

        Returns:
            AttributeKind: The classified kind.

        Raises:
            AttributeMissingError: If the attribute is not part of the schema.
        """
        try:
            return self.attributes[attribute]
        except KeyError:
            raise AttributeMissingError(attribute=attribute, available_attributes=self.attributes) from None


def infer_schema(records: Sequence[Record]) -> RecordSchema:
    """Classify every attribute of a training set and check the records agree.

    `int` and `float` values may be mixed within one attribute (both are
    numeric), but mixing strings and numbers is rejected.

    Args:
        records (Sequence[Record]): The training set.

    Returns:
        RecordSchema: The classified attribute universe.

    Raises:
        EmptyTrainingSetError: If `records` is empty.
        AttributeMissingError: If any record lacks an attribute that another
            record carries.
        TypeMismatchError: If a value is unsupported or an attribute mixes
            categorical and numeric values.
    """
    if not records:
        raise EmptyTrainingSetError()

    attribute_names = list(dict.fromkeys(name for record in records for name in record))
    kinds: dict[str, AttributeKind] = {}
    for record in records:
        for name in attribute_names:
            value = attribute_value(record, name)
            kind = classify_value(value, attribute=name)
            expected_kind = kinds.setdefault(name, kind)
            if kind != expected_kind:
                raise TypeMismatchError(attribute=name, value=value, expected=f"a {expected_kind} value")
    return RecordSchema(attributes=kinds)
