"""Frequency counting and Shannon entropy over one attribute of a record set."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

import numpy as np

from dtkit.decision_tree.values import Record, attribute_value
from dtkit.exceptions import EmptyTrainingSetError, TypeMismatchError


def count_unique_values(records: Sequence[Record], attribute: str) -> dict[str, int]:
    """Count occurrences of each distinct categorical value of `attribute`.

    Keys appear in the order they are first encountered in `records`.

    Args:
        records (Sequence[Record]): The records to tally.
        attribute (str): A categorical attribute, normally the category attribute.

    Returns:
        dict[str, int]: Mapping of value to count. Counts sum to `len(records)`.

    Raises:
        AttributeMissingError: If a record lacks `attribute`.
        TypeMismatchError: If a value of `attribute` is not a string.

    Examples:
        >>> records = [{"param": "yes"}, {"param": "no"}, {"param": "yes"}, {"param": "yes"}]
        >>> count_unique_values(records, "param")
        {'yes': 3, 'no': 1}
    """
    counts: Counter[str] = Counter()
    for record in records:
        value = attribute_value(record, attribute)
        if not isinstance(value, str):
            raise TypeMismatchError(attribute=attribute, value=value, expected="a categorical (str) value")
        counts[value] += 1
    return dict(counts)


def entropy(records: Sequence[Record], attribute: str) -> float:
    """Shannon entropy of `attribute` over `records`, in natural-log units.

    Computes `sum(-p * ln(p))` over the proportion `p` of each distinct value.
    The entropy of an empty set is `0.0`.

    Args:
        records (Sequence[Record]): The records to measure.
        attribute (str): A categorical attribute, normally the category attribute.

    Returns:
        float: Non-negative entropy; `0.0` exactly when all values are equal.
    """
    if not records:
        return 0.0
    counts = np.fromiter(count_unique_values(records, attribute).values(), dtype=np.float64)
    proportions = counts / len(records)
    # Adding 0.0 turns the -0.0 of a pure set into 0.0.
    return -float(np.sum(proportions * np.log(proportions))) + 0.0


def most_frequent_value(records: Sequence[Record], attribute: str) -> str:
    """Return the most frequent categorical value of `attribute`.

    Ties go to the value encountered first in `records`.

    Args:
        records (Sequence[Record]): The records to inspect.
        attribute (str): A categorical attribute, normally the category attribute.

    Returns:
        str: The value with the highest count.

    Raises:
        EmptyTrainingSetError: If `records` is empty.
    """
    if not records:
        raise EmptyTrainingSetError("Cannot find the most frequent value of an empty record set")
    counts = count_unique_values(records, attribute)
    return max(counts, key=counts.__getitem__)
