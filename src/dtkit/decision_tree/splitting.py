"""Candidate split enumeration, partitioning and information-gain scoring."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from functools import reduce

from loguru import logger

from dtkit.decision_tree.predicates import PredicateKind, evaluate_predicate, predicate_for_kind
from dtkit.decision_tree.statistics import entropy
from dtkit.decision_tree.values import Record, RecordSchema, Value, attribute_value


@dataclass(frozen=True, slots=True)
class Split:
    """One scored partition of a record set.

    Attributes:
        match (tuple[Record, ...]): Records satisfying the predicate, in input order.
        no_match (tuple[Record, ...]): Records failing the predicate, in input order.
        gain (float): Information gain of the partition; `0.0` means the split
            does not reduce entropy.
        attribute (str): Attribute the predicate tests.
        predicate (PredicateKind): Comparison applied to the attribute.
        pivot (Value): Value the attribute is compared against.
    """

    match: tuple[Record, ...]
    no_match: tuple[Record, ...]
    gain: float
    attribute: str
    predicate: PredicateKind
    pivot: Value


def partition(
    records: Sequence[Record],
    attribute: str,
    predicate: PredicateKind,
    pivot: Value,
) -> tuple[list[Record], list[Record]]:
    """Partition records by evaluating `record[attribute] <predicate> pivot`.

    Args:
        records (Sequence[Record]): The records to partition.
        attribute (str): Attribute to test.
        predicate (PredicateKind): Comparison to apply.
        pivot (Value): Value to compare against.

    Returns:
        tuple[list[Record], list[Record]]: `(match, no_match)`, each preserving
            the relative order of `records`.

    Raises:
        AttributeMissingError: If a record lacks `attribute`.
        TypeMismatchError: If a value cannot be compared with `pivot`.

    Examples:
        >>> records = [{"age": 20}, {"age": 30}, {"age": 1}]
        >>> partition(records, "age", ">=", 20)
        ([{'age': 20}, {'age': 30}], [{'age': 1}])
    """
    match: list[Record] = []
    no_match: list[Record] = []
    for record in records:
        value = attribute_value(record, attribute)
        if evaluate_predicate(predicate, value, pivot, attribute=attribute):
            match.append(record)
        else:
            no_match.append(record)
    return match, no_match


def score_split(
    records: Sequence[Record],
    attribute: str,
    predicate: PredicateKind,
    pivot: Value,
    parent_entropy: float,
    *,
    category_attribute: str,
) -> Split:
    """Partition `records` and score the partition by information gain.

    The gain is `parent_entropy` minus the size-weighted mean entropy of the
    two subsets. A partition that leaves either side empty cannot separate
    anything and scores exactly `0.0`.

    Args:
        records (Sequence[Record]): The records to split.
        attribute (str): Attribute to test.
        predicate (PredicateKind): Comparison to apply.
        pivot (Value): Value to compare against.
        parent_entropy (float): Entropy of `category_attribute` over `records`.
        category_attribute (str): The label attribute whose entropy is measured.

    Returns:
        Split: The scored partition.
    """
    match, no_match = partition(records, attribute, predicate, pivot)
    if match and no_match:
        weighted_entropy = (
            len(match) * entropy(match, category_attribute) + len(no_match) * entropy(no_match, category_attribute)
        ) / len(records)
        gain = parent_entropy - weighted_entropy
    else:
        gain = 0.0
    logger.trace("Scored candidate split", attribute=attribute, predicate=predicate, pivot=pivot, gain=gain)
    return Split(
        match=tuple(match),
        no_match=tuple(no_match),
        gain=gain,
        attribute=attribute,
        predicate=predicate,
        pivot=pivot,
    )


def iter_candidates(
    records: Sequence[Record],
    candidate_attributes: Sequence[str],
) -> Iterator[tuple[str, Value]]:
    """Yield every observed `(attribute, pivot)` pair once.

    Pairs are yielded record by record, and within a record in the order of
    `candidate_attributes`. Repeated pairs are skipped since they would produce
    an identical split.

    Args:
        records (Sequence[Record]): The records whose values become pivots.
        candidate_attributes (Sequence[str]): Attributes eligible for splitting.

    Yields:
        tuple[str, Value]: An `(attribute, pivot)` candidate.
    """
    seen: set[tuple[str, Value]] = set()
    for record in records:
        for attribute in candidate_attributes:
            candidate = (attribute, attribute_value(record, attribute))
            if candidate not in seen:
                seen.add(candidate)
                yield candidate


def find_best_split(
    records: Sequence[Record],
    *,
    category_attribute: str,
    candidate_attributes: Sequence[str],
    schema: RecordSchema,
    parent_entropy: float,
) -> Split | None:
    """Score every candidate split and return the one with the highest gain.

    A later candidate replaces the current best only when its gain is strictly
    greater, so ties go to the first candidate enumerated.

    Args:
        records (Sequence[Record]): The records to split.
        category_attribute (str): The label attribute.
        candidate_attributes (Sequence[str]): Attributes eligible for splitting.
        schema (RecordSchema): Attribute kinds, used to pick each predicate.
        parent_entropy (float): Entropy of `category_attribute` over `records`.

    Returns:
        Split | None: The best split, or `None` if there are no candidates.
    """
    predicates = {attribute: predicate_for_kind(schema.kind_of(attribute)) for attribute in candidate_attributes}
    scored_splits = (
        score_split(
            records,
            attribute,
            predicates[attribute],
            pivot,
            parent_entropy,
            category_attribute=category_attribute,
        )
        for attribute, pivot in iter_candidates(records, candidate_attributes)
    )
    return reduce(_keep_better, scored_splits, None)


def _keep_better(best: Split | None, candidate: Split) -> Split:
    """Return `candidate` if it strictly improves on `best`, otherwise `best`.

    Args:
        best (Split | None): The best split so far.
        candidate (Split): The newly scored split.

    Returns:
        Split: The better of the two.
    """
    if best is None or candidate.gain > best.gain:
        return candidate
    return best
