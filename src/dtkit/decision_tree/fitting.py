"""Decision tree induction and the training entry points."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Final

import polars as pl
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from dtkit.decision_tree.models import DecisionTreeModel, TreeNode
from dtkit.decision_tree.splitting import find_best_split
from dtkit.decision_tree.statistics import entropy, most_frequent_value
from dtkit.decision_tree.values import Record, RecordSchema, attribute_value, infer_schema, to_builtin
from dtkit.exceptions import EmptyTrainingSetError, InvalidConfigurationError, TypeMismatchError
from dtkit.logging import TRAINING_LEVEL
from dtkit.polars_utils import dataframe_to_records

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

ENTROPY_THRESHOLD: Final[float] = 0.01  # Sets at or below this entropy are treated as pure.
GAIN_ABS_TOL: Final[float] = 1e-12  # Gains at or below this count as no improvement.

# ---------------------------------------------------------------------------
# Public models
# ---------------------------------------------------------------------------


class TrainingConfig(BaseModel):
    """Validated training options.

    Attributes:
        category_attribute (str): The attribute to predict.
        ignored_attributes (frozenset[str]): Attributes excluded from split search.
        entropy_threshold (float): Entropy at or below which a set becomes a leaf.
    """

    model_config = ConfigDict(frozen=True)

    category_attribute: str = Field(
        min_length=1,
        description="Name of the categorical attribute to predict.",
    )
    ignored_attributes: frozenset[str] = Field(
        default=frozenset(),
        description="Attributes kept in records but never used for splitting, e.g. identifiers.",
    )
    entropy_threshold: float = Field(
        default=ENTROPY_THRESHOLD,
        ge=0.0,
        description="Entropy at or below which a record set is treated as pure.",
    )

    @model_validator(mode="after")
    def _validate_category_not_ignored(self) -> TrainingConfig:
        """Validate that the category attribute is not also ignored.

        Returns:
            TrainingConfig: The validated model instance.

        Raises:
            ValueError: If the category attribute is listed as ignored.
        """
        if self.category_attribute in self.ignored_attributes:
            raise ValueError(f"Category attribute '{self.category_attribute}' must not be an ignored attribute")
        return self


# ---------------------------------------------------------------------------
# Public interface -- Training
# ---------------------------------------------------------------------------


def train(
    category_attribute: str,
    ignored_attributes: Iterable[str],
    training_set: Sequence[Record],
    *,
    entropy_threshold: float = ENTROPY_THRESHOLD,
) -> DecisionTreeModel:
    """Train a decision tree on a sequence of records.

    Args:
        category_attribute (str): The categorical attribute to predict.
        ignored_attributes (Iterable[str]): Attributes excluded from split
            search, such as identifier columns.
        training_set (Sequence[Record]): The labeled records. Every record
            must carry the same attributes.
        entropy_threshold (float): Entropy at or below which a set becomes a
            leaf. Defaults to `ENTROPY_THRESHOLD`.

    Returns:
        DecisionTreeModel: The trained model.

    Raises:
        InvalidConfigurationError: If the category attribute is empty or
            ignored, or the entropy threshold is negative.
        EmptyTrainingSetError: If `training_set` is empty.
        AttributeMissingError: If records disagree on their attributes or
            lack the category attribute.
        TypeMismatchError: If a value is unsupported, an attribute mixes
            categorical and numeric values, or the category attribute is numeric.

    Examples:
        >>> records = [
        ...     {"person": "Homer", "weight": 250, "sex": "male"},
        ...     {"person": "Marge", "weight": 150, "sex": "female"},
        ... ]
        >>> model = train("sex", {"person"}, records)
        >>> model.predict({"weight": 260})
        'male'
    """
    config = build_training_config(category_attribute, ignored_attributes, entropy_threshold=entropy_threshold)
    records = list(training_set)
    if not records:
        raise EmptyTrainingSetError()

    schema = infer_schema(records)
    _validate_category_attribute(records, schema, config.category_attribute)
    candidate_attributes = [
        name
        for name in schema.attribute_names
        if name != config.category_attribute and name not in config.ignored_attributes
    ]

    logger.log(
        TRAINING_LEVEL,
        "Training started",
        records=len(records),
        category_attribute=config.category_attribute,
        candidate_attributes=candidate_attributes,
    )
    root = induce_tree(
        records,
        category_attribute=config.category_attribute,
        candidate_attributes=candidate_attributes,
        schema=schema,
        entropy_threshold=config.entropy_threshold,
    )
    model = DecisionTreeModel(
        root=root,
        category_attribute=config.category_attribute,
        ignored_attributes=config.ignored_attributes,
        record_schema=schema,
        sample_count=len(records),
    )
    logger.log(TRAINING_LEVEL, "Training finished", depth=model.depth, leaf_count=model.leaf_count)
    return model


def train_from_dataframe(
    df: pl.DataFrame,
    category_attribute: str,
    ignored_attributes: Iterable[str] = (),
    *,
    entropy_threshold: float = ENTROPY_THRESHOLD,
) -> DecisionTreeModel:
    """Train a decision tree on the rows of a Polars DataFrame.

    Args:
        df (pl.DataFrame): Training data; one record per row. Columns must be
            string, categorical or numeric and free of nulls.
        category_attribute (str): The column to predict.
        ignored_attributes (Iterable[str]): Columns excluded from split search.
        entropy_threshold (float): Entropy at or below which a set becomes a leaf.

    Returns:
        DecisionTreeModel: The trained model.

    Raises:
        TypeMismatchError: If a column has an unsupported dtype or contains nulls.
    """
    records = dataframe_to_records(df)
    return train(category_attribute, ignored_attributes, records, entropy_threshold=entropy_threshold)


def build_training_config(
    category_attribute: str,
    ignored_attributes: Iterable[str],
    *,
    entropy_threshold: float = ENTROPY_THRESHOLD,
) -> TrainingConfig:
    """Validate training options into a `TrainingConfig`.

    Args:
        category_attribute (str): The attribute to predict.
        ignored_attributes (Iterable[str]): Attributes excluded from split search.
        entropy_threshold (float): Entropy at or below which a set becomes a leaf.

    Returns:
        TrainingConfig: The validated configuration.

    Raises:
        InvalidConfigurationError: If any option is invalid.
    """
    try:
        return TrainingConfig(
            category_attribute=category_attribute,
            ignored_attributes=frozenset(ignored_attributes),
            entropy_threshold=entropy_threshold,
        )
    except ValidationError as exc:
        messages = "; ".join(error["msg"] for error in exc.errors())
        raise InvalidConfigurationError(
            f"Invalid training configuration: {messages}",
            category_attribute=category_attribute,
        ) from exc


# ---------------------------------------------------------------------------
# Public interface -- Induction
# ---------------------------------------------------------------------------


def induce_tree(
    records: Sequence[Record],
    *,
    category_attribute: str,
    candidate_attributes: Sequence[str],
    schema: RecordSchema,
    entropy_threshold: float = ENTROPY_THRESHOLD,
) -> TreeNode:
    """Grow a decision tree by greedy recursive partitioning.

    A set becomes a leaf labeled with its most frequent category when its
    entropy is at or below `entropy_threshold`, or when no candidate split
    has an information gain above `GAIN_ABS_TOL`. Gains within that band of
    zero, including slightly negative ones left by float rounding, mean the
    split reduces nothing. Otherwise the best split is applied and both
    subsets are grown recursively.

    Args:
        records (Sequence[Record]): The records to grow the (sub)tree from.
        category_attribute (str): The label attribute.
        candidate_attributes (Sequence[str]): Attributes eligible for splitting.
        schema (RecordSchema): Attribute kinds of the training set.
        entropy_threshold (float): Entropy at or below which a set becomes a leaf.

    Returns:
        TreeNode: Root of the grown (sub)tree.

    Raises:
        EmptyTrainingSetError: If `records` is empty.
    """
    if not records:
        raise EmptyTrainingSetError()

    parent_entropy = entropy(records, category_attribute)
    if parent_entropy <= entropy_threshold:
        return _make_leaf(records, category_attribute, reason="entropy at or below threshold")

    best_split = find_best_split(
        records,
        category_attribute=category_attribute,
        candidate_attributes=candidate_attributes,
        schema=schema,
        parent_entropy=parent_entropy,
    )
    if best_split is None or best_split.gain <= GAIN_ABS_TOL:
        return _make_leaf(records, category_attribute, reason="no split reduces entropy")

    logger.debug(
        "Split chosen",
        attribute=best_split.attribute,
        predicate=best_split.predicate,
        pivot=best_split.pivot,
        gain=best_split.gain,
        matched=len(best_split.match),
        unmatched=len(best_split.no_match),
    )
    subtree_kwargs: dict[str, Any] = {
        "category_attribute": category_attribute,
        "candidate_attributes": candidate_attributes,
        "schema": schema,
        "entropy_threshold": entropy_threshold,
    }
    match_subtree = induce_tree(best_split.match, **subtree_kwargs)
    no_match_subtree = induce_tree(best_split.no_match, **subtree_kwargs)
    return TreeNode.internal(
        attribute=best_split.attribute,
        predicate=best_split.predicate,
        pivot=to_builtin(best_split.pivot),
        match=match_subtree,
        no_match=no_match_subtree,
        matched_count=len(best_split.match),
        no_matched_count=len(best_split.no_match),
    )


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _make_leaf(records: Sequence[Record], category_attribute: str, *, reason: str) -> TreeNode:
    """Build a leaf labeled with the most frequent category of `records`.

    Args:
        records (Sequence[Record]): The records reaching the leaf.
        category_attribute (str): The label attribute.
        reason (str): Why splitting stopped, for logging.

    Returns:
        TreeNode: The leaf.
    """
    category = most_frequent_value(records, category_attribute)
    logger.debug("Leaf created", category=category, samples=len(records), reason=reason)
    return TreeNode.leaf(category)


def _validate_category_attribute(records: Sequence[Record], schema: RecordSchema, category_attribute: str) -> None:
    """Raise if the category attribute is absent from the records or not categorical.

    Args:
        records (Sequence[Record]): The training set.
        schema (RecordSchema): The classified attribute universe.
        category_attribute (str): The attribute to predict.

    Raises:
        AttributeMissingError: If the records lack the category attribute.
        TypeMismatchError: If the category attribute holds numeric values or
            an empty label.
    """
    if schema.kind_of(category_attribute) != "categorical":
        raise TypeMismatchError(
            attribute=category_attribute,
            value=attribute_value(records[0], category_attribute),
            expected="a categorical (str) value for the category attribute",
        )
    if any(attribute_value(record, category_attribute) == "" for record in records):
        raise TypeMismatchError(attribute=category_attribute, value="", expected="a non-empty category label")
