"""Pydantic models for trained decision trees and the rules extracted from them."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Final, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, model_validator
from sklearn.metrics import accuracy_score

from dtkit.decision_tree.predicates import EQUALS, GREATER_OR_EQUAL, PredicateKind, evaluate_predicate
from dtkit.decision_tree.values import AttributeKind, Record, RecordSchema, Value, attribute_value, is_numeric
from dtkit.exceptions import EmptyTrainingSetError, TypeMismatchError

# ---------------------------------------------------------------------------
# Public type aliases
# ---------------------------------------------------------------------------

RuleOperator: TypeAlias = Literal["==", "!=", ">=", "<"]

# ---------------------------------------------------------------------------
# Public models -- Tree structure
# ---------------------------------------------------------------------------


class TreeNode(BaseModel):
    """A node of a trained binary decision tree.

    A node is a leaf if and only if `category` is non-empty. A leaf carries
    only its category label. An internal node carries a split rule
    (`attribute`, `predicate`, `pivot`), exclusively owns its `match` and
    `no_match` children, and records how many training records fell into
    each branch when it was built. The counts are metadata and play no part
    in prediction.

    Attributes:
        category (str): Predicted label for a leaf; empty for internal nodes.
        attribute (str): Attribute tested by an internal node.
        predicate (PredicateKind | None): Comparison applied by an internal node.
        pivot (str | int | float | None): Value compared against by an internal node.
        match (TreeNode | None): Child followed when the predicate holds.
        no_match (TreeNode | None): Child followed when the predicate fails.
        matched_count (int): Training records routed to `match`.
        no_matched_count (int): Training records routed to `no_match`.

    Examples:
        >>> node = TreeNode.internal(
        ...     attribute="weight",
        ...     predicate=">=",
        ...     pivot=170,
        ...     match=TreeNode.leaf("male"),
        ...     no_match=TreeNode.leaf("female"),
        ...     matched_count=4,
        ...     no_matched_count=5,
        ... )
        >>> str(node)
        'weight >= 170'
        >>> node.match.is_leaf
        True
    """

    model_config = ConfigDict(frozen=True)

    category: str = Field(
        default="",
        description="Predicted category label. Non-empty only for leaf nodes.",
    )
    attribute: str = Field(
        default="",
        description="Attribute tested by an internal node.",
    )
    predicate: PredicateKind | None = Field(
        default=None,
        description="Comparison applied by an internal node: '==' or '>='.",
    )
    pivot: str | int | float | None = Field(
        default=None,
        description="Value the attribute is compared against at an internal node.",
    )
    match: TreeNode | None = Field(
        default=None,
        description="Subtree followed when the predicate holds.",
    )
    no_match: TreeNode | None = Field(
        default=None,
        description="Subtree followed when the predicate does not hold.",
    )
    matched_count: int = Field(
        default=0,
        ge=0,
        description="Number of training records routed to the match branch.",
    )
    no_matched_count: int = Field(
        default=0,
        ge=0,
        description="Number of training records routed to the no-match branch.",
    )

    @model_validator(mode="after")
    def _validate_leaf_or_internal(self) -> TreeNode:
        """Validate that the node is either a pure leaf or a complete internal node.

        Returns:
            TreeNode: The validated node.

        Raises:
            ValueError: If a leaf carries split fields, or an internal node is
                missing its split rule or either child.
        """
        if self.category:
            split_fields = (self.match, self.no_match, self.predicate, self.pivot, self.attribute or None)
            if any(field is not None for field in split_fields):
                raise ValueError("A leaf node must not carry a split rule or children")
            return self
        missing = [
            name
            for name, value in (
                ("attribute", self.attribute or None),
                ("predicate", self.predicate),
                ("pivot", self.pivot),
                ("match", self.match),
                ("no_match", self.no_match),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"An internal node requires {missing}; set category to make it a leaf")
        if self.predicate == GREATER_OR_EQUAL and not is_numeric(self.pivot):
            raise ValueError(f"Predicate '>=' requires a numeric pivot, got {self.pivot!r}")
        return self

    @classmethod
    def leaf(cls, category: str) -> TreeNode:
        """Build a leaf node.

        Args:
            category (str): The predicted label; must be non-empty.

        Returns:
            TreeNode: The leaf.
        """
        return cls(category=category)

    @classmethod
    def internal(
        cls,
        *,
        attribute: str,
        predicate: PredicateKind,
        pivot: Value,
        match: TreeNode,
        no_match: TreeNode,
        matched_count: int,
        no_matched_count: int,
    ) -> TreeNode:
        """Build an internal node that owns both children.

        Args:
            attribute (str): Attribute tested by the node.
            predicate (PredicateKind): Comparison applied.
            pivot (Value): Value compared against.
            match (TreeNode): Subtree for records satisfying the predicate.
            no_match (TreeNode): Subtree for the remaining records.
            matched_count (int): Training records routed to `match`.
            no_matched_count (int): Training records routed to `no_match`.

        Returns:
            TreeNode: The internal node.
        """
        return cls(
            attribute=attribute,
            predicate=predicate,
            pivot=pivot,
            match=match,
            no_match=no_match,
            matched_count=matched_count,
            no_matched_count=no_matched_count,
        )

    @property
    def is_leaf(self) -> bool:
        """Whether this node is a leaf."""
        return bool(self.category)

    @property
    def predicate_label(self) -> str:
        """Display label of the predicate; empty for leaves."""
        return self.predicate or ""

    def __str__(self) -> str:
        """Return the leaf label, or the split rule as `"<attribute> <predicate> <pivot>"`.

        Returns:
            str: Human-readable node description.
        """
        if self.is_leaf:
            return self.category
        return f"{self.attribute} {self.predicate} {self.pivot}"


# ---------------------------------------------------------------------------
# Public models -- Rules
# ---------------------------------------------------------------------------

_NEGATED_OPERATOR: Final[dict[PredicateKind, RuleOperator]] = {
    EQUALS: "!=",
    GREATER_OR_EQUAL: "<",
}
_BASE_PREDICATE: Final[dict[RuleOperator, tuple[PredicateKind, bool]]] = {
    "==": (EQUALS, False),
    "!=": (EQUALS, True),
    ">=": (GREATER_OR_EQUAL, False),
    "<": (GREATER_OR_EQUAL, True),
}


class Predicate(BaseModel):
    """A single boolean condition on one attribute along a root-to-leaf path.

    The match branch of a `==` node yields an `==` condition and its no-match
    branch a `!=` condition; likewise `>=` pairs with `<`.

    Attributes:
        variable (str): Attribute the condition applies to.
        operator (RuleOperator): Comparison operator.
        value (str | int | float): Value the attribute is compared against.

    Examples:
        >>> p = Predicate(variable="weight", operator="<", value=170)
        >>> str(p)
        'weight < 170'
        >>> p.eval(150)
        True
    """

    model_config = ConfigDict(frozen=True)

    variable: str = Field(
        description="Attribute the condition applies to, e.g. 'weight'.",
    )
    operator: RuleOperator = Field(
        description="Comparison operator: '==' or '!=' for categorical values, '>=' or '<' for numeric values.",
    )
    value: str | int | float = Field(
        description="Value the attribute is compared against.",
    )

    @model_validator(mode="after")
    def _validate_operator_value_compatibility(self) -> Predicate:
        """Validate that ordering operators are paired with numeric values.

        Returns:
            Predicate: The validated model instance.

        Raises:
            ValueError: If `>=` or `<` is used with a string value.
        """
        if self.operator in {">=", "<"} and not is_numeric(self.value):
            raise ValueError(f"Ordering operator '{self.operator}' requires a numeric value")
        return self

    def __str__(self) -> str:
        """Return the predicate as `"<variable> <operator> <value>"`.

        Returns:
            str: Human-readable condition.
        """
        return f"{self.variable} {self.operator} {self.value}"

    def eval(self, x: Value) -> bool:
        """Evaluate this condition against an attribute value.

        Args:
            x (Value): The attribute value to test.

        Returns:
            bool: `True` if the condition holds for `x`.

        Raises:
            TypeMismatchError: If `x` cannot be compared with `value`.
        """
        predicate, negated = _BASE_PREDICATE[self.operator]
        return evaluate_predicate(predicate, x, self.value, attribute=self.variable) != negated


class ClassificationRule(BaseModel):
    """A decision rule read from one leaf of a trained tree.

    Attributes:
        predicates (list[Predicate]): Conditions along the path from the root
            to this leaf. Empty for a single-leaf tree.
        prediction (str): Category label at the leaf.
        samples (int): Training records that reached the leaf.
    """

    model_config = ConfigDict(frozen=True)

    predicates: list[Predicate] = Field(
        description="Conditions along the path from root to this leaf; empty for a single-leaf tree.",
    )
    prediction: str = Field(
        min_length=1,
        description="Category label predicted for records reaching this leaf.",
    )
    samples: int = Field(
        ge=1,
        description="Number of training records that reached this leaf.",
    )

    def matches(self, record: Record) -> bool:
        """Return `True` if `record` satisfies every condition of the rule.

        Args:
            record (Record): The record to test.

        Returns:
            bool: Whether the record follows this rule's path.
        """
        return all(p.eval(attribute_value(record, p.variable)) for p in self.predicates)


# ---------------------------------------------------------------------------
# Public models -- Trained model
# ---------------------------------------------------------------------------


class DecisionTreeModel(BaseModel):
    """A trained decision tree together with the settings it was trained with.

    Built by `train()`, never mutated afterwards, and safe to share between
    threads for prediction.

    Attributes:
        root (TreeNode): Root of the tree.
        category_attribute (str): The attribute the tree predicts.
        ignored_attributes (frozenset[str]): Attributes excluded from splitting.
        record_schema (RecordSchema): Attribute kinds of the training set.
        sample_count (int): Number of training records.
    """

    model_config = ConfigDict(frozen=True)

    root: TreeNode = Field(description="Root node of the trained tree.")
    category_attribute: str = Field(min_length=1, description="The attribute the tree predicts.")
    ignored_attributes: frozenset[str] = Field(
        default=frozenset(),
        description="Attributes excluded from split search.",
    )
    record_schema: RecordSchema = Field(description="Attribute kinds of the training set.")
    sample_count: int = Field(ge=1, description="Number of records the tree was trained on.")

    def predict(self, record: Record) -> str:
        """Predict the category label of `record`.

        Walks from the root to a leaf without recursion, so tree depth is not
        limited by the call stack.

        Args:
            record (Record): The record to classify. Only attributes tested
                along the traversal path are read.

        Returns:
            str: The predicted category label.

        Raises:
            AttributeMissingError: If the record lacks an attribute tested on its path.
            TypeMismatchError: If a value cannot be compared with a node's pivot.
        """
        node = self.root
        while not node.is_leaf:
            value = attribute_value(record, node.attribute)
            matched = evaluate_predicate(node.predicate, value, node.pivot, attribute=node.attribute)  # type: ignore[arg-type]
            node = node.match if matched else node.no_match  # type: ignore[assignment]
        return node.category

    def predict_many(self, records: Sequence[Record]) -> list[str]:
        """Predict the category label of each record.

        Args:
            records (Sequence[Record]): Records to classify.

        Returns:
            list[str]: Predictions parallel to `records`.
        """
        return [self.predict(record) for record in records]

    def score(self, records: Sequence[Record]) -> float:
        """Return the fraction of labeled records whose category is predicted correctly.

        Args:
            records (Sequence[Record]): Records carrying the category attribute.

        Returns:
            float: Accuracy between 0.0 and 1.0.

        Raises:
            EmptyTrainingSetError: If `records` is empty.
            AttributeMissingError: If a record lacks the category attribute.
            TypeMismatchError: If a record's category value is not a string.
        """
        if not records:
            raise EmptyTrainingSetError("Cannot score a model against zero records")
        expected = [self._category_of(record) for record in records]
        return float(accuracy_score(expected, self.predict_many(records)))

    @property
    def attribute_kinds(self) -> dict[str, AttributeKind]:
        """Attribute kinds of the training set."""
        return dict(self.record_schema.attributes)

    @property
    def depth(self) -> int:
        """Length of the longest root-to-leaf path; 0 for a single leaf."""
        deepest = 0
        stack = [(self.root, 0)]
        while stack:
            node, node_depth = stack.pop()
            if node.is_leaf:
                deepest = max(deepest, node_depth)
            else:
                stack.append((node.match, node_depth + 1))  # type: ignore[arg-type]
                stack.append((node.no_match, node_depth + 1))  # type: ignore[arg-type]
        return deepest

    @property
    def leaf_count(self) -> int:
        """Number of leaves in the tree."""
        return sum(1 for node in self.iter_nodes() if node.is_leaf)

    def iter_nodes(self) -> Iterator[TreeNode]:
        """Yield every node in depth-first order, match branch first.

        Yields:
            TreeNode: Each node of the tree.
        """
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            if not node.is_leaf:
                stack.append(node.no_match)  # type: ignore[arg-type]
                stack.append(node.match)  # type: ignore[arg-type]

    def extract_rules(self) -> list[ClassificationRule]:
        """Extract one rule per leaf, in depth-first order with match branches first.

        Returns:
            list[ClassificationRule]: The rules; a single-leaf tree yields one
                rule with no predicates.
        """
        rules: list[ClassificationRule] = []
        stack: list[tuple[TreeNode, list[Predicate], int]] = [(self.root, [], self.sample_count)]
        while stack:
            node, path, samples = stack.pop()
            if node.is_leaf:
                rules.append(ClassificationRule(predicates=path, prediction=node.category, samples=samples))
                continue
            match_predicate = Predicate(variable=node.attribute, operator=node.predicate, value=node.pivot)  # type: ignore[arg-type]
            no_match_predicate = Predicate(
                variable=node.attribute,
                operator=_NEGATED_OPERATOR[node.predicate],  # type: ignore[index]
                value=node.pivot,  # type: ignore[arg-type]
            )
            stack.append((node.no_match, [*path, no_match_predicate], node.no_matched_count))  # type: ignore[arg-type]
            stack.append((node.match, [*path, match_predicate], node.matched_count))  # type: ignore[arg-type]
        return rules

    def _category_of(self, record: Record) -> str:
        """Return the category label carried by a labeled record.

        Args:
            record (Record): A labeled record.

        Returns:
            str: The record's category value.

        Raises:
            TypeMismatchError: If the value is not a string.
        """
        value = attribute_value(record, self.category_attribute)
        if not isinstance(value, str):
            raise TypeMismatchError(attribute=self.category_attribute, value=value, expected="a categorical (str) value")
        return value
