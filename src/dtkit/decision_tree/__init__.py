"""Decision tree sub-package: data model, split search, induction and rendering."""

from __future__ import annotations

from dtkit.decision_tree.values import (
    AttributeKind,
    Record,
    RecordSchema,
    Value,
    infer_schema,
)
from dtkit.decision_tree.predicates import (
    EQUALS,
    GREATER_OR_EQUAL,
    PredicateKind,
    evaluate_predicate,
)
from dtkit.decision_tree.models import (
    ClassificationRule,
    DecisionTreeModel,
    Predicate,
    RuleOperator,
    TreeNode,
)
from dtkit.decision_tree.statistics import (
    count_unique_values,
    entropy,
    most_frequent_value,
)
from dtkit.decision_tree.splitting import (
    Split,
    find_best_split,
    partition,
    score_split,
)
from dtkit.decision_tree.fitting import (
    ENTROPY_THRESHOLD,
    GAIN_ABS_TOL,
    TrainingConfig,
    induce_tree,
    train,
    train_from_dataframe,
)
from dtkit.decision_tree.rendering import (
    render_html,
    render_html_page,
    save_html,
)

__all__ = [
    "ENTROPY_THRESHOLD",
    "EQUALS",
    "GAIN_ABS_TOL",
    "GREATER_OR_EQUAL",
    "AttributeKind",
    "ClassificationRule",
    "DecisionTreeModel",
    "Predicate",
    "PredicateKind",
    "Record",
    "RecordSchema",
    "RuleOperator",
    "Split",
    "TrainingConfig",
    "TreeNode",
    "Value",
    "count_unique_values",
    "entropy",
    "evaluate_predicate",
    "find_best_split",
    "induce_tree",
    "infer_schema",
    "most_frequent_value",
    "partition",
    "render_html",
    "render_html_page",
    "save_html",
    "score_split",
    "train",
    "train_from_dataframe",
]
