"""dtkit: Entropy-based decision tree induction and prediction for tabular records."""

from loguru import logger

from dtkit.decision_tree import DecisionTreeModel, TreeNode, render_html, save_html, train, train_from_dataframe
from dtkit.exceptions import (
    AttributeMissingError,
    DecisionTreeError,
    EmptyTrainingSetError,
    InvalidConfigurationError,
    TypeMismatchError,
)
from dtkit.logging import PACKAGE_NAME, enable_logging
from dtkit.persistence import load_model, save_model

logger.disable(PACKAGE_NAME)  # noqa: RUF067 - Disable logging for the dtkit module by default

__all__ = [
    "AttributeMissingError",
    "DecisionTreeError",
    "DecisionTreeModel",
    "EmptyTrainingSetError",
    "InvalidConfigurationError",
    "TreeNode",
    "TypeMismatchError",
    "enable_logging",
    "load_model",
    "render_html",
    "save_html",
    "save_model",
    "train",
    "train_from_dataframe",
]
