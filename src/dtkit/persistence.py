"""Saving and loading trained models as JSON.

A saved model contains the full tree together with the category attribute,
ignored attributes and record schema it was trained with, so a loaded model
predicts exactly like the original.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final

from loguru import logger

from dtkit.decision_tree.models import DecisionTreeModel

__all__ = ["JSON_INDENT", "dump_model", "load_model", "parse_model", "save_model"]

JSON_INDENT: Final[int] = 2


def dump_model(model: DecisionTreeModel) -> str:
    """Serialize a trained model to a JSON string.

    Args:
        model (DecisionTreeModel): The model to serialize.

    Returns:
        str: The JSON document.
    """
    return model.model_dump_json(indent=JSON_INDENT)


def parse_model(document: str | bytes) -> DecisionTreeModel:
    """Deserialize a model from a JSON document produced by `dump_model`.

    Args:
        document (str | bytes): The JSON document.

    Returns:
        DecisionTreeModel: The restored model.

    Raises:
        pydantic.ValidationError: If the document is not valid JSON or does
            not describe a well-formed tree.
    """
    return DecisionTreeModel.model_validate_json(document)


def save_model(model: DecisionTreeModel, path: str | Path) -> Path:
    """Write a trained model to a JSON file.

    Args:
        model (DecisionTreeModel): The model to save.
        path (str | Path): Destination file. Parent directories must exist.

    Returns:
        Path: The path written to.

    Examples:
        >>> save_model(model, "tree.json")  # doctest: +SKIP
        PosixPath('tree.json')
    """
    destination = Path(path)
    destination.write_text(dump_model(model), encoding="utf-8")
    logger.info("Model saved", path=str(destination), sample_count=model.sample_count)
    return destination


def load_model(path: str | Path) -> DecisionTreeModel:
    """Read a trained model from a JSON file written by `save_model`.

    Args:
        path (str | Path): The file to read.

    Returns:
        DecisionTreeModel: The restored model.

    Raises:
        FileNotFoundError: If `path` does not exist.
        pydantic.ValidationError: If the file does not describe a well-formed tree.
    """
    source = Path(path)
    model = parse_model(source.read_text(encoding="utf-8"))
    logger.info("Model loaded", path=str(source), sample_count=model.sample_count)
    return model
