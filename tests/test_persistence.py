"""Tests for saving and loading trained models."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError
from pytest_check import check

from dtkit.decision_tree.fitting import train
from dtkit.decision_tree.models import DecisionTreeModel, TreeNode
from dtkit.decision_tree.values import RecordSchema
from dtkit.persistence import dump_model, load_model, parse_model, save_model


class TestDumpAndParse:
    """Tests for `dump_model` and `parse_model`."""

    def test_document_describes_tree(self) -> None:
        """The JSON document carries the tree and the training settings."""
        # Arrange
        model = train("sex", {"person"}, _make_records())

        # Act
        document = json.loads(dump_model(model))

        # Assert
        with check:
            assert document["category_attribute"] == "sex"
        with check:
            assert document["ignored_attributes"] == ["person"]
        with check:
            assert document["sample_count"] == 4
        with check:
            assert document["root"]["attribute"] == "weight"
        with check:
            assert document["record_schema"]["attributes"]["weight"] == "numeric"

    def test_parsed_model_equals_original(self) -> None:
        """Parsing a dumped model restores an equal model."""
        # Arrange
        model = train("sex", {"person"}, _make_records())

        # Act
        restored = parse_model(dump_model(model))

        # Assert
        with check:
            assert restored == model
        with check:
            assert restored.predict({"weight": 260}) == model.predict({"weight": 260})

    def test_integer_pivot_stays_integer(self) -> None:
        """Numeric pivots keep their builtin type through JSON."""
        # Arrange
        model = train("sex", {"person"}, _make_records())

        # Act
        restored = parse_model(dump_model(model))

        # Assert
        assert type(restored.root.pivot) is int

    def test_deep_chain_round_trips(self) -> None:
        """A tree one hundred levels deep survives dump and parse unchanged."""
        # Arrange
        model = _make_chain_model(depth=100)

        # Act
        restored = parse_model(dump_model(model))

        # Assert
        with check:
            assert restored == model
        with check:
            assert restored.depth == 100
        with check:
            assert restored.predict({"x": 100}) == "high"
        with check:
            assert restored.predict({"x": 0}) == "below_99"

    def test_malformed_tree_is_rejected(self) -> None:
        """A node with a category and children is not a valid tree."""
        # Arrange
        document = json.loads(dump_model(train("sex", {"person"}, _make_records())))
        document["root"]["category"] = "male"

        # Act / Assert
        with pytest.raises(ValidationError):
            parse_model(json.dumps(document))


class TestSaveAndLoad:
    """Tests for `save_model` and `load_model`."""

    def test_round_trip_through_file(self, tmp_path: Path) -> None:
        """A saved model loads back identical and predicts the same."""
        # Arrange
        model = train("sex", {"person"}, _make_records())
        destination = tmp_path / "model.json"

        # Act
        written = save_model(model, destination)
        restored = load_model(str(destination))

        # Assert
        with check:
            assert written == destination
        with check:
            assert restored == model
        with check:
            assert restored.predict_many(_make_records()) == model.predict_many(_make_records())

    def test_load_missing_file_raises(self, tmp_path: Path) -> None:
        """Loading a path that does not exist raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_model(tmp_path / "missing.json")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_records() -> list[dict[str, str | int]]:
    """Build a small separable training set.

    Returns:
        list[dict[str, str | int]]: Training records labelled by `sex`.
    """
    return [
        {"person": "Homer", "weight": 250, "sex": "male"},
        {"person": "Marge", "weight": 150, "sex": "female"},
        {"person": "Bart", "weight": 90, "sex": "male"},
        {"person": "Lisa", "weight": 78, "sex": "female"},
    ]


def _make_chain_model(depth: int) -> DecisionTreeModel:
    """Build a model whose tree is a chain of `x >= n` tests down the match side.

    Args:
        depth (int): Number of internal nodes in the chain.

    Returns:
        DecisionTreeModel: The model. `x >= depth` predicts "high" and
            `x < n` predicts "below_n" for the deepest failing test.
    """
    node = TreeNode.leaf("high")
    for threshold in range(depth):
        node = TreeNode.internal(
            attribute="x",
            predicate=">=",
            pivot=threshold,
            match=node,
            no_match=TreeNode.leaf(f"below_{threshold}"),
            matched_count=1,
            no_matched_count=1,
        )
    return DecisionTreeModel(
        root=node,
        category_attribute="label",
        ignored_attributes=frozenset(),
        record_schema=RecordSchema(attributes={"x": "numeric", "label": "categorical"}),
        sample_count=depth + 1,
    )
