"""Tests for polars_utils: dtype classification and DataFrame to record conversion."""

from __future__ import annotations

import polars as pl
import pytest
from pytest_check import check

from dtkit.exceptions import AttributeMissingError, TypeMismatchError
from dtkit.polars_utils import classify_dtype, dataframe_to_records


class TestClassifyDtype:
    """Tests for `classify_dtype`."""

    @pytest.mark.parametrize(
        ("dtype", "expected_kind"),
        [
            (pl.Int8, "numeric"),
            (pl.Int64, "numeric"),
            (pl.UInt32, "numeric"),
            (pl.Float32, "numeric"),
            (pl.Float64, "numeric"),
            (pl.String, "categorical"),
            (pl.Categorical, "categorical"),
            (pl.Enum(["basic", "premium"]), "categorical"),
        ],
    )
    def test_supported_dtypes(self, dtype: pl.DataType, expected_kind: str) -> None:
        """Integer and float columns are numeric; string-like columns are categorical.

        Args:
            dtype (pl.DataType): The Polars dtype.
            expected_kind (str): Expected attribute kind.
        """
        assert classify_dtype(dtype) == expected_kind

    @pytest.mark.parametrize("dtype", [pl.Boolean, pl.Date, pl.Datetime, pl.List(pl.Int64)])
    def test_unsupported_dtypes_raise(self, dtype: pl.DataType) -> None:
        """Booleans, temporal and nested columns are not supported.

        Args:
            dtype (pl.DataType): The Polars dtype.
        """
        with pytest.raises(TypeMismatchError) as exc_info:
            classify_dtype(dtype, column="flag")
        assert exc_info.value.attribute == "flag"


class TestDataframeToRecords:
    """Tests for `dataframe_to_records`."""

    def test_rows_become_records(self) -> None:
        """Each row becomes one record, in DataFrame order."""
        # Arrange
        df = pl.DataFrame({"weight": [250, 150.5], "sex": ["male", "female"]})

        # Act
        records = dataframe_to_records(df)

        # Assert
        assert records == [{"weight": 250.0, "sex": "male"}, {"weight": 150.5, "sex": "female"}]

    def test_column_selection(self) -> None:
        """Only the requested columns are kept, in the requested order."""
        # Arrange
        df = pl.DataFrame({"person": ["Homer"], "weight": [250], "sex": ["male"]})

        # Act
        records = dataframe_to_records(df, columns=["sex", "weight"])

        # Assert
        with check:
            assert records == [{"sex": "male", "weight": 250}]
        with check:
            assert list(records[0]) == ["sex", "weight"]

    def test_categorical_values_are_strings(self) -> None:
        """Categorical columns come back as plain strings."""
        # Arrange
        df = pl.DataFrame({"plan": ["basic", "premium"]}).with_columns(pl.col("plan").cast(pl.Categorical))

        # Act / Assert
        assert dataframe_to_records(df) == [{"plan": "basic"}, {"plan": "premium"}]

    def test_nulls_raise(self) -> None:
        """Missing values are not supported."""
        # Arrange
        df = pl.DataFrame({"weight": [250, None], "sex": ["male", "female"]})

        # Act / Assert
        with pytest.raises(TypeMismatchError) as exc_info:
            dataframe_to_records(df)
        assert exc_info.value.attribute == "weight"

    def test_unsupported_column_raises(self) -> None:
        """A boolean column cannot be used as an attribute."""
        # Arrange
        df = pl.DataFrame({"active": [True, False], "sex": ["male", "female"]})

        # Act / Assert
        with pytest.raises(TypeMismatchError):
            dataframe_to_records(df)

    def test_empty_column_list_raises(self) -> None:
        """An empty column selection is rejected."""
        with pytest.raises(ValueError, match="must not be empty"):
            dataframe_to_records(pl.DataFrame({"a": [1]}), columns=[])

    def test_duplicate_columns_raise(self) -> None:
        """Duplicate column names are rejected."""
        with pytest.raises(ValueError, match="Duplicate column names"):
            dataframe_to_records(pl.DataFrame({"a": [1]}), columns=["a", "a"])

    def test_missing_column_raises(self) -> None:
        """Selecting an absent column raises AttributeMissingError."""
        with pytest.raises(AttributeMissingError) as exc_info:
            dataframe_to_records(pl.DataFrame({"a": [1]}), columns=["b"])
        assert exc_info.value.attribute == "b"
