"""Utility functions for turning Polars DataFrames into training records."""

from __future__ import annotations

from collections.abc import Sequence

import polars as pl

from dtkit.decision_tree.values import AttributeKind, Value
from dtkit.exceptions import AttributeMissingError, TypeMismatchError

_DTYPE_TO_ATTRIBUTE_KIND: dict[type[pl.DataType] | pl.DataType, AttributeKind] = {
    pl.Int8: "numeric",
    pl.Int16: "numeric",
    pl.Int32: "numeric",
    pl.Int64: "numeric",
    pl.UInt8: "numeric",
    pl.UInt16: "numeric",
    pl.UInt32: "numeric",
    pl.UInt64: "numeric",
    pl.Float32: "numeric",
    pl.Float64: "numeric",
    pl.String: "categorical",
    pl.Categorical: "categorical",
}


def classify_dtype(dtype: pl.DataType, *, column: str | None = None) -> AttributeKind:
    """Classify a Polars column dtype as a categorical or numeric attribute.

    The lookup map uses bare class references as keys, which does not match
    parameterized instances such as `Enum([...])`; an `isinstance` fallback
    handles those.

    Args:
        dtype (pl.DataType): The Polars data type of the column.
        column (str | None): Column name, used in error messages.

    Returns:
        AttributeKind: `"numeric"` for integer and float columns,
            `"categorical"` for string, Categorical and Enum columns.

    Raises:
        TypeMismatchError: For any other dtype (booleans, temporal and nested types).
    """
    result = _DTYPE_TO_ATTRIBUTE_KIND.get(dtype)
    if result is not None:
        return result
    if isinstance(dtype, (pl.Categorical, pl.Enum)):
        return "categorical"
    raise TypeMismatchError(attribute=column, value=dtype, expected="a string, categorical or numeric column")


def dataframe_to_records(
    df: pl.DataFrame,
    columns: Sequence[str] | None = None,
) -> list[dict[str, Value]]:
    """Convert a DataFrame into a list of records, one per row.

    Args:
        df (pl.DataFrame): The source DataFrame.
        columns (Sequence[str] | None): Columns to keep. If None, all columns
            are kept.

    Returns:
        list[dict[str, Value]]: Row records in DataFrame order.

    Raises:
        ValueError: If `columns` is empty or contains duplicates.
        AttributeMissingError: If a requested column does not exist.
        TypeMismatchError: If a column has an unsupported dtype or contains nulls.

    Examples:
        >>> df = pl.DataFrame({"weight": [250, 150], "sex": ["male", "female"]})
        >>> dataframe_to_records(df)
        [{'weight': 250, 'sex': 'male'}, {'weight': 150, 'sex': 'female'}]
    """
    if columns is not None:
        _validate_columns(columns, df.columns)
        df = df.select(columns)

    for name, dtype in df.schema.items():
        classify_dtype(dtype, column=name)

    null_columns = [name for name in df.columns if df[name].null_count() > 0]
    if null_columns:
        raise TypeMismatchError(
            attribute=null_columns[0],
            value=None,
            expected="a value in every row (missing values are not supported)",
        )

    return df.to_dicts()


def _validate_columns(columns: Sequence[str], df_columns: Sequence[str]) -> None:
    """Validate that columns exist in the DataFrame and contain no duplicates.

    Args:
        columns (Sequence[str]): Column names to validate.
        df_columns (Sequence[str]): Column names present in the DataFrame.

    Raises:
        ValueError: If the columns list is empty or contains duplicates.
        AttributeMissingError: If any column does not exist in the DataFrame.
    """
    if len(columns) == 0:
        msg = "columns list must not be empty; pass None to include all columns"
        raise ValueError(msg)
    if len(columns) != len(set(columns)):
        duplicates = sorted({col for col in columns if columns.count(col) > 1})
        raise ValueError(f"Duplicate column names are not allowed: {duplicates}")
    missing_columns = [col for col in columns if col not in df_columns]
    if missing_columns:
        raise AttributeMissingError(attribute=missing_columns[0], available_attributes=df_columns)
