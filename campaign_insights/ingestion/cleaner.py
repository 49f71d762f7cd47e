"""Data cleaning functions using Polars expressions."""

import polars as pl

from ..models.coercion import CURRENCY_TOKENS


def clean_numeric_column(col_name: str) -> pl.Expr:
    """Remove thousands separators and currency symbols, convert to float.

    Values that still fail to parse become null; the row model turns null
    into 0.
    """
    expr = pl.col(col_name).cast(pl.Utf8)
    for token in CURRENCY_TOKENS:
        expr = expr.str.replace_all(token, "", literal=True)
    return expr.str.strip_chars().cast(pl.Float64, strict=False).alias(col_name)


def apply_cleaning(df: pl.DataFrame, numeric_cols: list[str]) -> pl.DataFrame:
    """Apply numeric cleaning to the given columns.

    Only cleans columns that exist in the DataFrame.
    """
    existing_cols = set(df.columns)
    exprs = [clean_numeric_column(col) for col in numeric_cols if col in existing_cols]

    if exprs:
        return df.with_columns(exprs)
    return df
