"""
Surrogate Key Assignment

Keys are positional: recomputed on each build from the sort order, so the
same input always yields the same keys.
"""

from typing import List

import polars as pl


def assign_surrogate_key(
    df: pl.DataFrame,
    order_by: List[str],
    key_name: str,
    base: int = 1,
) -> pl.DataFrame:
    """
    Stable-sort rows and number them from `base` with no gaps.

    Nulls sort first, as ROW_NUMBER() OVER (ORDER BY ...) does in the
    source warehouse. The key becomes the first column.
    """
    ordered = df.sort(order_by, nulls_last=False, maintain_order=True)

    return ordered.with_row_index(key_name, offset=base).with_columns(
        pl.col(key_name).cast(pl.Int64)
    )
