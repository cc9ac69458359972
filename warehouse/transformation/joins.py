"""
Left-Preserving Lookups

The one join used by every Gold builder. The primary frame keeps every row
and its order; each primary row picks up at most one lookup row, so a
duplicated lookup key can never fan rows out.
"""

from typing import Dict, List, Optional, Union

import polars as pl
import structlog

from warehouse.config import get_settings
from warehouse.models.exceptions import ReferenceAmbiguity

logger = structlog.get_logger(__name__)

_ROW_INDEX = "__row_index"
_LOOKUP_KEY = "__lookup_key"


def count_ambiguous_keys(df: pl.DataFrame, key: str) -> int:
    """Number of non-null key values that occur on more than one row"""
    return (
        df.filter(pl.col(key).is_not_null())
        .group_by(key)
        .len()
        .filter(pl.col("len") > 1)
        .height
    )


def left_lookup(
    primary: pl.DataFrame,
    lookup: pl.DataFrame,
    left_on: str,
    right_on: str,
    columns: Union[List[str], Dict[str, str]],
    prefer_by: Optional[List[str]] = None,
    name: str = "lookup",
    strict: Optional[bool] = None,
) -> pl.DataFrame:
    """
    Attach lookup columns to every primary row.

    Args:
        primary: Frame whose rows are all kept, in order
        lookup: Candidate rows to attach
        left_on: Key column in the primary frame
        right_on: Key column in the lookup frame
        columns: Lookup columns to attach, or a mapping of column -> alias
        prefer_by: Ordering of candidates; the first row per key wins
        name: Lookup name used in logs and errors
        strict: Raise ReferenceAmbiguity on duplicate keys. Defaults to
            the GOLD_STRICT_REFERENCES setting.

    Returns:
        The primary frame with the lookup columns appended. Unmatched rows,
        including rows with a null key, carry nulls.
    """
    if strict is None:
        strict = get_settings().gold.strict_references

    if isinstance(columns, dict):
        aliases = columns
    else:
        aliases = {col: col for col in columns}

    candidates = lookup
    if prefer_by:
        candidates = candidates.sort(prefer_by, maintain_order=True)

    candidates = candidates.select(
        [pl.col(right_on).alias(_LOOKUP_KEY)]
        + [pl.col(col).alias(alias) for col, alias in aliases.items()]
    )

    ambiguous = count_ambiguous_keys(candidates, _LOOKUP_KEY)
    if ambiguous:
        if strict:
            raise ReferenceAmbiguity(name, right_on, ambiguous)
        logger.warning(
            "Ambiguous lookup keys, keeping first candidate",
            lookup=name,
            key=right_on,
            duplicate_keys=ambiguous,
        )
        candidates = candidates.unique(subset=[_LOOKUP_KEY], keep="first", maintain_order=True)

    joined = primary.with_row_index(_ROW_INDEX).join(
        candidates,
        left_on=left_on,
        right_on=_LOOKUP_KEY,
        how="left",
        coalesce=True,
    )

    return joined.sort(_ROW_INDEX).drop(_ROW_INDEX)
