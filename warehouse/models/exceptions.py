"""
Gold Layer Exceptions
"""

from typing import Any, Dict, Optional


class GoldLayerError(Exception):
    """Base class for star schema build failures"""


class PreconditionViolation(GoldLayerError, ValueError):
    """An input collection breaks a guarantee of the Silver layer"""

    def __init__(
        self,
        table: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.table = table
        self.details = details or {}
        super().__init__(f"{table}: {message}")


class ReferenceAmbiguity(GoldLayerError):
    """A lookup key matches more than one candidate row"""

    def __init__(self, lookup: str, key: str, duplicate_keys: int):
        self.lookup = lookup
        self.key = key
        self.duplicate_keys = duplicate_keys
        super().__init__(
            f"{lookup}: {duplicate_keys} value(s) of '{key}' match more than one row"
        )
