"""
Silver Input and Gold Output Record Schemas
"""
from .exceptions import GoldLayerError, PreconditionViolation, ReferenceAmbiguity
from .tables import GoldStarSchema, SilverTables
from .records import (
    CUSTOMER_RECORD_SCHEMA,
    CUSTOMER_DEMOGRAPHICS_SCHEMA,
    CUSTOMER_LOCATION_SCHEMA,
    PRODUCT_RECORD_SCHEMA,
    PRODUCT_CATEGORY_SCHEMA,
    SALES_LINE_SCHEMA,
    SILVER_SCHEMAS,
    CUSTOMER_DIMENSION_COLUMNS,
    PRODUCT_DIMENSION_COLUMNS,
    SALES_FACT_COLUMNS,
    SilverTable,
    conform,
    empty_frame,
)

__all__ = [
    "GoldLayerError",
    "PreconditionViolation",
    "ReferenceAmbiguity",
    "GoldStarSchema",
    "SilverTables",
    "CUSTOMER_RECORD_SCHEMA",
    "CUSTOMER_DEMOGRAPHICS_SCHEMA",
    "CUSTOMER_LOCATION_SCHEMA",
    "PRODUCT_RECORD_SCHEMA",
    "PRODUCT_CATEGORY_SCHEMA",
    "SALES_LINE_SCHEMA",
    "SILVER_SCHEMAS",
    "CUSTOMER_DIMENSION_COLUMNS",
    "PRODUCT_DIMENSION_COLUMNS",
    "SALES_FACT_COLUMNS",
    "SilverTable",
    "conform",
    "empty_frame",
]
