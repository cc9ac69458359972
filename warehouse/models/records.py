"""
Record Schemas

Declares the column layout of every Silver table consumed by the Gold layer
and of every Gold table it produces. Record collections are Polars
DataFrames; `conform` brings an incoming frame onto its declared schema.
"""

from enum import Enum
from typing import Dict, List

import polars as pl

from .exceptions import PreconditionViolation


class SilverTable(str, Enum):
    """Silver tables read by the Gold layer"""
    CUSTOMERS = "crm_cust_info"
    DEMOGRAPHICS = "erp_cust_az12"
    LOCATIONS = "erp_loc_a101"
    PRODUCTS = "crm_prd_info"
    CATEGORIES = "erp_px_cat_g1v2"
    SALES = "crm_sales_details"


# =============================================================================
# SILVER INPUTS
# =============================================================================

# CRM customer identity, one row per cst_key
CUSTOMER_RECORD_SCHEMA: Dict[str, pl.DataType] = {
    "cst_id": pl.Int64,
    "cst_key": pl.Utf8,
    "cst_firstname": pl.Utf8,
    "cst_lastname": pl.Utf8,
    "cst_marital_status": pl.Utf8,
    "cst_gndr": pl.Utf8,
    "cst_create_date": pl.Date,
}

# ERP demographics, zero or one row per customer key
CUSTOMER_DEMOGRAPHICS_SCHEMA: Dict[str, pl.DataType] = {
    "cid": pl.Utf8,
    "bdate": pl.Date,
    "gen": pl.Utf8,
}

# ERP location, zero or one row per customer key
CUSTOMER_LOCATION_SCHEMA: Dict[str, pl.DataType] = {
    "cid": pl.Utf8,
    "cntry": pl.Utf8,
}

# CRM product history; prd_end_dt is null on the current version
PRODUCT_RECORD_SCHEMA: Dict[str, pl.DataType] = {
    "prd_id": pl.Int64,
    "prd_key": pl.Utf8,
    "prd_nm": pl.Utf8,
    "cat_id": pl.Utf8,
    "prd_cost": pl.Int64,
    "prd_line": pl.Utf8,
    "prd_start_dt": pl.Date,
    "prd_end_dt": pl.Date,
}

PRODUCT_CATEGORY_SCHEMA: Dict[str, pl.DataType] = {
    "id": pl.Utf8,
    "cat": pl.Utf8,
    "subcat": pl.Utf8,
    "maintenance": pl.Utf8,
}

SALES_LINE_SCHEMA: Dict[str, pl.DataType] = {
    "sls_ord_num": pl.Utf8,
    "sls_prd_key": pl.Utf8,
    "sls_cust_id": pl.Int64,
    "sls_order_dt": pl.Date,
    "sls_ship_dt": pl.Date,
    "sls_due_dt": pl.Date,
    "sls_sales": pl.Int64,
    "sls_quantity": pl.Int64,
    "sls_price": pl.Int64,
}

SILVER_SCHEMAS: Dict[SilverTable, Dict[str, pl.DataType]] = {
    SilverTable.CUSTOMERS: CUSTOMER_RECORD_SCHEMA,
    SilverTable.DEMOGRAPHICS: CUSTOMER_DEMOGRAPHICS_SCHEMA,
    SilverTable.LOCATIONS: CUSTOMER_LOCATION_SCHEMA,
    SilverTable.PRODUCTS: PRODUCT_RECORD_SCHEMA,
    SilverTable.CATEGORIES: PRODUCT_CATEGORY_SCHEMA,
    SilverTable.SALES: SALES_LINE_SCHEMA,
}


# =============================================================================
# GOLD OUTPUTS
# =============================================================================

CUSTOMER_DIMENSION_COLUMNS: List[str] = [
    "customer_key",
    "customer_id",
    "customer_number",
    "first_name",
    "last_name",
    "country",
    "marital_status",
    "gender",
    "birthdate",
    "create_date",
]

PRODUCT_DIMENSION_COLUMNS: List[str] = [
    "product_key",
    "product_id",
    "product_number",
    "product_name",
    "category_id",
    "category",
    "subcategory",
    "maintenance",
    "cost",
    "product_line",
    "start_date",
]

SALES_FACT_COLUMNS: List[str] = [
    "order_number",
    "product_key",
    "customer_key",
    "order_date",
    "shipping_date",
    "due_date",
    "sales_amount",
    "quantity",
    "price",
]


def _cast(column: str, source: pl.DataType, target: pl.DataType) -> pl.Expr:
    expr = pl.col(column)
    if source == pl.Utf8 and target == pl.Date:
        return expr.str.to_date("%Y-%m-%d")
    return expr.cast(target)


def conform(
    df: pl.DataFrame,
    schema: Dict[str, pl.DataType],
    table: str,
) -> pl.DataFrame:
    """
    Select and cast the declared columns of a record collection.

    Columns outside the schema are dropped. ISO date strings are parsed.
    A frame with no columns at all is an empty collection.

    Raises:
        PreconditionViolation: if a declared column is missing
    """
    if df.width == 0:
        return empty_frame(schema)

    missing = [col for col in schema if col not in df.columns]
    if missing:
        raise PreconditionViolation(
            table,
            f"missing columns {missing}",
            details={"missing_columns": missing},
        )

    return df.select([
        _cast(col, df.schema[col], dtype) for col, dtype in schema.items()
    ])


def empty_frame(schema: Dict[str, pl.DataType]) -> pl.DataFrame:
    """Empty record collection with the given schema"""
    return pl.DataFrame(schema=schema)
