"""
Dimension Builders

Projects Silver customer and product records into the Gold dimensions:
- Customer dimension: CRM identity enriched with ERP demographics and location
- Product dimension: current CRM product versions enriched with ERP categories
"""

from typing import Optional

import polars as pl
import structlog

from warehouse.config import get_settings
from warehouse.models.records import (
    CUSTOMER_DEMOGRAPHICS_SCHEMA,
    CUSTOMER_DIMENSION_COLUMNS,
    CUSTOMER_LOCATION_SCHEMA,
    CUSTOMER_RECORD_SCHEMA,
    PRODUCT_CATEGORY_SCHEMA,
    PRODUCT_DIMENSION_COLUMNS,
    PRODUCT_RECORD_SCHEMA,
    SilverTable,
    conform,
)
from .joins import left_lookup
from .keys import assign_surrogate_key

logger = structlog.get_logger(__name__)


class CustomerDimensionBuilder:
    """
    Builds the customer dimension.

    CRM is the master source for identity and gender. ERP demographics
    (birthdate, gender) and ERP location (country) only decorate it: a
    customer without ERP rows is still emitted, with nulls.

    Assumes cst_key is unique in the identity records. The output is
    undefined if it is not.

    Example:
        builder = CustomerDimensionBuilder()
        dim_customers = builder.build(crm_cust_info, erp_cust_az12, erp_loc_a101)
    """

    def __init__(
        self,
        unknown_gender: Optional[str] = None,
        key_base: Optional[int] = None,
    ):
        gold = get_settings().gold
        self.unknown_gender = gold.unknown_gender if unknown_gender is None else unknown_gender
        self.key_base = gold.surrogate_key_base if key_base is None else key_base

    def reconcile_gender(
        self,
        crm_column: str = "cst_gndr",
        erp_column: str = "gen",
    ) -> pl.Expr:
        """
        CRM gender unless it is null or the unknown sentinel, then the ERP
        gender, then the sentinel.
        """
        crm_known = pl.col(crm_column).is_not_null() & (pl.col(crm_column) != self.unknown_gender)

        return (
            pl.when(crm_known)
            .then(pl.col(crm_column))
            .otherwise(pl.col(erp_column).fill_null(self.unknown_gender))
        )

    def build(
        self,
        identities: pl.DataFrame,
        demographics: pl.DataFrame,
        locations: pl.DataFrame,
    ) -> pl.DataFrame:
        """
        Build one dimension row per identity row.

        Args:
            identities: CRM customer records (crm_cust_info)
            demographics: ERP demographics (erp_cust_az12)
            locations: ERP locations (erp_loc_a101)

        Returns:
            Customer dimension ordered by customer_key, assigned in
            ascending customer_id order
        """
        identities = conform(identities, CUSTOMER_RECORD_SCHEMA, SilverTable.CUSTOMERS.value)
        demographics = conform(demographics, CUSTOMER_DEMOGRAPHICS_SCHEMA, SilverTable.DEMOGRAPHICS.value)
        locations = conform(locations, CUSTOMER_LOCATION_SCHEMA, SilverTable.LOCATIONS.value)

        df = left_lookup(
            identities,
            demographics,
            left_on="cst_key",
            right_on="cid",
            columns=["bdate", "gen"],
            name=SilverTable.DEMOGRAPHICS.value,
        )
        df = left_lookup(
            df,
            locations,
            left_on="cst_key",
            right_on="cid",
            columns=["cntry"],
            name=SilverTable.LOCATIONS.value,
        )

        df = df.select([
            pl.col("cst_id").alias("customer_id"),
            pl.col("cst_key").alias("customer_number"),
            pl.col("cst_firstname").alias("first_name"),
            pl.col("cst_lastname").alias("last_name"),
            pl.col("cntry").alias("country"),
            pl.col("cst_marital_status").alias("marital_status"),
            self.reconcile_gender().alias("gender"),
            pl.col("bdate").alias("birthdate"),
            pl.col("cst_create_date").alias("create_date"),
        ])

        df = assign_surrogate_key(df, ["customer_id"], "customer_key", self.key_base)

        logger.info(
            "Customer dimension built",
            rows=df.height,
            demographics_matched=df["birthdate"].is_not_null().sum(),
            locations_matched=df["country"].is_not_null().sum(),
        )

        return df.select(CUSTOMER_DIMENSION_COLUMNS)


class ProductDimensionBuilder:
    """
    Builds the current-state product dimension.

    Only product versions with a null end date are kept; superseded
    versions are dropped. Categories decorate the kept rows without
    removing any.

    Example:
        builder = ProductDimensionBuilder()
        dim_products = builder.build(crm_prd_info, erp_px_cat_g1v2)
    """

    def __init__(self, key_base: Optional[int] = None):
        gold = get_settings().gold
        self.key_base = gold.surrogate_key_base if key_base is None else key_base

    @staticmethod
    def current_versions(products: pl.DataFrame) -> pl.DataFrame:
        """Product rows that have not been superseded"""
        return products.filter(pl.col("prd_end_dt").is_null())

    def build(
        self,
        products: pl.DataFrame,
        categories: pl.DataFrame,
    ) -> pl.DataFrame:
        """
        Build one dimension row per current product version.

        Args:
            products: CRM product history (crm_prd_info)
            categories: ERP product categories (erp_px_cat_g1v2)

        Returns:
            Product dimension ordered by product_key, assigned in ascending
            (start_date, product_number) order
        """
        products = conform(products, PRODUCT_RECORD_SCHEMA, SilverTable.PRODUCTS.value)
        categories = conform(categories, PRODUCT_CATEGORY_SCHEMA, SilverTable.CATEGORIES.value)

        current = self.current_versions(products)

        df = left_lookup(
            current,
            categories,
            left_on="cat_id",
            right_on="id",
            columns={"cat": "category", "subcat": "subcategory", "maintenance": "maintenance"},
            name=SilverTable.CATEGORIES.value,
        )

        df = df.select([
            pl.col("prd_id").alias("product_id"),
            pl.col("prd_key").alias("product_number"),
            pl.col("prd_nm").alias("product_name"),
            pl.col("cat_id").alias("category_id"),
            pl.col("category"),
            pl.col("subcategory"),
            pl.col("maintenance"),
            pl.col("prd_cost").alias("cost"),
            pl.col("prd_line").alias("product_line"),
            pl.col("prd_start_dt").alias("start_date"),
        ])

        df = assign_surrogate_key(df, ["start_date", "product_number"], "product_key", self.key_base)

        logger.info(
            "Product dimension built",
            rows=df.height,
            historical_rows_dropped=products.height - current.height,
            categories_matched=df["category"].is_not_null().sum(),
        )

        return df.select(PRODUCT_DIMENSION_COLUMNS)
