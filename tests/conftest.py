"""
Test Suite Configuration
"""
from datetime import date

import pytest
import polars as pl

from warehouse.config import Settings
from warehouse.models.records import (
    CUSTOMER_DEMOGRAPHICS_SCHEMA,
    CUSTOMER_LOCATION_SCHEMA,
    CUSTOMER_RECORD_SCHEMA,
    PRODUCT_CATEGORY_SCHEMA,
    PRODUCT_RECORD_SCHEMA,
    SALES_LINE_SCHEMA,
)
from warehouse.models.tables import SilverTables


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
def sample_customers_df() -> pl.DataFrame:
    """CRM customers, deliberately not in cst_id order"""
    return pl.DataFrame(
        {
            "cst_id": [3, 1, 2, 4],
            "cst_key": ["AW00000003", "AW00000001", "AW00000002", "AW00000004"],
            "cst_firstname": ["Jon", "Elizabeth", "Eugene", "Ruben"],
            "cst_lastname": ["Yang", "Johnson", "Huang", "Torres"],
            "cst_marital_status": ["Married", "Single", "Married", "Single"],
            "cst_gndr": ["Male", "N/A", None, "N/A"],
            "cst_create_date": [
                date(2025, 10, 6),
                date(2025, 10, 7),
                date(2025, 10, 8),
                date(2025, 10, 9),
            ],
        },
        schema=CUSTOMER_RECORD_SCHEMA,
    )


@pytest.fixture
def sample_demographics_df() -> pl.DataFrame:
    """ERP demographics; AW00000002 has no row"""
    return pl.DataFrame(
        {
            "cid": ["AW00000003", "AW00000001", "AW00000004"],
            "bdate": [date(1980, 5, 1), date(1990, 1, 1), date(1975, 3, 15)],
            "gen": ["Female", "Female", None],
        },
        schema=CUSTOMER_DEMOGRAPHICS_SCHEMA,
    )


@pytest.fixture
def sample_locations_df() -> pl.DataFrame:
    """ERP locations for two of the four customers"""
    return pl.DataFrame(
        {
            "cid": ["AW00000001", "AW00000003"],
            "cntry": ["Germany", "Canada"],
        },
        schema=CUSTOMER_LOCATION_SCHEMA,
    )


@pytest.fixture
def sample_products_df() -> pl.DataFrame:
    """CRM product history; BI-RB-0001 has a superseded version"""
    return pl.DataFrame(
        {
            "prd_id": [210, 211, 212, 213],
            "prd_key": ["BI-RB-0001", "BI-RB-0001", "AC-HE-0002", "CO-PE-0003"],
            "prd_nm": ["Road-150 Red", "Road-150 Red", "Sport-100 Helmet", "HL Road Pedal"],
            "cat_id": ["BI_RB", "BI_RB", "AC_HE", "CO_PE"],
            "prd_cost": [2171, 2200, 13, 36],
            "prd_line": ["Road", "Road", "Other Sales", "Road"],
            "prd_start_dt": [date(2011, 7, 1), date(2012, 7, 1), date(2012, 7, 1), date(2011, 1, 1)],
            "prd_end_dt": [date(2012, 6, 30), None, None, None],
        },
        schema=PRODUCT_RECORD_SCHEMA,
    )


@pytest.fixture
def sample_categories_df() -> pl.DataFrame:
    """ERP categories; CO_PE is not catalogued"""
    return pl.DataFrame(
        {
            "id": ["AC_HE", "BI_RB"],
            "cat": ["Accessories", "Bikes"],
            "subcat": ["Helmets", "Road Bikes"],
            "maintenance": ["Yes", "Yes"],
        },
        schema=PRODUCT_CATEGORY_SCHEMA,
    )


@pytest.fixture
def sample_sales_df() -> pl.DataFrame:
    """Sales lines, one for an unknown product and one for an unknown customer"""
    return pl.DataFrame(
        {
            "sls_ord_num": ["SO43697", "SO43698", "SO43699", "SO43700"],
            "sls_prd_key": ["BI-RB-0001", "AC-HE-0002", "ZZ-MISSING", "CO-PE-0003"],
            "sls_cust_id": [1, 3, 2, 999],
            "sls_order_dt": [date(2012, 12, 29)] * 4,
            "sls_ship_dt": [date(2013, 1, 5)] * 4,
            "sls_due_dt": [date(2013, 1, 10)] * 4,
            "sls_sales": [2200, 26, 100, 36],
            "sls_quantity": [1, 2, 1, 1],
            "sls_price": [2200, 13, 100, 36],
        },
        schema=SALES_LINE_SCHEMA,
    )


@pytest.fixture
def sample_silver(
    sample_customers_df,
    sample_demographics_df,
    sample_locations_df,
    sample_products_df,
    sample_categories_df,
    sample_sales_df,
) -> SilverTables:
    """Complete Silver input bundle"""
    return SilverTables(
        customers=sample_customers_df,
        demographics=sample_demographics_df,
        locations=sample_locations_df,
        products=sample_products_df,
        categories=sample_categories_df,
        sales=sample_sales_df,
    )
