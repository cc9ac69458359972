"""
Unit Tests - Sales Fact Builder
"""
from datetime import date

import pytest
import polars as pl
from polars.testing import assert_frame_equal

from warehouse.config import get_settings
from warehouse.models.exceptions import PreconditionViolation
from warehouse.models.records import SALES_FACT_COLUMNS, SALES_LINE_SCHEMA, empty_frame
from warehouse.transformation.dimensions import CustomerDimensionBuilder, ProductDimensionBuilder
from warehouse.transformation.facts import SalesFactBuilder


@pytest.fixture
def dim_customers(sample_customers_df, sample_demographics_df, sample_locations_df) -> pl.DataFrame:
    return CustomerDimensionBuilder(unknown_gender="N/A", key_base=1).build(
        sample_customers_df, sample_demographics_df, sample_locations_df
    )


@pytest.fixture
def dim_products(sample_products_df, sample_categories_df) -> pl.DataFrame:
    return ProductDimensionBuilder(key_base=1).build(sample_products_df, sample_categories_df)


class TestSalesFactBuilder:
    """Tests for SalesFactBuilder"""

    def test_one_fact_per_sales_line(self, sample_sales_df, dim_products, dim_customers):
        """Test no sales line is dropped or duplicated"""
        result = SalesFactBuilder().build(sample_sales_df, dim_products, dim_customers)

        assert len(result) == len(sample_sales_df)
        assert result.columns == SALES_FACT_COLUMNS

    def test_keeps_input_order(self, sample_sales_df, dim_products, dim_customers):
        """Test facts come out in sales line order"""
        result = SalesFactBuilder().build(sample_sales_df, dim_products, dim_customers)

        assert result["order_number"].to_list() == sample_sales_df["sls_ord_num"].to_list()

    def test_resolves_dimension_keys(self, sample_sales_df, dim_products, dim_customers):
        """Test business keys resolve to surrogate keys"""
        result = SalesFactBuilder().build(sample_sales_df, dim_products, dim_customers)

        # dim_products: CO-PE-0003 -> 1, AC-HE-0002 -> 2, BI-RB-0001 -> 3
        assert result["product_key"].to_list() == [3, 2, None, 1]
        # dim_customers: customer_id == customer_key for ids 1..4; 999 is unknown
        assert result["customer_key"].to_list() == [1, 3, 2, None]

    def test_unmatched_product_keeps_measures(self, sample_sales_df, dim_products, dim_customers):
        """Test an unknown product yields a null key and intact measures"""
        result = SalesFactBuilder().build(sample_sales_df, dim_products, dim_customers)

        row = result.filter(pl.col("order_number") == "SO43699").to_dicts()[0]
        assert row["product_key"] is None
        assert row["customer_key"] == 2
        assert row["sales_amount"] == 100
        assert row["quantity"] == 1
        assert row["price"] == 100
        assert row["order_date"] == date(2012, 12, 29)
        assert row["shipping_date"] == date(2013, 1, 5)
        assert row["due_date"] == date(2013, 1, 10)

    def test_duplicate_dimension_key_resolves_to_lowest_key(self, sample_sales_df, dim_customers):
        """Test a duplicated product number picks one row by surrogate key order"""
        dim_products = pl.DataFrame({
            "product_key": [7, 4],
            "product_number": ["BI-RB-0001", "BI-RB-0001"],
        })

        result = SalesFactBuilder().build(sample_sales_df, dim_products, dim_customers)

        assert len(result) == len(sample_sales_df)
        assert result["product_key"].to_list()[0] == 4

    def test_duplicate_dimension_key_under_strict_references(self, sample_sales_df, dim_customers, monkeypatch):
        """Test strict reference checking never fails or fans out fact resolution"""
        monkeypatch.setattr(get_settings().gold, "strict_references", True)
        dim_products = pl.DataFrame({
            "product_key": [7, 4],
            "product_number": ["BI-RB-0001", "BI-RB-0001"],
        })

        result = SalesFactBuilder().build(sample_sales_df, dim_products, dim_customers)

        assert len(result) == len(sample_sales_df)
        assert result["product_key"].to_list() == [4, None, None, None]

    def test_empty_dimensions(self, sample_sales_df):
        """Test empty dimensions leave every key null"""
        result = SalesFactBuilder().build(
            sample_sales_df,
            pl.DataFrame(schema={"product_key": pl.Int64, "product_number": pl.Utf8}),
            pl.DataFrame(schema={"customer_key": pl.Int64, "customer_id": pl.Int64}),
        )

        assert len(result) == len(sample_sales_df)
        assert result["product_key"].null_count() == len(sample_sales_df)
        assert result["customer_key"].null_count() == len(sample_sales_df)

    def test_empty_sales(self, dim_products, dim_customers):
        """Test no sales lines gives an empty fact"""
        result = SalesFactBuilder().build(empty_frame(SALES_LINE_SCHEMA), dim_products, dim_customers)

        assert result.height == 0
        assert result.columns == SALES_FACT_COLUMNS

    def test_deterministic(self, sample_sales_df, dim_products, dim_customers):
        """Test repeated builds are identical"""
        builder = SalesFactBuilder()

        assert_frame_equal(
            builder.build(sample_sales_df, dim_products, dim_customers),
            builder.build(sample_sales_df, dim_products, dim_customers),
        )

    def test_dimension_without_business_key_fails(self, sample_sales_df, dim_customers):
        """Test a dimension missing its business key column is rejected"""
        with pytest.raises(PreconditionViolation) as exc_info:
            SalesFactBuilder().build(
                sample_sales_df,
                pl.DataFrame({"product_key": [1]}),
                dim_customers,
            )

        assert exc_info.value.table == "dim_products"
