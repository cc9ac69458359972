"""
Unit Tests - Data Quality
"""
from datetime import date

import pytest
import polars as pl

from warehouse.models.exceptions import PreconditionViolation
from warehouse.quality.validators import (
    DataValidator,
    ValidationSeverity,
    ValidationStatus,
    create_current_products_validator,
    create_customer_identity_validator,
    create_dim_customers_validator,
    create_fact_sales_validator,
    ensure_preconditions,
)


class TestDataValidator:
    """Tests for DataValidator"""

    def test_not_null_check_passes(self):
        """Test not null check with valid data"""
        df = pl.DataFrame({"id": [1, 2, 3], "name": ["a", "b", "c"]})

        validator = DataValidator()
        validator.add_not_null_check("id")

        result = validator.validate(df)

        assert result.status == ValidationStatus.PASSED
        assert result.passed_checks == 1

    def test_not_null_check_fails(self):
        """Test not null check with null values"""
        df = pl.DataFrame({"id": [1, None, 3], "name": ["a", "b", "c"]})

        validator = DataValidator()
        validator.add_not_null_check("id")

        result = validator.validate(df)

        assert result.status == ValidationStatus.FAILED
        assert result.failed_checks == 1

    def test_missing_column_fails(self):
        """Test a check on an absent column fails instead of raising"""
        df = pl.DataFrame({"id": [1]})

        result = DataValidator().add_not_null_check("customer_key").validate(df)

        assert result.status == ValidationStatus.FAILED
        assert "not found" in result.checks[0].message

    def test_unique_check_passes(self):
        """Test unique check with unique values"""
        df = pl.DataFrame({"id": [1, 2, 3]})

        validator = DataValidator()
        validator.add_unique_check("id")

        result = validator.validate(df)

        assert result.status == ValidationStatus.PASSED

    def test_unique_check_fails(self):
        """Test unique check with duplicates"""
        df = pl.DataFrame({"id": [1, 2, 1]})

        validator = DataValidator()
        validator.add_unique_check("id")

        result = validator.validate(df)

        assert result.status == ValidationStatus.FAILED
        assert result.checks[0].failed_rows == 1

    def test_unique_check_ignores_nulls(self):
        """Test repeated nulls are not duplicates"""
        df = pl.DataFrame({"id": [1, None, None]}, schema={"id": pl.Int64})

        result = DataValidator().add_unique_check("id").validate(df)

        assert result.status == ValidationStatus.PASSED

    def test_unique_check_on_subset(self):
        """Test uniqueness restricted to a row filter"""
        df = pl.DataFrame({"key": ["a", "a", "b"], "current": [False, True, True]})

        result = (
            DataValidator()
            .add_unique_check("key", where=pl.col("current"), name="unique_current_key")
            .validate(df)
        )

        assert result.status == ValidationStatus.PASSED
        assert result.checks[0].name == "unique_current_key"

    def test_contiguous_key_check(self):
        """Test a gap-free key passes regardless of row order"""
        df = pl.DataFrame({"sk": [3, 1, 2]})

        result = DataValidator().add_contiguous_key_check("sk", base=1).validate(df)

        assert result.status == ValidationStatus.PASSED

    def test_contiguous_key_check_detects_gap(self):
        """Test a missing key fails the check"""
        df = pl.DataFrame({"sk": [1, 2, 4]})

        result = DataValidator().add_contiguous_key_check("sk", base=1).validate(df)

        assert result.status == ValidationStatus.FAILED
        assert result.checks[0].details["max"] == 4

    def test_contiguous_key_check_base(self):
        """Test the expected sequence starts at the given base"""
        df = pl.DataFrame({"sk": [1, 2]})

        result = DataValidator().add_contiguous_key_check("sk", base=0).validate(df)

        assert result.status == ValidationStatus.FAILED

    def test_referential_integrity(self):
        """Test orphans are counted and nulls are not"""
        reference = pl.DataFrame({"product_key": [1, 2, 3]})
        df = pl.DataFrame({"product_key": [1, 3, 7, None]}, schema={"product_key": pl.Int64})

        result = (
            DataValidator()
            .add_referential_integrity_check("product_key", reference, "product_key")
            .validate(df)
        )

        assert result.status == ValidationStatus.FAILED
        assert result.checks[0].details["orphan_count"] == 1

    def test_warning_gives_partial(self):
        """Test warnings alone give a partial result"""
        df = pl.DataFrame({"id": [1, None]}, schema={"id": pl.Int64})

        result = (
            DataValidator()
            .add_not_null_check("id", severity=ValidationSeverity.WARNING)
            .validate(df)
        )

        assert result.status == ValidationStatus.PARTIAL
        assert result.warning_count == 1
        assert len(result.failures) == 1

    def test_strict_mode_fails_on_warning(self):
        """Test strict mode escalates warnings"""
        df = pl.DataFrame({"id": [1, None]}, schema={"id": pl.Int64})

        result = (
            DataValidator(strict_mode=True)
            .add_not_null_check("id", severity=ValidationSeverity.WARNING)
            .validate(df)
        )

        assert result.status == ValidationStatus.FAILED


class TestPreconditions:
    """Tests for the Silver precondition suites"""

    def test_customer_identity_passes(self, sample_customers_df):
        """Test unique identities pass"""
        result = create_customer_identity_validator().validate(sample_customers_df)

        assert result.status == ValidationStatus.PASSED

    def test_ensure_preconditions_raises(self, sample_customers_df):
        """Test a duplicated business key is reported with the failed checks"""
        df = pl.concat([sample_customers_df, sample_customers_df.tail(1)])
        result = create_customer_identity_validator().validate(df)

        with pytest.raises(PreconditionViolation) as exc_info:
            ensure_preconditions(result, "crm_cust_info")

        assert exc_info.value.table == "crm_cust_info"
        assert set(exc_info.value.details) == {"unique_cst_key", "unique_cst_id"}
        assert str(exc_info.value).startswith("crm_cust_info: ")

    def test_ensure_preconditions_accepts_partial(self):
        """Test warnings do not block the build"""
        df = pl.DataFrame({"id": [None]}, schema={"id": pl.Int64})
        result = (
            DataValidator()
            .add_not_null_check("id", severity=ValidationSeverity.WARNING)
            .validate(df)
        )

        ensure_preconditions(result, "any")

    def test_current_products_ignore_history(self, sample_products_df):
        """Test superseded versions may share a product key"""
        result = create_current_products_validator().validate(sample_products_df)

        assert result.status == ValidationStatus.PASSED

    def test_two_current_versions_fail(self, sample_products_df):
        """Test two open versions of one product fail"""
        df = pl.concat([
            sample_products_df,
            sample_products_df.filter(pl.col("prd_id") == 211).with_columns(
                pl.lit(214, dtype=pl.Int64).alias("prd_id"),
                pl.lit(date(2013, 1, 1)).alias("prd_start_dt"),
            ),
        ])

        result = create_current_products_validator().validate(df)

        assert result.status == ValidationStatus.FAILED
        assert result.failures[0].name == "unique_current_prd_key"


class TestGoldValidators:
    """Tests for the Gold output suites"""

    def test_dim_customers_validator(self):
        """Test a well-formed customer dimension passes"""
        df = pl.DataFrame({
            "customer_key": [1, 2, 3],
            "customer_number": ["AW1", "AW2", "AW3"],
        })

        result = create_dim_customers_validator(key_base=1).validate(df)

        assert result.status == ValidationStatus.PASSED
        assert result.total_checks == 4

    def test_dim_customers_duplicate_number_warns(self):
        """Test a repeated business key is a warning"""
        df = pl.DataFrame({
            "customer_key": [1, 2],
            "customer_number": ["AW1", "AW1"],
        })

        result = create_dim_customers_validator(key_base=1).validate(df)

        assert result.status == ValidationStatus.PARTIAL

    def test_fact_sales_validator(self):
        """Test unresolved keys warn and foreign keys must exist"""
        dim_products = pl.DataFrame({"product_key": [1, 2]})
        dim_customers = pl.DataFrame({"customer_key": [1]})

        unresolved = pl.DataFrame(
            {"product_key": [1, None], "customer_key": [1, 1]},
            schema={"product_key": pl.Int64, "customer_key": pl.Int64},
        )
        dangling = pl.DataFrame({"product_key": [1, 5], "customer_key": [1, 1]})

        validator = create_fact_sales_validator(dim_products, dim_customers)

        assert validator.validate(unresolved).status == ValidationStatus.PARTIAL
        assert validator.validate(dangling).status == ValidationStatus.FAILED
