"""
Data Validation Module

Rule-based quality checks for the Silver inputs and Gold outputs of the
star schema build.

Features:
- Null checks
- Uniqueness checks
- Surrogate key contiguity
- Referential integrity checks
- Fact connectivity (unresolved dimension keys)
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import polars as pl
import structlog

from warehouse.config import get_settings
from warehouse.models.exceptions import PreconditionViolation

logger = structlog.get_logger(__name__)


class ValidationSeverity(str, Enum):
    """Severity levels for validation failures"""
    ERROR = "error"  # Critical - blocks pipeline
    WARNING = "warning"  # Non-critical - logged but continues
    INFO = "info"  # Informational only


class ValidationStatus(str, Enum):
    """Overall validation status"""
    PASSED = "passed"
    FAILED = "failed"
    PARTIAL = "partial"


@dataclass
class ValidationCheck:
    """Single validation check result"""
    name: str
    passed: bool
    severity: ValidationSeverity
    message: str
    details: Optional[Dict[str, Any]] = None
    failed_rows: int = 0
    total_rows: int = 0


@dataclass
class ValidationResult:
    """Complete validation suite result"""
    status: ValidationStatus
    total_checks: int
    passed_checks: int
    failed_checks: int
    warning_count: int
    checks: List[ValidationCheck] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None

    @property
    def success_rate(self) -> float:
        """Percentage of passed checks"""
        if self.total_checks == 0:
            return 100.0
        return (self.passed_checks / self.total_checks) * 100

    @property
    def failures(self) -> List[ValidationCheck]:
        """Failed checks of any severity"""
        return [c for c in self.checks if not c.passed]


def _missing_column(name: str, column: str, severity: ValidationSeverity) -> ValidationCheck:
    return ValidationCheck(
        name=name,
        passed=False,
        severity=severity,
        message=f"Column '{column}' not found",
    )


class DataValidator:
    """
    Data validator with a chainable check suite.

    Example:
        validator = DataValidator("dim_customers")
        validator.add_not_null_check("customer_key")
        validator.add_unique_check("customer_key")
        result = validator.validate(df)
    """

    def __init__(self, table: str = "dataset", strict_mode: bool = False):
        self.table = table
        self.strict_mode = strict_mode  # Fail on any warning
        self._checks: List[Callable[[pl.DataFrame], ValidationCheck]] = []

    def reset(self) -> None:
        """Reset validator state"""
        self._checks = []

    def add_not_null_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for null values in column"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            name = f"not_null_{column}"
            if column not in df.columns:
                return _missing_column(name, column, severity)

            null_count = df[column].null_count()
            total = len(df)
            passed = null_count == 0

            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {null_count} null values" if not passed else f"Column '{column}' has no null values",
                details={"null_count": null_count, "null_percentage": (null_count / total) * 100 if total > 0 else 0},
                failed_rows=null_count,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_unique_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
        where: Optional[pl.Expr] = None,
        name: Optional[str] = None,
    ) -> "DataValidator":
        """Add check for uniqueness of non-null column values, optionally on a row subset"""
        check_name = name or f"unique_{column}"

        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return _missing_column(check_name, column, severity)

            rows = df.filter(where) if where is not None else df
            values = rows[column].drop_nulls()
            total = len(values)
            unique_count = values.n_unique()
            duplicate_count = total - unique_count
            passed = duplicate_count == 0

            return ValidationCheck(
                name=check_name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {duplicate_count} duplicate values" if not passed else f"Column '{column}' values are unique",
                details={"unique_count": unique_count, "duplicate_count": duplicate_count},
                failed_rows=duplicate_count,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_contiguous_key_check(
        self,
        column: str,
        base: int = 1,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check that a surrogate key runs base, base+1, ... with no gaps"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            name = f"contiguous_{column}"
            if column not in df.columns:
                return _missing_column(name, column, severity)

            expected = list(range(base, base + len(df)))
            actual = sorted(df[column].drop_nulls().to_list())
            passed = actual == expected

            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' is a contiguous sequence from {base}" if passed else f"Column '{column}' is not a contiguous sequence from {base}",
                details={"base": base, "min": actual[0] if actual else None, "max": actual[-1] if actual else None},
                failed_rows=0 if passed else len(set(expected) ^ set(actual)),
                total_rows=len(df),
            )

        self._checks.append(check)
        return self

    def add_referential_integrity_check(
        self,
        column: str,
        reference_df: pl.DataFrame,
        reference_column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check that every non-null value exists in the reference column"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            name = f"ref_integrity_{column}"
            if column not in df.columns:
                return _missing_column(name, column, severity)

            ref_values = reference_df[reference_column].drop_nulls().unique()

            orphans = df.filter(
                ~pl.col(column).is_in(ref_values) & pl.col(column).is_not_null()
            ).height
            total = len(df)
            passed = orphans == 0

            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {orphans} orphan records" if not passed else "Referential integrity maintained",
                details={"orphan_count": orphans},
                failed_rows=orphans,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def validate(self, df: pl.DataFrame) -> ValidationResult:
        """
        Run all validation checks on DataFrame.

        Args:
            df: DataFrame to validate

        Returns:
            ValidationResult with all check results
        """
        started_at = datetime.utcnow()
        results = []

        logger.info(
            f"Running {len(self._checks)} validation checks on {len(df)} rows",
            table=self.table,
        )

        for check_func in self._checks:
            result = check_func(df)
            results.append(result)

            if not result.passed:
                logger.warning(
                    f"Validation failed: {result.name}",
                    table=self.table,
                    message=result.message,
                    severity=result.severity.value,
                )

        completed_at = datetime.utcnow()

        passed_checks = sum(1 for r in results if r.passed)
        failed_checks = sum(1 for r in results if not r.passed and r.severity == ValidationSeverity.ERROR)
        warning_count = sum(1 for r in results if not r.passed and r.severity == ValidationSeverity.WARNING)

        if failed_checks > 0:
            status = ValidationStatus.FAILED
        elif warning_count > 0 and self.strict_mode:
            status = ValidationStatus.FAILED
        elif warning_count > 0:
            status = ValidationStatus.PARTIAL
        else:
            status = ValidationStatus.PASSED

        validation_result = ValidationResult(
            status=status,
            total_checks=len(results),
            passed_checks=passed_checks,
            failed_checks=failed_checks,
            warning_count=warning_count,
            checks=results,
            started_at=started_at,
            completed_at=completed_at,
        )

        logger.info(
            f"Validation complete: {status.value}",
            table=self.table,
            passed=passed_checks,
            failed=failed_checks,
            warnings=warning_count,
        )

        return validation_result


def ensure_preconditions(result: ValidationResult, table: str) -> None:
    """
    Raise if a precondition suite failed.

    Raises:
        PreconditionViolation: with the failed checks in its details
    """
    if result.status != ValidationStatus.FAILED:
        return

    failures = {c.name: c.message for c in result.failures}
    raise PreconditionViolation(
        table,
        f"{len(failures)} precondition check(s) failed: {sorted(failures)}",
        details=failures,
    )


# =============================================================================
# SILVER PRECONDITIONS
# =============================================================================

def create_customer_identity_validator() -> DataValidator:
    """CRM customers carry one row per business key and id"""
    return (
        DataValidator("crm_cust_info")
        .add_unique_check("cst_key")
        .add_unique_check("cst_id")
    )


def create_current_products_validator() -> DataValidator:
    """At most one current version per product key"""
    return (
        DataValidator("crm_prd_info")
        .add_unique_check(
            "prd_key",
            where=pl.col("prd_end_dt").is_null(),
            name="unique_current_prd_key",
        )
    )


# =============================================================================
# GOLD OUTPUTS
# =============================================================================

def create_dim_customers_validator(key_base: Optional[int] = None) -> DataValidator:
    """Create pre-configured validator for the customer dimension"""
    base = get_settings().gold.surrogate_key_base if key_base is None else key_base
    return (
        DataValidator("dim_customers")
        .add_not_null_check("customer_key")
        .add_unique_check("customer_key")
        .add_contiguous_key_check("customer_key", base=base)
        .add_unique_check("customer_number", severity=ValidationSeverity.WARNING)
    )


def create_dim_products_validator(key_base: Optional[int] = None) -> DataValidator:
    """Create pre-configured validator for the product dimension"""
    base = get_settings().gold.surrogate_key_base if key_base is None else key_base
    return (
        DataValidator("dim_products")
        .add_not_null_check("product_key")
        .add_unique_check("product_key")
        .add_contiguous_key_check("product_key", base=base)
        .add_unique_check("product_number", severity=ValidationSeverity.WARNING)
    )


def create_fact_sales_validator(
    dim_products: pl.DataFrame,
    dim_customers: pl.DataFrame,
) -> DataValidator:
    """Create pre-configured validator for the sales fact"""
    return (
        DataValidator("fact_sales")
        .add_referential_integrity_check("product_key", dim_products, "product_key")
        .add_referential_integrity_check("customer_key", dim_customers, "customer_key")
        .add_not_null_check("product_key", severity=ValidationSeverity.WARNING)
        .add_not_null_check("customer_key", severity=ValidationSeverity.WARNING)
    )
