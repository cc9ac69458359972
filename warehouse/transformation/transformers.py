"""
Gold Layer Transformer

Builds the Gold star schema from the Silver tables: the two dimensions
concurrently, then the sales fact against them, with optional quality
checks and parquet output.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import polars as pl
import structlog

from warehouse.config import get_settings
from warehouse.models.records import (
    CUSTOMER_RECORD_SCHEMA,
    PRODUCT_RECORD_SCHEMA,
    SilverTable,
    conform,
)
from warehouse.models.tables import GoldStarSchema, SilverTables
from warehouse.quality.validators import (
    ValidationResult,
    create_current_products_validator,
    create_customer_identity_validator,
    create_dim_customers_validator,
    create_dim_products_validator,
    create_fact_sales_validator,
    ensure_preconditions,
)
from .dimensions import CustomerDimensionBuilder, ProductDimensionBuilder
from .facts import SalesFactBuilder

logger = structlog.get_logger(__name__)


class GoldTable(str, Enum):
    """Tables of the Gold star schema"""
    DIM_CUSTOMERS = "dim_customers"
    DIM_PRODUCTS = "dim_products"
    FACT_SALES = "fact_sales"


@dataclass
class BuildResult:
    """Result of building one Gold table"""
    table: GoldTable
    input_rows: int
    output_rows: int
    rows_dropped: int
    started_at: datetime
    completed_at: datetime
    duration_seconds: float
    output_path: Optional[str] = None


@dataclass
class GoldBuildReport:
    """Outcome of a full Gold layer run"""
    star: GoldStarSchema
    results: Dict[str, BuildResult]
    validation: Dict[str, ValidationResult] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> float:
        """Wall time from the first table start to the last table end"""
        if not self.results:
            return 0.0
        started = min(r.started_at for r in self.results.values())
        completed = max(r.completed_at for r in self.results.values())
        return (completed - started).total_seconds()


def _timed(
    table: GoldTable,
    input_rows: int,
    build: Callable[..., pl.DataFrame],
    *args: Any,
) -> Tuple[pl.DataFrame, BuildResult]:
    started_at = datetime.utcnow()
    df = build(*args)
    completed_at = datetime.utcnow()

    return df, BuildResult(
        table=table,
        input_rows=input_rows,
        output_rows=df.height,
        rows_dropped=input_rows - df.height,
        started_at=started_at,
        completed_at=completed_at,
        duration_seconds=(completed_at - started_at).total_seconds(),
    )


class GoldLayerTransformer:
    """
    Gold star schema orchestrator.

    The customer and product dimensions share no state, so they are built
    on a small thread pool; the fact build waits for both.

    Example:
        transformer = GoldLayerTransformer()
        star = transformer.build(silver_tables)
        report = transformer.run(silver_tables, persist=True)
    """

    def __init__(
        self,
        output_path: Optional[str] = None,
        parallel: Optional[bool] = None,
        max_workers: Optional[int] = None,
        validate_inputs: Optional[bool] = None,
        unknown_gender: Optional[str] = None,
        key_base: Optional[int] = None,
    ):
        settings = get_settings()
        gold = settings.gold

        self.output_path = Path(output_path or settings.data_lake.gold_path)
        self.parallel = gold.parallel_dimensions if parallel is None else parallel
        self.max_workers = max_workers or gold.max_workers
        self.validate_inputs = gold.validate_inputs if validate_inputs is None else validate_inputs
        self.key_base = gold.surrogate_key_base if key_base is None else key_base

        self.customer_builder = CustomerDimensionBuilder(unknown_gender=unknown_gender, key_base=self.key_base)
        self.product_builder = ProductDimensionBuilder(key_base=self.key_base)
        self.fact_builder = SalesFactBuilder()

    def validate_preconditions(self, silver: SilverTables) -> None:
        """
        Check the uniqueness guarantees of the Silver identity sources.

        Raises:
            PreconditionViolation: if a guarantee does not hold
        """
        customers = conform(silver.customers, CUSTOMER_RECORD_SCHEMA, SilverTable.CUSTOMERS.value)
        ensure_preconditions(
            create_customer_identity_validator().validate(customers),
            SilverTable.CUSTOMERS.value,
        )

        products = conform(silver.products, PRODUCT_RECORD_SCHEMA, SilverTable.PRODUCTS.value)
        ensure_preconditions(
            create_current_products_validator().validate(products),
            SilverTable.PRODUCTS.value,
        )

    def _build_dimensions(
        self,
        silver: SilverTables,
    ) -> Tuple[Tuple[pl.DataFrame, BuildResult], Tuple[pl.DataFrame, BuildResult]]:
        customer_args = (
            GoldTable.DIM_CUSTOMERS,
            silver.customers.height,
            self.customer_builder.build,
            silver.customers,
            silver.demographics,
            silver.locations,
        )
        product_args = (
            GoldTable.DIM_PRODUCTS,
            silver.products.height,
            self.product_builder.build,
            silver.products,
            silver.categories,
        )

        if not self.parallel:
            return _timed(*customer_args), _timed(*product_args)

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="gold-dim") as pool:
            customers = pool.submit(_timed, *customer_args)
            products = pool.submit(_timed, *product_args)
            return customers.result(), products.result()

    def _build(self, silver: SilverTables) -> Tuple[GoldStarSchema, Dict[str, BuildResult]]:
        if self.validate_inputs:
            self.validate_preconditions(silver)

        (dim_customers, customer_result), (dim_products, product_result) = self._build_dimensions(silver)

        fact_sales, fact_result = _timed(
            GoldTable.FACT_SALES,
            silver.sales.height,
            self.fact_builder.build,
            silver.sales,
            dim_products,
            dim_customers,
        )

        star = GoldStarSchema(
            dim_customers=dim_customers,
            dim_products=dim_products,
            fact_sales=fact_sales,
        )
        results = {
            result.table.value: result
            for result in (customer_result, product_result, fact_result)
        }
        return star, results

    def build(self, silver: SilverTables) -> GoldStarSchema:
        """
        Build the Gold star schema.

        Either every table is built or the call raises; nothing partial is
        returned.
        """
        star, _ = self._build(silver)
        return star

    def validate_outputs(self, star: GoldStarSchema) -> Dict[str, ValidationResult]:
        """Run the Gold quality checks on every table"""
        return {
            GoldTable.DIM_CUSTOMERS.value: create_dim_customers_validator(self.key_base).validate(star.dim_customers),
            GoldTable.DIM_PRODUCTS.value: create_dim_products_validator(self.key_base).validate(star.dim_products),
            GoldTable.FACT_SALES.value: create_fact_sales_validator(
                star.dim_products, star.dim_customers
            ).validate(star.fact_sales),
        }

    def write_output(self, star: GoldStarSchema) -> Dict[str, str]:
        """Write every Gold table to <gold_path>/<table>.parquet, replacing the previous build"""
        self.output_path.mkdir(parents=True, exist_ok=True)

        written = {}
        for name, df in star.tables().items():
            output_file = self.output_path / f"{name}.parquet"
            df.write_parquet(output_file)
            logger.info(f"Written {len(df)} rows to {output_file}")
            written[name] = str(output_file)

        return written

    def run(
        self,
        silver: SilverTables,
        persist: bool = False,
        validate: bool = True,
    ) -> GoldBuildReport:
        """
        Build, check and optionally persist the Gold star schema.

        Args:
            silver: Silver input tables
            persist: Write the tables as parquet under the gold path
            validate: Run the Gold quality checks

        Returns:
            GoldBuildReport with per-table statistics
        """
        logger.info("Starting Gold layer build")

        star, results = self._build(silver)
        report = GoldBuildReport(star=star, results=results)

        if validate:
            report.validation = self.validate_outputs(star)

        if persist:
            for name, path in self.write_output(star).items():
                results[name].output_path = path

        total_input = sum(r.input_rows for r in results.values())
        total_output = sum(r.output_rows for r in results.values())

        logger.info(
            f"Gold layer build complete: {total_input} input → {total_output} output, "
            f"duration: {report.duration_seconds:.2f}s",
            tables={name: r.output_rows for name, r in results.items()},
        )

        return report
