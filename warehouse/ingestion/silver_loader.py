"""
Silver Table Loader

Reads the cleansed Silver tables from the data lake into Polars DataFrames.
Supports:
- Parquet and CSV files, parquet preferred
- Schema conformance on read
- Per-table load audit
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

import polars as pl
import structlog
from pydantic import BaseModel

from warehouse.config import get_settings
from warehouse.models.records import SILVER_SCHEMAS, SilverTable, conform
from warehouse.models.tables import SilverTables

logger = structlog.get_logger(__name__)

# "N/A" is the unknown-gender sentinel, not a null
SILVER_NULL_VALUES = ["", "NULL", "null"]


class FileFormat(str, Enum):
    """Supported file formats"""
    CSV = "csv"
    PARQUET = "parquet"


class LoadResult(BaseModel):
    """Result of loading one Silver table"""
    table: str
    file_path: str
    file_format: FileFormat
    rows_loaded: int = 0
    load_duration_seconds: float = 0
    started_at: datetime
    completed_at: Optional[datetime] = None


class SilverLoader:
    """
    Loader for the six Silver tables of the star schema build.

    Example:
        loader = SilverLoader("data/silver")
        silver = loader.load_all()
    """

    def __init__(self, silver_path: Optional[Union[str, Path]] = None):
        self.silver_path = Path(silver_path or get_settings().data_lake.silver_path)
        self.results: List[LoadResult] = []

    def _resolve_file(self, table: SilverTable) -> Path:
        """Locate the file of a table, parquet first"""
        for file_format in (FileFormat.PARQUET, FileFormat.CSV):
            candidate = self.silver_path / f"{table.value}.{file_format.value}"
            if candidate.exists():
                return candidate
        raise FileNotFoundError(
            f"No parquet or csv file for table '{table.value}' in {self.silver_path}"
        )

    def _read_csv(self, file_path: Path, table: SilverTable) -> pl.DataFrame:
        """Read CSV file with text columns kept as text"""
        text_columns = {
            col: pl.Utf8
            for col, dtype in SILVER_SCHEMAS[table].items()
            if dtype == pl.Utf8
        }
        return pl.read_csv(
            file_path,
            null_values=SILVER_NULL_VALUES,
            try_parse_dates=True,
            schema_overrides=text_columns,
        )

    def _read_parquet(self, file_path: Path, table: SilverTable) -> pl.DataFrame:
        """Read Parquet file"""
        return pl.read_parquet(file_path)

    def load_table(self, table: Union[SilverTable, str]) -> pl.DataFrame:
        """
        Load one Silver table onto its declared schema.

        Raises:
            FileNotFoundError: if neither file exists
            PreconditionViolation: if the file lacks a declared column
        """
        table = SilverTable(table)
        started_at = datetime.utcnow()
        file_path = self._resolve_file(table)
        file_format = FileFormat(file_path.suffix.lstrip("."))

        if file_format == FileFormat.PARQUET:
            df = self._read_parquet(file_path, table)
        else:
            df = self._read_csv(file_path, table)

        df = conform(df, SILVER_SCHEMAS[table], table.value)

        completed_at = datetime.utcnow()
        result = LoadResult(
            table=table.value,
            file_path=str(file_path),
            file_format=file_format,
            rows_loaded=df.height,
            load_duration_seconds=(completed_at - started_at).total_seconds(),
            started_at=started_at,
            completed_at=completed_at,
        )
        self.results.append(result)

        logger.info(
            "Silver table loaded",
            table=table.value,
            file=str(file_path),
            rows=df.height,
        )

        return df

    def load_all(self) -> SilverTables:
        """Load every Silver table of the build"""
        return SilverTables(
            customers=self.load_table(SilverTable.CUSTOMERS),
            demographics=self.load_table(SilverTable.DEMOGRAPHICS),
            locations=self.load_table(SilverTable.LOCATIONS),
            products=self.load_table(SilverTable.PRODUCTS),
            categories=self.load_table(SilverTable.CATEGORIES),
            sales=self.load_table(SilverTable.SALES),
        )
