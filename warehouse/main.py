"""
Gold Layer Pipeline

Main entry point: loads the Silver tables, builds the Gold star schema,
runs the quality checks and writes the Gold tables.

Usage:
    gold-build
    gold-build --silver-path data/silver --gold-path data/gold
    gold-build --generate-sample
"""

import argparse
import sys
from typing import List, Optional

import structlog

from warehouse.config import get_settings
from warehouse.config.logging import configure_logging
from warehouse.data.generators import SilverDataGenerator
from warehouse.ingestion.silver_loader import SilverLoader
from warehouse.quality.validators import ValidationStatus
from warehouse.transformation.transformers import GoldBuildReport, GoldLayerTransformer

logger = structlog.get_logger(__name__)


def run_pipeline(
    silver_path: Optional[str] = None,
    gold_path: Optional[str] = None,
    persist: bool = True,
) -> GoldBuildReport:
    """
    Run the Silver -> Gold build once.

    Args:
        silver_path: Directory of Silver tables (defaults to DATA_SILVER_PATH)
        gold_path: Directory for Gold tables (defaults to DATA_GOLD_PATH)
        persist: Write the Gold tables

    Returns:
        GoldBuildReport of the run
    """
    settings = get_settings()
    silver_path = silver_path or settings.data_lake.silver_path

    loader = SilverLoader(silver_path)
    silver = loader.load_all()

    transformer = GoldLayerTransformer(output_path=gold_path)
    report = transformer.run(silver, persist=persist)

    for table, result in report.validation.items():
        logger.info(
            "Quality checks",
            table=table,
            status=result.status.value,
            passed=result.passed_checks,
            total=result.total_checks,
        )

    return report


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the Gold star schema from Silver tables")
    parser.add_argument("--silver-path", help="Directory of Silver tables")
    parser.add_argument("--gold-path", help="Directory for Gold tables")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    parser.add_argument("--no-persist", action="store_true", help="Build and check without writing")
    parser.add_argument(
        "--generate-sample",
        action="store_true",
        help="Write synthetic Silver tables to the silver path first",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point; returns 1 when a Gold quality check fails"""
    args = parse_args(argv)
    configure_logging(args.log_level)

    if args.generate_sample:
        SilverDataGenerator().generate_all(save=True, output_dir=args.silver_path)

    report = run_pipeline(
        silver_path=args.silver_path,
        gold_path=args.gold_path,
        persist=not args.no_persist,
    )

    failed = [
        table for table, result in report.validation.items()
        if result.status == ValidationStatus.FAILED
    ]
    if failed:
        logger.error("Gold quality checks failed", tables=failed)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
