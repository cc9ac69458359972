"""
Table Bundles

Groups the Silver inputs and Gold outputs of one star schema build.
"""

from dataclasses import dataclass
from typing import Dict

import polars as pl


@dataclass
class SilverTables:
    """Silver record collections consumed by one build"""
    customers: pl.DataFrame
    demographics: pl.DataFrame
    locations: pl.DataFrame
    products: pl.DataFrame
    categories: pl.DataFrame
    sales: pl.DataFrame


@dataclass
class GoldStarSchema:
    """Gold dimensions and fact produced by one build"""
    dim_customers: pl.DataFrame
    dim_products: pl.DataFrame
    fact_sales: pl.DataFrame

    def tables(self) -> Dict[str, pl.DataFrame]:
        """Gold tables keyed by table name"""
        return {
            "dim_customers": self.dim_customers,
            "dim_products": self.dim_products,
            "fact_sales": self.fact_sales,
        }
