"""
Synthetic Silver Data Generator

Generates a consistent set of cleansed Silver tables for testing and local
runs. Coverage gaps are deliberate:
- Customers with an unknown CRM gender, partly covered by ERP demographics
- Customers without ERP demographics or location rows
- Products with superseded historical versions
- Products whose category is missing from the ERP catalogue
- Sales lines for unknown products and customers
"""

from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import polars as pl
from faker import Faker

from warehouse.config import get_settings
from warehouse.models.records import (
    CUSTOMER_DEMOGRAPHICS_SCHEMA,
    CUSTOMER_LOCATION_SCHEMA,
    CUSTOMER_RECORD_SCHEMA,
    PRODUCT_CATEGORY_SCHEMA,
    PRODUCT_RECORD_SCHEMA,
    SALES_LINE_SCHEMA,
    SilverTable,
)
from warehouse.models.tables import SilverTables


# =============================================================================
# CONFIGURATION
# =============================================================================

CATEGORIES = [
    ("AC_BR", "Accessories", "Bike Racks", "Yes"),
    ("AC_HE", "Accessories", "Helmets", "Yes"),
    ("BI_MB", "Bikes", "Mountain Bikes", "Yes"),
    ("BI_RB", "Bikes", "Road Bikes", "Yes"),
    ("CL_JE", "Clothing", "Jerseys", "No"),
    ("CL_SO", "Clothing", "Socks", "No"),
    ("CO_RF", "Components", "Road Frames", "No"),
]

# Categories referenced by products but absent from the ERP catalogue
UNCATALOGUED_CATEGORIES = ["CO_PE"]

COUNTRIES = ["Australia", "Canada", "France", "Germany", "United Kingdom", "United States"]
PRODUCT_LINES = ["Mountain", "Road", "Touring", "Other Sales"]
MARITAL_STATUSES = ["Married", "Single", "N/A"]
BIRTHDATE_RANGE = (date(1935, 1, 1), date(2007, 12, 31))

UNKNOWN_GENDER = "N/A"
FIRST_CUSTOMER_ID = 11000
FIRST_ORDER_NUMBER = 43697


# =============================================================================
# GENERATORS
# =============================================================================

class SilverDataGenerator:
    """
    Generate Silver tables with realistic coverage gaps.

    Example:
        silver = SilverDataGenerator(seed=7).generate_all(n_customers=200)
    """

    def __init__(self, seed: int = 42, unknown_gender: str = UNKNOWN_GENDER):
        self.rng = np.random.default_rng(seed)
        self.fake = Faker()
        self.fake.seed_instance(seed)
        self.unknown_gender = unknown_gender

    def _pick(self, values: List, size: int, p: Optional[List[float]] = None) -> List:
        return [values[i] for i in self.rng.choice(len(values), size=size, p=p)]

    def _subset(self, values: List, coverage: float) -> List:
        """Random subset of values, in their original order"""
        mask = self.rng.random(len(values)) < coverage
        return [v for v, keep in zip(values, mask) if keep]

    def generate_customers(self, n: int = 1000) -> pl.DataFrame:
        """CRM customer identities"""
        ids = list(range(FIRST_CUSTOMER_ID, FIRST_CUSTOMER_ID + n))

        return pl.DataFrame(
            {
                "cst_id": ids,
                "cst_key": [f"AW{cst_id:08d}" for cst_id in ids],
                "cst_firstname": [self.fake.first_name() for _ in ids],
                "cst_lastname": [self.fake.last_name() for _ in ids],
                "cst_marital_status": self._pick(MARITAL_STATUSES, n, p=[0.5, 0.45, 0.05]),
                "cst_gndr": self._pick(["Male", "Female", self.unknown_gender], n, p=[0.4, 0.4, 0.2]),
                "cst_create_date": [
                    self.fake.date_between(start_date=date(2024, 1, 1), end_date=date(2025, 12, 31))
                    for _ in ids
                ],
            },
            schema=CUSTOMER_RECORD_SCHEMA,
        )

    def generate_demographics(self, customers: pl.DataFrame, coverage: float = 0.9) -> pl.DataFrame:
        """ERP birthdates and genders for part of the customers"""
        keys = self._subset(customers["cst_key"].to_list(), coverage)

        return pl.DataFrame(
            {
                "cid": keys,
                "bdate": [
                    self.fake.date_between(start_date=BIRTHDATE_RANGE[0], end_date=BIRTHDATE_RANGE[1])
                    for _ in keys
                ],
                "gen": self._pick(["Male", "Female", None], len(keys), p=[0.45, 0.45, 0.1]),
            },
            schema=CUSTOMER_DEMOGRAPHICS_SCHEMA,
        )

    def generate_locations(self, customers: pl.DataFrame, coverage: float = 0.85) -> pl.DataFrame:
        """ERP countries for part of the customers"""
        keys = self._subset(customers["cst_key"].to_list(), coverage)

        return pl.DataFrame(
            {"cid": keys, "cntry": self._pick(COUNTRIES, len(keys))},
            schema=CUSTOMER_LOCATION_SCHEMA,
        )

    def generate_categories(self) -> pl.DataFrame:
        """ERP product category catalogue"""
        return pl.DataFrame(
            [dict(zip(PRODUCT_CATEGORY_SCHEMA, row)) for row in CATEGORIES],
            schema=PRODUCT_CATEGORY_SCHEMA,
        )

    def generate_products(self, n: int = 200, max_versions: int = 3) -> pl.DataFrame:
        """
        CRM product history.

        Each product has 1..max_versions versions; every version but the
        last ends the day before the next one starts.
        """
        category_ids = [c[0] for c in CATEGORIES] + UNCATALOGUED_CATEGORIES
        weights = np.array([1.0] * len(CATEGORIES) + [0.5] * len(UNCATALOGUED_CATEGORIES))
        rows: List[Dict] = []

        for i in range(n):
            cat_id = self._pick(category_ids, 1, p=list(weights / weights.sum()))[0]
            prd_key = f"{cat_id.replace('_', '-')}-{i:04d}"
            name = f"{self.fake.word().title()} {self.fake.color_name()} {i}"
            line = self._pick(PRODUCT_LINES, 1)[0]
            versions = int(self.rng.integers(1, max_versions + 1))
            start = self.fake.date_between(start_date=date(2011, 1, 1), end_date=date(2013, 12, 31))

            for version in range(versions):
                end = None
                if version < versions - 1:
                    end = start + timedelta(days=int(self.rng.integers(180, 720)))

                rows.append({
                    "prd_id": len(rows) + 200,
                    "prd_key": prd_key,
                    "prd_nm": name,
                    "cat_id": cat_id,
                    "prd_cost": int(self.rng.integers(1, 2000)),
                    "prd_line": line,
                    "prd_start_dt": start,
                    "prd_end_dt": end,
                })

                if end is not None:
                    start = end + timedelta(days=1)

        return pl.DataFrame(rows, schema=PRODUCT_RECORD_SCHEMA)

    def generate_sales(
        self,
        customers: pl.DataFrame,
        products: pl.DataFrame,
        n: int = 5000,
        orphan_rate: float = 0.02,
    ) -> pl.DataFrame:
        """Sales lines, a fraction of them for unknown products or customers"""
        product_keys = products["prd_key"].unique(maintain_order=True).to_list()
        customer_ids = customers["cst_id"].to_list()

        prd_keys = self._pick(product_keys, n)
        cust_ids = self._pick(customer_ids, n)
        for i in np.flatnonzero(self.rng.random(n) < orphan_rate):
            prd_keys[i] = f"ZZ-UNKNOWN-{i}"
        for i in np.flatnonzero(self.rng.random(n) < orphan_rate):
            cust_ids[i] = 90_000_000 + int(i)

        quantities = self.rng.integers(1, 4, size=n).tolist()
        prices = self.rng.integers(2, 3500, size=n).tolist()
        order_dates = [
            self.fake.date_between(start_date=date(2010, 12, 29), end_date=date(2014, 1, 28))
            for _ in range(n)
        ]

        return pl.DataFrame(
            {
                "sls_ord_num": [f"SO{FIRST_ORDER_NUMBER + i // 3}" for i in range(n)],
                "sls_prd_key": prd_keys,
                "sls_cust_id": cust_ids,
                "sls_order_dt": order_dates,
                "sls_ship_dt": [d + timedelta(days=7) for d in order_dates],
                "sls_due_dt": [d + timedelta(days=12) for d in order_dates],
                "sls_sales": [q * p for q, p in zip(quantities, prices)],
                "sls_quantity": quantities,
                "sls_price": prices,
            },
            schema=SALES_LINE_SCHEMA,
        )

    def generate_all(
        self,
        n_customers: int = 1000,
        n_products: int = 200,
        n_sales: int = 5000,
        save: bool = False,
        output_dir: Optional[str] = None,
    ) -> SilverTables:
        """Generate a complete set of Silver tables"""
        customers = self.generate_customers(n_customers)
        products = self.generate_products(n_products)

        silver = SilverTables(
            customers=customers,
            demographics=self.generate_demographics(customers),
            locations=self.generate_locations(customers),
            products=products,
            categories=self.generate_categories(),
            sales=self.generate_sales(customers, products, n_sales),
        )

        if save:
            self.save(silver, output_dir)

        return silver

    def save(self, silver: SilverTables, output_dir: Optional[str] = None) -> Dict[str, Path]:
        """Save Silver tables as parquet"""
        target = Path(output_dir or get_settings().data_lake.silver_path)
        target.mkdir(parents=True, exist_ok=True)

        frames = {
            SilverTable.CUSTOMERS: silver.customers,
            SilverTable.DEMOGRAPHICS: silver.demographics,
            SilverTable.LOCATIONS: silver.locations,
            SilverTable.PRODUCTS: silver.products,
            SilverTable.CATEGORIES: silver.categories,
            SilverTable.SALES: silver.sales,
        }

        written = {}
        for table, df in frames.items():
            path = target / f"{table.value}.parquet"
            df.write_parquet(path)
            written[table.value] = path

        return written
