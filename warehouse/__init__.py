"""
Sales Warehouse Gold Layer

Builds the business-ready star schema (customer and product dimensions,
sales fact) from cleansed Silver records.
"""

__version__ = "1.0.0"
