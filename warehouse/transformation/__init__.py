"""
Gold Transformation Module
"""
from .dimensions import CustomerDimensionBuilder, ProductDimensionBuilder
from .facts import SalesFactBuilder
from .joins import left_lookup
from .keys import assign_surrogate_key
from .transformers import BuildResult, GoldBuildReport, GoldLayerTransformer, GoldTable

__all__ = [
    "CustomerDimensionBuilder",
    "ProductDimensionBuilder",
    "SalesFactBuilder",
    "left_lookup",
    "assign_surrogate_key",
    "BuildResult",
    "GoldBuildReport",
    "GoldLayerTransformer",
    "GoldTable",
]
