"""
Data Generation Module
"""
from .generators import SilverDataGenerator

__all__ = ["SilverDataGenerator"]
