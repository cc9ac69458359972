"""
Sales Warehouse Gold Layer
Configuration Module
"""
from .settings import GoldLayerSettings, Settings, get_settings

__all__ = ["GoldLayerSettings", "Settings", "get_settings"]
