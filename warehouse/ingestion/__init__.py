"""
Silver Ingestion Module
"""
from .silver_loader import FileFormat, LoadResult, SilverLoader

__all__ = ["FileFormat", "LoadResult", "SilverLoader"]
