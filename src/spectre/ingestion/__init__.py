"""
Dataset ingestion for SPECTRE.

Loads the horror movie CSV, filters and samples it into typed Records.
"""

from .dataset_loader import DatasetLoader, DatasetConfig

__all__ = [
    "DatasetLoader",
    "DatasetConfig",
]
