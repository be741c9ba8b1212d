"""Reviewer assignment core - entities, stores, engine and services."""
from . import assignment
from . import config
from . import models
from . import schemas
from . import storage
from .directory import DirectoryService
from .stats import StatisticsService

__all__ = [
    "assignment",
    "config",
    "models",
    "schemas",
    "storage",
    "DirectoryService",
    "StatisticsService",
]
