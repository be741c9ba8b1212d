"""Configuration for the reviewer assignment service."""
from .settings import ReviewerServiceConfig, get_config, init_config

__all__ = [
    "ReviewerServiceConfig",
    "get_config",
    "init_config",
]
