"""
Dependency injection for FastAPI endpoints.

Provides the shared Config instance used across all API routes.
"""

from functools import lru_cache

from decision_queue.core.config import Config


@lru_cache()
def get_config() -> Config:
    """
    Get cached Config instance.

    lru_cache ensures we only create one Config instance
    for the lifetime of the application.
    """
    return Config()
