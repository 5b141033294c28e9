"""
Centralized environment detection utilities.

This module provides a single source of truth for environment detection.
All functions read the ENV variable only.
"""
import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_env_name() -> str:
    """
    Get the current environment name from ENV variable.

    Returns:
        Environment name (lowercase): 'local', 'dev', 'staging', 'prod', etc.
        Defaults to 'dev' if not set.
    """
    return os.getenv("ENV", "dev").lower()


@lru_cache(maxsize=1)
def is_local_env() -> bool:
    """
    Check if running in local environment.

    Returns:
        True if ENV is 'local' or 'dev', False otherwise.
    """
    return get_env_name() in {"local", "dev"}


@lru_cache(maxsize=1)
def is_production_env() -> bool:
    """True if ENV is 'prod' or 'production'."""
    return get_env_name() in {"prod", "production"}
