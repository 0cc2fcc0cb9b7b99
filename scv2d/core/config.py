"""
Settings and environment management module for the SCV decomposition service.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion
- Sensible defaults matching the conventions of the scv.2d routine
- Singleton pattern via @lru_cache for efficient access

Environment Variables (all optional, prefix SCV2D_):
- SCV2D_ALL_GROUP_LABEL: Label of the synthetic group used when no feature is given
- SCV2D_FEATURE_COLUMN_SUFFIX: Suffix of the synthesized feature column name
- SCV2D_WEIGHT_COLUMN_SUFFIX: Suffix of the synthesized weight column name
- SCV2D_GROUP_ORDER: 'encounter' (default) or 'sorted'
- SCV2D_COLUMN_LAYOUT: 'interleaved' (default) or 'blocked'
- SCV2D_LOG_LEVEL: Logging level for the API process
- SCV2D_CORS_ORIGINS: JSON list of allowed CORS origins

Usage:
    from scv2d.core.config import get_settings

    settings = get_settings()
    label = settings.all_group_label
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from scv2d.models.enums import ColumnLayout, GroupOrder


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        all_group_label: Value written into the synthesized feature column when
            the caller does not name a feature. Every row then belongs to one group.
        feature_column_suffix: Appended to the total-income column name to build
            the synthesized feature column name (e.g. 'hitotal.all').
        weight_column_suffix: Appended to the total-income column name to build
            the synthesized weight column name (e.g. 'hitotal.weights').
        group_order: Enumeration order of the distinct feature values. Fixes the
            column order of the result table.
        column_layout: Whether '.W'/'.B' columns alternate per group or come in
            two blocks.
        log_level: Root logging level used by the FastAPI application.
        cors_origins: Origins allowed to call the API from a browser.
    """

    model_config = SettingsConfigDict(
        env_prefix='SCV2D_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    # =========================================================================
    # Input resolution defaults
    # =========================================================================

    all_group_label: str = 'all'

    feature_column_suffix: str = '.all'

    weight_column_suffix: str = '.weights'

    # Encounter order reproduces unique() on the feature column
    group_order: GroupOrder = GroupOrder.ENCOUNTER

    # =========================================================================
    # Result assembly
    # =========================================================================

    column_layout: ColumnLayout = ColumnLayout.INTERLEAVED

    # =========================================================================
    # API process
    # =========================================================================

    log_level: str = 'INFO'

    cors_origins: List[str] = ['http://localhost:3000']


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings: The application settings instance with all configuration values.

    Raises:
        pydantic.ValidationError: If an environment variable has an invalid value
            (e.g. SCV2D_GROUP_ORDER=random).

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
