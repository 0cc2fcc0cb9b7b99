"""
Core infrastructure package for the SCV decomposition service.

Provides:
- Configuration management via pydantic-settings
- The exception taxonomy shared by services and the API layer

This module re-exports key components from submodules for convenient importing:

    from scv2d.core import get_settings, InvalidWeightError

Instead of:

    from scv2d.core.config import get_settings
    from scv2d.core.exceptions import InvalidWeightError
"""

# =============================================================================
# Re-exports from scv2d.core.config
# =============================================================================
from scv2d.core.config import Settings, get_settings

# =============================================================================
# Re-exports from scv2d.core.exceptions
# =============================================================================
from scv2d.core.exceptions import (
    DecompositionError,
    DuplicateSourceError,
    EmptyDatasetError,
    InvalidWeightError,
    MissingColumnError,
    NonNumericColumnError,
)

# =============================================================================
# Re-exports from scv2d.core.dependencies
# =============================================================================
from scv2d.core.dependencies import get_settings_dependency, SettingsDep

__all__ = [
    # FastAPI dependency injection (from dependencies.py)
    'get_settings_dependency',
    'SettingsDep',
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # Errors (from exceptions.py)
    'DecompositionError',
    'DuplicateSourceError',
    'EmptyDatasetError',
    'InvalidWeightError',
    'MissingColumnError',
    'NonNumericColumnError',
]
