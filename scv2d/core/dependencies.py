"""
FastAPI dependency injection module for the SCV decomposition service.

Key Dependencies Provided:
- get_settings_dependency: Returns the cached Settings singleton
- SettingsDep: Type alias for injecting Settings into endpoints

Tests override `get_settings_dependency` through `app.dependency_overrides`
to run endpoints against non-default settings.

Usage Examples:
    @router.post("/decompositions")
    async def create_decomposition(
        request: DecompositionRequest,
        settings: SettingsDep,
    ) -> DecompositionResponse:
        ...
"""

from typing import Annotated

from fastapi import Depends

from scv2d.core.config import Settings, get_settings


def get_settings_dependency() -> Settings:
    """
    Return the Settings singleton instance.

    Returns:
        Settings: The cached application settings.
    """
    return get_settings()


SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]
