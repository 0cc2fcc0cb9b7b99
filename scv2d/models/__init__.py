"""
Models package for the SCV decomposition service.

Re-exports the enums and Pydantic schemas so callers can write:

    from scv2d.models import DecompositionResult, ColumnLayout
"""

from scv2d.models.enums import (
    ColumnLayout,
    Component,
    GroupOrder,
)

from scv2d.models.schemas import (
    DecompositionRequest,
    DecompositionResponse,
    DecompositionResult,
    GroupComponent,
    SourceStatistics,
    SourceStatisticsResponse,
)

__all__ = [
    # Enums
    'ColumnLayout',
    'Component',
    'GroupOrder',
    # Schemas
    'DecompositionRequest',
    'DecompositionResponse',
    'DecompositionResult',
    'GroupComponent',
    'SourceStatistics',
    'SourceStatisticsResponse',
]
