"""
SCV Decomposition Package.

Two-dimensional decomposition of the squared coefficient of variation (SCV) by
income source and population feature, after Garcia-Penalosa & Orgiazzi (2013).

Subpackages:
    - core: Configuration and exceptions
    - models: Pydantic schemas and enums
    - services: Preparation, weighted moments, decomposition, result assembly
    - api: FastAPI route handlers

Usage:
    from scv2d import decompose

    table = decompose(df, "hitotal", "sex", ["hilabour", "hicapital"], "hpopwgt")
"""

__version__ = "1.0.0"

from scv2d.core.exceptions import DecompositionError, InvalidWeightError
from scv2d.services.decomposition import decompose, decompose_detailed

__all__ = [
    'DecompositionError',
    'InvalidWeightError',
    'decompose',
    'decompose_detailed',
]
