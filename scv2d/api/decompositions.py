"""
FastAPI router module for SCV decomposition endpoints.

The router exposes the decomposition over JSON. The record set travels in the
request body as a list of row objects; no files are read or written.

Endpoints:
- POST /decompositions: decompose total-income SCV by source and feature group

Error mapping:
- DecompositionError (including InvalidWeightError): 422 with the error message
- Anything unexpected: 500

Non-finite cells (degenerate sources) are returned as null because JSON has no
NaN or Infinity.

Dependencies:
- scv2d/core/dependencies.py: SettingsDep for configuration
- scv2d/models/schemas.py: Pydantic models for API contracts
- scv2d/services/decomposition.py: decomposition implementation
"""

import logging
import math
from typing import Any, Optional

import pandas as pd
from fastapi import APIRouter, HTTPException

from scv2d.core.dependencies import SettingsDep
from scv2d.core.exceptions import DecompositionError
from scv2d.models.schemas import (
    DecompositionRequest,
    DecompositionResponse,
    SourceStatisticsResponse,
)
from scv2d.services.decomposition import decompose_detailed

logger = logging.getLogger(__name__)


# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    prefix="/decompositions",
    tags=["decompositions"],
    responses={
        422: {"description": "Invalid record set or column roles"},
        500: {"description": "Internal server error during processing"},
    },
)


def _finite_or_none(value: Any) -> Optional[float]:
    if value is None:
        return None
    value = float(value)
    return value if math.isfinite(value) else None


# =============================================================================
# POST /decompositions - Run a decomposition
# =============================================================================


@router.post("", response_model=DecompositionResponse)
async def create_decomposition(
    request: DecompositionRequest,
    settings: SettingsDep,
) -> DecompositionResponse:
    """
    Decompose the SCV of total income by income source and feature group.

    Args:
        request: DecompositionRequest containing:
            - records: Rows of the record set
            - total: Total income column (required)
            - feature: Categorical feature column (optional)
            - sources: Income source columns (optional)
            - weights: Population weight column (optional)
            - layout: Result column arrangement (optional)
        settings: Application settings dependency

    Returns:
        DecompositionResponse containing:
            - columns: Result-table columns in order
            - rows: One object per source keyed by column
            - groups: Discovered feature values in column order
            - total_scv: SCV of total income
            - observations / dropped_rows: Rows used / removed for missing values
            - source_statistics: Mean, variance, SCV, correlation, alpha per source

    Raises:
        HTTPException 422: If a weight is nonpositive, a column is missing,
            or no complete rows remain
        HTTPException 500: If the computation fails unexpectedly
    """
    try:
        data = pd.DataFrame.from_records(request.records)

        result = decompose_detailed(
            data,
            request.total,
            feature=request.feature,
            sources=request.sources,
            weights=request.weights,
            settings=settings,
        )

        table = result.to_frame(request.layout or settings.column_layout)
        rows = []
        for record in table.to_dict(orient="records"):
            rows.append({
                column: value if column == "source" else _finite_or_none(value)
                for column, value in record.items()
            })

        return DecompositionResponse(
            columns=list(table.columns),
            rows=rows,
            groups=result.groups,
            total_scv=_finite_or_none(result.total_scv),
            observations=result.observations,
            dropped_rows=result.dropped_rows,
            source_statistics=[
                SourceStatisticsResponse(
                    source=stats.source,
                    mean=_finite_or_none(stats.mean),
                    variance=_finite_or_none(stats.variance),
                    scv=_finite_or_none(stats.scv),
                    correlation=_finite_or_none(stats.correlation),
                    alpha=_finite_or_none(stats.alpha),
                    contribution=_finite_or_none(stats.contribution),
                )
                for stats in result.source_statistics
            ],
        )

    except HTTPException:
        # Re-raise HTTP exceptions as-is
        raise
    except DecompositionError as e:
        logger.info(f"Rejected decomposition request: {e}")
        raise HTTPException(
            status_code=422,
            detail=str(e),
        )
    except Exception as e:
        logger.exception("Decomposition failed")
        raise HTTPException(
            status_code=500,
            detail=f"Error computing decomposition: {str(e)}",
        )
