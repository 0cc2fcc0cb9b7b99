"""
Pydantic models for the SCV decomposition service.

This module provides typed containers for the two computation stages and the
API contracts:

- SourceStatistics: population-level statistics of one income source (stage 1)
- GroupComponent: within/between components of one (source, group) pair (stage 2)
- DecompositionResult: full result with intermediate statistics; `to_frame()`
  rebuilds the plain result table
- DecompositionRequest / DecompositionResponse: JSON contract of POST /decompositions

Numeric fields of the computation models accept NaN and inf: degenerate sources
propagate those values instead of raising. The response models carry
Optional[float] so non-finite values leave the API as null.

All models use Pydantic v2 syntax.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from scv2d.models.enums import ColumnLayout


# =============================================================================
# Computation Models
# =============================================================================


class SourceStatistics(BaseModel):
    """
    Population-level statistics of one income source.

    `alpha` is the correlation-based inequality factor of the source and
    `contribution` (= alpha * scv) its absolute share of total SCV. Summed over
    sources that add up to total income, the contributions equal total SCV.
    """
    source: str = Field(..., description="Income source column name")
    mean: float = Field(..., description="Weighted mean of the source")
    variance: float = Field(..., description="Weighted population variance of the source")
    scv: float = Field(..., description="var / (2 * mean^2) of the source")
    correlation: float = Field(..., description="Weighted correlation with total income")
    alpha: float = Field(..., description="Inequality factor of the source")
    contribution: float = Field(..., description="alpha * scv; share of total SCV")


class GroupComponent(BaseModel):
    """
    Within-group and between-group components of one (source, group) pair.
    """
    source: str = Field(..., description="Income source column name")
    group: str = Field(..., description="Feature value label of the group")
    population_share: float = Field(
        ...,
        description="Raw weight mass of the group relative to total weight mass",
    )
    mean: float = Field(..., description="Weighted mean of the source inside the group")
    variance: float = Field(..., description="Weighted variance of the source inside the group")
    within: float = Field(..., description="Within-group component (j.W)")
    between: float = Field(..., description="Between-group component (j.B)")


class DecompositionResult(BaseModel):
    """
    Complete outcome of a two-dimensional SCV decomposition.

    Holds the resolved column roles, the discovered group labels (in result
    column order), total-income statistics, per-source statistics and every
    (source, group) component.
    """
    model_config = ConfigDict(frozen=True)

    total: str
    feature: str
    weights: str
    sources: List[str]
    groups: List[str]
    total_mean: float
    total_variance: float
    total_scv: float
    observations: int = Field(..., description="Rows used in the computation")
    dropped_rows: int = Field(0, description="Rows removed for missing values")
    source_statistics: List[SourceStatistics]
    components: List[GroupComponent]

    def to_frame(self, layout: Optional[ColumnLayout] = None):
        """
        Build the result table (`source`, then `{j}.W` / `{j}.B` columns).

        Args:
            layout: Column arrangement; defaults to interleaved pairs.

        Returns:
            pandas.DataFrame with one row per source.
        """
        from scv2d.services.assembly import build_result_table

        return build_result_table(
            self.sources,
            self.groups,
            self.components,
            layout=layout or ColumnLayout.INTERLEAVED,
        )

    def component(self, source: str, group: str) -> GroupComponent:
        """Look up the component of one (source, group) pair."""
        for item in self.components:
            if item.source == source and item.group == group:
                return item
        raise KeyError((source, group))

    def statistics_for(self, source: str) -> SourceStatistics:
        """Look up the population statistics of one source."""
        for item in self.source_statistics:
            if item.source == source:
                return item
        raise KeyError(source)


# =============================================================================
# API Contract Models
# =============================================================================


class DecompositionRequest(BaseModel):
    """
    Request body of POST /decompositions.

    `records` is the in-memory record set: one JSON object per row, keyed by
    column name. Missing keys and nulls count as missing values.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "records": [
                    {"hitotal": 100, "hilabour": 80, "hicapital": 20, "sex": "F", "hpopwgt": 1.5},
                    {"hitotal": 250, "hilabour": 200, "hicapital": 50, "sex": "M", "hpopwgt": 1.0},
                    {"hitotal": 180, "hilabour": 120, "hicapital": 60, "sex": "F", "hpopwgt": 0.8},
                ],
                "total": "hitotal",
                "feature": "sex",
                "sources": ["hilabour", "hicapital"],
                "weights": "hpopwgt",
            }
        }
    )

    records: List[Dict[str, Any]] = Field(
        ...,
        description="Rows of the record set",
        min_length=1,
    )
    total: str = Field(..., description="Total income column", min_length=1)
    feature: Optional[str] = Field(
        default=None,
        description="Categorical feature column; omitted means a single 'all' group",
    )
    sources: Optional[List[str]] = Field(
        default=None,
        description="Income source columns; omitted means the total column only",
    )
    weights: Optional[str] = Field(
        default=None,
        description="Population weight column; omitted means uniform weights",
    )
    layout: Optional[ColumnLayout] = Field(
        default=None,
        description="Result column arrangement; defaults to the configured layout",
    )


class SourceStatisticsResponse(BaseModel):
    """SourceStatistics with non-finite values rendered as null."""
    source: str
    mean: Optional[float] = None
    variance: Optional[float] = None
    scv: Optional[float] = None
    correlation: Optional[float] = None
    alpha: Optional[float] = None
    contribution: Optional[float] = None


class DecompositionResponse(BaseModel):
    """
    Response body of POST /decompositions.

    `columns` lists the result-table columns in order; `rows` holds one object
    per source keyed by those columns.
    """
    columns: List[str]
    rows: List[Dict[str, Union[str, float, None]]]
    groups: List[str]
    total_scv: Optional[float] = None
    observations: int
    dropped_rows: int
    source_statistics: List[SourceStatisticsResponse]
