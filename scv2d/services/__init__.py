"""
Services Module

Business logic of the SCV decomposition. Every service is stateless and testable.

Services:
- preparation: input resolution, cleaning, weight validation, group discovery
- moments: weighted mean / variance / correlation and SCV primitives
- decomposition: population statistics (stage 1) and group components (stage 2)
- assembly: result-table layout

All services are consumed by the API layer (scv2d/api/) and by library callers.
"""

# =============================================================================
# Preparation Service Exports
# =============================================================================

from scv2d.services.preparation import (
    ColumnRoles,
    PreparedData,
    discover_groups,
    prepare_data,
    resolve_roles,
    validate_columns,
    validate_weights,
)

# =============================================================================
# Weighted Moment Exports
# =============================================================================

from scv2d.services.moments import (
    normalize_weights,
    scv,
    weighted_correlation,
    weighted_mean,
    weighted_variance,
)

# =============================================================================
# Decomposition Service Exports
# =============================================================================

from scv2d.services.decomposition import (
    TotalStatistics,
    compute_group_components,
    compute_source_statistics,
    compute_total_statistics,
    decompose,
    decompose_detailed,
    decompose_prepared,
    summarize_contributions,
)

# =============================================================================
# Assembly Service Exports
# =============================================================================

from scv2d.services.assembly import (
    SOURCE_COLUMN,
    build_result_table,
    result_columns,
)

__all__ = [
    # ----- Preparation Service -----
    'ColumnRoles',
    'PreparedData',
    'discover_groups',
    'prepare_data',
    'resolve_roles',
    'validate_columns',
    'validate_weights',
    # ----- Weighted Moments -----
    'normalize_weights',
    'scv',
    'weighted_correlation',
    'weighted_mean',
    'weighted_variance',
    # ----- Decomposition Service -----
    'TotalStatistics',
    'compute_group_components',
    'compute_source_statistics',
    'compute_total_statistics',
    'decompose',
    'decompose_detailed',
    'decompose_prepared',
    'summarize_contributions',
    # ----- Assembly Service -----
    'SOURCE_COLUMN',
    'build_result_table',
    'result_columns',
]
