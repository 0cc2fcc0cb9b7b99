"""
Input Resolution & Validation Service.

Turns a caller's record set plus column-role selectors into a cleaned frame that
the decomposition can consume directly.

Resolution rules:
- No weight column: synthesize '<total>.weights' holding 1 for every row
- No source list: the total-income column is the only source
- No feature column: synthesize '<total>.all' holding the label 'all', so every
  row belongs to one group
- The working frame keeps exactly feature, total, sources and weight (each once)
- Rows with a missing value in any of those columns are dropped
- Any retained weight <= 0 aborts with InvalidWeightError

Group discovery:
    Distinct feature values are enumerated once, in encounter order by default
    (settings.group_order = 'sorted' switches to ascending order). Each label maps
    to the row positions of its group, so per-group subsets are O(1) lookups and
    the result column order is fixed here.

Dependencies:
    - pandas: column selection, numeric coercion, dropna, factorize
    - numpy: row-position arrays
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from scv2d.core.config import Settings, get_settings
from scv2d.core.exceptions import (
    DecompositionError,
    DuplicateSourceError,
    EmptyDatasetError,
    InvalidWeightError,
    MissingColumnError,
    NonNumericColumnError,
)
from scv2d.models.enums import GroupOrder

logger = logging.getLogger(__name__)


# =============================================================================
# DATA CLASSES - Resolved roles and prepared data
# =============================================================================

@dataclass(frozen=True)
class ColumnRoles:
    """
    Column names playing each role in the decomposition.

    `synthetic_feature` / `synthetic_weights` mark columns that do not exist in
    the caller's data and are filled in during preparation.
    """
    total: str
    feature: str
    sources: Tuple[str, ...]
    weights: str
    synthetic_feature: bool = False
    synthetic_weights: bool = False

    @property
    def required_columns(self) -> List[str]:
        """Feature, total, sources, weight; each name once, in that order."""
        ordered = [self.feature, self.total, *self.sources, self.weights]
        return list(dict.fromkeys(ordered))

    @property
    def numeric_columns(self) -> List[str]:
        return [c for c in self.required_columns if c != self.feature]


@dataclass
class PreparedData:
    """
    Cleaned record set ready for decomposition.

    Attributes:
        frame: Complete rows only, columns restricted to the required roles,
            index reset to 0..n-1.
        roles: Resolved column roles.
        groups: Group labels in result column order.
        group_positions: Label -> row positions of that group in `frame`.
        total_rows: Rows in the caller's data.
        dropped_rows: Rows removed for missing values.
    """
    frame: pd.DataFrame
    roles: ColumnRoles
    groups: List[str]
    group_positions: Dict[str, np.ndarray] = field(default_factory=dict)
    total_rows: int = 0
    dropped_rows: int = 0

    @property
    def observations(self) -> int:
        return len(self.frame)

    def weights(self) -> np.ndarray:
        return self.frame[self.roles.weights].to_numpy(dtype=np.float64)

    def values(self, column: str) -> np.ndarray:
        return self.frame[column].to_numpy(dtype=np.float64)

    def group_frame(self, group: str) -> pd.DataFrame:
        """Rows belonging to one group."""
        return self.frame.iloc[self.group_positions[group]]


# =============================================================================
# ROLE RESOLUTION
# =============================================================================

def resolve_roles(
    total: str,
    feature: Optional[str] = None,
    sources: Optional[Union[str, Sequence[str]]] = None,
    weights: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> ColumnRoles:
    """
    Resolve optional role selectors into concrete column names.

    Args:
        total: Total income column.
        feature: Categorical feature column, or None for a single group.
        sources: Source column name(s), or None for [total].
        weights: Weight column, or None for uniform weights.
        settings: Naming conventions for synthesized columns.

    Returns:
        ColumnRoles with synthesized names where a role was omitted.

    Example:
        >>> roles = resolve_roles("hitotal")
        >>> roles.feature, roles.sources, roles.weights
        ('hitotal.all', ('hitotal',), 'hitotal.weights')
    """
    settings = settings or get_settings()

    if sources is None:
        source_list: List[str] = [total]
    elif isinstance(sources, str):
        source_list = [sources]
    else:
        source_list = list(sources)

    synthetic_weights = weights is None
    if synthetic_weights:
        weights = f"{total}{settings.weight_column_suffix}"

    synthetic_feature = feature is None
    if synthetic_feature:
        feature = f"{total}{settings.feature_column_suffix}"

    return ColumnRoles(
        total=total,
        feature=feature,
        sources=tuple(source_list),
        weights=weights,
        synthetic_feature=synthetic_feature,
        synthetic_weights=synthetic_weights,
    )


# =============================================================================
# VALIDATION
# =============================================================================

def validate_columns(data: pd.DataFrame, roles: ColumnRoles) -> None:
    """
    Check that every caller-supplied column exists and sources are unique.

    Raises:
        DecompositionError: If the source list is empty or the feature column
            also plays a numeric role.
        DuplicateSourceError: If a source is listed more than once.
        MissingColumnError: If referenced columns are absent from `data`.
    """
    duplicates = [s for s in dict.fromkeys(roles.sources) if roles.sources.count(s) > 1]
    if duplicates:
        raise DuplicateSourceError(duplicates)

    if not roles.sources:
        raise DecompositionError("At least one income source is required")

    if roles.feature in (roles.total, *roles.sources, roles.weights):
        raise DecompositionError(
            f"Feature column '{roles.feature}' cannot also be the total, "
            f"a source or the weight column"
        )

    expected = [roles.total, *roles.sources]
    if not roles.synthetic_feature:
        expected.append(roles.feature)
    if not roles.synthetic_weights:
        expected.append(roles.weights)

    missing = [c for c in dict.fromkeys(expected) if c not in data.columns]
    if missing:
        raise MissingColumnError(missing)


def validate_weights(weights: pd.Series, column: str) -> None:
    """
    Reject zero or negative weights among the retained rows.

    Raises:
        InvalidWeightError: If at least one weight is <= 0.
    """
    nonpositive = int((weights <= 0).sum())
    if nonpositive:
        raise InvalidWeightError(column, nonpositive)


# =============================================================================
# GROUP DISCOVERY
# =============================================================================

def _ordered_codes(keys: list, order: GroupOrder) -> List[int]:
    codes = list(range(len(keys)))
    if order == GroupOrder.SORTED:
        try:
            codes = sorted(codes, key=lambda code: keys[code])
        except TypeError:
            # Mixed label types (e.g. 1 and "a") only order by their text
            codes = sorted(codes, key=lambda code: str(keys[code]))
    return codes


def discover_groups(
    feature_values: pd.Series,
    order: GroupOrder = GroupOrder.ENCOUNTER,
) -> Tuple[List[str], Dict[str, np.ndarray]]:
    """
    Enumerate the distinct feature values and index their rows.

    Rows are grouped by their raw feature value (1 and 1.0 are one group).
    Labels are the string form of those values; they become the prefixes of
    the result columns ('F.W', 'F.B', ...).

    Args:
        feature_values: Feature column of the cleaned frame (positional index).
        order: Encounter order or ascending order.

    Returns:
        Tuple of (labels in result order, label -> row positions).

    Raises:
        DecompositionError: If two distinct values share a label (e.g. 1 and "1").

    Example:
        >>> labels, positions = discover_groups(pd.Series(["M", "F", "M"]))
        >>> labels
        ['M', 'F']
        >>> positions["M"].tolist()
        [0, 2]
    """
    row_codes, uniques = pd.factorize(feature_values, sort=False)
    keys = list(uniques)
    ordered = _ordered_codes(keys, order)
    labels = [str(keys[code]) for code in ordered]

    clashing = [label for label in dict.fromkeys(labels) if labels.count(label) > 1]
    if clashing:
        raise DecompositionError(
            f"Distinct feature values share the label(s) {clashing}; "
            f"recode the feature column so its values are unambiguous"
        )

    positions = {
        label: np.flatnonzero(row_codes == code)
        for label, code in zip(labels, ordered)
    }
    return labels, positions


# =============================================================================
# PREPARATION ENTRY POINT
# =============================================================================

def prepare_data(
    data: pd.DataFrame,
    total: str,
    feature: Optional[str] = None,
    sources: Optional[Union[str, Sequence[str]]] = None,
    weights: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> PreparedData:
    """
    Resolve roles, restrict and clean the record set, and discover groups.

    The caller's frame is never modified.

    Args:
        data: Record set with named columns.
        total: Total income column.
        feature: Optional categorical feature column.
        sources: Optional source column name(s).
        weights: Optional weight column.
        settings: Optional settings override (defaults to get_settings()).

    Returns:
        PreparedData with complete rows only.

    Raises:
        MissingColumnError: Referenced columns are absent.
        DuplicateSourceError: A source is listed twice.
        NonNumericColumnError: Total, a source or the weights are not numeric.
        EmptyDatasetError: No complete rows remain.
        InvalidWeightError: A retained weight is <= 0.
    """
    settings = settings or get_settings()
    roles = resolve_roles(total, feature, sources, weights, settings)
    validate_columns(data, roles)

    synthetic = {
        roles.feature: roles.synthetic_feature,
        roles.weights: roles.synthetic_weights,
    }
    selected = [c for c in roles.required_columns if not synthetic.get(c, False)]
    frame = data.loc[:, selected].copy()

    if roles.synthetic_weights:
        frame[roles.weights] = 1.0
    if roles.synthetic_feature:
        frame[roles.feature] = settings.all_group_label
    frame = frame[roles.required_columns]

    for column in roles.numeric_columns:
        try:
            frame[column] = pd.to_numeric(frame[column])
        except (ValueError, TypeError) as e:
            raise NonNumericColumnError(column) from e

    total_rows = len(frame)
    frame = frame.dropna(subset=roles.required_columns).reset_index(drop=True)
    dropped_rows = total_rows - len(frame)

    if dropped_rows:
        logger.info(
            f"Dropped {dropped_rows} of {total_rows} rows with missing values "
            f"in {roles.required_columns}"
        )

    if frame.empty:
        raise EmptyDatasetError(total_rows)

    validate_weights(frame[roles.weights], roles.weights)

    groups, positions = discover_groups(frame[roles.feature], settings.group_order)
    logger.debug(f"Discovered {len(groups)} group(s) in '{roles.feature}': {groups}")

    return PreparedData(
        frame=frame,
        roles=roles,
        groups=groups,
        group_positions=positions,
        total_rows=total_rows,
        dropped_rows=dropped_rows,
    )
