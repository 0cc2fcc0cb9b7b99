"""
Result Assembly Service.

Lays out (source, group) components as the result table:

    source | a.W | a.B | b.W | b.B | ...      (interleaved, default)
    source | a.W | b.W | ... | a.B | b.B | ... (blocked)

One row per source in the caller's order; 2 * n_groups + 1 columns. Labels are
derived only from the source list and the group labels discovered during
preparation.
"""

from typing import Iterable, List, Sequence

import numpy as np
import pandas as pd

from scv2d.models.enums import ColumnLayout, Component
from scv2d.models.schemas import GroupComponent

SOURCE_COLUMN = "source"


def result_columns(
    groups: Sequence[str],
    layout: ColumnLayout = ColumnLayout.INTERLEAVED,
) -> List[str]:
    """
    Column names of the result table, 'source' first.

    Example:
        >>> result_columns(["F", "M"])
        ['source', 'F.W', 'F.B', 'M.W', 'M.B']
        >>> result_columns(["F", "M"], ColumnLayout.BLOCKED)
        ['source', 'F.W', 'M.W', 'F.B', 'M.B']
    """
    if layout == ColumnLayout.BLOCKED:
        components = [Component.WITHIN.column(g) for g in groups]
        components += [Component.BETWEEN.column(g) for g in groups]
    else:
        components = [
            component.column(g)
            for g in groups
            for component in (Component.WITHIN, Component.BETWEEN)
        ]
    return [SOURCE_COLUMN] + components


def build_result_table(
    sources: Sequence[str],
    groups: Sequence[str],
    components: Iterable[GroupComponent],
    layout: ColumnLayout = ColumnLayout.INTERLEAVED,
) -> pd.DataFrame:
    """
    Build the result table from computed components.

    Args:
        sources: Income sources in row order.
        groups: Group labels in column order.
        components: Within/between values per (source, group).
        layout: Column arrangement.

    Returns:
        DataFrame with a 'source' column and float component columns. Cells
        without a component stay NaN.
    """
    columns = result_columns(groups, layout)
    table = pd.DataFrame(np.nan, index=range(len(sources)), columns=columns[1:])
    row_of = {source: row for row, source in enumerate(sources)}

    for item in components:
        row = row_of[item.source]
        table.at[row, Component.WITHIN.column(item.group)] = item.within
        table.at[row, Component.BETWEEN.column(item.group)] = item.between

    table.insert(0, SOURCE_COLUMN, list(sources))
    return table
