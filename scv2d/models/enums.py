"""
Enumeration definitions for the SCV decomposition service.

All enums inherit from both `str` and `Enum` to ensure JSON serialization compatibility
with Pydantic models and pydantic-settings, so the values can be supplied through
environment variables and request bodies as plain strings.
"""

from enum import Enum


class GroupOrder(str, Enum):
    """
    Enumeration order of the distinct feature values.

    - encounter: order of first appearance in the cleaned data (unique() order)
    - sorted: ascending sort of the labels

    The order fixes the column order of the result table.
    """
    ENCOUNTER = "encounter"
    SORTED = "sorted"


class ColumnLayout(str, Enum):
    """
    Arrangement of the component columns in the result table.

    - interleaved: source, a.W, a.B, b.W, b.B, ...
    - blocked: source, a.W, b.W, ..., a.B, b.B, ...
    """
    INTERLEAVED = "interleaved"
    BLOCKED = "blocked"


class Component(str, Enum):
    """
    SCV component kinds; the value is the column-name suffix.

    - W: within-group component
    - B: between-group component
    """
    WITHIN = "W"
    BETWEEN = "B"

    def column(self, group: str) -> str:
        """Result-table column name for this component of `group`."""
        return f"{group}.{self.value}"
