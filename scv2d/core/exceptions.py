"""
Exception taxonomy for the SCV decomposition service.

All errors derive from ValueError so callers that already guard numeric
routines with ``except ValueError`` keep working, and the API layer can map the
whole family to HTTP 422 with a single clause.

Numeric degeneracy (zero means or zero variances) is deliberately absent here:
it propagates as NaN/inf in the result cells instead of raising.
"""

from typing import List


class DecompositionError(ValueError):
    """Base class for input problems detected before any computation."""


class MissingColumnError(DecompositionError):
    """One or more referenced columns are not present in the record set."""

    def __init__(self, columns: List[str]):
        self.columns = list(columns)
        joined = ", ".join(f"'{c}'" for c in self.columns)
        super().__init__(f"Required column(s) missing from data: {joined}")


class DuplicateSourceError(DecompositionError):
    """The same income source was listed more than once."""

    def __init__(self, sources: List[str]):
        self.sources = list(sources)
        joined = ", ".join(f"'{s}'" for s in self.sources)
        super().__init__(f"Income source(s) listed more than once: {joined}")


class NonNumericColumnError(DecompositionError):
    """A total, source or weight column holds values that are not numbers."""

    def __init__(self, column: str):
        self.column = column
        super().__init__(f"Column '{column}' must contain numeric values")


class EmptyDatasetError(DecompositionError):
    """No complete rows remain after dropping missing values."""

    def __init__(self, total_rows: int):
        self.total_rows = total_rows
        super().__init__(
            f"No complete rows left to decompose ({total_rows} row(s) had missing values)"
        )


class InvalidWeightError(DecompositionError):
    """At least one retained population weight is zero or negative."""

    def __init__(self, column: str, count: int):
        self.column = column
        self.count = count
        super().__init__(
            f"At least one weight is nonpositive! "
            f"{count} row(s) in '{column}' have a weight <= 0"
        )
