"""Request and result types for the query endpoint."""

from dataclasses import dataclass
from typing import Any, Dict, List

# One record, keyed by the requested column names. Values are store-native.
Row = Dict[str, Any]

# Rows in store order, at most ``limit`` long.
ResultSet = List[Row]


@dataclass(frozen=True)
class QueryRequest:
    """A validated /api request."""

    table: str
    columns: str  # comma-separated, passed to the store as identifiers
    offset: int
    limit: int

    def column_names(self) -> List[str]:
        """Split ``columns`` into names; an empty string selects every column."""
        return [name.strip() for name in self.columns.split(",") if name.strip()]
