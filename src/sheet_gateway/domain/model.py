"""Domain model for the spreadsheet-like row store."""

import json
import math
from datetime import datetime
from typing import Any, Dict, List

from shared.domain.sheets import TIMESTAMP_FIELD, to_iso_timestamp
from sheet_gateway.domain.events import RowAppended


class InvalidCellError(ValueError):
    pass


def to_cell(value: Any) -> Any:
    """Coerce an incoming field value into something a spreadsheet cell can hold."""
    if value is None:
        return ""
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidCellError(f"{value} cannot be stored in a cell")
    if isinstance(value, (str, int, float, bool)):
        return value
    try:
        return json.dumps(value, allow_nan=False)
    except ValueError as e:
        raise InvalidCellError(str(e)) from e


class SheetRow:
    """One appended row. Rows have no identity; their order is the order they were stored in."""

    def __init__(self, cells: List[Any]):
        self.cells = list(cells)

    def as_record(self, headers: List[str]) -> Dict[str, Any]:
        padded = list(self.cells) + [""] * (len(headers) - len(self.cells))
        return dict(zip(headers, padded))


class Sheet:
    """
    Aggregate for a named sheet: a fixed header row followed by appended rows.

    ``rows`` only holds the rows appended through this instance; stored rows
    are read through the repository.
    """

    def __init__(self, name: str, headers: List[str]):
        self.name = name
        self.headers = list(headers)
        self.rows: List[SheetRow] = []
        self.events: List = []

    def append(self, data: Dict[str, Any], stamped_at: datetime) -> Dict[str, Any]:
        """
        Append a record as a new row and return the record as stored.

        The server timestamp overrides any client supplied Timestamp. Headers
        missing from the record are stored as empty cells and reported on the
        RowAppended event.

        Raises:
            InvalidCellError: If a value cannot be stored, e.g. NaN
        """
        record = dict(data)
        record[TIMESTAMP_FIELD] = to_iso_timestamp(stamped_at)

        missing = [header for header in self.headers if header not in record]
        row = SheetRow(cells=[to_cell(record.get(header)) for header in self.headers])
        self.rows.append(row)

        self.events.append(
            RowAppended(
                sheet_name=self.name,
                stamped_at=stamped_at,
                missing_fields=missing,
            )
        )
        return record

    def records(self) -> List[Dict[str, Any]]:
        """Rows appended through this instance, keyed by header, oldest first."""
        return [row.as_record(self.headers) for row in self.rows]
