"""Domain events for the sheet gateway service."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List


class Event:
    pass


@dataclass
class RowAppended(Event):
    """Event raised when a row has been appended to a sheet."""
    sheet_name: str
    stamped_at: datetime
    missing_fields: List[str] = field(default_factory=list)
