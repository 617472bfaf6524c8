"""Commands for the sheet gateway service."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any

from shared.domain.sheets import SheetName


class Command:
    pass


@dataclass
class AppendRow(Command):
    """Command to append one record as a new row of a sheet."""
    sheet: SheetName
    received_at: datetime
    data: Dict[str, Any] = field(default_factory=dict)
