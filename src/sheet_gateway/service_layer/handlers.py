import logging
from typing import Any, Dict

from sheet_gateway.domain.commands import AppendRow
from sheet_gateway.domain.events import RowAppended
from sheet_gateway.service_layer.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


def append_row(
    command: AppendRow,
    uow: AbstractUnitOfWork
) -> Dict[str, Any]:
    """
    Append a record to its sheet.

    Flow:
    1. Load the sheet, provisioning it with its header row on first use
    2. Stamp the server timestamp and append the header-ordered row
    3. Commit transaction

    Returns:
        The record as stored, including the server Timestamp
    """
    logger.info(f"Processing AppendRow command for sheet {command.sheet.value}")

    with uow:
        sheet = uow.sheets.get_or_provision(command.sheet)
        saved = sheet.append(command.data, command.received_at)
        uow.commit()

    logger.info(f"Appended row to sheet {command.sheet.value}")
    return saved


def report_missing_fields(event: RowAppended, uow: AbstractUnitOfWork):
    """Warn when a row was stored with empty cells for fields the client never sent."""
    if event.missing_fields:
        logger.warning(
            f"Row stamped {event.stamped_at.isoformat()} in {event.sheet_name} stored without "
            f"{', '.join(event.missing_fields)}; cells left empty"
        )
