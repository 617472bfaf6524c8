"""
Views for read operations - separate from the command/write path.
"""
import logging
from typing import Any, Dict, List

from shared.domain.sheets import SheetName
from sheet_gateway.service_layer.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


def read_sheet(sheet_name: SheetName, uow: AbstractUnitOfWork) -> List[Dict[str, Any]]:
    """
    Read every row of a sheet as objects keyed by header, in insertion order.

    Reading an unprovisioned sheet provisions it and returns an empty list.
    """
    with uow:
        sheet = uow.sheets.get_or_provision(sheet_name)
        records = uow.sheets.records(sheet)
        uow.commit()

    logger.info(f"Read {len(records)} rows from sheet {sheet_name.value}")
    return records
