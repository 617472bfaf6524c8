import abc
import logging
from typing import Any, Dict, List, Optional, Set

from shared.domain.sheets import SHEET_HEADERS, SheetName
from sheet_gateway.domain import model

logger = logging.getLogger(__name__)


class AbstractSheetRepository(abc.ABC):
    def __init__(self):
        self.seen = set()  # type: Set[model.Sheet]

    def add(self, sheet: model.Sheet) -> str:
        self._add(sheet)
        self.seen.add(sheet)
        return sheet.name

    def get(self, name: SheetName) -> Optional[model.Sheet]:
        sheet = self._get(name.value)
        if sheet:
            self.seen.add(sheet)
        return sheet

    def get_or_provision(self, name: SheetName) -> model.Sheet:
        """Return the sheet, creating it with its header row on first use."""
        sheet = self.get(name)
        if sheet is None:
            sheet = model.Sheet(name.value, SHEET_HEADERS[name])
            self.add(sheet)
            logger.info(f"Provisioned sheet {name.value} with {len(sheet.headers)} headers")
        return sheet

    def records(self, sheet: model.Sheet) -> List[Dict[str, Any]]:
        """Every stored row of the sheet keyed by header, in the order rows were stored."""
        return [row.as_record(sheet.headers) for row in self._rows(sheet)]

    @abc.abstractmethod
    def _add(self, sheet: model.Sheet):
        raise NotImplementedError

    @abc.abstractmethod
    def _get(self, name: str) -> Optional[model.Sheet]:
        raise NotImplementedError

    @abc.abstractmethod
    def _rows(self, sheet: model.Sheet) -> List[model.SheetRow]:
        raise NotImplementedError


class SqlAlchemySheetRepository(AbstractSheetRepository):
    def __init__(self, session):
        super().__init__()
        self.session = session

    def _add(self, sheet):
        self.session.add(sheet)

    def _get(self, name):
        return self.session.query(model.Sheet).filter_by(name=name).first()

    def _rows(self, sheet):
        return (
            self.session.query(model.SheetRow)
            .filter_by(sheet_name=sheet.name)
            .order_by(model.SheetRow.id)
            .all()
        )
