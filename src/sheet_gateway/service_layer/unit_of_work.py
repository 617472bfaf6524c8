# pylint: disable=attribute-defined-outside-init
from __future__ import annotations
import abc
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

import config
from sheet_gateway.adapters import repository
from sheet_gateway.domain.events import Event


class AbstractUnitOfWork(abc.ABC):
    sheets: repository.AbstractSheetRepository

    def __enter__(self) -> AbstractUnitOfWork:
        return self

    def __exit__(self, *args):
        self.rollback()

    def commit(self):
        self._commit()

    def collect_new_events(self) -> Iterator[Event]:
        """Drain events raised by sheets loaded in this unit of work."""
        for sheet in self.sheets.seen:
            while sheet.events:
                yield sheet.events.pop(0)

    @abc.abstractmethod
    def _commit(self):
        raise NotImplementedError

    @abc.abstractmethod
    def rollback(self):
        raise NotImplementedError


DEFAULT_ENGINE = create_engine(config.get_sheets_db_uri())
DEFAULT_SESSION_FACTORY = sessionmaker(bind=DEFAULT_ENGINE)


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, session_factory=DEFAULT_SESSION_FACTORY):
        self.session_factory = session_factory

    def __enter__(self):
        self.session = self.session_factory()  # type: Session
        self.sheets = repository.SqlAlchemySheetRepository(self.session)
        return super().__enter__()

    def __exit__(self, *args):
        super().__exit__(*args)
        self.session.close()

    def _commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()
