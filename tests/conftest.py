# pylint: disable=redefined-outer-name
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, clear_mappers
from sqlalchemy.pool import StaticPool

from shared.domain.sheets import SheetName
from ward_forms.adapters.sheets_client import AbstractSheetsClient, SheetsClientError

# A fixed "now" so date rules are deterministic
NOW = datetime(2024, 1, 20, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def sqlite_session_factory():
    """Create SQLite in-memory database for fast testing.

    StaticPool keeps a single connection so FastAPI's worker threads see the
    same in-memory database.
    """
    from sheet_gateway.adapters import orm

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    orm.metadata.create_all(engine)
    orm.start_mappers()

    yield sessionmaker(bind=engine)

    clear_mappers()
    engine.dispose()


@pytest.fixture
def gateway_client(sqlite_session_factory):
    """TestClient for the sheet gateway backed by the in-memory row store."""
    from sheet_gateway.entrypoints.gateway_api import app, get_unit_of_work
    from sheet_gateway.service_layer.unit_of_work import SqlAlchemyUnitOfWork

    app.dependency_overrides[get_unit_of_work] = lambda: SqlAlchemyUnitOfWork(sqlite_session_factory)
    yield TestClient(app)
    app.dependency_overrides.clear()


class FakeSheetsClient(AbstractSheetsClient):
    """In-memory sheets client that records every call."""

    def __init__(self):
        self.sheets: Dict[SheetName, List[Dict[str, Any]]] = {sheet: [] for sheet in SheetName}
        self.calls: List[tuple] = []
        self.read_errors: Dict[SheetName, str] = {}
        self.write_error: Optional[str] = None

    def read_sheet(self, sheet: SheetName) -> List[Dict[str, Any]]:
        self.calls.append(("read", sheet))
        if sheet in self.read_errors:
            raise SheetsClientError(self.read_errors[sheet])
        return [dict(row) for row in self.sheets[sheet]]

    def append_record(self, sheet: SheetName, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("append", sheet, payload))
        if self.write_error:
            raise SheetsClientError(self.write_error)
        saved = {"Timestamp": NOW.isoformat(), **payload}
        self.sheets[sheet].append(saved)
        return {"success": True, "message": "Data saved successfully", "savedData": saved}


@pytest.fixture
def fake_sheets_client():
    return FakeSheetsClient()
