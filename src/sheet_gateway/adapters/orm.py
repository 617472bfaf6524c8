import logging
from sqlalchemy import (
    Table,
    Column,
    Integer,
    String,
    JSON,
    ForeignKey,
    event,
)
from sqlalchemy.orm import registry, relationship
from sheet_gateway.domain import model

logger = logging.getLogger(__name__)

# SQLAlchemy 2.0 pattern: use registry
mapper_registry = registry()
metadata = mapper_registry.metadata

sheets = Table(
    "sheets",
    metadata,
    Column("name", String(64), primary_key=True),
    Column("headers", JSON, nullable=False),
)

sheet_rows = Table(
    "sheet_rows",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("sheet_name", String(64), ForeignKey("sheets.name"), nullable=False),
    Column("cells", JSON, nullable=False),
)


def start_mappers():
    if mapper_registry.mappers:
        return
    logger.info("Starting mappers")
    rows_mapper = mapper_registry.map_imperatively(model.SheetRow, sheet_rows)
    mapper_registry.map_imperatively(
        model.Sheet,
        sheets,
        properties={
            # Appends only; stored rows are read in id order by the repository
            "rows": relationship(rows_mapper, lazy="noload"),
        },
    )


@event.listens_for(model.Sheet, "load")
def receive_load(sheet, _):
    sheet.events = []
