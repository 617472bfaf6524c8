"""
Sheet Gateway API Entrypoint - Thin API with Command Dispatch

Reads return a whole sheet as JSON; writes dispatch an AppendRow command
through the message bus.
"""
import json
import logging
import math
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel

import config
from shared.domain.sheets import InvalidSheetError, resolve_sheet
from sheet_gateway.adapters import orm
from sheet_gateway.domain.model import InvalidCellError
from sheet_gateway.domain.commands import AppendRow
from sheet_gateway.service_layer import messagebus, views
from sheet_gateway.service_layer.unit_of_work import (
    DEFAULT_ENGINE,
    AbstractUnitOfWork,
    SqlAlchemyUnitOfWork,
)

logging.basicConfig(
    level=getattr(logging, config.get_log_level()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Ward Sheet Gateway",
    description="Append-only sheet storage for patient, equipment and duty records",
    version="1.0.0"
)


@app.on_event("startup")
async def startup_event():
    orm.metadata.create_all(DEFAULT_ENGINE)
    orm.start_mappers()
    logger.info("✓ Sheet store initialized")


def get_unit_of_work() -> AbstractUnitOfWork:
    return SqlAlchemyUnitOfWork()


# ---------- Response models ----------

class WriteResponse(BaseModel):
    success: bool = True
    message: str
    savedData: Dict[str, Any]


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


def error_response(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    """Build a structured error. Traces are only exposed when debug mode is on."""
    if not config.is_gateway_debug():
        details = None
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"{text} is out of range")
    return value


# ---------- Endpoints ----------

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "ward-sheet-gateway",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@app.get("/", summary="Read every row of a sheet")
def read_sheet(sheet: Optional[str] = None, uow: AbstractUnitOfWork = Depends(get_unit_of_work)):
    """
    Return the rows of the selected sheet as objects keyed by header,
    in insertion order.
    """
    try:
        sheet_name = resolve_sheet(sheet)
    except InvalidSheetError as e:
        logger.warning(f"Rejected read for sheet selector {sheet!r}")
        return error_response(400, str(e))

    try:
        return views.read_sheet(sheet_name, uow)
    except Exception as e:
        logger.error(f"Error reading sheet {sheet_name.value}: {e}")
        return error_response(500, f"Error reading sheet: {e}", traceback.format_exc())


@app.post("/", response_model=WriteResponse, summary="Append a record to a sheet")
async def write_row(request: Request, sheet: Optional[str] = None, uow: AbstractUnitOfWork = Depends(get_unit_of_work)):
    """
    Append the JSON object in the request body as a new row.

    The server stamps Timestamp; headers missing from the body are stored empty.
    """
    try:
        sheet_name = resolve_sheet(sheet)
    except InvalidSheetError as e:
        logger.warning(f"Rejected write for sheet selector {sheet!r}")
        return error_response(400, str(e))

    raw_body = await request.body()
    try:
        data = json.loads(raw_body, parse_constant=_reject_constant, parse_float=_finite_float)
    except ValueError as e:
        logger.warning(f"Malformed JSON body for sheet {sheet_name.value}: {e}")
        return error_response(400, f"Error processing data: {e}", traceback.format_exc())

    if not isinstance(data, dict):
        return error_response(400, "Error processing data: body must be a JSON object")

    cmd = AppendRow(
        sheet=sheet_name,
        data=data,
        received_at=datetime.now(timezone.utc),
    )

    try:
        results = await run_in_threadpool(messagebus.handle, cmd, uow)
    except InvalidCellError as e:
        logger.warning(f"Rejected value for sheet {sheet_name.value}: {e}")
        return error_response(400, f"Error processing data: {e}", traceback.format_exc())
    except Exception as e:
        logger.error(f"Failed to append row to {sheet_name.value}: {e}")
        return error_response(500, f"Error processing data: {e}", traceback.format_exc())

    return WriteResponse(message="Data saved successfully", savedData=results[0])


@app.options("/")
async def preflight():
    """CORS preflight; answered with an empty body."""
    return Response(status_code=200, content="", media_type="text/plain")


def main():
    uvicorn.run(app, host="0.0.0.0", port=config.get_gateway_port())


if __name__ == "__main__":
    main()
