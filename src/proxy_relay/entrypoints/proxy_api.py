"""
Proxy Relay API Entrypoint

Stateless passthrough between the record forms and the sheet gateway. Every
response carries permissive cross-origin headers.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse

import config
from proxy_relay.adapters.gateway_relay import (
    AbstractGatewayRelay,
    GatewayRelayError,
    HTTPGatewayRelay,
    RelayedResponse,
)

logging.basicConfig(
    level=getattr(logging, config.get_log_level()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

app = FastAPI(
    title="Ward Records Proxy",
    description="CORS relay in front of the ward sheet gateway",
    version="1.0.0"
)


@app.middleware("http")
async def log_and_allow_cross_origin(request: Request, call_next):
    logger.info(f"{datetime.now(timezone.utc).isoformat()} - {request.method} {request.url.path}")
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


def get_relay() -> AbstractGatewayRelay:
    return HTTPGatewayRelay()


def relay_response(relayed: RelayedResponse) -> Response:
    return Response(
        content=relayed.content,
        status_code=relayed.status_code,
        media_type=relayed.media_type,
    )


def proxy_error(e: GatewayRelayError) -> JSONResponse:
    return JSONResponse(status_code=502, content={"error": "Proxy error", "details": str(e)})


@app.get("/")
async def health_check():
    """Health check endpoint"""
    return PlainTextResponse("Proxy server is running!")


@app.get("/api")
def forward_read(sheet: Optional[str] = None, relay: AbstractGatewayRelay = Depends(get_relay)):
    try:
        return relay_response(relay.forward("GET", sheet))
    except GatewayRelayError as e:
        return proxy_error(e)


@app.post("/api")
async def forward_write(request: Request, sheet: Optional[str] = None, relay: AbstractGatewayRelay = Depends(get_relay)):
    body = await request.body()
    logger.info(f"Received POST for sheet {sheet} ({len(body)} bytes)")
    try:
        relayed = await run_in_threadpool(relay.forward, "POST", sheet, body)
    except GatewayRelayError as e:
        return proxy_error(e)
    return relay_response(relayed)


@app.options("/api")
async def preflight():
    return Response(status_code=200, content="", media_type="text/plain")


def main():
    port = config.get_proxy_port()
    logger.info(f"Proxy server running on port {port}")
    logger.info(f"API endpoint: http://localhost:{port}/api")
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
