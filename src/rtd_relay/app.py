"""FastAPI application instance.

Routers are included here; the CLI entry point lives in server.py.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from rtd_relay import __version__
from rtd_relay.errors import ClientDisconnected, ErrorKind, RelayError
from rtd_relay.models.responses import ErrorResponse
from rtd_relay.routers.arrivals import router as arrivals_router
from rtd_relay.routers.health import router as health_router
from rtd_relay.routers.transitland import router as transitland_router

logger = logging.getLogger(__name__)

# Non-standard "client closed request"; nobody is left to read it.
CLIENT_CLOSED_REQUEST = 499

app = FastAPI(
    title="RTD Relay",
    description="Real-time RTD N Line and bus arrivals relay for browser dashboards",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"],
)


def _error_response(message: str, kind: ErrorKind) -> JSONResponse:
    body = ErrorResponse(error=message, kind=kind)
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    logger.error(f"{request.url.path} failed ({exc.kind.value}): {exc}")
    return _error_response(str(exc), exc.kind)


@app.exception_handler(ClientDisconnected)
async def client_disconnected_handler(request: Request, exc: ClientDisconnected) -> Response:
    return Response(status_code=CLIENT_CLOSED_REQUEST)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}")
    return _error_response(str(exc), ErrorKind.INTERNAL)


app.include_router(health_router)
app.include_router(arrivals_router)
app.include_router(transitland_router)
