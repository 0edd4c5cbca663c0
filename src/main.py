from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.adapters.api.controllers.transit import router as transit_router
from src.adapters.api.dependencies import get_graph_holder
from src.domain.exceptions import (
    IndexUnavailable,
    InvalidQuery,
    TransitQueryError,
    UnknownStopOrRoute,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        get_graph_holder().reload()
    except Exception:
        logger.exception("Failed to load transit graph; queries will return 503")
    yield


app = FastAPI(title="Transit Index", lifespan=lifespan)
app.include_router(transit_router)


def _status_for(exc: TransitQueryError) -> int:
    if isinstance(exc, InvalidQuery):
        return 400
    if isinstance(exc, UnknownStopOrRoute):
        return 404
    if isinstance(exc, IndexUnavailable):
        return 503
    return 500


@app.exception_handler(TransitQueryError)
async def transit_query_error_handler(
    request: Request, exc: TransitQueryError
) -> JSONResponse:
    return JSONResponse(
        status_code=_status_for(exc),
        content={"detail": str(exc) or exc.__class__.__name__, "error": type(exc).__name__},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Ensure API errors are JSON so clients can display them.

    Starlette's default 500 handler may return plain text/HTML.
    """

    logging.getLogger("uvicorn.error").exception(
        "Unhandled exception", extra={"path": str(request.url.path)}
    )

    reveal = (os.getenv("TRANSIT_REVEAL_ERRORS") or "").strip().lower() in {
        "1",
        "true",
        "yes",
        "on",
    }

    if reveal or isinstance(exc, (FileNotFoundError, RuntimeError, ValueError)):
        detail = str(exc) or exc.__class__.__name__
    else:
        detail = "Internal Server Error"

    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
