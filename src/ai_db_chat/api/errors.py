"""Render pipeline failures as JSON error envelopes."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ai_db_chat.service import AskError

logger = logging.getLogger(__name__)


async def ask_error_handler(request: Request, exc: AskError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc) or "ask_failed"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AskError, ask_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
