"""API routes."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ai_db_chat.models.api import AskRequest, AskResponse
from ai_db_chat.service import AskError, AskService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service(request: Request) -> AskService:
    """Get the pipeline wired by the app factory."""
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise RuntimeError("AskService not initialized")
    return service


async def _read_question(request: Request) -> str:
    try:
        body = await request.json()
        return AskRequest.model_validate(body).question_text()
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError):
        return ""


@router.get("/healthz", tags=["health"])
def healthz() -> dict:
    return {"ok": True}


@router.get("/api/schema", tags=["schema"])
async def get_schema(service: AskService = Depends(get_service)):
    """Current table/column listing of the configured schema."""
    try:
        return await service.schema()
    except Exception as exc:
        logger.exception("Schema fetch failed")
        return JSONResponse(status_code=500, content={"error": str(exc) or "schema_error"})


@router.post("/api/ask", response_model=AskResponse, tags=["ask"])
async def ask(request: Request, service: AskService = Depends(get_service)):
    """Answer a natural-language question with a guarded SELECT and its rows."""
    question = await _read_question(request)
    try:
        response = await service.ask(question)
        # Serialise here so encoding failures still get a JSON envelope.
        return JSONResponse(content=response.model_dump(mode="json", by_alias=True))
    except AskError:
        raise
    except Exception as exc:
        logger.exception("Ask pipeline failed")
        return JSONResponse(status_code=500, content={"error": str(exc) or "ask_failed"})
