"""Liveness endpoint reporting whether the database answers."""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from db.session import Database

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """API and database status."""

    status: str
    database: str


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse | JSONResponse:
    """
    Run SELECT 1 on its own pooled connection, outside any request unit of work.

    Answers 503 when the database cannot be reached.
    """
    database: Database = request.app.state.database
    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database unreachable: %s", e)
        return JSONResponse(
            HealthResponse(status="degraded", database="unreachable").model_dump(),
            status_code=503,
        )
    return HealthResponse(status="ok", database="ok")
