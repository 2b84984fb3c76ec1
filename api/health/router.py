"""
Health endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from . import service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/db")
async def health_db(request: Request):
    settings = request.app.state.db.settings
    try:
        details = await service.check_database(settings)
    except Exception as exc:
        message, error_code = service.describe_failure(exc, settings)
        logger.warning("db_check_failed code=%s message=%s", error_code, message)
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": message,
                "errorCode": error_code,
                "config": settings.public_config(),
            },
        )

    return {
        "status": "success",
        "message": "Database connection and queries successful",
        "details": details,
    }
