"""
Response envelope for errors: every failure is rendered as
{"success": false, "message": ...} so clients branch on one shape.
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config.settings import settings

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "internal server error try again later"


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=422, content={"success": False, "message": "invalid request body"})


async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.debug and not settings.is_production:
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": INTERNAL_ERROR, "detail": str(exc)},
        )
    return JSONResponse(status_code=500, content={"success": False, "message": INTERNAL_ERROR})
