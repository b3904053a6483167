"""Global exception handlers for the FastAPI application"""

import logging

from fastapi import Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from persondb.core.exceptions import PersonDBException

logger = logging.getLogger(__name__)


async def persondb_exception_handler(request: Request, exc: PersonDBException) -> PlainTextResponse:
    """Handle custom persondb exceptions"""
    logger.error(f"persondb exception: {exc.message} - {exc.detail}")

    return PlainTextResponse(exc.detail or exc.message, status_code=exc.status_code)


async def starlette_http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> PlainTextResponse:
    """Handle Starlette HTTPExceptions (404, 405, ...)"""
    logger.warning(f"HTTP exception: {exc.status_code} - {exc.detail}")

    return PlainTextResponse(
        str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None)
    )


async def general_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Handle general exceptions"""
    logger.error(f"Unexpected error: {str(exc)}", exc_info=True)

    return PlainTextResponse("Internal Server Error", status_code=500)
