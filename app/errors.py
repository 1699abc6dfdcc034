"""
Exception handlers mapping service errors to JSON responses.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from turismo_core.runtime.errors import ServiceError


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r} {exc.message_debug or ''}")
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
