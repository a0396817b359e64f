import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api import api_router
from app.api.identity_provider_routes import CORS_METHOD_GROUPS
from app.constants.idp_errors import IDP_ERROR_MESSAGES, IdPErrorCode
from app.core.cors import RouteGroupCORSMiddleware
from app.core.exceptions import AppException
from app.core.lifespan import lifespan
from app.core.settings import settings
from app.database import db_connection
from app.schemas.common import create_error_response

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    logger.warning(
        "AppException on %s %s: code=%s message=%s",
        request.method,
        request.url.path,
        exc.code,
        exc.message,
    )
    return create_error_response(
        code=exc.code,
        message=exc.message,
        status_code=exc.status_code,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning(
        "Validation error on %s %s: %s",
        request.method,
        request.url.path,
        exc.errors(),
    )
    return create_error_response(
        code=IdPErrorCode.INVALID_REQUEST_BODY.value,
        message=IDP_ERROR_MESSAGES[IdPErrorCode.INVALID_REQUEST_BODY],
        status_code=400,
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
    )
    return create_error_response(
        code=IdPErrorCode.INTERNAL_ERROR.value,
        message=IDP_ERROR_MESSAGES[IdPErrorCode.INTERNAL_ERROR],
        status_code=500,
    )


app.add_middleware(
    RouteGroupCORSMiddleware,
    method_groups=CORS_METHOD_GROUPS,
    allow_origins=settings.cors_allowed_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check() -> dict[str, str | bool]:
    return {
        "status": "healthy",
        "database_connected": await db_connection.is_connected(),
    }


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="localhost",
        port=8000,
        reload=settings.debug,
    )
