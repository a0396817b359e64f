import logging
from datetime import datetime, timezone
from uuid import uuid4

from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class MetaResponse(BaseModel):
    request_id: str
    timestamp: datetime


class ErrorResponse(BaseModel):
    code: str
    message: str


class ApiErrorResponse(BaseModel):
    meta: MetaResponse
    error: ErrorResponse


def create_error_response(
    code: str, message: str, status_code: int = 400
) -> JSONResponse:
    request_id = str(uuid4())
    response = ApiErrorResponse(
        meta=MetaResponse(
            request_id=request_id,
            timestamp=datetime.now(timezone.utc),
        ),
        error=ErrorResponse(code=code, message=message),
    )
    logger.warning(
        "Error response [%s] status=%d code=%s message=%s",
        request_id,
        status_code,
        code,
        message,
    )
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json"),
    )
