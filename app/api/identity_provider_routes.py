import logging

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from app.constants.idp_errors import IDP_ERROR_MESSAGES, IdPErrorCode
from app.core.dependencies import IdentityProviderServiceDep
from app.core.exceptions import (
    AppException,
    EncodingError,
    IdentityProviderNotFoundError,
    InvalidScopesError,
)
from app.schemas.common import create_error_response
from app.schemas.identity_provider import (
    IdentityProviderDetailResponse,
    IdentityProviderListItemResponse,
    IdentityProviderRequest,
    IdentityProviderResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/identity-providers", tags=["identity-providers"])

_ALLOWED_HEADERS = "Content-Type, Authorization"
COLLECTION_ALLOWED_METHODS = "GET, POST"
ITEM_ALLOWED_METHODS = "GET, PUT, DELETE"

# Browser preflights are answered by RouteGroupCORSMiddleware from this table;
# a trailing slash marks a prefix group.
CORS_METHOD_GROUPS = {
    router.prefix: COLLECTION_ALLOWED_METHODS,
    f"{router.prefix}/": ITEM_ALLOWED_METHODS,
}


def _json_response(
    payload: BaseModel | list[BaseModel], status_code: int = status.HTTP_200_OK
) -> JSONResponse:
    try:
        if isinstance(payload, list):
            content = [item.model_dump(mode="json") for item in payload]
        else:
            content = payload.model_dump(mode="json")
        return JSONResponse(status_code=status_code, content=content)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        logger.error("Failed to encode identity provider response: %s", e)
        raise EncodingError(str(e)) from e


def _missing_id_response() -> JSONResponse:
    return create_error_response(
        code=IdPErrorCode.MISSING_IDP_ID.value,
        message=IDP_ERROR_MESSAGES[IdPErrorCode.MISSING_IDP_ID],
        status_code=status.HTTP_400_BAD_REQUEST,
    )


def _internal_error_response(e: AppException) -> JSONResponse:
    logger.error("Identity provider request failed: code=%s error=%s", e.code, e)
    return create_error_response(
        code=IdPErrorCode.INTERNAL_ERROR.value,
        message=IDP_ERROR_MESSAGES[IdPErrorCode.INTERNAL_ERROR],
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _preflight_response(allowed_methods: str) -> Response:
    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers={
            "Allow": f"{allowed_methods}, OPTIONS",
            "Access-Control-Allow-Methods": allowed_methods,
            "Access-Control-Allow-Headers": _ALLOWED_HEADERS,
            "Access-Control-Allow-Credentials": "true",
        },
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=IdentityProviderResponse,
)
async def create_identity_provider(
    request: IdentityProviderRequest,
    service: IdentityProviderServiceDep,
):
    try:
        idp = await service.create_idp(request.to_model())
    except InvalidScopesError as e:
        return create_error_response(
            code=e.code, message=e.message, status_code=status.HTTP_400_BAD_REQUEST
        )
    except AppException as e:
        return _internal_error_response(e)

    response = _json_response(
        IdentityProviderResponse.model_validate(idp.model_dump()),
        status_code=status.HTTP_201_CREATED,
    )
    logger.debug("IdP POST response sent: %s", idp.id)
    return response


@router.get("", response_model=list[IdentityProviderListItemResponse])
async def list_identity_providers(service: IdentityProviderServiceDep):
    try:
        idps = await service.list_idps()
    except AppException as e:
        return _internal_error_response(e)

    response = _json_response(
        [IdentityProviderListItemResponse.model_validate(idp.model_dump()) for idp in idps]
    )
    logger.debug("IdP GET (list) response sent: %d items", len(idps))
    return response


@router.options("", include_in_schema=False)
async def identity_providers_preflight():
    return _preflight_response(COLLECTION_ALLOWED_METHODS)


@router.get("/{idp_id:path}", response_model=IdentityProviderDetailResponse)
async def get_identity_provider(idp_id: str, service: IdentityProviderServiceDep):
    if not idp_id:
        return _missing_id_response()

    try:
        idp = await service.get_idp(idp_id)
    except IdentityProviderNotFoundError as e:
        return create_error_response(
            code=e.code, message=e.message, status_code=status.HTTP_404_NOT_FOUND
        )
    except AppException as e:
        return _internal_error_response(e)

    # client_secret is deliberately left out of the single-record view
    response = _json_response(
        IdentityProviderDetailResponse(
            id=idp.id,
            name=idp.name,
            description=idp.description,
            client_id=idp.client_id,
            redirect_uri=idp.redirect_uri,
            scopes=idp.scopes,
        )
    )
    logger.debug("IdP GET response sent: %s", idp_id)
    return response


# Matched ahead of the path route so a missing id wins over a missing body.
@router.put("/", include_in_schema=False)
async def update_identity_provider_without_id():
    return _missing_id_response()


@router.put("/{idp_id:path}", response_model=IdentityProviderResponse)
async def update_identity_provider(
    idp_id: str,
    request: IdentityProviderRequest,
    service: IdentityProviderServiceDep,
):
    idp = request.to_model()
    idp.id = idp_id

    try:
        idp = await service.update_idp(idp_id, idp)
    except IdentityProviderNotFoundError as e:
        return create_error_response(
            code=e.code, message=e.message, status_code=status.HTTP_404_NOT_FOUND
        )
    except InvalidScopesError as e:
        return create_error_response(
            code=e.code, message=e.message, status_code=status.HTTP_400_BAD_REQUEST
        )
    except AppException as e:
        return _internal_error_response(e)

    response = _json_response(IdentityProviderResponse.model_validate(idp.model_dump()))
    logger.debug("IdP PUT response sent: %s", idp_id)
    return response


@router.delete(
    "/{idp_id:path}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_identity_provider(idp_id: str, service: IdentityProviderServiceDep):
    if not idp_id:
        return _missing_id_response()

    try:
        await service.delete_idp(idp_id)
    except AppException as e:
        return _internal_error_response(e)

    logger.debug("IdP DELETE response sent: %s", idp_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.options("/{idp_id:path}", include_in_schema=False)
async def identity_provider_preflight(idp_id: str):
    return _preflight_response(ITEM_ALLOWED_METHODS)
