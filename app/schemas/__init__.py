from app.schemas.common import (
    ApiErrorResponse,
    ErrorResponse,
    MetaResponse,
    create_error_response,
)
from app.schemas.identity_provider import (
    IdentityProviderDetailResponse,
    IdentityProviderListItemResponse,
    IdentityProviderRequest,
    IdentityProviderResponse,
)

__all__ = [
    "ApiErrorResponse",
    "MetaResponse",
    "ErrorResponse",
    "create_error_response",
    "IdentityProviderRequest",
    "IdentityProviderResponse",
    "IdentityProviderDetailResponse",
    "IdentityProviderListItemResponse",
]
