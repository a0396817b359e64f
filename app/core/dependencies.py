from typing import Annotated

from fastapi import Depends

from app.database import db_connection
from app.repositories.identity_provider_repository import IdentityProviderRepository
from app.services.identity_provider_service import IdentityProviderService


def get_identity_provider_repository() -> IdentityProviderRepository:
    return IdentityProviderRepository(db_connection)


def get_identity_provider_service(
    identity_provider_repository: IdentityProviderRepository = Depends(
        get_identity_provider_repository
    ),
) -> IdentityProviderService:
    return IdentityProviderService(identity_provider_repository)


IdentityProviderServiceDep = Annotated[
    IdentityProviderService, Depends(get_identity_provider_service)
]
