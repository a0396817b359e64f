import logging
import uuid

from app.core.exceptions import InvalidIdentityProviderInputError
from app.dtos.identity_provider_dtos import IdentityProviderSummaryDTO
from app.models.identity_provider import IdentityProvider
from app.repositories.identity_provider_repository import IdentityProviderRepository

logger = logging.getLogger(__name__)


class IdentityProviderService:
    def __init__(self, identity_provider_repository: IdentityProviderRepository):
        self._idp_repo = identity_provider_repository

    async def create_idp(self, idp: IdentityProvider) -> IdentityProvider:
        idp.id = str(uuid.uuid4())
        logger.info("Creating identity provider: %s (%s)", idp.id, idp.name)
        try:
            await self._idp_repo.create(idp)
        except Exception:
            logger.error("Failed to create identity provider: %s", idp.id)
            raise
        return idp

    async def list_idps(self) -> list[IdentityProviderSummaryDTO]:
        return await self._idp_repo.list()

    async def get_idp(self, idp_id: str) -> IdentityProvider:
        self._require_id(idp_id)
        logger.debug("Fetching identity provider: %s", idp_id)
        return await self._idp_repo.get_by_id(idp_id)

    async def update_idp(self, idp_id: str, idp: IdentityProvider) -> IdentityProvider:
        self._require_id(idp_id)
        idp.id = idp_id
        logger.info("Updating identity provider: %s", idp_id)
        await self._idp_repo.update(idp)
        return idp

    async def delete_idp(self, idp_id: str) -> None:
        self._require_id(idp_id)
        logger.info("Deleting identity provider: %s", idp_id)
        await self._idp_repo.delete(idp_id)

    @staticmethod
    def _require_id(idp_id: str) -> None:
        if not idp_id:
            logger.warning("Rejected request with empty identity provider id")
            raise InvalidIdentityProviderInputError()
