from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.exceptions import IdentityProviderNotFoundError
from app.database import PostgreSQLConnection
from app.dtos.identity_provider_dtos import IdentityProviderSummaryDTO
from app.models.identity_provider import IdentityProvider
from app.repositories.identity_provider_repository import (
    deserialize_scopes,
    serialize_scopes,
)


class InMemoryIdentityProviderRepository:
    """Stands in for the SQL repository in HTTP-level tests.

    Rows are kept with scopes as JSON text so scope (de)serialization behaves
    the same way it does against the real table.
    """

    def __init__(self):
        self.rows: dict[str, dict[str, str]] = {}

    async def create(self, idp: IdentityProvider) -> None:
        scopes = serialize_scopes(idp.scopes)
        self.rows[idp.id] = {**idp.model_dump(exclude={"scopes"}), "scopes": scopes}

    async def list(self) -> list[IdentityProviderSummaryDTO]:
        return [
            IdentityProviderSummaryDTO(
                id=row["id"],
                name=row["name"],
                description=row["description"],
                client_id=row["client_id"],
                scopes=deserialize_scopes(row["scopes"]),
            )
            for row in self.rows.values()
        ]

    async def get_by_id(self, idp_id: str) -> IdentityProvider:
        row = self.rows.get(idp_id)
        if row is None:
            raise IdentityProviderNotFoundError(idp_id)
        return IdentityProvider(**{**row, "scopes": deserialize_scopes(row["scopes"])})

    async def update(self, idp: IdentityProvider) -> None:
        scopes = serialize_scopes(idp.scopes)
        if idp.id not in self.rows:
            raise IdentityProviderNotFoundError(idp.id)
        self.rows[idp.id] = {**idp.model_dump(exclude={"scopes"}), "scopes": scopes}

    async def delete(self, idp_id: str) -> None:
        self.rows.pop(idp_id, None)


@pytest.fixture
def github_idp() -> IdentityProvider:
    return IdentityProvider(
        id="550e8400-e29b-41d4-a716-446655440000",
        name="Github",
        description="Login with Github",
        client_id="client1",
        client_secret="secret1",
        redirect_uri="https://localhost:8090/flow/authn",
        scopes=["user:email", "read:user"],
    )


@pytest.fixture
def db_conn() -> AsyncMock:
    """A pooled asyncpg connection double."""
    return AsyncMock()


@pytest.fixture
def db(db_conn) -> PostgreSQLConnection:
    database = PostgreSQLConnection(
        host="localhost",
        port=5432,
        user="postgres",
        password="",
        database="identity_test",
    )
    database.pool = MagicMock()
    database.pool.acquire = AsyncMock(return_value=db_conn)
    database.pool.release = AsyncMock()
    return database


@pytest.fixture
def memory_repo() -> InMemoryIdentityProviderRepository:
    return InMemoryIdentityProviderRepository()


@pytest.fixture
async def client(memory_repo) -> AsyncGenerator[AsyncClient, None]:
    from app.core.dependencies import get_identity_provider_repository
    from app.main import app

    app.dependency_overrides[get_identity_provider_repository] = lambda: memory_repo
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
