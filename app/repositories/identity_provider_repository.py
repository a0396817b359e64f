import json
import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import asyncpg

from app.core.exceptions import (
    IdentityProviderNotFoundError,
    InvalidScopesError,
    PersistenceError,
    RowDecodingError,
)
from app.database import DatabaseClientError, PostgreSQLConnection
from app.database.query_builder import DBQuery
from app.dtos.identity_provider_dtos import IdentityProviderSummaryDTO
from app.models.identity_provider import IdentityProvider
from app.repositories.identity_provider_queries import (
    CREATE_IDP,
    DELETE_IDP_BY_ID,
    GET_IDP_BY_ID,
    LIST_IDPS,
    UPDATE_IDP_BY_ID,
)

logger = logging.getLogger(__name__)

_DB_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    DatabaseClientError,
    OSError,
)


@dataclass(frozen=True)
class Column:
    name: str
    text_or_bytes: bool = False


_SUMMARY_COLUMNS = (
    Column("idp_id"),
    Column("name"),
    Column("description"),
    Column("client_id"),
    Column("scopes", text_or_bytes=True),
)

_FULL_COLUMNS = (
    Column("idp_id"),
    Column("name"),
    Column("description"),
    Column("client_id"),
    Column("client_secret"),
    Column("redirect_uri"),
    Column("scopes", text_or_bytes=True),
)


def _normalize_text(column: str, value: Any) -> str:
    # Drivers differ on whether a TEXT column comes back as str or bytes.
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as e:
            raise RowDecodingError(column, "value is not valid UTF-8") from e
    raise RowDecodingError(
        column, f"expected text or bytes, got {type(value).__name__}"
    )


def scan_row(row: Mapping[str, Any], columns: tuple[Column, ...]) -> dict[str, str]:
    """Read ``columns`` from ``row``, checking each value's storage type.

    Raises ``RowDecodingError`` on the first missing or mistyped column; a
    partially decoded row is never returned.
    """
    values: dict[str, str] = {}
    for column in columns:
        try:
            value = row[column.name]
        except KeyError as e:
            raise RowDecodingError(column.name, "column missing from result") from e

        if column.text_or_bytes:
            values[column.name] = _normalize_text(column.name, value)
        elif isinstance(value, str):
            values[column.name] = value
        else:
            raise RowDecodingError(
                column.name, f"expected str, got {type(value).__name__}"
            )
    return values


def deserialize_scopes(raw: str) -> list[str]:
    try:
        scopes = json.loads(raw)
    except ValueError as e:
        raise RowDecodingError("scopes", "value is not valid JSON") from e

    if scopes is None:
        return []
    if not isinstance(scopes, list) or not all(isinstance(s, str) for s in scopes):
        raise RowDecodingError("scopes", "expected a JSON array of strings")
    return scopes


def serialize_scopes(scopes: Any) -> str:
    if not isinstance(scopes, (list, tuple)) or not all(
        isinstance(scope, str) for scope in scopes
    ):
        logger.error("Failed to serialize scopes: %r", scopes)
        raise InvalidScopesError()
    return json.dumps(list(scopes))


def affected_rows(status: str | None) -> int:
    # asyncpg returns the command tag, e.g. "UPDATE 1" or "DELETE 0"
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (AttributeError, ValueError) as e:
        raise PersistenceError(f"unexpected command status: {status!r}") from e


class IdentityProviderRepository:
    """Sole reader and writer of the ``"IDP"`` table."""

    def __init__(self, db: PostgreSQLConnection):
        self._db = db

    async def create(self, idp: IdentityProvider) -> None:
        scopes = serialize_scopes(idp.scopes)
        query, values = CREATE_IDP.bind(self._build_params(idp, scopes))
        async with self._session(CREATE_IDP) as conn:
            await conn.execute(query, *values)
        logger.debug("Identity provider inserted: %s", idp.id)

    async def list(self) -> list[IdentityProviderSummaryDTO]:
        query, values = LIST_IDPS.bind({})
        async with self._session(LIST_IDPS) as conn:
            rows = await conn.fetch(query, *values)
            return [self._map_to_summary(row) for row in rows]

    async def get_by_id(self, idp_id: str) -> IdentityProvider:
        query, values = GET_IDP_BY_ID.bind({"idp_id": idp_id})
        async with self._session(GET_IDP_BY_ID) as conn:
            rows = await conn.fetch(query, *values)

            if not rows:
                logger.warning("Identity provider not found: %s", idp_id)
                raise IdentityProviderNotFoundError(idp_id)

            if len(rows) != 1:
                logger.error(
                    "Unexpected number of results for identity provider %s: %d",
                    idp_id,
                    len(rows),
                )
                raise PersistenceError(f"unexpected number of results: {len(rows)}")

            return self._map_to_model(rows[0])

    async def update(self, idp: IdentityProvider) -> None:
        scopes = serialize_scopes(idp.scopes)
        query, values = UPDATE_IDP_BY_ID.bind(self._build_params(idp, scopes))
        async with self._session(UPDATE_IDP_BY_ID) as conn:
            status = await conn.execute(query, *values)
            if affected_rows(status) == 0:
                logger.warning("Identity provider not found for update: %s", idp.id)
                raise IdentityProviderNotFoundError(idp.id)

    async def delete(self, idp_id: str) -> None:
        query, values = DELETE_IDP_BY_ID.bind({"idp_id": idp_id})
        async with self._session(DELETE_IDP_BY_ID) as conn:
            status = await conn.execute(query, *values)
            if affected_rows(status) == 0:
                # Deleting an absent record is not an error for callers.
                logger.warning("Identity provider not found for delete: %s", idp_id)

    @asynccontextmanager
    async def _session(self, query: DBQuery) -> AsyncIterator[asyncpg.Connection]:
        try:
            async with self._db.session() as conn:
                yield conn
        except _DB_ERRORS as e:
            logger.error("Failed to execute query %s: %s", query.id, e)
            raise PersistenceError(f"failed to execute query {query.id}: {e}") from e

    def _build_params(self, idp: IdentityProvider, scopes: str) -> dict[str, Any]:
        return {
            "idp_id": idp.id,
            "name": idp.name,
            "description": idp.description,
            "client_id": idp.client_id,
            "client_secret": idp.client_secret,
            "redirect_uri": idp.redirect_uri,
            "scopes": scopes,
        }

    def _map_to_model(self, row: Mapping[str, Any]) -> IdentityProvider:
        try:
            values = scan_row(row, _FULL_COLUMNS)
            scopes = deserialize_scopes(values["scopes"])
        except RowDecodingError as e:
            logger.error("Failed to build identity provider from result row: %s", e)
            raise
        return IdentityProvider(
            id=values["idp_id"],
            name=values["name"],
            description=values["description"],
            client_id=values["client_id"],
            client_secret=values["client_secret"],
            redirect_uri=values["redirect_uri"],
            scopes=scopes,
        )

    def _map_to_summary(self, row: Mapping[str, Any]) -> IdentityProviderSummaryDTO:
        try:
            values = scan_row(row, _SUMMARY_COLUMNS)
            scopes = deserialize_scopes(values["scopes"])
        except RowDecodingError as e:
            logger.error("Failed to build identity provider from result row: %s", e)
            raise
        return IdentityProviderSummaryDTO(
            id=values["idp_id"],
            name=values["name"],
            description=values["description"],
            client_id=values["client_id"],
            scopes=scopes,
        )
