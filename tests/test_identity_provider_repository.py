import asyncpg
import pytest

from app.core.exceptions import (
    IdentityProviderNotFoundError,
    InvalidScopesError,
    PersistenceError,
    RowDecodingError,
)
from app.dtos.identity_provider_dtos import IdentityProviderSummaryDTO
from app.models.identity_provider import IdentityProvider
from app.repositories.identity_provider_repository import (
    IdentityProviderRepository,
    affected_rows,
)


def _full_row(**overrides):
    row = {
        "idp_id": "550e8400-e29b-41d4-a716-446655440000",
        "name": "Github",
        "description": "Login with Github",
        "client_id": "client1",
        "client_secret": "secret1",
        "redirect_uri": "https://localhost:8090/flow/authn",
        "scopes": '["user:email", "read:user"]',
    }
    row.update(overrides)
    return row


def _summary_row(**overrides):
    row = _full_row(**overrides)
    del row["client_secret"]
    del row["redirect_uri"]
    return row


@pytest.fixture
def repository(db):
    return IdentityProviderRepository(db)


async def test_create_inserts_all_columns(repository, db, db_conn, github_idp):
    db_conn.execute.return_value = "INSERT 0 1"

    await repository.create(github_idp)

    sql, *values = db_conn.execute.call_args.args
    assert sql.lstrip().startswith('INSERT INTO "IDP"')
    assert "$7" in sql
    assert values == [
        github_idp.id,
        "Github",
        "Login with Github",
        "client1",
        "secret1",
        "https://localhost:8090/flow/authn",
        '["user:email", "read:user"]',
    ]
    db.pool.release.assert_awaited_once_with(db_conn)


async def test_create_rejects_unserializable_scopes(repository, db, db_conn):
    idp = IdentityProvider.model_construct(
        id="x", name="n", description="", client_id="", client_secret="",
        redirect_uri="", scopes=["ok", 42],
    )

    with pytest.raises(InvalidScopesError):
        await repository.create(idp)

    db.pool.acquire.assert_not_awaited()
    db_conn.execute.assert_not_awaited()


async def test_create_duplicate_id_is_persistence_error(repository, db, db_conn, github_idp):
    db_conn.execute.side_effect = asyncpg.UniqueViolationError("duplicate key")

    with pytest.raises(PersistenceError) as excinfo:
        await repository.create(github_idp)

    assert excinfo.value.status_code == 500
    assert "duplicate key" not in excinfo.value.message
    db.pool.release.assert_awaited_once_with(db_conn)


async def test_create_when_pool_not_initialized(repository, db, github_idp):
    db.pool = None

    with pytest.raises(PersistenceError):
        await repository.create(github_idp)


async def test_list_returns_summaries(repository, db_conn):
    db_conn.fetch.return_value = [
        _summary_row(),
        _summary_row(idp_id="second", name="Google", scopes=b'["openid"]'),
    ]

    idps = await repository.list()

    assert idps == [
        IdentityProviderSummaryDTO(
            id="550e8400-e29b-41d4-a716-446655440000",
            name="Github",
            description="Login with Github",
            client_id="client1",
            scopes=["user:email", "read:user"],
        ),
        IdentityProviderSummaryDTO(
            id="second",
            name="Google",
            description="Login with Github",
            client_id="client1",
            scopes=["openid"],
        ),
    ]
    assert not hasattr(idps[0], "client_secret")


async def test_list_empty_table(repository, db_conn):
    db_conn.fetch.return_value = []

    assert await repository.list() == []


async def test_get_by_id_returns_full_record(repository, db_conn, github_idp):
    db_conn.fetch.return_value = [_full_row()]

    idp = await repository.get_by_id(github_idp.id)

    assert idp == github_idp
    sql, *values = db_conn.fetch.call_args.args
    assert "WHERE IDP_ID = $1" in sql
    assert values == [github_idp.id]


async def test_get_by_id_accepts_bytes_scopes(repository, db_conn):
    db_conn.fetch.return_value = [_full_row(scopes=b'["user:email","read:user"]')]

    idp = await repository.get_by_id("550e8400-e29b-41d4-a716-446655440000")

    assert idp.scopes == ["user:email", "read:user"]


async def test_get_by_id_not_found(repository, db, db_conn):
    db_conn.fetch.return_value = []

    with pytest.raises(IdentityProviderNotFoundError):
        await repository.get_by_id("missing")

    db.pool.release.assert_awaited_once_with(db_conn)


async def test_get_by_id_multiple_rows_is_integrity_failure(repository, db_conn):
    db_conn.fetch.return_value = [_full_row(), _full_row()]

    with pytest.raises(PersistenceError, match="unexpected number of results: 2"):
        await repository.get_by_id("550e8400-e29b-41d4-a716-446655440000")


@pytest.mark.parametrize(
    "overrides, column",
    [
        ({"name": None}, "name"),
        ({"client_secret": 7}, "client_secret"),
        ({"redirect_uri": b"https://host/cb"}, "redirect_uri"),
        ({"scopes": 12}, "scopes"),
        ({"scopes": "not json"}, "scopes"),
        ({"scopes": '{"a": 1}'}, "scopes"),
        ({"scopes": b"\xff\xfe"}, "scopes"),
    ],
)
async def test_get_by_id_rejects_mistyped_columns(repository, db_conn, overrides, column):
    db_conn.fetch.return_value = [_full_row(**overrides)]

    with pytest.raises(RowDecodingError) as excinfo:
        await repository.get_by_id("550e8400-e29b-41d4-a716-446655440000")

    assert excinfo.value.column == column
    assert isinstance(excinfo.value, PersistenceError)


async def test_get_by_id_missing_column(repository, db_conn):
    row = _full_row()
    del row["redirect_uri"]
    db_conn.fetch.return_value = [row]

    with pytest.raises(RowDecodingError, match="redirect_uri"):
        await repository.get_by_id("550e8400-e29b-41d4-a716-446655440000")


async def test_list_aborts_on_bad_row(repository, db_conn):
    db_conn.fetch.return_value = [_summary_row(), _summary_row(client_id=None)]

    with pytest.raises(RowDecodingError):
        await repository.list()


async def test_update_replaces_by_id(repository, db_conn, github_idp):
    db_conn.execute.return_value = "UPDATE 1"
    github_idp.client_id = "client3"

    await repository.update(github_idp)

    sql, *values = db_conn.execute.call_args.args
    assert sql.lstrip().startswith('UPDATE "IDP"')
    assert "client3" in values
    assert values[-1] == github_idp.id


async def test_update_missing_id_is_not_found(repository, db_conn, github_idp):
    db_conn.execute.return_value = "UPDATE 0"

    with pytest.raises(IdentityProviderNotFoundError):
        await repository.update(github_idp)


async def test_update_rejects_unserializable_scopes(repository, db_conn):
    idp = IdentityProvider.model_construct(
        id="x", name="n", description="", client_id="", client_secret="",
        redirect_uri="", scopes="user:email",
    )

    with pytest.raises(InvalidScopesError):
        await repository.update(idp)

    db_conn.execute.assert_not_awaited()


async def test_delete_missing_id_is_not_an_error(repository, db, db_conn):
    db_conn.execute.return_value = "DELETE 0"

    await repository.delete("missing")

    db.pool.release.assert_awaited_once_with(db_conn)


async def test_delete_query_failure(repository, db_conn):
    db_conn.execute.side_effect = asyncpg.PostgresError("connection reset")

    with pytest.raises(PersistenceError):
        await repository.delete("some-id")


async def test_release_failure_after_success_is_reported(repository, db, db_conn):
    db_conn.execute.return_value = "DELETE 1"
    db.pool.release.side_effect = RuntimeError("pool closed")

    with pytest.raises(PersistenceError):
        await repository.delete("some-id")


async def test_release_failure_does_not_mask_original_error(repository, db, db_conn):
    db_conn.execute.return_value = "UPDATE 0"
    db.pool.release.side_effect = RuntimeError("pool closed")

    with pytest.raises(IdentityProviderNotFoundError):
        await repository.update(
            IdentityProvider(id="missing", scopes=["openid"])
        )

    db.pool.release.assert_awaited_once_with(db_conn)


@pytest.mark.parametrize(
    "status, expected",
    [("UPDATE 1", 1), ("DELETE 0", 0), ("INSERT 0 1", 1), ("DELETE 12", 12)],
)
def test_affected_rows(status, expected):
    assert affected_rows(status) == expected


@pytest.mark.parametrize("status", [None, "", "UPDATE"])
def test_affected_rows_unparsable(status):
    with pytest.raises(PersistenceError):
        affected_rows(status)
