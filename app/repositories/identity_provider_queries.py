from app.database.query_builder import DBQuery

CREATE_IDP = DBQuery(
    id="IDP-CREATE",
    query="""
        INSERT INTO "IDP" (
            IDP_ID, NAME, DESCRIPTION, CLIENT_ID, CLIENT_SECRET, REDIRECT_URI, SCOPES
        ) VALUES (
            :idp_id, :name, :description, :client_id, :client_secret, :redirect_uri, :scopes
        )
    """,
)

GET_IDP_BY_ID = DBQuery(
    id="IDP-GET-BY-ID",
    query="""
        SELECT IDP_ID, NAME, DESCRIPTION, CLIENT_ID, CLIENT_SECRET, REDIRECT_URI, SCOPES
        FROM "IDP"
        WHERE IDP_ID = :idp_id
    """,
)

LIST_IDPS = DBQuery(
    id="IDP-LIST",
    query="""
        SELECT IDP_ID, NAME, DESCRIPTION, CLIENT_ID, SCOPES
        FROM "IDP"
    """,
)

UPDATE_IDP_BY_ID = DBQuery(
    id="IDP-UPDATE-BY-ID",
    query="""
        UPDATE "IDP"
        SET NAME = :name, DESCRIPTION = :description, CLIENT_ID = :client_id,
            CLIENT_SECRET = :client_secret, REDIRECT_URI = :redirect_uri, SCOPES = :scopes
        WHERE IDP_ID = :idp_id
    """,
)

DELETE_IDP_BY_ID = DBQuery(
    id="IDP-DELETE-BY-ID",
    query="""
        DELETE FROM "IDP"
        WHERE IDP_ID = :idp_id
    """,
)
