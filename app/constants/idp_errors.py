from enum import Enum


class IdPErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    MISSING_IDP_ID = "MISSING_IDP_ID"
    INVALID_REQUEST_BODY = "INVALID_REQUEST_BODY"
    INVALID_SCOPES = "INVALID_SCOPES"

    IDP_NOT_FOUND = "IDP_NOT_FOUND"

    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    ENCODING_ERROR = "ENCODING_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


IDP_ERROR_MESSAGES: dict[IdPErrorCode, str] = {
    IdPErrorCode.INVALID_INPUT: "Bad Request: The identity provider id must not be empty.",
    IdPErrorCode.MISSING_IDP_ID: "Bad Request: Missing identity provider id.",
    IdPErrorCode.INVALID_REQUEST_BODY: "Bad Request: The request body is malformed or contains invalid data.",
    IdPErrorCode.INVALID_SCOPES: "Bad Request: The scopes element is malformed or contains invalid data.",
    IdPErrorCode.IDP_NOT_FOUND: "Not Found: The identity provider with the specified id does not exist.",
    IdPErrorCode.PERSISTENCE_ERROR: "Internal Server Error",
    IdPErrorCode.ENCODING_ERROR: "Internal Server Error",
    IdPErrorCode.INTERNAL_ERROR: "Internal Server Error",
}
