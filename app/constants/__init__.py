from app.constants.idp_errors import IDP_ERROR_MESSAGES, IdPErrorCode

__all__ = [
    "IdPErrorCode",
    "IDP_ERROR_MESSAGES",
]
