from app.constants.idp_errors import IDP_ERROR_MESSAGES, IdPErrorCode


class AppException(Exception):
    def __init__(self, code: str, message: str, status_code: int = 400):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class NotFoundException(AppException):
    def __init__(self, code: str, message: str):
        super().__init__(code, message, status_code=404)


class ValidationException(AppException):
    def __init__(self, code: str, message: str, details: list | None = None):
        super().__init__(code, message, status_code=400)
        self.details = details or []


class InvalidIdentityProviderInputError(ValidationException):
    def __init__(self, message: str | None = None):
        super().__init__(
            code=IdPErrorCode.INVALID_INPUT.value,
            message=message or IDP_ERROR_MESSAGES[IdPErrorCode.INVALID_INPUT],
        )


class InvalidScopesError(ValidationException):
    def __init__(self):
        super().__init__(
            code=IdPErrorCode.INVALID_SCOPES.value,
            message=IDP_ERROR_MESSAGES[IdPErrorCode.INVALID_SCOPES],
        )


class IdentityProviderNotFoundError(NotFoundException):
    def __init__(self, idp_id: str):
        super().__init__(
            code=IdPErrorCode.IDP_NOT_FOUND.value,
            message=IDP_ERROR_MESSAGES[IdPErrorCode.IDP_NOT_FOUND],
        )
        self.idp_id = idp_id


class PersistenceError(AppException):
    """Storage-level failure.

    ``detail`` keeps the internal description for logs; ``message`` is the
    fixed text that may be shown to API clients.
    """

    def __init__(self, detail: str):
        super().__init__(
            code=IdPErrorCode.PERSISTENCE_ERROR.value,
            message=IDP_ERROR_MESSAGES[IdPErrorCode.PERSISTENCE_ERROR],
            status_code=500,
        )
        self.detail = detail

    def __str__(self) -> str:
        return self.detail


class RowDecodingError(PersistenceError):
    def __init__(self, column: str, reason: str):
        super().__init__(f"failed to decode column '{column}': {reason}")
        self.column = column


class EncodingError(AppException):
    def __init__(self, detail: str):
        super().__init__(
            code=IdPErrorCode.ENCODING_ERROR.value,
            message=IDP_ERROR_MESSAGES[IdPErrorCode.ENCODING_ERROR],
            status_code=500,
        )
        self.detail = detail
