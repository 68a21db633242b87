from typing import Dict

from fastapi import status

from src.libs.result import Error

# Every error code a use case can return, mapped to its HTTP status.
# Codes missing here are treated as server errors.
STATUS_BY_CODE: Dict[str, int] = {
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "TENANT_SUSPENDED": status.HTTP_403_FORBIDDEN,
    "TENANT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_WINDOW": status.HTTP_400_BAD_REQUEST,
    "INVALID_AMOUNT": status.HTTP_400_BAD_REQUEST,
    "INVALID_CONFIRMATION": status.HTTP_400_BAD_REQUEST,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "ILLEGAL_TRANSITION": status.HTTP_409_CONFLICT,
    "INVOICE_TERMINAL": status.HTTP_409_CONFLICT,
    "ITEM_CODE_TAKEN": status.HTTP_409_CONFLICT,
    "TENANT_NAME_TAKEN": status.HTTP_409_CONFLICT,
    "ALREADY_DELETED": status.HTTP_409_CONFLICT,
}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def raise_for_error(error: Error):
    """Raise the API exception matching a use case error"""
    status_code = STATUS_BY_CODE.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
