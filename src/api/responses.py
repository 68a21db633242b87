"""
Response envelope.

Every response body is {"status": "success" | "error", "message"?, "data"?};
errors also carry "code".
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class SuccessEnvelope(BaseModel, Generic[T]):
    status: str = "success"
    message: Optional[str] = None
    data: Optional[T] = None


def success(data: Any = None, message: Optional[str] = None) -> SuccessEnvelope:
    return SuccessEnvelope(data=data, message=message)


def error_body(code: str, message: str, data: Any = None) -> dict:
    body = {"status": "error", "code": code, "message": message}
    if data:
        body["data"] = data
    return body
