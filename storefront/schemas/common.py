from typing import Generic, Optional, TypeVar, Literal

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Every response body: ``{status, data?, message?}``"""
    status: Literal["success", "error"] = "success"
    data: Optional[T] = None
    message: Optional[str] = None


def ok(data=None, message: Optional[str] = None) -> dict:
    body = {"status": "success", "data": data}
    if message:
        body["message"] = message
    return body


def error_body(message: str) -> dict:
    return {"status": "error", "message": message}
