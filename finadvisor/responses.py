# finadvisor/responses.py
from typing import Any

from pydantic import BaseModel

_MISSING = object()


def serialize(schema: type[BaseModel], obj) -> dict:
    """ORM object -> camelCase JSON-ready dict."""
    return schema.model_validate(obj).model_dump(mode="json", by_alias=True)


def serialize_many(schema: type[BaseModel], objs) -> list[dict]:
    return [serialize(schema, o) for o in objs]


def envelope(data: Any = _MISSING, message: str | None = None, success: bool = True) -> dict:
    """The {success, data?, message?} wrapper used by every entity endpoint."""
    body = {"success": success}
    if data is not _MISSING:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return body
