# inventory/core/http.py
import json
from typing import Any

from fastapi import Request

from inventory.core.exceptions import (
    BadRequestError,
    NotFoundError,
    UnsupportedMediaTypeError,
)


def route_not_found() -> NotFoundError:
    """Error for a (method, query) shape no endpoint handles."""
    return NotFoundError("Route not found.")


class JsonBody:
    """
    Raw request body, parsed on demand.

    Endpoints call `parse()` only after their access guard has passed,
    so an anonymous caller gets 401 rather than 415/400.
    """

    def __init__(self, content_type: str, raw: bytes):
        self.content_type = content_type
        self.raw = raw

    def parse(self) -> dict[str, Any]:
        """
        Raises:
            UnsupportedMediaTypeError(415): Content-Type is not JSON.
            BadRequestError(400): body is not a JSON object.
        """
        if "application/json" not in self.content_type.lower():
            raise UnsupportedMediaTypeError()

        if not self.raw.strip():
            return {}

        try:
            decoded = json.loads(self.raw)
        except ValueError:
            raise BadRequestError("Malformed JSON body.") from None

        if not isinstance(decoded, dict):
            raise BadRequestError("Malformed JSON body.")
        return decoded


async def get_json_body(request: Request) -> JsonBody:
    return JsonBody(request.headers.get("content-type", ""), await request.body())


def require_query_id(value: int | None, name: str = "id") -> int:
    """
    Raises:
        BadRequestError(400): the query parameter was not supplied.
    """
    if value is None:
        raise BadRequestError(f"{name} query parameter is required.")
    return value
