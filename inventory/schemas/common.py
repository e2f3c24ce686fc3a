# inventory/schemas/common.py
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """`{"data": ...}` envelope for a single record."""

    data: T


class SavedResponse(DataResponse[T], Generic[T]):
    """Envelope returned by create/update endpoints."""

    message: str


class ListResponse(BaseModel, Generic[T]):
    """`{"data": [...], "count": n}` envelope for collections."""

    data: list[T]
    count: int


class MessageResponse(BaseModel):
    message: str
