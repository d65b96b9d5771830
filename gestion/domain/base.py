"""
Base para los modelos de dominio (request/response)

Los campos se escriben en snake_case en Python y viajan en camelCase en JSON.

Author: TM3
Date: 2026-01-12
"""
from typing import Annotated, Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel


UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"

UUIDStr = Annotated[str, StringConstraints(pattern=UUID_PATTERN)]

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PageMeta(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


class Page(CamelModel, Generic[T]):
    data: List[T]
    meta: PageMeta


class MessageResponse(CamelModel):
    message: str


def page_of(items: list, total: int, page: int, limit: int) -> dict:
    total_pages = (total + limit - 1) // limit if limit else 0
    return {
        "data": items,
        "meta": {"total": total, "page": page, "limit": limit, "total_pages": total_pages},
    }
