"""Standard API response models."""

from typing import Any, Self, TypeVar

from pydantic import BaseModel, ConfigDict

from src.core.application.pagination import Pagination

T = TypeVar("T")


class ApiResponse[T](BaseModel):
    """Standard API response model."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    code: int = 200
    message: str = "Operation successful"
    data: T | None = None
    meta: dict | None = None

    @classmethod
    def success(
        cls,
        data: T = None,
        message: str = "Operation successful",
        code: int = 200,
        meta: dict | None = None,
    ) -> "ApiResponse[T]":
        return cls(code=code, message=message, data=data, meta=meta)


class PaginatedResponse[T](ApiResponse[list[T]]):
    """Paginated API response model.

    meta 携带分页信息以及数据来源（source_used / is_fallback）。
    """

    data: list[T] | None = None
    meta: dict = {
        "current_page": 1,
        "total_pages": 0,
        "total_results": 0,
        "page_size": 20,
        "has_next_page": False,
        "has_prev_page": False,
    }

    @classmethod
    def create(
        cls,
        items: list[T],
        pagination: Pagination,
        **extra: Any,
    ) -> Self:
        return cls(data=items, meta={**pagination.model_dump(), **extra})


class ErrorResponse(BaseModel):
    """Error response envelope."""

    error: dict

    @classmethod
    def create(
        cls,
        code: str,
        message: str,
        details: dict | None = None,
    ) -> "ErrorResponse":
        error_dict = {"code": code, "message": message}
        if details:
            error_dict["details"] = details
        return cls(error=error_dict)
