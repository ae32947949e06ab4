import math
from typing import Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")

# Upper bound of the INTEGER id and quantity columns
INT32_MAX = 2**31 - 1


class ErrorResponse(BaseModel):
    message: str
    code: str


class PageResponse(BaseModel, Generic[T]):
    dto_list: list[T]
    page_num_list: list[int]
    prev: bool
    next: bool
    total_count: int
    prev_page: int
    next_page: int
    total_page: int
    current: int


def build_page_response(dto_list: list, page: int, size: int, total_count: int,
                        block_size: int = 10) -> dict:
    """
    Pagination block around `page`: blocks of `block_size` page numbers,
    with prev/next pointing at the neighbouring blocks.
    """
    total_page = max(1, math.ceil(total_count / size)) if size > 0 else 1

    end = math.ceil(page / block_size) * block_size
    start = end - block_size + 1
    last = min(end, total_page)

    return {
        "dto_list": dto_list,
        "page_num_list": list(range(start, last + 1)),
        "prev": start > 1,
        "next": total_page > end,
        "total_count": total_count,
        "prev_page": start - 1 if start > 1 else 0,
        "next_page": end + 1 if total_page > end else 0,
        "total_page": total_page,
        "current": page,
    }


def parse_positive_int(value: str | None, default: int) -> int:
    """
    Lenient query parsing: anything that is not a positive integer falls
    back to `default` instead of failing the request.
    """
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return number if 0 < number <= INT32_MAX else default
