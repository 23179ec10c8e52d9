"""Pagination metadata shared by list endpoints."""

import math
from typing import NamedTuple


class PageMeta(NamedTuple):
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


def page_meta(total: int, page: int, page_size: int) -> PageMeta:
    total_pages = math.ceil(total / page_size)
    return PageMeta(
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_previous_page=page > 1,
    )
