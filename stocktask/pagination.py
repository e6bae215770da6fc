import math
from typing import Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 6
MAX_VISIBLE_PAGES = 5


def count_pages(total_items: int, page_size: int) -> int:
    return math.ceil(total_items / page_size) if total_items > 0 else 0


def paginate(items: Sequence[T], page: int, page_size: int) -> List[T]:
    """Items on 1-based ``page``; empty when the page lies outside the sequence."""
    if page < 1:
        return []
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


class Paginator(Generic[T]):
    """Page cursor over an ordered sequence.

    Out-of-range navigation is ignored rather than raised: ``go_to_page``
    reports whether the request was accepted and leaves the cursor alone
    otherwise.
    """

    def __init__(self, items: Sequence[T] = (), page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.page_size = page_size
        self._items: List[T] = list(items)
        self._current_page = 1

    @property
    def items(self) -> List[T]:
        return list(self._items)

    @property
    def total_items(self) -> int:
        return len(self._items)

    @property
    def total_pages(self) -> int:
        return count_pages(len(self._items), self.page_size)

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def current_page_items(self) -> List[T]:
        return self.items_for_page(self._current_page)

    @property
    def has_next(self) -> bool:
        return self._current_page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self._current_page > 1

    def items_for_page(self, page: int) -> List[T]:
        return paginate(self._items, page, self.page_size)

    def go_to_page(self, page: int) -> bool:
        if 1 <= page <= self.total_pages:
            self._current_page = page
            return True
        return False

    def next_page(self) -> bool:
        return self.go_to_page(self._current_page + 1)

    def previous_page(self) -> bool:
        return self.go_to_page(self._current_page - 1)

    def reset(self, items: Optional[Sequence[T]] = None) -> None:
        if items is not None:
            self._items = list(items)
        self._current_page = 1

    def visible_pages(self) -> List[int]:
        total = self.total_pages
        if total <= MAX_VISIBLE_PAGES:
            return list(range(1, total + 1))
        start = min(max(self._current_page - 2, 1), total - MAX_VISIBLE_PAGES + 1)
        return list(range(start, start + MAX_VISIBLE_PAGES))
