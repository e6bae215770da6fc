from typing import Iterable, List, Optional

from .models import ALL_CATEGORIES, Category, Product
from .pagination import DEFAULT_PAGE_SIZE, Paginator
from .query import SORT_KEYS, filter_and_sort

ALL_CATEGORY = Category(
    id=ALL_CATEGORIES,
    name="All Products",
    slug=ALL_CATEGORIES,
    description="",
    icon="📦",
    color="#6366f1",
)


class ProductBrowser:
    """Listing state behind the product screen.

    Holds the fetched products plus the current search text, category and
    sort key. Any change re-runs the query and sends the paginator back to
    page 1.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE, sort_by: str = "latest"):
        self._products: List[Product] = []
        self._categories: List[Category] = []
        self.search_text = ""
        self.category_id = ALL_CATEGORIES
        self.sort_by = sort_by
        self.low_stock_only = False
        self.paginator: Paginator[Product] = Paginator(page_size=page_size)

    # ---------------------------
    # Data
    # ---------------------------
    @property
    def categories(self) -> List[Category]:
        """Fetched categories with the synthetic "all" entry first."""
        return [ALL_CATEGORY] + self._categories

    @property
    def products(self) -> List[Product]:
        return self.paginator.items

    def load(self, products: Iterable[Product], categories: Iterable[Category] = ()) -> None:
        self._products = list(products)
        self._categories = [c for c in categories if c.id != ALL_CATEGORIES]
        self.refresh()

    def category_name(self, category_id: Optional[str]) -> str:
        for category in self._categories:
            if category.id == category_id:
                return category.name
        return "-"

    # ---------------------------
    # Query state
    # ---------------------------
    def set_search(self, text: str) -> None:
        self.search_text = text
        self.refresh()

    def select_category(self, category_id: Optional[str]) -> None:
        self.category_id = category_id or ALL_CATEGORIES
        self.refresh()

    def set_sort(self, sort_by: str) -> None:
        if sort_by not in SORT_KEYS:
            raise ValueError(f"sort key must be one of {', '.join(SORT_KEYS)}")
        self.sort_by = sort_by
        self.refresh()

    def set_low_stock_only(self, enabled: bool) -> None:
        self.low_stock_only = enabled
        self.refresh()

    def refresh(self) -> None:
        filtered = filter_and_sort(
            self._products,
            search=self.search_text,
            category_id=self.category_id,
            sort_by=self.sort_by,
            low_stock=self.low_stock_only,
        )
        self.paginator.reset(filtered)

    # ---------------------------
    # Paging
    # ---------------------------
    @property
    def page_items(self) -> List[Product]:
        return self.paginator.current_page_items

    def go_to_page(self, page: int) -> bool:
        return self.paginator.go_to_page(page)
