import logging
import unicodedata
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .errors import ValidationError
from .models import ALL_CATEGORIES, Product

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10

SORT_KEYS = ("latest", "oldest", "name", "price-asc", "price-desc")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class ProductQuery(BaseModel):
    """Parameter set accepted by ``GET /products``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    search: str = ""
    category_id: Optional[str] = None
    low_stock: bool = False
    sort_by: Optional[str] = None
    page: Optional[int] = Field(None, ge=1)
    limit: Optional[int] = Field(None, ge=1)

    @classmethod
    def from_params(cls, params: Optional[Mapping[str, Any]]) -> "ProductQuery":
        try:
            return cls.model_validate(dict(params or {}))
        except PydanticValidationError as exc:
            raise ValidationError.from_pydantic(exc) from exc

    def apply(self, products: Iterable[Product]) -> List[Product]:
        return filter_and_sort(
            products,
            search=self.search,
            category_id=self.category_id,
            sort_by=self.sort_by,
            low_stock=self.low_stock,
        )


# ---------------------------
# Predicates
# ---------------------------
def matches_category(product: Product, category_id: Optional[str]) -> bool:
    if not category_id or category_id == ALL_CATEGORIES:
        return True
    return product.category_id == category_id


def matches_search(product: Product, text: str) -> bool:
    if not text or not text.strip():
        return True
    needle = text.lower()
    if needle in product.name.lower():
        return True
    return product.description is not None and needle in product.description.lower()


def is_low_stock(product: Product) -> bool:
    return product.stock_system <= product.min_stock


def stock_status(product: Product) -> str:
    if product.stock_system <= 0:
        return "Out of Stock"
    if is_low_stock(product):
        return "Low Stock"
    return "In Stock"


# ---------------------------
# Sorting
# ---------------------------
def _created_at(product: Product) -> datetime:
    raw = product.created_at
    if not raw:
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def collation_key(text: str) -> Tuple[str, str]:
    # accent- and case-insensitive first, raw text breaks ties
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return folded, text


_SORTS: Dict[str, Tuple[Callable[[Product], Any], bool]] = {
    "latest": (_created_at, True),
    "oldest": (_created_at, False),
    "name": (lambda p: collation_key(p.name), False),
    "price-asc": (lambda p: p.price, False),
    "price-desc": (lambda p: p.price, True),
}


def sort_products(products: Iterable[Product], sort_by: Optional[str]) -> List[Product]:
    items = list(products)
    if sort_by not in _SORTS:
        # unknown or missing key keeps the incoming order
        return items
    key, descending = _SORTS[sort_by]
    # list.sort is stable in both directions
    items.sort(key=key, reverse=descending)
    return items


def filter_and_sort(
    products: Iterable[Product],
    search: str = "",
    category_id: Optional[str] = None,
    sort_by: Optional[str] = None,
    low_stock: bool = False,
) -> List[Product]:
    filtered = [
        p for p in products
        if matches_category(p, category_id)
        and matches_search(p, search)
        and (not low_stock or is_low_stock(p))
    ]
    logger.debug(
        "query search=%r category=%r low_stock=%s sort=%r -> %d products",
        search, category_id, low_stock, sort_by, len(filtered),
    )
    return sort_products(filtered, sort_by)
