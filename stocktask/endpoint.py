import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Pattern, Tuple, Type
from urllib.parse import parse_qsl, urlsplit

from pydantic import ValidationError as PydanticValidationError

from .core import RECORD_FACTORIES, validate_product_input, validate_task_input
from .database import ResourceStore, load_fixture
from .errors import UnknownEndpoint, ValidationError, resource_label
from .models import ALL_CATEGORIES, Category, Product, Record, Task
from .pagination import paginate
from .query import DEFAULT_LIMIT, ProductQuery
from .transport import ResourceTransport

# REST-shaped adapter over in-memory stores, interchangeable with the HTTP transport.

logger = logging.getLogger(__name__)


def _compile(path: str) -> Pattern:
    return re.compile(re.sub(r"\{(\w+)\}", r"(?P<\1>[^/]+)", path))


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    handler: str
    regex: Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "regex", _compile(self.path))

    def match(self, method: str, path: str) -> Optional[Dict[str, str]]:
        if method != self.method:
            return None
        m = self.regex.fullmatch(path)
        return m.groupdict() if m else None


ROUTES: Tuple[Route, ...] = (
    Route("GET", "/{resource}", "_list_records"),
    Route("GET", "/{resource}/{record_id}", "_get_record"),
    Route("POST", "/{resource}", "_create_record"),
    Route("PUT", "/{resource}/{record_id}", "_update_record"),
    Route("DELETE", "/{resource}/{record_id}", "_delete_record"),
)


class MockResourceEndpoint(ResourceTransport):
    assigns_defaults = True

    def __init__(self, stores: Mapping[str, ResourceStore]):
        self.stores: Dict[str, ResourceStore] = dict(stores)

    @classmethod
    def from_fixture(cls, fixture: Optional[Mapping[str, Any]] = None) -> "MockResourceEndpoint":
        data = load_fixture() if fixture is None else fixture
        return cls({
            name: ResourceStore(name, records, defaults=RECORD_FACTORIES.get(name))
            for name, records in data.items()
        })

    def reset(self) -> None:
        for store in self.stores.values():
            store.reset()

    # ---------------------------
    # Verbs
    # ---------------------------
    async def get(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.dispatch("GET", url, params=params)

    async def post(self, url: str, body: Optional[Mapping[str, Any]] = None) -> Any:
        return self.dispatch("POST", url, body=body)

    async def put(self, url: str, body: Mapping[str, Any]) -> Any:
        return self.dispatch("PUT", url, body=body)

    async def delete(self, url: str) -> Any:
        return self.dispatch("DELETE", url)

    def dispatch(
        self,
        method: str,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        parts = urlsplit(url)
        path = parts.path.rstrip("/") or "/"
        query = dict(parse_qsl(parts.query))
        query.update(params or {})

        for route in ROUTES:
            args = route.match(method, path)
            if args is None or args["resource"] not in self.stores:
                continue
            logger.debug("mock %s %s -> %s", method, url, route.handler)
            handler = getattr(self, route.handler)
            return handler(params=query, body=body, **args)

        raise UnknownEndpoint(url, method)

    # ---------------------------
    # Handlers
    # ---------------------------
    def _list_records(self, resource: str, params: Dict[str, Any], **_):
        records = self.stores[resource].list()
        if resource != "products" or not params:
            return records

        query = ProductQuery.from_params(params)
        ordered = [p.to_payload() for p in query.apply(Product.model_validate(r) for r in records)]
        if query.page is None and query.limit is None:
            return ordered
        return paginate(ordered, query.page or 1, query.limit or DEFAULT_LIMIT)

    def _get_record(self, resource: str, record_id: str, **_):
        return self.stores[resource].get_by_id(record_id)

    def _create_record(self, resource: str, body: Optional[Mapping[str, Any]], **_):
        if not body:
            raise ValidationError(f"{resource_label(resource)} data is required")
        if resource == "categories" and body.get("id") == ALL_CATEGORIES:
            raise ValidationError("the 'all' category cannot be stored", field="id")
        body = _checked_body(resource, body, partial=False)
        factory = RECORD_FACTORIES.get(resource)
        _ensure_readable(resource, {**(factory(body) if factory else body), "id": "new"})
        return self.stores[resource].insert(body)

    def _update_record(self, resource: str, record_id: str, body: Optional[Mapping[str, Any]], **_):
        if resource == "categories" and record_id == ALL_CATEGORIES:
            raise ValidationError("the 'all' category cannot be stored", field="id")
        store = self.stores[resource]
        body = _checked_body(resource, body or {}, partial=True)
        _ensure_readable(resource, {**store.get_by_id(record_id), **body, "id": record_id})
        return store.update(record_id, body)

    def _delete_record(self, resource: str, record_id: str, **_):
        if resource == "categories" and record_id == ALL_CATEGORIES:
            raise ValidationError("the 'all' category cannot be deleted", field="id")
        self.stores[resource].remove(record_id)
        return {"message": f"{resource_label(resource)} deleted successfully"}


# ---------------------------
# Body checks
# ---------------------------
RECORD_MODELS: Dict[str, Type[Record]] = {"products": Product, "tasks": Task, "categories": Category}


def _checked_body(resource: str, body: Mapping[str, Any], partial: bool) -> Dict[str, Any]:
    # normalized known fields win; anything else (ids, timestamps) passes through
    if resource == "products":
        return {**body, **validate_product_input(body, partial=partial)}
    if resource == "tasks":
        return {**body, **validate_task_input(body, partial=partial)}
    return dict(body)


def _ensure_readable(resource: str, candidate: Mapping[str, Any]) -> None:
    """Refuse a write that would leave a record its model cannot read back."""
    model = RECORD_MODELS.get(resource)
    if model is None:
        return
    try:
        model.model_validate(candidate)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc
