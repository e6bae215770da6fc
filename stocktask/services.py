import logging
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .core import new_record_id, utc_now_iso, validate_product_input, validate_task_input
from .errors import ValidationError
from .models import Category, Product, ProductWithCategory, Task
from .transport import ResourceTransport

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _clean_params(params: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None}


def _to_model(model: Type[M], payload: Any) -> M:
    # a malformed record from any transport surfaces as a ValidationError
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


class ResourceService:
    """Shared plumbing for the façades: one transport, stamped mutations."""

    resource = ""

    def __init__(self, transport: ResourceTransport):
        self.transport = transport

    def _item_url(self, record_id: str) -> str:
        return f"/{self.resource}/{record_id}"

    def _stamp_create(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if self.transport.assigns_defaults:
            return body
        now = utc_now_iso()
        return {**body, "id": new_record_id(), "createdAt": now, "updatedAt": now}

    def _stamp_update(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if self.transport.assigns_defaults:
            return body
        return {**body, "updatedAt": utc_now_iso()}


class ProductService(ResourceService):
    resource = "products"

    async def get_products(self, **params) -> List[Product]:
        payload = await self.transport.get("/products", params=_clean_params(params))
        return [_to_model(Product, p) for p in payload]

    async def get_product_by_id(self, product_id: str) -> Product:
        return _to_model(Product, await self.transport.get(self._item_url(product_id)))

    async def get_products_with_category(self, **params) -> List[ProductWithCategory]:
        products = await self.transport.get("/products", params=_clean_params(params))
        categories = {c["id"]: c for c in await self.transport.get("/categories")}
        return [
            _to_model(ProductWithCategory, {**p, "category": categories.get(p.get("categoryId"))})
            for p in products
        ]

    async def create_product(self, data: Mapping[str, Any]) -> Product:
        body = validate_product_input(data)
        body = self._stamp_create(body)
        if not self.transport.assigns_defaults:
            body.setdefault("stockPhysical", body.get("stockSystem", 0))
        product = _to_model(Product, await self.transport.post("/products", body))
        logger.info("created product %s (%s)", product.id, product.name)
        return product

    async def update_product(self, product_id: str, changes: Mapping[str, Any]) -> Product:
        body = validate_product_input(changes, partial=True)
        body = self._stamp_update(body)
        product = _to_model(Product, await self.transport.put(self._item_url(product_id), body))
        logger.info("updated product %s", product_id)
        return product

    async def delete_product(self, product_id: str) -> None:
        await self.transport.delete(self._item_url(product_id))
        logger.info("deleted product %s", product_id)

    async def get_categories(self) -> List[Category]:
        return [_to_model(Category, c) for c in await self.transport.get("/categories")]

    async def get_low_stock_products(self) -> List[Product]:
        return await self.get_products(lowStock=True)

    async def search_products(self, query: str, **params) -> List[Product]:
        return await self.get_products(**{**params, "search": query})

    async def get_products_by_category(self, category_id: str, **params) -> List[Product]:
        return await self.get_products(**{**params, "categoryId": category_id})

    async def get_products_sorted(self, sort_by: str, **params) -> List[Product]:
        return await self.get_products(**{**params, "sortBy": sort_by})

    async def get_products_paginated(self, page: int = 1, limit: int = 10, **params) -> List[Product]:
        return await self.get_products(**{**params, "page": page, "limit": limit})


class TaskService(ResourceService):
    resource = "tasks"

    async def get_tasks(self, **params) -> List[Task]:
        payload = await self.transport.get("/tasks", params=_clean_params(params))
        return [_to_model(Task, t) for t in payload]

    async def get_task(self, task_id: str) -> Task:
        return _to_model(Task, await self.transport.get(self._item_url(task_id)))

    async def create_task(self, data: Mapping[str, Any]) -> Task:
        body = self._stamp_create(validate_task_input(data))
        task = _to_model(Task, await self.transport.post("/tasks", body))
        logger.info("created task %s (%s)", task.id, task.title)
        return task

    async def update_task(self, task_id: str, changes: Mapping[str, Any]) -> Task:
        body = self._stamp_update(validate_task_input(changes, partial=True))
        task = _to_model(Task, await self.transport.put(self._item_url(task_id), body))
        logger.info("updated task %s", task_id)
        return task

    async def delete_task(self, task_id: str) -> None:
        await self.transport.delete(self._item_url(task_id))
        logger.info("deleted task %s", task_id)

    async def toggle_status(self, task_id: str) -> Task:
        """Advance a task one step: pending -> in-progress -> completed -> pending."""
        task = await self.get_task(task_id)
        return await self.update_task(task_id, {"status": task.status.next().value})


def create_services(transport: Optional[ResourceTransport] = None):
    """Both façades wired onto one transport (the configured one by default)."""
    if transport is None:
        from .config import build_transport
        transport = build_transport()
    return ProductService(transport), TaskService(transport)
