import re
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .models import ALL_CATEGORIES, ProductIn, ProductUpdate, TaskPriority, TaskStatus

# Record defaults, identifiers and timestamps shared by the store and the façades.

DUE_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

TASK_DEFAULTS: Dict[str, Any] = {
    "title": "",
    "description": "",
    "priority": TaskPriority.MEDIUM.value,
    "dueDate": "",
    "status": TaskStatus.PENDING.value,
}

PRODUCT_DEFAULTS: Dict[str, Any] = {
    "description": "",
    "price": 0,
    "stockSystem": 0,
    "minStock": 0,
    "unit": "pcs",
    "categoryId": None,
}

CATEGORY_DEFAULTS: Dict[str, Any] = {
    "description": "",
    "icon": "📦",
    "color": "#6366f1",
}

_last_issued_ms = 0


def new_record_id() -> str:
    """Millisecond clock value, bumped so consecutive calls never repeat."""
    global _last_issued_ms
    now_ms = time.time_ns() // 1_000_000
    _last_issued_ms = max(now_ms, _last_issued_ms + 1)
    return str(_last_issued_ms)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


# ---------------------------
# Creation defaults per resource
# ---------------------------
def _make_task_dict(body: Mapping[str, Any]) -> Dict[str, Any]:
    now = utc_now_iso()
    record = {**TASK_DEFAULTS, "createdAt": now, "updatedAt": now}
    record.update(body)
    return record


def _make_product_dict(body: Mapping[str, Any]) -> Dict[str, Any]:
    now = utc_now_iso()
    record = {**PRODUCT_DEFAULTS, "createdAt": now, "updatedAt": now}
    record.update(body)
    if record.get("stockPhysical") is None:
        record["stockPhysical"] = record["stockSystem"]
    return record


def _make_category_dict(body: Mapping[str, Any]) -> Dict[str, Any]:
    record = dict(CATEGORY_DEFAULTS)
    record.update(body)
    if not record.get("slug"):
        record["slug"] = slugify(record.get("name", ""))
    return record


RECORD_FACTORIES: Dict[str, Callable[[Mapping[str, Any]], Dict[str, Any]]] = {
    "tasks": _make_task_dict,
    "products": _make_product_dict,
    "categories": _make_category_dict,
}


# ---------------------------
# Task input validation
# ---------------------------
def validate_task_input(data: Mapping[str, Any], partial: bool = False) -> Dict[str, Any]:
    """Check and normalize a task form before it reaches any transport.

    With ``partial=False`` (creation) the title is required and missing
    priority/status get their defaults. With ``partial=True`` only the
    supplied fields are checked and returned. Raises ValidationError on the
    first bad field, leaving nothing half-applied.
    """
    out: Dict[str, Any] = {}

    if "title" in data or not partial:
        title = data.get("title") or ""
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("Title is required", field="title")
        out["title"] = title.strip()

    if "description" in data:
        description = data.get("description") or ""
        if not isinstance(description, str):
            raise ValidationError("Description must be text", field="description")
        out["description"] = description

    if "priority" in data or not partial:
        out["priority"] = _normalize_priority(data.get("priority"))

    if "dueDate" in data:
        due_date = data.get("dueDate") or ""
        if not isinstance(due_date, str) or (due_date and not DUE_DATE_PATTERN.fullmatch(due_date)):
            raise ValidationError("Due date must be in YYYY-MM-DD format", field="dueDate")
        out["dueDate"] = due_date

    if "status" in data or not partial:
        out["status"] = _normalize_status(data.get("status"))

    return out


def _normalize_priority(value: Optional[str]) -> str:
    value = getattr(value, "value", value)
    if value is None or not str(value).strip():
        return TaskPriority.MEDIUM.value
    candidate = str(value).strip().lower()
    if candidate not in {p.value for p in TaskPriority}:
        raise ValidationError("Priority must be low, medium, or high", field="priority")
    return candidate


def _normalize_status(value: Optional[str]) -> str:
    value = getattr(value, "value", value)
    if value is None or not str(value).strip():
        return TaskStatus.PENDING.value
    candidate = str(value).strip().lower()
    if candidate not in {s.value for s in TaskStatus}:
        raise ValidationError("Status must be pending, in-progress, or completed", field="status")
    return candidate


# ---------------------------
# Product input validation
# ---------------------------
def parse_input(schema: Type[BaseModel], data: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate ``data`` against ``schema``; only the supplied fields come back, camelCased."""
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True, exclude_unset=True)
    try:
        parsed = schema.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc
    return parsed.model_dump(by_alias=True, exclude_unset=True)


def validate_product_input(data: Mapping[str, Any], partial: bool = False) -> Dict[str, Any]:
    body = parse_input(ProductUpdate if partial else ProductIn, data)
    if body.get("categoryId") == ALL_CATEGORIES:
        raise ValidationError("products cannot be assigned to the 'all' category", field="categoryId")
    return body
