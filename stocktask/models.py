# stocktask/models.py
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ALL_CATEGORIES = "all"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    def next(self) -> "TaskStatus":
        order = list(TaskStatus)
        return order[(order.index(self) + 1) % len(order)]


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Record(BaseModel):
    """Base for stored records: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class Category(Record):
    name: str
    slug: str = ""
    description: str = ""
    icon: str = ""
    color: str = ""


class Product(Record):
    name: str
    description: Optional[str] = None
    price: float = Field(0, ge=0)
    stock_system: int = 0
    stock_physical: Optional[int] = None
    min_stock: int = 0
    unit: str = "pcs"
    category_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProductWithCategory(Product):
    category: Optional[Category] = None


class Task(Record):
    title: str
    description: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: str = ""
    status: TaskStatus = TaskStatus.PENDING
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ---------------------------
# Input schemas
# ---------------------------
class ProductIn(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: float = Field(ge=0)
    stock_system: int = 0
    stock_physical: Optional[int] = None
    min_stock: int = 0
    unit: str = "pcs"
    category_id: Optional[str] = None


class ProductUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    stock_system: Optional[int] = None
    stock_physical: Optional[int] = None
    min_stock: Optional[int] = None
    unit: Optional[str] = None
    category_id: Optional[str] = None

    # omitted fields stay None; only description and category may be cleared
    @field_validator("name", "price", "stock_system", "stock_physical", "min_stock", "unit", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value
