"""Shared fixtures: fresh stores and endpoints per test."""

import pytest

from stocktask.core import RECORD_FACTORIES
from stocktask.database import ResourceStore, load_fixture
from stocktask.endpoint import MockResourceEndpoint
from stocktask.models import Product
from stocktask.services import ProductService, TaskService


@pytest.fixture
def fixture_data():
    return load_fixture()


@pytest.fixture
def endpoint():
    return MockResourceEndpoint.from_fixture()


@pytest.fixture
def task_store():
    seed = [
        {"id": "1", "title": "Count shelf A", "description": "", "priority": "high",
         "dueDate": "2024-07-15", "status": "pending"},
        {"id": "10", "title": "Call supplier", "description": "coffee", "priority": "low",
         "dueDate": "", "status": "completed"},
    ]
    return ResourceStore("tasks", seed, defaults=RECORD_FACTORIES["tasks"])


@pytest.fixture
def products(fixture_data):
    return [Product.model_validate(p) for p in fixture_data["products"]]


@pytest.fixture
def product_service(endpoint):
    return ProductService(endpoint)


@pytest.fixture
def task_service(endpoint):
    return TaskService(endpoint)
