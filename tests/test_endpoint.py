# tests/test_endpoint.py
import pytest

from stocktask.endpoint import MockResourceEndpoint
from stocktask.errors import NotFound, UnknownEndpoint, ValidationError


@pytest.mark.asyncio
async def test_get_missing_task_on_empty_store():
    endpoint = MockResourceEndpoint.from_fixture({"tasks": []})
    with pytest.raises(NotFound):
        await endpoint.get("/tasks/999")


@pytest.mark.asyncio
async def test_unknown_resource(endpoint):
    with pytest.raises(UnknownEndpoint) as exc:
        await endpoint.get("/widgets")
    assert exc.value.url == "/widgets"
    assert exc.value.method == "GET"


@pytest.mark.parametrize("method, url", [
    ("POST", "/tasks/1"),
    ("PUT", "/tasks"),
    ("DELETE", "/tasks"),
    ("GET", "/tasks/1/comments"),
    ("GET", "/"),
    ("PATCH", "/tasks/1"),
])
def test_unrouted_requests(endpoint, method, url):
    with pytest.raises(UnknownEndpoint):
        endpoint.dispatch(method, url, body={"title": "x"})


@pytest.mark.asyncio
async def test_collection_and_item(endpoint, fixture_data):
    tasks = await endpoint.get("/tasks")
    assert tasks == fixture_data["tasks"]
    assert (await endpoint.get("/tasks/2"))["title"] == "Reorder power banks"
    assert (await endpoint.get("/tasks/2/"))["id"] == "2"


@pytest.mark.asyncio
async def test_products_query_params(endpoint):
    cheap_stationery = await endpoint.get("/products", params={"categoryId": "2", "sortBy": "price-asc"})
    assert [p["id"] for p in cheap_stationery] == ["6", "5", "4"]

    low = await endpoint.get("/products", params={"lowStock": True, "sortBy": "name"})
    assert [p["name"] for p in low] == [
        "Instant Coffee", "Microfiber Cloth", "Power Bank 10000mAh", "Sticky Notes", "Wireless Mouse",
    ]


@pytest.mark.asyncio
async def test_products_page_and_limit(endpoint):
    page2 = await endpoint.get("/products", params={"sortBy": "latest", "page": 2, "limit": 6})
    assert [p["id"] for p in page2] == ["7", "2", "1", "4", "5", "9"]
    page3 = await endpoint.get("/products", params={"sortBy": "latest", "page": "3", "limit": "6"})
    assert [p["id"] for p in page3] == ["11"]
    assert await endpoint.get("/products", params={"page": 9, "limit": 6}) == []


@pytest.mark.asyncio
async def test_query_string_in_url(endpoint):
    found = await endpoint.get("/products?search=coffee")
    assert [p["id"] for p in found] == ["8"]


@pytest.mark.asyncio
async def test_invalid_query_params(endpoint):
    with pytest.raises(ValidationError):
        await endpoint.get("/products", params={"limit": "0"})


@pytest.mark.asyncio
async def test_post_fills_defaults(endpoint):
    created = await endpoint.post("/tasks", {"title": "Check fridge"})
    assert created["status"] == "pending"
    assert created["priority"] == "medium"
    assert created["createdAt"]
    assert await endpoint.get(f"/tasks/{created['id']}") == created
    assert len(await endpoint.get("/tasks")) == 5


@pytest.mark.asyncio
async def test_post_requires_body(endpoint):
    with pytest.raises(ValidationError):
        await endpoint.post("/tasks")
    with pytest.raises(ValidationError):
        await endpoint.post("/tasks", {})


@pytest.mark.asyncio
async def test_put_merges(endpoint):
    before = await endpoint.get("/tasks/1")
    updated = await endpoint.put("/tasks/1", {"status": "completed"})
    assert updated == {**before, "status": "completed"}

    with pytest.raises(NotFound):
        await endpoint.put("/tasks/999", {"status": "completed"})


@pytest.mark.asyncio
async def test_delete_acknowledges(endpoint):
    assert await endpoint.delete("/tasks/3") == {"message": "Task deleted successfully"}
    assert await endpoint.delete("/categories/4") == {"message": "Category deleted successfully"}
    with pytest.raises(NotFound):
        await endpoint.get("/tasks/3")
    with pytest.raises(NotFound):
        await endpoint.delete("/tasks/3")


@pytest.mark.asyncio
async def test_all_category_never_mutated(endpoint):
    with pytest.raises(ValidationError):
        await endpoint.post("/categories", {"id": "all", "name": "All Products"})
    with pytest.raises(ValidationError):
        await endpoint.put("/categories/all", {"name": "Everything"})
    with pytest.raises(ValidationError):
        await endpoint.delete("/categories/all")
    assert all(c["id"] != "all" for c in await endpoint.get("/categories"))


@pytest.mark.asyncio
async def test_fresh_endpoints_are_isolated(endpoint):
    await endpoint.delete("/tasks/1")
    other = MockResourceEndpoint.from_fixture()
    assert (await other.get("/tasks/1"))["id"] == "1"

    endpoint.reset()
    assert len(await endpoint.get("/tasks")) == 4


@pytest.mark.asyncio
@pytest.mark.parametrize("url, body, field", [
    ("/products", {"price": 5}, "name"),
    ("/products", {"name": "Glue", "price": -1}, "price"),
    ("/products", {"name": "Glue", "price": 5, "categoryId": "all"}, "categoryId"),
    ("/tasks", {"title": "Restock", "priority": "urgent"}, "priority"),
    ("/tasks", {"title": 42}, "title"),
    ("/categories", {"color": "#000000"}, "name"),
])
async def test_post_rejects_unreadable_records(endpoint, url, body, field):
    resource = url.strip("/")
    before = len(endpoint.stores[resource])
    with pytest.raises(ValidationError) as exc:
        await endpoint.post(url, body)
    assert exc.value.field == field
    assert len(endpoint.stores[resource]) == before


@pytest.mark.asyncio
@pytest.mark.parametrize("url, body", [
    ("/products/2", {"price": None}),
    ("/products/2", {"price": "cheap"}),
    ("/tasks/1", {"status": "done"}),
    ("/tasks/1", {"createdAt": 5}),
    ("/categories/1", {"name": None}),
])
async def test_put_rejects_unreadable_records(endpoint, url, body):
    before = await endpoint.get(url)
    with pytest.raises(ValidationError):
        await endpoint.put(url, body)
    assert await endpoint.get(url) == before


@pytest.mark.asyncio
async def test_post_normalizes_task_fields(endpoint):
    created = await endpoint.post("/tasks", {"title": "  Label bins ", "priority": "HIGH"})
    assert created["title"] == "Label bins"
    assert created["priority"] == "high"
