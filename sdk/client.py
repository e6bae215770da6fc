# sdk/client.py
from typing import Any, Dict, Optional

import requests

from stocktask.errors import TransportFailure, error_from_response


class StockTaskClient:
    """Blocking client for scripts and demos; raises the same errors as the services."""

    def __init__(self, base_url: str = "http://localhost:8085", api_key: Optional[str] = None, timeout: int = 10, session=None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        if api_key:
            self.session.headers.update({"Authorization": f"Bearer {api_key}"})

    def _call(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise TransportFailure(f"{method} {path} failed: {e}") from e
        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"detail": r.text}
            raise error_from_response(r.status_code, payload, method, path)
        return r.json()

    def reset(self):
        return self._call("POST", "/reset")

    # Products
    def list_products(self, search: Optional[str] = None, category_id: Optional[str] = None,
                      low_stock: bool = False, sort_by: Optional[str] = None,
                      page: Optional[int] = None, limit: Optional[int] = None):
        params: Dict[str, Any] = {}
        if search:
            params["search"] = search
        if category_id:
            params["categoryId"] = category_id
        if low_stock:
            params["lowStock"] = "true"
        if sort_by:
            params["sortBy"] = sort_by
        if page is not None:
            params["page"] = page
        if limit is not None:
            params["limit"] = limit
        return self._call("GET", "/products", params=params)

    def get_product(self, product_id: str):
        return self._call("GET", f"/products/{product_id}")

    def create_product(self, name: str, price: float, stock_system: int = 0, min_stock: int = 0,
                       unit: str = "pcs", category_id: Optional[str] = None, description: str = ""):
        return self._call("POST", "/products", json={
            "name": name, "price": price, "stockSystem": stock_system, "minStock": min_stock,
            "unit": unit, "categoryId": category_id, "description": description,
        })

    def update_product(self, product_id: str, **changes):
        return self._call("PUT", f"/products/{product_id}", json=changes)

    def delete_product(self, product_id: str):
        return self._call("DELETE", f"/products/{product_id}")

    def list_categories(self):
        return self._call("GET", "/categories")

    # Tasks
    def list_tasks(self):
        return self._call("GET", "/tasks")

    def get_task(self, task_id: str):
        return self._call("GET", f"/tasks/{task_id}")

    def create_task(self, title: str, description: str = "", priority: str = "medium",
                    due_date: str = "", status: str = "pending"):
        return self._call("POST", "/tasks", json={
            "title": title, "description": description, "priority": priority,
            "dueDate": due_date, "status": status,
        })

    def update_task(self, task_id: str, **changes):
        return self._call("PUT", f"/tasks/{task_id}", json=changes)

    def delete_task(self, task_id: str):
        return self._call("DELETE", f"/tasks/{task_id}")


if __name__ == "__main__":
    import argparse
    from rich import print

    parser = argparse.ArgumentParser(description="stocktask client")
    parser.add_argument("--base-url", default="http://127.0.0.1:8085")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lp = subparsers.add_parser("list-products", help="List products")
    lp.add_argument("--search", help="Match name or description")
    lp.add_argument("--category-id", help="Filter by category id")
    lp.add_argument("--low-stock", action="store_true", help="Only products at or below minimum stock")
    lp.add_argument("--sort-by", choices=["latest", "oldest", "name", "price-asc", "price-desc"])
    lp.add_argument("--page", type=int)
    lp.add_argument("--limit", type=int)

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", required=True)

    subparsers.add_parser("list-categories", help="List categories")
    subparsers.add_parser("list-tasks", help="List tasks")

    ct = subparsers.add_parser("create-task", help="Create a task")
    ct.add_argument("--title", required=True)
    ct.add_argument("--description", default="")
    ct.add_argument("--priority", default="medium")
    ct.add_argument("--due-date", default="")

    dt = subparsers.add_parser("delete-task", help="Delete a task")
    dt.add_argument("--task-id", required=True)

    args = parser.parse_args()
    c = StockTaskClient(base_url=args.base_url)

    if args.command == "list-products":
        print(c.list_products(args.search, args.category_id, args.low_stock, args.sort_by, args.page, args.limit))
    elif args.command == "get-product":
        print(c.get_product(args.product_id))
    elif args.command == "list-categories":
        print(c.list_categories())
    elif args.command == "list-tasks":
        print(c.list_tasks())
    elif args.command == "create-task":
        print(c.create_task(args.title, args.description, args.priority, args.due_date))
    elif args.command == "delete-task":
        print(c.delete_task(args.task_id))
