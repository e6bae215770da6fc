#!/usr/bin/env python
from sdk.client import StockTaskClient
from stocktask.errors import NotFound


def main():
    c = StockTaskClient(base_url="http://127.0.0.1:8085")

    # -----------------------------
    # Reset everything for demo
    # -----------------------------
    print("Resetting store...")
    c.reset()

    # -----------------------------
    # Browse products
    # -----------------------------
    print("\nCategories...")
    print(c.list_categories())

    print("\nCheapest stationery first...")
    print(c.list_products(category_id="2", sort_by="price-asc"))

    print("\nSearching for 'cable'...")
    print(c.list_products(search="cable"))

    print("\nLow stock products...")
    print(c.list_products(low_stock=True, sort_by="name"))

    print("\nNewest products, page 2 of 6 per page...")
    print(c.list_products(sort_by="latest", page=2, limit=6))

    # -----------------------------
    # Register a product
    # -----------------------------
    print("\nAdding a product...")
    product = c.create_product("Stapler", 38000, stock_system=12, min_stock=4, unit="pcs", category_id="2")
    print(product)
    print(c.update_product(product["id"], stockSystem=3))

    # -----------------------------
    # Tasks
    # -----------------------------
    print("\nCreating a task...")
    task = c.create_task("Restock staplers", "Order from the usual supplier", "high", "2024-07-30")
    print(task)

    for status in ("in-progress", "completed"):
        print(c.update_task(task["id"], status=status))

    print("\nDeleting it...")
    print(c.delete_task(task["id"]))
    try:
        c.get_task(task["id"])
    except NotFound as e:
        print(f"gone: {e}")

    print("\nAll tasks...")
    print(c.list_tasks())


if __name__ == "__main__":
    main()
