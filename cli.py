# cli.py
import asyncio
import logging
import sys
from datetime import datetime
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from stocktask.browser import ProductBrowser
from stocktask.config import get_settings
from stocktask.errors import StockTaskError
from stocktask.models import Product, Task, TaskPriority, TaskStatus
from stocktask.query import SORT_KEYS, stock_status
from stocktask.services import create_services

console = Console()
session: PromptSession = PromptSession()

settings = get_settings()
product_service, task_service = create_services()
browser = ProductBrowser(page_size=settings.page_size)

status_message = "Ready"
task_cache: List[Task] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})

STOCK_STYLES = {"Out of Stock": "red", "Low Stock": "yellow", "In Stock": "green"}
STATUS_STYLES = {"pending": "yellow", "in-progress": "cyan", "completed": "green"}
PRIORITY_STYLES = {"low": "green", "medium": "yellow", "high": "red"}


# ---------------------------
# Display helpers
# ---------------------------
def format_price(price: float) -> str:
    return f"Rp{price:,.0f}".replace(",", ".")


def format_date(value: Optional[str]) -> str:
    if not value:
        return "-"
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%b %d, %Y")
    except ValueError:
        return value


def show_products():
    products = browser.page_items
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title=f"📦 Products ({browser.paginator.total_items})",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=14)
    table.add_column("Name", style="bold", width=24)
    table.add_column("Category", width=16)
    table.add_column("Price", justify="right", width=12)
    table.add_column("Stock", justify="right", width=10)
    table.add_column("Status", width=13)
    table.add_column("Added", width=13)

    for p in products:
        label = stock_status(p)
        table.add_row(
            p.id,
            p.name,
            browser.category_name(p.category_id),
            format_price(p.price),
            f"{p.stock_system} {p.unit}",
            f"[{STOCK_STYLES[label]}]{label}[/{STOCK_STYLES[label]}]",
            format_date(p.created_at),
        )
    console.print(table)
    show_page_bar()


def show_page_bar():
    pager = browser.paginator
    if pager.total_pages <= 1:
        return
    pages = " ".join(
        f"[reverse]{n}[/reverse]" if n == pager.current_page else str(n)
        for n in pager.visible_pages()
    )
    prev_mark = "‹" if pager.has_previous else "[dim]‹[/dim]"
    next_mark = "›" if pager.has_next else "[dim]›[/dim]"
    console.print(f"  {prev_mark} {pages} {next_mark}   page {pager.current_page} of {pager.total_pages}")


def show_filters():
    category = next((c.name for c in browser.categories if c.id == browser.category_id), browser.category_id)
    console.print(
        f"[dim]search:[/dim] {browser.search_text or '-'}  "
        f"[dim]category:[/dim] {category}  "
        f"[dim]sort:[/dim] {browser.sort_by}  "
        f"[dim]low stock only:[/dim] {'yes' if browser.low_stock_only else 'no'}"
    )


def show_tasks(tasks: List[Task]):
    if not tasks:
        console.print("[italic yellow]No tasks yet[/italic yellow]")
        return

    table = Table(title="📝 Tasks", box=box.ROUNDED, header_style="bold yellow", show_lines=True)
    table.add_column("ID", style="dim", width=14)
    table.add_column("Title", style="bold", width=28)
    table.add_column("Priority", width=9)
    table.add_column("Status", width=12)
    table.add_column("Due", width=13)

    for t in tasks:
        priority = t.priority.value
        status = t.status.value
        table.add_row(
            t.id,
            t.title,
            f"[{PRIORITY_STYLES[priority]}]{priority}[/{PRIORITY_STYLES[priority]}]",
            f"[{STATUS_STYLES[status]}]{status.replace('-', ' ')}[/{STATUS_STYLES[status]}]",
            format_date(t.due_date),
        )
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# Service wrapper
# ---------------------------
async def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Awaits fn(*args, **kwargs) behind a spinner.
    Service errors become a red status panel and a None result; the menu keeps running.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = await fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except StockTaskError as e:
        status_message = f"Error: {e}"
        console.print(show_status(f"Error: {e}", False))
        return None


async def reload_products(success_msg: Optional[str] = None) -> bool:
    products = await try_api(product_service.get_products, success_msg=success_msg)
    categories = await try_api(product_service.get_categories)
    if products is None or categories is None:
        return False
    browser.load(products, categories)
    return True


async def reload_tasks() -> List[Task]:
    global task_cache
    tasks = await try_api(task_service.get_tasks)
    if tasks is not None:
        task_cache = tasks
    return task_cache


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
async def ask(message: str, completer=None, default: str = "") -> str:
    return await session.prompt_async(f"{message} ", completer=completer, style=custom_style, default=default)


def task_completer():
    return WordCompleter([t.id for t in task_cache] + [t.title for t in task_cache], ignore_case=True)


def resolve_task_id(value: str) -> str:
    for t in task_cache:
        if value in (t.id, t.title):
            return t.id
    return value


async def ask_task_form(task: Optional[Task] = None) -> dict:
    priorities = WordCompleter([p.value for p in TaskPriority], ignore_case=True)
    statuses = WordCompleter([s.value for s in TaskStatus], ignore_case=True)
    return {
        "title": await ask("Title", default=task.title if task else ""),
        "description": await ask("Description", default=task.description if task else ""),
        "priority": await ask("Priority (low/medium/high)", priorities, default=task.priority.value if task else "medium"),
        "dueDate": await ask("Due date (YYYY-MM-DD)", default=task.due_date if task else ""),
        "status": await ask("Status", statuses, default=task.status.value if task else "pending"),
    }


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    mode = "mock data" if settings.mock_api else settings.api_base_url
    header.add_row(
        "📦 stocktask",
        "[bold blue]Inventory & Tasks[/bold blue]",
        f"[dim]{now} · {mode}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
async def menu():
    global status_message

    console.clear()
    console.print(create_header())
    await reload_products()

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 Show products", "9", "📝 List tasks"),
            ("2", "🔍 Search products", "10", "➕ Add task"),
            ("3", "🏷️ Filter by category", "11", "✏️ Edit task"),
            ("4", "↕️ Sort products", "12", "🔁 Toggle task status"),
            ("5", "⚠️ Toggle low stock only", "13", "🗑️ Delete task"),
            ("6", "› Next page", "14", "➕ Add product"),
            ("7", "‹ Previous page", "15", "🔄 Refresh"),
            ("8", "# Go to page", "q", "👋 Quit"),
        ]

        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = (await ask(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 16)] + ["q", "quit", "exit"])
        )).strip()

        if choice == "1":
            show_filters()
            show_products()

        elif choice == "2":
            browser.set_search(await ask("Search products", default=browser.search_text))
            show_filters()
            show_products()

        elif choice == "3":
            names = {c.name: c.id for c in browser.categories}
            picked = await ask("Category", WordCompleter(list(names), ignore_case=True, sentence=True))
            browser.select_category(names.get(picked, picked))
            show_filters()
            show_products()

        elif choice == "4":
            sort_by = Prompt.ask("Sort by", choices=list(SORT_KEYS), default=browser.sort_by)
            browser.set_sort(sort_by)
            show_products()

        elif choice == "5":
            browser.set_low_stock_only(not browser.low_stock_only)
            show_filters()
            show_products()

        elif choice in ("6", "7", "8"):
            pager = browser.paginator
            if choice == "6":
                moved = pager.next_page()
            elif choice == "7":
                moved = pager.previous_page()
            else:
                moved = pager.go_to_page(IntPrompt.ask("Page", default=pager.current_page))
            if not moved:
                console.print("[dim]No such page[/dim]")
            show_products()

        elif choice == "9":
            show_tasks(await reload_tasks())

        elif choice == "10":
            form = await ask_task_form()
            task = await try_api(task_service.create_task, form, success_msg="Task added successfully!")
            if task:
                show_tasks(await reload_tasks())

        elif choice == "11":
            await reload_tasks()
            task_id = resolve_task_id(await ask("Task", task_completer()))
            current = await try_api(task_service.get_task, task_id)
            if current:
                form = await ask_task_form(current)
                task = await try_api(task_service.update_task, task_id, form, success_msg="Task updated successfully!")
                if task:
                    show_tasks(await reload_tasks())

        elif choice == "12":
            await reload_tasks()
            task_id = resolve_task_id(await ask("Task", task_completer()))
            task = await try_api(task_service.toggle_status, task_id)
            if task:
                status_message = f"'{task.title}' is now {task.status.value}"
                show_tasks(await reload_tasks())

        elif choice == "13":
            await reload_tasks()
            task_id = resolve_task_id(await ask("Task", task_completer()))
            if Confirm.ask(f"[red]Delete task {task_id}?[/red]"):
                await try_api(task_service.delete_task, task_id, success_msg="Task deleted successfully!")
                show_tasks(await reload_tasks())

        elif choice == "14":
            names = {c.name: c.id for c in browser.categories[1:]}
            data = {
                "name": await ask("Product name"),
                "description": await ask("Description"),
                "price": Prompt.ask("💰 Price", default="0"),
                "stockSystem": IntPrompt.ask("📦 Stock", default=0),
                "minStock": IntPrompt.ask("Minimum stock", default=0),
                "unit": await ask("Unit", default="pcs"),
            }
            picked = await ask("Category", WordCompleter(list(names), ignore_case=True, sentence=True))
            data["categoryId"] = names.get(picked) or None
            product: Optional[Product] = await try_api(
                product_service.create_product, data, success_msg=f"Product '{data['name']}' added"
            )
            if product:
                await reload_products()

        elif choice == "15":
            if await reload_products(success_msg="Products refreshed"):
                show_products()

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
                return

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level, filename="stocktask-cli.log")
    try:
        asyncio.run(menu())
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n\n[bold red]Unexpected error: {e}[/bold red]")
        sys.exit(1)
