import os
import json
from typing import List, Any, Dict, Sequence
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

BOOK_COLUMNS = ("id", "title", "author", "year")
USER_COLUMNS = ("id", "name", "email", "subscriptionType", "subscriptionDate")
ISSUED_COLUMNS = ("id", "title", "issuedBy", "issuedDate", "returnDate")

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    # Unknown values keep the current mode
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def print_records(records: List[Dict[str, Any]], columns: Sequence[str], title: str, empty_message: str) -> None:
    """Print a record list in the current output mode.
    - plain: one 'id - field | field' line per record, or ``empty_message``
    - json: JSON array restricted to ``columns``
    - rich: Rich table
    """
    mode = get_output_mode()

    if not records:
        print(empty_message)
        return

    if mode == "json":
        payload = [{c: r.get(c) for c in columns} for r in records]
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title=title, show_lines=True, header_style="bold cyan")
        for column in columns:
            table.add_column(column, style="magenta" if column == "id" else "white", no_wrap=column == "id")
        for r in records:
            table.add_row(*("" if r.get(c) is None else str(r.get(c)) for c in columns))
        _console.print(table)
    else:
        for r in records:
            rest = " | ".join("" if r.get(c) is None else str(r.get(c)) for c in columns[1:])
            print(f"{r.get(columns[0], '')} - {rest}")

def print_details(details: Dict[str, Any], title: str) -> None:
    """Print a single record as key/value lines, a JSON object or a Panel."""
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps(details, ensure_ascii=False))
    elif mode == "rich":
        content = "\n".join(f"[bold]{k}:[/] {v}" for k, v in details.items())
        _console.print(Panel.fit(content, title=title, border_style="blue"))
    else:
        for key, value in details.items():
            print(f"{key}: {value}")
