import os
import subprocess
import sys
from typing import Optional

import typer

from config import settings
from database import RecordStore
from library import Library, LibraryError
from subscription import InvalidDateError
from ui_helpers import (
    set_output_mode,
    print_records,
    print_details,
    BOOK_COLUMNS,
    USER_COLUMNS,
    ISSUED_COLUMNS,
)

APP_NAME = "Library CLI"

# --- Typer CLI Application ---
app = typer.Typer(help=APP_NAME)


def get_library() -> Library:
    """A fresh ``Library`` over the configured seed files."""
    return Library(RecordStore.from_files())


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global CLI options (e.g. output mode)."""
    if output:
        set_output_mode(output)

@app.command("books")
def cli_books():
    """List every book in the seed data."""
    print_records(get_library().list_books(), BOOK_COLUMNS, "📚 Books", "No books in library.")

@app.command("users")
def cli_users():
    """List every user in the seed data."""
    print_records(get_library().list_users(), USER_COLUMNS, "👤 Users", "No users in library.")

@app.command("issued")
def cli_issued():
    """List issued books with the user holding each one."""
    try:
        issued = get_library().issued_books()
    except LibraryError as e:
        print(str(e))
        return
    print_records(issued, ISSUED_COLUMNS, "📖 Issued Books", "No books have been issued yet")

@app.command("subscription")
def cli_subscription(user_id: str):
    """Show subscription days left, return status and fine for a user."""
    try:
        details = get_library().subscription_details(user_id)
    except (LibraryError, InvalidDateError) as e:
        print(str(e))
        return
    print_details(details, f"Subscription of {details.get('name', user_id)}")

@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: API_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", help="Port (default: API_PORT)"),
):
    """Start the API with Uvicorn."""
    host = host or settings.api_host
    port = int(port or settings.api_port)
    print(f"Starting API on http://{host}:{port}/")
    args = [
        sys.executable,
        "-m", "uvicorn",
        "api:app",
        "--host", host,
        "--port", str(port),
    ]
    # api.py reads API_HOST/API_PORT for its startup log
    env = {**os.environ, "API_HOST": host, "API_PORT": str(port)}
    try:
        subprocess.run(args, env=env, check=False)
    except KeyboardInterrupt:
        print("Server stopped.")

if __name__ == "__main__":
    app()
