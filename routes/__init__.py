"""Library App - Resource Routers

- books: CRUD and issued-books listing, mounted at /books
- users: CRUD and subscription details, mounted at /users
"""
from fastapi import Request

from library import Library


def get_library(request: Request) -> Library:
    """Dependency returning the ``Library`` owned by the running app."""
    return request.app.state.library
