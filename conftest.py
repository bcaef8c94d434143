import copy

import pytest
from fastapi.testclient import TestClient

from api import create_app
from database import RecordStore
from library import Library

SAMPLE_BOOKS = [
    {"id": "1", "title": "Dune", "author": "Frank Herbert", "year": "1965"},
    {"id": "2", "title": "Neuromancer", "author": "William Gibson", "year": "1984"},
    {"id": "3", "title": "Hyperion", "author": "Dan Simmons", "year": "1989"},
]

SAMPLE_USERS = [
    {
        "id": "1",
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "subscriptionType": "Premium",
        "subscriptionDate": "2026-01-15",
        "issuedBook": "2",
        "issuedDate": "2026-09-20",
        "returnDate": "2026-10-20",
    },
    {
        "id": "2",
        "name": "Grace Hopper",
        "email": "grace@example.com",
        "subscriptionType": "Standard",
        "subscriptionDate": "2026-06-10",
    },
]


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # CLI output mode is kept in the environment; reset it for every test
    monkeypatch.delenv("LIB_CLI_OUTPUT", raising=False)


@pytest.fixture
def store():
    # Each test gets its own copy so mutations never leak between tests
    return RecordStore(books=copy.deepcopy(SAMPLE_BOOKS), users=copy.deepcopy(SAMPLE_USERS))


@pytest.fixture
def lib(store):
    return Library(store)


@pytest.fixture
def client(store):
    return TestClient(create_app(store))
