import json
from pathlib import Path

import pytest

from database import RecordStore, load_records

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def write_json(path, document):
    path.write_text(json.dumps(document), encoding="utf-8")
    return str(path)


def test_load_records(tmp_path):
    path = write_json(tmp_path / "books.json", {"books": [{"id": "1", "title": "T", "author": "A", "year": "1"}]})
    assert load_records(path, "books") == [{"id": "1", "title": "T", "author": "A", "year": "1"}]

def test_load_records_missing_file(tmp_path):
    assert load_records(str(tmp_path / "missing.json"), "books") == []

def test_load_records_malformed(tmp_path):
    path = tmp_path / "users.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="Error parsing"):
        load_records(str(path), "users")

def test_load_records_wrong_key(tmp_path):
    path = write_json(tmp_path / "users.json", {"people": []})
    with pytest.raises(ValueError, match="'users' array"):
        load_records(path, "users")

def test_from_files(tmp_path):
    books = write_json(tmp_path / "books.json", {"books": [{"id": "1"}, {"id": "2"}]})
    users = write_json(tmp_path / "users.json", {"users": [{"id": "u1"}]})
    store = RecordStore.from_files(books, users)
    assert [b["id"] for b in store.books] == ["1", "2"]
    assert store.users == [{"id": "u1"}]

def test_seed_files_load():
    store = RecordStore.from_files(str(DATA_DIR / "books.json"), str(DATA_DIR / "users.json"))
    assert store.books
    assert all(user.get("subscriptionType") for user in store.users)

def test_find_and_index_of(store):
    assert store.index_of("books", "2") == 1
    assert store.index_of("books", "nope") == -1
    assert store.find("users", "1")["name"] == "Ada Lovelace"
    assert store.find("users", "nope") is None

def test_unknown_collection(store):
    with pytest.raises(KeyError):
        store.collection("authors")

def test_stores_are_independent():
    first, second = RecordStore(), RecordStore()
    first.books.append({"id": "1"})
    assert second.books == []
