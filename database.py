import json
import logging
import os
from threading import RLock
from typing import List, Dict, Any, Optional

from config import settings

logger = logging.getLogger(__name__)

COLLECTIONS = ("books", "users")


def load_records(path: str, key: str) -> List[Dict[str, Any]]:
    """Read a seed document of the form ``{"<key>": [...]}``.

    A missing file yields an empty collection so the API can still start.
    """
    if not os.path.exists(path):
        logger.warning(f"Seed file {path} not found, starting with no {key}")
        return []

    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Error parsing {path}: {e}") from e

    records = document.get(key) if isinstance(document, dict) else None
    if not isinstance(records, list):
        raise ValueError(f"{path} must hold a '{key}' array at the top level")
    return records


class RecordStore:
    """In-memory holder of the ``books`` and ``users`` sequences.

    The lists are mutated in place and live only as long as the process.
    Callers hold ``lock`` around any find-then-mutate sequence.
    """

    def __init__(self, books: Optional[List[Dict[str, Any]]] = None,
                 users: Optional[List[Dict[str, Any]]] = None) -> None:
        self.books: List[Dict[str, Any]] = books if books is not None else []
        self.users: List[Dict[str, Any]] = users if users is not None else []
        self.lock = RLock()

    @classmethod
    def from_files(cls, books_file: Optional[str] = None, users_file: Optional[str] = None) -> "RecordStore":
        books_file = books_file or settings.books_data_file
        users_file = users_file or settings.users_data_file
        store = cls(
            books=load_records(books_file, "books"),
            users=load_records(users_file, "users"),
        )
        logger.info(f"Loaded {len(store.books)} books and {len(store.users)} users")
        return store

    def collection(self, name: str) -> List[Dict[str, Any]]:
        if name not in COLLECTIONS:
            raise KeyError(f"Unknown collection: {name}")
        return getattr(self, name)

    def index_of(self, name: str, record_id: Any) -> int:
        """Position of the first record with ``record_id``, or -1."""
        for index, record in enumerate(self.collection(name)):
            if record.get("id") == record_id:
                return index
        return -1

    def find(self, name: str, record_id: Any) -> Optional[Dict[str, Any]]:
        index = self.index_of(name, record_id)
        if index < 0:
            return None
        return self.collection(name)[index]
