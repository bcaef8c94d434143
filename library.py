import copy
import logging
from datetime import datetime
from typing import List, Optional, Dict, Any, Sequence

from database import RecordStore
from subscription import subscription_details

logger = logging.getLogger(__name__)

BOOK_FIELDS = ("id", "title", "author", "year")
USER_FIELDS = ("id", "name", "email", "subscriptionType", "subscriptionDate")


class LibraryError(Exception):
    status_code = 500


class MissingFieldError(LibraryError, ValueError):
    status_code = 400


class RecordExistsError(LibraryError, ValueError):
    status_code = 409


class RecordNotFoundError(LibraryError, LookupError):
    status_code = 404


class DanglingReferenceError(RecordNotFoundError):
    """A user's ``issuedBook`` points at a book that is not in the store."""
    status_code = 500


class Library:
    """Book and user records over an injected ``RecordStore``."""

    def __init__(self, store: Optional[RecordStore] = None) -> None:
        self.store = store if store is not None else RecordStore()

    # ------------------------- Books ------------------------- #
    def list_books(self) -> List[Dict[str, Any]]:
        return self._snapshot("books")

    def find_book(self, book_id: str) -> Dict[str, Any]:
        return self._find("books", "Book", book_id)

    def add_book(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._add("books", "Book", BOOK_FIELDS, payload)

    def update_book(self, book_id: str, data: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return self._update("books", "Book", book_id, data)

    def remove_book(self, book_id: str) -> List[Dict[str, Any]]:
        return self._remove("books", "Book", book_id)

    def issued_books(self) -> List[Dict[str, Any]]:
        """Books currently held by a user, annotated with who holds them.

        The issuer fields are written onto the stored book records; the
        returned list holds copies.
        """
        issued = []
        with self.store.lock:
            for user in self.store.users:
                book_id = user.get("issuedBook")
                if not book_id:
                    continue
                book = self.store.find("books", book_id)
                if book is None:
                    raise DanglingReferenceError(
                        f"Issued book {book_id} for user {user.get('id')} does not exist"
                    )
                book["issuedBy"] = user.get("name")
                book["issuedDate"] = user.get("issuedDate")
                book["returnDate"] = user.get("returnDate")
                issued.append(copy.deepcopy(book))

        if not issued:
            raise RecordNotFoundError("No books have been issued yet")
        return issued

    # ------------------------- Users ------------------------- #
    def list_users(self) -> List[Dict[str, Any]]:
        return self._snapshot("users")

    def find_user(self, user_id: str) -> Dict[str, Any]:
        return self._find("users", "User", user_id)

    def add_user(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._add("users", "User", USER_FIELDS, payload)

    def update_user(self, user_id: str, data: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return self._update("users", "User", user_id, data)

    def remove_user(self, user_id: str) -> List[Dict[str, Any]]:
        return self._remove("users", "User", user_id)

    def subscription_details(self, user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        user = self.find_user(user_id)
        return subscription_details(user, now=now)

    def get_statistics(self) -> Dict[str, int]:
        with self.store.lock:
            return {"books": len(self.store.books), "users": len(self.store.users)}

    # ------------------------- Shared record operations ------------------------- #
    # Everything handed back to callers is a copy taken under the lock
    def _snapshot(self, collection: str) -> List[Dict[str, Any]]:
        with self.store.lock:
            return copy.deepcopy(self.store.collection(collection))

    def _find(self, collection: str, label: str, record_id: str) -> Dict[str, Any]:
        with self.store.lock:
            record = self.store.find(collection, record_id)
            if record is None:
                raise RecordNotFoundError(f"{label} not found for id: {record_id}")
            return copy.deepcopy(record)

    def _add(self, collection: str, label: str, fields: Sequence[str], payload: Dict[str, Any]) -> Dict[str, Any]:
        if not all(payload.get(name) for name in fields):
            raise MissingFieldError(f"All fields are required: {', '.join(fields)}")

        record_id = payload["id"]
        with self.store.lock:
            if self.store.find(collection, record_id) is not None:
                raise RecordExistsError(f"{label} already exists with id: {record_id}")
            # Only the known fields are kept
            record = {name: payload[name] for name in fields}
            self.store.collection(collection).append(record)
            created = copy.deepcopy(record)

        logger.info(f"{label} {record_id} created")
        return created

    def _update(self, collection: str, label: str, record_id: str,
                data: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        # An empty dict is a valid no-op update
        if data is None:
            raise MissingFieldError("Data field is required in the request body")

        with self.store.lock:
            index = self.store.index_of(collection, record_id)
            if index < 0:
                raise RecordNotFoundError(f"{label} not found for id: {record_id}")
            records = self.store.collection(collection)
            records[index] = {**records[index], **data}
            updated = copy.deepcopy(records)

        logger.info(f"{label} {record_id} updated: {sorted(data)}")
        return updated

    def _remove(self, collection: str, label: str, record_id: str) -> List[Dict[str, Any]]:
        with self.store.lock:
            index = self.store.index_of(collection, record_id)
            if index < 0:
                raise RecordNotFoundError(f"{label} not found for id: {record_id}")
            records = self.store.collection(collection)
            del records[index]
            remaining = copy.deepcopy(records)

        logger.info(f"{label} {record_id} deleted")
        return remaining
