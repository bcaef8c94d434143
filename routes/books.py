"""
Books API routes.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from library import Library, LibraryError, DanglingReferenceError
from responses import success, failure
from routes import get_library

router = APIRouter()
logger = logging.getLogger(__name__)


# --- Models ---
class BookCreateModel(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    year: Optional[str] = None


class UpdateModel(BaseModel):
    data: Optional[Dict[str, Any]] = None


# --- API Endpoints ---
@router.get("")
def list_books(library: Library = Depends(get_library)):
    """Get all books."""
    return success(library.list_books())


# Registered before /{book_id} so the literal path always wins
@router.get("/issued-books/for-users")
def list_issued_books(library: Library = Depends(get_library)):
    """Get every issued book along with the user holding it."""
    try:
        return success(library.issued_books())
    except DanglingReferenceError as e:
        logger.error(f"Issued books listing failed: {e}")
        return failure(e.status_code, str(e))
    except LibraryError as e:
        return failure(e.status_code, str(e))


@router.get("/{book_id}")
def get_book(book_id: str, library: Library = Depends(get_library)):
    """Get a book by id."""
    try:
        return success(library.find_book(book_id))
    except LibraryError as e:
        return failure(e.status_code, str(e))


@router.post("")
def create_book(payload: Optional[BookCreateModel] = None, library: Library = Depends(get_library)):
    """Create/register a new book."""
    fields = payload.model_dump() if payload else {}
    try:
        book = library.add_book(fields)
    except LibraryError as e:
        return failure(e.status_code, str(e))
    return success(book, message="Book created successfully", status_code=201)


@router.put("/{book_id}")
def update_book(book_id: str, payload: Optional[UpdateModel] = None, library: Library = Depends(get_library)):
    """Update a book by id; the response carries the whole collection."""
    try:
        books = library.update_book(book_id, payload.data if payload else None)
    except LibraryError as e:
        return failure(e.status_code, str(e))
    return success(books, message="Book updated successfully")


@router.delete("/{book_id}")
def delete_book(book_id: str, library: Library = Depends(get_library)):
    """Delete a book by id; the response carries the remaining books."""
    try:
        books = library.remove_book(book_id)
    except LibraryError as e:
        return failure(e.status_code, str(e))
    return success(books, message="Book deleted successfully")
