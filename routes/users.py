"""
Users API routes.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from library import Library, LibraryError
from responses import success, failure
from routes import get_library
from routes.books import UpdateModel
from subscription import InvalidDateError

router = APIRouter()


class UserCreateModel(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    subscriptionType: Optional[str] = None
    subscriptionDate: Optional[str] = None


@router.get("")
def list_users(library: Library = Depends(get_library)):
    """Get all users."""
    return success(library.list_users())


@router.get("/subscription-details/{user_id}")
def get_subscription_details(user_id: str, library: Library = Depends(get_library)):
    """Subscription days left, return status and fine for a user."""
    try:
        return success(library.subscription_details(user_id))
    except InvalidDateError as e:
        return failure(400, str(e))
    except LibraryError as e:
        return failure(e.status_code, str(e))


@router.get("/{user_id}")
def get_user(user_id: str, library: Library = Depends(get_library)):
    """Get a user by id."""
    try:
        return success(library.find_user(user_id))
    except LibraryError as e:
        return failure(e.status_code, str(e))


@router.post("")
def create_user(payload: Optional[UserCreateModel] = None, library: Library = Depends(get_library)):
    """Create/register a new user."""
    fields = payload.model_dump() if payload else {}
    try:
        user = library.add_user(fields)
    except LibraryError as e:
        return failure(e.status_code, str(e))
    return success(user, message="User created successfully", status_code=201)


@router.put("/{user_id}")
def update_user(user_id: str, payload: Optional[UpdateModel] = None, library: Library = Depends(get_library)):
    """Update a user by id; the response carries the whole collection."""
    try:
        users = library.update_user(user_id, payload.data if payload else None)
    except LibraryError as e:
        return failure(e.status_code, str(e))
    return success(users, message="User updated successfully")


@router.delete("/{user_id}")
def delete_user(user_id: str, library: Library = Depends(get_library)):
    """Delete a user by id; the response carries the remaining users."""
    try:
        users = library.remove_user(user_id)
    except LibraryError as e:
        return failure(e.status_code, str(e))
    return success(users, message="User deleted successfully")
