# routers/users.py
"""
User (role record) API routes. Only super admins manage users; everyone can
read their own record.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from dependencies import get_store, require_super_admin, require_user
from schemas import UserCreate, UserRead, UserUpdate
from services.store import EntityStore

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserRead, summary="Get the current user")
def get_me(user: UserRead = Depends(require_user)):
     return user


@router.get("", response_model=List[UserRead], summary="List users")
def list_users(
     store: EntityStore = Depends(get_store),
     admin: UserRead = Depends(require_super_admin)
):
     return store.users.get_all()


@router.get("/{user_id}", response_model=UserRead, summary="Get a user")
def get_user(
     user_id: str,
     store: EntityStore = Depends(get_store),
     admin: UserRead = Depends(require_super_admin)
):
     return store.users.require(user_id)


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED, summary="Create a user")
def create_user(
     user_data: UserCreate,
     store: EntityStore = Depends(get_store),
     admin: UserRead = Depends(require_super_admin)
):
     user_id = store.users.create(user_data)
     return store.users.require(user_id)


@router.put("/{user_id}", response_model=UserRead, summary="Update a user")
def update_user(
     user_id: str,
     user_data: UserUpdate,
     store: EntityStore = Depends(get_store),
     admin: UserRead = Depends(require_super_admin)
):
     store.users.update(user_id, user_data)
     return store.users.require(user_id)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a user")
def delete_user(
     user_id: str,
     store: EntityStore = Depends(get_store),
     admin: UserRead = Depends(require_super_admin)
):
     store.users.delete(user_id)
