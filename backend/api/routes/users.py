"""User management routes: CRUD and password reset."""

from fastapi import APIRouter, Depends, status

from ...auth.identity_store import IdentityStore
from ...dependencies import get_identity_store
from ...schemas.users import PasswordReset, UserCreate, UserRead, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/", response_model=list[UserRead])
async def list_users(store: IdentityStore = Depends(get_identity_store)):
    """List all users (credential hashes are never included)."""
    return await store.list_users()


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    store: IdentityStore = Depends(get_identity_store),
):
    return await store.create_user(body.email, body.password, body.role)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    body: UserUpdate,
    store: IdentityStore = Depends(get_identity_store),
):
    """Partially update a user. Omitted fields are left unchanged."""
    return await store.update_user(user_id, body)


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    store: IdentityStore = Depends(get_identity_store),
):
    """Delete a user and its staff profile. The last admin cannot be deleted."""
    await store.delete_user(user_id)
    return {"success": True}


@router.post("/{user_id}/reset-password", response_model=UserRead)
async def reset_password(
    user_id: int,
    body: PasswordReset,
    store: IdentityStore = Depends(get_identity_store),
):
    return await store.reset_credential(user_id, body.new_password)
