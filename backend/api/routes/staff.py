"""Staff profile routes."""

from typing import Optional

from fastapi import APIRouter, Depends, status

from ...auth.identity_store import IdentityStore
from ...dependencies import get_identity_store
from ...schemas.staff import StaffProfileCreate, StaffProfileRead, StaffProfileUpdate

router = APIRouter(prefix="/staff", tags=["staff"])


@router.get("/", response_model=list[StaffProfileRead])
async def list_staff(store: IdentityStore = Depends(get_identity_store)):
    return await store.list_staff_profiles()


@router.post("/", response_model=StaffProfileRead, status_code=status.HTTP_201_CREATED)
async def create_staff(
    body: StaffProfileCreate,
    store: IdentityStore = Depends(get_identity_store),
):
    """Create the staff profile for an existing user (one per user)."""
    return await store.create_staff_profile(
        user_id=body.user_id,
        name=body.name,
        email=body.email,
        position=body.position,
        phone_number=body.phone_number,
    )


@router.get("/{profile_id}", response_model=Optional[StaffProfileRead])
async def get_staff(
    profile_id: int,
    store: IdentityStore = Depends(get_identity_store),
):
    """Fetch one profile. A missing profile is a normal ``null`` result, not a 404."""
    return await store.get_staff_profile_by_id(profile_id)


@router.patch("/{profile_id}", response_model=StaffProfileRead)
async def update_staff(
    profile_id: int,
    body: StaffProfileUpdate,
    store: IdentityStore = Depends(get_identity_store),
):
    """Partial update. Send ``phone_number: null`` to clear the phone number."""
    return await store.update_staff_profile(profile_id, body)


@router.delete("/{profile_id}")
async def delete_staff(
    profile_id: int,
    store: IdentityStore = Depends(get_identity_store),
):
    """Delete the profile only; the linked user account is kept."""
    await store.delete_staff_profile(profile_id)
    return {"success": True}
