"""Authentication routes."""

from fastapi import APIRouter, Depends

from ...auth.identity_store import IdentityStore
from ...dependencies import get_identity_store
from ...schemas.users import LoginRequest, LoginResult

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResult)
async def login(
    body: LoginRequest,
    store: IdentityStore = Depends(get_identity_store),
):
    """Check email and password; returns the user and its staff profile, if any.

    Unknown email and wrong password produce the same 401 response.
    """
    return await store.login(body.email, body.password)
