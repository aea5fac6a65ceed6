"""FastAPI dependency injection providers."""

from fastapi import Depends

from .auth.credentials import CredentialManager
from .auth.identity_store import IdentityStore
from .config import OrphanageConfig, get_config
from .database import get_session, get_session_factory

_config_instance: OrphanageConfig | None = None
_identity_store: IdentityStore | None = None


def get_app_config() -> OrphanageConfig:
    """Get the application config singleton."""
    global _config_instance
    if _config_instance is None:
        _config_instance = get_config()
    return _config_instance


async def get_db(config: OrphanageConfig = Depends(get_app_config)):
    """Get an async database session."""
    async for session in get_session(config):
        yield session


def get_identity_store() -> IdentityStore:
    """Get the identity store singleton, wired to the configured database."""
    global _identity_store
    if _identity_store is None:
        config = get_app_config()
        _identity_store = IdentityStore(
            db_session_factory=get_session_factory(config),
            credentials=CredentialManager(rounds=config.bcrypt_rounds),
        )
    return _identity_store
