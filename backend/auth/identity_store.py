"""Identity Store: users, staff profiles, and the invariants between them.

Rules enforced here:

* user emails are unique (exact, case-sensitive match);
* a user has at most one staff profile;
* the last remaining admin cannot be deleted;
* deleting a user removes its staff profile in the same transaction,
  deleting a staff profile never touches the user.

Every check that guards a write runs in the same transaction as the write.
Unique constraints in the schema back up the checks, and an
``IntegrityError`` from a lost race maps to the same business failure.
"""

from typing import Any, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError

from ..models.base import utcnow
from ..models.staff_profile import StaffProfile
from ..models.user import User, UserRole
from ..schemas.staff import StaffProfileRead, StaffProfileUpdate
from ..schemas.users import LoginResult, UserRead, UserUpdate
from ..utils.logging import get_logger
from .credentials import CredentialManager
from .errors import (
    DuplicateEmail,
    InvalidCredentials,
    LastAdminProtected,
    NotFound,
    ProfileAlreadyExists,
    UserNotFound,
)

logger = get_logger("auth.identity_store")


class IdentityStore:
    """CRUD-with-invariants over User and StaffProfile records."""

    def __init__(self, db_session_factory=None, credentials: Optional[CredentialManager] = None):
        self._db_session_factory = db_session_factory
        self._credentials = credentials or CredentialManager()
        self._dummy_hash = self._placeholder_hash(self._credentials)

    def set_db_session_factory(self, factory) -> None:
        self._db_session_factory = factory

    def set_credentials(self, credentials: CredentialManager) -> None:
        self._credentials = credentials
        self._dummy_hash = self._placeholder_hash(credentials)

    # --- Helpers ---

    @staticmethod
    async def _get_user(session, user_id: int, for_update: bool = False) -> User:
        query = select(User).where(User.id == user_id)
        if for_update:
            query = query.with_for_update()
        user = (await session.execute(query)).scalar_one_or_none()
        if user is None:
            raise NotFound(f"User with id {user_id} not found")
        return user

    @staticmethod
    async def _get_profile(session, profile_id: int) -> StaffProfile:
        profile = (await session.execute(
            select(StaffProfile).where(StaffProfile.id == profile_id)
        )).scalar_one_or_none()
        if profile is None:
            raise NotFound(f"Staff profile with id {profile_id} not found")
        return profile

    @staticmethod
    async def _email_taken(session, email: str, exclude_id: Optional[int] = None) -> bool:
        query = select(User.id).where(User.email == email)
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        return (await session.execute(query)).first() is not None

    @staticmethod
    def _placeholder_hash(credentials: CredentialManager) -> str:
        return credentials.hash("orphanage-admin-placeholder")

    def _burn_verify(self, password: str) -> None:
        """Spend one verification on unknown emails so both failures cost the same."""
        self._credentials.verify(password, self._dummy_hash)

    # --- Users ---

    async def create_user(self, email: str, password: str, role: UserRole | str) -> UserRead:
        """Create a login account. Raises DuplicateEmail if the email is taken."""
        role = UserRole(role)
        password_hash = self._credentials.hash(password)
        now = utcnow()

        async with self._db_session_factory() as session:
            try:
                async with session.begin():
                    if await self._email_taken(session, email):
                        raise DuplicateEmail()
                    user = User(
                        email=email,
                        password_hash=password_hash,
                        role=role.value,
                        created_at=now,
                        updated_at=now,
                    )
                    session.add(user)
            except IntegrityError:
                raise DuplicateEmail() from None
            await session.refresh(user)
            result = UserRead.model_validate(user)

        logger.info("user_created", user_id=result.id, role=role.value)
        return result

    async def login(self, email: str, password: str) -> LoginResult:
        """Authenticate by exact email match and return the user with its profile."""
        async with self._db_session_factory() as session:
            user = (await session.execute(
                select(User).where(User.email == email)
            )).scalar_one_or_none()

            if user is None:
                self._burn_verify(password)
                logger.info("login_failed", email=email)
                raise InvalidCredentials()
            if not self._credentials.verify(password, user.password_hash):
                logger.info("login_failed", email=email)
                raise InvalidCredentials()

            if self._credentials.needs_rehash(user.password_hash):
                user.password_hash = self._credentials.hash(password)
                user.updated_at = utcnow()
                await session.commit()
                logger.info("credential_rehashed", user_id=user.id)

            profile = (await session.execute(
                select(StaffProfile).where(StaffProfile.user_id == user.id)
            )).scalar_one_or_none()

            result = LoginResult(
                user=UserRead.model_validate(user),
                staff_profile=StaffProfileRead.model_validate(profile) if profile else None,
            )

        logger.info("login_succeeded", user_id=result.user.id, role=result.user.role.value)
        return result

    async def update_user(self, user_id: int, changes: UserUpdate | dict[str, Any]) -> UserRead:
        """Apply a partial update. Omitted fields keep their stored value."""
        if isinstance(changes, dict):
            changes = UserUpdate.model_validate(changes)
        fields = changes.model_dump(exclude_unset=True)
        password = fields.pop("password", None)
        new_hash = self._credentials.hash(password) if password is not None else None

        async with self._db_session_factory() as session:
            try:
                async with session.begin():
                    user = await self._get_user(session, user_id)
                    email = fields.get("email")
                    if email is not None and email != user.email:
                        if await self._email_taken(session, email, exclude_id=user_id):
                            raise DuplicateEmail()
                        user.email = email
                    if fields.get("role") is not None:
                        user.role = UserRole(fields["role"]).value
                    if new_hash is not None:
                        user.password_hash = new_hash
                    user.updated_at = utcnow()
            except IntegrityError:
                raise DuplicateEmail() from None
            await session.refresh(user)
            result = UserRead.model_validate(user)

        logger.info(
            "user_updated",
            user_id=user_id,
            fields=sorted(list(fields) + (["password"] if new_hash else [])),
        )
        return result

    async def delete_user(self, user_id: int) -> None:
        """Delete a user and its staff profile. Refuses to remove the last admin."""
        async with self._db_session_factory() as session:
            async with session.begin():
                user = await self._get_user(session, user_id, for_update=True)

                if user.role == UserRole.ADMIN.value:
                    admin_ids = (await session.execute(
                        select(User.id).where(User.role == UserRole.ADMIN.value).with_for_update()
                    )).scalars().all()
                    if len(admin_ids) <= 1:
                        logger.warning("last_admin_protected", user_id=user_id)
                        raise LastAdminProtected()

                removed_profiles = (await session.execute(
                    delete(StaffProfile).where(StaffProfile.user_id == user_id)
                )).rowcount

                # The admin count is re-evaluated by the DELETE itself
                admin_count = (
                    select(func.count(User.id))
                    .where(User.role == UserRole.ADMIN.value)
                    .scalar_subquery()
                )
                deleted = (await session.execute(
                    delete(User).where(
                        User.id == user_id,
                        or_(User.role != UserRole.ADMIN.value, admin_count > 1),
                    )
                )).rowcount
                if deleted == 0:
                    logger.warning("last_admin_protected", user_id=user_id)
                    raise LastAdminProtected()

        logger.info("user_deleted", user_id=user_id, staff_profiles_removed=removed_profiles)

    async def reset_credential(self, user_id: int, new_password: str) -> UserRead:
        """Replace a user's password hash, leaving email and role untouched."""
        new_hash = self._credentials.hash(new_password)

        async with self._db_session_factory() as session:
            async with session.begin():
                user = await self._get_user(session, user_id)
                user.password_hash = new_hash
                user.updated_at = utcnow()
            await session.refresh(user)
            result = UserRead.model_validate(user)

        logger.info("credential_reset", user_id=user_id)
        return result

    async def list_users(self) -> list[UserRead]:
        """All users, without credential hashes, ordered by id."""
        async with self._db_session_factory() as session:
            rows = (await session.execute(select(User).order_by(User.id))).scalars().all()
            return [UserRead.model_validate(u) for u in rows]

    async def count_users(self) -> int:
        async with self._db_session_factory() as session:
            return (await session.execute(select(func.count(User.id)))).scalar_one()

    async def ensure_bootstrap_admin(self, email: str, password: str) -> Optional[UserRead]:
        """Create an admin when no users exist yet. Returns it, or None if skipped."""
        if await self.count_users() > 0:
            return None
        try:
            admin = await self.create_user(email, password, UserRole.ADMIN)
        except DuplicateEmail:
            # Another worker bootstrapped first
            return None
        logger.info("bootstrap_admin_created", user_id=admin.id)
        return admin

    # --- Staff profiles ---

    async def create_staff_profile(
        self,
        user_id: int,
        name: str,
        email: str,
        position: str,
        phone_number: Optional[str] = None,
    ) -> StaffProfileRead:
        """Attach a staff profile to an existing user (at most one per user)."""
        now = utcnow()

        async with self._db_session_factory() as session:
            try:
                async with session.begin():
                    owner = (await session.execute(
                        select(User.id).where(User.id == user_id).with_for_update()
                    )).first()
                    if owner is None:
                        raise UserNotFound(f"User with ID {user_id} not found")

                    existing = (await session.execute(
                        select(StaffProfile.id).where(StaffProfile.user_id == user_id)
                    )).first()
                    if existing is not None:
                        raise ProfileAlreadyExists(
                            f"User with ID {user_id} already has a staff profile"
                        )

                    profile = StaffProfile(
                        user_id=user_id,
                        name=name,
                        email=email,
                        phone_number=phone_number,
                        position=position,
                        created_at=now,
                        updated_at=now,
                    )
                    session.add(profile)
            except IntegrityError:
                # Lost a race: either a profile appeared or the user vanished
                if (await session.execute(select(User.id).where(User.id == user_id))).first():
                    raise ProfileAlreadyExists(
                        f"User with ID {user_id} already has a staff profile"
                    ) from None
                raise UserNotFound(f"User with ID {user_id} not found") from None
            await session.refresh(profile)
            result = StaffProfileRead.model_validate(profile)

        logger.info("staff_profile_created", profile_id=result.id, user_id=user_id)
        return result

    async def update_staff_profile(
        self, profile_id: int, changes: StaffProfileUpdate | dict[str, Any]
    ) -> StaffProfileRead:
        """Partial update; ``phone_number=None`` clears, omission leaves it alone."""
        if isinstance(changes, dict):
            changes = StaffProfileUpdate.model_validate(changes)
        fields = changes.model_dump(exclude_unset=True)

        async with self._db_session_factory() as session:
            async with session.begin():
                profile = await self._get_profile(session, profile_id)
                for name, value in fields.items():
                    setattr(profile, name, value)
                profile.updated_at = utcnow()
            await session.refresh(profile)
            result = StaffProfileRead.model_validate(profile)

        logger.info("staff_profile_updated", profile_id=profile_id, fields=sorted(fields))
        return result

    async def delete_staff_profile(self, profile_id: int) -> None:
        """Delete only the staff profile; the owning user stays."""
        async with self._db_session_factory() as session:
            async with session.begin():
                await self._get_profile(session, profile_id)
                await session.execute(delete(StaffProfile).where(StaffProfile.id == profile_id))

        logger.info("staff_profile_deleted", profile_id=profile_id)

    async def list_staff_profiles(self) -> list[StaffProfileRead]:
        async with self._db_session_factory() as session:
            rows = (await session.execute(
                select(StaffProfile).order_by(StaffProfile.id)
            )).scalars().all()
            return [StaffProfileRead.model_validate(p) for p in rows]

    async def get_staff_profile_by_id(self, profile_id: int) -> Optional[StaffProfileRead]:
        """Return the profile, or None when it does not exist."""
        async with self._db_session_factory() as session:
            profile = (await session.execute(
                select(StaffProfile).where(StaffProfile.id == profile_id)
            )).scalar_one_or_none()
            return StaffProfileRead.model_validate(profile) if profile else None
