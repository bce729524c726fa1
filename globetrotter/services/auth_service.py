"""
Auth Service - registration and credential checks against the user store
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from globetrotter.config.settings import settings
from globetrotter.core.exceptions import ConflictError, UnauthorizedError
from globetrotter.core.security import hash_password, verify_password
from globetrotter.core.validation import normalize_phone
from globetrotter.models.user import Role, User, UserRole
from globetrotter.schemas.user import RegisterRequest

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """User registration, login verification and role lookup"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_or_create_role(self, name: str) -> Role:
        result = await self.db.execute(select(Role).where(Role.name == name))
        role = result.scalar_one_or_none()
        if role is None:
            role = Role(name=name)
            self.db.add(role)
            await self.db.flush()
        return role

    async def register(self, payload: RegisterRequest) -> Tuple[User, List[str]]:
        """
        Create a user and assign the default role

        The user row and the role assignment are written in one transaction,
        so a failure leaves neither behind.

        Raises:
            ConflictError: Email or phone already registered
        """
        existing = await self.db.execute(
            select(User.email, User.phone).where(
                or_(User.email == payload.email, User.phone == payload.phone)
            )
        )
        for email, phone in existing.all():
            if email == payload.email:
                raise ConflictError("Email already registered")
            if phone == payload.phone:
                raise ConflictError("Phone number already registered")

        user = User(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            phone=payload.phone,
            password_hash=hash_password(payload.password),
            city=payload.city,
            country=payload.country,
            bio=payload.bio or None,
        )
        try:
            self.db.add(user)
            await self.db.flush()  # assign id
            role = await self._get_or_create_role(settings.auth.default_role)
            self.db.add(UserRole(user_id=user.id, role_id=role.id))
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            # Lost a race with a concurrent registration
            raise ConflictError("Email or phone number already registered")

        await self.db.refresh(user)
        logger.info("User registered", extra={"user_id": user.id})
        return user, [role.name]

    async def get_roles(self, user_id: int) -> List[str]:
        """Role names in assignment order; the first one is the primary role"""
        stmt = (
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(UserRole.assigned_at.asc(), Role.id.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_user(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def _find_by_identifier(self, identifier: str) -> Optional[User]:
        identifier = identifier.strip()
        if "@" in identifier:
            stmt = select(User).where(User.email == identifier.lower())
        else:
            phone = normalize_phone(identifier)
            if phone is None:
                return None
            stmt = select(User).where(User.phone == phone)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def authenticate(self, identifier: str, password: str) -> Tuple[User, List[str]]:
        """
        Check an email/phone + password pair

        Returns:
            The user and its role names

        Raises:
            UnauthorizedError: Unknown identifier or wrong password
        """
        user = await self._find_by_identifier(identifier)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Login rejected")
            raise UnauthorizedError(INVALID_CREDENTIALS)
        roles = await self.get_roles(user.id)
        return user, roles
