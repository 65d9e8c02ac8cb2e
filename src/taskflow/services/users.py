"""Service layer orchestrating user-related repository operations."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.security import get_password_hash
from ..errors import ConflictError, NotFoundError
from ..models import User, UserRole
from ..repositories import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """High-level business operations for ``User`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = UserRepository(session)

    @property
    def repository(self) -> UserRepository:
        """Expose the underlying repository for advanced scenarios."""
        return self._repository

    async def create_user(
        self,
        *,
        email: str,
        password: str,
        name: str,
        image: str | None = None,
        role: UserRole = UserRole.USER,
    ) -> User:
        """Create and persist a new user record.

        Raises ``ConflictError`` when the email is already registered, including
        when a concurrent registration wins the unique constraint.
        """
        if await self._repository.get_by_email(email) is not None:
            raise ConflictError("User with this email already exists.", details={"field": "email"})
        user = User(
            email=email,
            name=name,
            image=image,
            role=role,
            hashed_password=get_password_hash(password),
        )
        try:
            await self._repository.add(user)
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            raise ConflictError("User with this email already exists.", details={"field": "email"}) from exc
        await self._repository.refresh(user)
        logger.info("User registered", extra={"user_id": user.id})
        return user

    async def get_user(self, user_id: int) -> User:
        """Fetch a user by primary key or raise ``NotFoundError``."""
        user = await self._repository.get(user_id)
        if user is None:
            raise NotFoundError("User not found.", code="user_not_found")
        return user

    async def get_user_by_email(self, email: str) -> User | None:
        """Fetch a user by their unique email address."""
        return await self._repository.get_by_email(email)


__all__ = ["UserService"]
