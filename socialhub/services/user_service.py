from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, delete, and_, or_
import logging

from socialhub.models.user import User
from socialhub.models.post import Post
from socialhub.models.like import PostLike
from socialhub.models.comment import PostComment
from socialhub.utils.exceptions import ConflictError, NotFoundError
from socialhub.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

class UserService:
    """Credential and identity store"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create_user(self, email: str, name: str, password: str) -> User:
        """Create a new user; the password is stored only as a bcrypt hash"""
        if await self.get_user_by_email(email):
            raise ConflictError("Email already registered")

        user = User(
            email=email,
            name=name,
            hashed_password=hash_password(password),
        )

        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            await self.db.rollback()
            raise ConflictError("Email already registered")
        await self.db.refresh(user)

        logger.info(f"Created user {user.id}")
        return user

    async def verify_password(self, email: str, password: str) -> Optional[User]:
        """Return the user only if the email exists and the password matches"""
        user = await self.get_user_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            return None
        return user

    async def update_profile(
        self,
        user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        profile_image: Optional[str] = None,
    ) -> User:
        """Apply the provided profile fields.

        Email uniqueness is checked by the caller; the unique index is the
        last line and surfaces as ConflictError.
        """
        user = await self.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        if name is not None:
            user.name = name
        if email is not None:
            user.email = email
        if profile_image is not None:
            user.profile_image = profile_image

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Email already registered")
        await self.db.refresh(user)

        logger.info(f"Updated profile of user {user_id}")
        return user

    async def update_password(self, user_id: str, new_password: str) -> User:
        """Re-hash the password and invalidate every token issued so far"""
        user = await self.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        user.hashed_password = hash_password(new_password)
        user.token_version = (user.token_version or 0) + 1

        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"Changed password of user {user_id}")
        return user

    async def delete_user_cascade(self, user_id: str) -> int:
        """Delete a user with every post attributed to them.

        Posts match on user id, or on email when their user id no longer
        belongs to any account (legacy attribution). Returns the number of
        posts removed.
        """
        user = await self.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        legacy = and_(
            Post.user_email == user.email,
            Post.user_id.not_in(select(User.id).where(User.id != user.id)),
        )
        owned = or_(Post.user_id == user.id, legacy)
        post_ids = select(Post.id).where(owned)

        await self.db.execute(
            delete(PostLike).where(PostLike.post_id.in_(post_ids)),
            execution_options={"synchronize_session": False},
        )
        await self.db.execute(
            delete(PostComment).where(PostComment.post_id.in_(post_ids)),
            execution_options={"synchronize_session": False},
        )
        result = await self.db.execute(
            delete(Post).where(owned),
            execution_options={"synchronize_session": False},
        )
        await self.db.delete(user)
        await self.db.commit()

        logger.info(f"Deleted user {user_id} and {result.rowcount} posts")
        return result.rowcount
