from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy import select, delete, desc
import logging

from socialhub.models.post import Post
from socialhub.models.like import PostLike
from socialhub.models.comment import PostComment
from socialhub.models.user import User
from socialhub.schemas.post_schema import PostCreate, PostUpdate
from socialhub.utils.exceptions import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

class PostService:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _select_posts(self):
        return select(Post).options(
            selectinload(Post.likes),
            selectinload(Post.comments),
        ).execution_options(populate_existing=True)

    async def _ensure_exists(self, post_id: str) -> None:
        found = await self.db.scalar(select(Post.id).where(Post.id == post_id))
        if found is None:
            raise NotFoundError("Post not found")

    async def create_post(self, post_data: PostCreate, author_id: str) -> Post:
        """Create a new post, snapshotting the author's name and email"""
        author = await self.db.get(User, author_id)
        if not author:
            raise NotFoundError("User not found")

        post = Post(
            title=post_data.title,
            description=post_data.description,
            media_url=post_data.media_url,
            media_type=post_data.media_type,
            user_id=author.id,
            user_email=author.email,
            user_name=author.name,
        )

        self.db.add(post)
        await self.db.commit()

        logger.info(f"User {author_id} created post {post.id}")
        return await self.get_post(post.id)

    async def get_post(self, post_id: str) -> Optional[Post]:
        """Get a post by ID"""
        stmt = self._select_posts().where(Post.id == post_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_posts(self) -> List[Post]:
        """All posts, newest first"""
        stmt = self._select_posts().order_by(desc(Post.created_at), desc(Post.id))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_user_posts(self, user_id: str) -> List[Post]:
        """Posts by a specific user, newest first"""
        stmt = self._select_posts().where(
            Post.user_id == user_id
        ).order_by(
            desc(Post.created_at), desc(Post.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def update_post(self, post_id: str, post_update: PostUpdate) -> Post:
        """Update owner-mutable fields; ownership is checked by the caller"""
        post = await self.get_post(post_id)
        if not post:
            raise NotFoundError("Post not found")

        update_data = post_update.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(post, field, value)

        await self.db.commit()

        logger.info(f"Updated post {post_id}: {sorted(update_data)}")
        return await self.get_post(post_id)

    async def delete_post(self, post_id: str) -> None:
        """Delete a post along with its likes and comments"""
        post = await self.get_post(post_id)
        if not post:
            raise NotFoundError("Post not found")

        await self.db.delete(post)
        await self.db.commit()

        logger.info(f"Deleted post {post_id}")

    async def toggle_like(self, post_id: str, user_id: str) -> Post:
        """Add or remove the user's like"""
        await self._ensure_exists(post_id)

        result = await self.db.execute(
            delete(PostLike).where(
                PostLike.post_id == post_id,
                PostLike.user_id == user_id,
            ),
            execution_options={"synchronize_session": False},
        )

        if result.rowcount:
            await self.db.commit()
            logger.info(f"User {user_id} unliked post {post_id}")
        else:
            self.db.add(PostLike(post_id=post_id, user_id=user_id))
            try:
                await self.db.commit()
                logger.info(f"User {user_id} liked post {post_id}")
            except IntegrityError:
                await self.db.rollback()
                await self._ensure_exists(post_id)
                logger.warning(f"Duplicate like by user {user_id} on post {post_id} ignored")

        post = await self.get_post(post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    async def add_comment(self, post_id: str, user_id: str, user_name: str, text: Optional[str]) -> Post:
        """Append a comment to the end of the post's comment sequence"""
        if not text or not text.strip():
            raise InvalidInputError("Comment text required")

        await self._ensure_exists(post_id)

        self.db.add(PostComment(
            post_id=post_id,
            user_id=user_id,
            user_name=user_name,
            text=text,
        ))
        await self.db.commit()

        logger.info(f"User {user_id} commented on post {post_id}")
        return await self.get_post(post_id)
