from fastapi import APIRouter, Depends, UploadFile, File, Form
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from socialhub.schemas.post_schema import PostCreate, PostUpdate, PostResponse
from socialhub.schemas.comment_schema import CommentCreate
from socialhub.schemas.user_schema import SuccessResponse
from socialhub.services.post_service import PostService
from socialhub.services.media_service import MediaUploadRelay, get_media_relay
from socialhub.services.auth_service import get_current_user
from socialhub.db.session import get_db
from socialhub.models.user import User
from socialhub.utils.exceptions import (
    AppError,
    InternalError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    validation_message,
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

async def _get_owned_post(post_service: PostService, post_id: str, user: User):
    post = await post_service.get_post(post_id)
    if not post:
        raise NotFoundError("Post not found")
    if post.user_id != user.id:
        raise PermissionDeniedError("Forbidden")
    return post

@router.get("", response_model=List[PostResponse])
async def get_posts(db: AsyncSession = Depends(get_db)):
    """Get all posts, newest first"""
    try:
        posts = await PostService(db).list_posts()
        return [PostResponse.model_validate(post) for post in posts]
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Get posts error: {e}")
        raise InternalError("Failed to get posts")

@router.post("", response_model=PostResponse)
async def create_post(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    media: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    media_relay: MediaUploadRelay = Depends(get_media_relay)
):
    """Create a new post, uploading the attached media first"""
    try:
        post_data = PostCreate(title=title or "", description=description or None)
    except ValidationError as e:
        raise InvalidInputError(validation_message(e.errors()))

    try:
        if media is not None and media.filename:
            content = await media.read()
            uploaded = await media_relay.upload(content, media.content_type)
            post_data = post_data.model_copy(update={
                "media_url": uploaded.url,
                "media_type": uploaded.media_type,
            })

        post = await PostService(db).create_post(post_data, current_user.id)
        return PostResponse.model_validate(post)
    except AppError:
        raise
    except Exception as e:
        if post_data.media_url:
            logger.warning(f"Orphaned upload {post_data.media_url} after failed post creation")
        logger.error(f"Create post error: {e}")
        raise InternalError("Failed to create post")

@router.get("/user/{user_id}", response_model=List[PostResponse])
async def get_user_posts(user_id: str, db: AsyncSession = Depends(get_db)):
    """Get posts by a specific user"""
    try:
        posts = await PostService(db).list_user_posts(user_id)
        return [PostResponse.model_validate(post) for post in posts]
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Get user posts error: {e}")
        raise InternalError("Failed to get posts")

@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, db: AsyncSession = Depends(get_db)):
    """Get a post by ID"""
    post = await PostService(db).get_post(post_id)

    if not post:
        raise NotFoundError("Post not found")

    return PostResponse.model_validate(post)

@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    post_update: PostUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update a post"""
    try:
        post_service = PostService(db)

        await _get_owned_post(post_service, post_id, current_user)

        updated_post = await post_service.update_post(post_id, post_update)
        return PostResponse.model_validate(updated_post)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Update post error: {e}")
        raise InternalError("Failed to update post")

@router.delete("/{post_id}", response_model=SuccessResponse)
async def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a post"""
    try:
        post_service = PostService(db)

        await _get_owned_post(post_service, post_id, current_user)

        await post_service.delete_post(post_id)
        return SuccessResponse(success=True)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Delete post error: {e}")
        raise InternalError("Failed to delete post")

@router.post("/{post_id}/like", response_model=PostResponse)
async def toggle_like(
    post_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Like the post, or remove the like if already present"""
    try:
        post = await PostService(db).toggle_like(post_id, current_user.id)
        return PostResponse.model_validate(post)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Toggle like error: {e}")
        raise InternalError("Failed to like post")

@router.post("/{post_id}/comment", response_model=PostResponse)
async def add_comment(
    post_id: str,
    comment: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Comment on a post"""
    try:
        post = await PostService(db).add_comment(
            post_id,
            current_user.id,
            current_user.name or "User",
            comment.text
        )
        return PostResponse.model_validate(post)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Add comment error: {e}")
        raise InternalError("Failed to add comment")
