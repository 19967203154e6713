"""
Models package for SocialHub API
"""
from socialhub.db.base import Base, BaseModel
from socialhub.models.user import User
from socialhub.models.post import Post
from socialhub.models.comment import PostComment
from socialhub.models.like import PostLike

__all__ = [
    'Base',
    'BaseModel',
    'User',
    'Post',
    'PostComment',
    'PostLike',
]
