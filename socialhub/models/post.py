from sqlalchemy import Column, String, Text, Index
from sqlalchemy.orm import relationship
from socialhub.db.base import BaseModel

class Post(BaseModel):
    __tablename__ = "posts"

    title = Column(String(255), nullable=False)
    description = Column(Text)
    media_url = Column(String(500))
    media_type = Column(String(20))  # image, video

    # Author snapshot taken at creation; not kept in sync with profile edits
    user_id = Column(String(36), nullable=False)
    user_email = Column(String(255), nullable=False)
    user_name = Column(String(100), nullable=False)

    # Relationships
    likes = relationship(
        "PostLike",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostLike.id",
    )
    comments = relationship(
        "PostComment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostComment.id",
    )

    __table_args__ = (
        Index('ix_posts_user_id', 'user_id'),
        Index('ix_posts_user_email', 'user_email'),
        Index('ix_posts_created_at', 'created_at'),
    )
