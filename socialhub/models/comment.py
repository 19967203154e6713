from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from socialhub.db.base import Base

class PostComment(Base):
    __tablename__ = "post_comments"

    # Autoincrement id doubles as insertion order
    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), nullable=False)
    user_name = Column(String(100), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    post = relationship("Post", back_populates="comments")

    __table_args__ = (
        Index('ix_post_comments_post_id', 'post_id'),
    )
