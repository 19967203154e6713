from sqlalchemy import Column, String, Integer, Index
from socialhub.db.base import BaseModel

class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    profile_image = Column(String(500))

    # Bumped whenever issued tokens must stop working
    token_version = Column(Integer, default=0, nullable=False)

    __table_args__ = (
        Index('ix_users_created_at', 'created_at'),
    )
