from typing import Optional
from datetime import datetime
from socialhub.schemas.user_schema import CamelModel

class CommentCreate(CamelModel):
    text: Optional[str] = None

class CommentResponse(CamelModel):
    user_id: str
    user_name: str
    text: str
    created_at: datetime
