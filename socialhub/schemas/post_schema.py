from pydantic import Field, field_validator, model_validator
from typing import Optional, List, Literal
from datetime import datetime
from socialhub.schemas.user_schema import CamelModel
from socialhub.schemas.comment_schema import CommentResponse

MediaType = Literal["image", "video"]

class PostBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    media_url: Optional[str] = None
    media_type: Optional[MediaType] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        return value

class PostCreate(PostBase):
    @model_validator(mode="after")
    def media_fields_together(self):
        if (self.media_url is None) != (self.media_type is None):
            raise ValueError("mediaUrl and mediaType must be provided together")
        return self

class PostUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    media_url: Optional[str] = None
    media_type: Optional[MediaType] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Title cannot be empty")
        return value

    @model_validator(mode="after")
    def title_not_null(self):
        if "title" in self.model_fields_set and self.title is None:
            raise ValueError("Title cannot be empty")
        return self

    @model_validator(mode="after")
    def media_fields_together(self):
        url_set = "media_url" in self.model_fields_set
        type_set = "media_type" in self.model_fields_set
        if url_set != type_set or (self.media_url is None) != (self.media_type is None):
            raise ValueError("mediaUrl and mediaType must be provided together")
        return self

class PostResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    media_url: Optional[str] = None
    media_type: Optional[MediaType] = None
    user_id: str
    user_email: str
    user_name: str
    created_at: datetime
    likes: List[str] = []
    comments: List[CommentResponse] = []

    @field_validator("likes", mode="before")
    @classmethod
    def like_user_ids(cls, value):
        return [getattr(like, "user_id", like) for like in value]
