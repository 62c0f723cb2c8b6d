from pydantic import BaseModel, Field
from typing import List, Optional
import datetime

from .enums import ContentType, Language


class ContentTranslationIn(BaseModel):
    language: Language
    title: str
    body: str
    excerpt: Optional[str] = None
    meta_title: Optional[str] = None
    meta_desc: Optional[str] = None


class ContentTranslation(ContentTranslationIn):
    id: int

    class Config:
        from_attributes = True


class ContentCreate(BaseModel):
    slug: str
    type: ContentType
    featured_image: Optional[str] = None
    is_published: bool = False
    translations: List[ContentTranslationIn] = Field(..., min_length=1)


class ContentUpdate(BaseModel):
    slug: Optional[str] = None
    featured_image: Optional[str] = None
    is_published: Optional[bool] = None
    translations: Optional[List[ContentTranslationIn]] = Field(None, min_length=1)


class Content(BaseModel):
    id: int
    slug: str
    type: ContentType
    featured_image: Optional[str] = None
    is_published: bool
    published_at: Optional[datetime.datetime] = None
    created_at: datetime.datetime
    translations: List[ContentTranslation] = []

    class Config:
        from_attributes = True


class ContentFilter(BaseModel):
    type: Optional[ContentType] = None
    is_published: Optional[bool] = None
