from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from .database import Base
from .enums import ContentType, Language
import datetime


class Content(Base):
    """News articles, events and static pages"""
    __tablename__ = 'contents'

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    type = Column(Enum(ContentType), nullable=False, index=True)
    featured_image = Column(String(1000), nullable=True)
    is_published = Column(Boolean, default=False, index=True)
    published_at = Column(DateTime, nullable=True, index=True)  # set once, on first publish

    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    translations = relationship(
        'ContentTranslation', back_populates='content',
        cascade='all, delete-orphan', order_by='ContentTranslation.id',
    )


class ContentTranslation(Base):
    __tablename__ = 'content_translations'
    __table_args__ = (
        UniqueConstraint('content_id', 'language', name='uq_content_translation_language'),
    )

    id = Column(Integer, primary_key=True, index=True)
    content_id = Column(Integer, ForeignKey('contents.id', ondelete='CASCADE'), nullable=False, index=True)
    language = Column(Enum(Language), nullable=False)
    title = Column(String(300), nullable=False)
    body = Column(Text, nullable=False)
    excerpt = Column(String(1000), nullable=True)
    meta_title = Column(String(300), nullable=True)
    meta_desc = Column(String(500), nullable=True)

    content = relationship('Content', back_populates='translations')
