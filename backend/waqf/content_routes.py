from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from . import content_models, content_schemas
from .database import get_db
from .enums import ContentType, Language
from .errors import Conflict, NotFound
from .paging import Page, paginate
from .schemas import Message
from .security import require_admin
from .translations import create_with_translations, replace_translations, translations_option
import datetime

router = APIRouter(prefix="/api/v1/contents", tags=["contents"])

Content = content_models.Content
ContentTranslation = content_models.ContentTranslation


def content_query(db: Session, lang: Optional[Language] = None):
    return db.query(Content).options(
        translations_option(Content, ContentTranslation, lang)
    ).execution_options(populate_existing=True)


def apply_content_filter(query, filters: content_schemas.ContentFilter):
    if filters.type is not None:
        query = query.filter(Content.type == filters.type)
    if filters.is_published is not None:
        query = query.filter(Content.is_published == filters.is_published)
    return query


def newest_first(query):
    return query.order_by(Content.published_at.desc(), Content.id.desc())


def ensure_slug_free(db: Session, slug: str, exclude_id: Optional[int] = None):
    q = db.query(Content.id).filter(Content.slug == slug)
    if exclude_id is not None:
        q = q.filter(Content.id != exclude_id)
    if q.first():
        raise Conflict('Slug already exists')


@router.post("", response_model=content_schemas.Content, dependencies=[Depends(require_admin)])
def create_content(payload: content_schemas.ContentCreate, db: Session = Depends(get_db)):
    ensure_slug_free(db, payload.slug)
    content = Content(**payload.model_dump(exclude={'translations'}))
    if content.is_published:
        content.published_at = datetime.datetime.utcnow()
    create_with_translations(db, content, ContentTranslation, payload.translations)
    db.commit()
    return content_query(db).filter(Content.id == content.id).first()


@router.get("", response_model=Page[content_schemas.Content])
def list_contents(
    type: Optional[ContentType] = None,
    is_published: Optional[bool] = None,
    lang: Optional[Language] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    filters = content_schemas.ContentFilter(type=type, is_published=is_published)
    return paginate(newest_first(apply_content_filter(content_query(db, lang), filters)), page, limit)


@router.get("/articles", response_model=List[content_schemas.Content])
def list_articles(lang: Optional[Language] = None, limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    filters = content_schemas.ContentFilter(type=ContentType.ARTICLE, is_published=True)
    return newest_first(apply_content_filter(content_query(db, lang), filters)).limit(limit).all()


@router.get("/events", response_model=List[content_schemas.Content])
def list_events(lang: Optional[Language] = None, db: Session = Depends(get_db)):
    filters = content_schemas.ContentFilter(type=ContentType.EVENT, is_published=True)
    return newest_first(apply_content_filter(content_query(db, lang), filters)).all()


@router.get("/slug/{slug}", response_model=content_schemas.Content)
def get_content_by_slug(slug: str, lang: Optional[Language] = None, db: Session = Depends(get_db)):
    content = content_query(db, lang).filter(Content.slug == slug).first()
    if not content:
        raise NotFound('Content not found')
    return content


@router.put("/{content_id}", response_model=content_schemas.Content, dependencies=[Depends(require_admin)])
def update_content(content_id: int, payload: content_schemas.ContentUpdate, db: Session = Depends(get_db)):
    content = db.query(Content).filter(Content.id == content_id).first()
    if not content:
        raise NotFound('Content not found')
    if payload.slug is not None:
        ensure_slug_free(db, payload.slug, exclude_id=content_id)
        content.slug = payload.slug
    if 'featured_image' in payload.model_fields_set:
        content.featured_image = payload.featured_image
    if payload.is_published is not None:
        content.is_published = payload.is_published
        # first publication only, unpublishing keeps the original date
        if payload.is_published and content.published_at is None:
            content.published_at = datetime.datetime.utcnow()
    if payload.translations is not None:
        replace_translations(db, content, ContentTranslation, payload.translations)
    db.commit()
    return content_query(db).filter(Content.id == content_id).first()


@router.delete("/{content_id}", response_model=Message, dependencies=[Depends(require_admin)])
def delete_content(content_id: int, db: Session = Depends(get_db)):
    content = db.query(Content).filter(Content.id == content_id).first()
    if not content:
        raise NotFound('Content not found')
    db.delete(content)
    db.commit()
    return {"message": "Content deleted"}
