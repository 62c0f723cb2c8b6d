from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Optional
from . import donation_schemas, project_models, project_schemas
from .database import apply_changes, get_db
from .enums import Language, ProjectStatus
from .errors import Conflict, NotFound
from .fundraising import recent_confirmed
from .paging import Page, paginate
from .schemas import Message
from .security import require_admin
from .translations import create_with_translations, replace_translations, translations_option

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])

Project = project_models.Project
ProjectTranslation = project_models.ProjectTranslation

# an explicit null in an update clears these
CLEARABLE_FIELDS = ('featured_image', 'start_date', 'end_date')


def project_query(db: Session, lang: Optional[Language] = None):
    return db.query(Project).options(
        translations_option(Project, ProjectTranslation, lang)
    ).execution_options(populate_existing=True)


def apply_project_filter(query, filters: project_schemas.ProjectFilter):
    if filters.status is not None:
        query = query.filter(Project.status == filters.status)
    if filters.is_urgent is not None:
        query = query.filter(Project.is_urgent == filters.is_urgent)
    if filters.is_featured is not None:
        query = query.filter(Project.is_featured == filters.is_featured)
    return query


def ensure_slug_free(db: Session, slug: str, exclude_id: Optional[int] = None):
    q = db.query(Project.id).filter(Project.slug == slug)
    if exclude_id is not None:
        q = q.filter(Project.id != exclude_id)
    if q.first():
        raise Conflict('Slug already exists')


@router.post("", response_model=project_schemas.Project, dependencies=[Depends(require_admin)])
def create_project(payload: project_schemas.ProjectCreate, db: Session = Depends(get_db)):
    ensure_slug_free(db, payload.slug)
    project = Project(**payload.model_dump(exclude={'translations'}))
    create_with_translations(db, project, ProjectTranslation, payload.translations)
    db.commit()
    return project_query(db).filter(Project.id == project.id).first()


@router.get("", response_model=Page[project_schemas.Project])
def list_projects(
    status: Optional[ProjectStatus] = None,
    is_urgent: Optional[bool] = None,
    is_featured: Optional[bool] = None,
    lang: Optional[Language] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Urgent projects first, then featured, then newest"""
    filters = project_schemas.ProjectFilter(status=status, is_urgent=is_urgent, is_featured=is_featured)
    q = apply_project_filter(project_query(db, lang), filters).order_by(
        Project.is_urgent.desc(), Project.is_featured.desc(), Project.created_at.desc(), Project.id.desc()
    )
    return paginate(q, page, limit)


@router.get("/stats", response_model=project_schemas.ProjectStats)
def get_project_stats(db: Session = Depends(get_db)):
    active = db.query(Project).filter(Project.status == ProjectStatus.ACTIVE)
    total_collected = db.query(func.coalesce(func.sum(Project.collected_amount), 0)).scalar()
    return project_schemas.ProjectStats(
        total=db.query(Project).count(),
        active=active.count(),
        urgent=active.filter(Project.is_urgent == True).count(),
        total_collected=int(total_collected or 0),
    )


@router.get("/slug/{slug}", response_model=project_schemas.Project)
def get_project_by_slug(slug: str, lang: Optional[Language] = None, db: Session = Depends(get_db)):
    """A missing translation in ``lang`` yields an empty list, not a 404"""
    project = project_query(db, lang).filter(Project.slug == slug).first()
    if not project:
        raise NotFound('Project not found')
    return project


@router.get("/{project_id}", response_model=project_schemas.ProjectDetail)
def get_project(project_id: int, lang: Optional[Language] = None, db: Session = Depends(get_db)):
    project = project_query(db, lang).filter(Project.id == project_id).first()
    if not project:
        raise NotFound('Project not found')
    detail = project_schemas.ProjectDetail.model_validate(project)
    detail.recent_donations = [
        donation_schemas.PublicDonation.model_validate(d)
        for d in recent_confirmed(db, limit=10, project_id=project_id)
    ]
    return detail


@router.put("/{project_id}", response_model=project_schemas.Project, dependencies=[Depends(require_admin)])
def update_project(project_id: int, payload: project_schemas.ProjectUpdate, db: Session = Depends(get_db)):
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFound('Project not found')
    if payload.slug is not None:
        ensure_slug_free(db, payload.slug, exclude_id=project_id)

    changes = payload.model_dump(exclude_unset=True, exclude={'translations'})
    apply_changes(project, changes, nullable=CLEARABLE_FIELDS)
    if payload.translations is not None:
        replace_translations(db, project, ProjectTranslation, payload.translations)
    db.commit()
    return project_query(db).filter(Project.id == project_id).first()


@router.delete("/{project_id}", response_model=Message, dependencies=[Depends(require_admin)])
def delete_project(project_id: int, db: Session = Depends(get_db)):
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFound('Project not found')
    db.delete(project)
    db.commit()
    return {"message": "Project deleted"}
