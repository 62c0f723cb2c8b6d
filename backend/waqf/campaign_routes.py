from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, selectinload
from typing import List, Optional
from . import campaign_models, campaign_schemas
from .database import apply_changes, get_db
from .enums import CampaignStatus, Language
from .errors import Conflict, NotFound, Unprocessable
from .paging import Page, paginate
from .project_models import Project, ProjectTranslation
from .schemas import Message
from .security import require_admin
from .translations import create_with_translations, replace_translations, translations_option
import datetime

router = APIRouter(prefix="/api/v1/campaigns", tags=["campaigns"])

Campaign = campaign_models.Campaign
CampaignTranslation = campaign_models.CampaignTranslation


def campaign_query(db: Session, lang: Optional[Language] = None):
    """Campaigns with their translations and linked projects, both limited to ``lang``"""
    return db.query(Campaign).options(
        translations_option(Campaign, CampaignTranslation, lang),
        translations_option(Project, ProjectTranslation, lang, via=selectinload(Campaign.projects)),
    ).execution_options(populate_existing=True)


def apply_campaign_filter(query, filters: campaign_schemas.CampaignFilter):
    if filters.status is not None:
        query = query.filter(Campaign.status == filters.status)
    if filters.is_urgent is not None:
        query = query.filter(Campaign.is_urgent == filters.is_urgent)
    return query


def load_projects(db: Session, project_ids: List[int]) -> List[Project]:
    wanted = set(project_ids)
    projects = db.query(Project).filter(Project.id.in_(wanted)).all() if wanted else []
    missing = wanted - {p.id for p in projects}
    if missing:
        raise NotFound(f"Project(s) not found: {', '.join(str(i) for i in sorted(missing))}")
    return projects


def ensure_slug_free(db: Session, slug: str, exclude_id: Optional[int] = None):
    q = db.query(Campaign.id).filter(Campaign.slug == slug)
    if exclude_id is not None:
        q = q.filter(Campaign.id != exclude_id)
    if q.first():
        raise Conflict('Slug already exists')


@router.post("", response_model=campaign_schemas.Campaign, dependencies=[Depends(require_admin)])
def create_campaign(payload: campaign_schemas.CampaignCreate, db: Session = Depends(get_db)):
    ensure_slug_free(db, payload.slug)
    campaign = Campaign(**payload.model_dump(exclude={'translations', 'project_ids'}))
    campaign.projects = load_projects(db, payload.project_ids)
    create_with_translations(db, campaign, CampaignTranslation, payload.translations)
    db.commit()
    return campaign_query(db).filter(Campaign.id == campaign.id).first()


@router.get("", response_model=Page[campaign_schemas.Campaign])
def list_campaigns(
    status: Optional[CampaignStatus] = None,
    is_urgent: Optional[bool] = None,
    lang: Optional[Language] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    filters = campaign_schemas.CampaignFilter(status=status, is_urgent=is_urgent)
    q = apply_campaign_filter(campaign_query(db, lang), filters).order_by(
        Campaign.is_urgent.desc(), Campaign.start_date.desc(), Campaign.id.desc()
    )
    return paginate(q, page, limit)


@router.get("/active", response_model=List[campaign_schemas.Campaign])
def list_active_campaigns(lang: Optional[Language] = None, db: Session = Depends(get_db)):
    """ACTIVE campaigns whose date window contains now"""
    now = datetime.datetime.utcnow()
    return campaign_query(db, lang).filter(
        Campaign.status == CampaignStatus.ACTIVE,
        Campaign.start_date <= now,
        Campaign.end_date >= now,
    ).order_by(Campaign.is_urgent.desc(), Campaign.end_date.asc()).all()


@router.get("/slug/{slug}", response_model=campaign_schemas.Campaign)
def get_campaign_by_slug(slug: str, lang: Optional[Language] = None, db: Session = Depends(get_db)):
    campaign = campaign_query(db, lang).filter(Campaign.slug == slug).first()
    if not campaign:
        raise NotFound('Campaign not found')
    return campaign


@router.get("/{campaign_id}", response_model=campaign_schemas.Campaign)
def get_campaign(campaign_id: int, lang: Optional[Language] = None, db: Session = Depends(get_db)):
    campaign = campaign_query(db, lang).filter(Campaign.id == campaign_id).first()
    if not campaign:
        raise NotFound('Campaign not found')
    return campaign


@router.put("/{campaign_id}", response_model=campaign_schemas.Campaign, dependencies=[Depends(require_admin)])
def update_campaign(campaign_id: int, payload: campaign_schemas.CampaignUpdate, db: Session = Depends(get_db)):
    campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
    if not campaign:
        raise NotFound('Campaign not found')
    if payload.slug is not None:
        ensure_slug_free(db, payload.slug, exclude_id=campaign_id)

    changes = payload.model_dump(exclude_unset=True, exclude={'translations', 'project_ids'})
    apply_changes(campaign, changes, nullable=('featured_image',))
    # the stored bound counts when only one side of the window is sent
    if campaign.end_date < campaign.start_date:
        raise Unprocessable('end_date must not be before start_date')
    if payload.project_ids is not None:
        campaign.projects = load_projects(db, payload.project_ids)
    if payload.translations is not None:
        replace_translations(db, campaign, CampaignTranslation, payload.translations)
    db.commit()
    return campaign_query(db).filter(Campaign.id == campaign_id).first()


@router.delete("/{campaign_id}", response_model=Message, dependencies=[Depends(require_admin)])
def delete_campaign(campaign_id: int, db: Session = Depends(get_db)):
    campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
    if not campaign:
        raise NotFound('Campaign not found')
    db.delete(campaign)
    db.commit()
    return {"message": "Campaign deleted"}
