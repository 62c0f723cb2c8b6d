from pydantic import BaseModel, Field
from typing import List, Optional
import datetime

from .donation_schemas import PublicDonation
from .enums import Language, ProjectStatus


class ProjectTranslationIn(BaseModel):
    language: Language
    title: str
    description: str
    short_desc: Optional[str] = None


class ProjectTranslation(ProjectTranslationIn):
    id: int

    class Config:
        from_attributes = True


class ProjectCreate(BaseModel):
    slug: str
    goal_amount: int = Field(..., ge=0)
    featured_image: Optional[str] = None
    gallery: List[str] = []
    is_urgent: bool = False
    is_featured: bool = False
    start_date: Optional[datetime.datetime] = None
    end_date: Optional[datetime.datetime] = None
    translations: List[ProjectTranslationIn] = Field(..., min_length=1)


class ProjectUpdate(BaseModel):
    """Partial update. ``translations`` replaces the whole set when given."""
    slug: Optional[str] = None
    status: Optional[ProjectStatus] = None
    goal_amount: Optional[int] = Field(None, ge=0)
    featured_image: Optional[str] = None
    gallery: Optional[List[str]] = None
    is_urgent: Optional[bool] = None
    is_featured: Optional[bool] = None
    start_date: Optional[datetime.datetime] = None
    end_date: Optional[datetime.datetime] = None
    translations: Optional[List[ProjectTranslationIn]] = Field(None, min_length=1)


class Project(BaseModel):
    id: int
    slug: str
    status: ProjectStatus
    goal_amount: int
    collected_amount: int
    donor_count: int
    featured_image: Optional[str] = None
    gallery: Optional[List[str]] = None
    is_urgent: bool
    is_featured: bool
    start_date: Optional[datetime.datetime] = None
    end_date: Optional[datetime.datetime] = None
    created_at: datetime.datetime
    updated_at: Optional[datetime.datetime] = None
    translations: List[ProjectTranslation] = []

    class Config:
        from_attributes = True


class ProjectDetail(Project):
    recent_donations: List[PublicDonation] = []


class ProjectFilter(BaseModel):
    status: Optional[ProjectStatus] = None
    is_urgent: Optional[bool] = None
    is_featured: Optional[bool] = None


class ProjectStats(BaseModel):
    total: int
    active: int
    urgent: int
    total_collected: int
