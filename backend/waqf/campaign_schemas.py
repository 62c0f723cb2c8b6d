from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
import datetime

from .enums import CampaignStatus, Language
from .project_schemas import ProjectTranslation


class CampaignTranslationIn(BaseModel):
    language: Language
    title: str
    description: str


class CampaignTranslation(CampaignTranslationIn):
    id: int

    class Config:
        from_attributes = True


class CampaignCreate(BaseModel):
    slug: str
    goal_amount: int = Field(..., ge=0)
    start_date: datetime.datetime
    end_date: datetime.datetime
    featured_image: Optional[str] = None
    is_urgent: bool = False
    project_ids: List[int] = []
    translations: List[CampaignTranslationIn] = Field(..., min_length=1)

    @model_validator(mode='after')
    def check_window(self):
        if self.end_date < self.start_date:
            raise ValueError('end_date must not be before start_date')
        return self


class CampaignUpdate(BaseModel):
    slug: Optional[str] = None
    status: Optional[CampaignStatus] = None
    goal_amount: Optional[int] = Field(None, ge=0)
    start_date: Optional[datetime.datetime] = None
    end_date: Optional[datetime.datetime] = None
    featured_image: Optional[str] = None
    is_urgent: Optional[bool] = None
    project_ids: Optional[List[int]] = None  # replaces the linked projects
    translations: Optional[List[CampaignTranslationIn]] = Field(None, min_length=1)


class LinkedProject(BaseModel):
    id: int
    slug: str
    goal_amount: int
    collected_amount: int
    translations: List[ProjectTranslation] = []

    class Config:
        from_attributes = True


class Campaign(BaseModel):
    id: int
    slug: str
    status: CampaignStatus
    goal_amount: int
    collected_amount: int
    start_date: datetime.datetime
    end_date: datetime.datetime
    featured_image: Optional[str] = None
    is_urgent: bool
    created_at: datetime.datetime
    translations: List[CampaignTranslation] = []
    projects: List[LinkedProject] = []

    class Config:
        from_attributes = True


class CampaignFilter(BaseModel):
    status: Optional[CampaignStatus] = None
    is_urgent: Optional[bool] = None
