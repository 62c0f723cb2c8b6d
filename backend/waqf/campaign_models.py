from sqlalchemy import (
    BigInteger, Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from .database import Base
from .enums import CampaignStatus, Language
import datetime


class Campaign(Base):
    """
    Time-boxed fundraising drive, optionally grouping several projects.
    Campaigns track collected_amount only, donors are counted on projects.
    """
    __tablename__ = 'campaigns'

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    status = Column(Enum(CampaignStatus), nullable=False, default=CampaignStatus.ACTIVE, index=True)

    goal_amount = Column(BigInteger, nullable=False, default=0)
    collected_amount = Column(BigInteger, nullable=False, default=0)

    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=False, index=True)
    featured_image = Column(String(1000), nullable=True)
    is_urgent = Column(Boolean, default=False, index=True)

    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    translations = relationship(
        'CampaignTranslation', back_populates='campaign',
        cascade='all, delete-orphan', order_by='CampaignTranslation.id',
    )
    projects = relationship(
        'Project', secondary='campaign_projects', back_populates='campaigns', order_by='Project.id',
    )
    donations = relationship('Donation', back_populates='campaign')


class CampaignTranslation(Base):
    __tablename__ = 'campaign_translations'
    __table_args__ = (
        UniqueConstraint('campaign_id', 'language', name='uq_campaign_translation_language'),
    )

    id = Column(Integer, primary_key=True, index=True)
    campaign_id = Column(Integer, ForeignKey('campaigns.id', ondelete='CASCADE'), nullable=False, index=True)
    language = Column(Enum(Language), nullable=False)
    title = Column(String(300), nullable=False)
    description = Column(Text, nullable=False)

    campaign = relationship('Campaign', back_populates='translations')


class CampaignProject(Base):
    """Link table campaign <-> project"""
    __tablename__ = 'campaign_projects'

    campaign_id = Column(Integer, ForeignKey('campaigns.id', ondelete='CASCADE'), primary_key=True)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), primary_key=True)
