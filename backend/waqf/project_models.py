from sqlalchemy import (
    BigInteger, Boolean, Column, DateTime, Enum, ForeignKey, Integer, JSON, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from .database import Base
from .enums import Language, ProjectStatus
import datetime


class Project(Base):
    __tablename__ = 'projects'

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    status = Column(Enum(ProjectStatus), nullable=False, default=ProjectStatus.ACTIVE, index=True)

    # Amounts in XOF (no subunit)
    goal_amount = Column(BigInteger, nullable=False, default=0)
    collected_amount = Column(BigInteger, nullable=False, default=0)  # only grows via confirmed donations
    donor_count = Column(Integer, nullable=False, default=0)

    featured_image = Column(String(1000), nullable=True)
    gallery = Column(JSON, nullable=True)  # ["https://...", ...]
    is_urgent = Column(Boolean, default=False, index=True)
    is_featured = Column(Boolean, default=False, index=True)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    translations = relationship(
        'ProjectTranslation', back_populates='project',
        cascade='all, delete-orphan', order_by='ProjectTranslation.id',
    )
    donations = relationship('Donation', back_populates='project')
    campaigns = relationship('Campaign', secondary='campaign_projects', back_populates='projects')


class ProjectTranslation(Base):
    __tablename__ = 'project_translations'
    __table_args__ = (
        UniqueConstraint('project_id', 'language', name='uq_project_translation_language'),
    )

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True)
    language = Column(Enum(Language), nullable=False)
    title = Column(String(300), nullable=False)
    description = Column(Text, nullable=False)
    short_desc = Column(String(500), nullable=True)

    project = relationship('Project', back_populates='translations')
