"""
Contact form messages and newsletter subscriptions.
Email delivery is not wired in: replies are only logged and stamped.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from . import models, schemas
from .database import get_db
from .errors import NotFound
from .paging import Page, paginate
from .security import require_admin
import datetime
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/contacts", tags=["contacts"])


def get_contact_or_404(db: Session, contact_id: int) -> models.ContactMessage:
    contact = db.query(models.ContactMessage).filter(models.ContactMessage.id == contact_id).first()
    if not contact:
        raise NotFound('Message not found')
    return contact


@router.post("", response_model=schemas.Contact)
def create_contact(payload: schemas.ContactCreate, db: Session = Depends(get_db)):
    contact = models.ContactMessage(**payload.model_dump())
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


# ===== NEWSLETTER =====
# declared before /{contact_id} so the static paths win

@router.post("/newsletter/subscribe", response_model=schemas.Message)
def subscribe_newsletter(payload: schemas.NewsletterSubscribe, db: Session = Depends(get_db)):
    existing = db.query(models.NewsletterSubscriber).filter(
        models.NewsletterSubscriber.email == payload.email
    ).first()
    if existing:
        if existing.is_subscribed:
            return {"message": "Already subscribed to the newsletter"}
        existing.is_subscribed = True
        db.commit()
        return {"message": "Subscription renewed"}

    db.add(models.NewsletterSubscriber(email=payload.email))
    db.commit()
    return {"message": "Subscribed to the newsletter"}


@router.post("/newsletter/unsubscribe", response_model=schemas.Message)
def unsubscribe_newsletter(payload: schemas.NewsletterSubscribe, db: Session = Depends(get_db)):
    existing = db.query(models.NewsletterSubscriber).filter(
        models.NewsletterSubscriber.email == payload.email
    ).first()
    if not existing:
        raise NotFound('Email not found')
    existing.is_subscribed = False
    db.commit()
    return {"message": "Unsubscribed"}


@router.get("/newsletter/subscribers", response_model=List[schemas.NewsletterSubscriber],
            dependencies=[Depends(require_admin)])
def list_subscribers(db: Session = Depends(get_db)):
    return db.query(models.NewsletterSubscriber).filter(
        models.NewsletterSubscriber.is_subscribed == True
    ).order_by(models.NewsletterSubscriber.subscribed_at.desc()).all()


# ===== ADMIN =====

@router.get("", response_model=Page[schemas.Contact], dependencies=[Depends(require_admin)])
def list_contacts(
    is_read: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    q = db.query(models.ContactMessage)
    if is_read is not None:
        q = q.filter(models.ContactMessage.is_read == is_read)
    return paginate(q.order_by(models.ContactMessage.created_at.desc(), models.ContactMessage.id.desc()), page, limit)


@router.get("/stats", response_model=schemas.ContactStats, dependencies=[Depends(require_admin)])
def get_contact_stats(db: Session = Depends(get_db)):
    q = db.query(models.ContactMessage)
    return schemas.ContactStats(
        total=q.count(),
        unread=q.filter(models.ContactMessage.is_read == False).count(),
        replied=q.filter(models.ContactMessage.replied_at.isnot(None)).count(),
    )


@router.get("/{contact_id}", response_model=schemas.Contact, dependencies=[Depends(require_admin)])
def get_contact(contact_id: int, db: Session = Depends(get_db)):
    return get_contact_or_404(db, contact_id)


@router.put("/{contact_id}/read", response_model=schemas.Contact, dependencies=[Depends(require_admin)])
def mark_contact_read(contact_id: int, db: Session = Depends(get_db)):
    contact = get_contact_or_404(db, contact_id)
    contact.is_read = True
    db.commit()
    db.refresh(contact)
    return contact


@router.post("/{contact_id}/reply", response_model=schemas.Contact, dependencies=[Depends(require_admin)])
def reply_contact(contact_id: int, payload: schemas.ContactReply, db: Session = Depends(get_db)):
    contact = get_contact_or_404(db, contact_id)
    logger.info("reply to %s (message %s): %s", contact.email, contact.id, payload.message)
    contact.replied_at = datetime.datetime.utcnow()
    contact.is_read = True
    db.commit()
    db.refresh(contact)
    return contact


@router.delete("/{contact_id}", response_model=schemas.Message, dependencies=[Depends(require_admin)])
def delete_contact(contact_id: int, db: Session = Depends(get_db)):
    contact = get_contact_or_404(db, contact_id)
    db.delete(contact)
    db.commit()
    return {"message": "Message deleted"}
