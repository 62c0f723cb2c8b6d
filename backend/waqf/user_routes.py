"""
User accounts managed by staff, plus the password reset flow.

Sign-in and token issuance live outside this API. Reset tokens are stored
for an out-of-band mailer; nothing here sends email.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import Optional
from . import user_models, user_schemas
from .config import settings
from .database import apply_changes, get_db
from .donation_models import Donation
from .enums import UserRole
from .errors import BadRequest, Conflict, NotFound, Unauthorized
from .order_models import Order
from .paging import Page, contains_pattern, paginate
from .schemas import Message
from .security import hash_password, require_admin, verify_password
import datetime
import logging
import secrets

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["users"])

User = user_models.User
PasswordResetToken = user_models.PasswordResetToken

# same answer whether or not the identifier matched
FORGOT_PASSWORD_REPLY = "If an account exists for this identifier, a reset link has been sent"


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound('User not found')
    return user


def ensure_identifiers_free(db: Session, email: Optional[str], phone: Optional[str], exclude_id: Optional[int] = None):
    for column, value, label in ((User.email, email, 'Email'), (User.phone, phone, 'Phone')):
        if not value:
            continue
        q = db.query(User.id).filter(column == value)
        if exclude_id is not None:
            q = q.filter(User.id != exclude_id)
        if q.first():
            raise Conflict(f'{label} already in use')


def apply_user_filter(query, filters: user_schemas.UserFilter):
    if filters.role is not None:
        query = query.filter(User.role == filters.role)
    if filters.is_active is not None:
        query = query.filter(User.is_active == filters.is_active)
    if filters.search:
        pattern = contains_pattern(filters.search)
        query = query.filter(or_(
            User.email.ilike(pattern, escape='\\'),
            User.phone.ilike(pattern, escape='\\'),
            User.first_name.ilike(pattern, escape='\\'),
            User.last_name.ilike(pattern, escape='\\'),
        ))
    return query


def user_detail(db: Session, user: User) -> user_schemas.UserDetail:
    detail = user_schemas.UserDetail.model_validate(user)
    detail.donation_count = db.query(Donation).filter(Donation.user_id == user.id).count()
    detail.order_count = db.query(Order).filter(Order.user_id == user.id).count()
    detail.recent_donations = [
        user_schemas.UserDonation.model_validate(d)
        for d in db.query(Donation).filter(Donation.user_id == user.id)
        .order_by(Donation.created_at.desc(), Donation.id.desc()).limit(10).all()
    ]
    return detail


@router.post("", response_model=user_schemas.User, dependencies=[Depends(require_admin)])
def create_user(payload: user_schemas.UserCreate, db: Session = Depends(get_db)):
    ensure_identifiers_free(db, payload.email, payload.phone)
    user = User(
        email=payload.email,
        phone=payload.phone,
        hashed_password=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user %s created with role %s", user.id, user.role.value)
    return user


@router.get("", response_model=Page[user_schemas.User], dependencies=[Depends(require_admin)])
def list_users(
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    filters = user_schemas.UserFilter(search=search, role=role, is_active=is_active)
    q = apply_user_filter(db.query(User), filters).order_by(User.created_at.desc(), User.id.desc())
    return paginate(q, page, limit)


@router.get("/stats", response_model=user_schemas.UserStats, dependencies=[Depends(require_admin)])
def get_user_stats(db: Session = Depends(get_db)):
    month_start = datetime.datetime.utcnow().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return user_schemas.UserStats(
        total=db.query(User).count(),
        donors=db.query(User).filter(User.role == UserRole.DONOR).count(),
        admins=db.query(User).filter(User.role == UserRole.ADMIN).count(),
        active_this_month=db.query(User).filter(User.last_login_at >= month_start).count(),
    )


@router.post("/forgot-password", response_model=Message)
def forgot_password(payload: user_schemas.ForgotPassword, db: Session = Depends(get_db)):
    user = db.query(User).filter(
        or_(User.email == payload.identifier, User.phone == payload.identifier)
    ).first()
    if not user:
        return {"message": FORGOT_PASSWORD_REPLY}

    expires_at = datetime.datetime.utcnow() + datetime.timedelta(minutes=settings.PASSWORD_RESET_EXPIRY_MINUTES)
    if user.reset_token is None:
        user.reset_token = PasswordResetToken(token=secrets.token_hex(32), expires_at=expires_at)
    else:
        user.reset_token.token = secrets.token_hex(32)
        user.reset_token.expires_at = expires_at
    db.commit()
    logger.info("password reset requested for user %s", user.id)
    return {"message": FORGOT_PASSWORD_REPLY}


@router.post("/reset-password", response_model=Message)
def reset_password(payload: user_schemas.ResetPassword, db: Session = Depends(get_db)):
    reset = db.query(PasswordResetToken).filter(PasswordResetToken.token == payload.token).first()
    if not reset:
        raise BadRequest('Invalid reset token')
    if reset.expires_at < datetime.datetime.utcnow():
        raise BadRequest('Reset token expired')

    user_id = reset.user_id
    reset.user.hashed_password = hash_password(payload.new_password)
    db.delete(reset)
    db.commit()
    logger.info("password reset for user %s", user_id)
    return {"message": "Password reset"}


@router.get("/{user_id}", response_model=user_schemas.UserDetail, dependencies=[Depends(require_admin)])
def get_user(user_id: int, db: Session = Depends(get_db)):
    return user_detail(db, get_user_or_404(db, user_id))


@router.put("/{user_id}", response_model=user_schemas.User, dependencies=[Depends(require_admin)])
def update_user(user_id: int, payload: user_schemas.UserUpdate, db: Session = Depends(get_db)):
    user = get_user_or_404(db, user_id)
    ensure_identifiers_free(db, payload.email, payload.phone, exclude_id=user_id)
    changes = payload.model_dump(exclude_unset=True)
    apply_changes(user, changes, nullable=('first_name', 'last_name', 'avatar'))
    db.commit()
    db.refresh(user)
    return user


@router.post("/{user_id}/change-password", response_model=Message)
def change_password(user_id: int, payload: user_schemas.ChangePassword, db: Session = Depends(get_db)):
    """Authorized by the current password rather than the admin key."""
    user = get_user_or_404(db, user_id)
    if not verify_password(payload.current_password, user.hashed_password):
        raise Unauthorized('Current password is incorrect')
    user.hashed_password = hash_password(payload.new_password)
    db.commit()
    return {"message": "Password changed"}


@router.delete("/{user_id}", response_model=Message, dependencies=[Depends(require_admin)])
def deactivate_user(user_id: int, db: Session = Depends(get_db)):
    user = get_user_or_404(db, user_id)
    user.is_active = False
    db.commit()
    logger.info("user %s deactivated", user_id)
    return {"message": "User deactivated"}
