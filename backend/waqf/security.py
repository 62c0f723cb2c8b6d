from typing import Optional

from fastapi import Header
from passlib.context import CryptContext

from .config import settings
from .errors import Unauthorized

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return pwd_context.verify(password, hashed_password)


def require_admin(x_api_key: Optional[str] = Header(None)):
    """API key check (header-only) for admin routes."""
    admin_key = settings.ADMIN_API_KEY
    if admin_key and x_api_key != admin_key:
        raise Unauthorized()
