"""
dependencies.py — Shared FastAPI Dependencies

Reusable dependency functions for authentication. All routers import
from here instead of defining their own auth logic.

Business Rules:
- get_user returns None if not logged in (non-throwing)
- require_user raises the structured 401 auth error if the cookie is
  missing, undecryptable, expired, or names an unknown/inactive user

Called by: all routers
Depends on: session, models, database, config
"""

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db
from .errors import not_authenticated
from .models import User
from .session import SESSION_COOKIE, decrypt_session

log = logging.getLogger(__name__)


def get_user(request: Request, db: Session) -> User | None:
    """Return current user from the session cookie, or None if not logged in."""
    sess = decrypt_session(request.cookies.get(SESSION_COOKIE, ""))
    if sess is None:
        return None
    if sess.expired(settings.session_timeout):
        log.debug("Expired session for %s", sess.name)
        return None
    user = db.get(User, sess.user)
    if user is None or not user.is_active:
        return None
    return user


def require_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Dependency: raises 401 if no authenticated user."""
    user = get_user(request, db)
    if not user:
        raise not_authenticated()
    return user
