"""
session.py — Encrypted session cookie

The session is a small JSON document (user name, local user id, issue
time) encrypted with Fernet and stored in the SES cookie. There is no
server-side session store.

Business Rules:
- Cookie is HttpOnly always, Secure in TEST/PROD
- Lifetime comes from settings.session_timeout (minutes), enforced both
  by the cookie Max-Age and by the embedded timestamp
- Logout overwrites the cookie with an empty value and Max-Age=-1

Called by: routers/auth.py, dependencies.py
Depends on: config.py, utils/crypto.py
"""

import json
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone

from cryptography.fernet import InvalidToken
from starlette.responses import Response

from .config import settings
from .utils.crypto import SESSION_SALT, get_fernet

SESSION_COOKIE = "SES"


@dataclass
class SessionData:
    name: str
    user: str
    ts: float = field(default_factory=time.time)

    def expired(self, timeout_minutes: int, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        return now - self.ts > timeout_minutes * 60


def _fernet():
    return get_fernet(settings.secret_key, SESSION_SALT)


def encrypt_session(sess: SessionData) -> str:
    # Padding is stripped so the value never needs cookie quoting
    token = _fernet().encrypt(json.dumps(asdict(sess)).encode()).decode()
    return token.rstrip("=")


def decrypt_session(value: str) -> SessionData | None:
    """Return the session in `value`, or None if it is not one of ours."""
    if not value:
        return None
    try:
        padded = value + "=" * (-len(value) % 4)
        raw = _fernet().decrypt(padded.encode())
        data = json.loads(raw)
        return SessionData(name=data["name"], user=data["user"], ts=float(data["ts"]))
    except (InvalidToken, ValueError, KeyError, TypeError):
        return None


def set_session_cookie(response: Response, sess: SessionData) -> None:
    timeout = settings.session_timeout
    response.set_cookie(
        SESSION_COOKIE,
        encrypt_session(sess),
        max_age=timeout * 60,
        expires=datetime.now(timezone.utc) + timedelta(minutes=timeout),
        path="/",
        secure=settings.secure_cookies,
        httponly=True,
    )


def clear_session_cookie(response: Response) -> None:
    response.set_cookie(
        SESSION_COOKIE,
        "",
        max_age=-1,
        expires=datetime.now(timezone.utc),
        path="/",
        secure=settings.secure_cookies,
        httponly=True,
    )
