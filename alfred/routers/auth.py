"""
routers/auth.py — Slack OAuth login, logout, and current user

Business Rules:
- Login via Slack OAuth2 code flow with a single-use, 5-minute state
- Teams/users are upserted on every login, keyed by Slack IDs
- Session is an encrypted SES cookie (see session.py)
- Callback validation order: provider error → missing params →
  unknown state → expired state → code exchange

Called by: main.py (router mount)
Depends on: services/auth_service, session, utils/slack_client
"""

import logging
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Depends, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..dependencies import require_user
from ..errors import bad_content, bad_request, oauth_error
from ..models import User
from ..schemas.auth import SimpleUser
from ..services.auth_service import (
    consume_oauth_state,
    create_oauth_state,
    state_expired,
    upsert_team_and_user,
)
from ..session import SessionData, clear_session_cookie, set_session_cookie
from ..utils.slack_client import SlackClient, SlackError, oauth_access

log = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

SLACK_OAUTH_AUTHORIZE = "https://slack.com/oauth/authorize"


def _redirect_uri() -> str:
    return f"{settings.app_url.rstrip('/')}/auth/callback"


@router.get("/auth/login")
async def initiate_oauth(db: Session = Depends(get_db)):
    state = create_oauth_state(db)
    query = urlencode({
        "client_id": settings.slack_client_id,
        "scope": settings.slack_oauth_scope,
        "redirect_uri": _redirect_uri(),
        "state": state,
        "response_type": "code",
    })
    return RedirectResponse(f"{SLACK_OAUTH_AUTHORIZE}?{query}", status_code=302)


@router.get("/auth/callback")
async def login_oauth(state: str = "", code: str = "", error: str = "",
                      db: Session = Depends(get_db)):
    if error:
        raise oauth_error(error)
    if not state or not code:
        raise bad_content()
    saved = consume_oauth_state(db, state)
    if saved is None:
        raise bad_content()
    if state_expired(saved):
        raise bad_request("Login request expired. Please try again.")

    try:
        token = await oauth_access(settings.slack_client_id, settings.slack_client_secret,
                                   code, _redirect_uri())
    except SlackError as e:
        raise oauth_error(e.error) from e
    except (httpx.HTTPError, ValueError) as e:
        raise oauth_error(str(e) or type(e).__name__) from e
    access_token = token["access_token"]

    slack = SlackClient(access_token)
    me = await slack.auth_test()
    slack_team = await slack.team_info()
    slack_user = await slack.user_info(me["user_id"])
    _, user = upsert_team_and_user(db, slack_team, slack_user, access_token)
    log.info("User %s logged in", user.name)

    response = RedirectResponse("/conf", status_code=302)
    set_session_cookie(response, SessionData(name=user.name, user=user.id))
    return response


@router.api_route("/auth/logout", methods=["GET", "POST"], status_code=204)
async def logout():
    response = Response(status_code=204)
    clear_session_cookie(response)
    return response


@router.get("/user", response_model=SimpleUser)
async def current_user(user: User = Depends(require_user)):
    return SimpleUser(name=user.name, email=user.email, real_name=user.real_name)
