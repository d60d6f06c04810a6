"""
routers/conf.py — Monitoring configuration routes

info, match and save operate on the signed-in user's team. join is
public and captcha-gated.

Business Rules:
- Bad regexp → 400 bad_request with "Error parsing regexp - ..." detail
- save replaces the configuration then announces it on the conf queue
- join validates email (≤128 chars) and captcha presence before any
  outbound call

Called by: main.py (router mount)
Depends on: services/conf_service, conf_queue, captcha, invite
"""

import logging
import re

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..dependencies import require_user
from ..errors import bad_captcha, bad_request, regexp_error
from ..models import User
from ..rate_limit import limiter
from ..schemas.conf import ConfigurationIn, InfoResponse, JoinRequest, RegexpMatch
from ..services.captcha import verify_captcha
from ..services.conf_queue import push_conf
from ..services.conf_service import (
    build_info,
    compile_regexp,
    get_configuration,
    match_names,
    set_configuration,
)
from ..services.invite import join_slack_channel
from ..utils.slack_client import SlackClient

log = logging.getLogger(__name__)

router = APIRouter(tags=["configuration"])

MAX_EMAIL_LENGTH = 128


@router.get("/info", response_model=InfoResponse)
async def info(user: User = Depends(require_user), db: Session = Depends(get_db)):
    saved = get_configuration(db, user.team_id)
    return await build_info(SlackClient(user.token), saved)


@router.post("/match", response_model=list[str])
async def match(body: RegexpMatch, user: User = Depends(require_user)):
    """Names of the user's channels and groups matching the expression."""
    try:
        pattern = compile_regexp(body.regexp)
    except re.error as e:
        raise regexp_error(e) from e
    if pattern is None:
        return []
    return await match_names(SlackClient(user.token), pattern)


@router.post("/save", status_code=204)
async def save(body: ConfigurationIn, user: User = Depends(require_user),
               db: Session = Depends(get_db)):
    try:
        compile_regexp(body.regexp)
    except re.error as e:
        raise regexp_error(e) from e
    set_configuration(db, user.team_id, body)
    push_conf(db, user.team_id, body)
    log.info("Configuration saved for team %s by %s", user.team_id, user.name)
    return Response(status_code=204)


def _valid_email(email: str) -> bool:
    if not email or len(email) > MAX_EMAIL_LENGTH:
        return False
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


@router.post("/join", status_code=204)
@limiter.limit(settings.rate_limit_join)
async def join(request: Request, body: JoinRequest):
    """Captcha-gated invite of an email address to the Slack team."""
    if not _valid_email(body.email) or not body.captcharesponse:
        raise bad_request()
    remote_ip = request.client.host if request.client else None
    if not await verify_captcha(body.captcharesponse, remote_ip):
        raise bad_captcha()
    await join_slack_channel(body.email)
    return Response(status_code=204)
