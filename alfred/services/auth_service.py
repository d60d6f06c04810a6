"""
auth_service.py — Slack OAuth state and local identity records

Business Rules:
- OAuth state is a random uuid4, single use, valid for 5 minutes
- Teams and users are keyed by their Slack IDs (external_id); local IDs
  are generated once ("T"/"U" + uuid4 hex) and never change
- Every login refreshes the mirrored profile fields and the user's token

Called by: routers/auth.py
Depends on: models
"""

import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from ..models import OAuthState, Team, User
from ..models.auth import USER_STATUS_ACTIVE, USER_TYPE_SLACK

STATE_TTL = timedelta(minutes=5)


def create_oauth_state(db: Session) -> str:
    state = uuid.uuid4().hex
    db.add(OAuthState(state=state, timestamp=datetime.now(timezone.utc)))
    db.commit()
    return state


def consume_oauth_state(db: Session, state: str) -> OAuthState | None:
    """Look up and delete `state`. None if it was never issued (or already used)."""
    saved = db.get(OAuthState, state)
    if saved is None:
        return None
    db.delete(saved)
    db.commit()
    return saved


def state_expired(saved: OAuthState, now: datetime | None = None) -> bool:
    now = now or datetime.now(timezone.utc)
    ts = saved.timestamp
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return now - ts > STATE_TTL


def upsert_team_and_user(db: Session, slack_team: dict, slack_user: dict,
                         token: str) -> tuple[Team, User]:
    """Create or refresh the local Team and User mirroring Slack's records."""
    team = db.query(Team).filter_by(external_id=slack_team["id"]).first()
    if team is None:
        team = Team(external_id=slack_team["id"])
        db.add(team)
    team.name = slack_team.get("name")
    team.email_domain = slack_team.get("email_domain")
    team.domain = slack_team.get("domain")
    team.plan = slack_team.get("plan")
    db.flush()

    user = db.query(User).filter_by(external_id=slack_user["id"]).first()
    if user is None:
        user = User(external_id=slack_user["id"], type=USER_TYPE_SLACK,
                    status=USER_STATUS_ACTIVE)
        db.add(user)
    profile = slack_user.get("profile") or {}
    user.team_id = team.id
    user.name = slack_user.get("name", "")
    user.real_name = slack_user.get("real_name") or profile.get("real_name")
    user.email = profile.get("email")
    user.is_bot = bool(slack_user.get("is_bot"))
    user.is_admin = bool(slack_user.get("is_admin"))
    user.is_owner = bool(slack_user.get("is_owner"))
    user.is_primary_owner = bool(slack_user.get("is_primary_owner"))
    user.is_restricted = bool(slack_user.get("is_restricted"))
    user.is_ultra_restricted = bool(slack_user.get("is_ultra_restricted"))
    user.token = token
    db.commit()
    return team, user
