"""Auth models — local mirrors of Slack teams and users, OAuth state."""

import uuid

from sqlalchemy import Boolean, Column, ForeignKey, String
from sqlalchemy.orm import relationship

from ..database import UTCDateTime, utcnow
from ..utils.encrypted_type import EncryptedText
from .base import Base

USER_TYPE_SLACK = "slack"
USER_STATUS_ACTIVE = "active"
USER_STATUS_INACTIVE = "inactive"


def new_team_id() -> str:
    return "T" + uuid.uuid4().hex


def new_user_id() -> str:
    return "U" + uuid.uuid4().hex


class Team(Base):
    __tablename__ = "teams"
    id = Column(String(40), primary_key=True, default=new_team_id)
    name = Column(String(255))
    email_domain = Column(String(255))
    domain = Column(String(255))
    plan = Column(String(50))
    external_id = Column(String(64), unique=True, nullable=False)
    created_at = Column(UTCDateTime, default=utcnow)

    users = relationship("User", back_populates="team")
    configuration = relationship(
        "Configuration", back_populates="team", uselist=False, cascade="all, delete-orphan"
    )


class User(Base):
    __tablename__ = "users"
    id = Column(String(40), primary_key=True, default=new_user_id)
    team_id = Column(String(40), ForeignKey("teams.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(20), default=USER_TYPE_SLACK)
    status = Column(String(20), default=USER_STATUS_ACTIVE)
    real_name = Column(String(255))
    email = Column(String(255))
    is_bot = Column(Boolean, default=False)
    is_admin = Column(Boolean, default=False)
    is_owner = Column(Boolean, default=False)
    is_primary_owner = Column(Boolean, default=False)
    is_restricted = Column(Boolean, default=False)
    is_ultra_restricted = Column(Boolean, default=False)
    external_id = Column(String(64), unique=True, nullable=False)
    token = Column(EncryptedText)
    created_at = Column(UTCDateTime, default=utcnow)

    team = relationship("Team", back_populates="users")

    @property
    def is_active(self) -> bool:
        return self.status == USER_STATUS_ACTIVE


class OAuthState(Base):
    """Anti-CSRF token for one login attempt. Deleted once consumed."""

    __tablename__ = "oauth_states"
    state = Column(String(64), primary_key=True)
    timestamp = Column(UTCDateTime, nullable=False, default=utcnow)
