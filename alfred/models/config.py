"""Per-team monitoring configuration and its change outbox."""

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database import UTCDateTime, utcnow
from .base import Base


class Configuration(Base):
    """Which channels/groups the bot watches for a team. Replaced wholesale on save."""

    __tablename__ = "configurations"
    team_id = Column(String(40), ForeignKey("teams.id"), primary_key=True)
    channels = Column(JSON, default=list)
    groups = Column(JSON, default=list)
    verbose_channels = Column(JSON, default=list)
    verbose_groups = Column(JSON, default=list)
    im = Column(Boolean, default=False)
    verbose_im = Column(Boolean, default=False)
    regexp = Column(Text, default="")
    all = Column(Boolean, default=False)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)

    team = relationship("Team", back_populates="configuration")


class ConfigurationUpdate(Base):
    """Outbox row for a configuration change when no Redis queue is configured."""

    __tablename__ = "configuration_updates"
    id = Column(Integer, primary_key=True)
    team_id = Column(String(40), ForeignKey("teams.id"), nullable=False, index=True)
    payload = Column(JSON, nullable=False)
    created_at = Column(UTCDateTime, default=utcnow)
