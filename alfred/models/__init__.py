"""Database models — re-exports all models.

Import from here:  from alfred.models import User, Team, ...
Or from submodules: from alfred.models.auth import User
"""

from .base import Base  # noqa: F401

# Auth: Slack teams, users, OAuth state
from .auth import OAuthState, Team, User  # noqa: F401

# Monitoring configuration
from .config import Configuration, ConfigurationUpdate  # noqa: F401
