"""Configuration change queue — Redis primary with database outbox fallback.

Every saved configuration is announced to the bot workers. With REDIS_URL
set, the change is RPUSHed as JSON onto settings.conf_queue_key. Without
it (development, tests), a ConfigurationUpdate row is written instead and
the worker polls that table.

Redis failures propagate: a save that could not be announced is a 500.
"""

import json
import logging
import os

from sqlalchemy.orm import Session

from ..config import settings
from ..models import ConfigurationUpdate
from ..schemas.conf import ConfigurationIn

log = logging.getLogger("alfred.queue")

_redis_client = None


def _get_redis():
    """Lazy-init Redis connection. Returns client or None if not configured."""
    global _redis_client
    if _redis_client is not None:
        return _redis_client
    if os.environ.get("TESTING") or not settings.redis_url:
        return None

    import redis
    _redis_client = redis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_connect_timeout=3,
        socket_timeout=2,
        retry_on_timeout=True,
    )
    log.info("Configuration queue using Redis: %s", settings.conf_queue_key)
    return _redis_client


def push_conf(db: Session, team_id: str, conf: ConfigurationIn) -> None:
    payload = {"team": team_id, "configuration": conf.model_dump()}
    r = _get_redis()
    if r is not None:
        r.rpush(settings.conf_queue_key, json.dumps(payload))
        log.debug("Queued configuration for team %s", team_id)
        return

    db.add(ConfigurationUpdate(team_id=team_id, payload=payload))
    db.commit()
    log.debug("Recorded configuration update for team %s in outbox", team_id)
