"""Join flow side effect — invite an email address to the Slack team."""

import logging

from ..config import settings
from ..utils.slack_client import SlackClient

log = logging.getLogger("alfred.invite")


async def join_slack_channel(email: str) -> None:
    """Invite `email` using the configured admin token. SlackError propagates."""
    slack = SlackClient(settings.slack_invite_token)
    await slack.invite(email, channels=settings.slack_invite_channel)
    log.info("Invited %s to Slack", email)
