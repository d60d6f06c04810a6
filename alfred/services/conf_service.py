"""
conf_service.py — Team monitoring configuration

Reads and replaces a team's Configuration row, validates the channel
filter expression, and shapes the Slack channel/group lists for the
info and match endpoints.

Business Rules:
- A team with no saved configuration behaves as an empty one
- Only public channels the user is a member of are listed; every
  private group returned by Slack is listed (Slack only returns groups
  the user belongs to)
- selected/verbose flags are pure membership tests against the stored
  ID lists
- The regexp matches anywhere in a name (search, not fullmatch)

Called by: routers/conf.py
Depends on: models, utils/slack_client.py
"""

import re

from sqlalchemy.orm import Session

from ..models import Configuration
from ..schemas.conf import ConfigurationIn, IdName, InfoResponse
from ..utils import contains
from ..utils.slack_client import SlackClient


def compile_regexp(pattern: str) -> re.Pattern | None:
    """Compile `pattern`; None when blank. Raises re.error on bad syntax."""
    if not pattern:
        return None
    return re.compile(pattern)


def get_configuration(db: Session, team_id: str) -> ConfigurationIn:
    row = db.get(Configuration, team_id)
    if row is None:
        return ConfigurationIn()
    return ConfigurationIn(
        channels=row.channels,
        groups=row.groups,
        verbose_channels=row.verbose_channels,
        verbose_groups=row.verbose_groups,
        im=bool(row.im),
        verbose_im=bool(row.verbose_im),
        regexp=row.regexp,
        all=bool(row.all),
    )


def set_configuration(db: Session, team_id: str, conf: ConfigurationIn) -> Configuration:
    """Replace the team's configuration with `conf` and commit."""
    row = db.get(Configuration, team_id)
    if row is None:
        row = Configuration(team_id=team_id)
        db.add(row)
    row.channels = list(conf.channels)
    row.groups = list(conf.groups)
    row.verbose_channels = list(conf.verbose_channels)
    row.verbose_groups = list(conf.verbose_groups)
    row.im = conf.im
    row.verbose_im = conf.verbose_im
    row.regexp = conf.regexp
    row.all = conf.all
    db.commit()
    return row


async def member_channels(slack: SlackClient) -> list[dict]:
    return [ch for ch in await slack.channels() if ch.get("is_member")]


async def build_info(slack: SlackClient, saved: ConfigurationIn) -> InfoResponse:
    res = InfoResponse(
        im=saved.im,
        verbose_im=saved.verbose_im,
        regexp=saved.regexp,
        all=saved.all,
    )
    for ch in await member_channels(slack):
        res.channels.append(IdName(
            id=ch["id"],
            name=ch["name"],
            selected=contains(saved.channels, ch["id"]),
            verbose=contains(saved.verbose_channels, ch["id"]),
        ))
    for gr in await slack.groups():
        res.groups.append(IdName(
            id=gr["id"],
            name=gr["name"],
            selected=contains(saved.groups, gr["id"]),
            verbose=contains(saved.verbose_groups, gr["id"]),
        ))
    return res


async def match_names(slack: SlackClient, pattern: re.Pattern) -> list[str]:
    """Names of member channels, then groups, that `pattern` matches."""
    names = [ch["name"] for ch in await member_channels(slack) if pattern.search(ch["name"])]
    names.extend(gr["name"] for gr in await slack.groups() if pattern.search(gr["name"]))
    return names
