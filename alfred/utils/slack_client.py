"""Slack Web API client — retry wrapper and cursor pagination.

Usage:
    from alfred.utils.slack_client import SlackClient
    sc = SlackClient(access_token)
    channels = await sc.conversations_list("public_channel")
    me = await sc.auth_test()
"""
import asyncio
import logging

from ..http_client import http

log = logging.getLogger("alfred.slack")

SLACK_API = "https://slack.com/api"

MAX_RETRIES = 3
BACKOFF_BASE = 2  # seconds — exponential: 2, 4, 8
PAGE_LIMIT = 200


class SlackError(Exception):
    """Slack answered ok=false (or a non-retryable HTTP status)."""

    def __init__(self, method: str, error: str):
        super().__init__(f"{method}: {error}")
        self.method = method
        self.error = error


def _retry_after(resp, attempt: int) -> int:
    """Seconds to wait before retrying. Non-numeric Retry-After (HTTP-date) uses backoff."""
    value = resp.headers.get("Retry-After", "")
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return BACKOFF_BASE ** (attempt + 1)


async def call(method: str, data: dict | None = None, token: str | None = None,
               timeout: int = 30) -> dict:
    """POST a Slack Web API method, return the parsed body. Raises SlackError."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    url = f"{SLACK_API}/{method}"

    for attempt in range(MAX_RETRIES + 1):
        resp = await http.post(url, data=data or {}, headers=headers, timeout=timeout)

        if resp.status_code == 429 and attempt < MAX_RETRIES:
            wait = _retry_after(resp, attempt)
            log.warning(f"Slack 429 on {method} — retry in {wait}s (attempt {attempt + 1})")
            await asyncio.sleep(wait)
            continue

        if resp.status_code != 200:
            raise SlackError(method, f"http_{resp.status_code}")

        body = resp.json()
        if not body.get("ok"):
            raise SlackError(method, body.get("error", "unknown_error"))
        return body

    raise SlackError(method, "ratelimited")


async def oauth_access(client_id: str, client_secret: str, code: str,
                       redirect_uri: str = "") -> dict:
    """Exchange an OAuth code for a token. Returns the full oauth.access body."""
    data = {"client_id": client_id, "client_secret": client_secret, "code": code}
    if redirect_uri:
        data["redirect_uri"] = redirect_uri
    return await call("oauth.access", data)


class SlackClient:
    """Thin token-bound wrapper around the Slack Web API."""

    def __init__(self, token: str):
        self.token = token

    async def _call(self, method: str, data: dict | None = None) -> dict:
        return await call(method, data, token=self.token)

    async def conversations_list(self, types: str, exclude_archived: bool = True) -> list[dict]:
        """All conversations of `types`, following next_cursor until exhausted."""
        items: list[dict] = []
        cursor = ""
        while True:
            data = {
                "types": types,
                "exclude_archived": "true" if exclude_archived else "false",
                "limit": PAGE_LIMIT,
            }
            if cursor:
                data["cursor"] = cursor
            body = await self._call("conversations.list", data)
            items.extend(body.get("channels", []))
            cursor = (body.get("response_metadata") or {}).get("next_cursor", "")
            if not cursor:
                return items

    async def channels(self) -> list[dict]:
        return await self.conversations_list("public_channel")

    async def groups(self) -> list[dict]:
        return await self.conversations_list("private_channel")

    async def auth_test(self) -> dict:
        return await self._call("auth.test")

    async def team_info(self) -> dict:
        body = await self._call("team.info")
        return body["team"]

    async def user_info(self, user_id: str) -> dict:
        body = await self._call("users.info", {"user": user_id})
        return body["user"]

    async def invite(self, email: str, channels: str = "") -> dict:
        """Invite an email to the team (admin token required)."""
        data = {"email": email, "resend": "true"}
        if channels:
            data["channels"] = channels
        return await self._call("users.admin.invite", data)
