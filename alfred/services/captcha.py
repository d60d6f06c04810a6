"""reCAPTCHA verification — one POST to Google's siteverify endpoint."""

import logging

from ..config import settings
from ..http_client import http

log = logging.getLogger("alfred.captcha")

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


async def verify_captcha(response: str, remote_ip: str | None = None) -> bool:
    """True when Google accepts `response`. Transport/parse errors propagate."""
    form = {"secret": settings.recaptcha_secret, "response": response}
    if remote_ip:
        form["remoteip"] = remote_ip
    resp = await http.post(RECAPTCHA_VERIFY_URL, data=form)
    resp.raise_for_status()
    body = resp.json()
    if not body.get("success"):
        log.debug("Recaptcha rejected: %s", body.get("error-codes", []))
        return False
    return True
