"""schemas/auth.py — public view of the signed-in user."""

from pydantic import BaseModel


class SimpleUser(BaseModel):
    name: str
    email: str | None = None
    real_name: str | None = None
