"""
schemas/conf.py — Pydantic models for the configuration endpoints

Business Rules:
- Lists default to empty so a partial save never stores null
- regexp is validated in the router (it needs a 400 with a parse detail,
  not a generic 422)
- join email/captcha are plain strings; validation happens before the
  captcha call so bad input never reaches Google

Called by: routers/conf.py, services/conf_service.py
Depends on: pydantic
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class IdName(BaseModel):
    id: str
    name: str
    selected: bool = False
    verbose: bool = False


class InfoResponse(BaseModel):
    channels: list[IdName] = Field(default_factory=list)
    groups: list[IdName] = Field(default_factory=list)
    im: bool = False
    verbose_im: bool = False
    regexp: str = ""
    all: bool = False


class RegexpMatch(BaseModel):
    regexp: str = ""


class ConfigurationIn(BaseModel):
    """Full replacement of a team's monitoring configuration."""
    channels: list[str] = Field(default_factory=list)
    groups: list[str] = Field(default_factory=list)
    verbose_channels: list[str] = Field(default_factory=list)
    verbose_groups: list[str] = Field(default_factory=list)
    im: bool = False
    verbose_im: bool = False
    regexp: str = ""
    all: bool = False

    @field_validator("channels", "groups", "verbose_channels", "verbose_groups", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return [] if v is None else v

    @field_validator("regexp", mode="before")
    @classmethod
    def none_to_blank(cls, v):
        return "" if v is None else v


class JoinRequest(BaseModel):
    email: str = ""
    captcharesponse: str = ""
