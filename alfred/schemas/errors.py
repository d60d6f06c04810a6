"""
schemas/errors.py — Structured error response model

Shared by the AppError, validation, and catch-all handlers in main.py.
"""

from pydantic import BaseModel


class ErrorObject(BaseModel):
    id: str
    status: int
    title: str
    detail: str = ""


class ErrorResponse(BaseModel):
    errors: list[ErrorObject]
    request_id: str = ""
