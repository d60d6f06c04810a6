"""
errors.py — Structured client errors

AppError carries an id/status/title/detail quadruple and is rendered by
the handler in main.py as {"errors": [ ... ]}. Only user-input problems
are AppErrors. Anything else propagates to the catch-all 500 handler.

Each factory returns a fresh instance so tracebacks never pile up on a
shared exception object.

Called by: routers/*.py, dependencies.py, main.py
"""


class AppError(Exception):
    def __init__(self, id: str, status: int, title: str, detail: str = ""):
        super().__init__(detail or title)
        self.id = id
        self.status = status
        self.title = title
        self.detail = detail

    def to_dict(self) -> dict:
        return {"id": self.id, "status": self.status, "title": self.title, "detail": self.detail}


def bad_request(detail: str = "Request body is not well-formed. It must be JSON.") -> AppError:
    return AppError("bad_request", 400, "Bad Request", detail)


def bad_content(detail: str = "Request parameters are missing or malformed.") -> AppError:
    return AppError("bad_content", 400, "Bad Content", detail)


def bad_captcha() -> AppError:
    return AppError("bad_captcha", 400, "Bad Captcha", "Captcha verification failed.")


def not_authenticated() -> AppError:
    return AppError("auth", 401, "Not Authenticated", "Authentication required.")


def oauth_error(detail: str) -> AppError:
    return AppError("oauth_err", 401, "Slack OAuth Error", detail)


def regexp_error(err: Exception) -> AppError:
    return bad_request(f"Error parsing regexp - {err}")
