"""
tests/test_routers_conf.py -- Tests for routers/conf.py

Covers: info selection flags, match filtering and regexp errors, save
persistence and change notification, join validation and captcha gate,
auth enforcement, and the 500 path for Slack failures.

Called by: pytest
Depends on: alfred/routers/conf.py, conftest.py
"""

from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from alfred.models import Configuration, ConfigurationUpdate
from alfred.utils.slack_client import SlackError


# ── info ─────────────────────────────────────────────────────────────


def test_info_flags_match_saved_configuration(client, test_configuration, mock_slack):
    with patch("alfred.routers.conf.SlackClient", return_value=mock_slack):
        resp = client.get("/info")
    assert resp.status_code == 200
    data = resp.json()

    channels = {c["id"]: c for c in data["channels"]}
    assert set(channels) == {"C1", "C3", "C4"}  # C2: not a member
    assert channels["C1"] == {"id": "C1", "name": "general", "selected": True, "verbose": False}
    assert channels["C3"]["selected"] is True and channels["C3"]["verbose"] is True
    assert channels["C4"]["selected"] is False and channels["C4"]["verbose"] is False

    groups = {g["id"]: g for g in data["groups"]}
    assert groups["G2"]["selected"] is True
    assert groups["G1"]["selected"] is False

    assert data["im"] is True
    assert data["verbose_im"] is False
    assert data["regexp"] == "^dev"
    assert data["all"] is False


def test_info_without_saved_configuration(client, mock_slack):
    with patch("alfred.routers.conf.SlackClient", return_value=mock_slack):
        resp = client.get("/info")
    assert resp.status_code == 200
    data = resp.json()
    assert all(not c["selected"] and not c["verbose"] for c in data["channels"])
    assert all(not g["selected"] for g in data["groups"])
    assert data["regexp"] == ""


def test_info_uses_user_token(client, test_user, mock_slack):
    with patch("alfred.routers.conf.SlackClient", return_value=mock_slack) as cls:
        client.get("/info")
    cls.assert_called_once_with(test_user.token)


def test_info_requires_session(anon_client):
    resp = anon_client.get("/info")
    assert resp.status_code == 401
    assert resp.json()["errors"][0]["id"] == "auth"


def test_info_slack_failure_is_server_error(db_session, test_user, mock_slack):
    from alfred.database import get_db
    from alfred.main import app
    from alfred.session import SESSION_COOKIE, SessionData, encrypt_session

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    mock_slack.channels = AsyncMock(side_effect=SlackError("conversations.list", "invalid_auth"))
    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            c.cookies.set(SESSION_COOKIE, encrypt_session(SessionData(name="jdoe", user=test_user.id)))
            with patch("alfred.routers.conf.SlackClient", return_value=mock_slack):
                resp = c.get("/info")
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 500
    assert resp.json()["errors"][0]["id"] == "internal_server_error"


# ── match ────────────────────────────────────────────────────────────


def test_match_filters_member_channels_then_groups(client, mock_slack):
    with patch("alfred.routers.conf.SlackClient", return_value=mock_slack):
        resp = client.post("/match", json={"regexp": "dev"})
    assert resp.status_code == 200
    assert resp.json() == ["dev-ops", "dev-null", "secret-dev"]


def test_match_skips_non_member_channels(client, mock_slack):
    with patch("alfred.routers.conf.SlackClient", return_value=mock_slack):
        resp = client.post("/match", json={"regexp": "rand"})
    assert resp.json() == []


def test_match_empty_regexp_returns_empty_list(client, mock_slack):
    with patch("alfred.routers.conf.SlackClient", return_value=mock_slack) as cls:
        resp = client.post("/match", json={"regexp": ""})
    assert resp.status_code == 200
    assert resp.json() == []
    cls.assert_not_called()


def test_match_invalid_regexp(client, mock_slack):
    with patch("alfred.routers.conf.SlackClient", return_value=mock_slack) as cls:
        resp = client.post("/match", json={"regexp": "dev(["})
    assert resp.status_code == 400
    err = resp.json()["errors"][0]
    assert err["id"] == "bad_request"
    assert err["detail"].startswith("Error parsing regexp - ")
    cls.assert_not_called()


def test_match_malformed_body(client):
    resp = client.post("/match", content=b"not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["id"] == "bad_request"


# ── save ─────────────────────────────────────────────────────────────


def _conf_body(**overrides):
    body = {
        "channels": ["C1"],
        "groups": ["G1"],
        "verbose_channels": [],
        "verbose_groups": ["G1"],
        "im": False,
        "verbose_im": False,
        "regexp": "^alerts-",
        "all": True,
    }
    body.update(overrides)
    return body


def test_save_persists_and_records_update(client, db_session, test_team):
    resp = client.post("/save", json=_conf_body())
    assert resp.status_code == 204

    row = db_session.get(Configuration, test_team.id)
    assert row.channels == ["C1"]
    assert row.verbose_groups == ["G1"]
    assert row.regexp == "^alerts-"
    assert row.all is True

    updates = db_session.query(ConfigurationUpdate).filter_by(team_id=test_team.id).all()
    assert len(updates) == 1
    assert updates[0].payload["team"] == test_team.id
    assert updates[0].payload["configuration"]["channels"] == ["C1"]


def test_save_replaces_configuration_wholesale(client, db_session, test_configuration, test_team):
    resp = client.post("/save", json={"channels": ["C9"]})
    assert resp.status_code == 204

    db_session.expire_all()
    row = db_session.get(Configuration, test_team.id)
    assert row.channels == ["C9"]
    assert row.groups == []
    assert row.verbose_channels == []
    assert row.im is False
    assert row.regexp == ""


def test_save_invalid_regexp_changes_nothing(client, db_session, test_configuration, test_team):
    resp = client.post("/save", json=_conf_body(regexp="(unclosed"))
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["detail"].startswith("Error parsing regexp")

    db_session.expire_all()
    assert db_session.get(Configuration, test_team.id).channels == ["C1", "C3"]
    assert db_session.query(ConfigurationUpdate).count() == 0


def test_save_requires_session(anon_client):
    resp = anon_client.post("/save", json=_conf_body())
    assert resp.status_code == 401


# ── join ─────────────────────────────────────────────────────────────


@patch("alfred.routers.conf.join_slack_channel", new_callable=AsyncMock)
@patch("alfred.routers.conf.verify_captcha", new_callable=AsyncMock)
def test_join_success(mock_verify, mock_join, anon_client):
    mock_verify.return_value = True
    resp = anon_client.post("/join", json={"email": "new@acme-corp.io", "captcharesponse": "tok"})
    assert resp.status_code == 204
    assert mock_verify.await_args.args[0] == "tok"
    mock_join.assert_awaited_once_with("new@acme-corp.io")


@patch("alfred.routers.conf.join_slack_channel", new_callable=AsyncMock)
@patch("alfred.routers.conf.verify_captcha", new_callable=AsyncMock)
def test_join_rejected_captcha(mock_verify, mock_join, anon_client):
    mock_verify.return_value = False
    resp = anon_client.post("/join", json={"email": "new@acme-corp.io", "captcharesponse": "tok"})
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["id"] == "bad_captcha"
    mock_join.assert_not_awaited()


@patch("alfred.routers.conf.join_slack_channel", new_callable=AsyncMock)
@patch("alfred.routers.conf.verify_captcha", new_callable=AsyncMock)
def test_join_validation_never_calls_captcha(mock_verify, mock_join, anon_client):
    long_email = "a" * 120 + "@acme-corp.io"
    bodies = [
        {"email": "not-an-email", "captcharesponse": "tok"},
        {"email": "", "captcharesponse": "tok"},
        {"email": "new@acme-corp.io", "captcharesponse": ""},
        {"email": "new@acme-corp.io"},
        {"email": long_email, "captcharesponse": "tok"},
    ]
    for body in bodies:
        resp = anon_client.post("/join", json=body)
        assert resp.status_code == 400, body
        assert resp.json()["errors"][0]["id"] == "bad_request"
    mock_verify.assert_not_awaited()
    mock_join.assert_not_awaited()


def _email_of_length(n: int) -> str:
    local = "a" * 64
    domain_label = "b" * (n - len(local) - 1 - len(".io"))
    return f"{local}@{domain_label}.io"


@patch("alfred.routers.conf.join_slack_channel", new_callable=AsyncMock)
@patch("alfred.routers.conf.verify_captcha", new_callable=AsyncMock)
def test_join_email_length_boundary(mock_verify, mock_join, anon_client):
    mock_verify.return_value = True
    at_limit = _email_of_length(128)
    over_limit = _email_of_length(129)
    assert len(at_limit) == 128 and len(over_limit) == 129

    resp = anon_client.post("/join", json={"email": at_limit, "captcharesponse": "tok"})
    assert resp.status_code == 204
    assert mock_verify.await_count == 1

    resp = anon_client.post("/join", json={"email": over_limit, "captcharesponse": "tok"})
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["id"] == "bad_request"
    assert mock_verify.await_count == 1
