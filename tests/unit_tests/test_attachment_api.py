from typing import Any, cast

import pytest
from flask import Flask
from flask_babel import Babel

from mailcraft import texts
from mailcraft.attachment.blueprint import create_attachment_blueprint
from mailcraft.attachment.core import AttachmentAttacher
from mailcraft.auth import issue_ticket
from mailcraft.db.json_db import Json
from mailcraft.engine import Engine
from tests.unit_tests.fake_app import test_app

test_app = test_app

ADD_URL = "/api/attachments/add"


def brochure_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "messageId": "newsletter",
        "attachmentId": "brochure",
        "fileName": "brochure.pdf",
        "language": "en",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def client(test_app: Engine):
    return test_app.test_client()


def login(client, role: str) -> None:
    response = client.post(f"/admin/fake-login/{role}")
    assert response.status_code == 200


@pytest.mark.parametrize("role", ["user", "advanced", "admin"])
def test_editor_can_attach(test_app: Engine, client, role: str):
    login(client, role)

    response = client.post(ADD_URL, json=brochure_payload())

    assert response.status_code == 200
    body = response.get_json()
    assert body["error"] is False
    assert body["errorMessage"] == texts.FILE_ATTACHED.format("brochure.pdf")
    assert body["notificationMessages"][0]["actionText"] == texts.CLICK_HERE
    message = cast(Json, test_app.db).get_message("newsletter", "en")
    assert message is not None
    assert [attachment.id for attachment in message.attachments] == ["price-list", "brochure"]


def test_anonymous_request_is_rejected(test_app: Engine, client):
    response = client.post(ADD_URL, json=brochure_payload())

    assert response.status_code == 401
    message = cast(Json, test_app.db).get_message("newsletter", "en")
    assert message is not None
    assert len(message.attachments) == 1


def test_user_without_role_is_rejected(client):
    login(client, "guest")

    response = client.post(ADD_URL, json=brochure_payload())

    assert response.status_code == 401
    assert response.get_json()["errorMessage"] == texts.ACCESS_DENIED


def test_expired_ticket_is_rejected(client):
    login(client, "admin")
    with client.session_transaction() as session:
        issue_ticket("admin", store=session, clock=lambda: 0.0)

    response = client.post(ADD_URL, json=brochure_payload())

    assert response.status_code == 401


def test_logout_revokes_access(client):
    login(client, "user")
    client.post("/admin/fake-logout")

    response = client.post(ADD_URL, json=brochure_payload())

    assert response.status_code == 401


@pytest.mark.parametrize("missing", ["messageId", "attachmentId", "fileName", "language"])
def test_malformed_request_is_bad_request(client, missing: str):
    login(client, "user")
    payload = brochure_payload()
    del payload[missing]

    response = client.post(ADD_URL, json=payload)

    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] is True
    assert body["errorKind"] == "contract_violation"


def test_non_json_body_is_bad_request(client):
    login(client, "user")

    response = client.post(ADD_URL, data="not json", content_type="text/plain")

    assert response.status_code == 400


def test_business_failure_is_reported_in_body(client):
    login(client, "user")

    response = client.post(ADD_URL, json=brochure_payload(messageId="sent-mail"))

    assert response.status_code == 200
    body = response.get_json()
    assert body["error"] is True
    assert body["errorKind"] == "state_conflict"
    assert body["notificationMessages"] == []


def test_size_limit_comes_from_config(client):
    login(client, "user")

    response = client.post(
        ADD_URL, json=brochure_payload(attachmentId="large-video", fileName="video.mp4")
    )

    body = response.get_json()
    assert body["errorKind"] == "quota_exceeded"
    assert "video.mp4" in body["errorMessage"]


def test_blueprint_uses_given_gate(test_app: Engine):
    class AllowAll:
        def __call__(self, view):
            return view

    app = Flask(__name__)
    app.secret_key = "test_secret_key"
    Babel(app)
    attacher = AttachmentAttacher(test_app.db)
    app.register_blueprint(create_attachment_blueprint(attacher, gate=AllowAll()))  # type: ignore[arg-type]

    response = app.test_client().post(ADD_URL, json=brochure_payload())

    assert response.status_code == 200
    assert response.get_json()["error"] is False
