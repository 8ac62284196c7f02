"""Tests for the HTTP API."""

import base64
import hashlib
import hmac
import json

import pytest
from fastapi.testclient import TestClient

from clothcheck.api import create_fastapi_app
from clothcheck.app import Application


def launch_envelope(user_id="U1"):
    return {
        "version": "1.0",
        "session": {
            "sessionId": "s1",
            "new": True,
            "sessionAttributes": {},
            "user": {"userId": user_id},
        },
        "context": {},
        "request": {"type": "LaunchRequest"},
    }


def intent_envelope(name, attributes=None, slots=None):
    body = launch_envelope()
    body["session"]["new"] = False
    body["session"]["sessionAttributes"] = attributes or {}
    body["request"] = {
        "type": "IntentRequest",
        "intent": {
            "name": name,
            "slots": {k: {"name": k, "value": v} for k, v in (slots or {}).items()},
        },
    }
    return body


@pytest.fixture
def application(mock_weather, mock_notifier):
    """Application with in-memory store and fake collaborators."""
    return Application(db_path=":memory:", weather=mock_weather, notifier=mock_notifier)


@pytest.fixture
def client(application, monkeypatch):
    """HTTP client running the app lifespan."""
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.delenv("LINE_CHANNEL_SECRET", raising=False)
    with TestClient(create_fastapi_app(application)) as test_client:
        yield test_client


class TestHealth:
    """Tests for /health."""

    def test_health(self, client):
        """Test health endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestSkillRoute:
    """Tests for POST /api/skill."""

    def test_launch_for_new_user(self, client):
        """Test that a new user is asked for a postal code."""
        response = client.post("/api/skill", json=launch_envelope())

        assert response.status_code == 200
        body = response.json()
        assert body["sessionAttributes"]["phase"] == "postal-first"
        assert body["response"]["shouldEndSession"] is False
        assert "reprompt" in body["response"]

    def test_wrong_phase_is_200(self, client):
        """Test that a wrong-phase intent is answered, not failed."""
        response = client.post(
            "/api/skill",
            json=intent_envelope(
                "PostalCodeRestIntent",
                {"stateVersion": 1, "phase": "postal-first"},
                {"SerialFour": "4", "SerialFive": "5", "SerialSix": "6", "SerialSeven": "7"},
            ),
        )
        assert response.status_code == 200
        assert response.json()["sessionAttributes"]["phase"] == "postal-first"

    def test_unknown_intent_is_400(self, client):
        """Test that routing failures are client errors."""
        response = client.post("/api/skill", json=intent_envelope("Clova.YesIntent"))
        assert response.status_code == 400

    def test_dependency_failure_is_500(self, client, application, mock_weather):
        """Test that collaborator failures fail the turn."""
        mock_weather.lookup_temperature.side_effect = RuntimeError("weather down")
        response = client.post(
            "/api/skill",
            json=intent_envelope(
                "PostalCodeRestIntent",
                {"stateVersion": 1, "phase": "postal-rest", "postalCodeFirstHalf": "123"},
                {"SerialFour": "4", "SerialFive": "5", "SerialSix": "6", "SerialSeven": "7"},
            ),
        )
        assert response.status_code == 500
        assert "sessionAttributes" not in response.json()

    def test_malformed_envelope_is_422(self, client):
        """Test that an envelope without session is rejected."""
        response = client.post("/api/skill", json={"request": {"type": "LaunchRequest"}})
        assert response.status_code == 422

    def test_debug_user_override(self, client, application, monkeypatch):
        """Test that DEBUG=1 routes every turn to DEBUG_USER_ID."""
        monkeypatch.setenv("DEBUG", "1")
        monkeypatch.setenv("DEBUG_USER_ID", "DEV")

        client.post(
            "/api/skill",
            json=intent_envelope(
                "PostalCodeRestIntent",
                {"stateVersion": 1, "phase": "postal-rest", "postalCodeFirstHalf": "123"},
                {"SerialFour": "4", "SerialFive": "5", "SerialSix": "6", "SerialSeven": "7"},
            ),
        )

        record = client.portal.call(application.store.get_postal_code, "DEV")
        assert record is not None
        assert client.portal.call(application.store.get_postal_code, "U1") is None


LINE_SECRET = "channel_secret"


def line_event(event_type, user_id, **fields):
    return {
        "type": event_type,
        "mode": "active",
        "timestamp": 1767225600000,
        "source": {"type": "user", "userId": user_id},
        "webhookEventId": f"01H{event_type.upper()}",
        "deliveryContext": {"isRedelivery": False},
        "replyToken": "reply_token",
        **fields,
    }


def line_body(data, user_id="U1"):
    return {
        "destination": "Ubot",
        "events": [
            line_event("postback", user_id, postback={"data": data}),
            line_event("follow", user_id, follow={"isUnblocked": False}),
        ],
    }


def sign(raw, secret=LINE_SECRET):
    return base64.b64encode(
        hmac.new(secret.encode("utf-8"), raw, hashlib.sha256).digest()
    ).decode("utf-8")


def post_webhook(client, body, signature=None):
    raw = json.dumps(body).encode("utf-8")
    headers = {"Content-Type": "application/json"}
    headers["X-Line-Signature"] = sign(raw) if signature is None else signature
    return client.post("/api/line/webhook", content=raw, headers=headers)


class TestLineWebhook:
    """Tests for POST /api/line/webhook."""

    @pytest.fixture(autouse=True)
    def channel_secret(self, client, monkeypatch):
        monkeypatch.setenv("LINE_CHANNEL_SECRET", LINE_SECRET)

    def test_postback_revises_rating(self, client, application):
        """Test that a signed rating choice is applied."""
        response = post_webhook(client, line_body("18&COLD"))

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "processed": 1}
        rating = client.portal.call(application.store.get_rating, "U1", 18)
        assert rating.result.value == "COLD"

    def test_foreign_postback_is_skipped(self, client):
        """Test that other postbacks are not counted."""
        response = post_webhook(client, line_body("menu"))

        assert response.status_code == 200
        assert response.json()["processed"] == 0

    @pytest.mark.parametrize("signature", ["", "bogus"])
    def test_bad_signature_rejected(self, client, application, signature):
        """Test that a missing or wrong signature changes nothing."""
        response = post_webhook(client, line_body("18&HOT"), signature=signature)

        assert response.status_code == 401
        assert client.portal.call(application.store.get_rating, "U1", 18) is None

    def test_signed_with_other_secret_rejected(self, client):
        """Test that a body signed with another secret is rejected."""
        raw = json.dumps(line_body("18&HOT")).encode("utf-8")
        response = post_webhook(
            client, line_body("18&HOT"), signature=sign(raw, secret="other")
        )
        assert response.status_code == 401

    def test_unconfigured_secret_refuses_all(self, client, application, monkeypatch):
        """Test that without a channel secret no revision is accepted."""
        monkeypatch.delenv("LINE_CHANNEL_SECRET")

        response = post_webhook(client, line_body("18&HOT"))

        assert response.status_code == 503
        assert client.portal.call(application.store.get_rating, "U1", 18) is None

    def test_invalid_json_is_400(self, client):
        """Test that a signed non-JSON body is rejected."""
        raw = b"not json"
        response = client.post(
            "/api/line/webhook",
            content=raw,
            headers={"X-Line-Signature": sign(raw)},
        )
        assert response.status_code == 400


class TestControlRoutes:
    """Tests for /api/control."""

    def test_reset_clears_store(self, client, application):
        """Test that reset empties stored data."""
        client.portal.call(application.store.put_postal_code, "U1", "123-4567")

        response = client.post("/api/control/reset")

        assert response.status_code == 200
        assert client.portal.call(application.store.get_postal_code, "U1") is None

    def test_sim_not_configured(self, client, monkeypatch):
        """Test that SIM control without instance is 404."""
        from clothcheck.api.routes import control

        monkeypatch.setattr(control, "_sim_instance", None)
        assert client.post("/api/control/sim/start").status_code == 404
        assert client.post("/api/control/sim/stop").status_code == 404
