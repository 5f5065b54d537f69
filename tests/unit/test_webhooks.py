"""
Unit tests for webhook endpoints.
"""

import json
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.config import get_settings
from app.main import app
from app.models.push_event import PushNotification
from app.services.webhook_parser import compute_signature


PUSH_TAG = {
    "ref": "refs/tags/v8.12.0",
    "before": "0000000000000000000000000000000000000000",
    "after": "1f2e3d4c5b6a79880f1e2d3c4b5a69788f9e0d1c",
    "created": True,
    "repository": {"full_name": "google/libphonenumber", "name": "libphonenumber"},
}
PUSH_BRANCH = dict(PUSH_TAG, ref="refs/heads/master")


@pytest.fixture
def client(test_settings):
    """Create test client with deterministic settings."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def mock_pipeline():
    """Mock the background release pipeline."""
    with patch("app.api.webhooks.run_release_pipeline") as mock:
        yield mock


def post_event(client, payload, event="push", headers=None):
    all_headers = {"X-GitHub-Event": event, "X-GitHub-Delivery": "delivery-1", "Content-Type": "application/json"}
    all_headers.update(headers or {})
    body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
    return client.post("/", content=body, headers=all_headers)


def test_tag_push_schedules_pipeline(client, mock_pipeline, test_settings):
    """Test a tag push is acknowledged and handed to the pipeline."""
    response = post_event(client, PUSH_TAG)

    assert response.status_code == 200
    assert response.text == "OK"
    mock_pipeline.assert_called_once()
    notification, settings = mock_pipeline.call_args.args
    assert isinstance(notification, PushNotification)
    assert notification.reference == "refs/tags/v8.12.0"
    assert notification.delivery_id == "delivery-1"
    assert settings is test_settings


def test_branch_push_acknowledged(client, mock_pipeline):
    """Test non-tag pushes still get 200 OK."""
    response = post_event(client, PUSH_BRANCH)

    assert response.status_code == 200
    assert response.text == "OK"


def test_alternate_webhook_path(client, mock_pipeline):
    response = client.post(
        "/webhooks/github",
        content=json.dumps(PUSH_TAG).encode(),
        headers={"X-GitHub-Event": "push"},
    )

    assert response.status_code == 200
    mock_pipeline.assert_called_once()


def test_ping_event(client, mock_pipeline):
    """Test GitHub's ping on hook creation."""
    response = post_event(client, {"zen": "Keep it logically awesome.", "hook_id": 1}, event="ping")

    assert response.status_code == 200
    assert response.text == "OK"
    mock_pipeline.assert_not_called()


def test_unsupported_event(client, mock_pipeline):
    response = post_event(client, {"action": "opened"}, event="issues")

    assert response.status_code == 400
    assert "Unsupported event: issues" in response.text
    mock_pipeline.assert_not_called()


def test_missing_event_header(client, mock_pipeline):
    response = client.post("/", content=json.dumps(PUSH_TAG).encode())

    assert response.status_code == 400
    mock_pipeline.assert_not_called()


@pytest.mark.parametrize("body", [b"not json", b"[]", b'{"before": "abc"}'])
def test_invalid_push_payload(client, mock_pipeline, body):
    """Test unparseable or ref-less payloads are rejected with plaintext 400."""
    response = post_event(client, body)

    assert response.status_code == 400
    assert response.text == "Invalid push payload"
    assert response.headers["content-type"].startswith("text/plain")
    mock_pipeline.assert_not_called()


@pytest.mark.parametrize("path", ["/", "/webhooks/github"])
@pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"])
def test_non_post_rejected(client, mock_pipeline, path, method):
    """Test every non-POST method gets a plaintext 405."""
    response = client.request(method, path)

    assert response.status_code == 405
    assert response.text == "Method not supported by libphonenumber-hook"
    assert response.headers["content-type"].startswith("text/plain")
    mock_pipeline.assert_not_called()


def test_head_rejected(client, mock_pipeline):
    response = client.head("/")

    assert response.status_code == 405
    mock_pipeline.assert_not_called()


class TestSignatureVerification:
    """Signature checks when a webhook secret is configured."""

    @pytest.fixture
    def signed_client(self, test_settings):
        signed_settings = test_settings.model_copy(update={"webhook_secret": "test_secret"})
        app.dependency_overrides[get_settings] = lambda: signed_settings
        yield TestClient(app)
        app.dependency_overrides.clear()

    def test_valid_signature(self, signed_client, mock_pipeline):
        body = json.dumps(PUSH_TAG).encode()

        response = post_event(
            signed_client, body, headers={"X-Hub-Signature-256": compute_signature(body, "test_secret")}
        )

        assert response.status_code == 200
        mock_pipeline.assert_called_once()

    def test_invalid_signature(self, signed_client, mock_pipeline):
        response = post_event(signed_client, PUSH_TAG, headers={"X-Hub-Signature-256": "sha256=invalid"})

        assert response.status_code == 401
        assert response.text == "Invalid webhook signature"
        mock_pipeline.assert_not_called()

    def test_missing_signature(self, signed_client, mock_pipeline):
        response = post_event(signed_client, PUSH_TAG)

        assert response.status_code == 401
        mock_pipeline.assert_not_called()
