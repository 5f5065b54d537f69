"""
GitHub webhook parsing.

Turns a raw delivery (event header, body bytes, delivery id) into a
concretely-typed ``WebhookEvent`` so downstream code never inspects
untyped payloads.
"""

import hashlib
import hmac
import json
from typing import Any, Dict, Optional

from pydantic import TypeAdapter, ValidationError

from app.errors import UnsupportedEventError, WebhookPayloadError
from app.models.push_event import (
    PushEvent,
    PushNotification,
    WebhookEvent,
)

SIGNATURE_PREFIX = "sha256="

_webhook_event_adapter = TypeAdapter(WebhookEvent)


def compute_signature(payload: bytes, secret: str) -> str:
    """Compute the ``X-Hub-Signature-256`` header value for a payload."""
    digest = hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(payload: bytes, signature: Optional[str], secret: str) -> bool:
    """
    Verify webhook signature for security.

    Args:
        payload: Raw request payload
        signature: Value of the X-Hub-Signature-256 header
        secret: Shared webhook secret

    Returns:
        True if signature is valid, False otherwise
    """
    if not signature:
        return False

    # Constant-time comparison
    return hmac.compare_digest(signature, compute_signature(payload, secret))


def _decode_body(body: bytes) -> Dict[str, Any]:
    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise WebhookPayloadError(f"Webhook body is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise WebhookPayloadError("Webhook body is not a JSON object")
    return payload


def parse_webhook(
    event_name: Optional[str],
    body: bytes,
    delivery_id: Optional[str] = None,
) -> WebhookEvent:
    """
    Parse a GitHub webhook delivery.

    Args:
        event_name: Value of the X-GitHub-Event header
        body: Raw request body
        delivery_id: Value of the X-GitHub-Delivery header

    Returns:
        PushNotification or PingNotification

    Raises:
        UnsupportedEventError: If the event is neither push nor ping
        WebhookPayloadError: If the body is not a valid payload for the event
    """
    if not event_name:
        raise WebhookPayloadError("Missing X-GitHub-Event header")

    if event_name not in ("push", "ping"):
        raise UnsupportedEventError(event_name)

    payload = _decode_body(body)

    try:
        if event_name == "ping":
            return _webhook_event_adapter.validate_python({
                "kind": "ping",
                "zen": payload.get("zen"),
                "hook_id": payload.get("hook_id"),
                "delivery_id": delivery_id,
            })

        event = PushEvent.model_validate(payload)
    except ValidationError as e:
        raise WebhookPayloadError(f"Invalid {event_name} payload: {e}") from e

    return PushNotification(
        reference=event.ref,
        event=event,
        delivery_id=delivery_id,
        raw_payload=payload,
    )
