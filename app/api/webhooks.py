"""
Webhook endpoints for GitHub push deliveries.
"""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request
from fastapi.responses import PlainTextResponse

from app.config import Settings, get_settings
from app.errors import UnsupportedEventError, WebhookPayloadError
from app.models.push_event import PingNotification
from app.services.release_pipeline import run_release_pipeline
from app.services.webhook_parser import parse_webhook, verify_signature
from app.utils.logging import get_logger, log_webhook_event

logger = get_logger(__name__, stage="receive")

router = APIRouter(tags=["webhooks"])

WEBHOOK_PATHS = ("/", "/webhooks/github")
METHOD_NOT_ALLOWED_MESSAGE = "Method not supported by libphonenumber-hook"
NON_POST_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"]


@router.post(WEBHOOK_PATHS[0], response_class=PlainTextResponse)
@router.post(WEBHOOK_PATHS[1], response_class=PlainTextResponse)
async def handle_github_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_settings),
    x_github_event: Optional[str] = Header(None, alias="X-GitHub-Event"),
    x_github_delivery: Optional[str] = Header(None, alias="X-GitHub-Delivery"),
    x_hub_signature: Optional[str] = Header(None, alias="X-Hub-Signature-256"),
) -> PlainTextResponse:
    """
    Receive a GitHub webhook delivery.

    This endpoint:
    1. Validates the webhook signature when a secret is configured
    2. Parses the delivery into a typed push (or ping) notification
    3. Schedules the release pipeline in the background
    4. Returns 200 "OK" immediately, whatever the pipeline outcome

    Args:
        request: FastAPI request object
        background_tasks: FastAPI background tasks
        settings: Application settings
        x_github_event: Event name header
        x_github_delivery: Delivery id header
        x_hub_signature: HMAC-SHA256 signature header

    Returns:
        Plaintext response
    """
    body = await request.body()

    if settings.webhook_secret and not verify_signature(body, x_hub_signature, settings.webhook_secret):
        logger.warning("Invalid webhook signature received", extra={"delivery_id": x_github_delivery})
        return PlainTextResponse("Invalid webhook signature", status_code=401)

    try:
        event = parse_webhook(x_github_event, body, x_github_delivery)
    except UnsupportedEventError as e:
        logger.warning(str(e), extra={"delivery_id": x_github_delivery})
        return PlainTextResponse(str(e), status_code=400)
    except WebhookPayloadError as e:
        logger.error(f"Invalid push payload: {e}", extra={"delivery_id": x_github_delivery})
        return PlainTextResponse("Invalid push payload", status_code=400)

    if isinstance(event, PingNotification):
        log_webhook_event(logger, "ping", event.delivery_id)
        return PlainTextResponse("OK")

    log_webhook_event(logger, "push", event.delivery_id, reference=event.reference)
    background_tasks.add_task(run_release_pipeline, event, settings)

    return PlainTextResponse("OK")


@router.api_route(WEBHOOK_PATHS[0], methods=NON_POST_METHODS, include_in_schema=False)
@router.api_route(WEBHOOK_PATHS[1], methods=NON_POST_METHODS, include_in_schema=False)
async def reject_unsupported_method() -> PlainTextResponse:
    """Reject any non-POST request with a plaintext 405."""
    return PlainTextResponse(METHOD_NOT_ALLOWED_MESSAGE, status_code=405)
