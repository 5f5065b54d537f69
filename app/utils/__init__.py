"""
Utility modules for the release hook.
"""

from app.utils.logging import (
    get_logger,
    setup_logging,
    ContextLoggerAdapter,
    JSONFormatter,
    log_webhook_event,
    log_stage_transition,
    log_api_call,
    log_error_with_context,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "ContextLoggerAdapter",
    "JSONFormatter",
    "log_webhook_event",
    "log_stage_transition",
    "log_api_call",
    "log_error_with_context",
]
