"""Data models for the libphonenumber release hook."""

from .pipeline import PipelineResult, PipelineStatus
from .pull_request import PullRequestResult, PullRequestSpec
from .push_event import (
    Actor,
    PingNotification,
    PushEvent,
    PushNotification,
    RepositorySummary,
    WebhookEvent,
)
from .release import FetchedRelease, ReleaseVersion
from .staging import (
    AuthorIdentity,
    CommitRequest,
    CommitResult,
    PushRequest,
    StagingArea,
)

__all__ = [
    # Webhook event models
    "Actor",
    "RepositorySummary",
    "PushEvent",
    "PushNotification",
    "PingNotification",
    "WebhookEvent",
    # Release models
    "ReleaseVersion",
    "FetchedRelease",
    # Staging models
    "AuthorIdentity",
    "StagingArea",
    "CommitRequest",
    "CommitResult",
    "PushRequest",
    # Pull request models
    "PullRequestSpec",
    "PullRequestResult",
    # Pipeline models
    "PipelineStatus",
    "PipelineResult",
]
