"""GitHub webhook event data models."""

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RepositorySummary(BaseModel):
    """Repository block of a GitHub push payload."""

    model_config = ConfigDict(extra="ignore")

    full_name: Optional[str] = None
    html_url: Optional[str] = None


class Actor(BaseModel):
    """Pusher or sender of a GitHub event."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    login: Optional[str] = None


class PushEvent(BaseModel):
    """Push event payload from a GitHub webhook. Only ``ref`` is required."""

    model_config = ConfigDict(extra="ignore")

    ref: str = Field(min_length=1)
    before: Optional[str] = None
    after: Optional[str] = None
    compare: Optional[str] = None
    created: bool = False
    deleted: bool = False
    forced: bool = False
    repository: Optional[RepositorySummary] = None
    pusher: Optional[Actor] = None
    sender: Optional[Actor] = None


class PushNotification(BaseModel):
    """Validated push delivery handed to the release pipeline."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["push"] = "push"
    reference: str
    event: PushEvent
    delivery_id: Optional[str] = None
    raw_payload: Dict[str, Any] = {}


class PingNotification(BaseModel):
    """Ping delivery sent by GitHub when a webhook is created."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ping"] = "ping"
    zen: Optional[str] = None
    hook_id: Optional[int] = None
    delivery_id: Optional[str] = None


WebhookEvent = Annotated[
    Union[PushNotification, PingNotification],
    Field(discriminator="kind"),
]
