"""Pipeline run result models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .pull_request import PullRequestResult


class PipelineStatus(str, Enum):
    """Outcome of a pipeline run that did not raise."""

    SKIPPED = "skipped"  # Push was not a tag
    DRY_RUN = "dry_run"  # Committed locally, push disabled
    COMPLETED = "completed"


class PipelineResult(BaseModel):
    """Summary of a release pipeline run."""

    status: PipelineStatus
    reference: str
    version: Optional[str] = None
    branch_name: Optional[str] = None
    commit_sha: Optional[str] = None
    pull_request: Optional[PullRequestResult] = None
