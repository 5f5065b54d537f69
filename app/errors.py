"""
Error taxonomy for the release hook.

Every failure inside the pipeline is raised as a ``HookError`` subclass and
propagates up to ``run_release_pipeline``, which logs it. Nothing retries and
nothing rolls back side effects that already happened.
"""

from typing import List, Optional


class HookError(Exception):
    """Base exception for release hook errors."""

    stage: str = "pipeline"

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class ConfigurationError(HookError):
    """Required configuration is missing or unusable."""

    stage = "configuration"


class WebhookPayloadError(HookError):
    """Webhook body could not be parsed as a push event."""

    stage = "receive"


class UnsupportedEventError(HookError):
    """Webhook delivery carries an event this hook does not handle."""

    stage = "receive"

    def __init__(self, event_name: str):
        super().__init__(f"Unsupported event: {event_name}")
        self.event_name = event_name


class UpstreamFetchError(HookError):
    """Release archive could not be downloaded or extracted."""

    stage = "fetch"


class UpstreamTimeoutError(UpstreamFetchError):
    """Release archive download exceeded its wall-clock budget."""


class GitCommandError(HookError):
    """A git subprocess exited with a non-zero status."""

    stage = "git"

    def __init__(
        self,
        command: List[str],
        returncode: int,
        stderr: str = "",
        stage: Optional[str] = None,
    ):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no output"
        super().__init__(
            f"git {' '.join(command)} failed with exit code {returncode}: {detail}",
            stage=stage,
        )


class GitTimeoutError(GitCommandError):
    """A git subprocess exceeded its timeout and was killed."""


class NothingToCommitError(HookError):
    """Staged working tree has no changes against the base branch."""

    stage = "commit"


class PullRequestError(HookError):
    """Pull request creation failed."""

    stage = "pull_request"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_message = response_message


class StagingError(HookError):
    """Working copy could not be prepared on local disk."""

    stage = "stage"
