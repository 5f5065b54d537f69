"""
Release pipeline.

Runs one push notification through the linear sequence
tag filter -> fetch -> stage -> commit -> push -> pull request.
The first failure aborts the run; side effects already performed (a local
commit, a pushed branch) are left in place.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Optional

from app.config import Settings
from app.errors import ConfigurationError, HookError, StagingError
from app.models.pipeline import PipelineResult, PipelineStatus
from app.models.pull_request import PullRequestSpec
from app.models.push_event import PushNotification
from app.models.staging import AuthorIdentity, CommitRequest, PushRequest, StagingArea
from app.services.commit_publisher import CommitPublisher
from app.services.git_client import GitClient
from app.services.pull_request_opener import PullRequestOpener
from app.services.release import (
    branch_name_for,
    commit_message_for,
    extract_release_version,
    pull_request_body_for,
)
from app.services.repository_stager import RepositoryStager
from app.services.upstream_fetcher import UpstreamFetcher
from app.utils.logging import get_logger, log_error_with_context, log_stage_transition

logger = get_logger(__name__)


class ReleasePipeline:
    """Turns a tag push into a pull request on the downstream repository."""

    def __init__(
        self,
        settings: Settings,
        fetcher: UpstreamFetcher,
        stager: RepositoryStager,
        publisher: CommitPublisher,
        opener: Optional[PullRequestOpener] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            settings: Application settings
            fetcher: Upstream release fetcher
            stager: Downstream repository stager
            publisher: Commit and push component
            opener: Pull request opener; built from the token at run time
                when omitted
        """
        self.settings = settings
        self.fetcher = fetcher
        self.stager = stager
        self.publisher = publisher
        self.opener = opener

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReleasePipeline":
        git = GitClient(
            executable=settings.git_executable,
            timeout_seconds=settings.git_timeout_seconds,
        )
        return cls(
            settings=settings,
            fetcher=UpstreamFetcher(
                archive_url_template=settings.upstream_archive_url,
                path_marker=settings.upstream_path_marker,
                timeout_seconds=settings.fetch_timeout_seconds,
                max_download_bytes=settings.max_download_bytes,
                expected_files=settings.expected_files,
            ),
            stager=RepositoryStager(
                git=git,
                repository=settings.downstream_repository,
                base_branch=settings.base_branch,
                target_subdir=settings.target_subdir,
                clone_depth=settings.clone_depth,
            ),
            publisher=CommitPublisher(git),
        )

    def _require_token(self) -> str:
        token = self.settings.github_token
        if token is None or not token.get_secret_value():
            raise ConfigurationError("GITHUB_TOKEN is required to push and open pull requests")
        return token.get_secret_value()

    def _pull_request_opener(self, token: str) -> PullRequestOpener:
        if self.opener is not None:
            return self.opener
        return PullRequestOpener(
            token=token,
            api_url=self.settings.api_url,
            timeout_seconds=self.settings.api_timeout_seconds,
        )

    def run(self, notification: PushNotification) -> PipelineResult:
        """
        Run the pipeline for one push notification.

        Args:
            notification: Validated push notification

        Returns:
            PipelineResult; ``skipped`` for non-tag pushes

        Raises:
            HookError: On the first failing stage
        """
        version = extract_release_version(notification.reference)
        if version is None:
            return PipelineResult(status=PipelineStatus.SKIPPED, reference=notification.reference)

        settings = self.settings
        token = self._require_token() if settings.push_enabled else None

        branch_name = branch_name_for(version, settings.branch_template)
        message = commit_message_for(version, settings.commit_message_template)
        run_logger = logger.with_context(version=version.value, branch=branch_name)

        try:
            download_dir = Path(tempfile.mkdtemp(prefix="libphonenumber-"))
        except OSError as e:
            raise StagingError(f"Failed to create download directory: {e}") from e

        staging: Optional[StagingArea] = None

        try:
            log_stage_transition(run_logger, "fetch", "started")
            fetched = self.fetcher.fetch(version, download_dir)
            log_stage_transition(run_logger, "fetch", "completed", files=len(fetched.files))

            log_stage_transition(run_logger, "stage", "started")
            staging = self.stager.stage(fetched, branch_name)
            log_stage_transition(run_logger, "stage", "completed", directory=str(staging.directory))

            log_stage_transition(run_logger, "commit", "started")
            commit = self.publisher.commit(
                staging,
                CommitRequest(
                    branch_name=branch_name,
                    message=message,
                    author=AuthorIdentity(name=settings.author_name, email=settings.author_email),
                ),
            )
            log_stage_transition(run_logger, "commit", "completed", sha=commit.sha)

            if not settings.push_enabled:
                run_logger.warning("Skipping commit push")
                return PipelineResult(
                    status=PipelineStatus.DRY_RUN,
                    reference=notification.reference,
                    version=version.value,
                    branch_name=branch_name,
                    commit_sha=commit.sha,
                )

            log_stage_transition(run_logger, "push", "started")
            self.publisher.push(
                staging,
                PushRequest(
                    branch_name=branch_name,
                    username=settings.effective_git_username,
                    token=token,
                ),
            )
            log_stage_transition(run_logger, "push", "completed")

            log_stage_transition(run_logger, "pull_request", "started")
            pull_request = self._pull_request_opener(token).open(
                settings.downstream_repository,
                PullRequestSpec(
                    title=message,
                    head=branch_name,
                    base=settings.base_branch,
                    body=pull_request_body_for(version, settings.pull_request_body_template),
                ),
            )
            log_stage_transition(run_logger, "pull_request", "completed", number=pull_request.number)

            return PipelineResult(
                status=PipelineStatus.COMPLETED,
                reference=notification.reference,
                version=version.value,
                branch_name=branch_name,
                commit_sha=commit.sha,
                pull_request=pull_request,
            )
        finally:
            if settings.cleanup_workspace:
                shutil.rmtree(download_dir, ignore_errors=True)
                if staging is not None:
                    staging.cleanup()
            else:
                run_logger.info(
                    "Keeping workspace",
                    extra={
                        "download_dir": str(download_dir),
                        "staging_dir": str(staging.directory) if staging else None,
                    },
                )


def run_release_pipeline(
    notification: PushNotification,
    settings: Settings,
    pipeline: Optional[ReleasePipeline] = None,
) -> Optional[PipelineResult]:
    """
    Top-level handler for one delivery.

    Runs the pipeline and logs the outcome. Failures are logged, never
    raised, because the webhook sender has already been acknowledged.

    Returns:
        PipelineResult on success, None on failure
    """
    run_logger = logger.with_context(
        delivery_id=notification.delivery_id,
        repository=settings.downstream_repository,
    )
    pipeline = pipeline or ReleasePipeline.from_settings(settings)

    try:
        result = pipeline.run(notification)
    except HookError as e:
        log_error_with_context(
            run_logger,
            f"Release pipeline failed at stage {e.stage}: {e}",
            e,
            stage=e.stage,
            reference=notification.reference,
        )
        return None
    except Exception as e:
        log_error_with_context(
            run_logger,
            f"Unexpected error in release pipeline: {e}",
            e,
            reference=notification.reference,
        )
        return None

    run_logger.info(
        f"Release pipeline {result.status.value}",
        extra={
            "reference": result.reference,
            "version": result.version,
            "branch": result.branch_name,
            "commit_sha": result.commit_sha,
            "pull_request": result.pull_request.html_url if result.pull_request else None,
        },
    )
    return result
