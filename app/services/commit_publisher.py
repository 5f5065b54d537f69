"""
Commit & Push component.

Commits the staged working tree on the release branch and pushes that branch
to the same-named branch on the origin remote.
"""

from app.errors import NothingToCommitError
from app.models.staging import CommitRequest, CommitResult, PushRequest, StagingArea
from app.services.git_client import GitClient
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CommitPublisher:
    """Creates the release commit and publishes its branch."""

    def __init__(self, git: GitClient):
        self.git = git

    def commit(self, staging: StagingArea, request: CommitRequest) -> CommitResult:
        """
        Stage every change in the working tree and commit it.

        Args:
            staging: Working copy holding the release files
            request: Commit message and author identity

        Returns:
            CommitResult with the new commit SHA

        Raises:
            NothingToCommitError: If the working tree has no changes
            GitCommandError: If git add or commit fails
        """
        self.git.add_all(staging.directory)

        if not self.git.status_porcelain(staging.directory).strip():
            raise NothingToCommitError(
                f"No changes to commit on {request.branch_name}; release files are unchanged"
            )

        sha = self.git.commit(staging.directory, request.message, request.author)
        logger.info(f"Git commit {sha}", extra={"stage": "commit", "branch": request.branch_name})

        return CommitResult(sha=sha, branch_name=request.branch_name, message=request.message)

    def push(self, staging: StagingArea, request: PushRequest) -> None:
        """
        Push the release branch to its same-named remote branch.

        Raises:
            GitCommandError: On authentication failure, rejected
                (non-fast-forward) update or network error
        """
        remote_url = self.git.remote_url(staging.directory, request.remote)
        logger.info(
            f"Pushing to remote {request.remote} {remote_url}",
            extra={"stage": "push", "branch": request.branch_name},
        )

        self.git.push(
            staging.directory,
            remote=request.remote,
            refspec=request.refspec,
            username=request.username,
            token=request.token.get_secret_value(),
        )

        logger.info(
            f"Pushed to {request.branch_name} successfully",
            extra={"stage": "push", "branch": request.branch_name},
        )
