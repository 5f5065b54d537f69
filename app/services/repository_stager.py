"""
Repository Stager component.

Materializes a fresh working copy of the downstream repository, switches to
the release branch and copies fetched release files into the target folder.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Optional

from app.errors import StagingError
from app.models.release import FetchedRelease
from app.models.staging import StagingArea
from app.services.git_client import GitClient
from app.utils.logging import get_logger

logger = get_logger(__name__, stage="stage")


class RepositoryStager:
    """Clones the downstream repository and stages release files on a new branch."""

    def __init__(
        self,
        git: GitClient,
        repository: str,
        base_branch: str = "master",
        target_subdir: str = "src",
        clone_depth: int = 1,
        clone_url: Optional[str] = None,
    ):
        """
        Initialize the stager.

        Args:
            git: Git client used for clone and checkout
            repository: Downstream repository in ``owner/name`` form
            base_branch: Branch to clone and base the release branch on
            target_subdir: Folder receiving the release files
            clone_depth: Clone depth, 0 for a full clone
            clone_url: Remote URL override, defaults to the GitHub HTTPS URL
        """
        self.git = git
        self.repository = repository
        self.base_branch = base_branch
        self.target_subdir = target_subdir
        self.clone_depth = clone_depth
        self.clone_url = clone_url or f"https://github.com/{repository}.git"

    def clone(self) -> Path:
        """Clone the base branch into a new temporary directory."""
        try:
            directory = Path(tempfile.mkdtemp(prefix=f"{self.repository.replace('/', '-')}-"))
        except OSError as e:
            raise StagingError(f"Failed to create temporary directory: {e}") from e

        logger.info(f"Cloning {self.repository} to {directory}")
        try:
            self.git.clone(self.clone_url, directory, self.base_branch, depth=self.clone_depth)
        except Exception:
            shutil.rmtree(directory, ignore_errors=True)
            raise
        logger.info(f"Cloned {self.repository} into {directory}")

        return directory

    def stage(self, fetched: FetchedRelease, branch_name: str) -> StagingArea:
        """
        Prepare a working copy holding the fetched release files.

        Args:
            fetched: Files extracted from the upstream release
            branch_name: Release branch to create (overwritten if present)

        Returns:
            StagingArea for the commit step; the caller owns its cleanup

        Raises:
            GitCommandError: If clone or checkout fails
        """
        directory = self.clone()
        staging = StagingArea(
            directory=directory,
            branch_name=branch_name,
            target_subdir=self.target_subdir,
        )

        try:
            self.git.checkout_new_branch(directory, branch_name)
            logger.info(f"Checked out branch {branch_name}", extra={"branch": branch_name})

            target = staging.target_directory
            target.mkdir(parents=True, exist_ok=True)
            for filename in fetched.files:
                shutil.copyfile(fetched.directory / filename, target / filename)
                staging.staged_files.append(filename)
        except OSError as e:
            staging.cleanup()
            raise StagingError(f"Failed to stage release files in {directory}: {e}") from e
        except Exception:
            staging.cleanup()
            raise

        logger.info(
            f"Staged {len(staging.staged_files)} files into {self.target_subdir}/",
            extra={"branch": branch_name},
        )
        return staging
