"""Staging area, commit and push data models."""

import shutil
from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, SecretStr


class AuthorIdentity(BaseModel):
    """Author and committer identity used for generated commits."""

    name: str
    email: str


class StagingArea(BaseModel):
    """Temporary working copy of the downstream repository."""

    directory: Path
    branch_name: str
    target_subdir: str
    staged_files: List[str] = []

    @property
    def target_directory(self) -> Path:
        return self.directory / self.target_subdir

    def cleanup(self) -> None:
        """Remove the working copy. Best-effort; errors are ignored."""
        shutil.rmtree(self.directory, ignore_errors=True)


class CommitRequest(BaseModel):
    """Commit to create on the staging branch."""

    branch_name: str
    message: str
    author: AuthorIdentity


class CommitResult(BaseModel):
    """Commit created in the staging area."""

    sha: str
    branch_name: str
    message: str


class PushRequest(BaseModel):
    """Push of a local branch to its same-named remote branch."""

    model_config = ConfigDict(hide_input_in_errors=True)

    branch_name: str
    username: str
    token: SecretStr
    remote: str = "origin"

    @property
    def refspec(self) -> str:
        return f"refs/heads/{self.branch_name}:refs/heads/{self.branch_name}"
