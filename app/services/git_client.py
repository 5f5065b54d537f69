"""
Thin wrapper around the ``git`` executable.

Every call is a blocking subprocess with captured output and a timeout.
Credentials are only ever passed as one-shot ``-c`` configuration and are
redacted from anything that ends up in an exception or a log line.
"""

import base64
import os
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from app.errors import GitCommandError, GitTimeoutError
from app.models.staging import AuthorIdentity
from app.utils.logging import get_logger

logger = get_logger(__name__, stage="git")

REDACTED = "***"


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str
    duration_ms: int


def _redact(text: str, secrets: Iterable[str]) -> str:
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


def basic_auth_header(username: str, token: str) -> str:
    """HTTP basic ``Authorization`` header value for git over HTTPS."""
    credentials = base64.b64encode(f"{username}:{token}".encode()).decode()
    return f"Basic {credentials}"


class GitClient:
    """Runs git commands against local working copies."""

    def __init__(
        self,
        executable: str = "git",
        timeout_seconds: float = 120.0,
        env: Optional[Dict[str, str]] = None,
    ):
        self.executable = executable
        self.timeout_seconds = timeout_seconds
        self._env = env

    def _environment(self) -> Dict[str, str]:
        env = dict(os.environ if self._env is None else self._env)
        # Never block on an interactive credential prompt
        env["GIT_TERMINAL_PROMPT"] = "0"
        return env

    def run(
        self,
        args: List[str],
        cwd: Optional[Path] = None,
        config: Optional[Dict[str, str]] = None,
        secrets: Iterable[str] = (),
    ) -> CommandResult:
        """
        Run a git command and return its output.

        Args:
            args: Git subcommand and arguments
            cwd: Working directory
            config: One-shot configuration passed as ``-c key=value``
            secrets: Strings to redact from errors and logs

        Returns:
            CommandResult with captured stdout/stderr

        Raises:
            GitTimeoutError: If the command exceeds the timeout
            GitCommandError: If git cannot be started or exits non-zero
        """
        secrets = [secret for secret in secrets if secret]
        cmd = [self.executable]
        for key, value in (config or {}).items():
            cmd.extend(["-c", f"{key}={value}"])
        cmd.extend(args)

        logger.debug(f"Running git {' '.join(args)}", extra={"cwd": str(cwd) if cwd else None})

        start = time.monotonic()
        try:
            completed = subprocess.run(  # noqa: S603
                cmd,
                cwd=cwd,
                env=self._environment(),
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired as e:
            stderr = e.stderr if isinstance(e.stderr, str) else ""
            raise GitTimeoutError(
                args,
                returncode=124,
                stderr=_redact(stderr or f"timed out after {self.timeout_seconds}s", secrets),
            ) from e
        except OSError as e:
            raise GitCommandError(args, returncode=127, stderr=str(e)) from e

        result = CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=_redact(completed.stderr, secrets),
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        logger.debug(
            f"git {args[0]} exited with {result.returncode}",
            extra={"returncode": result.returncode, "duration_ms": result.duration_ms},
        )

        if result.returncode != 0:
            raise GitCommandError(args, returncode=result.returncode, stderr=result.stderr)

        return result

    def clone(self, url: str, directory: Path, branch: str, depth: int = 1) -> None:
        """Clone ``branch`` of ``url`` into an existing empty ``directory``."""
        args = ["clone", "--branch", branch, "--single-branch"]
        if depth > 0:
            args.extend(["--depth", str(depth)])
        args.extend([url, str(directory)])
        self.run(args)

    def checkout_new_branch(self, repo_dir: Path, branch: str) -> None:
        """Create and check out ``branch``, resetting it if it already exists."""
        self.run(["checkout", "-B", branch], cwd=repo_dir)

    def add_all(self, repo_dir: Path) -> None:
        self.run(["add", "--all"], cwd=repo_dir)

    def status_porcelain(self, repo_dir: Path) -> str:
        return self.run(["status", "--porcelain"], cwd=repo_dir).stdout

    def commit(self, repo_dir: Path, message: str, author: AuthorIdentity) -> str:
        """
        Commit the index with the given author as author and committer.

        Returns:
            SHA of the new commit
        """
        config = {
            "user.name": author.name,
            "user.email": author.email,
            "commit.gpgsign": "false",
        }
        self.run(
            ["commit", "--message", message, "--author", f"{author.name} <{author.email}>"],
            cwd=repo_dir,
            config=config,
        )
        return self.run(["rev-parse", "HEAD"], cwd=repo_dir).stdout.strip()

    def remote_url(self, repo_dir: Path, remote: str = "origin") -> str:
        return self.run(["remote", "get-url", remote], cwd=repo_dir).stdout.strip()

    def push(
        self,
        repo_dir: Path,
        remote: str,
        refspec: str,
        username: str,
        token: str,
    ) -> None:
        """Push ``refspec`` to ``remote`` with HTTP basic authentication."""
        header = basic_auth_header(username, token)
        self.run(
            ["push", "--porcelain", remote, refspec],
            cwd=repo_dir,
            config={"http.extraHeader": f"Authorization: {header}"},
            secrets=[token, header.split(" ", 1)[1]],
        )
