"""
Pull Request Opener component.

Opens a pull request on the downstream repository through the GitHub REST
API. Any non-201 answer, including "a pull request already exists", is a
failure; nothing is retried.
"""

import time
from typing import Optional

import httpx

from app.errors import PullRequestError
from app.models.pull_request import PullRequestResult, PullRequestSpec
from app.utils.logging import get_logger, log_api_call

logger = get_logger(__name__, stage="pull_request")

GITHUB_API_VERSION = "2022-11-28"


class PullRequestOpener:
    """Creates pull requests with a static bearer token."""

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.github.com",
        timeout_seconds: float = 15.0,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the opener.

        Args:
            token: GitHub token with pull request write access
            api_url: GitHub REST API base URL
            timeout_seconds: Request timeout
            client: Optional shared httpx client (not closed by the opener)
        """
        self.api_url = api_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._token = token
        self._client = client

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": "libphonenumber-hook",
        }

    def open(self, repository: str, spec: PullRequestSpec) -> PullRequestResult:
        """
        Open a pull request.

        Args:
            repository: Repository in ``owner/name`` form
            spec: Title, head, base and body of the pull request

        Returns:
            PullRequestResult with number and URL

        Raises:
            PullRequestError: On transport errors or any non-201 response
        """
        endpoint = f"/repos/{repository}/pulls"
        url = f"{self.api_url}{endpoint}"
        start_time = time.monotonic()

        client = self._client or httpx.Client(timeout=self.timeout_seconds)
        try:
            response = client.post(
                url,
                json=spec.model_dump(),
                headers=self._headers(),
                timeout=self.timeout_seconds,
            )
        except httpx.HTTPError as e:
            log_api_call(logger, service="github_api", endpoint=endpoint, method="POST", error=str(e))
            raise PullRequestError(f"Failed to reach GitHub API: {e}") from e
        finally:
            if self._client is None:
                client.close()

        duration_ms = (time.monotonic() - start_time) * 1000

        if response.status_code != 201:
            message = _error_message(response)
            log_api_call(
                logger,
                service="github_api",
                endpoint=endpoint,
                method="POST",
                status_code=response.status_code,
                duration_ms=duration_ms,
                error=message,
            )
            raise PullRequestError(
                f"Failed to open pull request {spec.head} -> {spec.base}: "
                f"HTTP {response.status_code} {message}",
                status_code=response.status_code,
                response_message=message,
            )

        log_api_call(
            logger,
            service="github_api",
            endpoint=endpoint,
            method="POST",
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        try:
            data = response.json()
            result = PullRequestResult(number=data["number"], html_url=data["html_url"])
        except (ValueError, KeyError, TypeError) as e:
            raise PullRequestError(
                f"Unexpected pull request response: {e}",
                status_code=response.status_code,
            ) from e

        logger.info(f"Pull request #{result.number} opened ({result.html_url})")
        return result


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text
    message = data.get("message", "") if isinstance(data, dict) else ""
    errors = data.get("errors") if isinstance(data, dict) else None
    if errors:
        details = "; ".join(
            error.get("message", str(error)) if isinstance(error, dict) else str(error)
            for error in errors
        )
        message = f"{message} ({details})"
    return message
