"""Pull request data models."""

from pydantic import BaseModel


class PullRequestSpec(BaseModel):
    """Pull request to open on the downstream repository."""

    title: str
    head: str
    base: str
    body: str
    draft: bool = False


class PullRequestResult(BaseModel):
    """Pull request created by the GitHub API."""

    number: int
    html_url: str
