"""Business logic services package."""

from app.services.commit_publisher import CommitPublisher
from app.services.git_client import GitClient
from app.services.pull_request_opener import PullRequestOpener
from app.services.release import (
    branch_name_for,
    commit_message_for,
    extract_release_version,
    is_tag_reference,
    pull_request_body_for,
)
from app.services.release_pipeline import ReleasePipeline, run_release_pipeline
from app.services.repository_stager import RepositoryStager
from app.services.upstream_fetcher import UpstreamFetcher
from app.services.webhook_parser import parse_webhook, verify_signature

__all__ = [
    'CommitPublisher',
    'GitClient',
    'PullRequestOpener',
    'branch_name_for',
    'commit_message_for',
    'extract_release_version',
    'is_tag_reference',
    'pull_request_body_for',
    'ReleasePipeline',
    'run_release_pipeline',
    'RepositoryStager',
    'UpstreamFetcher',
    'parse_webhook',
    'verify_signature',
]
