"""
Tag filtering and release naming.

Pure functions deriving the release version and every version-based name
(branch, commit message, pull request body) from a pushed reference.
"""

from typing import Optional

from app.models.release import ReleaseVersion
from app.utils.logging import get_logger

logger = get_logger(__name__, stage="filter")

TAG_NAMESPACE = "refs/tags/"
VERSION_TAG_PREFIX = "refs/tags/v"


def is_tag_reference(reference: str) -> bool:
    """Return True if the reference denotes a tag rather than a branch."""
    return TAG_NAMESPACE in reference


def extract_release_version(reference: str) -> Optional[ReleaseVersion]:
    """
    Derive the release version from a pushed reference.

    The remainder after ``refs/tags/v`` is accepted as-is, without any
    semantic version validation; malformed versions only fail later when
    the upstream archive cannot be fetched.

    Args:
        reference: Git reference from the push event

    Returns:
        ReleaseVersion, or None if the reference is not a tag
    """
    if not is_tag_reference(reference):
        logger.warning("Push reference is not a tag, skipping", extra={"reference": reference})
        return None

    version = ReleaseVersion(value=reference.replace(VERSION_TAG_PREFIX, ""))
    logger.info(f"Received push payload for version v{version}", extra={"version": version.value})
    return version


def branch_name_for(version: ReleaseVersion, template: str) -> str:
    """Branch name for a version, e.g. ``support/update-libphonenumber-8-12-0``."""
    return version.render(template)


def commit_message_for(version: ReleaseVersion, template: str) -> str:
    """Commit message and pull request title for a version."""
    return version.render(template)


def pull_request_body_for(version: ReleaseVersion, template: str) -> str:
    """Pull request description for a version."""
    return version.render(template)
