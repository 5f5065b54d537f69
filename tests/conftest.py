"""
Shared test fixtures.
"""

from pathlib import Path

import pytest

from app.config import Settings
from tests.support import RELEASE_FILES, build_release_archive, git


@pytest.fixture
def release_archive() -> bytes:
    return build_release_archive(RELEASE_FILES)


@pytest.fixture
def remote_repository(tmp_path: Path) -> Path:
    """Bare repository with a master branch holding src/metadata.js and README.md."""
    remote = tmp_path / "remote.git"
    git("init", "--bare", str(remote))
    git("symbolic-ref", "HEAD", "refs/heads/master", cwd=remote)

    seed = tmp_path / "seed"
    git("init", str(seed))
    git("symbolic-ref", "HEAD", "refs/heads/master", cwd=seed)
    (seed / "src").mkdir()
    (seed / "src" / "metadata.js").write_bytes(b"// old metadata\n")
    (seed / "README.md").write_text("google-libphonenumber\n")
    git("add", "--all", cwd=seed)
    git("commit", "-m", "Initial commit", cwd=seed)
    git("remote", "add", "origin", str(remote), cwd=seed)
    git("push", "origin", "master", cwd=seed)

    return remote


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        github_token="test-token",
        webhook_secret=None,
        expected_files=sorted(RELEASE_FILES),
        upstream_archive_url="https://archive.test/libphonenumber/v{version}.tar.gz",
    )
