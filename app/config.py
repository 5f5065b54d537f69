"""
Application configuration management.
"""

from pydantic import SecretStr
from pydantic_settings import BaseSettings
from typing import List, Optional


# Generated JavaScript sources shipped by google/libphonenumber under
# javascript/i18n/phonenumbers/ and mirrored into the downstream src/ folder.
DEFAULT_EXPECTED_FILES = [
    "asyoutypeformatter_test.js",
    "demo-compiled.js",
    "demo.js",
    "metadata.js",
    "metadatafortesting.js",
    "metadatalite.js",
    "phonemetadata.pb.js",
    "phonenumber.pb.js",
    "phonenumberutil.js",
    "phonenumberutil_test.js",
    "regioncodefortesting.js",
    "shortnumberinfo.js",
    "shortnumberinfo_test.js",
    "shortnumbermetadata.js",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # GitHub
    github_token: Optional[SecretStr] = None
    api_url: str = "https://api.github.com"
    api_timeout_seconds: float = 15.0

    # Webhook
    webhook_secret: Optional[str] = None

    # Downstream repository
    downstream_owner: str = "ruimarinho"
    downstream_name: str = "google-libphonenumber"
    base_branch: str = "master"
    target_subdir: str = "src"
    branch_template: str = "support/update-libphonenumber-{slug}"
    commit_message_template: str = "Update libphonenumber@{version}"
    pull_request_body_template: str = "Update libphonenumber@{version}."
    git_username: Optional[str] = None  # Falls back to downstream_owner if not set

    # Commit author
    author_name: str = "Rui Marinho"
    author_email: str = "ruipmarinho@gmail.com"

    # Upstream release archive
    upstream_archive_url: str = "https://github.com/google/libphonenumber/archive/v{version}.tar.gz"
    upstream_path_marker: str = "javascript/i18n/phonenumbers/"
    expected_files: List[str] = DEFAULT_EXPECTED_FILES
    fetch_timeout_seconds: float = 15.0
    max_download_bytes: int = 50 * 1024 * 1024

    # Git
    git_executable: str = "git"
    git_timeout_seconds: float = 120.0
    clone_depth: int = 1

    # Application
    log_level: str = "INFO"
    push_enabled: bool = True
    cleanup_workspace: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def downstream_repository(self) -> str:
        """Repository identity in ``owner/name`` form."""
        return f"{self.downstream_owner}/{self.downstream_name}"

    @property
    def effective_git_username(self) -> str:
        return self.git_username or self.downstream_owner


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return settings
