"""Release version data models."""

from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict


class ReleaseVersion(BaseModel):
    """Version string taken verbatim from a pushed tag (``refs/tags/v1.2.3`` -> ``1.2.3``)."""

    model_config = ConfigDict(frozen=True)

    value: str

    @property
    def slug(self) -> str:
        """Version with every dot replaced by a dash, used in branch names."""
        return self.value.replace(".", "-")

    def render(self, template: str) -> str:
        """Fill ``{version}`` and ``{slug}`` placeholders of a template."""
        return template.format(version=self.value, slug=self.slug)

    def __str__(self) -> str:
        return self.value


class FetchedRelease(BaseModel):
    """Files extracted from an upstream release archive."""

    version: ReleaseVersion
    directory: Path
    files: List[str]
    bytes_downloaded: int = 0
