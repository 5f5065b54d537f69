"""
Test helpers: release archive builder and git shell-outs.
"""

import io
import shutil
import subprocess
import tarfile
from pathlib import Path
from typing import Dict, Optional

import pytest


RELEASE_FILES = {
    "metadata.js": b"goog.provide('i18n.phonenumbers.metadata');\n",
    "phonenumberutil.js": b"goog.provide('i18n.phonenumbers.PhoneNumberUtil');\n",
    "asyoutypeformatter_test.js": b"goog.require('goog.testing.jsunit');\n",
}

GIT_IDENTITY = ["-c", "user.name=Test User", "-c", "user.email=test@example.com", "-c", "commit.gpgsign=false"]


def build_release_archive(
    files: Dict[str, bytes],
    root: str = "libphonenumber-8.12.0",
    marker: str = "javascript/i18n/phonenumbers/",
    extra_files: Optional[Dict[str, bytes]] = None,
) -> bytes:
    """Build a gzip tarball laid out like a GitHub release archive."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        directory = tarfile.TarInfo(f"{root}/{marker}")
        directory.type = tarfile.DIRTYPE
        archive.addfile(directory)

        entries = {f"{root}/{marker}{name}": content for name, content in files.items()}
        for path, content in (extra_files or {}).items():
            entries[f"{root}/{path}"] = content

        for path, content in entries.items():
            info = tarfile.TarInfo(path)
            info.size = len(content)
            info.mode = 0o644
            archive.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def git(*args: str, cwd: Optional[Path] = None) -> str:
    completed = subprocess.run(
        ["git", *GIT_IDENTITY, *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return completed.stdout


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")

