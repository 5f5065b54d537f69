"""
Upstream Fetcher component.

Downloads the release tarball of google/libphonenumber for a version and
extracts the generated JavaScript sources into a local directory.

The archive is streamed through gzip and tar decoding without touching disk,
so the whole fetch fits a serverless-style budget: a fixed wall-clock
ceiling (15 seconds by default) and a cap on the compressed bytes read.
"""

import gzip
import io
import posixpath
import shutil
import tarfile
import time
import zlib
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

import httpx

from app.errors import HookError, UpstreamFetchError, UpstreamTimeoutError
from app.models.release import FetchedRelease, ReleaseVersion
from app.utils.logging import get_logger, log_api_call


logger = get_logger(__name__, stage="fetch")

DRAIN_CHUNK_SIZE = 64 * 1024


class _ResponseReader(io.RawIOBase):
    """
    File-like view over a streamed HTTP body.

    Enforces the wall-clock deadline and the byte budget on every read so a
    slow or oversized archive fails while it is still being decoded.
    """

    def __init__(self, chunks: Iterator[bytes], deadline: float, max_bytes: int):
        super().__init__()
        self._chunks = chunks
        self._pending = b""
        self._deadline = deadline
        self._max_bytes = max_bytes
        self.bytes_read = 0

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while not self._pending:
            if time.monotonic() > self._deadline:
                raise UpstreamTimeoutError("Release archive download exceeded its time budget")
            try:
                chunk = next(self._chunks)
            except StopIteration:
                return 0
            self.bytes_read += len(chunk)
            if self.bytes_read > self._max_bytes:
                raise UpstreamFetchError(
                    f"Release archive exceeds download budget of {self._max_bytes} bytes"
                )
            self._pending = chunk

        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size


class UpstreamFetcher:
    """
    Fetches generated sources from an upstream release archive.

    Only regular files whose archive path contains ``path_marker`` are
    written, flattened to their base filename. When ``expected_files`` is
    set, other names are ignored and every expected name must be present.
    """

    def __init__(
        self,
        archive_url_template: str,
        path_marker: str,
        timeout_seconds: float = 15.0,
        max_download_bytes: int = 50 * 1024 * 1024,
        expected_files: Optional[Iterable[str]] = None,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            archive_url_template: Archive URL with a ``{version}`` placeholder
            path_marker: Directory marker selecting which entries to extract
            timeout_seconds: Wall-clock ceiling for the whole download
            max_download_bytes: Maximum compressed bytes to read
            expected_files: Exact set of base filenames to extract
            client: Optional shared httpx client (not closed by the fetcher)
        """
        self.archive_url_template = archive_url_template
        self.path_marker = path_marker
        self.timeout_seconds = timeout_seconds
        self.max_download_bytes = max_download_bytes
        self.expected_files = sorted(set(expected_files or []))
        self._client = client

    def archive_url(self, version: ReleaseVersion) -> str:
        return self.archive_url_template.format(version=version.value, slug=version.slug)

    def fetch(self, version: ReleaseVersion, destination: Path) -> FetchedRelease:
        """
        Download and extract the release archive for a version.

        Args:
            version: Release version to fetch
            destination: Directory receiving the extracted files

        Returns:
            FetchedRelease listing the written filenames

        Raises:
            UpstreamTimeoutError: If the time budget is exceeded
            UpstreamFetchError: On network errors, non-200 responses, corrupt
                archives, missing expected files or write failures
        """
        url = self.archive_url(version)
        destination = Path(destination)
        start_time = time.monotonic()
        deadline = start_time + self.timeout_seconds

        logger.info(f"Downloading release archive {url}", extra={"version": version.value})

        client = self._client or httpx.Client(timeout=self.timeout_seconds)
        try:
            with client.stream("GET", url, follow_redirects=True, timeout=self.timeout_seconds) as response:
                headers_received = time.monotonic()
                duration_ms = (headers_received - start_time) * 1000
                if headers_received > deadline:
                    raise UpstreamTimeoutError(
                        f"Release archive {url} did not respond within {self.timeout_seconds}s"
                    )
                if response.status_code != 200:
                    log_api_call(
                        logger,
                        service="upstream_archive",
                        endpoint=url,
                        method="GET",
                        status_code=response.status_code,
                        duration_ms=duration_ms,
                        error=f"unexpected status {response.status_code}",
                    )
                    raise UpstreamFetchError(
                        f"Release archive {url} returned HTTP {response.status_code}"
                    )

                log_api_call(
                    logger,
                    service="upstream_archive",
                    endpoint=url,
                    method="GET",
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                )

                reader = _ResponseReader(response.iter_bytes(), deadline, self.max_download_bytes)
                files = self._extract(reader, destination)

        except HookError:
            raise
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(f"Timed out downloading {url}: {e}") from e
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"Failed to download {url}: {e}") from e
        except (tarfile.TarError, gzip.BadGzipFile, zlib.error, EOFError) as e:
            raise UpstreamFetchError(f"Corrupt release archive {url}: {e}") from e
        except OSError as e:
            raise UpstreamFetchError(f"Failed to write release files to {destination}: {e}") from e
        finally:
            if self._client is None:
                client.close()

        missing = sorted(set(self.expected_files) - set(files))
        if missing:
            raise UpstreamFetchError(
                f"Release archive {url} is missing expected files: {', '.join(missing)}"
            )

        logger.info(
            f"Extracted {len(files)} files from release archive",
            extra={"version": version.value, "bytes_downloaded": reader.bytes_read},
        )

        return FetchedRelease(
            version=version,
            directory=destination,
            files=sorted(files),
            bytes_downloaded=reader.bytes_read,
        )

    def _extract(self, reader: _ResponseReader, destination: Path) -> List[str]:
        destination.mkdir(parents=True, exist_ok=True)
        written: List[str] = []

        # GzipFile raises EOFError on a truncated stream and checks the CRC trailer
        with gzip.GzipFile(fileobj=reader, mode="rb") as decompressed:
            with tarfile.open(fileobj=decompressed, mode="r|") as archive:
                for member in archive:
                    if not member.isreg() or self.path_marker not in member.name:
                        continue

                    filename = posixpath.basename(member.name)
                    if self.expected_files and filename not in self.expected_files:
                        logger.debug(f"Skipping unexpected file {member.name}")
                        continue

                    source = archive.extractfile(member)
                    if source is None:
                        continue

                    target = destination / filename
                    logger.info("Extracting file", extra={"file": str(target)})
                    with source, open(target, "wb") as handle:
                        shutil.copyfileobj(source, handle)

                    if filename not in written:
                        written.append(filename)

                # Streaming tarfile stops quietly on a missing or short header;
                # only a full zero block marks a complete archive.
                if archive.fileobj.tell() - archive.offset < tarfile.BLOCKSIZE:
                    raise UpstreamFetchError("Release archive ended before its end-of-archive marker")

            while decompressed.read(DRAIN_CHUNK_SIZE):
                pass

        return written
