"""
Downloader — the only network-facing primitive.

Each attempt streams the body into a temporary sibling of the
destination and renames it into place only when the whole body
arrived.  A failed attempt never leaves a partial file behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

import requests

from asl3_mapp.adapters.base import Fetcher
from asl3_mapp.core.config.settings import DownloadPolicy
from asl3_mapp.core.errors import DownloadError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024
_USER_AGENT = "asl3-mapp/1.0"


class Downloader(Fetcher):
    """Fetch URLs with bounded retries and a fixed backoff.

    Args:
        policy: Attempts, backoff and connect/read timeouts.
        session: ``requests.Session`` (or compatible) used for transport.
        sleep: Backoff sleeper, injectable for tests.
    """

    def __init__(
        self,
        policy: DownloadPolicy | None = None,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._policy = policy or DownloadPolicy()
        self._session = session or requests.Session()
        self._sleep = sleep

    def fetch(self, url: str, dest: Path | str, max_attempts: int | None = None) -> Path:
        dest = Path(dest)
        attempts = max_attempts or self._policy.max_attempts
        last_error = ""

        for attempt in range(1, attempts + 1):
            try:
                self._fetch_once(url, dest)
                logger.debug("Downloaded %s → %s", url, dest)
                return dest
            except (requests.RequestException, OSError) as e:
                last_error = str(e)
                logger.warning(
                    "Download failed for %s (attempt %d/%d): %s",
                    url, attempt, attempts, e,
                )
                if attempt < attempts:
                    self._sleep(self._policy.backoff_seconds)

        dest.unlink(missing_ok=True)
        raise DownloadError(url, attempts, last_error)

    def _fetch_once(self, url: str, dest: Path) -> None:
        timeout = (self._policy.connect_timeout, self._policy.read_timeout)
        dest.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".part", dir=dest.parent)
        try:
            with os.fdopen(fd, "wb") as fh:
                with self._session.get(
                    url,
                    stream=True,
                    allow_redirects=True,
                    timeout=timeout,
                    headers={"User-Agent": _USER_AGENT},
                ) as response:
                    response.raise_for_status()
                    for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                        if chunk:
                            fh.write(chunk)
            os.replace(tmp_name, dest)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
