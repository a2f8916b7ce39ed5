"""
Remote Fetcher
==============

Performs a conditional GET of one tracked file. The result says whether the
remote copy is unchanged, updated (with content and a new ETag), or whether
the request failed. Failures are reported, not raised.
"""

import asyncio
from enum import Enum

import requests
from loguru import logger
from pydantic import BaseModel, ConfigDict

from sciter_typings.errors import SciterTypingsError
from sciter_typings.typings import TYPINGS_BASE_URL, typing_url


class TransientFetchError(SciterTypingsError):
    """A network or HTTP failure while fetching a tracked file."""

    def __init__(self, url: str, detail: str):
        self.url = url
        self.detail = detail
        super().__init__(f"Failed to fetch {url}: {detail}")


class FetchStatus(str, Enum):
    UNCHANGED = "unchanged"
    UPDATED = "updated"
    FAILED = "failed"


class FetchResult(BaseModel):
    """Outcome of a single conditional fetch."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: FetchStatus
    content: str | None = None
    etag: str | None = None
    cause: TransientFetchError | None = None

    @classmethod
    def unchanged(cls, etag: str | None = None) -> "FetchResult":
        return cls(status=FetchStatus.UNCHANGED, etag=etag)

    @classmethod
    def updated(cls, content: str, etag: str | None = None) -> "FetchResult":
        return cls(status=FetchStatus.UPDATED, content=content, etag=etag)

    @classmethod
    def failed(cls, cause: TransientFetchError) -> "FetchResult":
        return cls(status=FetchStatus.FAILED, cause=cause)


class RemoteFetcher:
    """Fetches tracked files from the upstream typings folder."""

    def __init__(
        self,
        base_url: str = TYPINGS_BASE_URL,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ):
        """Initialize the fetcher.

        Args:
            base_url: Remote folder holding the tracked files
            timeout: Per-request timeout in seconds
            session: Optional requests session to reuse connections
        """
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_blocking(self, file_name: str, etag: str | None = None) -> FetchResult:
        """Fetch a file, sending If-None-Match when an ETag is known.

        Args:
            file_name: Tracked file name, appended to the base URL
            etag: Freshness token from a previous fetch

        Returns:
            FetchResult: UNCHANGED on 304, UPDATED on 2xx, FAILED otherwise
        """
        url = typing_url(file_name, self.base_url)
        headers = {}
        if etag:
            headers["If-None-Match"] = etag

        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as error:
            return FetchResult.failed(TransientFetchError(url, str(error)))

        if response.status_code == 304:
            logger.debug(f"{file_name} not modified")
            return FetchResult.unchanged(etag)

        if not response.ok:
            return FetchResult.failed(TransientFetchError(url, f"{response.status_code} {response.reason}"))

        response.encoding = "utf-8"
        return FetchResult.updated(response.text, response.headers.get("ETag"))

    async def fetch(self, file_name: str, etag: str | None = None) -> FetchResult:
        """Async wrapper around fetch_blocking."""
        return await asyncio.to_thread(self.fetch_blocking, file_name, etag)

    def close(self) -> None:
        self.session.close()
