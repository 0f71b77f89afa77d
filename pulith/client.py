"""HTTP downloads with optional proxies and progress tracking."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from urllib.parse import urlsplit

import httpx

from pulith.tracker import ProgressTrackerBuilder


class DownloadError(Exception):
    """Raised when a download cannot be started or completed."""


class ClientSettingError(Exception):
    """Raised when an HTTP client cannot be configured."""


@dataclass
class ClientSetting:
    """HTTP client configuration; https proxies serve https traffic, the rest http."""

    proxies: list[str] | None = None

    def build(self) -> httpx.Client:
        mounts: dict[str, httpx.HTTPTransport] = {}
        for url in self.proxies or []:
            pattern = "https://" if urlsplit(url).scheme == "https" else "http://"
            if pattern in mounts:
                continue
            try:
                mounts[pattern] = httpx.HTTPTransport(proxy=url)
            except (ValueError, ImportError, httpx.InvalidURL) as exc:
                raise ClientSettingError(f"Invalid proxy URL {url}: {exc}") from exc
        try:
            return httpx.Client(mounts=mounts or None, follow_redirects=True)
        except (ValueError, httpx.HTTPError) as exc:
            raise ClientSettingError(f"Failed to build client: {exc}") from exc


@contextmanager
def fetch(url: str, setting: ClientSetting | None = None) -> Iterator[httpx.Response]:
    """Send a GET request and yield the streamed response."""
    try:
        client = (setting or ClientSetting()).build()
    except ClientSettingError as exc:
        raise DownloadError(f"Failed to build client: {exc}") from exc
    with client:
        try:
            with client.stream("GET", str(url)) as response:
                yield response
        except httpx.HTTPError as exc:
            raise DownloadError(str(exc)) from exc


@dataclass
class FileDownload:
    """A download of one URL into one file."""

    url: str
    path: Path | str | PathLike

    def fetch_raw(self, tracker_builder: ProgressTrackerBuilder | None = None) -> None:
        """Download the body into the file, tracking progress when the size is known."""
        with fetch(self.url) as response, open(self.path, "wb") as file:
            length = response.headers.get("content-length")
            tracker = None
            if tracker_builder is not None and length is not None and length.isdigit():
                tracker = tracker_builder.with_len(int(length)).build()
            for chunk in response.iter_bytes():
                file.write(chunk)
                if tracker is not None:
                    tracker.step(len(chunk))
            if tracker is not None:
                tracker.finish()