"""Download remote images referenced by the IR."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Callable

import requests

from docstyler.errors import PartialDegradation
from docstyler.parser.base import ImageElement

LOG = logging.getLogger(__name__)

# url -> (payload, media type or None); raises PartialDegradation on failure.
Fetch = Callable[[str], "tuple[bytes, str | None]"]


class HttpFetcher:
    """Fetch image bytes over HTTP(S) with a shared session."""

    def __init__(self, timeout_s: float = 15.0, session: requests.Session | None = None) -> None:
        self.timeout_s = timeout_s
        self._session = session or requests.Session()

    def __call__(self, url: str) -> tuple[bytes, str | None]:
        try:
            resp = self._session.get(url, timeout=self.timeout_s)
        except requests.RequestException as exc:
            raise PartialDegradation(f"request failed: {exc}") from exc
        if not resp.ok:
            raise PartialDegradation(f"HTTP {resp.status_code}")
        media_type = (resp.headers.get("Content-Type") or "").split(";")[0].strip() or None
        return resp.content, media_type


def is_remote(url: str) -> bool:
    return url.lower().startswith(("http://", "https://"))


def download_images(
    images: list[ImageElement],
    *,
    fetch: Fetch | None = None,
    max_workers: int = 4,
    timeout_s: float = 15.0,
) -> list[ImageElement]:
    """Return *images* with ``blob`` populated for every reachable HTTP(S) URL.

    Order is preserved. A failed download keeps the original element so the
    renderer falls back to the URL; other images are unaffected.
    """
    if not images:
        return []
    if fetch is not None:
        return _download_all(images, fetch, max_workers)
    with requests.Session() as session:
        return _download_all(images, HttpFetcher(timeout_s=timeout_s, session=session), max_workers)


def _download_all(images: list[ImageElement], fetch: Fetch, max_workers: int) -> list[ImageElement]:
    def _one(image: ImageElement) -> ImageElement:
        if not is_remote(image.url):
            return image
        try:
            blob, media_type = fetch(image.url)
        except PartialDegradation as exc:
            LOG.warning("Failed to download image %s: %s", image.url, exc)
            return image
        except Exception as exc:
            LOG.warning("Failed to download image %s: %s: %s", image.url, type(exc).__name__, exc)
            return image
        LOG.debug("Downloaded %s (%d bytes)", image.url, len(blob))
        return replace(image, blob=blob, media_type=media_type or image.media_type)

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        return list(pool.map(_one, images))
