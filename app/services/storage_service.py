import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import unquote, urlparse

import requests

from app.core.config import IMAGE_FETCH_TIMEOUT
from app.core.throttle import Throttle

log = logging.getLogger("seeder")


@dataclass
class FetchedImage:
    content: bytes
    mime_type: Optional[str]

    @property
    def size(self) -> int:
        return len(self.content)


def file_name_from_url(url: str, now: Optional[float] = None) -> str:
    """Last path segment of the URL, or a timestamped fallback when there is none."""
    name = unquote(urlparse(url).path.rstrip("/").rsplit("/", 1)[-1])
    if name:
        return name
    millis = int((time.time() if now is None else now) * 1000)
    return f"file-{millis}.jpg"


def _download(url: str) -> FetchedImage:
    response = requests.get(url, timeout=IMAGE_FETCH_TIMEOUT)
    response.raise_for_status()
    mime_type = response.headers.get("Content-Type")
    if mime_type:
        mime_type = mime_type.split(";")[0].strip()
    return FetchedImage(content=response.content, mime_type=mime_type)


async def fetch_image(url: str) -> FetchedImage:
    """Downloads the source image without blocking the event loop."""
    return await asyncio.to_thread(_download, url)


async def rehost_image(
    backend,
    image_url: str,
    throttle: Throttle,
    fetcher: Callable = fetch_image,
) -> str:
    """
    Copies a remote image into the storage bucket and returns its view URL.
    Raises whatever the download or upload raised; the caller decides whether to skip.
    """
    try:
        image = await fetcher(image_url)
        name = file_name_from_url(image_url)
        file_id = await backend.create_file(image.content, name, image.mime_type)
        log.info(f"Uploaded {name} ({image.mime_type}, {image.size} bytes) from {image_url}")
        await throttle.wait()
        return backend.file_view_url(file_id)
    except Exception as e:
        log.error(f"Failed to upload image: {image_url} ({e})")
        raise
