# FILE: app/services/document_images.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

import requests
from PIL import Image, UnidentifiedImageError

from app.core.config import settings

logger = logging.getLogger(__name__)

JPEG_QUALITY = 80


class ImageFetchError(Exception):
    """A document image could not be downloaded or decoded."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{reason}: {url}")
        self.url = url
        self.reason = reason


@dataclass(frozen=True)
class RasterImage:
    """A decoded document image re-encoded as JPEG, at its native pixel size."""
    data: bytes
    width: int
    height: int


def rasterize(raw: bytes, *, url: str = "") -> RasterImage:
    """
    Decode image bytes and flatten them onto a white RGB bitmap of the same
    pixel size, encoded as JPEG.
    """
    try:
        im = Image.open(BytesIO(raw))
        im.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError,
            ValueError) as e:
        raise ImageFetchError(url, f"undecodable image ({e})") from e

    width, height = im.size
    if width <= 0 or height <= 0:
        raise ImageFetchError(url, "empty image")

    if im.mode in ("RGBA", "LA", "P"):
        im = im.convert("RGBA")
        flat = Image.new("RGB", im.size, (255, 255, 255))
        flat.paste(im, mask=im.split()[-1])
        im = flat
    elif im.mode != "RGB":
        im = im.convert("RGB")

    out = BytesIO()
    im.save(out, format="JPEG", quality=JPEG_QUALITY)
    return RasterImage(data=out.getvalue(), width=width, height=height)


def fetch_document_image(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> RasterImage:
    """
    GET one uploaded document image (no auth headers) and rasterize it.
    Raises ImageFetchError for network errors, non-2xx responses and
    undecodable payloads.
    """
    http = session or requests
    timeout = settings.IMAGE_FETCH_TIMEOUT if timeout is None else timeout

    try:
        resp = http.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise ImageFetchError(url, f"request failed ({e})") from e

    if not resp.ok:
        raise ImageFetchError(url, f"HTTP {resp.status_code}")

    img = rasterize(resp.content, url=url)
    logger.debug("Fetched document image %s (%dx%d)", url, img.width, img.height)
    return img
