"""Downloading images referenced in exported markdown and rewriting their links."""

from __future__ import annotations

import logging
import os
import re
import urllib.error
import urllib.request
from pathlib import Path
from typing import Callable

from .models import AnytypeError

IMAGE_DIR_NAME = "static"
IMAGE_URL_PATTERN = re.compile(
    r"!\[([^\]]*)\]\((http://127\.0\.0\.1:[0-9]+/image/[^)]+)\)"
)

Fetch = Callable[[str], bytes]

_log = logging.getLogger(__name__)


class ImageDownloadError(AnytypeError):
    """An image could not be downloaded or saved."""

    default_message = "failed to download image"


def _http_fetch(url: str) -> bytes:
    """Fetch a URL over HTTP, raising ImageDownloadError unless the status is 200."""
    try:
        with urllib.request.urlopen(url) as response:
            status = response.status
            if status != 200:
                raise ImageDownloadError(
                    f"failed to download image, status: {status} {response.reason}"
                )
            return response.read()
    except urllib.error.HTTPError as exc:
        raise ImageDownloadError(
            f"failed to download image, status: {exc.code} {exc.reason}"
        ) from exc


def download_image(
    image_url: str,
    output_dir: str | os.PathLike[str],
    fetch: Fetch | None = None,
) -> str:
    """Save the image under ``<output_dir>/static`` and return its relative path.

    The file is named after the last segment of the URL; an image that is
    already on disk is not downloaded again.
    """
    image_hash = image_url.split("/")[-1]
    if not image_hash:
        raise ImageDownloadError(f"couldn't extract image hash from URL: {image_url}")

    image_dir = Path(output_dir) / IMAGE_DIR_NAME
    try:
        image_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
    except OSError as exc:
        raise ImageDownloadError(f"failed to create image directory: {exc}") from exc

    file_name = f"{image_hash}.png"
    relative_path = f"{IMAGE_DIR_NAME}/{file_name}"
    target = image_dir / file_name

    if target.exists():
        _log.debug("Image already exists: %s", target)
        return relative_path

    fetch = fetch or _http_fetch
    try:
        content = fetch(image_url)
    except ImageDownloadError:
        raise
    except Exception as exc:
        raise ImageDownloadError(f"failed to download image: {exc}") from exc

    try:
        target.write_bytes(content)
    except OSError as exc:
        raise ImageDownloadError(f"failed to save image: {exc}") from exc

    _log.debug("Downloaded image to: %s", target)
    return relative_path


def process_markdown_images(
    markdown: str,
    output_dir: str | os.PathLike[str],
    fetch: Fetch | None = None,
) -> str:
    """Download the local images a markdown text refers to and point its links at them.

    Links are rewritten to ``../static/<hash>.png``, since exported files sit one
    directory below ``output_dir``. Images that fail to download keep their
    original link.
    """
    processed = markdown
    for match in IMAGE_URL_PATTERN.finditer(markdown):
        original, alt_text, image_url = match.group(0), match.group(1), match.group(2)
        try:
            local_path = download_image(image_url, output_dir, fetch)
        except ImageDownloadError as exc:
            _log.error("Failed to download image %s: %s", image_url, exc)
            continue
        processed = processed.replace(original, f"![{alt_text}](../{local_path})", 1)
    return processed