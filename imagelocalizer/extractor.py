"""Lexical discovery of image URLs in raw document text."""

from __future__ import annotations

import re
from typing import Iterable, List

from .config import DEFAULT_FULL_SIZE_SEGMENT

IMAGE_URL_PATTERN = re.compile(r'"(http[^"]*\.jpg)"', re.IGNORECASE)
SCALE_PATTERN = re.compile(r"/s[0-9]+(-h)?", re.IGNORECASE)


def extract_image_urls(text: str) -> List[str]:
    """Return every quoted ``http...jpg`` URL in ``text``, in order, quotes stripped.

    Duplicates are kept; use :func:`unique_urls` to collapse them.
    """
    return [match.group(1) for match in IMAGE_URL_PATTERN.finditer(text)]


def unique_urls(urls: Iterable[str]) -> List[str]:
    """Drop repeated URLs, keeping the first occurrence of each."""
    return list(dict.fromkeys(urls))


def resolve_full_size(url: str, segment: str = DEFAULT_FULL_SIZE_SEGMENT) -> str:
    """Swap the first ``/s<digits>`` (or ``/s<digits>-h``) path segment for ``segment``.

    Hosted blog images encode the rendition size in the path, so asking for a
    very large one yields the best copy the host has.
    """
    # lambda keeps backslashes in ``segment`` literal
    return SCALE_PATTERN.sub(lambda _: segment, url, count=1)
