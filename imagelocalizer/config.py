"""Configuration objects and constants for the localizer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

DEFAULT_TIMEOUT = 30.0
DEFAULT_IMAGE_DIR = "img"
DEFAULT_FULL_SIZE_SEGMENT = "/s3200"
DEFAULT_SENTINEL = "missing-image"
DEFAULT_CHUNK_SIZE = 64 * 1024
TEMP_PREFIX = "imagelocalizer-download-"


class FailurePolicy(str, Enum):
    """What to put in place of a reference whose download failed."""

    LEAVE = "leave"
    BLANK = "blank"
    SENTINEL = "sentinel"


@dataclass
class LocalizeConfig:
    """Settings that control downloading and rewriting of documents."""

    timeout: Optional[float] = DEFAULT_TIMEOUT
    follow_redirects: bool = True
    failure_policy: FailurePolicy = FailurePolicy.LEAVE
    sentinel: str = DEFAULT_SENTINEL
    image_dir: str = DEFAULT_IMAGE_DIR
    full_size_segment: str = DEFAULT_FULL_SIZE_SEGMENT
    chunk_size: int = DEFAULT_CHUNK_SIZE
    temp_prefix: str = TEMP_PREFIX

    def failure_replacement(self) -> Optional[str]:
        """Return the text substituted for a reference whose fetch failed.

        ``None`` means the reference is left as it is.
        """
        if self.failure_policy is FailurePolicy.BLANK:
            return ""
        if self.failure_policy is FailurePolicy.SENTINEL:
            return self.sentinel
        return None
