"""Exception hierarchy for the localizer."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ImageLocalizerError(Exception):
    """Base exception class for imagelocalizer."""


class DocumentError(ImageLocalizerError):
    """A document could not be opened, read or written. Aborts the run."""

    def __init__(self, path: Path, message: str, cause: Optional[Exception] = None) -> None:
        self.path = path
        self.cause = cause
        detail = f"{message} {str(path)!r}"
        if cause is not None:
            detail = f"{detail}: {cause}"
        super().__init__(detail)


class FetchError(ImageLocalizerError):
    """Downloading a single image failed. Recoverable."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(message)


class DownloadError(FetchError):
    """The HTTP request itself failed (connection, DNS, timeout, TLS)."""


class UnexpectedStatusError(FetchError):
    """The server answered with something other than 200."""

    def __init__(self, url: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(url, f"could not download image: got HTTP status {status_code}")


class BodyReadError(FetchError):
    """The response body could not be read to the end."""


class StorageError(FetchError):
    """The downloaded content could not be stored locally."""


class DirectoryCreationError(StorageError):
    def __init__(self, url: str, directory: Path, cause: OSError) -> None:
        self.directory = directory
        super().__init__(url, f"failed to create directory {directory}: {cause}")


class CommitError(StorageError):
    """The scratch file could not be moved to its final location."""
