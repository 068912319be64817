"""Image downloading into content-addressed storage."""

from __future__ import annotations

import errno
import hashlib
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

import requests
import urllib3
from filetype import guess

from .config import LocalizeConfig
from .errors import (
    BodyReadError,
    CommitError,
    DirectoryCreationError,
    DownloadError,
    StorageError,
    UnexpectedStatusError,
)

logger = logging.getLogger("imagelocalizer.fetcher")

# Escape RequestException: unparsable or unencodable URLs, raw urllib3 failures.
UNWRAPPED_ERRORS = (ValueError, urllib3.exceptions.HTTPError)

BLOB_SUFFIX = ".jpg"


def sniff_mime(data: bytes) -> Optional[str]:
    """Return the MIME type ``filetype`` detects for ``data``, or ``None``."""
    kind = guess(data)
    return kind.mime if kind else None


def _check_first_chunk(url: str, chunk: bytes) -> None:
    mime = sniff_mime(chunk)
    if mime is None or not mime.startswith("image/"):
        logger.warning(
            "Content from %s does not look like an image (detected %s)",
            url,
            mime or "unknown",
        )


def _commit(tmp_path: Path, destination: Path) -> None:
    """Atomically move ``tmp_path`` to ``destination``.

    A rename across filesystems is impossible, so in that case the bytes are
    staged next to ``destination`` first and renamed from there.
    """
    try:
        os.replace(tmp_path, destination)
        return
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            raise

    fd, staged_name = tempfile.mkstemp(
        prefix=f".{destination.name}.", suffix=".part", dir=destination.parent
    )
    os.close(fd)
    staged_path = Path(staged_name)
    try:
        shutil.copyfile(tmp_path, staged_path)
        os.replace(staged_path, destination)
    finally:
        staged_path.unlink(missing_ok=True)


def _stream_to_file(
    response: requests.Response,
    tmp_path: Path,
    url: str,
    chunk_size: int,
) -> str:
    """Copy the response body into ``tmp_path``; return the hex SHA-256 of what was written."""
    digest = hashlib.sha256()
    first = True
    # RequestException is an OSError, so it has to be caught first
    try:
        with tmp_path.open("wb") as handle:
            for chunk in response.iter_content(chunk_size=chunk_size):
                if not chunk:
                    continue
                if first:
                    _check_first_chunk(url, chunk)
                    first = False
                handle.write(chunk)
                digest.update(chunk)
    except (requests.RequestException,) + UNWRAPPED_ERRORS as exc:
        raise BodyReadError(url, f"failed reading response body: {exc}") from exc
    except OSError as exc:
        raise StorageError(url, f"could not write scratch file {tmp_path}: {exc}") from exc
    return digest.hexdigest()


def fetch_image(
    session: requests.Session,
    destination_dir: Path,
    url: str,
    config: LocalizeConfig,
) -> str:
    """Download ``url`` into ``destination_dir/<image_dir>`` and return its relative path.

    The file is named after the SHA-256 of its bytes, so the same content
    always lands at the same path. Nothing appears under ``destination_dir``
    until the final rename.

    Raises:
        FetchError: one of its subclasses, describing which step failed.
    """
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=config.temp_prefix)
    except OSError as exc:
        raise StorageError(url, f"could not create scratch file: {exc}") from exc
    os.close(fd)
    tmp_path = Path(tmp_name)
    logger.info("Temp file %s", tmp_path)

    try:
        try:
            response = session.get(
                url,
                stream=True,
                timeout=config.timeout,
                allow_redirects=config.follow_redirects,
            )
        except requests.RequestException as exc:
            raise DownloadError(url, f"request failed: {exc}") from exc
        except UNWRAPPED_ERRORS as exc:
            raise DownloadError(url, f"invalid request: {exc}") from exc

        with response:
            if response.status_code != 200:
                raise UnexpectedStatusError(url, response.status_code)
            hex_digest = _stream_to_file(response, tmp_path, url, config.chunk_size)

        image_dir = destination_dir / config.image_dir
        try:
            image_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DirectoryCreationError(url, image_dir, exc) from exc

        filename = hex_digest + BLOB_SUFFIX
        try:
            _commit(tmp_path, image_dir / filename)
        except OSError as exc:
            raise CommitError(url, f"could not move download into {image_dir}: {exc}") from exc
        logger.debug("Stored %s as %s", url, image_dir / filename)
        return f"{config.image_dir}/{filename}"
    finally:
        tmp_path.unlink(missing_ok=True)
