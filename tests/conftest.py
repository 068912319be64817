"""Pytest configuration and fixtures."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pytest

JPEG_HEADER = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00"


def jpeg_bytes(payload: bytes) -> bytes:
    """Bytes that ``filetype`` recognises as a JPEG."""
    return JPEG_HEADER + payload


class FakeResponse:
    """Stand-in for a streamed ``requests.Response``."""

    def __init__(
        self,
        status_code: int = 200,
        content: bytes = b"",
        chunk_error: Optional[Exception] = None,
    ) -> None:
        self.status_code = status_code
        self.content = content
        self.chunk_error = chunk_error
        self.closed = False

    def iter_content(self, chunk_size: int = 1):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start : start + chunk_size]
        if self.chunk_error is not None:
            raise self.chunk_error

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class FakeSession:
    """Serves canned responses per URL and records every request."""

    def __init__(self, responses: Dict[str, Union[FakeResponse, Exception]]) -> None:
        self.responses = responses
        self.calls: List[Tuple[str, dict]] = []
        self.closed = False

    def get(self, url: str, **kwargs) -> FakeResponse:
        self.calls.append((url, kwargs))
        response = self.responses.get(url)
        if response is None:
            return FakeResponse(status_code=404)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def requested_urls(self) -> List[str]:
        return [url for url, _ in self.calls]

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


@pytest.fixture
def scratch_dir(tmp_path, monkeypatch):
    """Point the process temporary directory at an isolated folder."""
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))
    return scratch


@pytest.fixture
def docs_dir(tmp_path) -> Path:
    docs = tmp_path / "docs"
    docs.mkdir()
    return docs
