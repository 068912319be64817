"""Single-pass text substitution and atomic document writes."""

from __future__ import annotations

import logging
import os
import re
import stat
import tempfile
from pathlib import Path
from typing import Mapping

logger = logging.getLogger("imagelocalizer.rewriter")

ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


def decode_document(data: bytes) -> str:
    """Decode document bytes so that undecodable bytes survive a round trip."""
    return data.decode(ENCODING, errors=ENCODING_ERRORS)


def encode_document(text: str) -> bytes:
    return text.encode(ENCODING, errors=ENCODING_ERRORS)


def replace_all(text: str, replacements: Mapping[str, str]) -> str:
    """Substitute every key of ``replacements`` in ``text`` in one pass.

    All keys are matched together, so text produced by one replacement is
    never matched again. Where keys overlap at the same position the longest
    one wins.
    """
    if not replacements:
        return text
    keys = sorted((key for key in replacements if key), key=len, reverse=True)
    if not keys:
        return text
    pattern = re.compile("|".join(re.escape(key) for key in keys))
    return pattern.sub(lambda match: replacements[match.group(0)], text)


def write_document(path: Path, text: str, mode: int) -> None:
    """Replace ``path`` with ``text`` atomically, keeping the permission bits of ``mode``.

    The new content is written to a scratch file beside the file ``path``
    resolves to and renamed over it, so readers see either the old or the new
    document and a symlinked ``path`` stays a link to the updated target.
    """
    target = Path(os.path.realpath(path))
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(encode_document(text))
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_path, stat.S_IMODE(mode))
        os.replace(tmp_path, target)
    finally:
        tmp_path.unlink(missing_ok=True)
    logger.debug("Wrote %s", target)
