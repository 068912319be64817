"""High-level orchestration: find, download and relink the images of each document."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import requests

from .config import LocalizeConfig
from .errors import DocumentError, FetchError
from .extractor import extract_image_urls, resolve_full_size, unique_urls
from .fetcher import fetch_image
from .models import DocumentReport, FetchOutcome, ImageReference
from .rewriter import decode_document, replace_all, write_document

logger = logging.getLogger("imagelocalizer.localizer")


def read_document(path: Path) -> Tuple[bytes, int]:
    """Return the raw bytes and ``st_mode`` of ``path``, releasing the handle before returning."""
    try:
        handle = path.open("rb")
    except OSError as exc:
        raise DocumentError(path, "could not open file", exc) from exc
    with handle:
        try:
            mode = os.fstat(handle.fileno()).st_mode
        except OSError as exc:
            raise DocumentError(path, "could not stat file", exc) from exc
        try:
            data = handle.read()
        except OSError as exc:
            raise DocumentError(path, "could not read file", exc) from exc
    return data, mode


def collect_references(text: str, config: LocalizeConfig) -> Tuple[int, List[ImageReference]]:
    """Return the number of matches in ``text`` and one reference per distinct URL."""
    urls = extract_image_urls(text)
    references = [
        ImageReference(original_url=url, fetch_url=resolve_full_size(url, config.full_size_segment))
        for url in unique_urls(urls)
    ]
    return len(urls), references


def fetch_references(
    session: requests.Session,
    destination_dir: Path,
    references: Iterable[ImageReference],
    config: LocalizeConfig,
) -> Tuple[List[FetchOutcome], Dict[str, str]]:
    """Download each reference in order and build the replacement mapping.

    Failed downloads are logged and mapped according to ``config.failure_policy``.
    """
    outcomes: List[FetchOutcome] = []
    replacements: Dict[str, str] = {}
    for reference in references:
        try:
            relative_path = fetch_image(session, destination_dir, reference.fetch_url, config)
        except FetchError as exc:
            logger.warning("Failed to download %s: %s", reference.fetch_url, exc)
            outcomes.append(FetchOutcome(reference=reference, error=exc))
            placeholder = config.failure_replacement()
            if placeholder is not None:
                replacements[reference.original_url] = placeholder
            continue
        outcomes.append(FetchOutcome(reference=reference, relative_path=relative_path))
        replacements[reference.original_url] = relative_path
    return outcomes, replacements


def localize_document(
    path: Path,
    config: LocalizeConfig,
    session: requests.Session,
) -> DocumentReport:
    """Download the images referenced by ``path`` and point the document at the local copies.

    Images are stored in ``config.image_dir`` next to the document. Fetch
    failures are not fatal; problems reading or writing the document raise
    :class:`DocumentError`.
    """
    logger.info("Processing %s", path)
    data, mode = read_document(path)
    text = decode_document(data)

    occurrences, references = collect_references(text, config)
    report = DocumentReport(path=path, occurrences=occurrences)
    if not references:
        logger.debug("No image references in %s", path)
        return report

    outcomes, replacements = fetch_references(session, path.parent, references, config)
    report.outcomes = outcomes
    report.replacements = replacements

    rewritten = replace_all(text, replacements)
    if rewritten == text:
        return report
    try:
        write_document(path, rewritten, mode)
    except OSError as exc:
        raise DocumentError(path, "could not write file", exc) from exc
    report.rewritten = True
    logger.info(
        "Localized %s (%d downloaded, %d failed)",
        path,
        len(report.downloaded),
        len(report.failed),
    )
    return report


def localize_documents(
    paths: Iterable[Path],
    config: LocalizeConfig,
    session: Optional[requests.Session] = None,
) -> List[DocumentReport]:
    """Process ``paths`` one after another; the first :class:`DocumentError` stops the run."""
    if session is None:
        with requests.Session() as owned_session:
            return localize_documents(paths, config, owned_session)
    return [localize_document(Path(path), config, session) for path in paths]
