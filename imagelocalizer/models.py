"""Data models used throughout the localizer pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .errors import FetchError


@dataclass
class ImageReference:
    """Remote image URL as it appears in a document, plus its fetch target."""

    original_url: str
    fetch_url: str


@dataclass
class FetchOutcome:
    """Result of downloading one image reference."""

    reference: ImageReference
    relative_path: Optional[str] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class DocumentReport:
    """Summary of what happened to one document."""

    path: Path
    occurrences: int = 0
    outcomes: List[FetchOutcome] = field(default_factory=list)
    replacements: Dict[str, str] = field(default_factory=dict)
    rewritten: bool = False

    @property
    def downloaded(self) -> List[FetchOutcome]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> List[FetchOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]
