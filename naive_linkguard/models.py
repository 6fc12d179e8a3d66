# Defines the data structures used throughout the application.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Literal, Union

from naive_linkguard.signatures import DEFAULT_SUSPICION_THRESHOLD

# Type definitions for clarity.
VerdictKind = Literal["none", "phishing", "tracking", "suspected"]


@dataclass(frozen=True)
class RawLink:
    """An anchor as found in the document: what it shows and where it goes."""

    display_text: str
    target_url: str


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of heuristic scoring for one URL."""

    score: int = 0
    reasons: tuple[str, ...] = ()
    threshold: int = DEFAULT_SUSPICION_THRESHOLD

    @property
    def is_suspicious(self) -> bool:
        return self.score >= self.threshold


# --- Verdict: a closed union, dispatch with isinstance ---


@dataclass(frozen=True)
class Benign:
    """Nothing to report."""

    kind: ClassVar[VerdictKind] = "none"


@dataclass(frozen=True)
class Phishing:
    """Displayed URL points at a different organization than the real target."""

    kind: ClassVar[VerdictKind] = "phishing"


@dataclass(frozen=True)
class Tracking:
    """Displayed URL and real target differ but share a base domain."""

    kind: ClassVar[VerdictKind] = "tracking"


@dataclass(frozen=True)
class Suspected:
    """The target alone scored at or above the suspicion threshold."""

    analysis: ScoreResult
    kind: ClassVar[VerdictKind] = "suspected"


Verdict = Union[Benign, Phishing, Tracking, Suspected]


@dataclass
class LinkFinding:
    """A classified anchor from a scanned document."""

    text: str
    href: str
    verdict: Verdict
    location: str = "document"  # "document" or "iframe[<n>]"

    def to_dict(self) -> dict:
        d: dict = {
            "kind": self.verdict.kind,
            "text": self.text,
            "href": self.href,
            "location": self.location,
        }
        if isinstance(self.verdict, Suspected):
            d["score"] = self.verdict.analysis.score
            d["reasons"] = list(self.verdict.analysis.reasons)
        return d


@dataclass
class ScanReport:
    """The result of one scan pass over a document."""

    source: str
    links_seen: int = 0
    skipped: int = 0
    findings: list[LinkFinding] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    unsubscribe_links: list[str] = field(default_factory=list)

    def count(self, kind: VerdictKind) -> int:
        return sum(1 for f in self.findings if f.verdict.kind == kind)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "links_seen": self.links_seen,
            "skipped": self.skipped,
            "findings": [f.to_dict() for f in self.findings],
            "errors": list(self.errors),
            "unsubscribe_links": list(self.unsubscribe_links),
        }
