# Entrypoint for the naive_linkguard package.
# This file makes the public API available to programmers.

from __future__ import annotations

from naive_linkguard.__about__ import __version__
from naive_linkguard.api import classify_link, scan_html, score_link
from naive_linkguard.classifier import LinkClassifier, classify
from naive_linkguard.config import ConfigError, EngineConfig
from naive_linkguard.link_logic import ParseError, base_domain, normalize_url
from naive_linkguard.models import (
    Benign,
    LinkFinding,
    Phishing,
    RawLink,
    ScanReport,
    ScoreResult,
    Suspected,
    Tracking,
    Verdict,
)
from naive_linkguard.scoring import HeuristicScorer, score_url

# The __all__ variable defines the public API of the package.
# When a user writes `from naive_linkguard import *`, only these names will be imported.
__all__ = [
    "classify",
    "classify_link",
    "score_url",
    "score_link",
    "scan_html",
    "normalize_url",
    "base_domain",
    "LinkClassifier",
    "HeuristicScorer",
    "EngineConfig",
    "ConfigError",
    "ParseError",
    "RawLink",
    "ScoreResult",
    "Verdict",
    "Benign",
    "Phishing",
    "Tracking",
    "Suspected",
    "LinkFinding",
    "ScanReport",
    "__version__",
]
