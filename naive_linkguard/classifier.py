# naive_linkguard/classifier.py
# Two-stage link classification: explicit text/target mismatch first, then
# heuristic scoring of the target alone.

from __future__ import annotations

import logging

from naive_linkguard.config import EngineConfig
from naive_linkguard.lexical import looks_like_bare_url
from naive_linkguard.link_logic import is_prefix_of, normalize_url, same_base_domain
from naive_linkguard.models import (
    Benign,
    Phishing,
    RawLink,
    Suspected,
    Tracking,
    Verdict,
)
from naive_linkguard.scoring import HeuristicScorer

log = logging.getLogger(__name__)


class LinkClassifier:
    """
    Stateless apart from its (frozen) configuration; safe to share.

    A displayed URL that disagrees with the real target dominates: it yields
    Tracking (same base domain) or Phishing (different organization) and the
    scorer is never consulted, so one link gets exactly one verdict.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self.scorer = HeuristicScorer(self.config)

    def classify(self, display_text: str, target_url: str) -> Verdict:
        if not isinstance(target_url, str) or not target_url.strip():
            return Benign()
        text = display_text.strip() if isinstance(display_text, str) else ""

        if text and looks_like_bare_url(text):
            mismatch = self._mismatch_verdict(text, target_url)
            if mismatch is not None:
                log.debug("Mismatch verdict %s for %r -> %r", mismatch.kind, text, target_url)
                return mismatch

        analysis = self.scorer.score(target_url)
        if analysis.is_suspicious:
            return Suspected(analysis)
        return Benign()

    def classify_link(self, link: RawLink) -> Verdict:
        return self.classify(link.display_text, link.target_url)

    def _mismatch_verdict(self, text: str, target_url: str) -> Phishing | Tracking | None:
        """Phishing/Tracking when the shown URL is not the target; None if consistent."""
        norm_text = normalize_url(text)
        norm_href = normalize_url(target_url)
        if not norm_text or not norm_href:
            return None
        if norm_text == norm_href or is_prefix_of(text, target_url):
            return None
        if same_base_domain(
            norm_text,
            norm_href,
            mode=self.config.domain_mode,
            compound_tlds=self.config.compound_tlds,
        ):
            return Tracking()
        return Phishing()


def classify(
    display_text: str, target_url: str, config: EngineConfig | None = None
) -> Verdict:
    """Classify one anchor with a throwaway LinkClassifier."""
    return LinkClassifier(config).classify(display_text, target_url)
