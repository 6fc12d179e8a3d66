# Implements the heuristic suspicion score for a single URL.

from __future__ import annotations

import logging

from naive_linkguard.config import EngineConfig
from naive_linkguard.lexical import entropy, has_readable_words
from naive_linkguard.link_logic import ParseError, base_domain, parse_url
from naive_linkguard.models import ScoreResult

log = logging.getLogger(__name__)

# Length gates for the token signals, in characters of path+query+fragment.
OBFUSCATION_MIN_LENGTH = 80
OBFUSCATION_LONG_LENGTH = 200
OBFUSCATION_MIN_ENTROPY = 0.7
UNREADABLE_MIN_LENGTH = 40


class HeuristicScorer:
    """
    Scores a URL from independent structural signals.

    Signals are evaluated in a fixed order and each contributes at most one
    reason; within a signal the first matching table entry wins. Signals are
    additive, so a click-tracker host with an obfuscated token collects both.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()

    def score(self, url: str) -> ScoreResult:
        cfg = self.config
        try:
            parts = parse_url(url)
        except ParseError as e:
            log.debug("Not scoring malformed URL: %s", e)
            return ScoreResult(threshold=cfg.suspicion_threshold)

        hostname = parts.hostname or ""
        pathname = parts.path or "/"
        full_path = pathname
        if parts.query:
            full_path += "?" + parts.query
        if parts.fragment:
            full_path += "#" + parts.fragment

        score = 0
        reasons: list[str] = []

        # 1. Redirect subdomain
        subdomain = hostname.split(".")[0]
        if any(subdomain.startswith(token) for token in cfg.redirect_subdomains):
            score += cfg.weight("redirect_subdomain")
            reasons.append(f"Redirect subdomain: {subdomain}")

        # 2. Known redirect service
        if any(service in hostname for service in cfg.redirect_services):
            domain = base_domain(
                hostname, mode=cfg.domain_mode, compound_tlds=cfg.compound_tlds
            )
            score += cfg.weight("redirect_service")
            reasons.append(f"Redirect service: {domain}")

        # 3. Redirect path shape
        for pattern in cfg.redirect_path_patterns:
            if pattern.search(pathname):
                score += cfg.weight("redirect_path")
                reasons.append(f"Redirect path pattern: {pathname[:20]}...")
                break

        # 4. Obfuscated token
        if len(full_path) > OBFUSCATION_MIN_LENGTH:
            token_entropy = entropy(full_path)
            if token_entropy > OBFUSCATION_MIN_ENTROPY:
                if len(full_path) > OBFUSCATION_LONG_LENGTH:
                    score += cfg.weight("obfuscated_token_long")
                else:
                    score += cfg.weight("obfuscated_token")
                reasons.append(
                    f"Obfuscated token ({token_entropy * 100:.0f}% entropy, "
                    f"{len(full_path)} chars)"
                )

        # 5. No readable words
        if len(full_path) > UNREADABLE_MIN_LENGTH and not has_readable_words(full_path):
            score += cfg.weight("no_readable_words")
            reasons.append("No readable words in path")

        # 6. Legitimate-pattern credit
        for pattern in cfg.legitimate_path_patterns:
            if pattern.search(pathname):
                score += cfg.weight("legitimate_pattern")
                reasons.append("Matches legitimate pattern (order/ticket/etc)")
                break

        result = ScoreResult(
            score=score, reasons=tuple(reasons), threshold=cfg.suspicion_threshold
        )
        log.debug("Scored %s: %d %s", url, score, list(reasons))
        return result


def score_url(url: str, config: EngineConfig | None = None) -> ScoreResult:
    """Convenience wrapper: score one URL with a throwaway HeuristicScorer."""
    return HeuristicScorer(config).score(url)
