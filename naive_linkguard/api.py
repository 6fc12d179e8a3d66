# naive_linkguard/api.py
# The primary, programmer-facing API for the library.

from __future__ import annotations

import email
import logging
import sys
from email import policy
from html import escape
from pathlib import Path
from typing import Any

from naive_linkguard.classifier import LinkClassifier
from naive_linkguard.config import EngineConfig, load_config
from naive_linkguard.models import ScanReport, ScoreResult, Verdict
from naive_linkguard.scanner import LinkScanner, parse_html
from naive_linkguard.scoring import HeuristicScorer

log = logging.getLogger(__name__)


def build_config(
    *,
    pyproject_path: Path | None = None,
    suspicion_threshold: int | None = None,
    domain_mode: str | None = None,
    extra_redirect_subdomains: list[str] | None = None,
    extra_redirect_services: list[str] | None = None,
    max_input_length: int | None = None,
) -> EngineConfig:
    """
    Loads defaults + pyproject.toml, applies runtime overrides, and freezes
    the result.

    Args:
        pyproject_path: Where to look for [tool.naive_linkguard]; defaults to CWD.
        suspicion_threshold: Score at which a link becomes Suspected.
        domain_mode: "compound" or "psl".
        extra_redirect_subdomains: Tokens to add to the redirect subdomain list.
        extra_redirect_services: Domains to add to the redirect service list.
        max_input_length: Scanner truncation length (0 disables).
    """
    config = load_config(pyproject_path)
    log.debug("Loaded base configuration.")

    if suspicion_threshold is not None:
        config["suspicion_threshold"] = suspicion_threshold
        log.info("Applied override - suspicion_threshold set to: %d", suspicion_threshold)
    if domain_mode is not None:
        config["domain_mode"] = domain_mode
        log.info("Applied override - domain_mode set to: %s", domain_mode)
    if extra_redirect_subdomains:
        config["extra_redirect_subdomains"] = [
            *config.get("extra_redirect_subdomains", []),
            *extra_redirect_subdomains,
        ]
        log.info(
            "Applied override - added redirect subdomains: %s", extra_redirect_subdomains
        )
    if extra_redirect_services:
        config["extra_redirect_services"] = [
            *config.get("extra_redirect_services", []),
            *extra_redirect_services,
        ]
        log.info(
            "Applied override - added redirect services: %s", extra_redirect_services
        )
    if max_input_length is not None:
        config["max_input_length"] = max_input_length
        log.info("Applied override - max_input_length set to: %d", max_input_length)

    return EngineConfig.from_mapping(config)


def classify_link(text: str, href: str, **overrides: Any) -> Verdict:
    """Classify one anchor using the project configuration."""
    return LinkClassifier(build_config(**overrides)).classify(text, href)


def score_link(href: str, **overrides: Any) -> ScoreResult:
    """Heuristic score of one URL using the project configuration."""
    return HeuristicScorer(build_config(**overrides)).score(href)


def scan_html(
    html: str,
    *,
    source: str = "<html>",
    annotate: bool | None = None,
    **overrides: Any,
) -> tuple[ScanReport, str]:
    """
    Scan every link in an HTML document.

    Returns:
        The ScanReport and the document re-serialized with processed marks
        (and visual annotations when `annotate` is on).
    """
    log.info("Starting link scan for: %s", source)
    config = build_config(**overrides)
    if annotate is None:
        annotate = config.annotate

    log.info("Step 1: Parsing document.")
    soup = parse_html(html)

    log.info("Step 2: Classifying links.")
    scanner = LinkScanner(
        soup,
        LinkClassifier(config),
        annotate=annotate,
        max_input_length=config.max_input_length,
    )
    report = scanner.scan(source)

    log.info(
        "Scan complete. %d phishing, %d tracking, %d suspected, %d errors.",
        report.count("phishing"),
        report.count("tracking"),
        report.count("suspected"),
        len(report.errors),
    )
    return report, str(soup)


def _html_from_message(raw: bytes) -> str:
    """The text/html parts of a MIME message, or its text/plain parts in <pre>."""
    msg = email.message_from_bytes(raw, policy=policy.default)
    html_parts: list[str] = []
    text_parts: list[str] = []
    for part in msg.walk():
        if part.is_multipart() or part.get_content_disposition() == "attachment":
            continue
        ctype = part.get_content_type()
        if ctype == "text/html":
            html_parts.append(part.get_content())
        elif ctype == "text/plain":
            text_parts.append(part.get_content())
    if html_parts:
        return "\n".join(html_parts)
    log.info("No text/html part found; wrapping text/plain content.")
    return "\n".join(f"<pre>{escape(t)}</pre>" for t in text_parts)


def load_document(path: str) -> str:
    """
    Reads an HTML file, an .eml message (its HTML parts), or stdin for "-".

    Raises:
        FileNotFoundError: if `path` does not exist.
    """
    if path == "-":
        raw = sys.stdin.buffer.read()
    else:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(path)
        raw = p.read_bytes()

    if path.lower().endswith(".eml"):
        log.info("Extracting HTML from message %s", path)
        return _html_from_message(raw)
    return raw.decode("utf-8", errors="replace")
