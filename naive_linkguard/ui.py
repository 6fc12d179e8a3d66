# naive_linkguard/ui.py
# Presentation-only utilities: tooltip text for marked anchors and CLI output.
from __future__ import annotations

from typing import IO, Iterable

from naive_linkguard.models import (
    LinkFinding,
    Phishing,
    ScanReport,
    ScoreResult,
    Suspected,
    Tracking,
    Verdict,
)

PHISHING_INDICATOR = "\N{LARGE RED CIRCLE} "
WARNING_INDICATOR = "\N{LARGE YELLOW CIRCLE} "


def _writeln(text: str = "", *, file: IO[str]) -> None:
    file.write(text + "\n")


def indicator_for(verdict: Verdict) -> str:
    if isinstance(verdict, Phishing):
        return PHISHING_INDICATOR
    if isinstance(verdict, (Tracking, Suspected)):
        return WARNING_INDICATOR
    return ""


def tooltip_for(text: str, href: str, verdict: Verdict) -> str:
    """The title text shown on a marked anchor. Empty for Benign."""
    if isinstance(verdict, Phishing):
        return (
            f"{PHISHING_INDICATOR}POSSIBLE PHISHING\n\n"
            f"Shown URL: {text}\n"
            f"Actual URL: {href}\n\n"
            "WARNING: The displayed URL domain does not match the actual "
            "destination. This may be a phishing attempt."
        )
    if isinstance(verdict, Tracking):
        return (
            f"{WARNING_INDICATOR}TRACKING LINK\n\n"
            f"Shown URL: {text}\n"
            f"Actual URL: {href}\n\n"
            "This link redirects through a tracking subdomain of the same organization."
        )
    if isinstance(verdict, Suspected):
        reasons = "\n\N{BULLET} ".join(verdict.analysis.reasons)
        return (
            f"{WARNING_INDICATOR}SUSPICIOUS LINK\n\n"
            f"URL: {href}\n\n"
            f"Risk Score: {verdict.analysis.score}\n\n"
            f"Reasons:\n\N{BULLET} {reasons}\n\n"
            "This link shows characteristics commonly used in tracking or phishing."
        )
    return ""


def render_verdict_line(text: str, href: str, verdict: Verdict, *, file: IO[str]) -> None:
    _writeln(f"Verdict: {verdict.kind.upper()}", file=file)
    if text:
        _writeln(f"  shown:  {text}", file=file)
    _writeln(f"  actual: {href}", file=file)
    if isinstance(verdict, Suspected):
        render_score_section(verdict.analysis, file=file)


def render_score_section(result: ScoreResult, *, file: IO[str]) -> None:
    flag = "suspicious" if result.is_suspicious else "below threshold"
    _writeln(f"Score: {result.score} (threshold {result.threshold}, {flag})", file=file)
    for reason in result.reasons:
        _writeln(f"  - {reason}", file=file)


def render_scan_header(source: str, *, file: IO[str]) -> None:
    _writeln(f"Scanning links in: {source}...", file=file)


def render_summary_line(report: ScanReport, *, file: IO[str]) -> None:
    _writeln(
        f"\nLinks checked: {report.links_seen}"
        f" | phishing: {report.count('phishing')}"
        f" | tracking: {report.count('tracking')}"
        f" | suspected: {report.count('suspected')}",
        file=file,
    )


def render_findings_section(findings: Iterable[LinkFinding], *, file: IO[str]) -> None:
    items = list(findings)
    if not items:
        return
    _writeln("\n--- Findings ---", file=file)
    for f in items:
        kind = f.verdict.kind.upper()
        _writeln(f"- [{kind:<9}] {f.href}", file=file)
        if f.text and not isinstance(f.verdict, Suspected):
            _writeln(f"    shown as: {f.text}", file=file)
        if isinstance(f.verdict, Suspected):
            _writeln(f"    score {f.verdict.analysis.score}: "
                     + "; ".join(f.verdict.analysis.reasons), file=file)
        if f.location != "document":
            _writeln(f"    in: {f.location}", file=file)


def render_errors_section(errors: Iterable[str], *, file: IO[str]) -> None:
    errs = list(errors)
    if not errs:
        return
    _writeln("\n--- Errors Encountered ---", file=file)
    for e in errs:
        _writeln(f"- {e}", file=file)


def render_unsubscribe_section(links: Iterable[str], *, file: IO[str]) -> None:
    items = list(links)
    if not items:
        return
    _writeln("\n--- Unsubscribe Links ---", file=file)
    for href in items:
        _writeln(f"- {href}", file=file)
