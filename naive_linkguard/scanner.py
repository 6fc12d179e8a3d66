# naive_linkguard/scanner.py
"""
BeautifulSoup-based link scanner.

Responsibilities:
- Enumerate <a href> anchors in a document and in <iframe srcdoc> sub-documents.
- Mark each anchor once it has been classified (data-phishing-checked) so that
  repeated scans of the same, possibly growing, document only classify new links.
- Render verdicts onto the anchors when annotation is enabled.
- Note unsubscribe links by their anchor text; they are reported, not judged.

ALL classification is delegated to classifier.py; nothing here inspects URLs.
"""
from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, Tag

from naive_linkguard.classifier import LinkClassifier
from naive_linkguard.models import Benign, LinkFinding, Phishing, ScanReport, Verdict
from naive_linkguard.ui import indicator_for, tooltip_for

log = logging.getLogger(__name__)

PROCESSED_ATTR = "data-phishing-checked"
INDICATOR_ATTR = "data-phishing-indicator"
# Anchor text of a mailing-list opt-out link (English and French).
UNSUBSCRIBE_TEXT = re.compile(r"unsubscribe|désabonner", re.IGNORECASE)

OBVIOUS_PHISHING_STYLE = (
    "text-decoration: underline wavy #ff4444 !important; "
    "text-decoration-thickness: 2px !important; "
    "text-underline-offset: 2px !important;"
)
SUSPECTED_PHISHING_STYLE = (
    "text-decoration: underline wavy #ffcc00 !important; "
    "text-decoration-thickness: 2px !important; "
    "text-underline-offset: 2px !important;"
)
INDICATOR_STYLE = "font-weight: bold;"


def parse_html(html: str, parser: str = "html.parser") -> BeautifulSoup:
    return BeautifulSoup(html, parser)


class LinkScanner:
    """
    Scans one document. Not thread-safe: it mutates the soup it was given.

    Call scan() again after the document changes; anchors carrying the
    processed mark are counted as skipped and never re-classified.
    """

    def __init__(
        self,
        soup: BeautifulSoup,
        classifier: LinkClassifier | None = None,
        *,
        annotate: bool = False,
        max_input_length: int = 8192,
        parser: str = "html.parser",
    ):
        self.soup = soup
        self.classifier = classifier or LinkClassifier()
        self.annotate = annotate
        self.max_input_length = max_input_length
        self.parser = parser

    def scan(self, source: str = "<html>") -> ScanReport:
        report = ScanReport(source=source)
        self._scan_document(self.soup, "document", report)
        log.info(
            "Scanned %s: %d links checked, %d skipped, %d findings.",
            source,
            report.links_seen,
            report.skipped,
            len(report.findings),
        )
        return report

    def _scan_document(
        self, soup: BeautifulSoup, location: str, report: ScanReport
    ) -> bool:
        """Scan anchors then iframes of `soup`. True if any anchor was marked."""
        marked = False
        for tag in soup.find_all("a", href=True):
            marked = self._visit(soup, tag, location, report) or marked

        for n, iframe in enumerate(soup.find_all("iframe", srcdoc=True)):
            sub_location = f"iframe[{n}]" if location == "document" else f"{location}/iframe[{n}]"
            sub_soup = BeautifulSoup(iframe["srcdoc"], self.parser)
            if self._scan_document(sub_soup, sub_location, report):
                # Persist processed marks (and annotations) into the attribute.
                iframe["srcdoc"] = str(sub_soup)
                marked = True
        return marked

    def _visit(
        self, soup: BeautifulSoup, tag: Tag, location: str, report: ScanReport
    ) -> bool:
        if tag.has_attr(PROCESSED_ATTR):
            report.skipped += 1
            return False
        tag[PROCESSED_ATTR] = "true"

        text = self._clip(tag.get_text().strip(), "text")
        href = self._clip(str(tag.get("href") or ""), "href")
        report.links_seen += 1
        if UNSUBSCRIBE_TEXT.search(text):
            report.unsubscribe_links.append(href)
        try:
            verdict = self.classifier.classify(text, href)
            if isinstance(verdict, Benign):
                return True
            log.info("%s link detected: %s", verdict.kind.capitalize(), href)
            report.findings.append(
                LinkFinding(text=text, href=href, verdict=verdict, location=location)
            )
            if self.annotate:
                self._render(soup, tag, text, href, verdict)
        except Exception as e:
            # One bad anchor must not abort the whole scan.
            log.error("Failed to process link %r: %s", href, e, exc_info=True)
            report.errors.append(f"{location}: {href}: {e}")
        return True

    def _clip(self, value: str, what: str) -> str:
        limit = self.max_input_length
        if limit and len(value) > limit:
            log.warning("Truncating %s of %d chars to %d.", what, len(value), limit)
            return value[:limit]
        return value

    def _render(
        self, soup: BeautifulSoup, tag: Tag, text: str, href: str, verdict: Verdict
    ) -> None:
        style = (
            OBVIOUS_PHISHING_STYLE
            if isinstance(verdict, Phishing)
            else SUSPECTED_PHISHING_STYLE
        )
        existing = str(tag.get("style") or "").strip()
        if existing and not existing.endswith(";"):
            existing += ";"
        tag["style"] = f"{existing} {style}".strip()
        tag["title"] = tooltip_for(text, href, verdict)

        indicator = soup.new_tag("span", attrs={"style": INDICATOR_STYLE})
        indicator[INDICATOR_ATTR] = verdict.kind
        indicator.string = indicator_for(verdict)
        tag.insert_before(indicator)
