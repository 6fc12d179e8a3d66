from __future__ import annotations

import logging
from html import escape

from bs4 import BeautifulSoup

from naive_linkguard.classifier import LinkClassifier
from naive_linkguard.models import Phishing, Suspected, Tracking
from naive_linkguard.scanner import (
    INDICATOR_ATTR,
    PROCESSED_ATTR,
    LinkScanner,
    parse_html,
)

EMAIL_HTML = """
<html><body>
  <p><a id="phish" href="https://mybank-secure.ru/login">https://mybank.com/login</a></p>
  <p><a id="track" href="https://click.example.com/r/abc123">https://example.com/offer</a></p>
  <p><a id="ok" href="https://example.com/page/">https://example.com/page</a></p>
  <p><a id="sus" href="https://click.sendgrid.net/r/xyz">Read more</a></p>
  <p><a id="nohref" name="top">no href here</a></p>
</body></html>
"""


def _scan(html: str = EMAIL_HTML, **kwargs):
    soup = parse_html(html)
    scanner = LinkScanner(soup, **kwargs)
    return soup, scanner, scanner.scan("email.html")


# ---------- classification ----------


def test_scan_classifies_every_anchor_with_href():
    _, _, report = _scan()
    assert report.source == "email.html"
    assert report.links_seen == 4
    assert report.skipped == 0
    assert [f.verdict.kind for f in report.findings] == ["phishing", "tracking", "suspected"]
    assert report.count("phishing") == 1
    assert report.errors == []


def test_findings_carry_text_href_and_verdict():
    _, _, report = _scan()
    phish, track, sus = report.findings
    assert phish.text == "https://mybank.com/login"
    assert phish.href == "https://mybank-secure.ru/login"
    assert phish.verdict == Phishing()
    assert track.verdict == Tracking()
    assert isinstance(sus.verdict, Suspected)
    assert sus.text == "Read more"
    assert sus.location == "document"


def test_nested_markup_text_is_flattened():
    html = '<a href="https://evil.example/"> <b>https://mybank.com/</b> </a>'
    _, _, report = _scan(html)
    assert report.findings[0].text == "https://mybank.com/"
    assert report.findings[0].verdict == Phishing()


# ---------- processed mark / idempotency ----------


def test_every_classified_anchor_is_marked():
    soup, _, _ = _scan()
    for a in soup.find_all("a", href=True):
        assert a[PROCESSED_ATTR] == "true"
    assert not soup.find(id="nohref").has_attr(PROCESSED_ATTR)


def test_rescan_skips_processed_anchors():
    _, scanner, _ = _scan()
    again = scanner.scan("email.html")
    assert again.links_seen == 0
    assert again.skipped == 4
    assert again.findings == []


def test_rescan_picks_up_new_anchors_only():
    soup, scanner, _ = _scan()
    new_link = soup.new_tag("a", href="https://evil.example/")
    new_link.string = "https://mybank.com/"
    soup.body.append(new_link)

    again = scanner.scan("email.html")
    assert again.links_seen == 1
    assert again.skipped == 4
    assert [f.href for f in again.findings] == ["https://evil.example/"]


def test_prior_marks_in_html_are_respected():
    html = f'<a {PROCESSED_ATTR}="true" href="https://evil.example/">https://mybank.com/</a>'
    _, _, report = _scan(html)
    assert report.links_seen == 0
    assert report.skipped == 1


# ---------- rendering ----------


def test_annotate_marks_phishing_strongly():
    soup, _, _ = _scan(annotate=True)
    a = soup.find(id="phish")
    assert "#ff4444" in a["style"]
    assert a["title"].startswith("\N{LARGE RED CIRCLE} POSSIBLE PHISHING")
    assert "Shown URL: https://mybank.com/login" in a["title"]
    assert "Actual URL: https://mybank-secure.ru/login" in a["title"]
    indicator = a.previous_sibling
    assert indicator.name == "span"
    assert indicator[INDICATOR_ATTR] == "phishing"
    assert indicator.get_text() == "\N{LARGE RED CIRCLE} "


def test_annotate_marks_tracking_and_suspected_mildly():
    soup, _, _ = _scan(annotate=True)
    track = soup.find(id="track")
    assert "#ffcc00" in track["style"]
    assert "TRACKING LINK" in track["title"]
    assert "same organization" in track["title"]

    sus = soup.find(id="sus")
    assert "#ffcc00" in sus["style"]
    assert "SUSPICIOUS LINK" in sus["title"]
    assert "Risk Score: 8" in sus["title"]
    assert "Redirect service: sendgrid.net" in sus["title"]
    assert sus.previous_sibling[INDICATOR_ATTR] == "suspected"


def test_benign_links_are_left_alone():
    soup, _, _ = _scan(annotate=True)
    ok = soup.find(id="ok")
    assert not ok.has_attr("style")
    assert not ok.has_attr("title")
    assert ok.previous_sibling is None  # no indicator inserted
    assert len(soup.find_all("span", attrs={INDICATOR_ATTR: True})) == 3


def test_no_annotation_by_default():
    soup, _, report = _scan()
    assert report.findings
    assert not soup.find(id="phish").has_attr("title")
    assert soup.find("span") is None


def test_existing_style_is_preserved():
    html = '<a style="color: blue" href="https://evil.example/">https://mybank.com/</a>'
    soup, _, _ = _scan(html, annotate=True)
    style = soup.find("a")["style"]
    assert style.startswith("color: blue;")
    assert "underline wavy #ff4444" in style


# ---------- iframes ----------


def test_iframe_srcdoc_is_scanned_and_marked():
    inner = '<a href="https://evil.example/">https://mybank.com/</a>'
    html = f'<p>outer</p><iframe srcdoc="{escape(inner)}"></iframe>'
    soup, scanner, report = _scan(html)
    assert report.links_seen == 1
    assert report.findings[0].location == "iframe[0]"

    srcdoc = soup.find("iframe")["srcdoc"]
    assert PROCESSED_ATTR in srcdoc
    inner_soup = BeautifulSoup(srcdoc, "html.parser")
    assert inner_soup.find("a")[PROCESSED_ATTR] == "true"

    again = scanner.scan()
    assert again.links_seen == 0
    assert again.skipped == 1


# ---------- robustness ----------


class ExplodingClassifier(LinkClassifier):
    def classify(self, display_text, target_url):
        if "boom" in target_url:
            raise RuntimeError("kaboom")
        return super().classify(display_text, target_url)


def test_one_failing_anchor_does_not_abort_scan(caplog):
    html = (
        '<a href="https://boom.example/">x</a>'
        '<a href="https://evil.example/">https://mybank.com/</a>'
    )
    with caplog.at_level(logging.ERROR, logger="naive_linkguard.scanner"):
        _, _, report = _scan(html, classifier=ExplodingClassifier())
    assert report.links_seen == 2
    assert len(report.errors) == 1
    assert "kaboom" in report.errors[0]
    assert [f.verdict for f in report.findings] == [Phishing()]
    assert "Failed to process link" in caplog.text


def test_long_inputs_are_truncated(caplog):
    href = "https://evil.example/" + "x" * 100
    html = f'<a href="{href}">https://mybank.com/</a>'
    with caplog.at_level(logging.WARNING, logger="naive_linkguard.scanner"):
        _, _, report = _scan(html, max_input_length=25)
    (finding,) = report.findings
    assert finding.href == href[:25]
    assert finding.verdict == Phishing()
    assert "Truncating href" in caplog.text


def test_unsubscribe_links_are_noted_not_judged():
    html = (
        '<a href="https://example.com/prefs/optout">Unsubscribe</a>'
        '<a href="https://exemple.fr/liste">Se d\N{LATIN SMALL LETTER E WITH ACUTE}sabonner</a>'
        '<a href="https://example.com/about">About us</a>'
    )
    _, _, report = _scan(html)
    assert report.unsubscribe_links == [
        "https://example.com/prefs/optout",
        "https://exemple.fr/liste",
    ]
    assert report.findings == []
    assert report.to_dict()["unsubscribe_links"] == report.unsubscribe_links


def test_rescan_does_not_repeat_unsubscribe_links():
    soup, scanner, report = _scan('<a href="https://example.com/u">unsubscribe here</a>')
    assert report.unsubscribe_links == ["https://example.com/u"]
    assert scanner.scan("email.html").unsubscribe_links == []
