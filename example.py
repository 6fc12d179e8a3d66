# example.py
# A small example demonstrating how to use the naive_linkguard
# library to check the links of an email before anyone clicks them.

import logging

from naive_linkguard import Phishing, Suspected, Tracking, classify_link, scan_html

# --- Configuration ---
# You can enable logging to see each link decision.
# This is helpful for debugging.
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

# A trimmed-down marketing email with one honest link, one tracked link,
# one deceptive link and one that only looks odd.
EMAIL_HTML = """
<html><body>
  <p>Your statement is ready: <a href="https://mybank-secure.ru/login">https://mybank.com/login</a></p>
  <p>See the offer at <a href="https://click.example.com/r/abc123">https://example.com/offer</a></p>
  <p>Docs: <a href="https://example.com/docs/">https://example.com/docs</a></p>
  <p><a href="https://u123.ct.sendgrid.net/ls/click?upn=Zm9vYmFyYmF6cXV4MTIzNDU2Nzg5MGFiY2RlZmdoaWprbG1ub3BxcnN0dXZ3eHl6QUJDREVGR0hJSktMTU5PUFFSU1RVVldYWVo">Unsubscribe</a></p>
</body></html>
"""


def main():
    """
    Classify a single link, then scan a whole document and print the findings.
    """
    # One link at a time: the text the reader sees, and where it really goes.
    verdict = classify_link("https://paypal.com/", "https://paypal.com.account-check.example/")
    print(f"[*] Single link verdict: {verdict.kind}\n")

    # A whole document. The second value is the HTML with every link marked as
    # processed and, because annotate=True, suspicious links highlighted.
    report, annotated = scan_html(EMAIL_HTML, source="example email", annotate=True)

    print("\n--- SCAN COMPLETE ---")
    print(f"Links checked: {report.links_seen}")

    if not report.findings:
        print("\nNothing suspicious was found.")
        return

    for finding in report.findings:
        if isinstance(finding.verdict, Phishing):
            print(f"[PHISHING]  shows {finding.text} but goes to {finding.href}")
        elif isinstance(finding.verdict, Tracking):
            print(f"[TRACKING]  {finding.text} -> {finding.href}")
        elif isinstance(finding.verdict, Suspected):
            reasons = ", ".join(finding.verdict.analysis.reasons)
            print(f"[SUSPECTED] {finding.href} (score {finding.verdict.analysis.score}: {reasons})")

    with open("example_annotated.html", "w", encoding="utf-8") as f:
        f.write(annotated)
    print("\nAnnotated copy written to example_annotated.html")


if __name__ == "__main__":
    main()
