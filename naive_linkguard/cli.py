# naive_linkguard/cli.py
# Defines the command-line interface using argparse.

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import IO, Any, Sequence

from naive_linkguard import __version__
from naive_linkguard.api import classify_link, load_document, scan_html, score_link
from naive_linkguard.models import Benign, LinkFinding
from naive_linkguard.ui import (
    render_errors_section,
    render_findings_section,
    render_scan_header,
    render_score_section,
    render_summary_line,
    render_unsubscribe_section,
    render_verdict_line,
)

log = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _add_engine_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments common to every command."""
    engine_group = parser.add_argument_group("engine arguments")
    engine_group.add_argument(
        "--threshold",
        type=int,
        default=None,
        metavar="N",
        help="Suspicion score threshold (default: 4 or pyproject.toml).",
    )
    engine_group.add_argument(
        "--psl",
        action="store_true",
        help="Use the bundled Public Suffix List for base domains instead of the "
        "built-in compound TLD list.",
    )


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if args.threshold is not None:
        out["suspicion_threshold"] = args.threshold
    if args.psl:
        out["domain_mode"] = "psl"
    return out


def main(argv: Sequence[str] | None = None, stdout: IO[str] | None = None) -> int:
    """Entry point for the command-line interface."""
    stdout = stdout or sys.stdout

    parser = argparse.ArgumentParser(
        description="A naive heuristic checker for phishing and tracking links.",
        prog="naive_linkguard",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging output to stderr.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- classify ---
    classify_parser = subparsers.add_parser(
        "classify", help="Classify one link given its target and displayed text."
    )
    classify_parser.add_argument("url", help="The link target (href).")
    classify_parser.add_argument(
        "--text", default="", help="The text the link displays, if any."
    )
    classify_parser.add_argument(
        "--json", dest="as_json", action="store_true", help="Print JSON."
    )
    classify_parser.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 unless the verdict is 'none' (for CI usage).",
    )
    _add_engine_args(classify_parser)

    # --- score ---
    score_parser = subparsers.add_parser(
        "score", help="Show the heuristic score and reasons for a URL."
    )
    score_parser.add_argument("url", help="The URL to score.")
    score_parser.add_argument(
        "--json", dest="as_json", action="store_true", help="Print JSON."
    )
    _add_engine_args(score_parser)

    # --- scan ---
    scan_parser = subparsers.add_parser(
        "scan", help="Scan all links in an HTML file or .eml message."
    )
    scan_parser.add_argument("path", help="HTML or .eml file to scan, '-' for stdin.")
    scan_parser.add_argument(
        "--json",
        dest="json_output",
        metavar="FILEPATH",
        help="Path to write the JSON report.",
    )
    scan_parser.add_argument(
        "--annotate",
        dest="annotate_output",
        metavar="FILEPATH",
        help="Path to write the HTML with suspicious links marked.",
    )
    scan_parser.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 if any link is phishing, tracking or suspected.",
    )
    _add_engine_args(scan_parser)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    overrides = _overrides(args)

    if args.command == "classify":
        verdict = classify_link(args.text, args.url, **overrides)
        if args.as_json:
            finding = LinkFinding(text=args.text, href=args.url, verdict=verdict)
            print(json.dumps(finding.to_dict(), indent=2), file=stdout)
        else:
            render_verdict_line(args.text, args.url, verdict, file=stdout)
        if args.check and not isinstance(verdict, Benign):
            return 1
        return 0

    if args.command == "score":
        result = score_link(args.url, **overrides)
        if args.as_json:
            out = {
                "url": args.url,
                "score": result.score,
                "threshold": result.threshold,
                "is_suspicious": result.is_suspicious,
                "reasons": list(result.reasons),
            }
            print(json.dumps(out, indent=2), file=stdout)
        else:
            render_score_section(result, file=stdout)
        return 0

    # args.command == "scan"
    try:
        html = load_document(args.path)
    except FileNotFoundError:
        log.error("Error: The file specified could not be found: %s", args.path)
        return 2

    render_scan_header(args.path, file=stdout)
    report, annotated = scan_html(
        html,
        source=args.path,
        annotate=bool(args.annotate_output),
        **overrides,
    )
    render_summary_line(report, file=stdout)
    render_findings_section(report.findings, file=stdout)
    render_errors_section(report.errors, file=stdout)
    render_unsubscribe_section(report.unsubscribe_links, file=stdout)

    if args.json_output:
        out_path = Path(args.json_output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8") as f:
            json.dump(report.to_dict(), f, indent=2)
        print(f"Full report written to {args.json_output}", file=stdout)

    if args.annotate_output:
        out_path = Path(args.annotate_output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(annotated, encoding="utf-8")
        print(f"Annotated HTML written to {args.annotate_output}", file=stdout)

    if args.check and report.findings:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
