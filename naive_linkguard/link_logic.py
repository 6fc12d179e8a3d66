# naive_linkguard/link_logic.py
# URL parsing, normalization and domain comparison shared by the scorer and
# the classifier. Every function here is pure; parse failures never escape
# except through parse_url().
from __future__ import annotations

import logging
import re
from typing import Iterable
from urllib.parse import SplitResult, urlsplit

import tldextract

from naive_linkguard import signatures

log = logging.getLogger(__name__)

_SCHEME_PREFIX = re.compile(r"^https?://", re.IGNORECASE)
_SPECIAL_SCHEME = re.compile(r"^https?:", re.IGNORECASE)
_TAB_OR_NEWLINE = re.compile(r"[\t\n\r]")
_C0_AND_SPACE = "".join(chr(c) for c in range(0x21))
_DEFAULT_PORTS = {"http": 80, "https": 443}
# Characters a browser would refuse in a host name.
_FORBIDDEN_HOST_CHARS = frozenset(" \t\r\n\f\v<>^|\\\"'%{}`")
_PREFIX_BOUNDARIES = ("/", "?", "#")

# Offline extractor: suffix_list_urls=() makes tldextract use the snapshot
# bundled with the package and never touch the network.
_PSL_EXTRACT = tldextract.TLDExtract(suffix_list_urls=())


class ParseError(ValueError):
    """Raised when a string cannot be parsed as an absolute URL."""


# ---------- Parsing ----------


def _as_browser_reads(raw: str) -> str:
    """
    Rewrite `raw` into the string a browser actually navigates to.

    Browsers strip leading and trailing control characters and spaces, drop
    every tab and newline, and for http(s) treat "\\" as "/" before the query.
    urlsplit() does none of this, so "https://evil.example\\@bank.com/" would
    otherwise be read as host bank.com.
    """
    cleaned = _TAB_OR_NEWLINE.sub("", raw.strip(_C0_AND_SPACE))
    if not _SPECIAL_SCHEME.match(cleaned):
        return cleaned
    cut = len(cleaned)
    for sep in ("?", "#"):
        pos = cleaned.find(sep)
        if pos != -1:
            cut = min(cut, pos)
    return cleaned[:cut].replace("\\", "/") + cleaned[cut:]


def parse_url(raw: str) -> SplitResult:
    """
    Split an absolute URL, validating the parts urlsplit() lets through.

    The input is first read the way a browser reads it (see
    _as_browser_reads). Requires a scheme and a host; rejects hosts with
    whitespace or characters browsers refuse, and invalid ports.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ParseError("empty URL")
    try:
        parts = urlsplit(_as_browser_reads(raw))
        # .port raises ValueError for non-numeric or out-of-range ports
        parts.port  # noqa: B018
    except ValueError as e:
        raise ParseError(f"Unparseable URL {raw!r}: {e}") from e

    if not parts.scheme:
        raise ParseError(f"URL has no scheme: {raw!r}")
    host = parts.hostname
    if not host:
        raise ParseError(f"URL has no host: {raw!r}")
    if any(ch in _FORBIDDEN_HOST_CHARS for ch in host):
        raise ParseError(f"URL host contains forbidden characters: {raw!r}")
    return parts


def _host(parts: SplitResult) -> str:
    """Lowercase host with a non-default port, without userinfo."""
    hostname = parts.hostname or ""
    if ":" in hostname:  # IPv6 literal
        hostname = f"[{hostname}]"
    port = parts.port
    if port is not None and port != _DEFAULT_PORTS.get(parts.scheme.lower()):
        return f"{hostname}:{port}"
    return hostname


def hostname_of(url: str) -> str | None:
    """Lowercase hostname of an absolute URL, or None if it does not parse."""
    try:
        return parse_url(url).hostname
    except ParseError:
        return None


# ---------- Normalization ----------


def normalize_url(url: str) -> str | None:
    """
    Canonical comparable form of a URL, or None if it cannot be parsed.

    - Reads the string as a browser would ("\\" is "/" before the query,
      tabs and newlines vanish).
    - Adds "https://" when the string does not start with http:// or https://.
    - Lowercases scheme, host and path; drops userinfo and default ports.
    - Strips a single trailing "/" from a non-root path ("/" stays).
    - Keeps query and fragment exactly as given.
    """
    if not isinstance(url, str):
        return None
    candidate = _as_browser_reads(url)
    if not _SCHEME_PREFIX.match(candidate):
        candidate = "https://" + candidate

    try:
        parts = parse_url(candidate)
    except ParseError as e:
        log.debug("normalize_url: %s", e)
        return None

    path = parts.path.lower() or "/"
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]

    normalized = f"{parts.scheme.lower()}://{_host(parts)}{path}"
    if parts.query:
        normalized += "?" + parts.query
    if parts.fragment:
        normalized += "#" + parts.fragment
    return normalized


def is_prefix_of(text_url: str, href_url: str) -> bool:
    """
    True iff the displayed URL is a proper prefix of the real target.

    "https://example.com/docs" is a prefix of "https://example.com/docs/page"
    and of "https://example.com/docs?x=1", but not of
    "https://example.com/docsx". A root text URL ("https://example.com")
    prefixes every path on that host and never "https://example.comx.net".
    """
    norm_text = normalize_url(text_url)
    norm_href = normalize_url(href_url)
    if not norm_text or not norm_href:
        return False
    if not norm_href.startswith(norm_text):
        return False
    if len(norm_href) == len(norm_text) or norm_text.endswith("/"):
        return True
    return norm_href[len(norm_text)] in _PREFIX_BOUNDARIES


# ---------- Domains ----------


def _registrable_domain_or(host: str) -> str | None:
    """
    Returns eTLD+1 from the bundled Public Suffix List snapshot, or None when
    the host has no registrable part (IP literals, single labels, bare suffixes).
    """
    ext = _PSL_EXTRACT(host)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}".lower()
    return None


def base_domain(
    hostname: str | None,
    *,
    mode: str = "compound",
    compound_tlds: Iterable[str] = signatures.COMPOUND_TLDS,
) -> str | None:
    """
    Registrable domain of `hostname`.

    compound mode: the last two labels, or the last three when the last two
    form a known compound TLD ("mail.example.co.uk" -> "example.co.uk").
    A single label is returned as is; empty input gives None.

    psl mode: eTLD+1 via tldextract, falling back to compound mode for hosts
    the suffix list cannot split.
    """
    if not hostname:
        return None
    host = hostname.lower()

    if mode == "psl":
        registrable = _registrable_domain_or(host)
        if registrable:
            return registrable

    labels = host.split(".")
    if len(labels) >= 3 and ".".join(labels[-2:]) in set(compound_tlds):
        return ".".join(labels[-3:])
    if len(labels) >= 2:
        return ".".join(labels[-2:])
    return host


def same_base_domain(
    url_a: str,
    url_b: str,
    *,
    mode: str = "compound",
    compound_tlds: Iterable[str] = signatures.COMPOUND_TLDS,
) -> bool:
    """True iff both absolute URLs parse and share a non-empty base domain."""
    host_a = hostname_of(url_a)
    host_b = hostname_of(url_b)
    if not host_a or not host_b:
        return False
    tlds = tuple(compound_tlds)
    domain_a = base_domain(host_a, mode=mode, compound_tlds=tlds)
    domain_b = base_domain(host_b, mode=mode, compound_tlds=tlds)
    return bool(domain_a) and domain_a == domain_b
