# naive_linkguard/signatures.py
"""
Built-in signature tables.

These are the defaults only. Callers extend or replace them through
`[tool.naive_linkguard]` in pyproject.toml (see config.py), so nothing here
should be imported for matching directly; go through EngineConfig.
"""
from __future__ import annotations

# Leftmost host labels typical of click/redirect endpoints. A label matches
# when it equals a token or starts with one ("trk2", "email-links", ...).
REDIRECT_SUBDOMAINS: tuple[str, ...] = (
    "go",
    "click",
    "link",
    "track",
    "redirect",
    "email",
    "mail",
    "t",
    "r",
    "links",
    "tracking",
    "trk",
    "em",
    "newsletter",
)

# Email-marketing / redirect providers. Matched as a substring of the host.
REDIRECT_SERVICES: tuple[str, ...] = (
    "sendgrid.net",
    "mailgun.org",
    "mandrillapp.com",
    "amazonses.com",
    "sparkpostmail.com",
    "mailchimp.com",
    "list-manage.com",
    "campaignmonitor.com",
    "createsend.com",
    "constantcontact.com",
    "hubspotlinks.com",
    "hubspot.com",
    "hs-sites.com",
    "click.email",
    "link.mail",
    "url.mail",
)

# Path prefixes of link shorteners and click trackers. Compiled with
# re.IGNORECASE and matched at the start of the path.
REDIRECT_PATH_PATTERNS: tuple[str, ...] = (
    r"^/tr/",
    r"^/cl/",
    r"^/click/",
    r"^/track/",
    r"^/r/",
    r"^/redirect/",
    r"^/f/a/",
    r"^/l/",
    r"^/e/",
    r"^/lnk/",
    r"^/ctc/",
)

# Transactional content: these paths earn a negative (legitimate) credit.
LEGITIMATE_PATH_PATTERNS: tuple[str, ...] = (
    r"/(order|invoice|ticket|confirmation|receipt|booking|reservation)[-_]?(id|token|number)?",
    r"/my[-_]?(account|orders|bookings|tickets)",
)

# Two-label public suffixes under which the registrable domain has three labels.
COMPOUND_TLDS: tuple[str, ...] = (
    "co.uk",
    "com.au",
    "co.nz",
    "co.jp",
    "com.br",
    "com.ar",
    "co.za",
    "gouv.fr",
)

# Points per signal.
DEFAULT_WEIGHTS: dict[str, int] = {
    "redirect_subdomain": 3,
    "redirect_service": 3,
    "redirect_path": 2,
    "obfuscated_token": 2,
    "obfuscated_token_long": 3,
    "no_readable_words": 1,
    "legitimate_pattern": -2,
}

DEFAULT_SUSPICION_THRESHOLD = 4
