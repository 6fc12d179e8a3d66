# naive_linkguard/lexical.py
# Pure string heuristics used by the scorer and the classifier.

from __future__ import annotations

import math
import re
from collections import Counter

# Empirical ceiling for printable ASCII, in bits per character.
ENTROPY_CEILING_BITS = 6.6

BARE_URL_PATTERN = re.compile(r"^https?://\S+$", re.IGNORECASE)
READABLE_WORD_PATTERN = re.compile(r"[a-z]{4,}", re.IGNORECASE)


def entropy(s: str) -> float:
    """
    Shannon entropy of the character distribution of `s`, scaled to 0..1.

    The raw value (bits per character) is divided by ENTROPY_CEILING_BITS and
    clamped, so random base64-ish tokens land around 0.8-0.9 while hex tokens
    and ordinary words stay well below 0.7.
    """
    if not s:
        return 0.0
    length = len(s)
    bits = 0.0
    for count in Counter(s).values():
        p = count / length
        bits -= p * math.log2(p)
    return min(bits / ENTROPY_CEILING_BITS, 1.0)


def looks_like_bare_url(s: str) -> bool:
    """True iff the whole (trimmed) string is an http(s) URL with no whitespace."""
    if not s:
        return False
    return BARE_URL_PATTERN.match(s.strip()) is not None


def has_readable_words(s: str) -> bool:
    """True iff `s` contains a run of 4+ letters."""
    return READABLE_WORD_PATTERN.search(s or "") is not None
