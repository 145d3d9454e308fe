"""
Static source-type lookup.

Matching is by case-insensitive containment on the publisher name or
domain. Short tokens ("ap", "ft", "x") only match as whole words.
"""

from __future__ import annotations

import re

from core.schemas import SourceType

SOURCE_TABLE: list[tuple[SourceType, tuple[str, ...]]] = [
    (
        SourceType.WIRE_SERVICE,
        ("reuters", "associated press", "ap news", "apnews", "afp", "agence france-presse", "bloomberg"),
    ),
    (
        SourceType.OFFICIAL,
        (
            ".gov",
            "gov.uk",
            "federal reserve",
            "federalreserve",
            "sec.gov",
            "white house",
            "whitehouse",
            "treasury",
            "european central bank",
            "ecb.europa.eu",
            "bank of england",
            "supreme court",
            "congress.gov",
            "press release",
            "prnewswire",
            "businesswire",
        ),
    ),
    (
        SourceType.MAINSTREAM_NEWS,
        (
            "nyt",
            "new york times",
            "nytimes",
            "washington post",
            "bbc",
            "cnn",
            "cnbc",
            "guardian",
            "ft",
            "financial times",
            "wall street journal",
            "wsj",
            "abc news",
            "nbc",
            "cbs",
            "fox news",
            "usa today",
            "politico",
            "the hill",
            "axios",
            "npr",
            "the economist",
            "los angeles times",
            "al jazeera",
        ),
    ),
    (
        SourceType.TRADE_PRESS,
        (
            "coindesk",
            "the block",
            "theblock",
            "techcrunch",
            "arstechnica",
            "ars technica",
            "wired",
            "the verge",
            "decrypt",
            "cointelegraph",
            "espn",
            "variety",
            "marketwatch",
        ),
    ),
    (SourceType.BLOG, ("medium.com", "substack", "blogspot", "wordpress", "blog")),
    (SourceType.SOCIAL, ("twitter", "x.com", "reddit", "facebook", "youtube", "tiktok", "instagram", "truth social")),
]

_SHORT_TOKEN = 4


def _pattern(token: str) -> re.Pattern[str]:
    if len(token) < _SHORT_TOKEN and token.isalpha():
        return re.compile(rf"\b{re.escape(token)}\b")
    return re.compile(re.escape(token))


_COMPILED: list[tuple[SourceType, list[re.Pattern[str]]]] = [
    (source_type, [_pattern(t) for t in tokens]) for source_type, tokens in SOURCE_TABLE
]


def classify_source_type(name_or_domain: str | None) -> SourceType:
    """Map a publisher name or domain to a SourceType; UNKNOWN when unlisted."""
    if not name_or_domain:
        return SourceType.UNKNOWN
    text = name_or_domain.lower()
    for source_type, patterns in _COMPILED:
        if any(p.search(text) for p in patterns):
            return source_type
    return SourceType.UNKNOWN
