"""
News providers for the evidence gatherer.

- GNewsProvider: keyed JSON API with from/to date filtering
- GoogleNewsRSSProvider: keyless RSS search, dates as query operators

Providers raise ProviderUnavailable on transport or payload failures;
the gatherer turns that into zero sources for the query.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional, Protocol

from bs4 import BeautifulSoup

from core.http import HttpClient, HttpError
from core.schemas import EvidenceSource, ProviderUnavailable

from .sources import classify_source_type

logger = logging.getLogger(__name__)

GNEWS_URL = "https://gnews.io/api/v4/search"
GOOGLE_NEWS_RSS_URL = "https://news.google.com/rss/search"

SNIPPET_LIMIT = 500

_GOOGLE_ARTICLE_RE = re.compile(r"https?://news\.google\.com/rss/articles/[^\s<\"]+")
_LINK_TEXT_RE = re.compile(r"<link\s*/?>\s*(https?://[^\s<]+)")


class NewsProvider(Protocol):
    name: str

    def search(self, query: str, from_date: str, to_date: str, max_results: int) -> list[EvidenceSource]:
        ...


class GNewsProvider:
    """GNews search API. Disabled (returns nothing) without an API key."""

    name = "gnews"

    def __init__(self, http: HttpClient, api_key: Optional[str], *, base_url: str = GNEWS_URL) -> None:
        self._http = http
        self._api_key = api_key
        self._base_url = base_url

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    def search(self, query: str, from_date: str, to_date: str, max_results: int) -> list[EvidenceSource]:
        if not self.enabled:
            return []
        params = {
            "q": query,
            "lang": "en",
            "max": str(max_results),
            "from": f"{from_date}T00:00:00Z",
            "to": f"{to_date}T23:59:59Z",
            "apikey": self._api_key,
        }
        try:
            response = self._http.get(self._base_url, params=params)
        except HttpError as e:
            raise ProviderUnavailable(f"GNews request failed: {e}", provider=self.name) from e
        if not response.ok:
            raise ProviderUnavailable(f"GNews error: HTTP {response.status_code}", provider=self.name)
        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderUnavailable(f"GNews returned malformed JSON: {e}", provider=self.name) from e

        sources = []
        for article in (payload.get("articles") or [])[:max_results]:
            source_name = (article.get("source") or {}).get("name") or ""
            snippet = article.get("description") or (article.get("content") or "")[:SNIPPET_LIMIT]
            sources.append(
                EvidenceSource(
                    title=article.get("title") or "Untitled",
                    url=article.get("url") or "",
                    snippet=snippet.strip(),
                    source_type=classify_source_type(source_name or article.get("url")),
                    published_date=article.get("publishedAt"),
                    source_name=source_name or None,
                )
            )
        return sources


class GoogleNewsRSSProvider:
    """Google News RSS search; time filtering via after:/before: operators."""

    name = "google_news_rss"

    def __init__(self, http: HttpClient, *, base_url: str = GOOGLE_NEWS_RSS_URL) -> None:
        self._http = http
        self._base_url = base_url

    @property
    def enabled(self) -> bool:
        return True

    def search(self, query: str, from_date: str, to_date: str, max_results: int) -> list[EvidenceSource]:
        params = {
            "q": f"{query} after:{from_date} before:{to_date}",
            "hl": "en-US",
            "gl": "US",
            "ceid": "US:en",
        }
        try:
            response = self._http.get(self._base_url, params=params)
        except HttpError as e:
            raise ProviderUnavailable(f"Google News RSS request failed: {e}", provider=self.name) from e
        if not response.ok:
            raise ProviderUnavailable(f"Google News RSS error: HTTP {response.status_code}", provider=self.name)
        return parse_rss_items(response.text, max_results)


def readable_text(html: str) -> str:
    """
    Flatten a Google News description to plain text.

    Anchors become their text, <font> publisher tags become "(name)".
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for font in soup.find_all("font"):
        font.replace_with(f"({font.get_text(strip=True)})")
    text = soup.get_text(" ")
    return " ".join(text.replace("\xa0", " ").split())


def _item_link(item: Any) -> str:
    link = item.find("link")
    if link is not None:
        text = link.get_text(strip=True)
        if text.startswith("http"):
            return text
    raw = str(item)
    match = _LINK_TEXT_RE.search(raw) or _GOOGLE_ARTICLE_RE.search(raw)
    if match:
        return match.group(1) if match.re is _LINK_TEXT_RE else match.group(0)
    return ""


def parse_rss_items(xml: str, max_results: int) -> list[EvidenceSource]:
    """Parse RSS <item> elements into EvidenceSources (at most `max_results`)."""
    soup = BeautifulSoup(xml, "xml")
    sources: list[EvidenceSource] = []
    for item in soup.find_all("item"):
        if len(sources) >= max_results:
            break

        title_tag = item.find("title")
        title = " ".join(title_tag.get_text().split()) if title_tag else ""
        description = item.find("description")
        snippet = readable_text(description.get_text() if description else "")
        if not title and not snippet:
            continue

        source_tag = item.find("source")
        source_name = source_tag.get_text(strip=True) if source_tag else ""
        source_url = source_tag.get("url", "") if source_tag else ""
        pub_date = item.find("pubDate")

        sources.append(
            EvidenceSource(
                title=title or "Untitled",
                url=_item_link(item),
                snippet=snippet[:SNIPPET_LIMIT],
                source_type=classify_source_type(source_name or source_url),
                published_date=pub_date.get_text(strip=True) if pub_date else None,
                source_name=source_name or None,
            )
        )
    return sources
