"""
Source typing and news provider parsing (Google News RSS, GNews).
"""

from unittest.mock import Mock

import pytest

from agents.evidence.providers import (
    GNewsProvider,
    GoogleNewsRSSProvider,
    SNIPPET_LIMIT,
    parse_rss_items,
    readable_text,
)
from agents.evidence.sources import classify_source_type
from core.http import HttpError
from core.schemas import ProviderUnavailable, SourceType

from fixtures.common import json_response, make_mock_http, text_response


RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>"fed rate cut" - Google News</title>
    <item>
      <title>Fed cuts rates by a quarter point - Reuters</title>
      <link>https://news.google.com/rss/articles/CBMiAAA?oc=5</link>
      <pubDate>Wed, 18 Mar 2026 18:00:00 GMT</pubDate>
      <description>&lt;a href="https://news.google.com/rss/articles/CBMiAAA"&gt;Fed cuts rates by a quarter point&lt;/a&gt;&amp;nbsp;&amp;nbsp;&lt;font color="#6f6f6f"&gt;Reuters&lt;/font&gt;</description>
      <source url="https://www.reuters.com">Reuters</source>
    </item>
    <item>
      <title>Crypto traders react to Fed decision</title>
      <link>https://news.google.com/rss/articles/CBMiBBB?oc=5</link>
      <pubDate>Wed, 18 Mar 2026 19:00:00 GMT</pubDate>
      <description>Markets rallied after the announcement.</description>
      <source url="https://www.coindesk.com">CoinDesk</source>
    </item>
  </channel>
</rss>
"""


class TestClassifySourceType:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Reuters", SourceType.WIRE_SERVICE),
            ("AP News", SourceType.WIRE_SERVICE),
            ("federalreserve.gov", SourceType.OFFICIAL),
            ("The New York Times", SourceType.MAINSTREAM_NEWS),
            ("FT", SourceType.MAINSTREAM_NEWS),
            ("CoinDesk", SourceType.TRADE_PRESS),
            ("someone.substack.com", SourceType.BLOG),
            ("reddit.com", SourceType.SOCIAL),
            ("Local Gazette", SourceType.UNKNOWN),
        ],
    )
    def test_lookup(self, name, expected):
        assert classify_source_type(name) == expected

    def test_short_tokens_match_whole_words_only(self):
        # "ft" inside "swiftly" is not the Financial Times
        assert classify_source_type("Swiftly Weekly") == SourceType.UNKNOWN

    def test_empty(self):
        assert classify_source_type(None) == SourceType.UNKNOWN
        assert classify_source_type("") == SourceType.UNKNOWN


class TestRSSParsing:
    """Google News RSS items -> EvidenceSources."""

    def test_parses_items(self):
        sources = parse_rss_items(RSS_FEED, max_results=5)

        assert len(sources) == 2
        first = sources[0]
        assert first.title == "Fed cuts rates by a quarter point - Reuters"
        assert first.url == "https://news.google.com/rss/articles/CBMiAAA?oc=5"
        assert first.snippet == "Fed cuts rates by a quarter point (Reuters)"
        assert first.source_type == SourceType.WIRE_SERVICE
        assert first.source_name == "Reuters"
        assert first.published_date == "Wed, 18 Mar 2026 18:00:00 GMT"
        assert sources[1].source_type == SourceType.TRADE_PRESS

    def test_respects_max_results(self):
        assert len(parse_rss_items(RSS_FEED, max_results=1)) == 1

    def test_readable_text(self):
        html = '<a href="x">Headline</a>&nbsp;<font color="#6f6f6f">BBC</font>'
        assert readable_text(html) == "Headline (BBC)"
        assert readable_text("") == ""

    def test_search_builds_query_with_date_operators(self):
        http = make_mock_http({"news.google.com": text_response(RSS_FEED)})
        provider = GoogleNewsRSSProvider(http)

        sources = provider.search("fed rate cut", "2026-03-01", "2026-03-15", 3)

        assert len(sources) == 2
        params = http.get.call_args.kwargs["params"]
        assert params["q"] == "fed rate cut after:2026-03-01 before:2026-03-15"
        assert params["ceid"] == "US:en"

    def test_http_error_raises_provider_unavailable(self):
        http = make_mock_http({"news.google.com": text_response("busy", status_code=503)})
        with pytest.raises(ProviderUnavailable):
            GoogleNewsRSSProvider(http).search("q", "2026-03-01", "2026-03-15", 3)


class TestGNewsProvider:
    def test_disabled_without_key(self):
        http = Mock()
        provider = GNewsProvider(http, None)
        assert provider.enabled is False
        assert provider.search("q", "2026-03-01", "2026-03-15", 3) == []
        http.get.assert_not_called()

    def test_maps_articles(self):
        payload = {
            "articles": [
                {
                    "title": "ECB holds rates",
                    "url": "https://www.bbc.com/news/ecb",
                    "description": "The ECB kept rates unchanged.",
                    "publishedAt": "2026-03-12T10:00:00Z",
                    "source": {"name": "BBC News"},
                },
                {
                    "title": "Long read",
                    "url": "https://example.com/long",
                    "content": "x" * (SNIPPET_LIMIT + 100),
                    "source": {"name": "Example"},
                },
            ]
        }
        http = make_mock_http({"gnews.io": json_response(payload)})

        sources = GNewsProvider(http, "key").search("ecb rates", "2026-03-01", "2026-03-15", 5)

        params = http.get.call_args.kwargs["params"]
        assert params["from"] == "2026-03-01T00:00:00Z"
        assert params["to"] == "2026-03-15T23:59:59Z"
        assert sources[0].source_type == SourceType.MAINSTREAM_NEWS
        assert sources[0].published_date == "2026-03-12T10:00:00Z"
        assert len(sources[1].snippet) == SNIPPET_LIMIT

    def test_transport_error(self):
        http = make_mock_http({"gnews.io": HttpError("timeout")})
        with pytest.raises(ProviderUnavailable):
            GNewsProvider(http, "key").search("q", "2026-03-01", "2026-03-15", 3)
