"""
Prompts for the deterministic track.

PARSER_PROMPT turns a data-resolvable market into strategy parameters.
RESOLUTION_PROMPT is only used when code cannot compare the fetched
value itself; its reply still passes through the resolution guards.
"""

PARSER_PROMPT = """You receive a market that was classified DATA_RESOLVABLE.
Extract machine-readable parameters so it can be resolved automatically from one data source.

First re-check the classification. If the market is not actually resolvable by a single
structured data query, return "classification": "REJECTED" with a reason.

Rules: never guess values, never invent data sources, never assume timezones.
Extract only what is stated or logically implied.

## Strategy types (choose exactly one)
CRYPTO_PRICE_SPOT, CRYPTO_PRICE_TWAP, STOCK_CLOSE_PRICE, ONCHAIN_QUERY,
SPORTS_RESULT, WEATHER_API, ECONOMIC_DATA

## Fields per strategy (? = optional)
CRYPTO_PRICE_SPOT / CRYPTO_PRICE_TWAP:
  asset, pair ("BTC/USD"), comparator, threshold, resolution_time (ISO 8601),
  aggregation_method?, window? ("1h", "4h", "24h"), currency?
STOCK_CLOSE_PRICE:
  ticker, comparator, threshold, exchange?, resolution_date (YYYY-MM-DD)
ONCHAIN_QUERY:
  chain, contract_address?, address?, metric, comparator, threshold, resolution_time?
SPORTS_RESULT:
  sport, team_a, team_b, competition, event_date (YYYY-MM-DD),
  outcome_type ("win" | "draw" | "total_points"), target_team?, comparator?, threshold?
WEATHER_API:
  location, metric ("max_temperature" | "min_temperature" | "avg_temperature" | "precipitation"),
  unit, comparator, threshold, date (YYYY-MM-DD)
ECONOMIC_DATA:
  indicator, source_agency, comparator, threshold, release_date?, resolution_date?

Comparators: ">", ">=", "<", "<=", "=". Thresholds are plain numbers.

## Output
Return valid JSON only, no markdown.

If parsable:
{
  "marketId": "...",
  "strategy_type": "...",
  "parsed_spec": { ... },
  "resolution_ready": true
}

If not:
{
  "marketId": "...",
  "classification": "REJECTED",
  "reason": "...",
  "resolution_ready": false
}
"""

RESOLUTION_PROMPT = """You receive a prediction market, its parsed specification and raw data
fetched from an external API. Map the data onto the resolution criteria and return the outcome.
This settles real money.

## Rules
1. Apply the resolution criteria exactly as written. Equal to a "above" threshold is NOT above.
2. Comparators: ">" strictly greater, ">=" greater or equal, "<" strictly less,
   "<=" less or equal, "=" equal within floating point tolerance.
3. Check units. Convert Fahrenheit/Celsius when needed. Flag currency mismatches.
4. API error, null data, cancelled or postponed event, data not yet available,
   game in progress: outcome UNDETERMINED.
5. Sports: overtime counts unless the criteria excludes it. Final scores only.
6. Never guess. If the data does not clearly resolve the market, return UNDETERMINED.

## Output
Return valid JSON only, no markdown:

{
  "outcome": "YES" | "NO" | "UNDETERMINED",
  "confidence": 0.0,
  "reasoning": "1-3 sentences",
  "data_summary": {
    "fetched_value": "...",
    "threshold": "...",
    "comparator": "...",
    "comparison_result": "e.g. 98500 < 100000, so NO"
  },
  "flags": []
}
"""
