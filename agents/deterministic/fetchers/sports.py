"""
Sports result fetcher (ESPN public scoreboard).

Finds the game between two teams on a date and reports the final score
and winner. Team names are matched loosely in both directions.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from core.http import HttpClient
from core.schemas import DeterministicSpec, FetchResult

from .base import Clock, fail, get_json, guarded_fetch

ESPN_BASE_URL = "https://site.api.espn.com/apis/site/v2/sports"

SPORT_MAP: dict[str, tuple[str, str]] = {
    "nba": ("basketball", "nba"),
    "basketball": ("basketball", "nba"),
    "nfl": ("football", "nfl"),
    "mlb": ("baseball", "mlb"),
    "baseball": ("baseball", "mlb"),
    "nhl": ("hockey", "nhl"),
    "hockey": ("hockey", "nhl"),
    "epl": ("soccer", "eng.1"),
    "premier league": ("soccer", "eng.1"),
    "la liga": ("soccer", "esp.1"),
    "serie a": ("soccer", "ita.1"),
    "bundesliga": ("soccer", "ger.1"),
    "mls": ("soccer", "usa.1"),
}
DEFAULT_LEAGUE = ("basketball", "nba")

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_team(name: str) -> str:
    return _NON_ALNUM.sub("", name.lower())


def teams_match(candidate: str, query: str) -> bool:
    """Case/punctuation-insensitive containment, either direction."""
    a, b = normalize_team(candidate), normalize_team(query)
    if not a or not b:
        return False
    return a in b or b in a


def resolve_league(spec: DeterministicSpec) -> tuple[str, str]:
    for key in ("competition", "league", "sport"):
        value = spec.get(key)
        if value and str(value).strip().lower() in SPORT_MAP:
            return SPORT_MAP[str(value).strip().lower()]
    return DEFAULT_LEAGUE


def _score(competitor: dict[str, Any]) -> int:
    try:
        return int(competitor.get("score") or 0)
    except (TypeError, ValueError):
        return 0


def _team_name(competitor: dict[str, Any]) -> str:
    team = competitor.get("team") or {}
    return team.get("displayName") or team.get("name") or ""


class SportsResultFetcher:
    """Serves SPORTS_RESULT."""

    provider_name = "espn"

    def __init__(self, http: HttpClient, clock: Clock, *, base_url: str = ESPN_BASE_URL) -> None:
        self._http = http
        self._clock = clock
        self._base_url = base_url

    def fetch(self, spec: DeterministicSpec) -> FetchResult:
        return guarded_fetch(self.provider_name, self._clock, lambda: self._fetch(spec))

    def _fetch(self, spec: DeterministicSpec) -> dict[str, Any]:
        team_a = str(spec.get("team_a", ""))
        team_b = str(spec.get("team_b", ""))
        event_date = str(spec.get("event_date", ""))
        date_param = event_date.replace("-", "")[:8]
        sport, league = resolve_league(spec)

        payload = get_json(
            self._http,
            f"{self._base_url}/{sport}/{league}/scoreboard",
            self.provider_name,
            params={"dates": date_param},
        )
        events = payload.get("events") or [] if isinstance(payload, dict) else []

        game = self._find_game(events, team_a, team_b)
        if game is None:
            raise fail(
                f"No matching game found for {team_a} vs {team_b} on {date_param}",
                self.provider_name,
                events_on_date=len(events),
                searched_teams=[team_a, team_b],
                date_searched=date_param,
            )
        game["league"] = f"{sport}/{league}"
        return game

    def _find_game(self, events: list[dict[str, Any]], team_a: str, team_b: str) -> Optional[dict[str, Any]]:
        for event in events:
            competitions = event.get("competitions") or [{}]
            competitors = competitions[0].get("competitors") or []
            home = next((c for c in competitors if c.get("homeAway") == "home"), None)
            away = next((c for c in competitors if c.get("homeAway") == "away"), None)
            if home is None or away is None:
                continue

            home_name, away_name = _team_name(home), _team_name(away)
            matches_a = teams_match(home_name, team_a) or teams_match(away_name, team_a)
            matches_b = teams_match(home_name, team_b) or teams_match(away_name, team_b)
            if not (matches_a and matches_b):
                continue

            home_score, away_score = _score(home), _score(away)
            if home_score > away_score:
                winner = home_name
            elif away_score > home_score:
                winner = away_name
            else:
                winner = "DRAW"

            status = (event.get("status") or {}).get("type") or {}
            return {
                "event_id": event.get("id"),
                "event_name": event.get("name"),
                "status": status.get("name"),
                "status_detail": status.get("description"),
                "completed": bool(status.get("completed", False)),
                "period": (event.get("status") or {}).get("period"),
                "home_team": home_name,
                "away_team": away_name,
                "home_score": home_score,
                "away_score": away_score,
                "winner": winner,
            }
        return None
