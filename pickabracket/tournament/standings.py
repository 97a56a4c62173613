"""Standings and league completion."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pickabracket.core.constants import STATUS_COMPLETED, UNKNOWN_CHAMPION

from .models import Fixture, StandingRow, is_bye_fixture


class StandingsCalculator:
    """Ranks participants by their win/loss record."""

    @staticmethod
    def rank(participants: Iterable[dict[str, Any]]) -> list[StandingRow]:
        """Rank by wins (desc). Ties keep the order the roster was given in."""
        # sorted() is stable; there is no secondary key on purpose.
        ordered = sorted(participants, key=lambda p: p.get("wins", 0), reverse=True)
        return [
            {
                "rank": position,
                "id": p["id"],
                "name": p.get("name", ""),
                "wins": p.get("wins", 0),
                "losses": p.get("losses", 0),
            }
            for position, p in enumerate(ordered, start=1)
        ]

    @staticmethod
    def is_league_complete(fixtures: list[Fixture]) -> bool:
        """True once every real fixture has a result."""
        if not fixtures:
            return False
        return all(
            f.get("status") == STATUS_COMPLETED or is_bye_fixture(f) for f in fixtures
        )

    @staticmethod
    def champion_name(participants: Iterable[dict[str, Any]]) -> str:
        """Name of the top-ranked participant, or "Unknown" for an empty roster."""
        table = StandingsCalculator.rank(participants)
        if not table:
            return UNKNOWN_CHAMPION
        return table[0]["name"]
