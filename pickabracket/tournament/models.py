"""Data models for the tournament blueprint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, TypedDict

from pickabracket.core.constants import BYE
from pickabracket.core.types import FirestoreDocument


class Participant(FirestoreDocument, total=False):
    """A registered participant document in Firestore."""

    name: str
    wins: int
    losses: int
    seq: int
    tournamentId: str


class Fixture(TypedDict, total=False):
    """A scheduled or completed contest.

    ``player1``/``player2`` hold a participant id, ``None`` while unassigned,
    or the ``BYE`` marker.
    """

    id: str
    round: int
    match: int
    player1: Optional[str]
    player2: Optional[str]
    winner: Optional[str]
    score: str
    status: str
    tournamentId: str

    # UI and calculated fields
    player1_name: str
    player2_name: str
    winner_name: Optional[str]


class TournamentState(TypedDict, total=False):
    """The tournament-level state document."""

    phase: str
    format: str
    champion: Optional[str]


class StandingRow(TypedDict):
    """A single row of the standings table."""

    rank: int
    id: str
    name: str
    wins: int
    losses: int


@dataclass
class AdvancementOutcome:
    """Result of advancing a knockout bracket past a completed round."""

    fixtures: list[Fixture] = field(default_factory=list)
    champion_id: Optional[str] = None

    @property
    def has_champion(self) -> bool:
        return self.champion_id is not None


def fixture_id(tournament_id: str, round_number: int, match_number: int) -> str:
    """Return the deterministic document id for a fixture."""
    return f"{tournament_id}-r{round_number}-m{match_number}"


def is_bye_fixture(fixture: Fixture | dict[str, Any]) -> bool:
    """Return True if either slot of the fixture is the bye marker."""
    return fixture.get("player1") == BYE or fixture.get("player2") == BYE
