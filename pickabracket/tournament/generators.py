"""Fixture generation for knockout brackets and round robin leagues."""

from __future__ import annotations

import math
from typing import Optional

from pickabracket.core.constants import (
    BYE,
    BYE_SCORE,
    MIN_PARTICIPANTS,
    STATUS_COMPLETED,
    STATUS_SCHEDULED,
)

from .models import Fixture, fixture_id
from .utils import RandomSource, SeededRandomSource


def new_fixture(
    tournament_id: str,
    round_number: int,
    match_number: int,
    player1: Optional[str],
    player2: Optional[str],
) -> Fixture:
    """Build a scheduled fixture between two slots."""
    return {
        "id": fixture_id(tournament_id, round_number, match_number),
        "tournamentId": tournament_id,
        "round": round_number,
        "match": match_number,
        "player1": player1,
        "player2": player2,
        "winner": None,
        "score": "",
        "status": STATUS_SCHEDULED,
    }


def new_bye_fixture(
    tournament_id: str, round_number: int, match_number: int, player: str
) -> Fixture:
    """Build a fixture already won by ``player`` on a bye."""
    fixture = new_fixture(tournament_id, round_number, match_number, player, BYE)
    fixture["winner"] = player
    fixture["score"] = BYE_SCORE
    fixture["status"] = STATUS_COMPLETED
    return fixture


def total_rounds(num_participants: int) -> int:
    """Number of knockout rounds needed for ``num_participants``."""
    return math.ceil(math.log2(num_participants))


def bracket_size(num_participants: int) -> int:
    """Smallest power of two that holds every participant."""
    return 2 ** total_rounds(num_participants)


def bye_count(num_participants: int) -> int:
    """Number of first-round byes in a knockout bracket."""
    return bracket_size(num_participants) - num_participants


class KnockoutBracketGenerator:
    """Builds the first round of a single elimination bracket."""

    def __init__(self, random_source: RandomSource | None = None) -> None:
        self.random_source = random_source or SeededRandomSource()

    def generate(self, tournament_id: str, participant_ids: list[str]) -> list[Fixture]:
        """Shuffle the roster and lay out round 1, byes first."""
        if len(participant_ids) < MIN_PARTICIPANTS:
            return []

        shuffled = self.random_source.uniform_shuffle(participant_ids)
        size = bracket_size(len(shuffled))
        byes = size - len(shuffled)

        fixtures: list[Fixture] = []
        position = 0
        for match_number in range(1, size // 2 + 1):
            if match_number <= byes:
                fixtures.append(
                    new_bye_fixture(tournament_id, 1, match_number, shuffled[position])
                )
                position += 1
            else:
                fixtures.append(
                    new_fixture(
                        tournament_id,
                        1,
                        match_number,
                        shuffled[position],
                        shuffled[position + 1],
                    )
                )
                position += 2
        return fixtures


class RoundRobinScheduler:
    """Builds a complete league schedule using the circle method."""

    @staticmethod
    def generate(tournament_id: str, participant_ids: list[str]) -> list[Fixture]:
        """Generate every round; pairings against the bye placeholder are dropped."""
        if len(participant_ids) < MIN_PARTICIPANTS:
            return []

        ids: list[str] = list(participant_ids)
        if len(ids) % 2 != 0:
            ids.append(BYE)

        num_participants = len(ids)
        num_rounds = num_participants - 1
        fixtures: list[Fixture] = []

        for round_number in range(1, num_rounds + 1):
            match_number = 0
            for i in range(num_participants // 2):
                p1 = ids[i]
                p2 = ids[num_participants - 1 - i]
                if p1 != BYE and p2 != BYE:
                    match_number += 1
                    fixtures.append(
                        new_fixture(tournament_id, round_number, match_number, p1, p2)
                    )
            # Keep the first element fixed, move the last one to position 1
            ids = [ids[0], ids[-1]] + ids[1:-1]

        return fixtures
