"""Knockout bracket advancement."""

from __future__ import annotations

from collections.abc import Iterable

from pickabracket.core.constants import STATUS_COMPLETED
from pickabracket.errors import StateConsistencyError

from .generators import new_bye_fixture, new_fixture
from .models import AdvancementOutcome, Fixture


def fixtures_in_round(fixtures: Iterable[Fixture], round_number: int) -> list[Fixture]:
    """Return the fixtures of one round ordered by match number."""
    return sorted(
        (f for f in fixtures if f.get("round") == round_number),
        key=lambda f: f.get("match", 0),
    )


def latest_round(fixtures: Iterable[Fixture]) -> int:
    """Highest round number present, or 0 for an empty bracket."""
    return max((f.get("round", 0) for f in fixtures), default=0)


def is_round_complete(fixtures: Iterable[Fixture], round_number: int) -> bool:
    """True if the round exists and every one of its fixtures is completed."""
    round_fixtures = fixtures_in_round(fixtures, round_number)
    return bool(round_fixtures) and all(
        f.get("status") == STATUS_COMPLETED for f in round_fixtures
    )


class AdvancementEngine:
    """Derives the next knockout round from a completed one.

    Winners are paired in match-number order: the winner of match 1 meets the
    winner of match 2, match 3 meets match 4, and so on. An odd winner out is
    given a bye. Rounds decided entirely by byes are advanced straight away,
    so one call may create several rounds.
    """

    @staticmethod
    def advance(
        tournament_id: str, fixtures: list[Fixture], round_number: int
    ) -> AdvancementOutcome:
        """Advance past ``round_number``, which must be fully completed."""
        if not is_round_complete(fixtures, round_number):
            raise StateConsistencyError(
                f"Round {round_number} cannot advance before all of its fixtures are completed."
            )

        outcome = AdvancementOutcome()
        known = list(fixtures)
        current = round_number

        while True:
            winners = [f["winner"] for f in fixtures_in_round(known, current)]
            if len(winners) == 1:
                outcome.champion_id = winners[0]
                return outcome

            next_round = current + 1
            created: list[Fixture] = []
            for index in range(0, len(winners) - 1, 2):
                created.append(
                    new_fixture(
                        tournament_id,
                        next_round,
                        len(created) + 1,
                        winners[index],
                        winners[index + 1],
                    )
                )
            if len(winners) % 2 == 1:
                created.append(
                    new_bye_fixture(
                        tournament_id, next_round, len(created) + 1, winners[-1]
                    )
                )

            outcome.fixtures.extend(created)
            known.extend(created)

            if not is_round_complete(created, next_round):
                return outcome
            current = next_round
