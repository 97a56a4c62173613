"""Tests for knockout advancement."""

from __future__ import annotations

import math
import unittest

from pickabracket.core.constants import BYE, STATUS_COMPLETED, STATUS_SCHEDULED
from pickabracket.errors import StateConsistencyError
from pickabracket.tournament.advancement import (
    AdvancementEngine,
    is_round_complete,
    latest_round,
)
from pickabracket.tournament.generators import (
    KnockoutBracketGenerator,
    new_bye_fixture,
    new_fixture,
)

from tests.mock_utils import IdentityRandomSource

TOURNAMENT_ID = "t1"


def complete(fixture, winner=None):
    """Mark a fixture completed, by default won by player 1."""
    fixture["winner"] = winner or fixture["player1"]
    fixture["score"] = "11-7"
    fixture["status"] = STATUS_COMPLETED
    return fixture


class AdvancementEngineTestCase(unittest.TestCase):
    """Test case for AdvancementEngine."""

    def test_incomplete_round_cannot_advance(self) -> None:
        """Advancing a round with a pending fixture is a consistency error."""
        fixtures = [
            complete(new_fixture(TOURNAMENT_ID, 1, 1, "a", "b")),
            new_fixture(TOURNAMENT_ID, 1, 2, "c", "d"),
        ]
        with self.assertRaises(StateConsistencyError):
            AdvancementEngine.advance(TOURNAMENT_ID, fixtures, 1)

    def test_missing_round_cannot_advance(self) -> None:
        """A round with no fixtures is never complete."""
        with self.assertRaises(StateConsistencyError):
            AdvancementEngine.advance(TOURNAMENT_ID, [], 1)

    def test_winners_paired_in_match_order(self) -> None:
        """Winner of match 1 meets winner of match 2, and so on."""
        fixtures = [
            complete(new_fixture(TOURNAMENT_ID, 1, 3, "e", "f"), "f"),
            complete(new_fixture(TOURNAMENT_ID, 1, 1, "a", "b"), "b"),
            complete(new_fixture(TOURNAMENT_ID, 1, 4, "g", "h")),
            complete(new_fixture(TOURNAMENT_ID, 1, 2, "c", "d")),
        ]
        outcome = AdvancementEngine.advance(TOURNAMENT_ID, fixtures, 1)

        self.assertIsNone(outcome.champion_id)
        self.assertEqual(len(outcome.fixtures), 2)
        self.assertEqual(
            [(f["round"], f["match"], f["player1"], f["player2"]) for f in outcome.fixtures],
            [(2, 1, "b", "c"), (2, 2, "f", "g")],
        )
        self.assertTrue(all(f["status"] == STATUS_SCHEDULED for f in outcome.fixtures))
        self.assertEqual(outcome.fixtures[0]["id"], "t1-r2-m1")

    def test_single_winner_is_champion(self) -> None:
        """A completed round with one fixture yields the champion."""
        fixtures = [complete(new_fixture(TOURNAMENT_ID, 3, 1, "a", "b"), "b")]
        outcome = AdvancementEngine.advance(TOURNAMENT_ID, fixtures, 3)

        self.assertTrue(outcome.has_champion)
        self.assertEqual(outcome.champion_id, "b")
        self.assertEqual(outcome.fixtures, [])

    def test_odd_winner_gets_bye(self) -> None:
        """With an odd number of winners the last one advances on a bye."""
        fixtures = [
            complete(new_fixture(TOURNAMENT_ID, 1, i, f"x{i}", f"y{i}"))
            for i in range(1, 4)
        ]
        outcome = AdvancementEngine.advance(TOURNAMENT_ID, fixtures, 1)

        self.assertEqual(len(outcome.fixtures), 2)
        real, bye = outcome.fixtures
        self.assertEqual((real["player1"], real["player2"]), ("x1", "x2"))
        self.assertEqual(real["status"], STATUS_SCHEDULED)
        self.assertEqual((bye["player1"], bye["player2"]), ("x3", BYE))
        self.assertEqual(bye["winner"], "x3")
        self.assertEqual(bye["status"], STATUS_COMPLETED)

    def test_next_round_has_half_the_fixtures(self) -> None:
        """W winners produce ceil(W/2) fixtures, or a champion when W is 1."""
        for w in range(1, 20):
            fixtures = [
                complete(new_fixture(TOURNAMENT_ID, 1, i, f"x{i}", f"y{i}"))
                for i in range(1, w + 1)
            ]
            outcome = AdvancementEngine.advance(TOURNAMENT_ID, fixtures, 1)
            if w == 1:
                self.assertEqual(outcome.champion_id, "x1")
            else:
                self.assertIsNone(outcome.champion_id)
                self.assertEqual(len(outcome.fixtures), math.ceil(w / 2))

    def test_bye_only_round_cascades(self) -> None:
        """A round decided only by byes advances without another call."""
        fixtures = [new_bye_fixture(TOURNAMENT_ID, 1, 1, "solo")]
        fixtures.append(complete(new_fixture(TOURNAMENT_ID, 1, 2, "a", "b")))
        fixtures.append(new_bye_fixture(TOURNAMENT_ID, 1, 3, "c"))
        outcome = AdvancementEngine.advance(TOURNAMENT_ID, fixtures, 1)

        # 3 winners: round 2 has one real fixture and one bye, then stops.
        self.assertEqual([f["round"] for f in outcome.fixtures], [2, 2])
        self.assertIsNone(outcome.champion_id)

        # A lone bye winner in round 2 goes straight to champion.
        lone = [new_bye_fixture(TOURNAMENT_ID, 2, 1, "z")]
        self.assertEqual(AdvancementEngine.advance(TOURNAMENT_ID, lone, 2).champion_id, "z")

    def test_full_bracket_terminates(self) -> None:
        """Playing out any bracket reaches one champion within k rounds."""
        for n in range(2, 40):
            players = [f"p{i}" for i in range(n)]
            fixtures = KnockoutBracketGenerator(IdentityRandomSource()).generate(
                TOURNAMENT_ID, players
            )
            k = math.ceil(math.log2(n))
            current = 1
            champion = None
            while champion is None:
                for f in fixtures:
                    if f["round"] == current and f["status"] == STATUS_SCHEDULED:
                        complete(f)
                outcome = AdvancementEngine.advance(TOURNAMENT_ID, fixtures, current)
                fixtures.extend(outcome.fixtures)
                champion = outcome.champion_id
                current = latest_round(fixtures)
                self.assertLessEqual(current, k)
            self.assertIn(champion, players)
            self.assertTrue(is_round_complete(fixtures, current))


if __name__ == "__main__":
    unittest.main()
