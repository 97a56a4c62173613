"""Service layer for tournament business logic."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Optional

from pickabracket.core.constants import (
    BYE,
    FORMAT_KNOCKOUT,
    FORMAT_LEAGUE,
    FORMATS,
    PHASE_ACTIVE,
    PHASE_COMPLETED,
    PHASE_SETUP,
    STATUS_COMPLETED,
    STATUS_SCHEDULED,
    UNKNOWN_CHAMPION,
)
from pickabracket.errors import NotFoundError, StateConsistencyError, ValidationError

from .advancement import AdvancementEngine, is_round_complete, latest_round
from .generators import KnockoutBracketGenerator, RoundRobinScheduler
from .models import Fixture, Participant, StandingRow, TournamentState
from .roster import RosterValidator
from .standings import StandingsCalculator
from .stores import (
    FirestoreFixtureStore,
    FirestoreParticipantStore,
    FirestoreTournamentStateStore,
    FixtureStore,
    ParticipantStore,
    TournamentStateStore,
)
from .utils import RandomSource, SeededRandomSource

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


class TournamentController:
    """Handles tournament orchestration against the participant, fixture and state stores.

    This is the only component that moves the tournament between phases.
    Every mutating call runs under one lock, so a reported result and any
    advancement it triggers are never interleaved with another mutation.
    """

    def __init__(
        self,
        tournament_id: str,
        participants: ParticipantStore,
        fixtures: FixtureStore,
        state: TournamentStateStore,
        random_source: RandomSource | None = None,
    ) -> None:
        self.tournament_id = tournament_id
        self.participant_store = participants
        self.fixture_store = fixtures
        self.state_store = state
        self.random_source = random_source or SeededRandomSource()
        self._lock = threading.RLock()

    @classmethod
    def for_firestore(
        cls,
        db: Client,
        tournament_id: str,
        seed: Optional[int] = None,
        random_source: RandomSource | None = None,
    ) -> TournamentController:
        """Build a controller backed by Firestore collections."""
        return cls(
            tournament_id,
            FirestoreParticipantStore(db, tournament_id),
            FirestoreFixtureStore(db, tournament_id),
            FirestoreTournamentStateStore(db, tournament_id),
            random_source or SeededRandomSource(seed),
        )

    # ------------------------------------------------------------------
    # Setup phase
    # ------------------------------------------------------------------

    def _require_phase(self, state: TournamentState, phase: str, message: str) -> None:
        if state["phase"] != phase:
            raise ValidationError(message)

    def register_participant(self, name: str) -> Participant:
        """Add a participant to the roster."""
        with self._lock:
            state = self.state_store.get()
            self._require_phase(
                state, PHASE_SETUP, "Participants can only be added during setup."
            )
            participant = self.participant_store.create(name)
            logging.info(f"Registered participant {participant['name']} ({participant['id']})")
            return participant

    def remove_participant(self, participant_id: str) -> None:
        """Remove a participant from the roster."""
        with self._lock:
            state = self.state_store.get()
            self._require_phase(
                state, PHASE_SETUP, "Participants can only be removed during setup."
            )
            self.participant_store.remove(participant_id)
            logging.info(f"Removed participant {participant_id}")

    def set_format(self, tournament_format: str) -> TournamentState:
        """Choose knockout or league play."""
        if tournament_format not in FORMATS:
            raise ValidationError(
                f"Unknown format '{tournament_format}'. Choose one of: {', '.join(FORMATS)}."
            )
        with self._lock:
            state = self.state_store.get()
            self._require_phase(
                state, PHASE_SETUP, "The format can only be changed during setup."
            )
            state["format"] = tournament_format
            self.state_store.set(state)
            return state

    def start_tournament(self) -> list[Fixture]:
        """Validate the roster, generate the opening fixtures and go active."""
        with self._lock:
            state = self.state_store.get()
            self._require_phase(state, PHASE_SETUP, "The tournament has already started.")

            participants = self.participant_store.list()
            RosterValidator.check_can_schedule(participants)
            participant_ids = [p["id"] for p in participants]

            if state["format"] == FORMAT_LEAGUE:
                fixtures = RoundRobinScheduler.generate(self.tournament_id, participant_ids)
            else:
                generator = KnockoutBracketGenerator(self.random_source)
                fixtures = generator.generate(self.tournament_id, participant_ids)

            self.fixture_store.create_batch(fixtures)
            state["phase"] = PHASE_ACTIVE
            state["champion"] = None
            self.state_store.set(state)
            logging.info(
                f"Tournament {self.tournament_id} started: {state['format']}, "
                f"{len(participants)} participants, {len(fixtures)} fixtures"
            )

            if state["format"] == FORMAT_KNOCKOUT and is_round_complete(fixtures, 1):
                self._advance_knockout(state, fixtures, participants, 1)
            return fixtures

    # ------------------------------------------------------------------
    # Active phase
    # ------------------------------------------------------------------

    def report_result(self, fixture_id: str, winner_id: str, score: str) -> Fixture:
        """Record a fixture's result and progress the tournament if it can."""
        score = (score or "").strip()
        if not score:
            raise ValidationError("Score cannot be empty.")
        if not winner_id:
            raise ValidationError("A winner must be selected.")

        with self._lock:
            state = self.state_store.get()
            self._require_phase(state, PHASE_ACTIVE, "The tournament is not in progress.")

            fixtures = self.fixture_store.list()
            fixture = next((f for f in fixtures if f["id"] == fixture_id), None)
            if fixture is None:
                raise NotFoundError(f"Fixture {fixture_id} not found.")
            if fixture.get("status") != STATUS_SCHEDULED:
                raise StateConsistencyError(
                    f"Fixture {fixture_id} is not awaiting a result."
                )

            slots = [fixture.get("player1"), fixture.get("player2")]
            if winner_id not in slots or winner_id in (BYE, None):
                raise ValidationError("The winner must be one of the fixture's players.")
            loser_id = slots[1] if slots[0] == winner_id else slots[0]

            participants = self.participant_store.list()
            by_id = {p["id"]: p for p in participants}
            for pid in (winner_id, loser_id):
                if pid not in by_id:
                    raise NotFoundError(f"Participant {pid} not found.")

            winner = by_id[winner_id]
            loser = by_id[loser_id]
            counters = {
                winner_id: (winner.get("wins", 0) + 1, winner.get("losses", 0)),
                loser_id: (loser.get("wins", 0), loser.get("losses", 0) + 1),
            }
            self.fixture_store.record_result(fixture_id, winner_id, score, counters)

            fixture.update({"winner": winner_id, "score": score, "status": STATUS_COMPLETED})
            winner["wins"], winner["losses"] = counters[winner_id]
            loser["wins"], loser["losses"] = counters[loser_id]
            logging.info(f"Fixture {fixture_id}: {winner['name']} beat {loser['name']} ({score})")

            if state["format"] == FORMAT_KNOCKOUT:
                if is_round_complete(fixtures, fixture["round"]):
                    self._advance_knockout(state, fixtures, participants, fixture["round"])
            elif StandingsCalculator.is_league_complete(fixtures):
                self._complete(state, StandingsCalculator.champion_name(participants))

            return fixture

    def _advance_knockout(
        self,
        state: TournamentState,
        fixtures: list[Fixture],
        participants: list[Participant],
        round_number: int,
    ) -> None:
        outcome = AdvancementEngine.advance(self.tournament_id, fixtures, round_number)
        if outcome.fixtures:
            self.fixture_store.create_batch(outcome.fixtures)
            logging.info(
                f"Round {round_number} complete: created {len(outcome.fixtures)} fixtures"
            )
        if outcome.has_champion:
            names = {p["id"]: p.get("name") for p in participants}
            self._complete(state, names.get(outcome.champion_id) or UNKNOWN_CHAMPION)

    def _complete(self, state: TournamentState, champion: str) -> None:
        state["phase"] = PHASE_COMPLETED
        state["champion"] = champion
        self.state_store.set(state)
        logging.info(f"Tournament {self.tournament_id} completed, champion: {champion}")

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset_tournament(self) -> TournamentState:
        """Clear fixtures and records and return to setup, keeping the format."""
        with self._lock:
            state = self.state_store.get()
            if state["phase"] == PHASE_ACTIVE:
                raise ValidationError(
                    "A tournament in progress cannot be reset until it is completed."
                )
            self.fixture_store.delete_all()
            for p in self.participant_store.list():
                if p.get("wins", 0) or p.get("losses", 0):
                    self.participant_store.update_counters(p["id"], 0, 0)
            state["phase"] = PHASE_SETUP
            state["champion"] = None
            self.state_store.set(state)
            logging.info(f"Tournament {self.tournament_id} reset")
            return state

    # ------------------------------------------------------------------
    # Read-only projections
    # ------------------------------------------------------------------

    def participants(self) -> list[Participant]:
        """The roster in registration order."""
        return self.participant_store.list()

    def current_fixtures(self) -> list[Fixture]:
        """All fixtures ordered by round and match, with player names resolved."""
        names = {p["id"]: p.get("name", "") for p in self.participant_store.list()}

        def display(slot: Any) -> str:
            if slot == BYE:
                return BYE
            if slot is None:
                return "TBD"
            return names.get(slot, "Unknown Player")

        fixtures = self.fixture_store.list()
        for f in fixtures:
            f["player1_name"] = display(f.get("player1"))
            f["player2_name"] = display(f.get("player2"))
            f["winner_name"] = display(f["winner"]) if f.get("winner") else None
        return fixtures

    def standings(self) -> list[StandingRow]:
        """Participants ranked by wins."""
        return StandingsCalculator.rank(self.participant_store.list())

    def tournament_status(self) -> dict[str, Any]:
        """Phase, format, champion and progress counters."""
        state = self.state_store.get()
        fixtures = self.fixture_store.list()
        completed = sum(1 for f in fixtures if f.get("status") == STATUS_COMPLETED)
        return {
            "phase": state["phase"],
            "format": state["format"],
            "champion": state.get("champion"),
            "participant_count": len(self.participant_store.list()),
            "current_round": latest_round(fixtures),
            "fixtures_completed": completed,
            "fixtures_scheduled": len(fixtures) - completed,
        }
