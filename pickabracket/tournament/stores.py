"""Store interfaces used by the tournament controller, with Firestore adapters."""

from __future__ import annotations

import datetime
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Protocol

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPICallError

from pickabracket.core.constants import (
    FIRESTORE_BATCH_LIMIT,
    FIXTURES_COLLECTION,
    FORMAT_KNOCKOUT,
    PARTICIPANTS_COLLECTION,
    PHASE_SETUP,
    STATUS_COMPLETED,
    TOURNAMENTS_COLLECTION,
)
from pickabracket.errors import NotFoundError, StoreError

from .models import Fixture, Participant, TournamentState
from .roster import RosterValidator

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.collection import CollectionReference


class ParticipantStore(Protocol):
    def list(self) -> list[Participant]: ...

    def create(self, name: str) -> Participant: ...

    def remove(self, participant_id: str) -> None: ...

    def update_counters(self, participant_id: str, wins: int, losses: int) -> None: ...


class FixtureStore(Protocol):
    def list(self) -> list[Fixture]: ...

    def create_batch(self, fixtures: list[Fixture]) -> None: ...

    def record_result(
        self,
        fixture_id: str,
        winner_id: str,
        score: str,
        counters: dict[str, tuple[int, int]],
    ) -> None: ...

    def delete_all(self) -> None: ...


class TournamentStateStore(Protocol):
    def get(self) -> TournamentState: ...

    def set(self, state: TournamentState) -> None: ...


def default_state() -> TournamentState:
    """State assumed when nothing has been stored yet."""
    return {"phase": PHASE_SETUP, "format": FORMAT_KNOCKOUT, "champion": None}


@contextmanager
def wrap_store_errors(action: str) -> Iterator[None]:
    """Re-raise Google API failures as StoreError, keeping the cause."""
    try:
        yield
    except GoogleAPICallError as e:
        raise StoreError(f"Failed to {action}.") from e


def _chunks(items: list[Any], size: int = FIRESTORE_BATCH_LIMIT) -> Iterator[list[Any]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


class _FirestoreStore:
    """Shared plumbing for stores scoped to one tournament."""

    collection_name: str = ""

    def __init__(self, db: Client, tournament_id: str) -> None:
        self.db = db
        self.tournament_id = tournament_id

    def _collection(self) -> CollectionReference:
        return self.db.collection(self.collection_name)

    def _stream(self) -> list[dict[str, Any]]:
        """Fetch every document belonging to this tournament."""
        query = self._collection().where(
            filter=firestore.FieldFilter("tournamentId", "==", self.tournament_id)
        )
        results = []
        for doc in query.stream():
            data = doc.to_dict()
            if data:
                data["id"] = doc.id
                results.append(data)
        return results


class FirestoreParticipantStore(_FirestoreStore):
    """Participants live in a top-level collection tagged with tournamentId."""

    collection_name = PARTICIPANTS_COLLECTION

    def list(self) -> list[Participant]:
        with wrap_store_errors("load participants"):
            participants = self._stream()
        participants.sort(key=lambda p: p.get("seq", 0))
        return participants  # type: ignore[return-value]

    def create(self, name: str) -> Participant:
        existing = self.list()
        cleaned = RosterValidator.check_registration(existing, name)
        payload = {
            "name": cleaned,
            "wins": 0,
            "losses": 0,
            "seq": max((p.get("seq", 0) for p in existing), default=0) + 1,
            "tournamentId": self.tournament_id,
            "created_at": datetime.datetime.now(datetime.timezone.utc),
        }
        with wrap_store_errors("register participant"):
            ref = self._collection().document()
            ref.set(payload)
        return {**payload, "id": ref.id}  # type: ignore[typeddict-item]

    def remove(self, participant_id: str) -> None:
        with wrap_store_errors("remove participant"):
            ref = self._collection().document(participant_id)
            doc = ref.get()
            data = doc.to_dict() if doc.exists else None
            if not data or data.get("tournamentId") != self.tournament_id:
                raise NotFoundError(f"Participant {participant_id} not found.")
            ref.delete()

    def update_counters(self, participant_id: str, wins: int, losses: int) -> None:
        with wrap_store_errors("update participant record"):
            self._collection().document(participant_id).update(
                {"wins": wins, "losses": losses}
            )


class FirestoreFixtureStore(_FirestoreStore):
    """Fixtures live in a top-level collection under deterministic ids."""

    collection_name = FIXTURES_COLLECTION

    def list(self) -> list[Fixture]:
        with wrap_store_errors("load fixtures"):
            fixtures = self._stream()
        fixtures.sort(key=lambda f: (f.get("round", 0), f.get("match", 0)))
        return fixtures  # type: ignore[return-value]

    def create_batch(self, fixtures: list[Fixture]) -> None:
        with wrap_store_errors("save fixtures"):
            for chunk in _chunks(fixtures):
                batch = self.db.batch()
                for fixture in chunk:
                    payload = {k: v for k, v in fixture.items() if k != "id"}
                    payload["tournamentId"] = self.tournament_id
                    batch.set(self._collection().document(fixture["id"]), payload)
                batch.commit()

    def record_result(
        self,
        fixture_id: str,
        winner_id: str,
        score: str,
        counters: dict[str, tuple[int, int]],
    ) -> None:
        """Complete a fixture and write the players' (wins, losses) in one batch."""
        participants = self.db.collection(PARTICIPANTS_COLLECTION)
        with wrap_store_errors("record result"):
            batch = self.db.batch()
            batch.update(
                self._collection().document(fixture_id),
                {"winner": winner_id, "score": score, "status": STATUS_COMPLETED},
            )
            for participant_id, (wins, losses) in counters.items():
                batch.update(
                    participants.document(participant_id),
                    {"wins": wins, "losses": losses},
                )
            batch.commit()

    def delete_all(self) -> None:
        with wrap_store_errors("clear fixtures"):
            ids = [f["id"] for f in self._stream()]
            for chunk in _chunks(ids):
                batch = self.db.batch()
                for doc_id in chunk:
                    batch.delete(self._collection().document(doc_id))
                batch.commit()


class FirestoreTournamentStateStore:
    """The state is a single document in the tournaments collection."""

    def __init__(self, db: Client, tournament_id: str) -> None:
        self.db = db
        self.tournament_id = tournament_id

    def _ref(self) -> Any:
        return self.db.collection(TOURNAMENTS_COLLECTION).document(self.tournament_id)

    def get(self) -> TournamentState:
        with wrap_store_errors("load tournament state"):
            doc = self._ref().get()
            data = doc.to_dict() if doc.exists else None
        state = default_state()
        if data:
            state.update({k: data[k] for k in ("phase", "format", "champion") if k in data})
        return state

    def set(self, state: TournamentState) -> None:
        with wrap_store_errors("save tournament state"):
            self._ref().set(
                {
                    "phase": state["phase"],
                    "format": state["format"],
                    "champion": state.get("champion"),
                    "updated_at": datetime.datetime.now(datetime.timezone.utc),
                }
            )
