"""Roster precondition checks."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pickabracket.core.constants import MAX_NAME_LENGTH, MIN_PARTICIPANTS
from pickabracket.errors import DuplicateResourceError, ValidationError


class RosterValidator:
    """Validates the participant set before registration and scheduling."""

    @staticmethod
    def check_registration(participants: Iterable[dict[str, Any]], name: str | None) -> str:
        """Return the trimmed name, or raise if it is empty, too long or taken."""
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Participant name cannot be empty.")
        if len(cleaned) > MAX_NAME_LENGTH:
            raise ValidationError(
                f"Participant name must be at most {MAX_NAME_LENGTH} characters."
            )

        lowered = cleaned.casefold()
        for p in participants:
            existing = (p.get("name") or "").strip()
            if existing.casefold() == lowered:
                raise DuplicateResourceError(
                    f"A participant named '{existing}' is already registered."
                )
        return cleaned

    @staticmethod
    def check_can_schedule(participants: list[dict[str, Any]]) -> None:
        """Raise if there are too few participants to start a tournament."""
        if len(participants) < MIN_PARTICIPANTS:
            raise ValidationError(
                f"At least {MIN_PARTICIPANTS} participants are required to start."
            )
