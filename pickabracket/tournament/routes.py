"""Routes for the tournament blueprint.

A JSON API over :class:`TournamentController`. Errors raised by the
controller are turned into responses by ``pickabracket.error_handlers``.
"""

from __future__ import annotations

import threading
from typing import Any

from firebase_admin import firestore
from flask import current_app, jsonify

from pickabracket.core.types import api_response
from pickabracket.errors import ValidationError

from . import bp
from .forms import FormatForm, ParticipantForm, ResultForm, first_error
from .services import TournamentController

_controller_lock = threading.Lock()


def get_controller() -> TournamentController:
    """Return the app's controller, creating it on first use.

    One controller per app keeps every mutation behind the same lock.
    """
    controller = current_app.extensions.get("tournament_controller")
    if controller is not None:
        return controller

    with _controller_lock:
        controller = current_app.extensions.get("tournament_controller")
        if controller is None:
            db = firestore.client()
            controller = TournamentController.for_firestore(
                db,
                current_app.config["TOURNAMENT_ID"],
                seed=current_app.config.get("TOURNAMENT_SEED"),
            )
            current_app.extensions["tournament_controller"] = controller
    return controller


@bp.route("/", methods=["GET"])
def tournament_status() -> Any:
    """Current phase, format, champion and progress."""
    return jsonify(api_response("OK", get_controller().tournament_status()))


@bp.route("/participants", methods=["GET"])
def list_participants() -> Any:
    """List the roster in registration order."""
    participants = get_controller().participants()
    return jsonify(api_response("OK", {"participants": participants}))


@bp.route("/participants", methods=["POST"])
def register_participant() -> Any:
    """Register a new participant."""
    form = ParticipantForm()
    if not form.validate_on_submit():
        raise ValidationError(first_error(form))

    participant = get_controller().register_participant(form.name.data)
    current_app.logger.info(f"Participant registered: {participant['name']}")
    return (
        jsonify(api_response("Participant registered.", {"participant": participant})),
        201,
    )


@bp.route("/participants/<string:participant_id>", methods=["DELETE"])
def remove_participant(participant_id: str) -> Any:
    """Remove a participant during setup."""
    get_controller().remove_participant(participant_id)
    return jsonify(api_response("Participant removed."))


@bp.route("/format", methods=["POST"])
def set_format() -> Any:
    """Choose knockout or league."""
    form = FormatForm()
    if not form.validate_on_submit():
        raise ValidationError(first_error(form))

    state = get_controller().set_format(form.format.data)
    return jsonify(api_response("Format updated.", dict(state)))


@bp.route("/start", methods=["POST"])
def start_tournament() -> Any:
    """Generate the opening fixtures and start play."""
    controller = get_controller()
    controller.start_tournament()
    return jsonify(
        api_response(
            "Tournament started.",
            {
                "status": controller.tournament_status(),
                "fixtures": controller.current_fixtures(),
            },
        )
    )


@bp.route("/fixtures", methods=["GET"])
def list_fixtures() -> Any:
    """All fixtures ordered by round and match number."""
    return jsonify(api_response("OK", {"fixtures": get_controller().current_fixtures()}))


@bp.route("/fixtures/<string:fixture_id>/result", methods=["POST"])
def report_result(fixture_id: str) -> Any:
    """Report the winner and score of a scheduled fixture."""
    form = ResultForm()
    if not form.validate_on_submit():
        raise ValidationError(first_error(form))

    controller = get_controller()
    fixture = controller.report_result(fixture_id, form.winner_id.data, form.score.data)
    return jsonify(
        api_response(
            "Result recorded.",
            {"fixture": fixture, "status": controller.tournament_status()},
        )
    )


@bp.route("/standings", methods=["GET"])
def standings() -> Any:
    """Participants ranked by wins."""
    return jsonify(api_response("OK", {"standings": get_controller().standings()}))


@bp.route("/reset", methods=["POST"])
def reset_tournament() -> Any:
    """Clear fixtures and records and return to setup."""
    state = get_controller().reset_tournament()
    return jsonify(api_response("Tournament reset.", dict(state)))
