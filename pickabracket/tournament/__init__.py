"""Tournament blueprint."""

from flask import Blueprint

bp = Blueprint("tournament", __name__, url_prefix="/tournament")

from . import routes  # noqa: E402, F401
from .models import Fixture, Participant, TournamentState  # noqa: E402
from .services import TournamentController  # noqa: E402

__all__ = ["Fixture", "Participant", "TournamentState", "TournamentController", "routes"]
