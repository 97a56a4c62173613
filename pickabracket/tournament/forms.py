"""Forms for the tournament blueprint."""

from flask_wtf import FlaskForm
from wtforms import SelectField, StringField
from wtforms.validators import DataRequired

from pickabracket.core.constants import FORMAT_KNOCKOUT, FORMAT_LEAGUE


class APIForm(FlaskForm):
    """Base form for the JSON API, whose blueprint is exempt from CSRF."""

    class Meta:
        csrf = False


class ParticipantForm(APIForm):
    """Form for registering a participant."""

    name = StringField(
        "Name",
        validators=[DataRequired(message="Participant name cannot be empty.")],
    )


class FormatForm(APIForm):
    """Form for choosing the tournament format."""

    format = SelectField(
        "Tournament Format",
        choices=[
            (FORMAT_KNOCKOUT, "Knockout"),
            (FORMAT_LEAGUE, "League"),
        ],
        validators=[DataRequired(message="Choose a tournament format.")],
    )


class ResultForm(APIForm):
    """Form for reporting the result of a fixture."""

    winner_id = StringField(
        "Winner", validators=[DataRequired(message="A winner must be selected.")]
    )
    score = StringField(
        "Score", validators=[DataRequired(message="Score cannot be empty.")]
    )


def first_error(form: FlaskForm) -> str:
    """Return the first validation message on a form."""
    for errors in form.errors.values():
        if errors:
            return str(errors[0])
    return "Invalid input."
