"""Forms for the admin blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import IntegerField, SelectField, SelectMultipleField, StringField
from wtforms.validators import (
    DataRequired,
    Length,
    NumberRange,
    Optional,
    StopValidation,
)

from xfive.core.constants import (
    DAY_ROOMS,
    DEMO_PLAYERS_PER_ROOM,
    MAX_GAMES,
    QUALIFIER_ROOMS,
    ROOMS,
    STAGES,
    STATUSES,
)

ROOM_CHOICES = [(r, f"Room {r}") for r in ROOMS]


class AddPlayerForm(FlaskForm):
    """Form for adding a player to a room."""

    name = StringField("Player Name", validators=[DataRequired(), Length(max=64)])
    nick = StringField("Nickname", validators=[Optional(), Length(max=32)])
    room = SelectField("Assign Room", choices=ROOM_CHOICES, default="1")


def _text_or_null(form, field):
    """JSON bodies can carry numbers or lists where a string belongs."""
    if field.raw_data and field.raw_data[0] is not None:
        if not isinstance(field.raw_data[0], str):
            raise StopValidation("Must be text.")


class EditPlayerForm(FlaskForm):
    """Partial edit of a player. Only submitted fields are changed."""

    name = StringField(
        "Player Name", validators=[_text_or_null, Optional(), Length(max=64)]
    )
    nick = StringField(
        "Nickname", validators=[_text_or_null, Optional(), Length(max=32)]
    )
    room = SelectField("Room", choices=ROOM_CHOICES, validators=[Optional()])
    status = SelectField(
        "Status", choices=[(s, s.title()) for s in STATUSES], validators=[Optional()]
    )

    def changes(self):
        """Submitted fields and their values."""
        return {
            field.name: field.data
            for field in (self.name, self.nick, self.room, self.status)
            if field.raw_data
        }


class ScoreForm(FlaskForm):
    """Form for entering one game score."""

    game = IntegerField("Game", validators=[NumberRange(min=0, max=MAX_GAMES - 1)])
    score = IntegerField("Score", validators=[NumberRange(min=0)])


class StageForm(FlaskForm):
    stage = SelectField("Stage", choices=[(s, s.replace("_", " ")) for s in STAGES])


class ViewerRoomForm(FlaskForm):
    room = SelectField("Viewer Room", choices=ROOM_CHOICES)


class RoomModeForm(FlaskForm):
    mode = StringField("Mode", validators=[DataRequired(), Length(max=64)])


class WheelModeForm(FlaskForm):
    """Form for adding a game mode to the wheel catalog."""

    name = StringField("Name", validators=[DataRequired(), Length(max=64)])
    description = StringField("Description", validators=[Optional(), Length(max=280)])


class AdvanceQualifiersForm(FlaskForm):
    """Pick the qualifier rooms to close, by day or explicitly."""

    day = SelectField(
        "Day",
        choices=[("", "")] + [(d, d.replace("_", " ")) for d in DAY_ROOMS],
        default="",
        validators=[Optional()],
    )
    rooms = SelectMultipleField(
        "Rooms",
        choices=[(r, f"Room {r}") for r in QUALIFIER_ROOMS],
        validators=[Optional()],
    )

    def selected_rooms(self):
        """Rooms to advance: the explicit list wins over the day preset."""
        if self.rooms.data:
            return list(self.rooms.data)
        if self.day.data:
            return list(DAY_ROOMS[self.day.data])
        return []


class SeedForm(FlaskForm):
    per_room = IntegerField(
        "Players per room",
        default=DEMO_PLAYERS_PER_ROOM,
        validators=[Optional(), NumberRange(min=1, max=20)],
    )
