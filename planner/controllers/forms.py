"""Provides forms for editing conference sessions."""

from typing import Any

from flask_wtf import FlaskForm
from wtforms import IntegerField, StringField, TextAreaField, \
    DateTimeLocalField
from wtforms.validators import DataRequired, InputRequired, Length, \
    Optional, ValidationError
from wtforms.widgets import HiddenInput

from .. import domain

DATETIME_FORMATS = ['%Y-%m-%dT%H:%M', '%Y-%m-%dT%H:%M:%S',
                    '%Y-%m-%d %H:%M:%S']
"""The first format is what browsers submit for ``datetime-local``."""


class LoginForm(FlaskForm):
    """Choice of external sign-in provider."""

    scheme = StringField('Provider', validators=[DataRequired()])


class SessionForm(FlaskForm):
    """Edit form for a conference session."""

    MUTABLE = ('title', 'abstract', 'start_time', 'end_time', 'track_id')
    """Fields an edit may change; ``id`` and ``conference_id`` are fixed."""

    id = IntegerField('Id', widget=HiddenInput(),
                      validators=[InputRequired()])
    conference_id = IntegerField('Conference', widget=HiddenInput(),
                                 validators=[Optional()])
    title = StringField('Title', validators=[DataRequired(), Length(max=200)])
    abstract = TextAreaField('Abstract', validators=[Length(max=4000)])
    track_id = IntegerField('Track', validators=[Optional()])
    start_time = DateTimeLocalField('Start time', format=DATETIME_FORMATS,
                                    validators=[Optional()])
    end_time = DateTimeLocalField('End time', format=DATETIME_FORMATS,
                                  validators=[Optional()])

    def validate_end_time(self, field: DateTimeLocalField) -> None:
        """A session must not end before it starts."""
        start = self.start_time.data
        if field.data and start and field.data < start:
            raise ValidationError('End time must not be before start time.')

    @classmethod
    def from_session(cls, session: domain.Session) -> 'SessionForm':
        """Populate a form from an existing :class:`.Session`."""
        return cls(data=session._asdict())

    def changes(self) -> dict:
        """The mutable field values, ready for ``Session._replace``."""
        data: dict = {name: self[name].data for name in self.MUTABLE}
        data['abstract'] = data['abstract'] or ''
        return data


def field_errors(form: Any) -> dict:
    """Collect errors keyed by field name, for logging."""
    return {name: errors for name, errors in form.errors.items() if errors}
