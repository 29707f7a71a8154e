"""Defines the core data structures for the conference planner front end."""

from typing import Any, Dict, NamedTuple, Optional
from datetime import datetime
import dateutil.parser
from pytz import UTC


class AuthenticationScheme(NamedTuple):
    """A configured sign-in mechanism, rendered as a login button."""

    name: str
    """Key used in routes and form submissions, e.g. ``twitter``."""

    display_name: str
    """Label shown to the user."""

    challengeable: bool = True
    """Whether the scheme can redirect the user to sign in interactively."""


class Identity(NamedTuple):
    """The signed-in user, as carried by the auth session cookie."""

    username: str
    scheme: str
    """Name of the :class:`.AuthenticationScheme` used to sign in."""

    issued: datetime
    expires: datetime

    name: str = ''
    email: str = ''

    @property
    def authenticated(self) -> bool:
        """A loaded identity is always authenticated."""
        return True

    @property
    def expired(self) -> bool:
        """Whether the identity is past its expiry."""
        return self.expires <= datetime.now(tz=UTC)


class Session(NamedTuple):
    """A conference session, as owned by the back-end API."""

    id: int
    conference_id: int
    title: str
    abstract: str = ''
    track_id: Optional[int] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


_SESSION_KEYS = {
    'id': 'id',
    'conference_id': 'conferenceId',
    'track_id': 'trackId',
    'title': 'title',
    'abstract': 'abstract',
    'start_time': 'startTime',
    'end_time': 'endTime',
}


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return dateutil.parser.parse(value)


def to_dict(session: Session) -> Dict[str, Any]:
    """Serialize a :class:`.Session` for the back-end API."""
    data: Dict[str, Any] = {}
    for field, key in _SESSION_KEYS.items():
        value = getattr(session, field)
        if isinstance(value, datetime):
            value = value.isoformat()
        data[key] = value
    return data


def from_dict(data: Dict[str, Any]) -> Session:
    """Build a :class:`.Session` from a back-end API payload."""
    return Session(
        id=int(data['id']),
        conference_id=int(data.get('conferenceId') or 0),
        track_id=data.get('trackId'),
        title=data.get('title') or '',
        abstract=data.get('abstract') or '',
        start_time=_parse_datetime(data.get('startTime')),
        end_time=_parse_datetime(data.get('endTime')),
    )
