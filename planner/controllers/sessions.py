"""
Handles all conference-session requests.

Editing follows post/redirect/get: a valid save or a delete ends in a 303
redirect, and the ``message`` in the returned data should be flashed so that
it shows exactly once on the page the user lands on.
"""

from typing import Any, Dict, Optional, Tuple
from datetime import datetime

from flask import url_for
from werkzeug.datastructures import MultiDict
from werkzeug.exceptions import BadRequest, NotFound
from pytz import UTC

from .. import domain, status
from ..services import backend
from .forms import SessionForm, field_errors

import logging

logger = logging.getLogger(__name__)

ResponseData = Tuple[dict, int, dict]

UPDATED = 'Session updated successfully!'
DELETED = 'Session deleted successfully!'


def _session_id(raw: Any) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise BadRequest('A valid session id is required') from e


def _load(session_id: int) -> domain.Session:
    session = backend.get_session_by_id(session_id)
    if session is None:
        raise NotFound(f'No session with id {session_id}')
    return session


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _listing_order(session: domain.Session) -> Tuple[bool, datetime, int]:
    """Scheduled sessions by start time, then unscheduled ones."""
    if session.start_time is None:
        return True, datetime.min.replace(tzinfo=UTC), session.id
    return False, _as_utc(session.start_time), session.id


def _keep_timezones(current: domain.Session,
                    changes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Give naive form times the offset of the stored times they replace.

    ``datetime-local`` inputs carry no offset, so the wall time the admin
    sees is interpreted in the zone the back end sent.
    """
    for field in ('start_time', 'end_time'):
        value = changes.get(field)
        stored = getattr(current, field) or current.start_time \
            or current.end_time
        if value is not None and value.tzinfo is None \
                and stored is not None and stored.tzinfo is not None:
            changes[field] = value.replace(tzinfo=stored.tzinfo)
    return changes


def list_sessions() -> ResponseData:
    """List all conference sessions."""
    sessions = backend.get_sessions()
    ordered = sorted(sessions, key=_listing_order)
    return {'sessions': ordered}, status.HTTP_200_OK, {}


def get_session(session_id: int) -> ResponseData:
    """
    Retrieve one conference session for display.

    Raises
    ------
    :class:`.NotFound`
        If the back end has no such session.
    """
    return {'session': _load(session_id)}, status.HTTP_200_OK, {}


def get_edit_session(session_id: Optional[str]) -> ResponseData:
    """
    Load a session into the edit form.

    Parameters
    ----------
    session_id : str or None
        Raw ``id`` query parameter.

    Returns
    -------
    dict
        ``form`` and ``session``.
    int
        An HTTP status code.
    dict
        Some extra headers to add to the response.

    Raises
    ------
    :class:`.BadRequest`
        If ``session_id`` is missing or not an integer.
    :class:`.NotFound`
        If the back end has no such session.

    """
    session = _load(_session_id(session_id))
    logger.debug('Edit form for session %i', session.id)
    data = {'form': SessionForm.from_session(session), 'session': session}
    return data, status.HTTP_200_OK, {}


def post_edit_session(form_data: MultiDict) -> ResponseData:
    """
    Validate and save an edited session.

    Only the mutable fields are taken from the form; the id and conference id
    are kept from the stored record.

    Returns
    -------
    dict
        On success, ``message`` is the one-shot message to show after the
        redirect. Otherwise ``form`` carries the field errors.
    int
        303 (See Other) back to the edit page on success, 400 if the form is
        invalid.
    dict
        Headers to add to the response.

    """
    form = SessionForm(form_data)
    data: Dict[str, Any] = {'form': form}
    if not form.validate():
        logger.debug('Session form is not valid: %s', field_errors(form))
        return data, status.HTTP_400_BAD_REQUEST, {}

    current = _load(form.id.data)
    updated = current._replace(**_keep_timezones(current, form.changes()))
    backend.put_session(updated)
    logger.info('Updated session %i', updated.id)

    data.update({'session': updated, 'message': UPDATED})
    location = url_for('admin.edit_session', id=updated.id)
    return data, status.HTTP_303_SEE_OTHER, {'Location': location}


def delete_session(session_id: Optional[str]) -> ResponseData:
    """
    Delete a session, then send the user to the listing.

    If the session is already gone nothing is deleted, but the user still
    lands on the listing with the deleted message.
    """
    sid = _session_id(session_id)
    session = backend.get_session_by_id(sid)
    if session is not None:
        backend.delete_session(session.id)
        logger.info('Deleted session %i', session.id)
    else:
        logger.debug('Session %i already absent; nothing to delete', sid)
    data = {'message': DELETED}
    return data, status.HTTP_303_SEE_OTHER, {'Location': url_for('ui.index')}
