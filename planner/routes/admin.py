"""
Admin-only pages.

Every route on this blueprint is behind the ``Admin`` policy: the check runs
before the handler, which never sees an unauthorized request.
"""

from flask import Blueprint, render_template, request, make_response, \
    redirect, flash, Response
from werkzeug.exceptions import BadRequest

from .. import status
from ..auth import policies
from ..auth.decorators import protect
from ..controllers import sessions

import logging

logger = logging.getLogger(__name__)
blueprint = protect(Blueprint('admin', __name__, url_prefix='/Admin'),
                    policies.ADMIN)


def _render_edit(data: dict, code: int, headers: dict) -> Response:
    return make_response(render_template('planner/edit_session.html', **data),
                         code, headers)


@blueprint.route('/EditSession', methods=['GET'])
def edit_session() -> Response:
    """Show the edit form for a session."""
    data, code, headers = sessions.get_edit_session(request.args.get('id'))
    return _render_edit(data, code, headers)


@blueprint.route('/EditSession', methods=['POST'])
def post_edit_session() -> Response:
    """Save the session, or delete it with ``?handler=Delete&id=``."""
    handler = request.args.get('handler')
    if handler == 'Delete':
        data, code, headers = sessions.delete_session(request.args.get('id'))
    elif handler is None:
        data, code, headers = sessions.post_edit_session(request.form)
    else:
        raise BadRequest(f'Unknown handler {handler}')

    if code == status.HTTP_303_SEE_OTHER:
        flash(data['message'], 'success')
        return make_response(redirect(headers['Location'], code=code))
    return _render_edit(data, code, headers)
