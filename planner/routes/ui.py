"""Provides Flask integration for the public user interface."""

from typing import Any, Dict

from flask import Blueprint, render_template, url_for, request, \
    make_response, redirect, current_app, session, Response

from .. import status
from ..auth import policies, providers, set_session_cookie, \
    unset_session_cookie
from ..controllers import authentication, sessions
from ..next_page import good_next_page

import logging

logger = logging.getLogger(__name__)
blueprint = Blueprint('ui', __name__, url_prefix='')

NEXT_PAGE_KEY = 'post_login_redirect'
"""Flask session key holding the return URL while the provider is visited."""


@blueprint.app_context_processor
def inject_auth() -> Dict[str, Any]:
    """Make the signed-in identity and admin flag available to templates."""
    identity = getattr(request, 'auth', None)
    return {
        'identity': identity,
        'is_admin': policies.evaluate(policies.ADMIN, identity,
                                      current_app.config)
    }


@blueprint.after_app_request
def apply_response_headers(response: Response) -> Response:
    """Prevent UI redress attacks."""
    response.headers['Content-Security-Policy'] = "frame-ancestors 'none'"
    response.headers['X-Frame-Options'] = 'DENY'
    return response


@blueprint.route('/', methods=['GET'])
def index() -> Response:
    """List conference sessions."""
    data, code, headers = sessions.list_sessions()
    return make_response(render_template('planner/index.html', **data),
                         code, headers)


@blueprint.route('/Session/<int:session_id>', methods=['GET'])
def session_detail(session_id: int) -> Response:
    """Show one conference session."""
    data, code, headers = sessions.get_session(session_id)
    return make_response(render_template('planner/session.html', **data),
                         code, headers)


@blueprint.route('/Login', methods=['GET', 'POST'])
def login() -> Response:
    """User picks an external provider to sign in with."""
    default_next_page = current_app.config['DEFAULT_LOGIN_REDIRECT_URL']
    next_page = request.args.get('next_page', default_next_page)
    if request.auth and request.method == 'GET':
        return redirect(good_next_page(next_page),
                        code=status.HTTP_303_SEE_OTHER)

    logger.debug('Request to log in, then redirect to %s', next_page)
    data, code, headers = authentication.login(request.method, request.form,
                                               next_page)
    if code == status.HTTP_303_SEE_OTHER:
        # The return URL survives the round trip through the provider here.
        session[NEXT_PAGE_KEY] = data['next_page']
        callback = url_for('ui.login_callback', scheme=data['scheme'],
                           _external=True)
        return providers.challenge(data['scheme'], callback)

    return make_response(render_template('planner/login.html', **data),
                         code, headers)


@blueprint.route('/login/callback/<scheme>', methods=['GET'])
def login_callback(scheme: str) -> Response:
    """The provider sends the user back here."""
    next_page = session.pop(NEXT_PAGE_KEY, None)
    data, code, headers = authentication.callback(scheme, next_page)
    # Flask puts cookie-setting methods on the response, so we do that here
    # instead of in the controller.
    if code == status.HTTP_303_SEE_OTHER:
        response = make_response(redirect(headers['Location'], code=code))
        set_session_cookie(response, data['identity'])
        return response
    return make_response(render_template('planner/login.html', **data),
                         code, headers)


@blueprint.route('/account/logout', methods=['POST'])
def logout() -> Response:
    """Sign out, and go back to the site root."""
    next_page = current_app.config['DEFAULT_LOGOUT_REDIRECT_URL']
    data, code, headers = authentication.logout(request.auth, next_page)
    response = make_response(redirect(headers['Location'], code=code))
    unset_session_cookie(response)
    return response


@blueprint.route('/status', methods=['GET'])
def service_status() -> Response:
    """Get if the app is running."""
    return make_response("OK")
