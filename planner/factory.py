"""Application factory for the planner front end."""

import logging

from flask import Flask, Response, make_response, render_template
from flask_wtf.csrf import CSRFProtect
from werkzeug.exceptions import HTTPException, BadGateway

from . import auth
from .routes import ui, admin
from .services import backend

logger = logging.getLogger(__name__)
csrf = CSRFProtect()


def create_web_app() -> Flask:
    """Initialize and configure the planner application."""
    app = Flask('planner')
    app.config.from_pyfile('config.py')
    logging.basicConfig(level=app.config['LOGLEVEL'])

    backend.init_app(app)
    auth.Auth(app)  # Handles sessions and authn/z.
    csrf.init_app(app)  # Every POST must carry the form token.

    app.register_blueprint(ui.blueprint)
    app.register_blueprint(admin.blueprint)

    register_error_handlers(app)
    return app


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""
    app.errorhandler(HTTPException)(render_exception)
    app.errorhandler(backend.RequestFailed)(backend_unavailable)


def render_exception(error: HTTPException) -> Response:
    """Render HTTP exceptions as an HTML error page."""
    code = error.code or 500
    content = render_template('planner/error.html', code=code,
                              name=error.name, description=error.description)
    return make_response(content, code)


def backend_unavailable(error: backend.RequestFailed) -> Response:
    """The back end failed; report it as a bad gateway."""
    logger.warning('Back-end request failed: %s', error)
    return render_exception(
        BadGateway('The conference data service is unavailable.'))
