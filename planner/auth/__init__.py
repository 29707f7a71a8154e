"""Provides tools for working with authenticated user sessions."""

from typing import Optional

from flask import Flask, request, Response, current_app

from .. import domain
from . import cookies, providers
from .exceptions import InvalidCookie, ExpiredCookie

import logging

logger = logging.getLogger(__name__)


class Auth(object):
    """
    Attaches session and authentication information to the request.

    Intended for use in a Flask application factory, for example:

    .. code-block:: python

       from flask import Flask
       from planner.auth import Auth
       from planner.routes import ui


       def create_web_app() -> Flask:
          app = Flask('planner')
          app.config.from_pyfile('config.py')
          Auth(app)   # Registers the before_request auth check
          app.register_blueprint(ui.blueprint)
          return app

    After that, ``request.auth`` is the signed-in :class:`.Identity`, or
    ``None`` for anonymous requests.
    """

    def __init__(self, app: Optional[Flask] = None) -> None:
        """
        Initialize ``app`` with `Auth`.

        Parameters
        ----------
        app : :class:`Flask`

        """
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """
        Attach :meth:`.load_session` to the Flask app.

        Parameters
        ----------
        app : :class:`Flask`

        """
        self.app = app
        app.extensions['planner.auth'] = self
        cookies.init_app(app)
        providers.init_app(app)
        self.app.before_request(self.load_session)
        self.app.config.setdefault('DEFAULT_LOGOUT_REDIRECT_URL', '/')
        self.app.config.setdefault('DEFAULT_LOGIN_REDIRECT_URL', '/')

    def load_session(self) -> None:
        """
        Look for an active session, and attach it to the request.

        A missing, forged, malformed or expired cookie all leave the request
        anonymous.
        """
        request.auth = self.first_valid()

    def first_valid(self) -> Optional[domain.Identity]:
        """The identity carried by the session cookie, if it is valid."""
        cookie_name = self.app.config['AUTH_SESSION_COOKIE_NAME']
        cookie = request.cookies.get(cookie_name)
        if not cookie:
            return None
        try:
            identity = cookies.load(cookie)
        except ExpiredCookie as e:
            logger.debug('Session cookie is expired: %s', e)
            return None
        except InvalidCookie as e:
            logger.debug('Invalid session cookie: %s', e)
            return None
        logger.debug('Loaded session for %s', identity.username)
        return identity


def set_session_cookie(response: Response, identity: domain.Identity) -> None:
    """Sign ``identity`` into a cookie and set it on ``response``."""
    config = current_app.config
    params = dict(httponly=True,
                  max_age=cookies.current_issuer().duration)
    if config['AUTH_SESSION_COOKIE_SECURE']:
        # Lax still sends the cookie on top-level GET navigation.
        params.update({'secure': True, 'samesite': 'Lax'})
    logger.debug('Set cookie %s for %s', config['AUTH_SESSION_COOKIE_NAME'],
                 identity.username)
    response.set_cookie(config['AUTH_SESSION_COOKIE_NAME'],
                        cookies.generate_cookie(identity), **params)


def unset_session_cookie(response: Response) -> None:
    """Expire the session cookie on ``response``."""
    response.set_cookie(current_app.config['AUTH_SESSION_COOKIE_NAME'], '',
                        max_age=0, expires=0, httponly=True)
