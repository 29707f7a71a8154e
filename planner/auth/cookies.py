"""
Issues and reads the signed auth session cookie.

The cookie is self-contained: an HS256 JWT carrying the :class:`.Identity`
claims and an expiry. There is no server-side session store, so signing out
only requires the browser to drop the cookie.
"""

from datetime import datetime, timedelta
from functools import wraps

import dateutil.parser
import jwt
from flask import current_app, g
from pytz import UTC

from .. import domain
from .exceptions import InvalidCookie, ExpiredCookie

import logging

logger = logging.getLogger(__name__)


class CookieIssuer(object):
    """Signs and verifies auth session cookies with a shared secret."""

    def __init__(self, secret: str, duration: int = 36000) -> None:
        self._secret = secret
        self._duration = duration

    def create(self, username: str, scheme: str, name: str = '',
               email: str = '') -> domain.Identity:
        """
        Create a new :class:`.Identity` that expires after the duration.

        Parameters
        ----------
        username : str
        scheme : str
            Name of the scheme the user signed in with.
        name : str
        email : str

        Returns
        -------
        :class:`.Identity`
        """
        issued = datetime.now(tz=UTC)
        expires = issued + timedelta(seconds=self._duration)
        return domain.Identity(username=username, scheme=scheme,
                               issued=issued, expires=expires,
                               name=name or username, email=email)

    def generate_cookie(self, identity: domain.Identity) -> str:
        """Generate a cookie value from an :class:`.Identity`."""
        return self._pack_cookie({
            'username': identity.username,
            'scheme': identity.scheme,
            'name': identity.name,
            'email': identity.email,
            'issued': identity.issued.isoformat(),
            'expires': identity.expires.isoformat()
        })

    def load(self, cookie: str) -> domain.Identity:
        """
        Load an :class:`.Identity` from a cookie value.

        Raises
        ------
        :class:`.InvalidCookie`
            If the cookie is forged, corrupted, or its payload is malformed.
        :class:`.ExpiredCookie`
            If the cookie is genuine but past its expiry.
        """
        data = self._unpack_cookie(cookie)
        try:
            identity = domain.Identity(
                username=data['username'],
                scheme=data['scheme'],
                name=data.get('name', ''),
                email=data.get('email', ''),
                issued=dateutil.parser.parse(data['issued']),
                expires=dateutil.parser.parse(data['expires'])
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidCookie('Cookie payload malformed') from e
        if not identity.username:
            raise InvalidCookie('Cookie carries no username')
        if identity.expired:
            raise ExpiredCookie('Session has expired')
        return identity

    @property
    def duration(self) -> int:
        """Lifetime of issued cookies, in seconds."""
        return self._duration

    def _unpack_cookie(self, cookie: str) -> dict:
        try:
            data = dict(jwt.decode(cookie, self._secret, algorithms=['HS256']))
        except jwt.exceptions.InvalidTokenError as e:
            raise InvalidCookie('Session cookie is malformed') from e
        return data

    def _pack_cookie(self, cookie_data: dict) -> str:
        return jwt.encode(cookie_data, self._secret, algorithm='HS256')


def init_app(app: object = None) -> None:
    """Set default configuration parameters for an application instance."""
    config = current_app.config if app is None else app.config  # type: ignore
    config.setdefault('JWT_SECRET', 'foosecret')
    config.setdefault('SESSION_DURATION', 36000)
    config.setdefault('AUTH_SESSION_COOKIE_NAME', 'planner_session')
    config.setdefault('AUTH_SESSION_COOKIE_SECURE', True)


def get_issuer() -> CookieIssuer:
    """Get a new :class:`.CookieIssuer` configured for the current app."""
    config = current_app.config
    return CookieIssuer(config['JWT_SECRET'],
                        int(config.get('SESSION_DURATION', 36000)))


def current_issuer() -> CookieIssuer:
    """Get/create the :class:`.CookieIssuer` for this context."""
    if 'cookie_issuer' not in g:
        g.cookie_issuer = get_issuer()
    return g.cookie_issuer  # type: ignore


@wraps(CookieIssuer.create)
def create(username: str, scheme: str, name: str = '',
           email: str = '') -> domain.Identity:
    """Create a new identity."""
    return current_issuer().create(username, scheme, name=name, email=email)


@wraps(CookieIssuer.generate_cookie)
def generate_cookie(identity: domain.Identity) -> str:
    """Generate a cookie from a :class:`domain.Identity`."""
    return current_issuer().generate_cookie(identity)


@wraps(CookieIssuer.load)
def load(cookie: str) -> domain.Identity:
    """Load an identity by cookie value."""
    return current_issuer().load(cookie)
