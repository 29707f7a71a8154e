"""Flask configuration."""
import secrets
import os

#################### General config for app ####################
DEFAULT_LOGIN_REDIRECT_URL = os.environ.get('DEFAULT_LOGIN_REDIRECT_URL', '/')
"""URL to redirect the user to on a successful login, if they have not provided
a `next_page` query param."""

DEFAULT_LOGOUT_REDIRECT_URL = os.environ.get('DEFAULT_LOGOUT_REDIRECT_URL', '/')
"""URL to redirect the user to on a logout."""

_relative_urls = r"(^\/(?:[^\/\\]+\/)*[^\/\\]*$)"
LOGIN_REDIRECT_REGEX = os.environ.get('LOGIN_REDIRECT_REGEX', _relative_urls)
"""Regex to check next_page of /Login.

Only next_page values that match this regex will be allowed. All
others will go to the DEFAULT_LOGIN_REDIRECT_URL. The default value
for this allows only relative URLs, and no backslashes.
"""


#################### Auth session cookie ####################
JWT_SECRET = os.environ.get('JWT_SECRET', secrets.token_urlsafe(16))
"""Secret used to sign the auth session cookie."""

AUTH_SESSION_COOKIE_NAME = os.environ.get('AUTH_SESSION_COOKIE_NAME',
                                          'planner_session')
AUTH_SESSION_COOKIE_SECURE = \
    bool(int(os.environ.get('AUTH_SESSION_COOKIE_SECURE', '1')))

SESSION_DURATION = int(os.environ.get('SESSION_DURATION', '36000'))
"""Lifetime of the auth session cookie, in seconds."""


#################### Authorization ####################
ADMIN_USERNAME = os.environ.get('ADMIN_USERNAME', '').strip()
"""The one user allowed through the ``Admin`` policy.

Compared exactly (case-sensitive) against the signed-in username. If empty,
nobody is an admin."""


#################### External identity providers ####################
"""A provider is only offered on the login page when both of its credentials
are set. Supply these from the environment; never commit them."""

TWITTER_CONSUMER_KEY = os.environ.get('TWITTER_CONSUMER_KEY')
TWITTER_CONSUMER_SECRET = os.environ.get('TWITTER_CONSUMER_SECRET')

GOOGLE_CLIENT_ID = os.environ.get('GOOGLE_CLIENT_ID')
GOOGLE_CLIENT_SECRET = os.environ.get('GOOGLE_CLIENT_SECRET')


#################### Back-end API ####################
BACKEND_API_URL = os.environ.get('BACKEND_API_URL', 'http://localhost:56009')
"""Base URL of the conference back-end API that owns session data."""

BACKEND_API_TIMEOUT = float(os.environ.get('BACKEND_API_TIMEOUT', '10'))
"""Seconds to wait for the back-end API before giving up."""


#################### Minor configs ##############################
SECRET_KEY = os.environ.get('SECRET_KEY', secrets.token_urlsafe(16))
"""Sets the `Flask` secret key used for flash messages, CSRF tokens
and OAuth state."""

LOGLEVEL = int(os.environ.get('LOGLEVEL', 20))
