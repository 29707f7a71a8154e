"""Web Server Gateway Interface entry-point."""

from planner.factory import create_web_app
import os

__flask_app__ = None


def application(environ, start_response):
    """WSGI application factory."""
    for key, value in environ.items():
        # Only string values are config; the rest is per-request WSGI state.
        if isinstance(value, str):
            os.environ[key] = value
    global __flask_app__
    if __flask_app__ is None:
        __flask_app__ = create_web_app()
    return __flask_app__(environ, start_response)
