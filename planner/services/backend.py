"""The back-end API owns conference sessions; this is its HTTP client."""
import json
from typing import Any, Dict, List, Optional
from functools import wraps

import requests
from flask import current_app, g
from retry import retry

from .. import domain

import logging

logger = logging.getLogger(__name__)


class RequestFailed(IOError):
    """The back-end API could not be reached, or returned an error."""


class BackendServiceSession(object):
    """
    Preserves state re: the back end that must persist through the request.

    Wraps a :class:`requests.Session` bound to the API base URL.
    """

    def __init__(self, base_url: str, timeout: float = 10) -> None:
        """Create a new HTTP session."""
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        # Only reads are retried (see @retry); the adapter itself does not.
        self._session = requests.Session()
        logger.debug('New BackendServiceSession with base_url = %s', base_url)

    def _path(self, *parts: Any) -> str:
        return '/'.join([self.base_url, 'api', 'sessions']
                        + [str(part) for part in parts])

    def _request(self, method: str, url: str, **kwargs: Any) \
            -> requests.Response:
        try:
            response = self._session.request(method, url,
                                             timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.warning('%s %s failed: %s', method, url, e)
            raise RequestFailed(f'Could not reach the back end: {e}') from e
        logger.debug('%s %s responded with status %i', method, url,
                     response.status_code)
        return response

    def _json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except (json.decoder.JSONDecodeError, ValueError) as e:
            logger.debug('Back-end response could not be decoded')
            raise RequestFailed('Could not read the back-end response') from e

    @retry(RequestFailed, tries=3, delay=0.5, backoff=2)
    def get_sessions(self) -> List[domain.Session]:
        """
        Get all conference sessions.

        Raises
        ------
        :class:`.RequestFailed`
            If there is a problem getting the sessions.
        """
        response = self._request('GET', self._path())
        if not response.ok:
            raise RequestFailed(
                'Could not get sessions: %i' % response.status_code)
        data: List[Dict[str, Any]] = self._json(response)
        return [domain.from_dict(item) for item in data]

    @retry(RequestFailed, tries=3, delay=0.5, backoff=2)
    def get_session(self, session_id: int) -> Optional[domain.Session]:
        """
        Get one conference session.

        Parameters
        ----------
        session_id : int

        Returns
        -------
        :class:`.Session` or None
            ``None`` if the back end has no such session.

        Raises
        ------
        :class:`.RequestFailed`
            If there is a problem getting the session.

        """
        logger.debug('Retrieve session with id = %i', session_id)
        response = self._request('GET', self._path(session_id))
        if response.status_code == requests.codes.not_found:
            return None
        if not response.ok:
            raise RequestFailed(
                'Could not get session: %i' % response.status_code)
        return domain.from_dict(self._json(response))

    def put_session(self, session: domain.Session) -> None:
        """
        Replace a conference session with ``session``.

        Not retried; a full replace is left to the caller to resubmit.

        Raises
        ------
        :class:`.RequestFailed`
        """
        response = self._request('PUT', self._path(session.id),
                                 json=domain.to_dict(session))
        if not response.ok:
            raise RequestFailed(
                'Could not update session: %i' % response.status_code)

    def delete_session(self, session_id: int) -> None:
        """
        Delete a conference session.

        Raises
        ------
        :class:`.RequestFailed`
        """
        response = self._request('DELETE', self._path(session_id))
        if not response.ok \
                and response.status_code != requests.codes.not_found:
            raise RequestFailed(
                'Could not delete session: %i' % response.status_code)


def init_app(app: object) -> None:
    """Set required configuration defaults for the application."""
    config = app.config  # type: ignore
    config.setdefault('BACKEND_API_URL', 'http://localhost:56009')
    config.setdefault('BACKEND_API_TIMEOUT', 10)


def get_session() -> BackendServiceSession:
    """Create a new back-end session from the current app config."""
    config = current_app.config
    return BackendServiceSession(config['BACKEND_API_URL'],
                                 float(config['BACKEND_API_TIMEOUT']))


def current_session() -> BackendServiceSession:
    """Get the back-end session for this context, creating it if needed."""
    if 'backend' not in g:
        g.backend = get_session()
    return g.backend  # type: ignore


# We don't want to have to maintain two identical docstrings.
@wraps(BackendServiceSession.get_sessions)
def get_sessions() -> List[domain.Session]:
    """Wrapper for :meth:`BackendServiceSession.get_sessions`."""
    return current_session().get_sessions()


@wraps(BackendServiceSession.get_session)
def get_session_by_id(session_id: int) -> Optional[domain.Session]:
    """Wrapper for :meth:`BackendServiceSession.get_session`."""
    return current_session().get_session(session_id)


@wraps(BackendServiceSession.put_session)
def put_session(session: domain.Session) -> None:
    """Wrapper for :meth:`BackendServiceSession.put_session`."""
    return current_session().put_session(session)


@wraps(BackendServiceSession.delete_session)
def delete_session(session_id: int) -> None:
    """Wrapper for :meth:`BackendServiceSession.delete_session`."""
    return current_session().delete_session(session_id)
