"""
Policy-based authorization of user requests.

This module provides :func:`scoped`, a decorator factory used to protect Flask
routes for which authorization is required, and :func:`protect`, which puts a
whole blueprint behind a policy. Both evaluate a named policy from
:mod:`planner.auth.policies` against ``request.auth``.

.. code-block:: python

   from planner.auth.decorators import scoped
   from planner.auth import policies


   @blueprint.route('/secret', methods=['GET'])
   @scoped(policies.ADMIN)
   def secret():
       ...


When the protected route is called...

- If no identity is attached to the request, :class:`Unauthorized` is raised.
- If a policy was given and evaluates false, :class:`Forbidden` is raised.
- If an authorizer function was given and returns false, :class:`Forbidden`
  is raised.
- Otherwise the route is called with the original parameters.

"""

from typing import Optional, Callable, Any
from functools import wraps

from flask import Blueprint, current_app, request
from werkzeug.exceptions import Unauthorized, Forbidden

from . import policies

import logging

logger = logging.getLogger(__name__)


def check(policy: Optional[str] = None,
          authorizer: Optional[Callable] = None,
          *args: Any, **kwargs: Any) -> None:
    """
    Raise if the current request does not satisfy ``policy``/``authorizer``.

    Raises
    ------
    :class:`.Unauthorized`
        No identity is attached to the request.
    :class:`.Forbidden`
        The policy or the authorizer returned ``False``.
    """
    identity = getattr(request, 'auth', None)
    if identity is None:
        logger.debug('No valid session; aborting')
        raise Unauthorized('Not a valid session')

    if policy and not policies.evaluate(policy, identity, current_app.config):
        logger.debug('Session is not authorized for %s', policy)
        raise Forbidden('Access denied')

    if authorizer and not authorizer(identity, *args, **kwargs):
        logger.debug('Authorizer returned negative result')
        raise Forbidden('Access denied')

    logger.debug('Request is authorized, proceeding')


def scoped(policy: Optional[str] = None,
           authorizer: Optional[Callable] = None) -> Callable:
    """
    Generate a decorator to enforce authorization requirements.

    Parameters
    ----------
    policy : str
        Name of the policy that must evaluate true. If not provided, only
        authentication is enforced.
    authorizer : function
        Optional extra check with the signature
        ``(identity: domain.Identity, *args, **kwargs) -> bool``, where
        ``*args`` and ``**kwargs`` are the parameters passed to the decorated
        route.

    Returns
    -------
    function
        A decorator that enforces the policy and calls the (optionally)
        provided authorizer.

    """
    def protector(func: Callable) -> Callable:
        """Decorator that provides policy enforcement."""
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            check(policy, authorizer, *args, **kwargs)
            return func(*args, **kwargs)
        return wrapper
    return protector


def protect(blueprint: Blueprint, policy: str) -> Blueprint:
    """
    Require ``policy`` for every route registered on ``blueprint``.

    The check runs as a ``before_request`` hook, so it fires before any
    handler of the blueprint, including ones added after this call.
    """
    @blueprint.before_request
    def enforce_policy() -> None:
        check(policy)
    return blueprint
