"""
Named authorization policies.

A policy is a function ``(identity, config) -> bool``. There is one policy,
``Admin``: the request is authenticated and the username equals
``ADMIN_USERNAME`` exactly (case-sensitive, no normalization of the
signed-in name).
"""

from typing import Callable, Dict, Mapping, Optional

from .. import domain

import logging

logger = logging.getLogger(__name__)

ADMIN = 'Admin'

Policy = Callable[[Optional[domain.Identity], Mapping], bool]


def is_admin(identity: Optional[domain.Identity], config: Mapping) -> bool:
    """Whether ``identity`` is the configured admin user."""
    if identity is None or not identity.authenticated:
        return False
    admin_username = config.get('ADMIN_USERNAME') or ''
    if not admin_username:
        return False
    return bool(identity.username == admin_username)


POLICIES: Dict[str, Policy] = {
    ADMIN: is_admin,
}


def evaluate(name: str, identity: Optional[domain.Identity],
             config: Mapping) -> bool:
    """
    Evaluate the policy registered under ``name``.

    Raises
    ------
    KeyError
        If no such policy is registered; this is a programming error.
    """
    result = POLICIES[name](identity, config)
    logger.debug('Policy %s for %s: %s', name,
                 identity.username if identity else None, result)
    return result
