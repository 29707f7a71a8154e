"""Validation of the return URL carried through sign-in."""

import re
from typing import Optional

from flask import current_app

import logging

logger = logging.getLogger(__name__)

MAX_LENGTH = 300


def good_next_page(next_page: Optional[str]) -> str:
    """
    Get a safe page to send the user to after signing in.

    Parameters
    ----------
    next_page : str or None
        The requested return URL.

    Returns
    -------
    str
        ``next_page`` if it matches ``LOGIN_REDIRECT_REGEX``, otherwise
        ``DEFAULT_LOGIN_REDIRECT_URL``. Overlong values and values with a
        backslash are always refused; browsers read ``/\\host`` as another
        site.

    """
    default: str = current_app.config['DEFAULT_LOGIN_REDIRECT_URL']
    if not next_page or next_page == default:
        return default
    if len(next_page) >= MAX_LENGTH or '\\' in next_page:
        logger.debug('Refused return URL %r', next_page[:MAX_LENGTH])
        return default
    if not re.match(current_app.config['LOGIN_REDIRECT_REGEX'], next_page):
        logger.debug('Return URL %r is not allowed', next_page)
        return default
    return next_page
