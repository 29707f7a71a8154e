"""
Controllers for signing in and out.

Signing in is always delegated to an external provider: the login page lists
the providers that can be challenged, the user picks one, and the provider
sends the user back to the callback. On a good callback the user is issued a
signed session cookie carrying their :class:`.Identity`. Subsequent requests
are authenticated by :class:`planner.auth.Auth` reading that cookie back.
"""

from typing import Any, Dict, Optional, Tuple

from werkzeug.datastructures import MultiDict

from .. import domain, status
from ..auth import cookies, providers
from ..auth.exceptions import UnknownScheme, ProviderError
from ..next_page import good_next_page
from .forms import LoginForm

import logging

logger = logging.getLogger(__name__)

ResponseData = Tuple[dict, int, dict]

NO_SCHEME = 'Choose a sign-in provider.'
UNKNOWN_SCHEME = 'That sign-in provider is not available.'
PROVIDER_FAILED = 'Sign-in failed. Please try again.'


def login(method: str, form_data: MultiDict, next_page: str) -> ResponseData:
    """
    Provide the login page, or accept the choice of provider.

    Parameters
    ----------
    method : str
        ``GET`` renders the scheme list, ``POST`` picks a scheme.
    form_data : MultiDict
        Should include a ``scheme`` for ``POST``.
    next_page : str
        Page to which the user should be redirected upon login.

    Returns
    -------
    dict
        Additional data to add to the response. On success, ``scheme`` is
        the name of the provider to challenge.
    int
        Status code. This should be 303 (See Other) when the user should be
        sent to the provider.
    dict
        Headers to add to the response.

    """
    next_page = good_next_page(next_page)
    data: Dict[str, Any] = {
        'schemes': providers.get_challengeable_schemes(),
        'next_page': next_page
    }
    if method == 'GET':
        logger.debug('Request for login page')
        data['form'] = LoginForm()
        return data, status.HTTP_200_OK, {}

    logger.debug('Login form submitted')
    form = LoginForm(form_data)
    data['form'] = form
    if not form.validate():
        logger.debug('Login form is not valid')
        data['error'] = NO_SCHEME
        return data, status.HTTP_400_BAD_REQUEST, {}

    try:
        provider = providers.get_provider(form.scheme.data)
    except UnknownScheme:
        logger.debug('Unknown scheme %s', form.scheme.data)
        data['error'] = UNKNOWN_SCHEME
        return data, status.HTTP_400_BAD_REQUEST, {}

    data['scheme'] = provider.name
    return data, status.HTTP_303_SEE_OTHER, {}


def callback(scheme: str, next_page: Optional[str]) -> ResponseData:
    """
    Resolve a provider callback into a signed-in :class:`.Identity`.

    Parameters
    ----------
    scheme : str
        Name of the provider that sent the user back.
    next_page : str or None
        Return URL stored when the challenge was issued.

    Returns
    -------
    dict
        On success, ``identity`` is the new :class:`.Identity`; the UI route
        should set it as a cookie.
    int
        Status code. 303 (See Other) on success, 400 on failure.
    dict
        Headers to add to the response.

    """
    data: Dict[str, Any] = {
        'schemes': providers.get_challengeable_schemes(),
        'next_page': good_next_page(next_page or ''),
        'form': LoginForm()
    }
    try:
        provider, claims = providers.resolve(scheme)
    except UnknownScheme:
        logger.debug('Callback for unknown scheme %s', scheme)
        data['error'] = UNKNOWN_SCHEME
        return data, status.HTTP_400_BAD_REQUEST, {}
    except ProviderError as e:
        logger.warning('Sign-in with %s failed: %s', scheme, e)
        data['error'] = PROVIDER_FAILED
        return data, status.HTTP_400_BAD_REQUEST, {}

    identity: domain.Identity = cookies.create(claims.username, provider.name,
                                               name=claims.name,
                                               email=claims.email)
    logger.info('%s signed in with %s', identity.username, provider.name)
    data['identity'] = identity
    return data, status.HTTP_303_SEE_OTHER, {'Location': data['next_page']}


def logout(identity: Optional[domain.Identity],
           next_page: str) -> ResponseData:
    """
    Log the user out, and redirect to ``next_page``.

    Signing out while signed out is harmless.

    Returns
    -------
    dict
        Additional data to add to the response.
    int
        Status code. This should be 303 (See Other).
    dict
        Headers to add to the response.

    """
    if identity is not None:
        logger.info('%s signed out', identity.username)
    else:
        logger.debug('Sign-out requested without a session')
    return {}, status.HTTP_303_SEE_OTHER, {'Location': next_page}
