"""
External identity providers, using :mod:`authlib`'s Flask client.

Each :class:`Provider` knows which config keys hold its credentials, how to
register itself with an :class:`authlib.integrations.flask_client.OAuth`
registry, and how to turn the provider's token response into the claims of a
local :class:`.Identity`. A provider is registered only when both of its
credentials are configured.

The cookie scheme is always present but cannot be challenged: it is what the
providers sign the user into.
"""

from typing import Dict, List, NamedTuple, Optional, Tuple

from authlib.integrations.flask_client import OAuth
from authlib.common.errors import AuthlibBaseError
from flask import Flask, current_app

from .. import domain
from .exceptions import UnknownScheme, ProviderError

import logging

logger = logging.getLogger(__name__)

COOKIE_SCHEME = domain.AuthenticationScheme(name='cookies',
                                            display_name='Cookies',
                                            challengeable=False)
"""The local session cookie scheme."""


class Claims(NamedTuple):
    """User data extracted from a provider's token response."""

    username: str
    name: str = ''
    email: str = ''


class Provider(object):
    """Base class for an external identity provider."""

    name = ''
    display_name = ''
    key_config = ''
    secret_config = ''

    def is_configured(self, config: dict) -> bool:
        """Whether both credentials are present in ``config``."""
        return bool(config.get(self.key_config)
                    and config.get(self.secret_config))

    def register(self, oauth: OAuth, config: dict) -> None:
        """Register this provider on ``oauth`` with its credentials."""
        oauth.register(name=self.name,
                       client_id=config[self.key_config],
                       client_secret=config[self.secret_config],
                       **self.client_params())

    def client_params(self) -> dict:
        """Endpoint parameters passed to :meth:`OAuth.register`."""
        raise NotImplementedError('Implement in a subclass')

    def claims(self, token: dict, client: object) -> Claims:
        """Map the token response onto local :class:`.Claims`."""
        raise NotImplementedError('Implement in a subclass')

    @property
    def scheme(self) -> domain.AuthenticationScheme:
        """The login button for this provider."""
        return domain.AuthenticationScheme(name=self.name,
                                           display_name=self.display_name)


class TwitterProvider(Provider):
    """OAuth 1.0a sign-in with a consumer key and secret."""

    name = 'twitter'
    display_name = 'Twitter'
    key_config = 'TWITTER_CONSUMER_KEY'
    secret_config = 'TWITTER_CONSUMER_SECRET'

    def client_params(self) -> dict:
        return {
            'request_token_url': 'https://api.twitter.com/oauth/request_token',
            'access_token_url': 'https://api.twitter.com/oauth/access_token',
            'authorize_url': 'https://api.twitter.com/oauth/authenticate',
            'api_base_url': 'https://api.twitter.com/1.1/',
        }

    def claims(self, token: dict, client: object) -> Claims:
        screen_name = token.get('screen_name')
        if not screen_name:
            raise ProviderError('Twitter did not return a screen name')
        return Claims(username=screen_name, name=screen_name)


class GoogleProvider(Provider):
    """OpenID Connect sign-in with a client ID and secret."""

    name = 'google'
    display_name = 'Google'
    key_config = 'GOOGLE_CLIENT_ID'
    secret_config = 'GOOGLE_CLIENT_SECRET'

    def client_params(self) -> dict:
        return {
            'server_metadata_url':
                'https://accounts.google.com/.well-known/openid-configuration',
            'client_kwargs': {'scope': 'openid email profile'},
        }

    def claims(self, token: dict, client: object) -> Claims:
        userinfo = token.get('userinfo') \
            or client.userinfo(token=token)  # type: ignore
        email = userinfo.get('email') if userinfo else None
        if not email:
            raise ProviderError('Google did not return an email address')
        return Claims(username=email, name=userinfo.get('name') or email,
                      email=email)


PROVIDERS: List[Provider] = [TwitterProvider(), GoogleProvider()]


def init_app(app: Flask) -> None:
    """Create the OAuth registry for ``app`` and register providers."""
    oauth = OAuth(app)
    registered: Dict[str, Provider] = {}
    for provider in PROVIDERS:
        if provider.is_configured(app.config):
            provider.register(oauth, app.config)
            registered[provider.name] = provider
            logger.info('Registered identity provider %s', provider.name)
        else:
            logger.debug('Identity provider %s not configured', provider.name)
    app.extensions['planner.oauth'] = oauth
    app.extensions['planner.providers'] = registered


def _registered() -> Dict[str, Provider]:
    providers: Dict[str, Provider] = \
        current_app.extensions.get('planner.providers', {})
    return providers


def get_schemes() -> List[domain.AuthenticationScheme]:
    """All configured schemes, the cookie scheme first."""
    return [COOKIE_SCHEME] + [p.scheme for p in _registered().values()]


def get_challengeable_schemes() -> List[domain.AuthenticationScheme]:
    """The schemes that can be offered as login buttons."""
    return [scheme for scheme in get_schemes() if scheme.challengeable]


def get_provider(name: Optional[str]) -> Provider:
    """
    Get the registered provider called ``name``.

    Raises
    ------
    :class:`.UnknownScheme`
        No provider is registered under that name.
    """
    provider = _registered().get(name or '')
    if provider is None:
        raise UnknownScheme(name)
    return provider


def _client(name: str) -> object:
    return current_app.extensions['planner.oauth'].create_client(name)


def challenge(name: str, redirect_uri: str) -> object:
    """
    Redirect the user to the provider called ``name``.

    Parameters
    ----------
    name : str
    redirect_uri : str
        Callback URL the provider sends the user back to.

    Returns
    -------
    :class:`flask.Response`
        A redirect to the provider's authorization endpoint.

    """
    get_provider(name)
    logger.debug('Challenge %s with callback %s', name, redirect_uri)
    return _client(name).authorize_redirect(redirect_uri)  # type: ignore


def resolve(name: str) -> Tuple[Provider, Claims]:
    """
    Exchange the provider callback for local :class:`.Claims`.

    Raises
    ------
    :class:`.UnknownScheme`
        No provider is registered under ``name``.
    :class:`.ProviderError`
        The exchange failed, or the provider returned no usable user data.
    """
    provider = get_provider(name)
    client = _client(name)
    try:
        token = client.authorize_access_token()  # type: ignore
    except AuthlibBaseError as e:
        raise ProviderError(f'{name} exchange failed: {e}') from e
    if not token:
        raise ProviderError(f'{name} returned no token')
    return provider, provider.claims(token, client)
