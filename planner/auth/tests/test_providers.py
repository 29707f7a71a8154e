"""Tests for :mod:`planner.auth.providers`."""

from unittest import TestCase, mock

from authlib.integrations.base_client import OAuthError
from flask import Flask

from .. import providers
from ..exceptions import UnknownScheme, ProviderError


def create_app(**config) -> Flask:
    """Build a bare app with providers registered from ``config``."""
    app = Flask('test')
    app.config['SECRET_KEY'] = 'foo'
    app.config.update(config)
    providers.init_app(app)
    return app


class TestRegistration(TestCase):
    """Providers are registered only when fully configured."""

    def test_none_configured(self):
        """Only the cookie scheme exists, and it cannot be challenged."""
        app = create_app()
        with app.app_context():
            self.assertEqual(providers.get_schemes(),
                             [providers.COOKIE_SCHEME])
            self.assertEqual(providers.get_challengeable_schemes(), [])

    def test_half_configured(self):
        """A provider missing its secret is not registered."""
        app = create_app(TWITTER_CONSUMER_KEY='key')
        with app.app_context():
            self.assertEqual(providers.get_challengeable_schemes(), [])

    def test_both_configured(self):
        """Both providers become login buttons, in order."""
        app = create_app(TWITTER_CONSUMER_KEY='key',
                         TWITTER_CONSUMER_SECRET='secret',
                         GOOGLE_CLIENT_ID='id',
                         GOOGLE_CLIENT_SECRET='secret')
        with app.app_context():
            schemes = providers.get_challengeable_schemes()
            self.assertEqual([s.name for s in schemes], ['twitter', 'google'])
            self.assertEqual([s.display_name for s in schemes],
                             ['Twitter', 'Google'])
            self.assertEqual(providers.get_schemes()[0],
                             providers.COOKIE_SCHEME)

    def test_get_provider(self):
        """Registered providers are found by name; others are unknown."""
        app = create_app(GOOGLE_CLIENT_ID='id', GOOGLE_CLIENT_SECRET='secret')
        with app.app_context():
            self.assertIsInstance(providers.get_provider('google'),
                                  providers.GoogleProvider)
            with self.assertRaises(UnknownScheme):
                providers.get_provider('twitter')
            with self.assertRaises(UnknownScheme):
                providers.get_provider('cookies')
            with self.assertRaises(UnknownScheme):
                providers.get_provider(None)

    def test_apps_are_independent(self):
        """Registration on one app does not leak into another."""
        create_app(GOOGLE_CLIENT_ID='id', GOOGLE_CLIENT_SECRET='secret')
        app = create_app()
        with app.app_context():
            self.assertEqual(providers.get_challengeable_schemes(), [])


class TestClaims(TestCase):
    """Mapping provider token responses onto local claims."""

    def test_twitter(self):
        """Twitter users are known by their screen name."""
        claims = providers.TwitterProvider().claims(
            {'oauth_token': 'x', 'screen_name': 'foouser', 'user_id': '1'},
            mock.MagicMock()
        )
        self.assertEqual(claims.username, 'foouser')

    def test_twitter_without_screen_name(self):
        """A Twitter response without a screen name is an error."""
        with self.assertRaises(ProviderError):
            providers.TwitterProvider().claims({'oauth_token': 'x'},
                                               mock.MagicMock())

    def test_google(self):
        """Google users are known by their email address."""
        client = mock.MagicMock()
        claims = providers.GoogleProvider().claims(
            {'userinfo': {'email': 'foo@example.com', 'name': 'Foo User'}},
            client
        )
        self.assertEqual(claims.username, 'foo@example.com')
        self.assertEqual(claims.name, 'Foo User')
        self.assertEqual(claims.email, 'foo@example.com')
        client.userinfo.assert_not_called()

    def test_google_fetches_userinfo(self):
        """Without an ID token, Google's userinfo endpoint is asked."""
        client = mock.MagicMock()
        client.userinfo.return_value = {'email': 'foo@example.com'}
        claims = providers.GoogleProvider().claims({'access_token': 'x'},
                                                   client)
        self.assertEqual(claims.username, 'foo@example.com')
        self.assertEqual(claims.name, 'foo@example.com')

    def test_google_without_email(self):
        """A Google response without an email is an error."""
        client = mock.MagicMock()
        client.userinfo.return_value = {}
        with self.assertRaises(ProviderError):
            providers.GoogleProvider().claims({'access_token': 'x'}, client)


class TestChallengeAndResolve(TestCase):
    """The challenge redirect and the callback exchange."""

    def setUp(self):
        self.app = create_app(TWITTER_CONSUMER_KEY='key',
                              TWITTER_CONSUMER_SECRET='secret')
        self.client = mock.MagicMock()
        self.oauth = mock.MagicMock()
        self.oauth.create_client.return_value = self.client
        self.app.extensions['planner.oauth'] = self.oauth

    def test_challenge(self):
        """The provider client issues the redirect to the callback URL."""
        with self.app.test_request_context():
            result = providers.challenge('twitter', 'http://x/cb/twitter')
        self.oauth.create_client.assert_called_once_with('twitter')
        self.client.authorize_redirect.assert_called_once_with(
            'http://x/cb/twitter')
        self.assertIs(result, self.client.authorize_redirect.return_value)

    def test_challenge_unknown(self):
        """An unknown scheme is never challenged."""
        with self.app.test_request_context():
            with self.assertRaises(UnknownScheme):
                providers.challenge('google', 'http://x/cb/google')
        self.client.authorize_redirect.assert_not_called()

    def test_resolve(self):
        """A good exchange yields the provider and claims."""
        self.client.authorize_access_token.return_value = {
            'screen_name': 'foouser'
        }
        with self.app.test_request_context():
            provider, claims = providers.resolve('twitter')
        self.assertEqual(provider.name, 'twitter')
        self.assertEqual(claims.username, 'foouser')

    def test_resolve_oauth_error(self):
        """A failed exchange is reported as a provider error."""
        self.client.authorize_access_token.side_effect = \
            OAuthError(error='access_denied')
        with self.app.test_request_context():
            with self.assertRaises(ProviderError):
                providers.resolve('twitter')

    def test_resolve_no_token(self):
        """An empty token is reported as a provider error."""
        self.client.authorize_access_token.return_value = None
        with self.app.test_request_context():
            with self.assertRaises(ProviderError):
                providers.resolve('twitter')
