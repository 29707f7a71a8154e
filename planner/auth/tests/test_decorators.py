"""Tests for :mod:`planner.auth.decorators`."""

from unittest import TestCase, mock
from datetime import datetime, timedelta

from flask import Flask, Blueprint
from pytz import UTC
from werkzeug.exceptions import Unauthorized, Forbidden

from ... import domain
from .. import decorators, policies


def identity_for(username: str) -> domain.Identity:
    now = datetime.now(tz=UTC)
    return domain.Identity(username=username, scheme='twitter', issued=now,
                           expires=now + timedelta(hours=1))


class TestScoped(TestCase):
    """Tests for :func:`.decorators.scoped`."""

    def setUp(self):
        """The decorator reads the app config inside a request."""
        self.app = Flask('test')
        self.app.config['ADMIN_USERNAME'] = 'foouser'
        self.context = self.app.test_request_context()
        self.context.push()

    def tearDown(self):
        self.context.pop()

    @mock.patch(f'{decorators.__name__}.request')
    def test_no_session(self, mock_request):
        """No identity is present on the request."""
        mock_request.auth = None

        @decorators.scoped(policies.ADMIN)
        def protected():
            """A protected function."""

        with self.assertRaises(Unauthorized):
            protected()

    @mock.patch(f'{decorators.__name__}.request')
    def test_not_admin(self, mock_request):
        """Identity does not satisfy the policy."""
        mock_request.auth = identity_for('baruser')

        @decorators.scoped(policies.ADMIN)
        def protected():
            """A protected function."""

        with self.assertRaises(Forbidden):
            protected()

    @mock.patch(f'{decorators.__name__}.request')
    def test_admin(self, mock_request):
        """Identity satisfies the policy."""
        mock_request.auth = identity_for('foouser')

        @decorators.scoped(policies.ADMIN)
        def protected():
            """A protected function."""
            return 'ok'

        self.assertEqual(protected(), 'ok')

    @mock.patch(f'{decorators.__name__}.request')
    def test_authenticated_only(self, mock_request):
        """Without a policy, any signed-in user gets through."""
        mock_request.auth = identity_for('baruser')

        @decorators.scoped()
        def protected():
            """A protected function."""
            return 'ok'

        self.assertEqual(protected(), 'ok')

    @mock.patch(f'{decorators.__name__}.request')
    def test_authorizer_returns_false(self, mock_request):
        """Policy passes, but authorizer func returns false."""
        mock_request.auth = identity_for('foouser')

        def return_false(identity: domain.Identity, item_id: int) -> bool:
            return False

        @decorators.scoped(policies.ADMIN, authorizer=return_false)
        def protected(item_id: int):
            """A protected function."""

        with self.assertRaises(Forbidden):
            protected(item_id=1)

    @mock.patch(f'{decorators.__name__}.request')
    def test_authorizer_gets_route_params(self, mock_request):
        """The authorizer is called with the route parameters."""
        mock_request.auth = identity_for('foouser')
        authorizer = mock.MagicMock(return_value=True)

        @decorators.scoped(authorizer=authorizer)
        def protected(item_id: int):
            """A protected function."""
            return item_id

        self.assertEqual(protected(item_id=5), 5)
        authorizer.assert_called_once_with(mock_request.auth, item_id=5)


class TestProtect(TestCase):
    """Tests for :func:`.decorators.protect`."""

    def setUp(self):
        """Build an app with a protected blueprint."""
        self.app = Flask('test')
        self.app.config['ADMIN_USERNAME'] = 'foouser'
        self.calls = []

        def guarded():
            self.calls.append('guarded')
            return 'secret'

        blueprint = decorators.protect(Blueprint('guarded', __name__),
                                       policies.ADMIN)
        blueprint.add_url_rule('/guarded', 'guarded', guarded)
        self.app.register_blueprint(blueprint)
        self.app.add_url_rule('/open', 'open', lambda: 'open')
        self.identity = None

        @self.app.before_request
        def attach():
            from flask import request
            request.auth = self.identity

        self.client = self.app.test_client()

    def test_anonymous(self):
        """Anonymous requests are rejected before the handler runs."""
        response = self.client.get('/guarded')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(self.calls, [])

    def test_not_admin(self):
        """Non-admin requests are rejected before the handler runs."""
        self.identity = identity_for('baruser')
        response = self.client.get('/guarded')
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.calls, [])

    def test_admin(self):
        """The admin gets through."""
        self.identity = identity_for('foouser')
        response = self.client.get('/guarded')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, b'secret')

    def test_other_routes_unaffected(self):
        """Routes outside the blueprint are not guarded."""
        response = self.client.get('/open')
        self.assertEqual(response.status_code, 200)
