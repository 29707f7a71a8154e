"""Tests for :mod:`planner.auth.policies`."""

from unittest import TestCase
from datetime import datetime, timedelta

from pytz import UTC

from ... import domain
from .. import policies


def identity_for(username: str) -> domain.Identity:
    """Build a signed-in identity."""
    now = datetime.now(tz=UTC)
    return domain.Identity(username=username, scheme='twitter', issued=now,
                           expires=now + timedelta(hours=1))


class TestAdminPolicy(TestCase):
    """Tests for :func:`.policies.is_admin`."""

    def setUp(self):
        self.config = {'ADMIN_USERNAME': 'foouser'}

    def test_anonymous(self):
        """Anonymous requests are never admin."""
        self.assertFalse(policies.is_admin(None, self.config))

    def test_exact_match(self):
        """The configured username is admin."""
        self.assertTrue(policies.is_admin(identity_for('foouser'),
                                          self.config))

    def test_other_user(self):
        """Any other user is not admin."""
        self.assertFalse(policies.is_admin(identity_for('baruser'),
                                           self.config))

    def test_case_sensitive(self):
        """The comparison is case-sensitive."""
        self.assertFalse(policies.is_admin(identity_for('FooUser'),
                                           self.config))

    def test_no_trimming(self):
        """The signed-in name is not normalized."""
        self.assertFalse(policies.is_admin(identity_for(' foouser'),
                                           self.config))

    def test_not_configured(self):
        """With no admin configured, nobody is admin."""
        self.assertFalse(policies.is_admin(identity_for(''),
                                           {'ADMIN_USERNAME': ''}))
        self.assertFalse(policies.is_admin(identity_for('foouser'), {}))


class TestEvaluate(TestCase):
    """Tests for :func:`.policies.evaluate`."""

    def test_by_name(self):
        """The Admin policy is looked up by name."""
        config = {'ADMIN_USERNAME': 'foouser'}
        self.assertTrue(policies.evaluate(policies.ADMIN,
                                          identity_for('foouser'), config))
        self.assertFalse(policies.evaluate('Admin', None, config))

    def test_unknown_policy(self):
        """An unknown policy name is an error."""
        with self.assertRaises(KeyError):
            policies.evaluate('Nope', None, {})
