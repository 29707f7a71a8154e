"""
Conference planner front end.

The front end is a Flask application that renders conference sessions held by
a separate back-end API, and lets one administrator edit them.

Users sign in through an external identity provider (Twitter with a consumer
key and secret, Google with a client ID and secret). On return from the
provider they are issued a signed session cookie that carries their
username; :class:`planner.auth.Auth` reads it back on every request.

Authorization is a single named policy, ``Admin``: the signed-in username
must equal the configured ``ADMIN_USERNAME``. Everything under ``/Admin`` is
behind that policy, including the session edit page, which saves and deletes
using post/redirect/get with one-shot flash messages.
"""
