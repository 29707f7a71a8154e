"""Exceptions raised while issuing or reading auth session cookies."""


class InvalidCookie(ValueError):
    """The cookie could not be decoded, or its payload is malformed."""


class ExpiredCookie(InvalidCookie):
    """The cookie decoded fine, but the session it carries has expired."""


class UnknownScheme(KeyError):
    """No authentication scheme is registered under the requested name."""


class ProviderError(RuntimeError):
    """An external identity provider did not yield a usable identity."""
