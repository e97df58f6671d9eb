"""
Login cookie codec.

The cookie value is an HS256-signed JWT whose ``secret`` claim is the session
secret stored in the ``sessions`` table. Only the signature and shape are
checked here; whether the session exists or has expired is the session
store's call.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

import jwt

logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"
_SECRET_CLAIM = "secret"


class MalformedCredentialError(Exception):
    """Raised when the login cookie cannot be decoded. Do not log the cookie."""

    pass


class LoginCookie:
    def __init__(self, signing_key: str, name: str = "login") -> None:
        self._key = signing_key
        self.name = name

    def encode(self, secret: str) -> str:
        return jwt.encode({_SECRET_CLAIM: secret}, self._key, algorithm=_ALGORITHM)

    def decode(self, value: str) -> str:
        """
        Return the session secret carried by a cookie value.

        Raises MalformedCredentialError if the signature or the payload is bad.
        """
        try:
            payload = jwt.decode(
                value,
                self._key,
                algorithms=[_ALGORITHM],
                options={"verify_signature": True, "require": [_SECRET_CLAIM]},
            )
        except jwt.InvalidSignatureError as e:
            logger.info("Login cookie has an invalid signature")
            raise MalformedCredentialError("Invalid cookie signature") from e
        except jwt.InvalidTokenError as e:
            logger.info("Login cookie invalid: %s", type(e).__name__)
            raise MalformedCredentialError("Invalid cookie") from e

        secret = payload.get(_SECRET_CLAIM)
        if not isinstance(secret, str) or not secret:
            raise MalformedCredentialError("Invalid cookie: missing session secret")
        return secret

    def read(self, cookies: Mapping[str, str]) -> str | None:
        """Session secret from a cookie jar, or None when the cookie is absent."""
        value = cookies.get(self.name)
        if not value:
            return None
        return self.decode(value)
