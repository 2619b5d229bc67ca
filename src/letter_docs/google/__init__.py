"""Google OAuth and API authentication utilities."""

from letter_docs.google.access_token import AccessTokenAuth
from letter_docs.google.exceptions import (
    AuthorizationRequired,
    CredentialsNotFoundError,
    GoogleAuthError,
    ScopeMismatchError,
    TokenError,
)
from letter_docs.google.oauth import GoogleOAuth

__all__ = [
    "AccessTokenAuth",
    "GoogleOAuth",
    "GoogleAuthError",
    "AuthorizationRequired",
    "CredentialsNotFoundError",
    "TokenError",
    "ScopeMismatchError",
]
