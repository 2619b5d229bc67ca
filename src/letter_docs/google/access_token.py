"""Delegated bearer-token authentication.

The HTTP service receives the signed-in user's Google access token in the
``Authorization`` header and uses it as-is to call Docs and Drive. The token
is opaque here: it is never validated locally, Google rejects it if it is
expired or lacks the required scopes.
"""

import logging

from google.oauth2.credentials import Credentials as GoogleCredentials
from googleapiclient.discovery import build

from letter_docs.google.exceptions import TokenError

logger = logging.getLogger(__name__)


class AccessTokenAuth:
    """Build Google API services from a caller-supplied access token.

    Example:
        >>> auth = AccessTokenAuth("ya29....")
        >>> docs_service = auth.build_service("docs", "v1")
    """

    def __init__(self, access_token: str | None):
        """Initialize with a bearer access token.

        Raises:
            TokenError: If the token is missing or blank.
        """
        if not access_token or not access_token.strip():
            raise TokenError("Missing authentication token")
        self._access_token = access_token.strip()

    def is_authorized(self) -> bool:
        return True

    def get_authorization_url(self) -> str:
        # Consent happens in the browser, never through this object
        raise TokenError("Bearer access tokens cannot start an authorization flow")

    def get_credentials(self) -> GoogleCredentials:
        """Wrap the token in google-auth credentials (no refresh possible)."""
        return GoogleCredentials(token=self._access_token)

    def build_service(self, service_name: str = "docs", version: str = "v1"):
        """Build a Google API service with the delegated token."""
        logger.debug(f"Building {service_name} {version} service from bearer token")
        return build(service_name, version, credentials=self.get_credentials())
