"""Google OAuth for the letter-docs CLI using Authlib.

The CLI exports letters on behalf of the person running it, so it keeps a
stored, refreshable OAuth token:
    google/credentials.json - OAuth client credentials (installed or web app)
    google/token.json       - OAuth tokens, in Google's authorized-user format

The token file is written in the format ``google.oauth2.credentials`` reads,
so other Google tooling can reuse it.
"""

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from authlib.integrations.requests_client import OAuth2Session
from authlib.oauth2 import OAuth2Error
from google.oauth2.credentials import Credentials as GoogleCredentials
from googleapiclient.discovery import build

from letter_docs.config import GOOGLE_CREDENTIALS, GOOGLE_TOKEN
from letter_docs.google.exceptions import (
    CredentialsNotFoundError,
    GoogleAuthError,
    ScopeMismatchError,
    TokenError,
)

logger = logging.getLogger(__name__)


# Scopes used when exporting letters
SCOPES = {
    "docs": "https://www.googleapis.com/auth/documents",
    "docs_readonly": "https://www.googleapis.com/auth/documents.readonly",
    "drive": "https://www.googleapis.com/auth/drive",
    "drive_readonly": "https://www.googleapis.com/auth/drive.readonly",
    "drive_file": "https://www.googleapis.com/auth/drive.file",
}

DEFAULT_SCOPES = ["docs", "drive_file"]


def resolve_scopes(scopes: list[str]) -> list[str]:
    """Resolve scope names (e.g. "docs") to full scope URLs."""
    resolved = []
    for scope in scopes:
        if scope.startswith("https://"):
            resolved.append(scope)
        elif scope in SCOPES:
            resolved.append(SCOPES[scope])
        else:
            raise ValueError(
                f"Unknown scope: {scope}. Use full URL or one of: {list(SCOPES.keys())}"
            )
    return resolved


def _parse_expiry(expiry: Any) -> float | None:
    """Convert a stored expiry (ISO string or timestamp) to a timestamp."""
    if expiry and isinstance(expiry, str):
        return datetime.fromisoformat(expiry.replace("Z", "+00:00")).timestamp()
    return expiry


class GoogleOAuth:
    """Stored-token Google OAuth.

    Handles the consent flow, token storage and refresh, and builds
    googleapiclient services for the Docs and Drive clients.

    Example:
        >>> auth = GoogleOAuth(scopes=["docs", "drive_file"])
        >>> if not auth.is_authorized():
        ...     print(f"Visit: {auth.get_authorization_url()}")
        ...     auth.fetch_token(input("Paste redirect URL: "))
        >>> docs_service = auth.build_service("docs", "v1")
    """

    AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    REVOKE_URL = "https://oauth2.googleapis.com/revoke"

    def __init__(
        self,
        scopes: list[str] | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        token_path: str | Path | None = None,
        credentials_path: str | Path | None = None,
    ):
        """Initialize Google OAuth.

        Args:
            scopes: Scope names (e.g., ["docs", "drive_file"]) or full URLs.
                   Defaults to ["docs", "drive_file"].
            client_id: OAuth client ID (loaded from credentials file if not provided).
            client_secret: OAuth client secret (loaded from credentials file if not provided).
            token_path: Token file. Defaults to google/token.json in the repo root.
            credentials_path: OAuth client file. Defaults to google/credentials.json.
        """
        self.token_path = Path(token_path) if token_path else GOOGLE_TOKEN
        self.credentials_path = Path(credentials_path) if credentials_path else GOOGLE_CREDENTIALS
        self.required_scopes = resolve_scopes(scopes or DEFAULT_SCOPES)

        if not client_id or not client_secret:
            client_id, client_secret = self._load_client_credentials()

        self.client_id = client_id
        self.client_secret = client_secret

        self.session = OAuth2Session(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=" ".join(self.required_scopes),
            redirect_uri="http://localhost:0",
            token=self._load_token(),
            update_token=self._save_token,
            token_endpoint=self.TOKEN_URL,
            grant_type="refresh_token",
            token_endpoint_auth_method="client_secret_post",
        )

        self._state: str | None = None
        self.last_refresh: datetime | None = None
        self.refresh_count = 0

    def _load_client_credentials(self) -> tuple[str, str]:
        """Load OAuth client credentials from file."""
        if not self.credentials_path.exists():
            raise CredentialsNotFoundError(str(self.credentials_path))

        with open(self.credentials_path) as f:
            creds = json.load(f)

        app_creds = creds.get("installed") or creds.get("web")
        if not app_creds:
            raise GoogleAuthError(
                "Invalid credentials.json format. Expected 'installed' or 'web' key."
            )

        return app_creds["client_id"], app_creds["client_secret"]

    def _load_token(self) -> dict[str, Any] | None:
        """Load a stored token, or None if absent, unreadable or under-scoped."""
        if not self.token_path.exists():
            logger.info("No existing token found")
            return None

        try:
            with open(self.token_path) as f:
                stored = json.load(f)

            granted = set(stored.get("scopes", []))
            missing = set(self.required_scopes) - granted
            if missing:
                logger.warning(f"Token missing required scopes: {missing}")
                return None

            logger.info(f"Loaded token with scopes: {granted}")
            return {
                "access_token": stored.get("token"),
                "refresh_token": stored.get("refresh_token"),
                "token_type": stored.get("type", "Bearer"),
                "expires_at": _parse_expiry(stored.get("expiry")),
                "scope": " ".join(stored.get("scopes", [])),
            }

        except (OSError, ValueError) as e:
            logger.error(f"Failed to load token: {e}")
            return None

    def _save_token(
        self,
        token: dict[str, Any],
        refresh_token: str | None = None,
        access_token: str | None = None,
    ):
        """Persist a token (also the Authlib update_token callback)."""
        if access_token:
            token["access_token"] = access_token
        if refresh_token:
            token["refresh_token"] = refresh_token

        granted = set(token.get("scope", "").split())
        missing = set(self.required_scopes) - granted
        if missing:
            raise ScopeMismatchError(missing)

        stored = {
            "token": token["access_token"],
            "refresh_token": token.get("refresh_token"),
            "token_uri": self.TOKEN_URL,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scopes": sorted(granted),
            "type": token.get("token_type", "Bearer"),
            "expiry": token.get("expires_at"),
        }

        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.token_path, "w") as f:
            json.dump(stored, f, indent=2)

        self.last_refresh = datetime.now()
        self.refresh_count += 1

        logger.info(f"Token saved with scopes: {granted}")

    def is_authorized(self) -> bool:
        """Check for a token carrying every required scope."""
        if not self.session.token:
            return False

        granted = set(self.session.token.get("scope", "").split())
        return set(self.required_scopes).issubset(granted)

    def get_authorization_url(self) -> str:
        """Start the consent flow.

        Returns:
            Authorization URL for the user to visit.
        """
        authorization_url, state = self.session.create_authorization_url(
            self.AUTHORIZE_URL,
            access_type="offline",
            prompt="consent",
            include_granted_scopes="true",
        )

        self._state = state
        return authorization_url

    def fetch_token(self, authorization_response: str) -> dict[str, Any]:
        """Complete the consent flow from the redirect URL and store the token."""
        token = self.session.fetch_token(
            self.TOKEN_URL,
            authorization_response=authorization_response,
            client_secret=self.client_secret,
        )

        self._save_token(token)
        return token

    def get_credentials(self) -> GoogleCredentials:
        """Get google-auth credentials, refreshing an expired token first.

        Raises:
            TokenError: If not authorized or token refresh fails.
        """
        if not self.is_authorized():
            raise TokenError("Not authorized or missing required scopes")

        expires_at = self.session.token.get("expires_at", 0)
        if expires_at and expires_at < datetime.now().timestamp():
            logger.info("Token expired, refreshing...")
            try:
                self.session.refresh_token(
                    self.TOKEN_URL,
                    refresh_token=self.session.token.get("refresh_token"),
                )
            except OAuth2Error as e:
                raise TokenError(f"Failed to refresh token: {e}") from e

        return GoogleCredentials(
            token=self.session.token["access_token"],
            refresh_token=self.session.token.get("refresh_token"),
            token_uri=self.TOKEN_URL,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=self.required_scopes,
        )

    def build_service(self, service_name: str = "docs", version: str = "v1"):
        """Build a Google API service ("docs"/"v1" or "drive"/"v3")."""
        return build(service_name, version, credentials=self.get_credentials())

    def revoke_token(self):
        """Revoke the current token and delete the token file."""
        if not self.session.token:
            logger.warning("No token to revoke")
            return

        try:
            self.session.post(
                self.REVOKE_URL,
                params={"token": self.session.token["access_token"]},
            )
        except Exception as e:
            logger.warning(f"Failed to revoke token remotely: {e}")

        if self.token_path.exists():
            self.token_path.unlink()

        logger.info("Token revoked successfully")

    def get_token_info(self) -> dict[str, Any]:
        """Describe the current token: status, scopes, expiry."""
        if not self.session.token:
            return {"status": "no_token"}

        token = self.session.token
        expires_at = token.get("expires_at", 0)
        now = datetime.now().timestamp()

        if expires_at:
            expires_str = str(timedelta(seconds=max(0, int(expires_at - now))))
            is_expired = expires_at < now
        else:
            expires_str = "unknown"
            is_expired = False

        return {
            "status": "expired" if is_expired else "valid",
            "scopes": token.get("scope", "").split(),
            "expires_in": expires_str,
            "has_refresh_token": bool(token.get("refresh_token")),
            "refresh_count": self.refresh_count,
            "last_refresh": self.last_refresh.isoformat() if self.last_refresh else None,
        }
