"""Centralized configuration.

Credentials and local state live in the letter-docs repo root:
    .env                     - JWT_SECRET, PORT, CORS_ORIGINS, LETTER_TITLE
    google/credentials.json  - Google OAuth client credentials
    google/token.json        - Google OAuth tokens
    drafts.json              - Saved letter drafts

This module auto-loads the .env file on import, so settings are available to
the CLI, the HTTP service and anything else that imports letter_docs.
"""

import os
from pathlib import Path

# Repository root (where this package is installed from)
# __file__ is src/letter_docs/config.py, so 3 levels up
REPO_ROOT = Path(__file__).parent.parent.parent
GOOGLE_DIR = REPO_ROOT / "google"

# Credential and state file paths
ENV_FILE = REPO_ROOT / ".env"
GOOGLE_CREDENTIALS = GOOGLE_DIR / "credentials.json"
GOOGLE_TOKEN = GOOGLE_DIR / "token.json"
DEFAULT_DRAFTS_FILE = REPO_ROOT / "drafts.json"

DEFAULT_PORT = 5000
DEFAULT_CORS_ORIGINS = "http://localhost:3000,https://letter-editor.netlify.app"
DEFAULT_LETTER_TITLE = "My Styled Letter"
JWT_EXPIRES_IN = 3600


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of loaded variables.
    """
    loaded = {}
    if not env_path.exists():
        return loaded

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            # Remove surrounding quotes
            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            # Only set if not already in environment (env vars take precedence)
            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


def split_origins(origins: str | None) -> list[str]:
    """Parse a comma-separated origin list."""
    if not origins:
        return []
    return [o.strip() for o in origins.split(",") if o.strip()]


def get_jwt_secret() -> str:
    """Secret used to sign session tokens (empty if unset)."""
    return os.environ.get("JWT_SECRET", "")


def get_port() -> int:
    """Port for the HTTP service."""
    return int(os.environ.get("PORT") or DEFAULT_PORT)


def get_cors_origins() -> list[str]:
    """Origins allowed to call the HTTP service."""
    return split_origins(os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS))


def get_letter_title() -> str:
    """Name given to exported documents."""
    return os.environ.get("LETTER_TITLE") or DEFAULT_LETTER_TITLE


def get_drafts_file() -> Path:
    """Location of the draft store."""
    path = os.environ.get("DRAFTS_FILE")
    return Path(path).expanduser() if path else DEFAULT_DRAFTS_FILE


def ensure_google_dir() -> Path:
    """Create google credentials directory if it doesn't exist.

    Returns:
        Path to google directory.
    """
    GOOGLE_DIR.mkdir(parents=True, exist_ok=True)
    return GOOGLE_DIR


def get_credential_status() -> dict:
    """Get status of all configured credentials.

    Returns:
        Dictionary with credential status.
    """
    return {
        "repo_root": str(REPO_ROOT),
        "env_file": ENV_FILE.exists(),
        "server": {
            "jwt_secret": bool(get_jwt_secret()),
            "port": get_port(),
            "cors_origins": get_cors_origins(),
        },
        "google": {
            "credentials": GOOGLE_CREDENTIALS.exists(),
            "token": GOOGLE_TOKEN.exists(),
        },
        "drafts": {
            "path": str(get_drafts_file()),
            "exists": get_drafts_file().exists(),
        },
    }


# Auto-load .env from repo root on import
_loaded = _load_env_file(ENV_FILE)
