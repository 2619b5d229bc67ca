"""CLI for letter-docs.

Usage:
    letter-docs init                         # Create directories, show setup instructions
    letter-docs status                       # Show credential and settings status
    letter-docs google login                 # Interactive OAuth login
    letter-docs google status                # Show OAuth token status
    letter-docs google refresh               # Refresh OAuth token
    letter-docs google revoke                # Revoke OAuth token
    letter-docs google import <path>         # Import OAuth credentials
    letter-docs translate <file>             # Print batchUpdate requests for editor content
    letter-docs save <file> [--title T]      # Export editor content to Google Docs
    letter-docs drafts list                  # List saved drafts
    letter-docs drafts show <id>             # Print a draft's content
    letter-docs drafts save <file> [--id N]  # Save or update a draft
    letter-docs drafts delete <id>           # Delete a draft
    letter-docs drafts export <id>           # Export a draft to Google Docs
    letter-docs serve [--host H] [--port P]  # Run the HTTP service
"""

from __future__ import annotations

import argparse
import json
import logging
import shutil
import sys
import webbrowser
from pathlib import Path
from typing import Any


def cmd_init() -> int:
    """Initialize letter-docs credential directory structure."""
    from letter_docs.config import (
        ENV_FILE,
        GOOGLE_CREDENTIALS,
        GOOGLE_DIR,
        GOOGLE_TOKEN,
        REPO_ROOT,
        ensure_google_dir,
    )

    print("=" * 60)
    print("LETTER-DOCS SETUP")
    print("=" * 60)
    print()
    print(f"Repository: {REPO_ROOT}")
    print()

    ensure_google_dir()
    print(f"Created: {GOOGLE_DIR}/")
    print()

    print("Credential locations:")
    print()
    print(f"  {ENV_FILE}")
    print("    Settings: JWT_SECRET, PORT, CORS_ORIGINS, LETTER_TITLE, DRAFTS_FILE")
    print()
    print(f"  {GOOGLE_CREDENTIALS}")
    print("    OAuth client credentials from Google Cloud Console")
    print()
    print(f"  {GOOGLE_TOKEN}")
    print("    OAuth tokens (created by 'letter-docs google login')")
    print()
    print("-" * 60)
    print()

    status = _check_status()

    if status["env_file"]:
        print(".env exists")
    else:
        print("Create .env with your settings:")
        print()
        print(f"  cat > {ENV_FILE} << 'EOF'")
        print("  JWT_SECRET=change-me")
        print("  PORT=5000")
        print("  EOF")
        print()

    if status["google"]["credentials"]:
        print("Google credentials.json exists")
    else:
        print("For Google OAuth, download credentials from:")
        print("  https://console.cloud.google.com/apis/credentials")
        print(f"  Save as: {GOOGLE_CREDENTIALS}")
        print()

    return 0


def cmd_status() -> int:
    """Show status of credentials and settings."""
    from letter_docs.config import REPO_ROOT

    status = _check_status()

    print("=" * 60)
    print("LETTER-DOCS STATUS")
    print("=" * 60)
    print()
    print(f"Repository: {REPO_ROOT}")
    print()

    print("Server:")
    print(f"  JWT secret:   {'[x]' if status['server']['jwt_secret'] else '[ ]'}")
    print(f"  Port:         {status['server']['port']}")
    print(f"  CORS origins: {', '.join(status['server']['cors_origins']) or '(none)'}")
    print()

    print("Google:")
    print(f"  credentials.json: {'[x]' if status['google']['credentials'] else '[ ]'}")
    print(f"  token.json:       {'[x]' if status['google']['token'] else '[ ]'}")
    print()

    print("Drafts:")
    print(f"  {status['drafts']['path']} {'[x]' if status['drafts']['exists'] else '[ ]'}")
    print()

    return 0


def _check_status() -> dict:
    """Get credential status."""
    from letter_docs.config import get_credential_status

    return get_credential_status()


# =============================================================================
# Google OAuth
# =============================================================================


def google_login(scopes: list[str], no_browser: bool = False) -> int:
    """Interactive Google OAuth login."""
    from letter_docs.google import CredentialsNotFoundError, GoogleOAuth

    print("=" * 60)
    print("LETTER-DOCS GOOGLE LOGIN")
    print("=" * 60)

    try:
        auth = GoogleOAuth(scopes=scopes)
    except CredentialsNotFoundError as e:
        print(f"\nError: {e}")
        print("Run 'letter-docs init' for setup instructions")
        return 1

    info = auth.get_token_info()
    if auth.is_authorized() and info["status"] == "valid":
        print("\nAlready authorized with valid token")
        return google_status(scopes)

    if info["status"] == "expired":
        print("\nToken expired, attempting refresh...")
        try:
            auth.get_credentials()
            if auth.get_token_info()["status"] == "valid":
                print("Token refreshed successfully!")
                return google_status(scopes)
        except Exception as e:
            print(f"Refresh failed: {e}")
            print("Starting new authorization flow...")

    print(f"\nScopes: {', '.join(scopes)}")
    print("\nA browser window will open for Google consent.")
    print("After granting access, copy the redirect URL back here.\n")

    url = auth.get_authorization_url()
    print(f"Authorization URL:\n{url}\n")

    if not no_browser:
        webbrowser.open(url)

    redirect_url = input("Paste redirect URL: ").strip()
    if not redirect_url:
        print("No URL provided; aborting.")
        return 1

    try:
        auth.fetch_token(redirect_url)
        print("\nToken saved successfully!")
        return google_status(scopes)
    except Exception as e:
        print(f"\nError: {e}")
        return 1


def google_status(scopes: list[str]) -> int:
    """Show Google OAuth token status."""
    from letter_docs.google import CredentialsNotFoundError, GoogleOAuth

    try:
        auth = GoogleOAuth(scopes=scopes)
    except CredentialsNotFoundError as e:
        print(f"Error: {e}")
        print("Run 'letter-docs init' for setup instructions")
        return 1

    info = auth.get_token_info()

    if info["status"] == "no_token":
        print("No token found - run 'letter-docs google login'")
        return 1

    print(f"Status     : {info['status']}")
    print(f"Scopes     : {', '.join(info.get('scopes', []))}")
    print(f"Expires in : {info.get('expires_in', 'unknown')}")
    print(f"Refreshed  : {info.get('last_refresh') or 'never'}")
    return 0


def google_refresh(scopes: list[str]) -> int:
    """Refresh Google OAuth token."""
    from letter_docs.google import CredentialsNotFoundError, GoogleOAuth, TokenError

    try:
        auth = GoogleOAuth(scopes=scopes)
    except CredentialsNotFoundError as e:
        print(f"Error: {e}")
        print("Run 'letter-docs init' for setup instructions")
        return 1

    if not auth.is_authorized():
        print("No valid token - run 'letter-docs google login'")
        return 1

    try:
        auth.get_credentials()
        print("Token refreshed successfully!")
        return google_status(scopes)
    except TokenError as e:
        print(f"Refresh failed: {e}")
        print("You may need to re-authenticate: letter-docs google login")
        return 1


def google_revoke(scopes: list[str]) -> int:
    """Revoke Google OAuth token."""
    from letter_docs.google import CredentialsNotFoundError, GoogleOAuth

    try:
        auth = GoogleOAuth(scopes=scopes)
    except CredentialsNotFoundError:
        print("No credentials to revoke")
        return 0

    auth.revoke_token()
    print("Token revoked and local cache cleared")
    return 0


def google_import(source_path: str) -> int:
    """Import OAuth credentials from a file."""
    from letter_docs.config import GOOGLE_CREDENTIALS, ensure_google_dir

    source = Path(source_path).expanduser()

    if not source.exists():
        print(f"Error: File not found: {source}")
        return 1

    try:
        with open(source) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}")
        return 1

    key = "installed" if "installed" in data else "web" if "web" in data else None
    if key is None:
        print("Error: Invalid OAuth credentials format")
        print("Expected 'installed' or 'web' key in JSON")
        return 1

    ensure_google_dir()
    shutil.copy2(source, GOOGLE_CREDENTIALS)

    client_id = data[key].get("client_id", "unknown")
    print("Imported OAuth credentials")
    print(f"  From: {source}")
    print(f"  To:   {GOOGLE_CREDENTIALS}")
    print(f"  Client ID: {client_id[:40]}...")
    print()
    print("Next: Run 'letter-docs google login' to authorize")
    return 0


# =============================================================================
# Letters
# =============================================================================


def _read_content(path: str) -> Any:
    """Load editor content JSON from a file, or stdin for '-'."""
    if path == "-":
        return json.load(sys.stdin)
    with open(Path(path).expanduser()) as f:
        return json.load(f)


def cmd_translate(path: str) -> int:
    """Print the batchUpdate requests for editor content."""
    from letter_docs.delta import UnsupportedFormatError, build_requests

    try:
        requests = build_requests(_read_content(path))
    except (OSError, json.JSONDecodeError, UnsupportedFormatError) as e:
        print(f"Error: {e}")
        return 1

    print(json.dumps({"requests": requests}, indent=2, ensure_ascii=False))
    return 0


def _export(content: Any, title: str | None) -> int:
    """Export content with the stored OAuth token."""
    from letter_docs.delta import UnsupportedFormatError
    from letter_docs.docs import DocsClient
    from letter_docs.drive import DriveClient
    from letter_docs.google import GoogleAuthError
    from letter_docs.letters import LetterExporter, SaveLetterError

    exporter = LetterExporter(DocsClient(), DriveClient(), title=title)
    try:
        saved = exporter.save(content)
    except UnsupportedFormatError as e:
        print(f"Error: {e}")
        return 1
    except SaveLetterError as e:
        print(f"Error: {e}: {e.__cause__}")
        if isinstance(e.__cause__, GoogleAuthError):
            print("Run 'letter-docs google login' to authorize")
        return 1

    print(f"Saved '{saved.title}' ({saved.request_count} requests)")
    print(f"  {saved.url}")
    return 0


def cmd_save(path: str, title: str | None) -> int:
    """Export editor content from a file."""
    try:
        content = _read_content(path)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}")
        return 1
    return _export(content, title)


# =============================================================================
# Drafts
# =============================================================================


def _draft_store():
    from letter_docs.config import get_drafts_file
    from letter_docs.drafts import DraftStore

    return DraftStore(get_drafts_file())


def drafts_list() -> int:
    """List saved drafts."""
    from letter_docs.drafts import preview

    drafts = _draft_store().list()
    if not drafts:
        print("No drafts saved")
        return 0

    for draft in drafts:
        if not isinstance(draft, dict):
            continue
        print(f"{draft.get('id')}  {draft.get('timestamp', '')}  {preview(draft)}...")
    return 0


def drafts_show(draft_id: int) -> int:
    """Print a draft's content."""
    draft = _draft_store().get(draft_id)
    if draft is None:
        print(f"Error: No draft with id {draft_id}")
        return 1

    print(json.dumps(draft.get("content"), indent=2, ensure_ascii=False))
    return 0


def drafts_save(path: str, draft_id: int | None) -> int:
    """Save editor content as a draft."""
    from letter_docs.drafts import EmptyDraftError

    try:
        content = _read_content(path)
        draft = _draft_store().save(content, draft_id=draft_id)
    except (OSError, json.JSONDecodeError, EmptyDraftError) as e:
        print(f"Error: {e}")
        return 1

    print(f"{'Draft updated' if draft_id is not None else 'Draft saved'}: {draft['id']}")
    return 0


def drafts_delete(draft_id: int) -> int:
    """Delete a draft."""
    if not _draft_store().delete(draft_id):
        print(f"Error: No draft with id {draft_id}")
        return 1

    print(f"Deleted draft {draft_id}")
    return 0


def drafts_export(draft_id: int, title: str | None) -> int:
    """Export a saved draft to Google Docs."""
    draft = _draft_store().get(draft_id)
    if draft is None:
        print(f"Error: No draft with id {draft_id}")
        return 1
    return _export(draft.get("content"), title)


# =============================================================================
# Server
# =============================================================================


def cmd_serve(host: str, port: int | None, debug: bool = False) -> int:
    """Run the HTTP service."""
    from letter_docs.config import get_port
    from letter_docs.server import create_app

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    try:
        app = create_app()
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    app.run(host=host, port=port or get_port(), debug=debug)
    return 0


def parse_scopes(scope_str: str | None) -> list[str]:
    """Parse comma-separated scopes."""
    if not scope_str:
        return ["docs", "drive_file"]
    return [s.strip() for s in scope_str.split(",")]


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="letter-docs",
        description="Export rich-text letters to formatted Google Docs",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("init", help="Initialize credential directories")
    subparsers.add_parser("status", help="Show credential and settings status")

    # Google subcommand
    google_parser = subparsers.add_parser("google", help="Google OAuth management")
    google_subparsers = google_parser.add_subparsers(dest="google_command", help="Command")

    login_parser = google_subparsers.add_parser("login", help="Interactive OAuth login")
    login_parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Don't open browser automatically",
    )
    google_subparsers.add_parser("status", help="Show token status")
    google_subparsers.add_parser("refresh", help="Refresh token")
    google_subparsers.add_parser("revoke", help="Revoke token")

    for name in ("login", "status", "refresh", "revoke"):
        google_subparsers.choices[name].add_argument(
            "--scopes",
            type=str,
            default="docs,drive_file",
            help="Comma-separated scopes (default: docs,drive_file)",
        )

    import_parser = google_subparsers.add_parser("import", help="Import OAuth credentials")
    import_parser.add_argument("path", help="Path to credentials.json file")

    # Letters
    translate_parser = subparsers.add_parser(
        "translate", help="Print batchUpdate requests for editor content"
    )
    translate_parser.add_argument("path", help="Editor content JSON file ('-' for stdin)")

    save_parser = subparsers.add_parser("save", help="Export editor content to Google Docs")
    save_parser.add_argument("path", help="Editor content JSON file ('-' for stdin)")
    save_parser.add_argument("--title", type=str, default=None, help="Document name")

    # Drafts
    drafts_parser = subparsers.add_parser("drafts", help="Manage saved drafts")
    drafts_subparsers = drafts_parser.add_subparsers(dest="drafts_command", help="Command")

    drafts_subparsers.add_parser("list", help="List drafts")

    show_parser = drafts_subparsers.add_parser("show", help="Print a draft")
    show_parser.add_argument("id", type=int, help="Draft id")

    draft_save_parser = drafts_subparsers.add_parser("save", help="Save or update a draft")
    draft_save_parser.add_argument("path", help="Editor content JSON file ('-' for stdin)")
    draft_save_parser.add_argument("--id", type=int, default=None, help="Draft to overwrite")

    delete_parser = drafts_subparsers.add_parser("delete", help="Delete a draft")
    delete_parser.add_argument("id", type=int, help="Draft id")

    export_parser = drafts_subparsers.add_parser("export", help="Export a draft to Google Docs")
    export_parser.add_argument("id", type=int, help="Draft id")
    export_parser.add_argument("--title", type=str, default=None, help="Document name")

    # Server
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument("--host", type=str, default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: PORT)")
    serve_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")

    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "init":
        return cmd_init()

    if args.command == "status":
        return cmd_status()

    if args.command == "google":
        scopes = parse_scopes(getattr(args, "scopes", None))

        if args.google_command == "login":
            return google_login(scopes, args.no_browser)
        elif args.google_command == "status":
            return google_status(scopes)
        elif args.google_command == "refresh":
            return google_refresh(scopes)
        elif args.google_command == "revoke":
            return google_revoke(scopes)
        elif args.google_command == "import":
            return google_import(args.path)
        else:
            google_parser.print_help()
            return 0

    if args.command == "translate":
        return cmd_translate(args.path)

    if args.command == "save":
        return cmd_save(args.path, args.title)

    if args.command == "drafts":
        if args.drafts_command == "list":
            return drafts_list()
        elif args.drafts_command == "show":
            return drafts_show(args.id)
        elif args.drafts_command == "save":
            return drafts_save(args.path, args.id)
        elif args.drafts_command == "delete":
            return drafts_delete(args.id)
        elif args.drafts_command == "export":
            return drafts_export(args.id, args.title)
        else:
            drafts_parser.print_help()
            return 0

    if args.command == "serve":
        return cmd_serve(args.host, args.port, args.debug)

    return 0


if __name__ == "__main__":
    sys.exit(main())
