"""Flask HTTP service for the letter editor.

Endpoints:
    POST /login        - issue a session token for a signed-in user
    GET  /protected    - echo the session token's claims
    POST /save-letter  - export editor content to Google Docs
    GET  /health       - liveness check
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from flask import Flask, jsonify, request
from flask_cors import CORS

from letter_docs.config import get_cors_origins, get_jwt_secret, get_letter_title
from letter_docs.delta import UnsupportedFormatError
from letter_docs.docs import DocsClient
from letter_docs.drive import DriveClient
from letter_docs.google import AccessTokenAuth
from letter_docs.google.exceptions import TokenError
from letter_docs.letters import LetterExporter, SaveLetterError
from letter_docs.server.auth import bearer_token, issue_session_token, verify_session_token

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], tuple[Any, Any]]


def google_clients(access_token: str) -> tuple[DocsClient, DriveClient]:
    """Docs and Drive clients acting with the caller's Google access token."""
    auth = AccessTokenAuth(access_token)
    return DocsClient(auth=auth), DriveClient(auth=auth)


def create_app(
    jwt_secret: str | None = None,
    cors_origins: list[str] | None = None,
    letter_title: str | None = None,
    client_factory: ClientFactory | None = None,
) -> Flask:
    """Create the Flask application.

    Args:
        jwt_secret: Session token signing secret. Defaults to JWT_SECRET.
        cors_origins: Allowed browser origins. Defaults to CORS_ORIGINS.
        letter_title: Name of exported documents. Defaults to LETTER_TITLE.
        client_factory: Builds (docs, drive) clients from a Google access token.

    Raises:
        ValueError: If no JWT secret is configured.
    """
    secret = jwt_secret or get_jwt_secret()
    if not secret:
        raise ValueError("JWT_SECRET is not set. Add it to your environment or .env file.")

    title = letter_title or get_letter_title()
    make_clients = client_factory or google_clients

    app = Flask(__name__)
    CORS(
        app,
        origins=cors_origins if cors_origins is not None else get_cors_origins(),
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.after_request
    def isolation_headers(response):
        # Google sign-in popups must be able to message the opener
        response.headers["Cross-Origin-Opener-Policy"] = "same-origin-allow-popups"
        response.headers["Cross-Origin-Embedder-Policy"] = "require-corp"
        return response

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "healthy"}), 200

    @app.route("/login", methods=["POST"])
    def login():
        data = request.get_json(silent=True) or {}
        uid = data.get("uid")
        email = data.get("email")

        if not uid or not email:
            return jsonify({"error": "Missing user data"}), 400

        token = issue_session_token(str(uid), str(email), secret)
        logger.info(f"Issued session token for {uid}")
        return jsonify({"token": token, "message": "Login successful"}), 200

    @app.route("/protected", methods=["GET"])
    def protected():
        token = bearer_token(request.headers.get("Authorization"))
        if not token:
            return jsonify({"error": "Unauthorized"}), 401

        try:
            claims = verify_session_token(token, secret)
        except TokenError as e:
            logger.info(f"Rejected session token: {e}")
            return jsonify({"error": "Invalid token"}), 403

        return jsonify({"message": "Protected data", "user": claims}), 200

    @app.route("/save-letter", methods=["POST"])
    def save_letter():
        access_token = bearer_token(request.headers.get("Authorization"))
        if not access_token:
            return jsonify({"error": "Missing authentication token"}), 401

        data = request.get_json(silent=True) or {}
        content = data.get("content")
        if isinstance(content, str):
            try:
                content = json.loads(content)
            except json.JSONDecodeError as e:
                logger.error(f"Error saving letter: content is not valid JSON: {e}")
                return jsonify({"success": False, "error": "Failed to save letter"}), 500
        if not content:
            return jsonify({"error": "Invalid editor content"}), 400

        try:
            docs, drive = make_clients(access_token)
            saved = LetterExporter(docs, drive, title=title).save(content)
        except UnsupportedFormatError as e:
            logger.error(f"Error saving letter: {e}")
            return jsonify({"success": False, "error": "Failed to save letter"}), 500
        except SaveLetterError as e:
            logger.error(f"Error saving letter: {e} (cause: {e.__cause__})")
            return jsonify({"success": False, "error": "Failed to save letter"}), 500
        except Exception as e:
            logger.error(f"Unexpected error saving letter: {e}")
            return jsonify({"success": False, "error": "Failed to save letter"}), 500

        return jsonify({"success": True, "fileId": saved.document_id}), 200

    return app
