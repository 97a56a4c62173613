"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .core.constants import DEFAULT_TOURNAMENT_ID
from .extensions import csrf
from .tournament.utils import parse_seed


def _load_firebase_credentials(app):
    """Find Firebase credentials: env var, then local file, then defaults."""
    cred = None
    project_id = None

    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id")
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # If env var fails or is not present, try loading from file (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            try:
                with open(cred_path, "r") as f:
                    cred_info = json.load(f)
                project_id = cred_info.get("project_id")
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    # If both methods fail, fallback to default credentials
    if not cred:
        try:
            cred = credentials.ApplicationDefault()
            project_id = os.environ.get("FIREBASE_PROJECT_ID")
        except Exception as e:
            app.logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )

    return cred, project_id


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        TOURNAMENT_ID=os.environ.get("TOURNAMENT_ID") or DEFAULT_TOURNAMENT_ID,
        TOURNAMENT_SEED=parse_seed(os.environ.get("TOURNAMENT_SEED")),
        FIREBASE_PROJECT_ID=os.environ.get("FIREBASE_PROJECT_ID"),
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        cred, project_id = _load_firebase_credentials(app)

        if cred and not firebase_admin._apps:
            try:
                options = {"projectId": project_id} if project_id else None
                firebase_admin.initialize_app(cred, options)
            except ValueError:
                # This can happen if the app is already initialized, which is fine.
                app.logger.info("Firebase app already initialized.")

    # Initialize extensions
    csrf.init_app(app)

    # Register blueprints
    from . import tournament as tournament_bp

    csrf.exempt(tournament_bp.bp)
    app.register_blueprint(tournament_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    app.logger.info(f"Serving tournament '{app.config['TOURNAMENT_ID']}'")

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
