"""Application factory."""

import logging
import os
import uuid
from datetime import UTC, datetime, timedelta

from flask import Flask, g, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from routes.about import about_bp
from routes.auth import auth_bp
from routes.uploads import files_bp, uploads_bp
from services import (
    AuthError,
    AuthService,
    CredentialStore,
    GoogleIdentityVerifier,
    Mailer,
    PasswordHasher,
    ResetTokenManager,
    TokenIssuer,
)

migrate = Migrate()
jwt = JWTManager()


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get("JWT_SECRET_KEY"):
        raise RuntimeError("JWT_SECRET_KEY must be configured to sign session tokens.")
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    app.extensions["auth_service"] = build_auth_service(app)

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Ensure uploads directory exists
    upload_dir = app.config.get("UPLOAD_DIR")
    if upload_dir:
        os.makedirs(upload_dir, exist_ok=True)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(about_bp, url_prefix="/api/about")
    app.register_blueprint(uploads_bp, url_prefix="/api/uploads")
    app.register_blueprint(files_bp)

    # Health
    @app.route("/", methods=["GET"])
    def index():
        return jsonify(
            {
                "success": True,
                "message": "API is running...",
                "timestamp": datetime.now(UTC).isoformat(),
            }
        )

    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    # Errors
    _register_request_hooks(app)
    _register_jwt_handlers()
    _register_error_handlers(app)

    return app


def build_auth_service(app: Flask) -> AuthService:
    """Construct the authentication services from the app configuration."""

    config = app.config
    store = CredentialStore()
    expires = config.get("JWT_ACCESS_TOKEN_EXPIRES") or timedelta(days=7)
    return AuthService(
        store=store,
        hasher=PasswordHasher(),
        tokens=TokenIssuer(expires),
        federation=GoogleIdentityVerifier(
            config.get("GOOGLE_CLIENT_ID"),
            certs_url=config["GOOGLE_CERTS_URL"],
            timeout=float(config.get("FEDERATION_TIMEOUT", 5)),
        ),
        resets=ResetTokenManager(
            store, ttl=timedelta(minutes=int(config.get("RESET_TOKEN_TTL_MINUTES", 15)))
        ),
        mailer=Mailer.from_config(config),
        reset_url_template=config["PASSWORD_RESET_URL"],
        suppress_enumeration=bool(config.get("AUTH_SUPPRESS_ENUMERATION", False)),
    )


def _error_response(status_code: int, error: str, message: str):
    request_id = g.get("request_id") or str(uuid.uuid4())
    response = jsonify(
        {
            "success": False,
            "error": error,
            "message": message,
            "request_id": request_id,
        }
    )
    response.status_code = status_code
    response.headers.setdefault("X-Request-ID", request_id)
    return response


def _register_request_hooks(app: Flask) -> None:
    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        app.logger.info(
            "%s %s origin=%s request_id=%s",
            request.method,
            request.path,
            request.headers.get("Origin"),
            g.request_id,
        )

    @app.after_request
    def _add_request_id_header(response):
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response


def _register_jwt_handlers() -> None:
    """Render Flask-JWT-Extended failures with the shared error envelope."""

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return _error_response(401, "Unauthorized", reason)

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return _error_response(401, "Unauthorized", reason)

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return _error_response(401, "Unauthorized", "Token has expired")


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.errorhandler(AuthError)
    def _handle_auth_error(error: AuthError):
        if error.status_code >= 500:
            app.logger.error("Authentication failure: %s", error.message)
        return _error_response(int(error.status_code), error.name, error.message)

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        return _error_response(
            error.code or 500, getattr(error, "name", "Error"), error.description
        )

    @app.errorhandler(SQLAlchemyError)
    def _handle_database_error(error: SQLAlchemyError):
        db.session.rollback()
        app.logger.exception("Database error", exc_info=error)
        return _error_response(500, "Internal Server Error", "A database error occurred.")

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):  # pragma: no cover
        app.logger.exception("Unhandled application error", exc_info=error)
        return _error_response(500, "Internal Server Error", "An unexpected error occurred.")


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
