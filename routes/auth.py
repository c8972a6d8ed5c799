"""Authentication blueprint: registration, login, Google sign-in and password resets."""

from __future__ import annotations
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from werkzeug.exceptions import BadRequest

from services.auth_service import AuthService
from utils.request_validation import parse_json_request

auth_bp = Blueprint("auth", __name__)


def _auth_service() -> AuthService:
    return current_app.extensions["auth_service"]


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Register a password account. Any ``type`` sent by the client is ignored."""
    payload = parse_json_request(request)
    if payload.get("type") not in (None, "user", "admin"):
        raise BadRequest('"type" must be one of [user, admin]')

    user = _auth_service().register(
        payload.get("name"), payload.get("email"), payload.get("password")
    )

    return (
        jsonify({"message": "Registration successful", "user": user.to_summary()}),
        HTTPStatus.OK,
    )


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple:
    """Authenticate with email and password and return a session token."""
    payload = parse_json_request(request)
    token, user = _auth_service().login(payload.get("email"), payload.get("password"))

    return (
        jsonify({"message": "Login successful", "token": token, "user": user.to_summary()}),
        HTTPStatus.OK,
    )


@auth_bp.route("/google", methods=["POST"])
def google_login() -> tuple:
    """Sign in with a Google ID token, creating or linking the account."""
    payload = parse_json_request(request, allow_empty=True)
    assertion = payload.get("token")
    if not assertion or not isinstance(assertion, str):
        return jsonify({"success": False, "message": "Token missing"}), HTTPStatus.BAD_REQUEST

    token, user = _auth_service().federated_login(assertion)

    return (
        jsonify(
            {
                "success": True,
                "token": token,
                "user": user.to_public_dict(),
                "message": "Google login successful",
            }
        ),
        HTTPStatus.OK,
    )


@auth_bp.route("/logout", methods=["POST"])
def logout() -> tuple:
    # Tokens are stateless; the client discards its copy.
    return jsonify({"message": "Logged out successfully"}), HTTPStatus.OK


@auth_bp.route("/forgot-password", methods=["POST"])
def forgot_password() -> tuple:
    payload = parse_json_request(request)
    _auth_service().forgot_password(payload.get("email"))
    return jsonify({"message": "Password reset link sent to email"}), HTTPStatus.OK


@auth_bp.route("/reset-password/<token>", methods=["POST"])
def reset_password(token: str) -> tuple:
    payload = parse_json_request(request)
    _auth_service().reset_password(token, payload.get("password"))
    return jsonify({"message": "Password reset successful"}), HTTPStatus.OK


@auth_bp.route("/profile", methods=["GET"])
@jwt_required()
def profile() -> tuple:
    """Return the authenticated user without credentials."""
    user = _auth_service().get_profile(get_jwt_identity())
    return jsonify(user.to_public_dict()), HTTPStatus.OK


@auth_bp.route("/profile", methods=["PATCH"])
@jwt_required()
def update_profile() -> tuple:
    payload = parse_json_request(request)
    user = _auth_service().update_profile(get_jwt_identity(), payload)
    return jsonify({"message": "Profile updated", "user": user.to_public_dict()}), HTTPStatus.OK


@auth_bp.route("/change-password", methods=["POST"])
@jwt_required()
def change_password() -> tuple:
    payload = parse_json_request(request)
    _auth_service().change_password(
        get_jwt_identity(), payload.get("currentPassword"), payload.get("newPassword")
    )
    return jsonify({"message": "Password changed successfully"}), HTTPStatus.OK
