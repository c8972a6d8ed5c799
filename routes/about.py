"""About page blueprint."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from werkzeug.exceptions import BadRequest, Forbidden

from models import db
from models.about import AboutPage
from models.user import User
from utils.request_validation import check_optional_types, parse_json_request

about_bp = Blueprint("about", __name__)

ABOUT_SCHEMA = {
    "heroTitle": str,
    "heroDescription": str,
    "mission": str,
    "vision": str,
    "stats": list,
    "stats.*.label": str,
    "stats.*.value": str,
    "sections": list,
    "sections.*.title": str,
    "sections.*.content": str,
    "sections.*.image": str,
}


def _require_admin() -> User:
    user = current_app.extensions["auth_service"].get_profile(get_jwt_identity())
    if not user.is_admin:
        raise Forbidden("Admin privileges required.")
    return user


@about_bp.route("", methods=["GET"])
def get_about():
    """Return the About page content, creating an empty page on first read."""

    about = AboutPage.get_or_create()
    return jsonify({"success": True, "data": about.to_dict()})


@about_bp.route("", methods=["PUT"])
@jwt_required()
def update_about():
    """Update whitelisted About page fields."""

    admin = _require_admin()
    payload = parse_json_request(request)

    errors = check_optional_types(payload, ABOUT_SCHEMA)
    if errors:
        raise BadRequest("; ".join(errors))

    about = AboutPage.get_or_create()
    changed = about.apply_updates(payload)
    db.session.commit()
    current_app.logger.info("About page updated by user %s: %s", admin.id, ", ".join(changed))

    return jsonify({"success": True, "message": "About Page data updated successfully"})
