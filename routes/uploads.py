"""File upload blueprint."""

from __future__ import annotations

import os
from pathlib import Path

from flask import Blueprint, current_app, jsonify, request, send_from_directory, url_for
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import BadRequest, NotFound, RequestEntityTooLarge

from storage.local_storage import LocalStorage

uploads_bp = Blueprint("uploads", __name__)
files_bp = Blueprint("files", __name__)

MAX_UPLOAD_SIZE_DEFAULT = 10 * 1024 * 1024  # 10 MB
ALLOWED_MIMETYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/pdf",
}


def _storage() -> LocalStorage:
    return LocalStorage(current_app.config["UPLOAD_DIR"])


def _validate_upload(file: FileStorage) -> int:
    if file.filename is None or file.filename.strip() == "":
        raise BadRequest("No file uploaded")

    if file.mimetype not in ALLOWED_MIMETYPES:
        raise BadRequest("Invalid file type. Only images and PDFs are allowed.")

    max_size = int(current_app.config.get("MAX_UPLOAD_SIZE", MAX_UPLOAD_SIZE_DEFAULT))
    file.stream.seek(0, os.SEEK_END)
    size = file.stream.tell()
    file.stream.seek(0)
    if size > max_size:
        raise RequestEntityTooLarge("File exceeds the maximum upload size of 10MB.")
    return size


@uploads_bp.route("", methods=["POST"])
def upload_file():
    """Store an uploaded image or PDF and return its public URL."""

    file = request.files.get("file")
    if not isinstance(file, FileStorage):
        raise BadRequest("No file uploaded")

    size = _validate_upload(file)
    try:
        stored_name = _storage().save(file, file.filename)
    except ValueError as exc:
        raise BadRequest(str(exc)) from exc

    current_app.logger.info("Stored upload %s (%d bytes)", stored_name, size)
    return jsonify(
        {
            "success": True,
            "file": {
                "filename": stored_name,
                "originalname": file.filename,
                "mimetype": file.mimetype,
                "size": size,
                "url": url_for("files.serve_upload", filename=stored_name, _external=True),
            },
        }
    )


@files_bp.route("/uploads/<path:filename>", methods=["GET"])
def serve_upload(filename: str):
    storage = _storage()
    if not storage.exists(filename):
        raise NotFound("File not found.")
    return send_from_directory(Path(storage.base_directory).resolve(), filename)
