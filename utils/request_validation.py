"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

from typing import Iterable, Mapping

from flask import Request
from werkzeug.exceptions import BadRequest

_TYPE_NAMES = {str: "a string", list: "an array", dict: "an object", bool: "a boolean"}


def parse_json_request(
    req: Request,
    *,
    required_keys: Iterable[str] | None = None,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise BadRequest("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request JSON body is required.")

    if not isinstance(data, dict):
        raise BadRequest("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise BadRequest("Request JSON body must not be empty.")

    if required_keys:
        missing = [key for key in required_keys if not data.get(key)]
        if missing:
            raise BadRequest(
                "Missing required fields: {}.".format(", ".join(sorted(missing)))
            )

    return data


def check_optional_types(data: Mapping, schema: Mapping[str, type]) -> list[str]:
    """Return error messages for keys present in ``data`` with the wrong type.

    Keys may use ``parent.*.child`` to check every item of a list field.
    """

    errors: list[str] = []
    for path, expected in schema.items():
        head, _, rest = path.partition(".*.")
        if not rest:
            value = data.get(head)
            if value is not None and not isinstance(value, expected):
                errors.append(f"{head} must be {_TYPE_NAMES.get(expected, expected.__name__)}")
            continue

        items = data.get(head)
        if not isinstance(items, list):
            continue
        for item in items:
            if not isinstance(item, dict):
                errors.append(f"{head} entries must be objects")
                break
            value = item.get(rest)
            if value is not None and not isinstance(value, expected):
                errors.append(
                    f"{head}.{rest} must be {_TYPE_NAMES.get(expected, expected.__name__)}"
                )
                break
    return errors
