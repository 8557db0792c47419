"""
Response envelope helpers shared by all JSON blueprints.

Success:  {"success": true, "data": ...}
Failure:  {"success": false, "message": "...", "errors": {...}}
"""
from flask import jsonify

from app.validation import format_validation_error
from app.validation.schemas import MAX_DB_INT


def success_response(data=None, status=200, message=None):
    body = {'success': True, 'data': data}
    if message:
        body['message'] = message
    return jsonify(body), status


def error_response(message, status=400, errors=None):
    body = {'success': False, 'message': message}
    if errors:
        body['errors'] = errors
    return jsonify(body), status


def validation_error_response(error):
    """400 response for a marshmallow ValidationError."""
    return error_response(format_validation_error(error), 400, errors=error.messages)


def parse_id(raw_id):
    """
    Parse a positive integer path id.

    Returns:
        The id as int, or None when it is not a positive integer that
        fits an INTEGER column
    """
    try:
        value = int(str(raw_id).strip())
    except (TypeError, ValueError):
        return None
    return value if 0 < value <= MAX_DB_INT else None
