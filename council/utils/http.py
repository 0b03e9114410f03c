from flask import jsonify, request

from council.extensions import db


def json_error(message, code=400):
    return jsonify({"success": False, "message": message}), code


def fail(e, code=400):
    """Roll back whatever the failed operation left in the session and answer with its message."""
    db.session.rollback()
    return json_error(str(e), code)


def not_found_or_bad_request(e):
    return fail(e, 404 if "not found" in str(e).lower() else 400)


def json_body():
    return request.get_json(silent=True) or {}
