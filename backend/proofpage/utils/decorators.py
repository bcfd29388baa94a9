from functools import wraps
from flask import jsonify, request
from flask_jwt_extended import current_user, verify_jwt_in_request


def login_redirect():
    return f"/login?next={request.path}"


def login_required(fn):
    """
    Require a signed-in, active user (JWT session cookie).

    The loaded `User` is available as `flask_jwt_extended.current_user`.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()

        if current_user is None or not current_user.is_active:
            return jsonify({
                "error": "Authentication required",
                "redirect": login_redirect(),
            }), 401

        return fn(*args, **kwargs)
    return wrapper
