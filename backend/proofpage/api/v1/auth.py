from flask import request, jsonify
from flask_jwt_extended import (
    create_access_token,
    current_user,
    set_access_cookies,
    unset_jwt_cookies,
)
from sqlalchemy.exc import IntegrityError
from proofpage.extensions import db
from proofpage.models.user import User
from proofpage.utils.decorators import login_required
from proofpage.utils.forms import form_data, text
from . import v1_bp

MIN_PASSWORD_LENGTH = 6
DEFAULT_NEXT = "/dashboard"


def _safe_next(value):
    # Only same-site relative paths; protocol-relative URLs are rejected
    if value and value.startswith("/") and not value.startswith("//"):
        return value
    return DEFAULT_NEXT


def _session_response(user, payload, status=200):
    response = jsonify(payload)
    set_access_cookies(response, create_access_token(identity=str(user.id)))
    response.status_code = status
    return response


@v1_bp.route("/auth/signup", methods=["POST"])
def signup():
    data = form_data()
    email = text(data, "email").lower()
    password = data.get("password") or ""

    if not email or not password:
        return jsonify({"error": "Email and password required"}), 400

    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({"error": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"}), 400

    if User.query.filter_by(email=email).first():
        return jsonify({"error": "An account with that email already exists"}), 409

    user = User()
    user.email = email
    user.set_password(password)

    try:
        db.session.add(user)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({"error": "An account with that email already exists"}), 409

    return _session_response(user, {"id": user.id, "redirect": DEFAULT_NEXT}, status=201)


@v1_bp.route("/auth/login", methods=["POST"])
def login():
    data = form_data()
    if not data:
        return jsonify({"error": "Invalid request body"}), 400

    email = text(data, "email").lower()
    password = data.get("password") or ""

    if not email or not password:
        return jsonify({"error": "Email and password required"}), 400

    user = User.query.filter_by(email=email).first()

    if not user or not user.check_password(password):
        return jsonify({"error": "Invalid credentials"}), 401

    if not user.is_active:
        return jsonify({"error": "User account disabled"}), 403

    return _session_response(user, {"id": user.id, "redirect": _safe_next(text(data, "next"))})


@v1_bp.route("/auth/logout", methods=["POST"])
def logout():
    response = jsonify({"redirect": "/login"})
    unset_jwt_cookies(response)
    return response


@v1_bp.route("/auth/me", methods=["GET"])
@login_required
def me():
    return jsonify({
        "id": current_user.id,
        "email": current_user.email,
    })
