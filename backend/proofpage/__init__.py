from flask import Flask, send_file, current_app, jsonify
from .config import config_by_name
from .extensions import db, migrate, jwt
from .api.v1 import v1_bp
from .api.v1.public import public_bp
from .api.v1.media import media_bp
from .commands import register_commands
from .errors import register_error_handlers
from .utils.decorators import login_redirect
from .utils.media import init_object_store
from flask_swagger_ui import get_swaggerui_blueprint
import os


def register_jwt_callbacks(app):
    from .models.user import User

    @jwt.user_lookup_loader
    def load_user(_jwt_header, jwt_data):
        return db.session.get(User, jwt_data["sub"])

    @jwt.unauthorized_loader
    def handle_missing_session(reason):
        return jsonify({"error": "Authentication required", "redirect": login_redirect()}), 401

    @jwt.invalid_token_loader
    def handle_invalid_session(reason):
        return jsonify({"error": "Invalid session", "redirect": login_redirect()}), 401

    @jwt.expired_token_loader
    def handle_expired_session(_jwt_header, _jwt_data):
        return jsonify({"error": "Session expired", "redirect": login_redirect()}), 401

    @jwt.user_lookup_error_loader
    def handle_unknown_user(_jwt_header, _jwt_data):
        return jsonify({"error": "Authentication required", "redirect": login_redirect()}), 401


def create_app(config_name: str = "development", overrides: dict | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    register_jwt_callbacks(app)

    # Register every table on the metadata
    from .models import user, page, section, testimonial, work_example, metric  # noqa: F401
    from .models import testimonial_request, analytics  # noqa: F401

    init_object_store(app)

    # -------------------------------------------------
    # Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    app.register_blueprint(public_bp)
    app.register_blueprint(media_bp)
    register_error_handlers(app)
    register_commands(app)

    # -------------------------------------------------
    # Serve OpenAPI YAML (PUBLIC)
    # -------------------------------------------------
    @app.route("/openapi/proof.yaml", methods=["GET"], endpoint="openapi_proof")
    def serve_openapi():
        spec_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "proof_openapi.yaml",
        )

        if not os.path.exists(spec_path):
            raise FileNotFoundError("proof_openapi.yaml not found")

        return send_file(
            spec_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/proof.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "Proof Page API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    return app
