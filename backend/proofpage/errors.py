from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException
from proofpage.domain.exceptions import DomainError
from proofpage.utils.toast import ActionResult


def register_error_handlers(app):
    @app.errorhandler(DomainError)
    def handle_domain_error(error):
        if error.status_code >= 500:
            current_app.logger.error("%s: %s", type(error).__name__, error.message)

        result = ActionResult.error(error.message)
        response = jsonify({
            "error": type(error).__name__,
            "toast": result.to_dict(),
        })
        response.status_code = error.status_code
        return response

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(413)
    def handle_too_large(error):
        result = ActionResult.error("File is too large.")
        return jsonify({"error": "RequestEntityTooLarge", "toast": result.to_dict()}), 413

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        # abort() from request helpers (bad cursor, stale write, ...)
        result = ActionResult.error(error.description)
        return jsonify({"error": error.name, "toast": result.to_dict()}), error.code
