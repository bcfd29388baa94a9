# proofpage/api/v1/public.py
from flask import Blueprint, jsonify, redirect
from proofpage.application.public.pages import load_public_page, load_share_page, resolve_cta_redirect
from proofpage.application.public.testimonial_requests import request_form_context, submit_testimonial_request
from proofpage.domain.exceptions import NotFound
from proofpage.utils.forms import form_data
from proofpage.utils.media import get_object_store
from proofpage.utils.toast import toast_response

# Served at the site root, outside the versioned API
public_bp = Blueprint("public", __name__)


@public_bp.errorhandler(NotFound)
def handle_not_found(error):
    return jsonify({"error": "Not found"}), 404


@public_bp.route("/p/<slug>", methods=["GET"])
def proof_page(slug):
    return jsonify(load_public_page(slug, get_object_store()))


@public_bp.route("/p/<slug>/share", methods=["GET"])
def proof_share_page(slug):
    return jsonify(load_share_page(slug, get_object_store()))


@public_bp.route("/p/<slug>/share/cta", methods=["GET"])
def proof_share_cta(slug):
    return redirect(resolve_cta_redirect(slug), code=302)


@public_bp.route("/r/<slug>", methods=["GET"])
def testimonial_request_form(slug):
    return jsonify(request_form_context(slug))


@public_bp.route("/r/<slug>", methods=["POST"])
def submit_request(slug):
    return toast_response(submit_testimonial_request(slug, form_data()), status=201)
