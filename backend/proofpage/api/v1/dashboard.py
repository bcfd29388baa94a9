# proofpage/api/v1/dashboard.py
from flask import abort, current_app, jsonify, request
from flask_jwt_extended import current_user
from proofpage.application.dashboard.ensure_page import ensure_proof_page
from proofpage.application.dashboard.items import ITEM_KINDS, create_item, delete_item, update_item, upload_item_media
from proofpage.application.dashboard.overview import (
    build_dashboard_overview,
    collect_page_strength,
    public_urls,
    share_summary_for,
)
from proofpage.application.dashboard.sections import create_section, delete_section, move_section
from proofpage.application.dashboard.testimonial_requests import (
    approve_testimonial_request,
    list_testimonial_requests,
    reject_testimonial_request,
)
from proofpage.application.dashboard.update_page import update_proof_page
from proofpage.normalizers.pagination import normalize_pagination
from proofpage.normalizers.testimonial_request import normalize_testimonial_request
from proofpage.utils.decorators import login_required
from proofpage.utils.forms import form_data, text
from proofpage.utils.media import get_object_store
from proofpage.utils.optimistic_lock import enforce_optimistic_lock
from proofpage.utils.pagination import parse_limit
from proofpage.utils.toast import toast_response
from . import v1_bp

# URL segment -> item kind
ITEM_ROUTES = {
    "testimonials": ITEM_KINDS["testimonial"],
    "work-examples": ITEM_KINDS["work_example"],
    "metrics": ITEM_KINDS["metric"],
}


def _site_url():
    return current_app.config.get("SITE_URL") or request.host_url


def _item_kind(kind_route):
    kind = ITEM_ROUTES.get(kind_route)
    if kind is None:
        abort(404)
    return kind


# ------------------------
# Page
# ------------------------

@v1_bp.route("/dashboard", methods=["GET"])
@login_required
def dashboard_overview():
    page = ensure_proof_page(user=current_user)
    return jsonify(build_dashboard_overview(
        page=page,
        store=get_object_store(),
        site_url=_site_url(),
    ))


@v1_bp.route("/dashboard/page", methods=["PUT", "POST"])
@login_required
def update_page():
    page = ensure_proof_page(user=current_user)

    # -----------------------
    # Optimistic Locking Check
    # -----------------------
    enforce_optimistic_lock(page)

    return toast_response(update_proof_page(page=page, data=form_data()))


@v1_bp.route("/dashboard/strength", methods=["GET"])
@login_required
def page_strength():
    page = ensure_proof_page(user=current_user)
    return jsonify(collect_page_strength(page).to_dict())


@v1_bp.route("/dashboard/share-summary", methods=["GET"])
@login_required
def share_summary():
    page = ensure_proof_page(user=current_user)
    share_url = public_urls(page, _site_url())["share_url"]

    return jsonify({
        "share_url": share_url,
        "summary": share_summary_for(page, share_url),
    })


# ------------------------
# Sections
# ------------------------

@v1_bp.route("/dashboard/sections", methods=["POST"])
@login_required
def add_section():
    page = ensure_proof_page(user=current_user)
    result = create_section(page=page, section_type=text(form_data(), "type"))
    return toast_response(result, status=201)


@v1_bp.route("/dashboard/sections/<section_id>/move", methods=["POST"])
@login_required
def reorder_section(section_id):
    result = move_section(
        owner_id=current_user.id,
        section_id=section_id,
        direction=text(form_data(), "direction"),
    )
    return toast_response(result)


@v1_bp.route("/dashboard/sections/<section_id>", methods=["DELETE"])
@login_required
def remove_section(section_id):
    return toast_response(delete_section(owner_id=current_user.id, section_id=section_id))


# ------------------------
# Section items
# ------------------------

@v1_bp.route("/dashboard/sections/<section_id>/<kind_route>", methods=["POST"])
@login_required
def add_item(section_id, kind_route):
    result = create_item(
        kind=_item_kind(kind_route),
        owner_id=current_user.id,
        section_id=section_id,
        data=form_data(),
    )
    return toast_response(result, status=201)


@v1_bp.route("/dashboard/<kind_route>/<item_id>", methods=["PUT", "POST"])
@login_required
def edit_item(kind_route, item_id):
    result = update_item(
        kind=_item_kind(kind_route),
        owner_id=current_user.id,
        item_id=item_id,
        data=form_data(),
    )
    return toast_response(result)


@v1_bp.route("/dashboard/<kind_route>/<item_id>", methods=["DELETE"])
@login_required
def remove_item(kind_route, item_id):
    result = delete_item(kind=_item_kind(kind_route), owner_id=current_user.id, item_id=item_id)
    return toast_response(result)


@v1_bp.route("/dashboard/<kind_route>/<item_id>/image", methods=["POST"])
@login_required
def upload_item_image(kind_route, item_id):
    kind = _item_kind(kind_route)
    page = ensure_proof_page(user=current_user)

    result = upload_item_media(
        kind=kind,
        owner_id=current_user.id,
        page=page,
        item_id=item_id,
        file=request.files.get("file"),
        store=get_object_store(),
    )
    return toast_response(result, status=201)


# ------------------------
# Testimonial requests
# ------------------------

@v1_bp.route("/dashboard/requests", methods=["GET"])
@login_required
def testimonial_requests():
    page = ensure_proof_page(user=current_user)
    store = get_object_store()

    items, cursor = list_testimonial_requests(
        page=page,
        status=request.args.get("status") or None,
        cursor=request.args.get("cursor"),
        limit=parse_limit(request.args.get("limit")),
    )

    return jsonify(normalize_pagination(
        items,
        lambda item: normalize_testimonial_request(item, store),
        cursor=cursor,
    ))


@v1_bp.route("/dashboard/requests/<request_id>/approve", methods=["POST"])
@login_required
def approve_request(request_id):
    return toast_response(approve_testimonial_request(owner_id=current_user.id, request_id=request_id))


@v1_bp.route("/dashboard/requests/<request_id>/reject", methods=["POST"])
@login_required
def reject_request(request_id):
    return toast_response(reject_testimonial_request(owner_id=current_user.id, request_id=request_id))
