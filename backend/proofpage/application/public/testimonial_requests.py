from typing import Any, Dict, Mapping
from proofpage.extensions import db
from proofpage.models.testimonial_request import TestimonialRequest
from proofpage.domain.exceptions import ValidationError
from proofpage.application.public.pages import get_page_by_slug
from proofpage.utils.activity import log_action
from proofpage.utils.forms import optional_text, text
from proofpage.utils.toast import ActionResult
from proofpage.utils.transaction import transactional


def request_form_context(slug) -> Dict[str, Any]:
    page = get_page_by_slug(slug)
    return {
        "proof_page_id": page.id,
        "title": page.title,
        "headline": page.headline,
        "slug": page.slug,
    }


def submit_testimonial_request(slug, data: Mapping[str, Any]) -> ActionResult:
    """
    Store a visitor's testimonial as a pending request for the page owner.
    """
    page = get_page_by_slug(slug)

    name = text(data, "name")
    quote = text(data, "quote")
    if not name or not quote:
        raise ValidationError("Name and testimonial are required.")

    testimonial_request = TestimonialRequest()
    testimonial_request.proof_page_id = page.id
    testimonial_request.name = name
    testimonial_request.role_company = optional_text(data, "role_company")
    testimonial_request.quote = quote
    testimonial_request.status = "pending"

    with transactional():
        db.session.add(testimonial_request)

    log_action(
        action="testimonial_request.submit",
        entity_type="testimonial_request",
        entity_id=testimonial_request.id,
        payload={"page_id": page.id},
    )
    return ActionResult.success("Thanks! Your testimonial was submitted.", id=testimonial_request.id)
