from typing import Optional
from proofpage.extensions import db
from proofpage.models.section import ProofSection
from proofpage.models.testimonial import Testimonial
from proofpage.models.testimonial_request import TestimonialRequest, REQUEST_STATUSES
from proofpage.domain.exceptions import ValidationError
from proofpage.application.dashboard.ownership import get_owned_request
from proofpage.utils.activity import log_action
from proofpage.utils.order import next_position
from proofpage.utils.pagination import paginate_cursor
from proofpage.utils.toast import ActionResult
from proofpage.utils.transaction import transactional


def list_testimonial_requests(*, page, status: Optional[str] = None, cursor=None, limit=20):
    if status is not None and status not in REQUEST_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(REQUEST_STATUSES)}.")

    query = TestimonialRequest.query.filter_by(proof_page_id=page.id)
    if status:
        query = query.filter_by(status=status)

    return paginate_cursor(query, model=TestimonialRequest, cursor=cursor, limit=limit)


def count_pending_requests(page_id) -> int:
    return TestimonialRequest.query.filter_by(proof_page_id=page_id, status="pending").count()


def _testimonial_section_for(page_id) -> ProofSection:
    """
    The first testimonial section by position, appended when the page has none.
    """
    section = (
        ProofSection.query
        .filter_by(proof_page_id=page_id, type="testimonial")
        .order_by(ProofSection.position.asc())
        .first()
    )
    if section:
        return section

    section = ProofSection()
    section.proof_page_id = page_id
    section.type = "testimonial"
    section.position = next_position(page_id)

    with transactional(integrity_message="Failed to create testimonial section."):
        db.session.add(section)

    log_action(
        action="section.create",
        entity_type="section",
        entity_id=section.id,
        payload={"type": "testimonial", "position": section.position, "source": "request"},
    )
    return section


def approve_testimonial_request(*, owner_id, request_id) -> ActionResult:
    """
    Copy a pending request into a testimonial on the owner's page.

    Edge cases handled:
    - Only pending requests can be approved
    - A testimonial section is created at the end of the page if missing
    """
    testimonial_request = get_owned_request(owner_id, request_id)

    if testimonial_request.status != "pending":
        raise ValidationError("Only pending requests can be approved.")

    section = _testimonial_section_for(testimonial_request.proof_page_id)

    testimonial = Testimonial()
    testimonial.proof_section_id = section.id
    testimonial.name = testimonial_request.name
    testimonial.role_company = testimonial_request.role_company
    testimonial.quote = testimonial_request.quote
    testimonial.avatar_path = testimonial_request.avatar_path

    with transactional():
        db.session.add(testimonial)
        testimonial_request.status = "approved"

    log_action(
        action="testimonial_request.approve",
        entity_type="testimonial_request",
        entity_id=request_id,
        payload={"testimonial_id": testimonial.id, "section_id": section.id},
    )
    return ActionResult.success(
        "Testimonial request approved and added to your page.",
        id=testimonial.id,
    )


def reject_testimonial_request(*, owner_id, request_id) -> ActionResult:
    testimonial_request = get_owned_request(owner_id, request_id)

    with transactional():
        testimonial_request.status = "rejected"

    log_action(
        action="testimonial_request.reject",
        entity_type="testimonial_request",
        entity_id=request_id,
    )
    return ActionResult.success("Testimonial request rejected.")
