"""
Row-level authorization for dashboard use cases.

Every row a user may touch is reachable from their single proof page:
page -> sections -> items, and page -> testimonial requests. Lookups that
fall outside that tree are reported as NotFound, exactly like rows that do
not exist.
"""
from proofpage.domain.exceptions import NotFound
from proofpage.models.page import ProofPage
from proofpage.models.section import ProofSection
from proofpage.models.testimonial_request import TestimonialRequest


def get_owned_section(owner_id, section_id) -> ProofSection:
    section = (
        ProofSection.query
        .join(ProofPage, ProofSection.proof_page_id == ProofPage.id)
        .filter(ProofSection.id == section_id, ProofPage.user_id == owner_id)
        .first()
    )
    if not section:
        raise NotFound("Section not found.")
    return section


def get_owned_item(owner_id, model, item_id, label="Item"):
    item = (
        model.query
        .join(ProofSection, model.proof_section_id == ProofSection.id)
        .join(ProofPage, ProofSection.proof_page_id == ProofPage.id)
        .filter(model.id == item_id, ProofPage.user_id == owner_id)
        .first()
    )
    if not item:
        raise NotFound(f"{label} not found.")
    return item


def get_owned_request(owner_id, request_id) -> TestimonialRequest:
    testimonial_request = (
        TestimonialRequest.query
        .join(ProofPage, TestimonialRequest.proof_page_id == ProofPage.id)
        .filter(TestimonialRequest.id == request_id, ProofPage.user_id == owner_id)
        .first()
    )
    if not testimonial_request:
        raise NotFound("Testimonial request not found.")
    return testimonial_request
