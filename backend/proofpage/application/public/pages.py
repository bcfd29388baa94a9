"""
Read side of the public proof page.

Only published pages are served. Every successful load of the full or the
share view appends one page view row.
"""
from typing import Any, Dict, Optional
from proofpage.extensions import db
from proofpage.models.analytics import CTA_CLICK_EVENT, PageEvent, PageView
from proofpage.models.metric import Metric
from proofpage.models.page import ProofPage
from proofpage.models.section import ProofSection
from proofpage.models.testimonial import Testimonial
from proofpage.models.work_example import WorkExample
from proofpage.domain.exceptions import NotFound
from proofpage.normalizers.items import normalize_metric, normalize_testimonial, normalize_work_example
from proofpage.normalizers.page import PUBLIC_IMAGE_SIZES, normalize_cta, normalize_page
from proofpage.utils.cta import normalize_cta_target
from proofpage.utils.transaction import transactional

SHARE_METRIC_LIMIT = 4
SHARE_WORK_EXAMPLE_LIMIT = 3


def get_published_page(slug) -> ProofPage:
    page = ProofPage.query.filter_by(slug=slug, status="published").first()
    if not page:
        raise NotFound("Not found")
    return page


def get_page_by_slug(slug) -> ProofPage:
    """Any status; used by the testimonial request form."""
    page = ProofPage.query.filter_by(slug=slug).first()
    if not page:
        raise NotFound("Not found")
    return page


def record_page_view(page_id) -> None:
    view = PageView()
    view.proof_page_id = page_id

    with transactional():
        db.session.add(view)


def record_cta_click(page_id) -> None:
    click = PageEvent()
    click.proof_page_id = page_id
    click.event_type = CTA_CLICK_EVENT

    with transactional():
        db.session.add(click)


def _items_in_sections(model, page_id, section_type):
    return (
        model.query
        .join(ProofSection, model.proof_section_id == ProofSection.id)
        .filter(ProofSection.proof_page_id == page_id, ProofSection.type == section_type)
    )


def load_public_page(slug, store) -> Dict[str, Any]:
    page = get_published_page(slug)
    payload = normalize_page(page, store, image_sizes=PUBLIC_IMAGE_SIZES)

    record_page_view(page.id)
    return payload


def load_share_page(slug, store) -> Dict[str, Any]:
    """
    The condensed page: a few metrics, the newest testimonial and the
    newest work examples, plus the CTA descriptor.
    """
    page = get_published_page(slug)

    metrics = (
        _items_in_sections(Metric, page.id, "metric")
        .order_by(ProofSection.position.asc(), Metric.created_at.asc())
        .limit(SHARE_METRIC_LIMIT)
        .all()
    )
    testimonial = (
        _items_in_sections(Testimonial, page.id, "testimonial")
        .order_by(Testimonial.created_at.desc())
        .first()
    )
    work_examples = (
        _items_in_sections(WorkExample, page.id, "work_example")
        .order_by(WorkExample.created_at.desc())
        .limit(SHARE_WORK_EXAMPLE_LIMIT)
        .all()
    )

    featured: Optional[dict] = None
    if testimonial:
        featured = normalize_testimonial(testimonial, store, image_size=PUBLIC_IMAGE_SIZES["testimonial"])

    payload = {
        "id": page.id,
        "title": page.title,
        "headline": page.headline,
        "slug": page.slug,
        "theme": page.theme,
        "accent_color": page.accent_color,
        "cta": normalize_cta(page),
        "metrics": [normalize_metric(m) for m in metrics],
        "testimonial": featured,
        "work_examples": [
            normalize_work_example(w, store, image_size=PUBLIC_IMAGE_SIZES["work_example"])
            for w in work_examples
        ],
    }

    record_page_view(page.id)
    return payload


def resolve_cta_redirect(slug) -> str:
    """
    Where the share page CTA button leads.

    A click is only recorded when the page is published with the CTA
    enabled and a usable target; every other case goes back to the share
    page.
    """
    fallback = f"/p/{slug}/share"

    page = ProofPage.query.filter_by(slug=slug, status="published").first()
    if not page or not page.cta_enabled or not page.cta_url:
        return fallback

    target = normalize_cta_target(page.cta_url)
    if not target:
        return fallback

    record_cta_click(page.id)
    return target
