from typing import Any, Dict, List
from proofpage.models.analytics import CTA_CLICK_EVENT, PageEvent, PageView
from proofpage.models.section import ProofSection
from proofpage.models.testimonial import Testimonial
from proofpage.models.work_example import WorkExample
from proofpage.domain.strength import PageStrength, score_page_strength
from proofpage.application.dashboard.testimonial_requests import count_pending_requests
from proofpage.normalizers.page import normalize_page
from proofpage.utils.share_summary import SummaryTestimonial, build_share_summary


def public_urls(page, site_url: str) -> Dict[str, str]:
    base = site_url.rstrip("/")
    return {
        "public_url": f"{base}/p/{page.slug}",
        "share_url": f"{base}/p/{page.slug}/share",
        "request_url": f"{base}/r/{page.slug}",
    }


def _work_example_metric_texts(page_id) -> List[str]:
    rows = (
        WorkExample.query
        .join(ProofSection, WorkExample.proof_section_id == ProofSection.id)
        .filter(ProofSection.proof_page_id == page_id, ProofSection.type == "work_example")
        .order_by(ProofSection.position.asc(), WorkExample.created_at.asc())
        .with_entities(WorkExample.metric_text)
        .all()
    )
    return [row.metric_text or "" for row in rows]


def _testimonials_query(page_id):
    return (
        Testimonial.query
        .join(ProofSection, Testimonial.proof_section_id == ProofSection.id)
        .filter(ProofSection.proof_page_id == page_id, ProofSection.type == "testimonial")
    )


def collect_page_strength(page) -> PageStrength:
    metric_texts = _work_example_metric_texts(page.id)

    return score_page_strength(
        title=page.title,
        headline=page.headline,
        bio=page.bio,
        status=page.status,
        work_example_count=len(metric_texts),
        work_examples_with_metric=sum(1 for value in metric_texts if value.strip()),
        testimonial_count=_testimonials_query(page.id).count(),
    )


def page_stats(page_id) -> Dict[str, int]:
    return {
        "views": PageView.query.filter_by(proof_page_id=page_id).count(),
        "cta_clicks": PageEvent.query.filter_by(proof_page_id=page_id, event_type=CTA_CLICK_EVENT).count(),
        "pending_requests": count_pending_requests(page_id),
    }


def share_summary_for(page, share_url: str) -> str:
    metrics = [value.strip() for value in _work_example_metric_texts(page.id) if value.strip()][:2]

    first = (
        _testimonials_query(page.id)
        .order_by(ProofSection.position.asc(), Testimonial.created_at.asc())
        .first()
    )
    testimonial = None
    if first:
        testimonial = SummaryTestimonial(quote=first.quote, name=first.name, role_company=first.role_company)

    return build_share_summary(
        page.title,
        share_url,
        headline=page.headline,
        bio=page.bio,
        work_example_metrics=metrics,
        testimonial=testimonial,
    )


def build_dashboard_overview(*, page, store, site_url: str) -> Dict[str, Any]:
    urls = public_urls(page, site_url)

    return {
        "page": normalize_page(page, store, admin=True),
        "strength": collect_page_strength(page).to_dict(),
        "stats": page_stats(page.id),
        "urls": urls,
        "share_summary": share_summary_for(page, urls["share_url"]),
    }
