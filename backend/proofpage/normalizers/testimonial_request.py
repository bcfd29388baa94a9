# proofpage/normalizers/testimonial_request.py
from __future__ import annotations

from typing import Any, Dict

from proofpage.models.testimonial_request import TestimonialRequest
from proofpage.utils.media import signed_media_url


def normalize_testimonial_request(item: TestimonialRequest, store=None) -> Dict[str, Any]:
    """
    Normalizes a TestimonialRequest into API-safe JSON.

    Notes:
    - avatar_url is only signed when a store is passed
    """

    if not item:
        raise ValueError("TestimonialRequest cannot be None")

    return {
        "id": item.id,
        "proof_page_id": item.proof_page_id,
        "name": item.name,
        "role_company": item.role_company,
        "quote": item.quote,
        "status": item.status,
        "avatar_url": signed_media_url(store, None, item.avatar_path) if store else None,
        "created_at": item.created_at.isoformat(),
    }
