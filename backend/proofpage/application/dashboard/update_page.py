from typing import Any, Mapping
from proofpage.models.page import ProofPage, DEFAULT_ACCENT_COLOR
from proofpage.domain.exceptions import ValidationError
from proofpage.domain.invariants.page import assert_page
from proofpage.utils.activity import log_action
from proofpage.utils.cta import validate_cta_target
from proofpage.utils.forms import flag, optional_text, text
from proofpage.utils.slug import slugify
from proofpage.utils.toast import ActionResult
from proofpage.utils.transaction import transactional

ALLOWED_UPDATE_FIELDS = (
    "title",
    "headline",
    "bio",
    "slug",
    "status",
    "theme",
    "accent_color",
    "cta_enabled",
    "cta_label",
    "cta_url",
)


def _parse_page_form(data: Mapping[str, Any]) -> dict:
    slug = slugify(text(data, "slug"))
    if not slug:
        raise ValidationError("Public URL can only contain letters, numbers and hyphens.")

    cta_enabled = flag(data, "cta_enabled")
    cta_url = validate_cta_target(text(data, "cta_url")) or None

    return {
        "title": text(data, "title"),
        "headline": text(data, "headline"),
        "bio": optional_text(data, "bio"),
        "slug": slug,
        "status": text(data, "status", "draft") or "draft",
        "theme": text(data, "theme", "light") or "light",
        "accent_color": text(data, "accent_color", DEFAULT_ACCENT_COLOR) or DEFAULT_ACCENT_COLOR,
        "cta_enabled": cta_enabled,
        "cta_label": optional_text(data, "cta_label"),
        "cta_url": cta_url,
    }


def update_proof_page(*, page: ProofPage, data: Mapping[str, Any]) -> ActionResult:
    """
    Apply the dashboard page form to the owner's proof page.

    Design rules:
    - Only whitelisted fields are mutable
    - Slug is re-normalized and must stay globally unique
    - Invariants always revalidated before the write
    """
    values = _parse_page_form(data)

    if values["slug"] != page.slug:
        taken = (
            ProofPage.query
            .filter(ProofPage.slug == values["slug"], ProofPage.id != page.id)
            .first()
        )
        if taken:
            raise ValidationError("That public URL is already taken.")

    changed_fields: list[str] = []

    with transactional(integrity_message="That public URL is already taken."):
        for field in ALLOWED_UPDATE_FIELDS:
            if getattr(page, field) != values[field]:
                setattr(page, field, values[field])
                changed_fields.append(field)

        # 🔒 Domain invariant enforcement
        assert_page(page)

    if changed_fields:
        log_action(
            action="page.update",
            entity_type="page",
            entity_id=page.id,
            payload={"fields": changed_fields},
        )

    if page.is_published:
        return ActionResult.success("Proof page saved and published.")
    return ActionResult.success("Proof page saved as draft.")
