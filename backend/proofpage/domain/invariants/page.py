import re
from proofpage.domain.exceptions import ValidationError
from proofpage.models.page import PAGE_STATUSES, PAGE_THEMES

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def is_valid_hex_color(value: str) -> bool:
    return bool(HEX_COLOR_RE.match(value or ""))


def assert_page(page):
    """
    Field-level invariants checked before a proof page is written.
    """
    if not is_valid_hex_color(page.accent_color):
        raise ValidationError("Accent color must be a valid hex value like #3B82F6.")

    if page.status not in PAGE_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(PAGE_STATUSES)}.")

    if page.theme not in PAGE_THEMES:
        raise ValidationError(f"Theme must be one of: {', '.join(PAGE_THEMES)}.")

    if not page.slug:
        raise ValidationError("Public URL cannot be empty.")

    if page.cta_enabled and not page.cta_url:
        raise ValidationError("Add a link or email address to enable the contact button.")
