import re
from proofpage.domain.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_SCHEME_RE = re.compile(r"^(https?:|mailto:|tel:)", re.IGNORECASE)


def normalize_cta_target(raw):
    """
    Turn a free-text contact target into a link.

    Values with an http(s)/mailto/tel scheme pass through, email-like
    values get `mailto:`, anything else is treated as a bare domain.
    Returns "" for blank input.
    """
    value = (raw or "").strip()
    if not value:
        return ""

    if _SCHEME_RE.match(value):
        return value

    if _EMAIL_RE.match(value):
        return f"mailto:{value}"

    return f"https://{value}"


def validate_cta_target(raw):
    """Normalize a target submitted from the dashboard, rejecting malformed ones."""
    target = normalize_cta_target(raw)
    if not target:
        return ""

    if any(ch.isspace() for ch in target):
        raise ValidationError("Contact link must be a URL or an email address without spaces.")

    if target.lower().startswith(("http://", "https://")) and "." not in target.split("://", 1)[1].split("/", 1)[0]:
        raise ValidationError("Contact link must include a domain like example.com.")

    return target
