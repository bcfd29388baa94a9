import random
import re
import time
from sqlalchemy import select
from proofpage.extensions import db
from proofpage.models.page import ProofPage

FALLBACK_SLUG = "my-proof"
MAX_SLUG_LENGTH = 50
MAX_ATTEMPTS = 20

_INVALID_CHARS_RE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHENS_RE = re.compile(r"-+")


def slugify(value: str) -> str:
    """
    Lowercase, keep [a-z0-9], whitespace and hyphens, hyphenate whitespace
    runs, collapse hyphens, trim edge hyphens, cap at 50 characters.

    >>> slugify("Alex Rivera!! UX")
    'alex-rivera-ux'
    """
    slug = (value or "").lower().strip()
    slug = _INVALID_CHARS_RE.sub("", slug)
    slug = _WHITESPACE_RE.sub("-", slug)
    slug = _HYPHENS_RE.sub("-", slug)
    slug = slug.strip("-")
    return slug[:MAX_SLUG_LENGTH]


def slug_exists(slug: str, session=None) -> bool:
    session = session or db.session
    return session.execute(
        select(ProofPage.id).where(ProofPage.slug == slug).limit(1)
    ).first() is not None


def generate_unique_slug(seed: str, session=None) -> str:
    """
    Return a slug derived from `seed` that no proof page uses yet.

    Tries the bare slug, then up to 19 random numeric suffixes, one
    existence query per attempt. After 20 collisions the current epoch
    milliseconds are appended without a further check. Nothing locks the
    table between this check and the caller's insert.
    """
    base = slugify(seed) or FALLBACK_SLUG

    for attempt in range(MAX_ATTEMPTS):
        candidate = base if attempt == 0 else f"{base}-{random.randint(0, 9999)}"
        if not slug_exists(candidate, session=session):
            return candidate

    return f"{base}-{int(time.time() * 1000)}"
