from sqlalchemy.exc import IntegrityError
from proofpage.extensions import db
from proofpage.models.page import ProofPage, DEFAULT_ACCENT_COLOR
from proofpage.domain.exceptions import PersistenceError
from proofpage.utils.activity import log_action
from proofpage.utils.slug import generate_unique_slug, FALLBACK_SLUG

DEFAULT_TITLE = "My Proof"
DEFAULT_HEADLINE = "Freelancer"


def ensure_proof_page(*, user, session=None) -> ProofPage:
    """
    Return the user's proof page, creating a draft one on first visit.

    Edge cases handled:
    - Slug seeded from the email local part, falling back to `my-proof`
    - A concurrent first visit that inserted the page first
    """
    session = session or db.session

    page = session.query(ProofPage).filter_by(user_id=user.id).first()
    if page:
        return page

    email = user.email or None
    seed = email.split("@")[0] if email else FALLBACK_SLUG

    page = ProofPage()
    page.user_id = user.id
    page.title = email or DEFAULT_TITLE
    page.headline = DEFAULT_HEADLINE
    page.slug = generate_unique_slug(seed or FALLBACK_SLUG, session=session)
    page.status = "draft"
    page.theme = "light"
    page.accent_color = DEFAULT_ACCENT_COLOR
    page.cta_enabled = False

    try:
        session.add(page)
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        existing = session.query(ProofPage).filter_by(user_id=user.id).first()
        if existing:
            return existing
        raise PersistenceError("Could not create proof page.") from exc

    log_action(
        action="page.create",
        entity_type="page",
        entity_id=page.id,
        payload={"slug": page.slug},
    )
    return page
