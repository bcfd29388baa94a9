from proofpage.extensions import db
from proofpage.models.section import ProofSection


def next_position(page_id, session=None):
    """
    Position for a section appended to the end of a page (max + 1, or 1).
    """
    session = session or db.session
    max_position = session.query(db.func.max(ProofSection.position))\
        .filter(ProofSection.proof_page_id == page_id)\
        .scalar()
    return (max_position or 0) + 1
