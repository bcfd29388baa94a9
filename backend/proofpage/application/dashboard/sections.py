from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from flask import current_app
from proofpage.extensions import db
from proofpage.models.section import ProofSection
from proofpage.domain.exceptions import EdgeOfList, PersistenceError, ValidationError
from proofpage.domain.invariants.section import assert_section_type
from proofpage.application.dashboard.ownership import get_owned_section
from proofpage.utils.activity import log_action
from proofpage.utils.order import next_position
from proofpage.utils.toast import ActionResult
from proofpage.utils.transaction import transactional

SWAP_SENTINEL_POSITION = -1
DIRECTIONS = ("up", "down")


def create_section(*, page, section_type) -> ActionResult:
    assert_section_type(section_type)

    section = ProofSection()
    section.proof_page_id = page.id
    section.type = section_type
    section.position = next_position(page.id)

    with transactional(integrity_message="Could not add section, please try again."):
        db.session.add(section)

    log_action(
        action="section.create",
        entity_type="section",
        entity_id=section.id,
        payload={"type": section.type, "position": section.position},
    )
    return ActionResult.success("Section added.", id=section.id)


def find_neighbor(section, direction):
    """
    The section directly above (`up`) or below (`down`) on the same page.
    """
    query = ProofSection.query.filter(ProofSection.proof_page_id == section.proof_page_id)

    if direction == "up":
        query = query.filter(ProofSection.position < section.position)\
            .order_by(ProofSection.position.desc())
    else:
        query = query.filter(ProofSection.position > section.position)\
            .order_by(ProofSection.position.asc())

    return query.first()


def _write_position(session, section_id, position):
    try:
        session.execute(
            update(ProofSection)
            .where(ProofSection.id == section_id)
            .values(position=position)
        )
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        current_app.logger.error("Position write failed for section %s: %s", section_id, exc)
        raise PersistenceError("Could not move section.") from exc


def move_section(*, owner_id, section_id, direction, session=None) -> ActionResult:
    """
    Swap a section with its neighbor in the page ordering.

    `(proof_page_id, position)` is unique, so the exchange goes through a
    sentinel in three committed writes: current -> -1, neighbor -> current's
    old position, current -> neighbor's old position. There is no enclosing
    transaction; a failure mid-way leaves the earlier writes in place.
    """
    session = session or db.session

    if direction not in DIRECTIONS:
        raise ValidationError("Direction must be 'up' or 'down'.")

    section = get_owned_section(owner_id, section_id)
    neighbor = find_neighbor(section, direction)

    if neighbor is None:
        raise EdgeOfList("Section is already at the edge.")

    current_id, current_position = section.id, section.position
    neighbor_id, neighbor_position = neighbor.id, neighbor.position

    _write_position(session, current_id, SWAP_SENTINEL_POSITION)
    _write_position(session, neighbor_id, current_position)
    _write_position(session, current_id, neighbor_position)

    log_action(
        action="section.move",
        entity_type="section",
        entity_id=current_id,
        payload={"direction": direction, "from": current_position, "to": neighbor_position},
    )

    if direction == "down":
        return ActionResult.success("Section moved down.")
    return ActionResult.success("Section moved up.")


def delete_section(*, owner_id, section_id) -> ActionResult:
    """Delete a section together with all of its items."""
    section = get_owned_section(owner_id, section_id)
    page_id = section.proof_page_id

    with transactional():
        db.session.delete(section)

    log_action(
        action="section.delete",
        entity_type="section",
        entity_id=section_id,
        payload={"page_id": page_id},
    )
    return ActionResult.success("Section deleted.")
