from sqlalchemy import event
from proofpage.extensions import db
from .base import BaseModel

CTA_CLICK_EVENT = "cta_click"


class PageView(BaseModel):
    __tablename__ = "page_views"

    proof_page_id = db.Column(
        db.String(36),
        db.ForeignKey("proof_pages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class PageEvent(BaseModel):
    __tablename__ = "proof_page_events"

    proof_page_id = db.Column(
        db.String(36),
        db.ForeignKey("proof_pages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_type = db.Column(db.String(50), nullable=False, index=True)

    __table_args__ = (
        db.Index("ix_event_page_type", "proof_page_id", "event_type"),
    )


@event.listens_for(PageView, "before_update")
@event.listens_for(PageEvent, "before_update")
def prevent_counter_mutation(mapper, connection, target):
    raise RuntimeError("Analytics rows are append-only")
