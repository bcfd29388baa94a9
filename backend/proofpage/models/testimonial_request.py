from proofpage.extensions import db
from .base import BaseModel

REQUEST_STATUSES = ("pending", "approved", "rejected")


class TestimonialRequest(BaseModel):
    __tablename__ = "testimonial_requests"

    proof_page_id = db.Column(
        db.String(36),
        db.ForeignKey("proof_pages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(120), nullable=False)
    role_company = db.Column(db.String(200), nullable=True)
    quote = db.Column(db.Text, nullable=False)
    avatar_path = db.Column(db.String(512), nullable=True)
    status = db.Column(db.String(20), nullable=False, default="pending", index=True)

    __table_args__ = (
        db.Index("ix_request_cursor", "proof_page_id", "created_at", "id"),
    )
