from proofpage.extensions import db
from .base import BaseModel


class Testimonial(BaseModel):
    __tablename__ = "testimonials"

    proof_section_id = db.Column(
        db.String(36),
        db.ForeignKey("proof_sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(120), nullable=False)
    role_company = db.Column(db.String(200), nullable=True)
    quote = db.Column(db.Text, nullable=False)
    avatar_path = db.Column(db.String(512), nullable=True)
    avatar_thumb_path = db.Column(db.String(512), nullable=True)  # derived by the thumbnail job

    section = db.relationship("ProofSection", back_populates="testimonials")
