from proofpage.extensions import db
from .base import BaseModel


class Metric(BaseModel):
    __tablename__ = "metrics"

    proof_section_id = db.Column(
        db.String(36),
        db.ForeignKey("proof_sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    label = db.Column(db.String(120), nullable=False)
    value = db.Column(db.String(120), nullable=False)

    section = db.relationship("ProofSection", back_populates="metrics")
