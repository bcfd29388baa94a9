from proofpage.extensions import db
from .base import BaseModel


class WorkExample(BaseModel):
    __tablename__ = "work_examples"

    proof_section_id = db.Column(
        db.String(36),
        db.ForeignKey("proof_sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    link_url = db.Column(db.String(512), nullable=True)
    description = db.Column(db.Text, nullable=False, default="")
    metric_text = db.Column(db.String(200), nullable=True)
    image_path = db.Column(db.String(512), nullable=True)
    image_thumb_path = db.Column(db.String(512), nullable=True)  # derived by the thumbnail job

    section = db.relationship("ProofSection", back_populates="work_examples")
