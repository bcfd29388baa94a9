from proofpage.extensions import db
from .base import BaseModel

SECTION_TYPES = ("testimonial", "work_example", "metric")


class ProofSection(BaseModel):
    __tablename__ = "proof_sections"

    proof_page_id = db.Column(
        db.String(36),
        db.ForeignKey("proof_pages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = db.Column(db.String(20), nullable=False)  # testimonial, work_example, metric
    position = db.Column(db.Integer, nullable=False)

    page = db.relationship("ProofPage", back_populates="sections")

    testimonials = db.relationship(
        "Testimonial",
        back_populates="section",
        order_by="Testimonial.created_at",
        cascade="all, delete-orphan",
    )
    work_examples = db.relationship(
        "WorkExample",
        back_populates="section",
        order_by="WorkExample.created_at",
        cascade="all, delete-orphan",
    )
    metrics = db.relationship(
        "Metric",
        back_populates="section",
        order_by="Metric.created_at",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.UniqueConstraint("proof_page_id", "position", name="uq_section_position_per_page"),
        db.Index("idx_section_page_position", "proof_page_id", "position"),
    )

    @property
    def items(self):
        if self.type == "testimonial":
            return self.testimonials
        if self.type == "work_example":
            return self.work_examples
        return self.metrics
