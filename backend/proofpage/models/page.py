from proofpage.extensions import db
from .base import BaseModel

PAGE_STATUSES = ("draft", "published")
PAGE_THEMES = ("light", "dark")
DEFAULT_ACCENT_COLOR = "#3B82F6"


class ProofPage(BaseModel):
    __tablename__ = "proof_pages"

    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, unique=True)
    title = db.Column(db.String(200), nullable=False, default="")
    headline = db.Column(db.String(200), nullable=False, default="")
    bio = db.Column(db.Text, nullable=True)
    slug = db.Column(db.String(80), nullable=False, unique=True, index=True)
    status = db.Column(db.String(20), nullable=False, default="draft", index=True)
    theme = db.Column(db.String(20), nullable=False, default="light")
    accent_color = db.Column(db.String(7), nullable=False, default=DEFAULT_ACCENT_COLOR)
    cta_enabled = db.Column(db.Boolean, nullable=False, default=False)
    cta_label = db.Column(db.String(80), nullable=True)
    cta_url = db.Column(db.String(512), nullable=True)

    owner = db.relationship("User", back_populates="page")

    # Relationship to Sections (ordered, cascade deletes)
    sections = db.relationship(
        "ProofSection",
        back_populates="page",
        order_by="ProofSection.position",
        cascade="all, delete-orphan",
    )

    @property
    def is_published(self) -> bool:
        return self.status == "published"
