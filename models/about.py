"""About page content model."""

from . import db
from .user import utcnow


ABOUT_FIELDS = {
    "heroTitle": "hero_title",
    "heroDescription": "hero_description",
    "mission": "mission",
    "vision": "vision",
    "stats": "stats",
    "sections": "sections",
}


class AboutPage(db.Model):
    """Single-row content backing the public "About" page."""

    __tablename__ = "about_pages"

    id = db.Column(db.Integer, primary_key=True)
    hero_title = db.Column(db.String(255), nullable=True)
    hero_description = db.Column(db.Text, nullable=True)
    mission = db.Column(db.Text, nullable=True)
    vision = db.Column(db.Text, nullable=True)
    stats = db.Column(db.JSON, nullable=False, default=list)
    sections = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @classmethod
    def get_or_create(cls) -> "AboutPage":
        """Return the page row, creating an empty one on first access."""

        about = cls.query.order_by(cls.id.asc()).first()
        if about is None:
            about = cls(stats=[], sections=[])
            db.session.add(about)
            db.session.commit()
        return about

    def apply_updates(self, payload: dict) -> list[str]:
        """Copy whitelisted camelCase fields from ``payload``; return the fields changed."""

        changed = []
        for key, attribute in ABOUT_FIELDS.items():
            if key in payload and payload[key] is not None:
                setattr(self, attribute, payload[key])
                changed.append(key)
        return changed

    def to_dict(self) -> dict:
        """Serialize the page using the client's camelCase field names."""

        data = {key: getattr(self, attribute) for key, attribute in ABOUT_FIELDS.items()}
        data["id"] = self.id
        data["createdAt"] = self.created_at.isoformat() if self.created_at else None
        data["updatedAt"] = self.updated_at.isoformat() if self.updated_at else None
        return data

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<AboutPage id={self.id}>"
