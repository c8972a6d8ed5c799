"""User model definition."""

from datetime import UTC, datetime

from sqlalchemy.orm import validates

from . import db


ROLES = ("user", "admin")
LOGIN_METHODS = ("email", "google")


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime, as stored in the database."""

    return datetime.now(UTC).replace(tzinfo=None)


def normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""

    return (raw_email or "").strip().lower()


class User(db.Model):
    """Represents a site account, either password based or Google federated."""

    __tablename__ = "users"
    __table_args__ = (
        db.CheckConstraint(
            "login_method != 'email' OR password_hash IS NOT NULL",
            name="ck_users_email_login_has_password",
        ),
        db.CheckConstraint(
            "(reset_password_token IS NULL) = (reset_password_expires IS NULL)",
            name="ck_users_reset_ticket_pair",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=True)
    role = db.Column(
        db.String(16),
        nullable=False,
        default="user",
        server_default=db.text("'user'"),
    )
    google_id = db.Column(db.String(255), unique=True, nullable=True)
    login_method = db.Column(
        db.String(16),
        nullable=False,
        default="email",
        server_default=db.text("'email'"),
    )
    is_verified = db.Column(db.Boolean, nullable=False, default=False)
    avatar = db.Column(db.String(512), nullable=False, default="")
    phone = db.Column(db.String(32), nullable=False, default="")
    reset_password_token = db.Column(db.String(128), nullable=True, index=True)
    reset_password_expires = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @validates("email")
    def _normalize_email(self, key, value):
        return normalize_email(value)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def has_reset_ticket(self) -> bool:
        return self.reset_password_token is not None

    def to_summary(self) -> dict:
        """Fields returned by register and login responses."""

        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "type": self.role,
        }

    def to_public_dict(self) -> dict:
        """Serialize the user without credentials or reset ticket fields."""

        return {
            **self.to_summary(),
            "avatar": self.avatar,
            "phone": self.phone,
            "googleId": self.google_id,
            "loginMethod": self.login_method,
            "isVerified": self.is_verified,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
