"""Create or promote the site administrator.

Registration always creates ``user`` accounts, so this script is the way an
``admin`` account comes into existence. Credentials are read from
``ADMIN_EMAIL``, ``ADMIN_PASSWORD`` and ``ADMIN_NAME``.
"""

import os

from app import create_app
from models import db
from models.user import User, normalize_email
from services.passwords import PasswordHasher


def ensure_admin(email: str, password: str, name: str = "Administrator") -> str:
    """Create or update the admin user inside the current app context."""

    email = normalize_email(email)
    admin = User.query.filter_by(email=email).first()
    if admin is None:
        admin = User(email=email, name=name, login_method="email")
        db.session.add(admin)
        action = "created"
    else:
        action = "updated"
    admin.role = "admin"
    admin.is_verified = True
    admin.password_hash = PasswordHasher().hash(password)
    db.session.commit()
    return action


def main() -> None:
    email = os.environ.get("ADMIN_EMAIL", "admin@example.com")
    password = os.environ["ADMIN_PASSWORD"]
    app = create_app()
    with app.app_context():
        action = ensure_admin(email, password, os.environ.get("ADMIN_NAME", "Administrator"))
        print(f"Admin user {action}: {email}")


if __name__ == "__main__":
    main()
