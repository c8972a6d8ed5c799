"""Create users and about_pages tables.

Revision ID: 3f1e9c2a7b40
Revises:
Create Date: 2026-10-16 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f1e9c2a7b40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=16), nullable=False, server_default="user"),
        sa.Column("google_id", sa.String(length=255), nullable=True),
        sa.Column(
            "login_method", sa.String(length=16), nullable=False, server_default="email"
        ),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("avatar", sa.String(length=512), nullable=False, server_default=""),
        sa.Column("phone", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("reset_password_token", sa.String(length=128), nullable=True),
        sa.Column("reset_password_expires", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "login_method != 'email' OR password_hash IS NOT NULL",
            name="ck_users_email_login_has_password",
        ),
        sa.CheckConstraint(
            "(reset_password_token IS NULL) = (reset_password_expires IS NULL)",
            name="ck_users_reset_ticket_pair",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("google_id"),
    )
    op.create_index(
        "ix_users_reset_password_token", "users", ["reset_password_token"], unique=False
    )

    op.create_table(
        "about_pages",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("hero_title", sa.String(length=255), nullable=True),
        sa.Column("hero_description", sa.Text(), nullable=True),
        sa.Column("mission", sa.Text(), nullable=True),
        sa.Column("vision", sa.Text(), nullable=True),
        sa.Column("stats", sa.JSON(), nullable=False),
        sa.Column("sections", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade():
    op.drop_table("about_pages")
    op.drop_index("ix_users_reset_password_token", table_name="users")
    op.drop_table("users")
