"""user_otp_attempts

Revision ID: 8b41d2e6c5a3
Revises: 3f2a9c1d7e10
Create Date: 2026-10-19 15:03:27.518904

"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "8b41d2e6c5a3"
down_revision = "3f2a9c1d7e10"
branch_labels = None
depends_on = None


def upgrade():
    op.add_column(
        "users",
        sa.Column("otp_attempts", sa.Integer(), nullable=False, server_default="0"),
    )


def downgrade():
    op.drop_column("users", "otp_attempts")
