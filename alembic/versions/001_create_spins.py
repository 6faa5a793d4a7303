"""Create the spins table with one row per normalized email.

The app also runs Base.metadata.create_all at startup, so the table may already
exist; in that case only the unique constraint on email is ensured.

Revision ID: 001_create_spins
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_create_spins"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CONSTRAINT_NAME = "uq_spins_email"


def upgrade() -> None:
    inspector = sa.inspect(op.get_bind())

    if "spins" not in inspector.get_table_names():
        op.create_table(
            "spins",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("email", sa.String(), nullable=False),
            sa.Column("domain", sa.String(), nullable=True),
            sa.Column("discount", sa.Integer(), nullable=True),
            sa.Column("couponCode", sa.String(), nullable=True),
            sa.Column("createdAt", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.UniqueConstraint("email", name=CONSTRAINT_NAME),
        )
        op.create_index("ix_spins_id", "spins", ["id"])
        print("✅ Created spins table")
        return

    unique_columns = [c["column_names"] for c in inspector.get_unique_constraints("spins")]
    unique_columns += [i["column_names"] for i in inspector.get_indexes("spins") if i.get("unique")]
    if ["email"] in unique_columns:
        print("✅ Unique constraint on spins.email already exists")
        return

    # batch mode lets SQLite rebuild the table to add the constraint
    with op.batch_alter_table("spins") as batch_op:
        batch_op.create_unique_constraint(CONSTRAINT_NAME, ["email"])
    print("✅ Added unique constraint on spins.email")


def downgrade() -> None:
    op.drop_table("spins")
