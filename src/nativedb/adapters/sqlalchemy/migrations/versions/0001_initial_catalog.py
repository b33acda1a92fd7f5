"""Initial native catalog schema.

Revision ID: 0001_initial_catalog
Revises:
Create Date: 2026-01-18 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_catalog"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "natives",
        sa.Column("hash", sa.String(length=32), nullable=False),
        sa.Column("jhash", sa.String(length=32), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("name_sp", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("namespace", sa.String(length=64), nullable=False),
        sa.Column("params", sa.Text(), nullable=False),
        sa.Column("return_type", sa.String(length=64), nullable=False, server_default="void"),
        sa.Column("apiset", sa.String(length=20), nullable=False, server_default="client"),
        sa.Column("game", sa.String(length=20), nullable=False, server_default="gta5"),
        sa.Column("build_number", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("description_original", sa.Text(), nullable=False),
        sa.Column("description_localized", sa.Text(), nullable=True),
        sa.Column("translation_status", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("hash", name=op.f("pk_natives")),
    )
    op.create_index("idx_name", "natives", ["name"])
    op.create_index("idx_namespace", "natives", ["namespace"])
    op.create_index("idx_status", "natives", ["translation_status"])

    op.create_table(
        "native_examples",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("native_hash", sa.String(length=32), nullable=False),
        sa.Column("language", sa.String(length=20), nullable=False),
        sa.Column("code", sa.Text(), nullable=False),
        sa.Column("contributor", sa.String(length=50), nullable=False, server_default="System"),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(
            ["native_hash"],
            ["natives.hash"],
            name=op.f("fk_native_examples_native_hash_natives"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_native_examples")),
    )
    op.create_index("idx_native_examples_native_hash", "native_examples", ["native_hash"])

    op.create_table(
        "native_sources",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("native_hash", sa.String(length=32), nullable=False),
        sa.Column("code_content", sa.Text(), nullable=False),
        sa.Column("code_lang", sa.String(length=20), nullable=False, server_default="cpp"),
        sa.Column("source_type", sa.String(length=32), nullable=False),
        sa.Column("game_build", sa.String(length=20), nullable=True),
        sa.Column("contributor", sa.String(length=50), nullable=False, server_default="System"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(
            ["native_hash"],
            ["natives.hash"],
            name=op.f("fk_native_sources_native_hash_natives"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_native_sources")),
    )
    op.create_index(
        "idx_native_sources_native_type",
        "native_sources",
        ["native_hash", "source_type"],
    )


def downgrade() -> None:
    op.drop_index("idx_native_sources_native_type", table_name="native_sources")
    op.drop_table("native_sources")
    op.drop_index("idx_native_examples_native_hash", table_name="native_examples")
    op.drop_table("native_examples")
    op.drop_index("idx_status", table_name="natives")
    op.drop_index("idx_namespace", table_name="natives")
    op.drop_index("idx_name", table_name="natives")
    op.drop_table("natives")
