"""Canonical persons, name variants and the review queue.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

ENUM_LENGTH = 32


def _enum_column(name: str, *, nullable: bool) -> sa.Column[str]:
    # non-native enums persist as plain strings
    return sa.Column(name, sa.String(ENUM_LENGTH), nullable=nullable)


def _phonetic_columns() -> list[sa.Column[str]]:
    return [
        sa.Column("first_soundex", sa.String(4), nullable=False),
        sa.Column("last_soundex", sa.String(4), nullable=False),
        sa.Column("first_metaphone", sa.String(8), nullable=False),
        sa.Column("last_metaphone", sa.String(8), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "canonical_persons",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("canonical_name", sa.Text(), nullable=False),
        sa.Column("first", sa.Text(), nullable=False),
        sa.Column("middle", sa.Text(), nullable=False),
        sa.Column("last", sa.Text(), nullable=False),
        sa.Column("suffix", sa.Text(), nullable=False),
        *_phonetic_columns(),
        _enum_column("person_type", nullable=False),
        _enum_column("sex", nullable=True),
        sa.Column("birth_year_estimate", sa.Integer(), nullable=True),
        sa.Column("death_year_estimate", sa.Integer(), nullable=True),
        sa.Column("primary_state", sa.Text(), nullable=True),
        sa.Column("primary_county", sa.Text(), nullable=True),
        _enum_column("verification_status", nullable=False),
        sa.Column("confidence_score", sa.Float(), nullable=False),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint("id", name="pk_canonical_persons"),
    )
    for column in ("first_soundex", "last_soundex", "first_metaphone", "last_metaphone"):
        op.create_index(f"ix_canonical_persons_{column}", "canonical_persons", [column])
    op.create_index(
        "ix_canonical_persons_location", "canonical_persons", ["primary_state", "primary_county"]
    )
    op.create_index(
        "ix_canonical_persons_name_lower", "canonical_persons", [sa.text("lower(canonical_name)")]
    )
    op.create_index(
        "ix_canonical_persons_last_lower", "canonical_persons", [sa.text("lower(last)")]
    )
    op.create_index(
        "ix_canonical_persons_initials",
        "canonical_persons",
        [sa.text("upper(substr(first, 1, 1))"), sa.text("upper(substr(last, 1, 1))")],
    )

    op.create_table(
        "name_variants",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("canonical_id", sa.Uuid(), nullable=False),
        sa.Column("variant_name", sa.Text(), nullable=False),
        sa.Column("first", sa.Text(), nullable=False),
        sa.Column("last", sa.Text(), nullable=False),
        *_phonetic_columns(),
        sa.Column("source_type", sa.String(50), nullable=True),
        sa.Column("source_url", sa.Text(), nullable=True),
        sa.Column("unconfirmed_person_id", sa.String(64), nullable=True),
        _enum_column("match_method", nullable=False),
        sa.Column("match_confidence", sa.Float(), nullable=False),
        sa.Column("levenshtein_distance", sa.Integer(), nullable=False),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint("id", name="pk_name_variants"),
        sa.ForeignKeyConstraint(
            ["canonical_id"],
            ["canonical_persons.id"],
            name="fk_name_variants_canonical_id_canonical_persons",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_name_variants_canonical_id", "name_variants", ["canonical_id"])
    op.create_index("ix_name_variants_last_soundex", "name_variants", ["last_soundex"])
    op.create_index("ix_name_variants_last_metaphone", "name_variants", ["last_metaphone"])
    op.create_index(
        "uq_name_variants_canonical_name",
        "name_variants",
        ["canonical_id", sa.text("lower(variant_name)")],
        unique=True,
    )
    op.create_index(
        "ix_name_variants_initials",
        "name_variants",
        [sa.text("upper(substr(first, 1, 1))"), sa.text("upper(substr(last, 1, 1))")],
    )

    op.create_table(
        "name_match_queue",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("unconfirmed_name", sa.Text(), nullable=False),
        sa.Column("unconfirmed_person_id", sa.String(64), nullable=True),
        sa.Column("candidates", sa.Text(), nullable=False),
        sa.Column("source_url", sa.Text(), nullable=True),
        sa.Column("source_context", sa.Text(), nullable=True),
        sa.Column("location_context", sa.Text(), nullable=True),
        sa.Column("priority", sa.Integer(), nullable=False),
        _enum_column("status", nullable=False),
        _enum_column("resolution_type", nullable=True),
        sa.Column("resolved_canonical_id", sa.Uuid(), nullable=True),
        sa.Column("resolved_by", sa.String(255), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolution_notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint("id", name="pk_name_match_queue"),
        sa.CheckConstraint("priority BETWEEN 1 AND 10", name="ck_name_match_queue_priority"),
    )
    op.create_index(
        "ix_name_match_queue_status_priority", "name_match_queue", ["status", "priority"]
    )
    op.create_index(
        "ix_name_match_queue_name_lower", "name_match_queue", [sa.text("lower(unconfirmed_name)")]
    )


def downgrade() -> None:
    op.drop_table("name_match_queue")
    op.drop_table("name_variants")
    op.drop_table("canonical_persons")
