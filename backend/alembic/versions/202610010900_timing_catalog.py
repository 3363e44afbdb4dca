"""Timing catalog schema: item profiles and interaction rules."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "202610010900"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "item_profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("canonical_name", sa.Text(), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=False),
        sa.Column("kind", sa.Text(), nullable=False),
        sa.Column(
            "tags",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::text[]"),
        ),
        sa.Column(
            "timing",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.UniqueConstraint("canonical_name", name="uq_item_profiles_canonical_name"),
        sa.CheckConstraint("kind in ('med', 'supplement', 'food')", name="ck_item_profiles_kind"),
    )
    op.create_index("ix_item_profiles_tags", "item_profiles", ["tags"], unique=False, postgresql_using="gin")

    op.create_table(
        "interaction_rules",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("rule_key", sa.Text(), nullable=False),
        sa.Column("applies_to", postgresql.ARRAY(sa.Text()), nullable=False, server_default=sa.text("'{}'::text[]")),
        sa.Column(
            "applies_if_tags",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::text[]"),
        ),
        sa.Column(
            "conflicts_with_names",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::text[]"),
        ),
        sa.Column(
            "conflicts_with_tags",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::text[]"),
        ),
        sa.Column("constraint_data", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("severity", sa.Text(), nullable=False, server_default=sa.text("'soft'")),
        sa.Column("confidence", sa.Integer(), nullable=False, server_default=sa.text("80")),
        sa.Column("rationale", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("refs", postgresql.ARRAY(sa.Text()), nullable=False, server_default=sa.text("'{}'::text[]")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.UniqueConstraint("rule_key", "version", name="uq_interaction_rules_key_version"),
        sa.CheckConstraint("severity in ('hard', 'soft')", name="ck_interaction_rules_severity"),
        sa.CheckConstraint("confidence >= 0 and confidence <= 100", name="ck_interaction_rules_confidence"),
    )
    op.create_index("ix_interaction_rules_is_active", "interaction_rules", ["is_active"], unique=False)
    op.create_index(
        "ix_interaction_rules_applies_if_tags",
        "interaction_rules",
        ["applies_if_tags"],
        unique=False,
        postgresql_using="gin",
    )


def downgrade() -> None:
    op.drop_index("ix_interaction_rules_applies_if_tags", table_name="interaction_rules")
    op.drop_index("ix_interaction_rules_is_active", table_name="interaction_rules")
    op.drop_table("interaction_rules")
    op.drop_index("ix_item_profiles_tags", table_name="item_profiles")
    op.drop_table("item_profiles")
