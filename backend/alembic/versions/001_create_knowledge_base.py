"""Create knowledge base tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, topics, faqs and FAQ dependents."""

    # Users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="EDITOR"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_updated_at", "users", ["updated_at"])

    # Topics
    op.create_table(
        "topics",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("name", name="uq_topics_name"),
    )

    # FAQs
    op.create_table(
        "faqs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="DRAFT"),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("parent_id", sa.Uuid(), sa.ForeignKey("faqs.id", ondelete="SET NULL"), nullable=True),
        sa.Column("author_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("status IN ('DRAFT', 'PUBLISHED')", name="ck_faqs_status"),
        sa.CheckConstraint("parent_id IS NULL OR parent_id <> id", name="ck_faqs_not_own_parent"),
    )
    op.create_index("ix_faqs_status", "faqs", ["status"])
    op.create_index("ix_faqs_parent_id", "faqs", ["parent_id"])
    op.create_index("ix_faqs_author_id", "faqs", ["author_id"])
    op.create_index("ix_faqs_updated_at", "faqs", ["updated_at"])

    # FAQ <-> topic links
    op.create_table(
        "faq_topics",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("faq_id", sa.Uuid(), sa.ForeignKey("faqs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("topic_id", sa.Uuid(), sa.ForeignKey("topics.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("faq_id", "topic_id", name="uq_faq_topics"),
    )
    op.create_index("ix_faq_topics_topic_id", "faq_topics", ["topic_id"])

    # Attachments
    op.create_table(
        "attachments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("faq_id", sa.Uuid(), sa.ForeignKey("faqs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("mime_type", sa.String(255), nullable=False, server_default="application/octet-stream"),
        sa.Column("size", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("size >= 0", name="ck_attachments_size"),
    )
    op.create_index("ix_attachments_faq_id", "attachments", ["faq_id"])

    # Shares
    op.create_table(
        "shares",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("faq_id", sa.Uuid(), sa.ForeignKey("faqs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("permission", sa.String(10), nullable=False, server_default="VIEW"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("permission IN ('VIEW', 'EDIT', 'ADMIN')", name="ck_shares_permission"),
    )
    op.create_index("ix_shares_faq_id", "shares", ["faq_id"])
    op.create_index("ix_shares_user_id", "shares", ["user_id"])
    op.create_index("ix_shares_faq_user", "shares", ["faq_id", "user_id"])


def downgrade() -> None:
    """Drop knowledge base tables."""
    op.drop_table("shares")
    op.drop_table("attachments")
    op.drop_table("faq_topics")
    op.drop_table("faqs")
    op.drop_table("topics")
    op.drop_table("users")
