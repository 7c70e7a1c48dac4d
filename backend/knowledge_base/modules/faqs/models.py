"""FAQ module database models."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from knowledge_base.core.base_model import (
    Base,
    CreatedAtMixin,
    TimestampMixin,
    UUIDMixin,
)


class FAQStatus(str, Enum):
    """FAQ publication status."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class SharePermission(str, Enum):
    """Access level granted by a share."""

    VIEW = "VIEW"
    EDIT = "EDIT"
    ADMIN = "ADMIN"


class UserRole(str, Enum):
    """Role of a user known to the knowledge base."""

    VIEWER = "VIEWER"
    EDITOR = "EDITOR"
    ADMIN = "ADMIN"


DEFAULT_MIME_TYPE = "application/octet-stream"


# ============================================================================
# Users
# ============================================================================


class User(Base, UUIDMixin, TimestampMixin):
    """Author or share recipient, identified by email."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20),
        default=UserRole.EDITOR.value,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"


# ============================================================================
# Topics
# ============================================================================


class Topic(Base, UUIDMixin, CreatedAtMixin):
    """Named tag attachable to many FAQs."""

    __tablename__ = "topics"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Topic {self.name}>"


# ============================================================================
# FAQs
# ============================================================================


class FAQ(Base, UUIDMixin, TimestampMixin):
    """Knowledge base article (frequently asked question)."""

    __tablename__ = "faqs"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=FAQStatus.DRAFT.value,
        nullable=False,
        index=True,
    )
    priority: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    parent_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("faqs.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    author_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    # Relations
    parent: Mapped["FAQ | None"] = relationship(
        "FAQ",
        remote_side="FAQ.id",
        back_populates="children",
    )
    children: Mapped[list["FAQ"]] = relationship(
        "FAQ",
        back_populates="parent",
    )
    author: Mapped["User"] = relationship("User")
    topics: Mapped[list["FAQTopic"]] = relationship(
        "FAQTopic",
        back_populates="faq",
        cascade="all, delete-orphan",
        order_by="FAQTopic.position",
    )
    attachments: Mapped[list["Attachment"]] = relationship(
        "Attachment",
        back_populates="faq",
        cascade="all, delete-orphan",
        order_by="Attachment.position",
    )
    shares: Mapped[list["Share"]] = relationship(
        "Share",
        back_populates="faq",
        cascade="all, delete-orphan",
        order_by="Share.position",
    )

    __table_args__ = (
        CheckConstraint("status IN ('DRAFT', 'PUBLISHED')", name="ck_faqs_status"),
        CheckConstraint("parent_id IS NULL OR parent_id <> id", name="ck_faqs_not_own_parent"),
    )

    def __repr__(self) -> str:
        return f"<FAQ {self.id}>"


class FAQTopic(Base, UUIDMixin):
    """Link between FAQ and topic."""

    __tablename__ = "faq_topics"

    faq_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("faqs.id", ondelete="CASCADE"),
        nullable=False,
    )
    topic_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("topics.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Input order of the topic names
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    faq: Mapped["FAQ"] = relationship("FAQ", back_populates="topics")
    topic: Mapped["Topic"] = relationship("Topic")

    __table_args__ = (
        UniqueConstraint("faq_id", "topic_id", name="uq_faq_topics"),
    )


class Attachment(Base, UUIDMixin, CreatedAtMixin):
    """File reference owned by a FAQ."""

    __tablename__ = "attachments"

    faq_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("faqs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    mime_type: Mapped[str] = mapped_column(
        String(255),
        default=DEFAULT_MIME_TYPE,
        nullable=False,
    )
    size: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    faq: Mapped["FAQ"] = relationship("FAQ", back_populates="attachments")

    __table_args__ = (
        CheckConstraint("size >= 0", name="ck_attachments_size"),
    )


class Share(Base, UUIDMixin, CreatedAtMixin):
    """Grant of access to a FAQ for one user."""

    __tablename__ = "shares"

    faq_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("faqs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    permission: Mapped[str] = mapped_column(
        String(10),
        default=SharePermission.VIEW.value,
        nullable=False,
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    faq: Mapped["FAQ"] = relationship("FAQ", back_populates="shares")
    user: Mapped["User"] = relationship("User")

    __table_args__ = (
        CheckConstraint(
            "permission IN ('VIEW', 'EDIT', 'ADMIN')",
            name="ck_shares_permission",
        ),
        Index("ix_shares_faq_user", "faq_id", "user_id"),
    )
