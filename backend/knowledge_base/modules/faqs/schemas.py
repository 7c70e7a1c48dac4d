"""Pydantic schemas for FAQ module.

JSON payloads use camelCase keys; Python attributes stay snake_case.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def _blank_to_none(value: Any) -> Any:
    """Form fields arrive as empty strings when left untouched."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


# ============================================================================
# Input Schemas
# ============================================================================


class AttachmentInput(CamelModel):
    """Attachment as submitted by the client.

    Entries without name or url are dropped by the service, so both are
    optional here.
    """

    name: str | None = None
    url: str | None = None
    mime_type: str | None = None
    size: int | None = Field(default=None, ge=0)


class ShareInput(CamelModel):
    """Share grant as submitted by the client."""

    email: str | None = None
    permission: str | None = None
    expires_at: datetime | None = None

    normalize_expiry = field_validator("expires_at", mode="before")(_blank_to_none)


class FAQPayload(CamelModel):
    """Fields shared by create and update payloads."""

    title: str | None = None
    summary: str | None = None
    content: str | None = None
    status: str | None = None
    priority: int | None = None
    parent_id: UUID | None = None
    topic_names: list[str] = Field(default_factory=list)
    attachments: list[AttachmentInput] = Field(default_factory=list)
    shares: list[ShareInput] = Field(default_factory=list)

    normalize_parent = field_validator("parent_id", mode="before")(_blank_to_none)

    @field_validator("topic_names", "attachments", "shares", mode="before")
    @classmethod
    def null_list_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class FAQCreate(FAQPayload):
    """Schema for creating a FAQ.

    title and content are checked by the service so that a missing value is
    reported as a 400 validation error.
    """

    author_email: str | None = None
    author_name: str | None = None


class FAQUpdate(FAQPayload):
    """Schema for replacing a FAQ.

    status, parentId and the topic/attachment/share collections are always
    overwritten; title, summary, content and priority only when sent.
    """


# ============================================================================
# Response Schemas
# ============================================================================


class TopicResponse(CamelModel):
    """Plain topic as embedded in FAQ responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class TopicWithFAQCountResponse(TopicResponse):
    """Topic with number of linked FAQs."""

    faq_count: int = 0


class UserResponse(CamelModel):
    """User summary."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    role: str


class AttachmentResponse(CamelModel):
    """Stored attachment."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    faq_id: UUID
    name: str
    url: str
    mime_type: str
    size: int


class ShareResponse(CamelModel):
    """Stored share with its recipient."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    faq_id: UUID
    user_id: UUID
    permission: str
    expires_at: datetime | None = None
    user: UserResponse


class FAQParentResponse(CamelModel):
    """Minimal parent information."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str


class FAQResponse(CamelModel):
    """FAQ with topics flattened and related collections inlined."""

    id: UUID
    title: str
    summary: str | None = None
    content: str
    status: str
    priority: int
    parent_id: UUID | None = None
    author_id: UUID
    created_at: datetime
    updated_at: datetime
    topics: list[TopicResponse] = []
    attachments: list[AttachmentResponse] = []
    shares: list[ShareResponse] = []
    parent: FAQParentResponse | None = None
    children_count: int = 0

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands timestamps back without an offset
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class DeleteResponse(BaseModel):
    """Acknowledgement for deletions."""

    success: bool = True
