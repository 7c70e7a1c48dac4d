"""FAQ module service layer."""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_base.config import settings
from knowledge_base.core.database import transactional
from knowledge_base.core.exceptions import (
    InvalidParentError,
    MissingFieldsError,
    NotFoundError,
)
from knowledge_base.core.logging import get_logger
from knowledge_base.modules.faqs.models import (
    DEFAULT_MIME_TYPE,
    FAQ,
    FAQStatus,
    SharePermission,
    Topic,
)
from knowledge_base.modules.faqs.repository import FAQRepository, TopicRepository
from knowledge_base.modules.faqs.schemas import (
    AttachmentInput,
    FAQCreate,
    FAQUpdate,
    ShareInput,
)

logger = get_logger(__name__)


def normalize_status(value: str | None) -> str:
    """Only the exact PUBLISHED literal publishes; everything else is a draft."""
    if value == FAQStatus.PUBLISHED.value:
        return FAQStatus.PUBLISHED.value
    return FAQStatus.DRAFT.value


def normalize_permission(value: str | None) -> str:
    if value in (SharePermission.EDIT.value, SharePermission.ADMIN.value):
        return value
    return SharePermission.VIEW.value


def normalize_topic_names(names: list[str]) -> list[str]:
    """Trim names, drop blanks and collapse duplicates keeping first-seen order."""
    return list(dict.fromkeys(name.strip() for name in names if name and name.strip()))


def normalize_attachments(attachments: list[AttachmentInput]) -> list[dict[str, Any]]:
    """Drop entries without name or url and fill defaults."""
    return [
        {
            "name": attachment.name,
            "url": attachment.url,
            "mime_type": attachment.mime_type or DEFAULT_MIME_TYPE,
            "size": attachment.size or 0,
        }
        for attachment in attachments
        if attachment.name and attachment.url
    ]


def share_recipient_name(email: str) -> str:
    """Default display name for a share recipient: the email's local part."""
    return email.split("@")[0] or email


class FAQService:
    """Service for managing FAQs."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.repository = FAQRepository(db)

    async def get_by_id(self, faq_id: UUID) -> FAQ:
        """Get FAQ by ID."""
        faq = await self.repository.get_by_id(faq_id)
        if not faq:
            raise NotFoundError("FAQ", faq_id)
        return faq

    async def list_faqs(
        self,
        q: str | None = None,
        topic_names: list[str] | None = None,
    ) -> list[FAQ]:
        """List FAQs filtered by free text and topic names."""
        return await self.repository.list_faqs(q=q, topic_names=topic_names or [])

    @transactional
    async def create(self, data: FAQCreate) -> FAQ:
        """Create a FAQ with its topics, attachments and shares."""
        missing = [field for field in ("title", "content") if not getattr(data, field)]
        if missing:
            raise MissingFieldsError(missing)

        if data.parent_id:
            await self._check_parent_exists(data.parent_id)

        if data.author_email:
            author = await self.repository.ensure_user(
                data.author_email, data.author_name or data.author_email
            )
        else:
            author = await self.repository.ensure_user(
                settings.default_author_email,
                data.author_name or settings.default_author_name,
            )

        topics = await self._ensure_topics(data.topic_names)
        shares = await self._resolve_shares(data.shares)

        faq_id = await self.repository.insert_aggregate(
            values={
                "title": data.title,
                "summary": data.summary,
                "content": data.content,
                "status": normalize_status(data.status),
                "priority": data.priority or 0,
                "parent_id": data.parent_id,
                "author_id": author.id,
            },
            topics=topics,
            attachments=normalize_attachments(data.attachments),
            shares=shares,
        )

        faq = await self.get_by_id(faq_id)
        logger.info(
            "faq_created",
            faq_id=faq.id,
            status=faq.status,
            topics=len(faq.topics),
            attachments=len(faq.attachments),
            shares=len(faq.shares),
        )
        return faq

    @transactional
    async def update(self, faq_id: UUID, data: FAQUpdate) -> FAQ:
        """Replace a FAQ.

        Status and parent are always rewritten and the topic, attachment and
        share sets are replaced wholesale, so omitted collections end up empty.
        """
        if not await self.repository.exists(faq_id):
            raise NotFoundError("FAQ", faq_id)

        if data.parent_id:
            if data.parent_id == faq_id:
                raise InvalidParentError(data.parent_id, "Parent cannot be the same FAQ")
            await self._check_parent_exists(data.parent_id)

        topics = await self._ensure_topics(data.topic_names)
        shares = await self._resolve_shares(data.shares)

        values: dict[str, Any] = {
            "status": normalize_status(data.status),
            "parent_id": data.parent_id,
        }
        for field in ("title", "content", "priority"):
            if field in data.model_fields_set and getattr(data, field) is not None:
                values[field] = getattr(data, field)
        if "summary" in data.model_fields_set:
            values["summary"] = data.summary

        await self.repository.replace_aggregate(
            faq_id,
            values=values,
            topics=topics,
            attachments=normalize_attachments(data.attachments),
            shares=shares,
        )

        faq = await self.get_by_id(faq_id)
        logger.info(
            "faq_updated",
            faq_id=faq_id,
            fields=sorted(values),
            topics=len(faq.topics),
        )
        return faq

    @transactional
    async def delete(self, faq_id: UUID) -> None:
        """Delete FAQ after its attachments, shares and topic links."""
        if not await self.repository.delete_aggregate(faq_id):
            raise NotFoundError("FAQ", faq_id)
        logger.info("faq_deleted", faq_id=faq_id)

    # ========== Helpers ==========

    async def _check_parent_exists(self, parent_id: UUID) -> None:
        if not await self.repository.exists(parent_id):
            raise InvalidParentError(parent_id, "Parent FAQ not found")

    async def _ensure_topics(self, names: list[str]) -> list[Topic]:
        topics = []
        for name in normalize_topic_names(names):
            topics.append(await self.repository.ensure_topic(name))
        return topics

    async def _resolve_shares(self, shares: list[ShareInput]) -> list[dict[str, Any]]:
        """Ensure a user for every share with an email; drop the rest."""
        resolved = []
        for share in shares:
            if not share.email:
                continue
            user = await self.repository.ensure_user(
                share.email, share_recipient_name(share.email)
            )
            resolved.append(
                {
                    "user_id": user.id,
                    "permission": normalize_permission(share.permission),
                    "expires_at": share.expires_at,
                }
            )
        return resolved


class TopicService:
    """Service for the topic catalogue."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.repository = TopicRepository(db)

    async def list_topics_with_faq_count(self) -> list[tuple[Topic, int]]:
        """List all topics with FAQ count."""
        return await self.repository.list_with_faq_count()
