"""Data access for the FAQ aggregate.

The repository never commits: every method runs inside the transaction owned
by the calling service method (see ``transactional``).
"""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from knowledge_base.core.base_model import utcnow
from knowledge_base.modules.faqs.models import (
    FAQ,
    Attachment,
    FAQTopic,
    Share,
    Topic,
    User,
)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def escape_like(value: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so user input is matched literally."""
    return (
        value.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


def build_filters(q: str | None = None, topic_names: Sequence[str] | None = None) -> list[Any]:
    """Build WHERE conditions for FAQ search.

    ``q`` matches title, summary or content as a case-insensitive substring.
    ``topic_names`` keeps FAQs linked to at least one topic whose name equals
    any of the values, ignoring case. Conditions are ANDed by the caller.
    """
    filters: list[Any] = []

    if q:
        pattern = f"%{escape_like(q)}%"
        filters.append(
            or_(
                FAQ.title.ilike(pattern, escape="\\"),
                FAQ.summary.ilike(pattern, escape="\\"),
                FAQ.content.ilike(pattern, escape="\\"),
            )
        )

    if topic_names:
        lowered = sorted({name.lower() for name in topic_names})
        filters.append(
            FAQ.topics.any(
                FAQTopic.topic.has(func.lower(Topic.name).in_(lowered))
            )
        )

    return filters


class FAQRepository:
    """Query and command builder for FAQs and their dependents."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _get_default_options(self) -> list[Any]:
        """Eager loads producing the nested FAQ response shape."""
        return [
            selectinload(FAQ.topics).selectinload(FAQTopic.topic),
            selectinload(FAQ.attachments),
            selectinload(FAQ.shares).selectinload(Share.user),
            selectinload(FAQ.parent),
            selectinload(FAQ.children),
        ]

    def _with_options(self, stmt: Select) -> Select:
        # populate_existing refreshes collections already held by the session
        return stmt.options(*self._get_default_options()).execution_options(
            populate_existing=True
        )

    def _upsert(self, model: type[Any]) -> Any:
        """Dialect specific INSERT supporting ON CONFLICT."""
        dialect = self.db.get_bind().dialect.name
        try:
            return _UPSERT_DIALECTS[dialect](model)
        except KeyError:
            raise ValueError(f"Upsert is not supported on the {dialect!r} dialect") from None

    # ========== Reads ==========

    async def get_by_id(self, faq_id: UUID) -> FAQ | None:
        """Get FAQ with topics, attachments, shares, parent and children."""
        stmt = self._with_options(select(FAQ).where(FAQ.id == faq_id))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, faq_id: UUID) -> bool:
        result = await self.db.execute(select(FAQ.id).where(FAQ.id == faq_id))
        return result.scalar_one_or_none() is not None

    async def list_faqs(
        self,
        q: str | None = None,
        topic_names: Sequence[str] | None = None,
    ) -> list[FAQ]:
        """List FAQs matching filters, most recently updated first."""
        stmt = select(FAQ)
        for condition in build_filters(q, topic_names):
            stmt = stmt.where(condition)

        stmt = self._with_options(stmt.order_by(FAQ.updated_at.desc(), FAQ.created_at.desc()))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    # ========== Natural key upserts ==========

    async def ensure_topic(self, name: str) -> Topic:
        """Get or create topic by exact name in a single statement."""
        insert_stmt = self._upsert(Topic).values(name=name)
        stmt = insert_stmt.on_conflict_do_update(
            index_elements=[Topic.name],
            set_={"name": insert_stmt.excluded.name},
        ).returning(Topic)

        result = await self.db.execute(stmt, execution_options={"populate_existing": True})
        return result.scalar_one()

    async def ensure_user(self, email: str, name: str) -> User:
        """Get or create user by email, refreshing the stored name."""
        insert_stmt = self._upsert(User).values(email=email, name=name)
        stmt = insert_stmt.on_conflict_do_update(
            index_elements=[User.email],
            set_={"name": insert_stmt.excluded.name, "updated_at": utcnow()},
        ).returning(User)

        result = await self.db.execute(stmt, execution_options={"populate_existing": True})
        return result.scalar_one()

    # ========== Aggregate writes ==========

    def _build_dependents(
        self,
        faq_id: UUID,
        topics: Sequence[Topic],
        attachments: Sequence[dict[str, Any]],
        shares: Sequence[dict[str, Any]],
    ) -> list[Any]:
        rows: list[Any] = [
            FAQTopic(faq_id=faq_id, topic_id=topic.id, position=index)
            for index, topic in enumerate(topics)
        ]
        rows.extend(
            Attachment(faq_id=faq_id, position=index, **attachment)
            for index, attachment in enumerate(attachments)
        )
        rows.extend(
            Share(faq_id=faq_id, position=index, **share)
            for index, share in enumerate(shares)
        )
        return rows

    async def insert_aggregate(
        self,
        values: dict[str, Any],
        topics: Sequence[Topic],
        attachments: Sequence[dict[str, Any]],
        shares: Sequence[dict[str, Any]],
    ) -> UUID:
        """Insert FAQ row together with its topic links, attachments and shares."""
        faq = FAQ(**values)
        self.db.add(faq)
        await self.db.flush()

        self.db.add_all(self._build_dependents(faq.id, topics, attachments, shares))
        await self.db.flush()
        return faq.id

    async def _delete_dependents(self, faq_id: UUID) -> None:
        for model in (Attachment, Share, FAQTopic):
            await self.db.execute(
                delete(model)
                .where(model.faq_id == faq_id)
                .execution_options(synchronize_session=False)
            )

    async def replace_aggregate(
        self,
        faq_id: UUID,
        values: dict[str, Any],
        topics: Sequence[Topic],
        attachments: Sequence[dict[str, Any]],
        shares: Sequence[dict[str, Any]],
    ) -> None:
        """Overwrite scalar fields and replace every dependent collection."""
        await self._delete_dependents(faq_id)

        await self.db.execute(
            update(FAQ)
            .where(FAQ.id == faq_id)
            .values(**values, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )

        self.db.add_all(self._build_dependents(faq_id, topics, attachments, shares))
        await self.db.flush()

    async def delete_aggregate(self, faq_id: UUID) -> bool:
        """Delete dependents, detach children, then delete the FAQ.

        Returns False when no FAQ row was deleted.
        """
        await self._delete_dependents(faq_id)
        await self.db.execute(
            update(FAQ)
            .where(FAQ.parent_id == faq_id)
            .values(parent_id=None)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(
            delete(FAQ)
            .where(FAQ.id == faq_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0


class TopicRepository:
    """Read access to the topic catalogue."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_with_faq_count(self) -> list[tuple[Topic, int]]:
        """List topics ordered by name with the number of linked FAQs."""
        stmt = (
            select(Topic, func.count(FAQTopic.id).label("faq_count"))
            .outerjoin(FAQTopic, FAQTopic.topic_id == Topic.id)
            .group_by(Topic.id)
            .order_by(Topic.name)
        )
        result = await self.db.execute(stmt)
        return [(topic, int(count or 0)) for topic, count in result.all()]
