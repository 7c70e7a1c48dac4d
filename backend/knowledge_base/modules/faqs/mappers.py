"""Mappers for transforming ORM models to DTOs in FAQ module.

Topic join rows are flattened here so routers only deal with response schemas.
"""

from knowledge_base.modules.faqs.models import FAQ, Topic
from knowledge_base.modules.faqs.schemas import (
    AttachmentResponse,
    FAQParentResponse,
    FAQResponse,
    ShareResponse,
    TopicResponse,
    TopicWithFAQCountResponse,
)


def map_faq_to_response(faq: FAQ) -> FAQResponse:
    """Map a FAQ with eager-loaded relations to FAQResponse.

    Args:
        faq: FAQ ORM model loaded with the repository default options

    Returns:
        FAQResponse with plain topics, parent summary and children count
    """
    return FAQResponse(
        id=faq.id,
        title=faq.title,
        summary=faq.summary,
        content=faq.content,
        status=faq.status,
        priority=faq.priority,
        parent_id=faq.parent_id,
        author_id=faq.author_id,
        created_at=faq.created_at,
        updated_at=faq.updated_at,
        topics=[TopicResponse.model_validate(link.topic) for link in faq.topics],
        attachments=[AttachmentResponse.model_validate(a) for a in faq.attachments],
        shares=[ShareResponse.model_validate(s) for s in faq.shares],
        parent=FAQParentResponse.model_validate(faq.parent) if faq.parent else None,
        children_count=len(faq.children),
    )


def map_faqs_to_response(faqs: list[FAQ]) -> list[FAQResponse]:
    """Map a list of FAQ models to FAQResponse list."""
    return [map_faq_to_response(faq) for faq in faqs]


def map_topics_with_counts_to_response(
    topics_with_counts: list[tuple[Topic, int]],
) -> list[TopicWithFAQCountResponse]:
    """Map (Topic, faq_count) pairs to TopicWithFAQCountResponse list."""
    return [
        TopicWithFAQCountResponse(id=topic.id, name=topic.name, faq_count=count)
        for topic, count in topics_with_counts
    ]
