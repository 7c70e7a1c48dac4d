"""Topic routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_base.core.database import get_db
from knowledge_base.modules.faqs.mappers import map_topics_with_counts_to_response
from knowledge_base.modules.faqs.schemas import TopicWithFAQCountResponse
from knowledge_base.modules.faqs.service import TopicService

router = APIRouter()


@router.get(
    "/topics",
    response_model=list[TopicWithFAQCountResponse],
    summary="List topics with FAQ count",
)
async def list_topics(
    db: AsyncSession = Depends(get_db),
) -> list[TopicWithFAQCountResponse]:
    """List all topics for the filter bar."""
    service = TopicService(db)
    topics_with_counts = await service.list_topics_with_faq_count()
    return map_topics_with_counts_to_response(topics_with_counts)
