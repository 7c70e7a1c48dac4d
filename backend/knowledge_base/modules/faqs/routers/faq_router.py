"""FAQ routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_base.core.database import get_db
from knowledge_base.core.dependencies import FAQFiltering
from knowledge_base.modules.faqs.mappers import map_faq_to_response, map_faqs_to_response
from knowledge_base.modules.faqs.schemas import (
    DeleteResponse,
    FAQCreate,
    FAQResponse,
    FAQUpdate,
)
from knowledge_base.modules.faqs.service import FAQService

router = APIRouter()


@router.get(
    "/faqs",
    response_model=list[FAQResponse],
    summary="List FAQs",
)
async def list_faqs(
    filtering: FAQFiltering,
    db: AsyncSession = Depends(get_db),
) -> list[FAQResponse]:
    """List FAQs, newest update first, filtered by `q` and `topics`."""
    service = FAQService(db)
    faqs = await service.list_faqs(q=filtering.q, topic_names=filtering.topics)
    return map_faqs_to_response(faqs)


@router.post(
    "/faqs",
    response_model=FAQResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create FAQ",
)
async def create_faq(
    data: FAQCreate,
    db: AsyncSession = Depends(get_db),
) -> FAQResponse:
    """Create a new FAQ."""
    service = FAQService(db)
    faq = await service.create(data)
    return map_faq_to_response(faq)


@router.get(
    "/faqs/{faq_id}",
    response_model=FAQResponse,
    summary="Get FAQ",
)
async def get_faq(
    faq_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> FAQResponse:
    """Get FAQ by ID."""
    service = FAQService(db)
    faq = await service.get_by_id(faq_id)
    return map_faq_to_response(faq)


@router.patch(
    "/faqs/{faq_id}",
    response_model=FAQResponse,
    summary="Update FAQ",
)
async def update_faq(
    faq_id: UUID,
    data: FAQUpdate,
    db: AsyncSession = Depends(get_db),
) -> FAQResponse:
    """Replace a FAQ and its topics, attachments and shares."""
    service = FAQService(db)
    faq = await service.update(faq_id, data)
    return map_faq_to_response(faq)


@router.delete(
    "/faqs/{faq_id}",
    response_model=DeleteResponse,
    summary="Delete FAQ",
)
async def delete_faq(
    faq_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> DeleteResponse:
    """Delete a FAQ together with its dependents."""
    service = FAQService(db)
    await service.delete(faq_id)
    return DeleteResponse(success=True)
