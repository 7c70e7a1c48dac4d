"""FAQ module sub-routers."""

from knowledge_base.modules.faqs.routers.faq_router import router as faq_router
from knowledge_base.modules.faqs.routers.topic_router import router as topic_router

__all__ = [
    "faq_router",
    "topic_router",
]
