"""Test fixtures and factories."""

from tests.fixtures.factories import (
    AttachmentFactory,
    FAQFactory,
    TopicFactory,
    UserFactory,
)

__all__ = [
    "UserFactory",
    "TopicFactory",
    "FAQFactory",
    "AttachmentFactory",
]
