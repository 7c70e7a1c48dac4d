"""Common FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Query


def parse_csv(value: str | list[str] | None) -> list[str]:
    """Split a comma-separated parameter, trimming and dropping blanks."""
    if not value:
        return []
    raw = value if isinstance(value, list) else value.split(",")
    return [item.strip() for item in raw if item.strip()]


class FAQFilterParams:
    """Free-text and topic filters for FAQ listing."""

    def __init__(
        self,
        q: str | None = Query(
            default=None,
            description="Case-insensitive search in title, summary and content",
        ),
        topics: str | None = Query(
            default=None,
            description="Comma-separated topic names (case-insensitive)",
        ),
    ) -> None:
        self.q = q or None
        self.topics = parse_csv(topics)


FAQFiltering = Annotated[FAQFilterParams, Depends()]
