"""API tests for FAQ and topic endpoints."""

from typing import Any
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient

from knowledge_base.modules.faqs.models import FAQ


async def _create(client: AsyncClient, **overrides: Any) -> dict[str, Any]:
    payload = {"title": "Reset password", "content": "Open the login page."}
    payload.update(overrides)
    response = await client.post("/api/faqs", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateFAQ:
    """POST /api/faqs"""

    @pytest.mark.asyncio
    async def test_create_full_payload(self, client: AsyncClient) -> None:
        """Created FAQ is returned in camelCase with its dependents."""
        data = await _create(
            client,
            summary="Password recovery",
            status="PUBLISHED",
            priority=3,
            authorEmail="ana@example.com",
            authorName="Ana",
            topicNames=["Security", "Accounts"],
            attachments=[{"name": "guide.pdf", "url": "http://files/guide.pdf", "mimeType": "application/pdf", "size": 2048}],
            shares=[{"email": "bob@example.com", "permission": "EDIT", "expiresAt": "2026-12-31T00:00:00Z"}],
        )

        assert data["title"] == "Reset password"
        assert data["summary"] == "Password recovery"
        assert data["status"] == "PUBLISHED"
        assert data["priority"] == 3
        assert data["parentId"] is None
        assert data["parent"] is None
        assert data["childrenCount"] == 0
        assert [topic["name"] for topic in data["topics"]] == ["Security", "Accounts"]
        assert data["attachments"][0]["mimeType"] == "application/pdf"
        assert data["attachments"][0]["faqId"] == data["id"]
        assert data["shares"][0]["permission"] == "EDIT"
        assert data["shares"][0]["user"]["email"] == "bob@example.com"
        assert data["shares"][0]["expiresAt"].startswith("2026-12-31")
        assert "createdAt" in data
        assert "updatedAt" in data

    @pytest.mark.asyncio
    async def test_create_minimal_defaults(self, client: AsyncClient) -> None:
        """Unset status becomes DRAFT; empty collections are returned as lists."""
        data = await _create(client)

        assert data["status"] == "DRAFT"
        assert data["priority"] == 0
        assert data["topics"] == []
        assert data["attachments"] == []
        assert data["shares"] == []

    @pytest.mark.asyncio
    async def test_attachments_filtered_and_defaulted(self, client: AsyncClient) -> None:
        data = await _create(
            client,
            attachments=[
                {"name": "", "url": "http://x"},
                {"name": "doc", "url": "http://x"},
            ],
        )

        assert len(data["attachments"]) == 1
        assert data["attachments"][0]["name"] == "doc"
        assert data["attachments"][0]["mimeType"] == "application/octet-stream"
        assert data["attachments"][0]["size"] == 0

    @pytest.mark.asyncio
    async def test_duplicate_topic_names_collapse(self, client: AsyncClient) -> None:
        data = await _create(client, topicNames=["Security", "Security"])

        assert [topic["name"] for topic in data["topics"]] == ["Security"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["title", "content"])
    async def test_create_missing_required_field(self, client: AsyncClient, missing: str) -> None:
        payload = {"title": "Reset password", "content": "Open the login page."}
        del payload[missing]

        response = await client.post("/api/faqs", json=payload)

        assert response.status_code == 400
        data = response.json()
        assert data["status"] == 400
        assert data["detail"] == "title and content are required"
        assert data["instance"] == "/api/faqs"

    @pytest.mark.asyncio
    async def test_create_with_unknown_parent(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/faqs",
            json={"title": "Child", "content": "Body", "parentId": str(uuid4())},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Parent FAQ not found"

        listing = await client.get("/api/faqs")
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_create_with_parent(self, client: AsyncClient) -> None:
        parent = await _create(client, title="Parent")

        child = await _create(client, title="Child", parentId=parent["id"])

        assert child["parentId"] == parent["id"]
        assert child["parent"] == {"id": parent["id"], "title": "Parent"}

        refreshed = await client.get(f"/api/faqs/{parent['id']}")
        assert refreshed.json()["childrenCount"] == 1


class TestGetFAQ:
    """GET /api/faqs/{id}"""

    @pytest.mark.asyncio
    async def test_get_existing(self, client: AsyncClient) -> None:
        created = await _create(client)

        response = await client.get(f"/api/faqs/{created['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    @pytest.mark.asyncio
    async def test_get_stored_faq(self, client: AsyncClient, test_faq: FAQ) -> None:
        """A FAQ written without dependents reads back with empty collections."""
        response = await client.get(f"/api/faqs/{test_faq.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "How do I reset my password?"
        assert data["topics"] == []
        assert data["parent"] is None

    @pytest.mark.asyncio
    async def test_get_unknown(self, client: AsyncClient, random_uuid: UUID) -> None:
        response = await client.get(f"/api/faqs/{random_uuid}")

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("application/problem+json")


class TestListFAQs:
    """GET /api/faqs"""

    @pytest.mark.asyncio
    async def test_list_with_q_and_topics(self, client: AsyncClient) -> None:
        await _create(client, title="Reset password", topicNames=["Security"])
        await _create(client, title="Password policy", topicNames=["Compliance"])
        await _create(client, title="Invoices", content="Billing", topicNames=["Billing"])

        by_text = await client.get("/api/faqs", params={"q": "PASSWORD"})
        by_topic = await client.get("/api/faqs", params={"topics": "security, billing"})
        combined = await client.get("/api/faqs", params={"q": "password", "topics": "compliance"})

        assert {faq["title"] for faq in by_text.json()} == {"Reset password", "Password policy"}
        assert {faq["title"] for faq in by_topic.json()} == {"Reset password", "Invoices"}
        assert [faq["title"] for faq in combined.json()] == ["Password policy"]

    @pytest.mark.asyncio
    async def test_blank_filters_are_ignored(self, client: AsyncClient) -> None:
        await _create(client)

        response = await client.get("/api/faqs", params={"q": "", "topics": " , "})

        assert response.status_code == 200
        assert len(response.json()) == 1

    @pytest.mark.asyncio
    async def test_updated_faq_moves_to_top(self, client: AsyncClient) -> None:
        """Updates within the same second still reorder the list."""
        first = await _create(client, title="A")
        await _create(client, title="B")

        await client.patch(f"/api/faqs/{first['id']}", json={"title": "A2"})
        response = await client.get("/api/faqs")

        assert [faq["title"] for faq in response.json()] == ["A2", "B"]

    @pytest.mark.asyncio
    async def test_timestamps_carry_utc_offset(self, client: AsyncClient) -> None:
        created = await _create(client)

        data = (await client.get(f"/api/faqs/{created['id']}")).json()

        for field in ("createdAt", "updatedAt"):
            assert data[field].endswith(("Z", "+00:00"))
            assert "." in data[field]


class TestUpdateFAQ:
    """PATCH /api/faqs/{id}"""

    @pytest.mark.asyncio
    async def test_topics_are_replaced(self, client: AsyncClient) -> None:
        created = await _create(client, topicNames=["A", "B"])

        response = await client.patch(f"/api/faqs/{created['id']}", json={"topicNames": ["A"]})

        assert response.status_code == 200
        assert [topic["name"] for topic in response.json()["topics"]] == ["A"]

    @pytest.mark.asyncio
    async def test_update_keeps_unsent_text_fields(self, client: AsyncClient) -> None:
        created = await _create(client, summary="Short", status="PUBLISHED")

        response = await client.patch(f"/api/faqs/{created['id']}", json={"title": "New title"})

        data = response.json()
        assert data["title"] == "New title"
        assert data["summary"] == "Short"
        assert data["content"] == created["content"]
        assert data["status"] == "DRAFT"

    @pytest.mark.asyncio
    async def test_self_parent_rejected(self, client: AsyncClient) -> None:
        created = await _create(client, topicNames=["Security"])

        response = await client.patch(
            f"/api/faqs/{created['id']}",
            json={"title": "Changed", "parentId": created["id"]},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Parent cannot be the same FAQ"

        unchanged = (await client.get(f"/api/faqs/{created['id']}")).json()
        assert unchanged["title"] == "Reset password"
        assert [topic["name"] for topic in unchanged["topics"]] == ["Security"]

    @pytest.mark.asyncio
    async def test_update_unknown(self, client: AsyncClient) -> None:
        response = await client.patch(f"/api/faqs/{uuid4()}", json={"title": "x"})

        assert response.status_code == 404


class TestDeleteFAQ:
    """DELETE /api/faqs/{id}"""

    @pytest.mark.asyncio
    async def test_delete(self, client: AsyncClient) -> None:
        created = await _create(
            client,
            topicNames=["Security"],
            attachments=[{"name": "doc", "url": "http://x"}],
            shares=[{"email": "bob@example.com"}],
        )

        response = await client.delete(f"/api/faqs/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert (await client.get(f"/api/faqs/{created['id']}")).status_code == 404
        assert (await client.delete(f"/api/faqs/{created['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_parent_detaches_children(self, client: AsyncClient) -> None:
        parent = await _create(client, title="Parent")
        child = await _create(client, title="Child", parentId=parent["id"])

        await client.delete(f"/api/faqs/{parent['id']}")

        data = (await client.get(f"/api/faqs/{child['id']}")).json()
        assert data["parentId"] is None
        assert data["parent"] is None


class TestTopics:
    """GET /api/topics"""

    @pytest.mark.asyncio
    async def test_topics_with_counts(self, client: AsyncClient) -> None:
        await _create(client, topicNames=["Security", "Billing"])
        await _create(client, title="Other", topicNames=["Security"])

        response = await client.get("/api/topics")

        assert response.status_code == 200
        assert [(topic["name"], topic["faqCount"]) for topic in response.json()] == [
            ("Billing", 1),
            ("Security", 2),
        ]
