"""
System smoke tests: the HTTP API end to end over an in-memory database.

Run: pytest tests/system/ -v
"""

import uuid

import pytest
from httpx import AsyncClient

from lesson_activities.kernel.models import LessonPlanDirection

API = "/api/v1"


async def _create(client: AsyncClient, lesson_id: uuid.UUID, activity_type: str, name=None):
    response = await client.post(
        f"{API}/lessons/{lesson_id}/activities",
        json={"activity_type": activity_type, "name": name},
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:
    """Health and root endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert "X-Request-ID" in response.headers

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client):
        response = await client.get("/", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"
        assert response.json()["api"]["v1"] == API


class TestActivityApi:
    """Activity list endpoints."""

    @pytest.mark.asyncio
    async def test_create_move_delete(self, client, lesson_id):
        a = await _create(client, lesson_id, "reading", "A")
        await _create(client, lesson_id, "reading", "B")
        c = await _create(client, lesson_id, "vocabulary", "C")
        assert (a["order"], c["order"]) == (0, 2)

        response = await client.post(f"{API}/activities/{c['id']}/move", json={"new_index": 0})
        assert response.status_code == 200
        assert [x["name"] for x in response.json()] == ["C", "A", "B"]

        response = await client.delete(f"{API}/activities/{a['id']}")
        assert response.status_code == 200
        body = response.json()
        assert body["deleted"] is True
        assert [(x["name"], x["order"]) for x in body["remaining"]] == [("C", 0), ("B", 1)]

        response = await client.get(f"{API}/lessons/{lesson_id}/activities")
        listing = response.json()
        assert listing["total"] == 2
        assert [x["preview"] for x in listing["activities"]] == ["No content yet", "Untitled Reading"]

    @pytest.mark.asyncio
    async def test_patch_with_legacy_published(self, client, lesson_id):
        a = await _create(client, lesson_id, "image")
        response = await client.patch(
            f"{API}/activities/{a['id']}",
            json={"name": "Map", "published": "Yes"},
        )
        assert response.status_code == 200
        assert response.json()["published"] is True
        assert response.json()["name"] == "Map"

    @pytest.mark.asyncio
    async def test_unknown_type_rejected(self, client, lesson_id):
        response = await client.post(
            f"{API}/lessons/{lesson_id}/activities",
            json={"activity_type": "worksheet"},
        )
        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    @pytest.mark.asyncio
    async def test_missing_activity(self, client):
        response = await client.get(f"{API}/activities/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["code"] == "activity_not_found"

    @pytest.mark.asyncio
    async def test_referenced_delete_needs_policy(self, client, db_session, lesson_id):
        a = await _create(client, lesson_id, "reading", "A")
        direction = LessonPlanDirection(
            lesson_plan_id=uuid.uuid4(),
            activity_id=uuid.UUID(a["id"]),
            content="Read the passage aloud",
        )
        db_session.add(direction)
        await db_session.commit()

        response = await client.get(f"{API}/activities/{a['id']}/references")
        assert response.json()["direction_ids"] == [str(direction.id)]

        response = await client.delete(f"{API}/activities/{a['id']}")
        assert response.status_code == 409
        assert response.json()["direction_ids"] == [str(direction.id)]

        response = await client.delete(f"{API}/activities/{a['id']}", params={"policy": "keep"})
        assert response.status_code == 200
        assert response.json()["directions_decoupled"] == 1

        await db_session.refresh(direction)
        assert direction.activity_id is None


class TestPayloadApi:
    """Payload endpoints."""

    @pytest.mark.asyncio
    async def test_reading_round_trip(self, client, lesson_id):
        a = await _create(client, lesson_id, "reading")
        response = await client.put(
            f"{API}/activities/{a['id']}/payload",
            json={"title": "The Silk Road", "content": "Caravans crossed...", "published": "No"},
        )
        assert response.status_code == 200
        payload = response.json()["payload"]
        assert payload["title"] == "The Silk Road"
        assert payload["published"] is False

        response = await client.get(f"{API}/activities/{a['id']}/payload")
        assert response.json()["payload"] == payload

    @pytest.mark.asyncio
    async def test_invalid_payload(self, client, lesson_id):
        a = await _create(client, lesson_id, "image")
        response = await client.put(f"{API}/activities/{a['id']}/payload", json={"title": "Map"})
        assert response.status_code == 422
        assert response.json()["field"] == "image_url"

    @pytest.mark.asyncio
    async def test_vocabulary_endpoints(self, client, lesson_id):
        v = await _create(client, lesson_id, "vocabulary")
        base = f"{API}/activities/{v['id']}/vocabulary/items"

        response = await client.get(f"{API}/activities/{v['id']}/payload")
        assert len(response.json()["payload"]["items"]) == 1

        await client.put(
            f"{API}/activities/{v['id']}/payload",
            json={"items": [{"word": "x"}, {"word": "y"}]},
        )
        response = await client.post(base, json={"word": "z", "definition": "last"})
        assert response.status_code == 201

        response = await client.post(f"{base}/2/move", json={"direction": "up"})
        words = [i["word"] for i in response.json()["payload"]["items"]]
        assert words == ["x", "z", "y"]

        response = await client.delete(f"{base}/0")
        assert [i["vocab_order"] for i in response.json()["payload"]["items"]] == [0, 1]

    @pytest.mark.asyncio
    async def test_quiz_choice_move(self, client, lesson_id):
        q = await _create(client, lesson_id, "question")
        quiz = {
            "questions": [
                {
                    "question_title": "Trade",
                    "question_type": "Multiple Choice",
                    "choices": [
                        {"choice_text": "Silk", "is_correct": True},
                        {"choice_text": "Salt"},
                    ],
                },
            ],
        }
        response = await client.put(f"{API}/activities/{q['id']}/payload", json=quiz)
        assert response.status_code == 200

        response = await client.post(
            f"{API}/activities/{q['id']}/quiz/questions/0/choices/0/move",
            json={"direction": "down"},
        )
        choices = response.json()["payload"]["questions"][0]["choices"]
        assert [(c["choice_text"], c["order"]) for c in choices] == [("Salt", 0), ("Silk", 1)]

    @pytest.mark.asyncio
    async def test_nested_route_on_wrong_type(self, client, lesson_id):
        a = await _create(client, lesson_id, "reading")
        response = await client.post(
            f"{API}/activities/{a['id']}/vocabulary/items/0/move",
            json={"direction": "up"},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "ordering_error"

    @pytest.mark.asyncio
    async def test_quiz_question_edits(self, client, lesson_id):
        q = await _create(client, lesson_id, "question")
        base = f"{API}/activities/{q['id']}/quiz/questions"

        response = await client.get(
            f"{API}/quiz/question-template", params={"question_type": "Multiple Select"}
        )
        template = response.json()
        assert [c["choice_text"] for c in template["choices"]] == [""] * 5

        # The blank template is refused until filled in
        response = await client.post(base, json=template)
        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

        for i, text in enumerate(["pepper", "cinnamon", "salt", "tin", "wool"]):
            template["choices"][i].update(choice_text=text, is_correct=i < 2)
        template["question_title"] = "Spices"
        response = await client.post(base, json=template)
        assert response.status_code == 201
        question = response.json()["payload"]["questions"][0]
        assert [c["order"] for c in question["choices"]] == [0, 1, 2, 3, 4]

        response = await client.post(f"{base}/0/choices/2/correct")
        assert [c["is_correct"] for c in response.json()["payload"]["questions"][0]["choices"]] == [
            True, True, True, False, False,
        ]

        response = await client.delete(f"{base}/0/choices/4")
        assert len(response.json()["payload"]["questions"][0]["choices"]) == 4

        response = await client.post(f"{base}/0/choices", json={"choice_text": "silver"})
        assert response.status_code == 201
        assert response.json()["payload"]["questions"][0]["choices"][-1]["choice_text"] == "silver"

        response = await client.put(f"{base}/0/type", json={"question_type": "Open Ended"})
        assert response.status_code == 200
        assert response.json()["payload"]["questions"][0]["question_type"] == "Open Ended"

        response = await client.delete(f"{base}/0")
        assert response.json()["payload"]["questions"] == []
