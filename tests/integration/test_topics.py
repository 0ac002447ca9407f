"""Topic, subtopic and category endpoint tests."""

from __future__ import annotations

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from igo.db.models import Topic
from tests.helpers import create_subtopic, create_topic


@pytest.mark.asyncio
async def test_create_topic_starts_at_zero(client: AsyncClient) -> None:
    topic = await create_topic(client, notes="daily", urls=["https://example.com"])
    assert topic["title"] == "Pull-ups"
    assert topic["earnings"] == 0
    assert topic["completionPercentage"] == 0
    assert topic["moneyPer5Reps"] == 10
    assert topic["isMoneyPer5RepsLocked"] is False
    assert topic["urls"] == ["https://example.com"]
    assert topic["subtopics"] == []


@pytest.mark.asyncio
async def test_create_topic_validation(client: AsyncClient) -> None:
    response = await client.post("/api/topics", json={"category": "Strength", "moneyPer5Reps": 10})
    assert response.status_code == 400
    assert response.json() == {"detail": "Title is required and must be a non-empty string"}


@pytest.mark.asyncio
async def test_get_missing_topic(client: AsyncClient) -> None:
    response = await client.get(f"/api/topics/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json()["detail"] == "Topic not found"


@pytest.mark.asyncio
async def test_malformed_id_is_client_error(client: AsyncClient) -> None:
    response = await client.get("/api/topics/not-a-uuid")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_subtopic_requires_parent(client: AsyncClient) -> None:
    response = await client.post(
        f"/api/topics/{uuid.uuid4()}/sub-topics",
        json={"title": "Wide grip", "goalAmount": 1000},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Topic not found"


@pytest.mark.asyncio
async def test_create_subtopic_returns_both(client: AsyncClient) -> None:
    topic = await create_topic(client)
    created = await create_subtopic(client, topic["id"], goalAmount=3000)

    sub = created["subTopic"]
    assert sub["topicId"] == topic["id"]
    assert sub["repsCompleted"] == 0
    assert sub["repsGoal"] == 18
    assert sub["goalAmount"] == 3000
    assert sub["milestoneEarnings"] == 0

    updated = created["updatedTopic"]
    assert updated["id"] == topic["id"]
    assert [s["id"] for s in updated["subtopics"]] == [sub["id"]]
    assert updated["completionPercentage"] == 0


@pytest.mark.asyncio
async def test_create_subtopic_goal_amount_validation(client: AsyncClient) -> None:
    topic = await create_topic(client)
    response = await client.post(
        f"/api/topics/{topic['id']}/sub-topics",
        json={"title": "Wide grip", "goalAmount": 1500},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "goalAmount must be a multiple of 1000"


@pytest.mark.asyncio
async def test_add_reps_recomputes_topic(client: AsyncClient) -> None:
    topic = await create_topic(client)
    sub = (await create_subtopic(client, topic["id"]))["subTopic"]

    response = await client.post(f"/api/sub-topics/{sub['id']}/reps", json={"reps": 9})
    assert response.status_code == 200
    data = response.json()
    assert data["updatedSubtopic"]["repsCompleted"] == 9
    assert data["updatedSubtopic"]["milestoneEarnings"] == 0
    assert data["updatedTopic"]["earnings"] == 10
    assert data["updatedTopic"]["completionPercentage"] == 50


@pytest.mark.asyncio
async def test_reps_never_go_below_zero(client: AsyncClient) -> None:
    topic = await create_topic(client)
    sub = (await create_subtopic(client, topic["id"]))["subTopic"]
    await client.post(f"/api/sub-topics/{sub['id']}/reps", json={"reps": 3})

    response = await client.post(f"/api/sub-topics/{sub['id']}/reps", json={"reps": -20})
    assert response.status_code == 200
    assert response.json()["updatedSubtopic"]["repsCompleted"] == 0
    assert response.json()["updatedTopic"]["earnings"] == 0


@pytest.mark.asyncio
async def test_add_reps_rejects_non_numbers(client: AsyncClient) -> None:
    topic = await create_topic(client)
    sub = (await create_subtopic(client, topic["id"]))["subTopic"]
    response = await client.post(f"/api/sub-topics/{sub['id']}/reps", json={"reps": "5"})
    assert response.status_code == 400
    assert response.json()["detail"] == "reps must be a number"


@pytest.mark.asyncio
async def test_full_subtopic_earns_milestone(client: AsyncClient) -> None:
    topic = await create_topic(client)
    sub = (await create_subtopic(client, topic["id"], goalAmount=2000))["subTopic"]
    response = await client.post(f"/api/sub-topics/{sub['id']}/reps", json={"reps": 18})
    assert response.json()["updatedSubtopic"]["milestoneEarnings"] == 2000


@pytest.mark.asyncio
async def test_read_recomputes_stale_values(client: AsyncClient, db_session: AsyncSession) -> None:
    topic = await create_topic(client)
    sub = (await create_subtopic(client, topic["id"]))["subTopic"]
    await client.post(f"/api/sub-topics/{sub['id']}/reps", json={"reps": 9})

    await db_session.execute(
        update(Topic).where(Topic.id == topic["id"]).values(completion_percentage=99, earnings=0)
    )
    await db_session.commit()

    response = await client.get(f"/api/topics/{topic['id']}")
    assert response.status_code == 200
    assert response.json()["completionPercentage"] == 50
    assert response.json()["earnings"] == 10

    stored = await db_session.execute(
        select(Topic.completion_percentage, Topic.earnings).where(Topic.id == topic["id"])
    )
    assert tuple(stored.one()) == (50, 10)


@pytest.mark.asyncio
async def test_update_topic_recomputes_with_new_rate(client: AsyncClient) -> None:
    topic = await create_topic(client)
    sub = (await create_subtopic(client, topic["id"]))["subTopic"]
    await client.post(f"/api/sub-topics/{sub['id']}/reps", json={"reps": 10})

    response = await client.put(f"/api/topics/{topic['id']}", json={"moneyPer5Reps": 25, "title": "Chin-ups"})
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Chin-ups"
    assert data["category"] == "Strength"
    assert data["earnings"] == 50


@pytest.mark.asyncio
async def test_update_subtopic_partial(client: AsyncClient) -> None:
    topic = await create_topic(client)
    sub = (await create_subtopic(client, topic["id"]))["subTopic"]

    response = await client.put(f"/api/sub-topics/{sub['id']}", json={"notes": "slow negatives"})
    assert response.status_code == 200
    assert response.json()["notes"] == "slow negatives"
    assert response.json()["title"] == "Wide grip"

    fetched = await client.get(f"/api/sub-topics/{sub['id']}")
    assert fetched.json()["notes"] == "slow negatives"


@pytest.mark.asyncio
async def test_delete_subtopic_recomputes_parent(client: AsyncClient) -> None:
    topic = await create_topic(client)
    keep = (await create_subtopic(client, topic["id"], title="Keep"))["subTopic"]
    drop = (await create_subtopic(client, topic["id"], title="Drop"))["subTopic"]
    await client.post(f"/api/sub-topics/{drop['id']}/reps", json={"reps": 18})

    response = await client.delete(f"/api/sub-topics/{drop['id']}")
    assert response.status_code == 200
    updated = response.json()["updatedTopic"]
    assert updated["earnings"] == 0
    assert updated["completionPercentage"] == 0
    assert [s["id"] for s in updated["subtopics"]] == [keep["id"]]

    missing = await client.get(f"/api/sub-topics/{drop['id']}")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Subtopic not found"


@pytest.mark.asyncio
async def test_list_topics_includes_subtopics(client: AsyncClient) -> None:
    first = await create_topic(client, title="A")
    await create_topic(client, title="B")
    await create_subtopic(client, first["id"])

    response = await client.get("/api/topics")
    assert response.status_code == 200
    topics = response.json()
    assert [t["title"] for t in topics] == ["A", "B"]
    assert len(topics[0]["subtopics"]) == 1


@pytest.mark.asyncio
async def test_categories_sorted_and_unique(client: AsyncClient) -> None:
    await create_topic(client, category="Strength")
    await create_topic(client, category="Cardio")
    await create_topic(client, category="Strength")

    response = await client.get("/api/categories")
    assert response.status_code == 200
    assert response.json() == ["Cardio", "Strength"]
