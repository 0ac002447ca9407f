"""Request helpers shared by the integration tests."""

from __future__ import annotations

from httpx import AsyncClient


async def create_topic(client: AsyncClient, **overrides) -> dict:
    payload = {"title": "Pull-ups", "category": "Strength", "moneyPer5Reps": 10}
    payload.update(overrides)
    response = await client.post("/api/topics", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def create_subtopic(client: AsyncClient, topic_id: str, **overrides) -> dict:
    payload = {"title": "Wide grip", "goalAmount": 1000}
    payload.update(overrides)
    response = await client.post(f"/api/topics/{topic_id}/sub-topics", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def create_activity(client: AsyncClient, **overrides) -> dict:
    payload = {"name": "Push-ups", "goals": {"daily": 50, "weekly": 350, "monthly": 1500, "yearly": 18000}}
    payload.update(overrides)
    response = await client.post("/api/activities", json=payload)
    assert response.status_code == 201, response.text
    return response.json()
