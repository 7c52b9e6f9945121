"""API tests for the branch endpoints."""

from __future__ import annotations

from sqlalchemy import func, select

from school_admin.models import Branch, Notification


async def _school(client, headers, suffix: str) -> int:
    response = await client.post(
        "/api/schools",
        json={
            "name": f"School {suffix}",
            "code": f"S{suffix}",
            "address": "1 Main St",
            "email": f"{suffix.lower()}@school.edu",
            "phone_number": "555",
        },
        headers=headers["admin"],
    )
    return response.json()["data"]["id"]


def _branch(school_id: int, **overrides) -> dict:
    return {
        "school_id": school_id,
        "name": "North",
        "code": "BR1",
        "address": "2 Side St",
        "phone_number": "555-2000",
        **overrides,
    }


async def _counts(session_factory) -> tuple[int, int]:
    async with session_factory() as session:
        branches = await session.scalar(select(func.count()).select_from(Branch))
        notifications = await session.scalar(select(func.count()).select_from(Notification))
    return branches, notifications


async def test_unknown_school_is_rejected_without_side_effects(client, headers, session_factory):
    response = await client.post("/api/branches", json=_branch(999), headers=headers["admin"])

    assert response.status_code == 422
    assert "school_id" in response.json()["errors"]
    assert await _counts(session_factory) == (0, 0)


async def test_missing_name_reported_with_unknown_school(client, headers, session_factory):
    payload = _branch(999)
    del payload["name"]

    response = await client.post("/api/branches", json=payload, headers=headers["admin"])

    assert response.status_code == 422
    assert response.json()["errors"] == {
        "name": ["Field required"],
        "school_id": ["The selected school id is invalid."],
    }
    assert await _counts(session_factory) == (0, 0)


async def test_nested_create_reports_blank_name_with_taken_code(client, headers):
    school_id = await _school(client, headers, "A")
    await client.post("/api/branches", json=_branch(school_id), headers=headers["admin"])

    response = await client.post(
        f"/api/schools/{school_id}/branches",
        json={"name": " ", "code": "BR1", "address": "x", "phone_number": "1"},
        headers=headers["admin"],
    )

    assert response.status_code == 422
    assert set(response.json()["errors"]) == {"name", "code"}


async def test_restore_brings_branch_back_unchanged(client, headers):
    school_id = await _school(client, headers, "A")
    created = await client.post("/api/branches", json=_branch(school_id), headers=headers["admin"])
    branch_id = created.json()["data"]["id"]

    await client.delete(f"/api/branches/{branch_id}", headers=headers["admin"])
    hidden = await client.get("/api/branches", headers=headers["admin"])
    restored = await client.post(f"/api/branches/{branch_id}/restore", headers=headers["admin"])
    listed = await client.get("/api/branches", headers=headers["admin"])

    stamps = {"created_at", "updated_at", "deleted_at"}
    assert hidden.json()["data"] == []
    assert restored.status_code == 200
    assert {k: v for k, v in restored.json()["data"].items() if k not in stamps} == {
        k: v for k, v in created.json()["data"].items() if k not in stamps
    }
    assert [item["id"] for item in listed.json()["data"]] == [branch_id]


async def test_soft_deleted_school_is_not_a_valid_parent(client, headers):
    school_id = await _school(client, headers, "A")
    await client.delete(f"/api/schools/{school_id}", headers=headers["admin"])

    response = await client.post("/api/branches", json=_branch(school_id), headers=headers["admin"])

    assert response.status_code == 422
    assert "school_id" in response.json()["errors"]


async def test_code_is_unique_per_school_only(client, headers):
    first = await _school(client, headers, "A")
    second = await _school(client, headers, "B")

    one = await client.post("/api/branches", json=_branch(first), headers=headers["admin"])
    two = await client.post("/api/branches", json=_branch(second), headers=headers["admin"])
    clash = await client.post(
        "/api/branches", json=_branch(first, name="Other"), headers=headers["admin"]
    )

    assert one.status_code == two.status_code == 201
    assert clash.status_code == 422
    assert list(clash.json()["errors"]) == ["code"]


async def test_address_only_update_sends_no_notification(client, headers, session_factory):
    school_id = await _school(client, headers, "A")
    branch_id = (
        await client.post("/api/branches", json=_branch(school_id), headers=headers["admin"])
    ).json()["data"]["id"]
    _, before = await _counts(session_factory)

    response = await client.put(
        f"/api/branches/{branch_id}",
        json=_branch(school_id, address="99 New Rd"),
        headers=headers["admin"],
    )

    assert response.status_code == 200
    assert response.json()["data"]["address"] == "99 New Rd"
    async with session_factory() as session:
        info = await session.scalar(
            select(func.count()).select_from(Notification).where(Notification.type == "info")
        )
    assert info == 0
    assert (await _counts(session_factory))[1] == before


async def test_rename_sends_update_notification(client, headers, session_factory, users):
    school_id = await _school(client, headers, "A")
    branch_id = (
        await client.post("/api/branches", json=_branch(school_id), headers=headers["admin"])
    ).json()["data"]["id"]

    await client.put(
        f"/api/branches/{branch_id}",
        json=_branch(school_id, name="North Campus"),
        headers=headers["admin"],
    )

    async with session_factory() as session:
        rows = (
            await session.execute(select(Notification).where(Notification.type == "info"))
        ).scalars().all()
    assert len(rows) == len(users)
    assert rows[0].action_url == f"/branches/{branch_id}"


async def test_nested_listing_filters_by_school(client, headers):
    first = await _school(client, headers, "A")
    second = await _school(client, headers, "B")
    await client.post("/api/branches", json=_branch(first), headers=headers["admin"])
    await client.post("/api/branches", json=_branch(second, name="Elsewhere"), headers=headers["admin"])

    nested = await client.get(f"/api/schools/{first}/branches", headers=headers["viewer"])
    filtered = await client.get(
        "/api/branches", params={"school_id": second}, headers=headers["viewer"]
    )

    assert [item["name"] for item in nested.json()["data"]] == ["North"]
    assert nested.json()["filters"] == {"school_id": first}
    assert [item["name"] for item in filtered.json()["data"]] == ["Elsewhere"]


async def test_search_matches_school_name_and_sorts_by_it(client, headers):
    first = await _school(client, headers, "Zulu")
    second = await _school(client, headers, "Alpha")
    await client.post("/api/branches", json=_branch(first, name="One"), headers=headers["admin"])
    await client.post("/api/branches", json=_branch(second, name="Two"), headers=headers["admin"])

    response = await client.get(
        "/api/branches",
        params={"search": "school", "sort_by": "school_name", "sort_order": "asc"},
        headers=headers["viewer"],
    )

    data = response.json()["data"]
    assert [item["name"] for item in data] == ["Two", "One"]
    assert data[0]["school"]["name"] == "School Alpha"


async def test_nested_create_uses_path_school(client, headers):
    school_id = await _school(client, headers, "A")

    response = await client.post(
        f"/api/schools/{school_id}/branches",
        json={"name": "Nested", "address": "x", "phone_number": "1"},
        headers=headers["manager"],
    )

    assert response.status_code == 201
    assert response.json()["data"]["school_id"] == school_id


async def test_nested_routes_need_active_school(client, headers):
    response = await client.get("/api/schools/404/branches", headers=headers["admin"])

    assert response.status_code == 404
