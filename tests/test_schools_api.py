"""API tests for the school endpoints."""

from __future__ import annotations

from sqlalchemy import func, select

from school_admin.models import Branch, Department, Notification, School

LINCOLN = {
    "name": "Lincoln High",
    "code": "LH01",
    "address": "1 Main St",
    "email": "a@lh.edu",
    "phone_number": "555-1000",
}


async def _count(session_factory, model, *criteria) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(model).where(*criteria))


def _stable(data: dict) -> dict:
    return {
        key: value
        for key, value in data.items()
        if key not in {"created_at", "updated_at", "deleted_at"}
    }


async def test_create_school_notifies_every_user(client, headers, users, session_factory):
    response = await client.post("/api/schools", json=LINCOLN, headers=headers["admin"])

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "School created successfully."
    assert body["data"]["name"] == "Lincoln High"
    assert body["data"]["branches"] == []

    async with session_factory() as session:
        rows = (await session.execute(select(Notification))).scalars().all()
    assert len(rows) == len(users)
    assert {row.user_id for row in rows} == {user.id for user in users.values()}
    assert all(row.type == "success" and "Lincoln High" in row.message for row in rows)


async def test_create_requires_capability(client, headers):
    response = await client.post("/api/schools", json=LINCOLN, headers=headers["viewer"])

    assert response.status_code == 403
    assert response.json()["message"] == "This action is unauthorized."


async def test_anonymous_request_is_rejected(client, users):
    response = await client.get("/api/schools")

    assert response.status_code == 401


async def test_shape_errors_are_reported_per_field(client, headers):
    payload = {**LINCOLN, "email": "not-an-email", "name": "  "}

    response = await client.post("/api/schools", json=payload, headers=headers["admin"])

    assert response.status_code == 422
    errors = response.json()["errors"]
    assert "email" in errors
    assert "name" in errors


async def test_duplicate_email_and_code_reported_together(client, headers):
    await client.post("/api/schools", json=LINCOLN, headers=headers["admin"])

    response = await client.post(
        "/api/schools",
        json={**LINCOLN, "name": "Other"},
        headers=headers["admin"],
    )

    assert response.status_code == 422
    assert set(response.json()["errors"]) == {"email", "code"}


async def test_missing_field_and_duplicates_reported_together(client, headers, session_factory):
    await client.post("/api/schools", json=LINCOLN, headers=headers["admin"])
    payload = {key: value for key, value in LINCOLN.items() if key != "name"}

    response = await client.post("/api/schools", json=payload, headers=headers["admin"])

    assert response.status_code == 422
    errors = response.json()["errors"]
    assert errors == {
        "name": ["Field required"],
        "email": ["The email has already been taken."],
        "code": ["The code has already been taken."],
    }
    assert await _count(session_factory, School) == 1


async def test_update_reports_blank_name_with_taken_code(client, headers):
    await client.post("/api/schools", json=LINCOLN, headers=headers["admin"])
    other = await client.post(
        "/api/schools",
        json={**LINCOLN, "code": "OT01", "email": "other@lh.edu"},
        headers=headers["admin"],
    )

    response = await client.put(
        f"/api/schools/{other.json()['data']['id']}",
        json={**LINCOLN, "name": "", "email": "other@lh.edu"},
        headers=headers["admin"],
    )

    assert response.status_code == 422
    assert set(response.json()["errors"]) == {"name", "code"}


async def test_blank_code_is_stored_as_null(client, headers):
    first = await client.post(
        "/api/schools", json={**LINCOLN, "code": ""}, headers=headers["admin"]
    )
    second = await client.post(
        "/api/schools",
        json={**LINCOLN, "code": "", "email": "b@lh.edu"},
        headers=headers["admin"],
    )

    assert first.status_code == second.status_code == 201
    assert first.json()["data"]["code"] is None


async def test_update_keeps_own_unique_values(client, headers):
    created = (await client.post("/api/schools", json=LINCOLN, headers=headers["admin"])).json()
    school_id = created["data"]["id"]

    response = await client.put(
        f"/api/schools/{school_id}",
        json={**LINCOLN, "name": "Lincoln Senior High"},
        headers=headers["manager"],
    )

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Lincoln Senior High"


async def test_show_lists_only_active_branches(client, headers):
    school_id = (
        await client.post("/api/schools", json=LINCOLN, headers=headers["admin"])
    ).json()["data"]["id"]
    branch = {"name": "North", "code": "N", "address": "x", "phone_number": "1"}
    kept = await client.post(
        f"/api/schools/{school_id}/branches", json=branch, headers=headers["admin"]
    )
    gone = await client.post(
        f"/api/schools/{school_id}/branches",
        json={**branch, "name": "South", "code": "S"},
        headers=headers["admin"],
    )
    await client.delete(f"/api/branches/{gone.json()['data']['id']}", headers=headers["admin"])

    response = await client.get(f"/api/schools/{school_id}", headers=headers["viewer"])

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["branches"]] == [kept.json()["data"]["id"]]


async def test_soft_delete_restore_and_force_delete(client, headers, session_factory):
    school_id = (
        await client.post("/api/schools", json=LINCOLN, headers=headers["admin"])
    ).json()["data"]["id"]
    branch_id = (
        await client.post(
            f"/api/schools/{school_id}/branches",
            json={"name": "North", "code": "N", "address": "x", "phone_number": "1"},
            headers=headers["admin"],
        )
    ).json()["data"]["id"]
    await client.post(
        "/api/departments",
        json={"branch_id": branch_id, "name": "Maths", "code": "M"},
        headers=headers["admin"],
    )

    before = (await client.get(f"/api/schools/{school_id}", headers=headers["admin"])).json()

    deleted = await client.delete(f"/api/schools/{school_id}", headers=headers["admin"])
    assert deleted.status_code == 200
    assert (await client.get(f"/api/schools/{school_id}", headers=headers["admin"])).status_code == 404

    trashed = await client.get("/api/schools", params={"trashed": "true"}, headers=headers["admin"])
    assert [item["id"] for item in trashed.json()["data"]] == [school_id]

    restored = await client.post(f"/api/schools/{school_id}/restore", headers=headers["admin"])
    assert restored.status_code == 200
    assert restored.json()["data"]["deleted_at"] is None
    assert _stable(restored.json()["data"]) == _stable(before)
    listed = await client.get("/api/schools", headers=headers["admin"])
    assert [item["id"] for item in listed.json()["data"]] == [school_id]
    shown = await client.get(f"/api/schools/{school_id}", headers=headers["admin"])
    assert _stable(shown.json()) == _stable(before)
    async with session_factory() as session:
        links = (
            await session.execute(
                select(Notification.action_url).where(Notification.title == "School Restored")
            )
        ).scalars().all()
    assert links and set(links) == {f"/schools/{school_id}"}
    again = await client.post(f"/api/schools/{school_id}/restore", headers=headers["admin"])
    assert again.status_code == 404

    forced = await client.delete(f"/api/schools/{school_id}/force", headers=headers["admin"])
    assert forced.status_code == 200
    assert await _count(session_factory, School) == 0
    assert await _count(session_factory, Branch) == 0
    assert await _count(session_factory, Department) == 0


async def test_manager_cannot_delete(client, headers):
    school_id = (
        await client.post("/api/schools", json=LINCOLN, headers=headers["admin"])
    ).json()["data"]["id"]

    response = await client.delete(f"/api/schools/{school_id}", headers=headers["manager"])

    assert response.status_code == 403


async def test_listing_search_sort_and_meta(client, headers):
    for index, name in enumerate(["Beta School", "Alpha School", "Gamma Institute"]):
        await client.post(
            "/api/schools",
            json={**LINCOLN, "name": name, "code": f"C{index}", "email": f"s{index}@lh.edu"},
            headers=headers["admin"],
        )

    response = await client.get(
        "/api/schools",
        params={"search": "school", "sort_by": "name", "sort_order": "asc", "per_page": 1},
        headers=headers["viewer"],
    )

    body = response.json()
    assert response.status_code == 200
    assert [item["name"] for item in body["data"]] == ["Alpha School"]
    assert body["meta"] == {
        "current_page": 1,
        "last_page": 2,
        "total": 2,
        "per_page": 1,
        "from": 1,
        "to": 1,
    }
    assert body["filters"] == {"search": "school", "sort_by": "name", "sort_order": "asc"}


async def test_listing_escapes_like_wildcards(client, headers):
    await client.post("/api/schools", json=LINCOLN, headers=headers["admin"])

    response = await client.get("/api/schools", params={"search": "%"}, headers=headers["admin"])

    assert response.json()["meta"]["total"] == 0


async def test_unknown_sort_column_falls_back(client, headers):
    await client.post("/api/schools", json=LINCOLN, headers=headers["admin"])

    response = await client.get(
        "/api/schools", params={"sort_by": "password_hash"}, headers=headers["admin"]
    )

    assert response.status_code == 200
    assert "sort_by" not in response.json()["filters"]
