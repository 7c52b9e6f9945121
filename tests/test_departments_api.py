"""API tests for the department endpoints."""

from __future__ import annotations

import pytest


@pytest.fixture
async def branch_ids(client, headers) -> list[int]:
    school = await client.post(
        "/api/schools",
        json={
            "name": "Kabul Academy",
            "code": "KA",
            "address": "1 Main St",
            "email": "ka@school.edu",
            "phone_number": "555",
        },
        headers=headers["admin"],
    )
    school_id = school.json()["data"]["id"]
    ids = []
    for name, code in (("North", "N"), ("South", "S")):
        response = await client.post(
            f"/api/schools/{school_id}/branches",
            json={"name": name, "code": code, "address": "x", "phone_number": "1"},
            headers=headers["admin"],
        )
        ids.append(response.json()["data"]["id"])
    return ids


def _department(branch_id: int, **overrides) -> dict:
    return {"branch_id": branch_id, "name": "Mathematics", "code": "MATH", **overrides}


def _stable(data: dict) -> dict:
    return {
        key: value
        for key, value in data.items()
        if key not in {"created_at", "updated_at", "deleted_at"}
    }


async def test_create_embeds_branch_school_and_head(client, headers, users, branch_ids):
    response = await client.post(
        "/api/departments",
        json=_department(branch_ids[0], head_user_id=users["manager"].id, description=""),
        headers=headers["manager"],
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["description"] is None
    assert data["branch"]["name"] == "North"
    assert data["branch"]["school"]["name"] == "Kabul Academy"
    assert data["head"]["email"] == "manager@school.edu"


async def test_all_reference_errors_are_collected(client, headers):
    response = await client.post(
        "/api/departments",
        json=_department(12345, head_user_id=999),
        headers=headers["admin"],
    )

    assert response.status_code == 422
    assert set(response.json()["errors"]) == {"branch_id", "head_user_id"}


async def test_missing_code_reported_with_reference_errors(client, headers):
    payload = _department(12345, head_user_id=999)
    del payload["code"]

    response = await client.post("/api/departments", json=payload, headers=headers["admin"])

    assert response.status_code == 422
    assert response.json()["errors"] == {
        "code": ["Field required"],
        "branch_id": ["The selected branch id is invalid."],
        "head_user_id": ["The selected head user id is invalid."],
    }


async def test_code_is_required(client, headers, branch_ids):
    payload = _department(branch_ids[0])
    del payload["code"]

    response = await client.post("/api/departments", json=payload, headers=headers["admin"])

    assert response.status_code == 422
    assert "code" in response.json()["errors"]


async def test_code_unique_within_branch(client, headers, branch_ids):
    first = await client.post("/api/departments", json=_department(branch_ids[0]), headers=headers["admin"])
    other_branch = await client.post(
        "/api/departments", json=_department(branch_ids[1]), headers=headers["admin"]
    )
    clash = await client.post(
        "/api/departments", json=_department(branch_ids[0], name="Maths"), headers=headers["admin"]
    )

    assert first.status_code == other_branch.status_code == 201
    assert clash.status_code == 422
    assert "code" in clash.json()["errors"]


async def test_viewer_cannot_create(client, headers, branch_ids):
    response = await client.post(
        "/api/departments", json=_department(branch_ids[0]), headers=headers["viewer"]
    )

    assert response.status_code == 403


async def test_user_without_roles_cannot_list(client, headers):
    response = await client.get("/api/departments", headers=headers["nobody"])

    assert response.status_code == 403


async def test_listing_filters_by_branch_and_sorts_by_branch_name(client, headers, branch_ids):
    await client.post("/api/departments", json=_department(branch_ids[0], code="A"), headers=headers["admin"])
    await client.post("/api/departments", json=_department(branch_ids[1], code="B"), headers=headers["admin"])

    by_branch = await client.get(
        "/api/departments", params={"branch_id": branch_ids[1]}, headers=headers["viewer"]
    )
    sorted_desc = await client.get(
        "/api/departments",
        params={"sort_by": "branch_name", "sort_order": "desc"},
        headers=headers["viewer"],
    )

    assert [item["code"] for item in by_branch.json()["data"]] == ["B"]
    assert [item["branch"]["name"] for item in sorted_desc.json()["data"]] == ["South", "North"]


async def test_search_reaches_the_school(client, headers, branch_ids):
    await client.post("/api/departments", json=_department(branch_ids[0]), headers=headers["admin"])

    response = await client.get(
        "/api/departments", params={"search": "kabul"}, headers=headers["viewer"]
    )

    assert response.json()["meta"]["total"] == 1


async def test_soft_delete_then_restore(client, headers, users, branch_ids):
    created = await client.post(
        "/api/departments",
        json=_department(branch_ids[0], head_user_id=users["manager"].id, description="Numbers"),
        headers=headers["admin"],
    )
    department_id = created.json()["data"]["id"]
    before = created.json()["data"]

    deleted = await client.delete(f"/api/departments/{department_id}", headers=headers["admin"])
    missing = await client.get(f"/api/departments/{department_id}", headers=headers["admin"])
    restored = await client.post(f"/api/departments/{department_id}/restore", headers=headers["admin"])

    assert deleted.status_code == 200
    assert missing.status_code == 404
    assert restored.status_code == 200
    assert restored.json()["data"]["id"] == department_id
    assert _stable(restored.json()["data"]) == _stable(before)
    listed = await client.get("/api/departments", headers=headers["viewer"])
    assert [item["id"] for item in listed.json()["data"]] == [department_id]


async def test_recreating_a_soft_deleted_code_is_rejected(client, headers, branch_ids):
    department_id = (
        await client.post("/api/departments", json=_department(branch_ids[0]), headers=headers["admin"])
    ).json()["data"]["id"]
    await client.delete(f"/api/departments/{department_id}", headers=headers["admin"])

    response = await client.post(
        "/api/departments", json=_department(branch_ids[0]), headers=headers["admin"]
    )

    assert response.status_code == 422
    assert "code" in response.json()["errors"]
