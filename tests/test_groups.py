import pytest


@pytest.fixture
def admin(make_user, auth_headers):
    return auth_headers(make_user("SUPER_ADMIN"))


def create_group(client, headers, title, student_ids=()):
    return client.post("/api/groups/", json={"title": title, "student_ids": list(student_ids)}, headers=headers)


def test_title_check_ignores_case(client, admin):
    group = create_group(client, admin, "ИС-21а").json()

    exists = client.get("/api/groups/title-exists", params={"title": "ис-21А"}, headers=admin).json()
    assert exists == {"exists": True}

    excluded = client.get(
        "/api/groups/title-exists", params={"title": "ис-21А", "exclude_id": group["id"]}, headers=admin
    ).json()
    assert excluded == {"exists": False}

    assert create_group(client, admin, "ис-21А").status_code == 400


def test_search_and_empty_groups(client, admin, make_user):
    student = make_user("STUDENT")
    create_group(client, admin, "Физики-1", [student.id])
    create_group(client, admin, "Химики-1")

    found = client.get("/api/groups/", params={"search": "физ"}, headers=admin).json()
    assert [g["title"] for g in found] == ["Физики-1"]
    assert found[0]["student_ids"] == [student.id]

    empty = client.get("/api/groups/", params={"empty": "true"}, headers=admin).json()
    assert [g["title"] for g in empty] == ["Химики-1"]


def test_roster_changes_and_stats(client, admin, make_user):
    active = make_user("STUDENT")
    inactive = make_user("STUDENT", is_active=False)
    group = create_group(client, admin, "ИС-22").json()

    client.post(f"/api/groups/{group['id']}/students", json={"student_ids": [active.id, inactive.id]}, headers=admin)
    stats = client.get(f"/api/groups/{group['id']}/stats", headers=admin).json()
    assert stats["total_students"] == 2
    assert stats["active_students"] == 1
    assert stats["inactive_students"] == 1

    response = client.delete(f"/api/groups/{group['id']}/students/{inactive.id}", headers=admin)
    assert response.json()["student_ids"] == [active.id]


def test_students_cannot_create_groups(client, make_user, auth_headers):
    headers = auth_headers(make_user("STUDENT"))
    assert create_group(client, headers, "Самозванцы").status_code == 403
