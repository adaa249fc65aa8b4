"""
API tests for admin user management, teacher links, profiles and stats.
"""
from unittest.mock import patch

from sqlalchemy.exc import IntegrityError

from app.models.user import UserRole


def test_admin_lists_users(client, admin, student, auth_headers):
    response = client.get("/api/admin/users", headers=auth_headers(admin))

    assert response.status_code == 200
    assert {u["username"] for u in response.json()} == {"admin1", "student1"}


def test_users_list_is_admin_only(client, student, auth_headers):
    assert client.get("/api/admin/users", headers=auth_headers(student)).status_code == 403


def test_change_role(client, admin, student, auth_headers):
    response = client.patch(
        f"/api/admin/users/{student.id}/role",
        json={"role": "teacher"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["role"] == "teacher"


def test_unknown_role_is_rejected(client, admin, student, auth_headers):
    response = client.patch(
        f"/api/admin/users/{student.id}/role",
        json={"role": "dean"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 422


def test_admin_cannot_change_own_role(client, admin, auth_headers):
    response = client.patch(
        f"/api/admin/users/{admin.id}/role",
        json={"role": "student"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400


def test_link_teacher_and_dashboard(client, admin, teacher, make_doctor, add_review, auth_headers):
    mine = make_doctor("Dr. Sarah Johnson")
    other = make_doctor("Dr. Other", "Physics")
    add_review(mine, (5, 5, 5, 5, 5))
    add_review(mine, (3, 3, 3, 3, 3))
    add_review(other, (1, 1, 1, 1, 1))

    linked = client.put(
        f"/api/admin/doctors/{mine.id}/teacher",
        json={"teacher_user_id": str(teacher.id)},
        headers=auth_headers(admin),
    )
    assert linked.status_code == 200
    assert linked.json()["teacher_user_id"] == str(teacher.id)

    dashboard = client.get("/api/stats/teacher-dashboard", headers=auth_headers(teacher)).json()

    assert dashboard["empty"] is False
    assert dashboard["doctor"]["name"] == "Dr. Sarah Johnson"
    assert [d["name"] for d in dashboard["doctors"]] == ["Dr. Sarah Johnson"]
    assert dashboard["chart"] == [{
        "name": "Dr. Sarah Johnson",
        "teaching": 4.0,
        "availability": 4.0,
        "communication": 4.0,
        "knowledge": 4.0,
        "fairness": 4.0,
    }]
    assert len(dashboard["recent_reviews"]) == 2


def test_admin_dashboard_covers_reviewed_doctors(client, admin, make_doctor, add_review, auth_headers):
    reviewed = make_doctor("Dr. Reviewed")
    make_doctor("Dr. Unreviewed")
    add_review(reviewed)

    dashboard = client.get("/api/stats/teacher-dashboard", headers=auth_headers(admin)).json()

    assert dashboard["doctor"] is None
    assert [d["name"] for d in dashboard["doctors"]] == ["Dr. Reviewed"]


def test_unlinked_teacher_dashboard_is_empty(client, teacher, auth_headers):
    dashboard = client.get("/api/stats/teacher-dashboard", headers=auth_headers(teacher)).json()

    assert dashboard["empty"] is True
    assert dashboard["doctor"] is None
    assert dashboard["chart"] == []


def test_students_have_no_dashboard(client, student, auth_headers):
    assert client.get("/api/stats/teacher-dashboard", headers=auth_headers(student)).status_code == 403


def test_link_rejects_non_teachers_and_double_links(client, admin, teacher, student, make_doctor, auth_headers):
    first = make_doctor("Dr. A")
    second = make_doctor("Dr. B")

    not_teacher = client.put(
        f"/api/admin/doctors/{first.id}/teacher",
        json={"teacher_user_id": str(student.id)},
        headers=auth_headers(admin),
    )
    assert not_teacher.status_code == 400

    client.put(
        f"/api/admin/doctors/{first.id}/teacher",
        json={"teacher_user_id": str(teacher.id)},
        headers=auth_headers(admin),
    )
    conflict = client.put(
        f"/api/admin/doctors/{second.id}/teacher",
        json={"teacher_user_id": str(teacher.id)},
        headers=auth_headers(admin),
    )
    assert conflict.status_code == 409


def test_link_conflict_at_commit_is_409(client, db_session, admin, teacher, make_doctor, auth_headers):
    doctor = make_doctor()
    clash = IntegrityError("UPDATE doctors", {}, Exception("UNIQUE constraint failed: doctors.teacher_user_id"))

    with patch.object(db_session, "commit", side_effect=clash):
        response = client.put(
            f"/api/admin/doctors/{doctor.id}/teacher",
            json={"teacher_user_id": str(teacher.id)},
            headers=auth_headers(admin),
        )

    assert response.status_code == 409
    db_session.refresh(doctor)
    assert doctor.teacher_user_id is None


def test_demoting_teacher_unlinks_doctor(client, admin, teacher, make_doctor, auth_headers):
    doctor = make_doctor()
    client.put(
        f"/api/admin/doctors/{doctor.id}/teacher",
        json={"teacher_user_id": str(teacher.id)},
        headers=auth_headers(admin),
    )

    client.patch(f"/api/admin/users/{teacher.id}/role", json={"role": "student"}, headers=auth_headers(admin))

    assert client.get(f"/api/doctors/{doctor.id}").json()["teacher_user_id"] is None


def test_profile_image_follows_teacher(client, admin, teacher, make_doctor, auth_headers):
    doctor = make_doctor()
    client.put(
        f"/api/admin/doctors/{doctor.id}/teacher",
        json={"teacher_user_id": str(teacher.id)},
        headers=auth_headers(admin),
    )

    response = client.patch(
        "/api/users/me",
        json={"profile_image_url": "https://img.test/new.png"},
        headers=auth_headers(teacher),
    )

    assert response.status_code == 200
    assert client.get(f"/api/doctors/{doctor.id}").json()["profile_image_url"] == "https://img.test/new.png"


def test_sync_profile_requires_link(client, admin, make_doctor, auth_headers):
    doctor = make_doctor()

    response = client.post(f"/api/admin/doctors/{doctor.id}/sync-profile", headers=auth_headers(admin))

    assert response.status_code == 400


def test_sync_profile(client, db_session, admin, teacher, make_doctor, auth_headers):
    doctor = make_doctor()
    client.put(
        f"/api/admin/doctors/{doctor.id}/teacher",
        json={"teacher_user_id": str(teacher.id)},
        headers=auth_headers(admin),
    )
    teacher.profile_image_url = "https://img.test/late.png"
    db_session.commit()

    response = client.post(f"/api/admin/doctors/{doctor.id}/sync-profile", headers=auth_headers(admin))

    assert response.json()["profile_image_url"] == "https://img.test/late.png"


def test_profile_email_must_be_unique(client, student, make_user, auth_headers):
    make_user("other", UserRole.STUDENT, email="taken@example.com")

    response = client.patch("/api/users/me", json={"email": "taken@example.com"}, headers=auth_headers(student))

    assert response.status_code == 400


def test_public_stats(client, make_doctor, add_review):
    doctor = make_doctor()
    make_doctor("Dr. B")
    add_review(doctor)

    assert client.get("/api/stats").json() == {"total_doctors": 2, "total_reviews": 1}


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
