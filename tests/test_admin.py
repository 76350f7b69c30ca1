"""
Tests for admin user moderation.
"""
from app.db.models.application import Application
from app.db.models.chat import Chat
from app.db.models.job import Job
from app.db.models.resume import Resume
from app.db.models.user import User


def test_list_users_with_filters(client, make_user, auth_headers):
    admin = make_user(role="admin")
    pending = make_user(role="recruiter", name="Ravi Hiring", is_approved=False)
    make_user(role="recruiter", name="Meera Talent")
    make_user(role="student", name="Ravi Kumar")

    by_approval = client.get(
        "/admin/users",
        headers=auth_headers(admin),
        params={"role": "recruiter", "is_approved": False},
    ).json()
    by_search = client.get("/admin/users", headers=auth_headers(admin), params={"search": "ravi"}).json()

    assert [user["id"] for user in by_approval] == [pending.id]
    assert {user["name"] for user in by_search} == {"Ravi Hiring", "Ravi Kumar"}


def test_approve_recruiter_unlocks_recruiter_routes(client, make_user, auth_headers):
    admin = make_user(role="admin")
    recruiter = make_user(role="recruiter", is_approved=False)
    assert client.get("/recruiter/jobs", headers=auth_headers(recruiter)).status_code == 403

    response = client.put(
        f"/admin/users/{recruiter.id}/approval",
        headers=auth_headers(admin),
        json={"is_approved": True},
    )

    assert response.json()["is_approved"] is True
    assert client.get("/recruiter/jobs", headers=auth_headers(recruiter)).status_code == 200


def test_deactivated_user_is_locked_out(client, make_user, auth_headers):
    admin = make_user(role="admin")
    student = make_user(role="student")

    client.put(f"/admin/users/{student.id}/status", headers=auth_headers(admin), json={"is_active": False})

    response = client.get("/auth/me", headers=auth_headers(student))
    assert response.status_code == 403
    assert response.json()["detail"] == "Account is deactivated"


def test_delete_recruiter_removes_jobs_and_applications(client, db, make_user, make_job, make_application, auth_headers):
    admin = make_user(role="admin")
    recruiter = make_user(role="recruiter")
    student = make_user(role="student")
    make_application(make_job(recruiter), student)

    recruiter_id = recruiter.id
    response = client.delete(f"/admin/users/{recruiter.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    db.expire_all()
    assert db.get(User, recruiter_id) is None
    assert db.query(Job).count() == 0
    assert db.query(Application).count() == 0
    assert db.get(User, student.id) is not None


def test_delete_student_decrements_job_count(client, db, make_user, make_job, make_application, auth_headers):
    admin = make_user(role="admin")
    student = make_user(role="student")
    job = make_job(make_user(role="recruiter"))
    make_application(job, student)
    db.add(Resume(user_id=student.id, title="CV", version=1, previous_versions=[], is_active=True))
    db.add(Chat(student_id=student.id, conversation_id="conv_admin_case", title="Chat", messages=[]))
    db.commit()

    client.delete(f"/admin/users/{student.id}", headers=auth_headers(admin))

    db.expire_all()
    assert db.get(Job, job.id).applications_count == 0
    assert db.query(Resume).count() == 0
    assert db.query(Chat).count() == 0


def test_admin_cannot_delete_self(client, make_user, auth_headers):
    admin = make_user(role="admin")
    response = client.delete(f"/admin/users/{admin.id}", headers=auth_headers(admin))
    assert response.status_code == 400


def test_delete_unknown_user(client, make_user, auth_headers):
    admin = make_user(role="admin")
    assert client.delete("/admin/users/999", headers=auth_headers(admin)).status_code == 404
