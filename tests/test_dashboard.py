"""
Tests for dashboard counters and the placement report.
"""


def test_student_stats(client, make_user, make_job, make_application, auth_headers):
    recruiter = make_user(role="recruiter")
    student = make_user(role="student")
    jobs = [make_job(recruiter) for _ in range(4)]
    make_job(recruiter, is_approved=False)
    make_application(jobs[0], student)
    make_application(jobs[1], student, status="shortlisted")
    make_application(jobs[2], student, status="selected")
    make_application(jobs[3], make_user(role="student"))

    response = client.get("/student/dashboard/stats", headers=auth_headers(student))

    assert response.status_code == 200
    assert response.json() == {
        "total_applications": 3,
        "pending_applications": 1,
        "shortlisted_applications": 1,
        "selected_applications": 1,
        "available_jobs": 4,
    }


def test_recruiter_stats(client, make_user, make_job, make_application, auth_headers):
    recruiter = make_user(role="recruiter")
    live = make_job(recruiter)
    make_job(recruiter, is_approved=False)
    make_job(recruiter, status="closed")
    other_job = make_job(make_user(role="recruiter"))
    first, second = make_user(role="student"), make_user(role="student")
    make_application(live, first)
    make_application(live, second, status="shortlisted")
    make_application(other_job, first, status="selected")

    response = client.get("/recruiter/dashboard/stats", headers=auth_headers(recruiter))

    assert response.json() == {
        "total_jobs": 3,
        "active_jobs": 1,
        "pending_approval_jobs": 1,
        "total_applications": 2,
        "pending_applications": 1,
        "shortlisted_applications": 1,
        "selected_applications": 0,
    }


def test_admin_stats(client, make_user, make_job, make_application, auth_headers):
    admin = make_user(role="admin")
    recruiter = make_user(role="recruiter")
    make_user(role="recruiter", is_approved=False)
    student = make_user(role="student")
    job = make_job(recruiter)
    make_job(recruiter, is_approved=False, status="draft")
    make_application(job, student)

    response = client.get("/admin/dashboard/stats", headers=auth_headers(admin))

    assert response.json() == {
        "total_students": 1,
        "total_recruiters": 2,
        "total_jobs": 2,
        "active_jobs": 1,
        "total_applications": 1,
        "pending_recruiters": 1,
        "pending_jobs": 1,
    }


def test_placement_report_lists_selected_applications(client, make_user, make_job, make_application, auth_headers):
    admin = make_user(role="admin")
    recruiter = make_user(role="recruiter")
    placed = make_user(role="student", name="Asha Rao", student_profile={"department": "CSE"})
    job = make_job(recruiter, title="SDE 1", company="Globex", salary_max=1800000)
    selected = make_application(job, placed, status="selected")
    make_application(job, make_user(role="student"), status="rejected")

    response = client.get("/admin/reports/placements", headers=auth_headers(admin))

    data = response.json()
    assert data["total_placements"] == 1
    record = data["placements"][0]
    assert record["application_id"] == selected.id
    assert record["student_name"] == "Asha Rao"
    assert record["department"] == "CSE"
    assert record["company"] == "Globex"
    assert record["salary_max"] == 1800000


def test_admin_routes_require_admin(client, make_user, auth_headers):
    for role in ("student", "recruiter"):
        headers = auth_headers(make_user(role=role))
        assert client.get("/admin/dashboard/stats", headers=headers).status_code == 403
        assert client.get("/admin/reports/placements", headers=headers).status_code == 403
    assert client.get("/admin/users").status_code == 401


def test_unapproved_student_cannot_see_dashboard(client, make_user, auth_headers):
    student = make_user(role="student", is_approved=False)
    response = client.get("/student/dashboard/stats", headers=auth_headers(student))
    assert response.status_code == 403
