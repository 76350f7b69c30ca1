"""
Tests for interview scheduling, the live session, decisions and analysis.
"""
import pytest

from app.db.models.application import Application
from app.db.models.interview import Interview
from app.services.interview_service import build_room_id, build_meeting_link

SCHEDULE_DATE = "2030-01-15T10:00:00"


@pytest.fixture
def shortlisted(make_user, make_job, make_application):
    """Recruiter, student and a shortlisted application on the recruiter's job."""
    recruiter = make_user(role="recruiter")
    student = make_user(role="student")
    job = make_job(recruiter, title="Platform Engineer")
    application = make_application(job, student, status="shortlisted")
    return recruiter, student, application


@pytest.fixture
def schedule(client, auth_headers):
    def post(recruiter, application, **overrides):
        payload = {
            "application_id": application.id,
            "scheduled_date": SCHEDULE_DATE,
            "scheduled_time": "10:00",
            "mode": "online",
        }
        payload.update(overrides)
        return client.post("/interviews/schedule", headers=auth_headers(recruiter), json=payload)
    return post


@pytest.fixture
def live_interview(client, shortlisted, schedule, auth_headers):
    """An online interview the student has joined."""
    recruiter, student, application = shortlisted
    interview_id = schedule(recruiter, application).json()["id"]
    client.put(f"/interviews/{interview_id}/start", headers=auth_headers(student))
    return recruiter, student, interview_id


def test_room_id_and_link_format():
    room_id = build_room_id(7, epoch_ms=1700000000000)
    assert room_id == "interview-7-1700000000000"
    assert build_meeting_link(room_id).endswith("/interview/room/interview-7-1700000000000")


def test_schedule_online_interview(client, db, shortlisted, schedule):
    """Test an online interview gets a room and the application gets the snapshot."""
    recruiter, student, application = shortlisted

    response = schedule(recruiter, application, duration=45, notes="Bring laptop")

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "scheduled"
    assert data["result"] == "pending"
    assert data["room_id"].startswith(f"interview-{data['id']}-")
    assert data["meeting_link"].endswith(f"/interview/room/{data['room_id']}")
    assert data["student_id"] == student.id
    assert data["duration"] == 45

    db.expire_all()
    refreshed = db.get(Application, application.id)
    assert refreshed.status == "interview"
    assert refreshed.interview_details["mode"] == "online"
    assert refreshed.interview_details["time"] == "10:00"
    assert refreshed.interview_details["date"].startswith("2030-01-15")
    assert refreshed.interview_details["meeting_link"] == data["meeting_link"]


def test_schedule_offline_interview_has_no_room(client, db, shortlisted, schedule):
    recruiter, _, application = shortlisted

    response = schedule(recruiter, application, mode="offline", location="Room 4")

    assert response.status_code == 201
    data = response.json()
    assert data["room_id"] is None
    assert data["meeting_link"] is None
    assert data["location"] == "Room 4"

    db.expire_all()
    details = db.get(Application, application.id).interview_details
    assert details["location"] == "Room 4"
    assert details["mode"] == "offline"


def test_schedule_offline_requires_location(client, db, shortlisted, schedule):
    recruiter, _, application = shortlisted

    response = schedule(recruiter, application, mode="offline", location="  ")

    assert response.status_code == 400
    assert response.json()["kind"] == "validation_error"
    assert db.query(Interview).count() == 0


def test_schedule_requires_shortlisted_application(client, make_user, make_job, make_application, schedule):
    recruiter = make_user(role="recruiter")
    application = make_application(make_job(recruiter), make_user(role="student"))

    response = schedule(recruiter, application)

    assert response.status_code == 409


def test_schedule_for_another_recruiters_application(client, shortlisted, make_user, schedule):
    _, _, application = shortlisted
    response = schedule(make_user(role="recruiter"), application)
    assert response.status_code == 403


def test_schedule_missing_application(client, make_user, auth_headers):
    recruiter = make_user(role="recruiter")
    response = client.post("/interviews/schedule", headers=auth_headers(recruiter), json={
        "application_id": 999,
        "scheduled_date": SCHEDULE_DATE,
        "scheduled_time": "10:00",
        "mode": "online",
    })
    assert response.status_code == 404


def test_student_cannot_schedule(client, shortlisted, schedule):
    _, student, application = shortlisted
    assert schedule(student, application).status_code == 403


def test_schedule_twice_for_same_application(client, db, shortlisted, schedule):
    """Test an application holds at most one open interview."""
    recruiter, _, application = shortlisted
    assert schedule(recruiter, application).status_code == 201

    response = schedule(recruiter, application, scheduled_time="15:00")

    assert response.status_code == 409
    assert response.json()["kind"] == "invalid_state"
    assert db.query(Interview).filter(Interview.application_id == application.id).count() == 1


def test_reschedule_after_cancel(client, db, shortlisted, schedule, auth_headers):
    recruiter, _, application = shortlisted
    first_id = schedule(recruiter, application).json()["id"]
    client.put(f"/interviews/{first_id}/cancel", headers=auth_headers(recruiter), json={"reason": "Clash"})

    response = schedule(recruiter, application, scheduled_time="15:00")

    assert response.status_code == 201
    assert response.json()["id"] != first_id
    open_count = db.query(Interview).filter(
        Interview.application_id == application.id,
        Interview.status == "scheduled",
    ).count()
    assert open_count == 1


def test_start_stamps_recording_and_roster(client, shortlisted, schedule, auth_headers):
    recruiter, student, application = shortlisted
    interview_id = schedule(recruiter, application).json()["id"]

    first = client.put(f"/interviews/{interview_id}/start", headers=auth_headers(student)).json()
    second = client.put(f"/interviews/{interview_id}/start", headers=auth_headers(recruiter)).json()

    assert first["status"] == "in-progress"
    assert second["recording"]["start_time"] == first["recording"]["start_time"]
    assert [entry["user_id"] for entry in second["participants"]] == [student.id, recruiter.id]
    assert second["participants"][1]["role"] == "recruiter"


def test_start_by_non_participant(client, shortlisted, schedule, make_user, auth_headers):
    recruiter, _, application = shortlisted
    interview_id = schedule(recruiter, application).json()["id"]

    response = client.put(f"/interviews/{interview_id}/start", headers=auth_headers(make_user(role="student")))

    assert response.status_code == 403


def test_end_before_start_is_invalid(client, shortlisted, schedule, auth_headers):
    recruiter, _, application = shortlisted
    interview_id = schedule(recruiter, application).json()["id"]

    response = client.put(f"/interviews/{interview_id}/end", headers=auth_headers(recruiter))

    assert response.status_code == 409


def test_end_synthesizes_bounded_analysis(client, live_interview, auth_headers):
    """Test ending a session with no analysis produces one within range of the overall score."""
    _, student, interview_id = live_interview

    response = client.put(f"/interviews/{interview_id}/end", headers=auth_headers(student))

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "completed"
    assert data["recording"]["end_time"]
    assert data["participants"][-1]["left_at"] is not None

    analysis = data["analysis"]
    overall = analysis["overall_score"]
    for key in ("overall_score", "communication_score", "technical_score", "confidence_score"):
        assert 0 <= analysis[key] <= 100
    for key in ("communication_score", "technical_score", "confidence_score"):
        assert abs(analysis[key] - overall) <= 5
    for key in ("eye_contact", "body_language", "speaking_pace"):
        assert abs(analysis[key]["score"] - overall) <= 5
    assert analysis["total_speaking_time"] == 30 * 60 * 0.6


def test_end_keeps_existing_analysis(client, db, live_interview, auth_headers):
    recruiter, student, interview_id = live_interview
    saved = {
        "overall_score": 50,
        "communication_score": 50,
        "technical_score": 50,
        "confidence_score": 50,
        "sentiment_analysis": {"positive": 0.5, "neutral": 0.3, "negative": 0.2},
        "response_quality": "poor",
        "eye_contact": {"score": 50, "feedback": ""},
        "body_language": {"score": 50, "feedback": ""},
        "speaking_pace": {"score": 50, "feedback": ""},
        "average_response_time": 10,
        "total_speaking_time": 600,
        "filler_words_count": 3,
    }
    assert client.post(
        f"/interviews/{interview_id}/analysis",
        headers=auth_headers(recruiter),
        json={"analysis": saved},
    ).status_code == 200

    response = client.put(f"/interviews/{interview_id}/end", headers=auth_headers(student))

    assert response.json()["analysis"]["response_quality"] == "poor"
    assert response.json()["analysis"]["overall_score"] == 50


def test_save_analysis_rejects_out_of_range_scores(client, live_interview, auth_headers):
    recruiter, _, interview_id = live_interview
    response = client.post(
        f"/interviews/{interview_id}/analysis",
        headers=auth_headers(recruiter),
        json={"analysis": {"overall_score": 140}},
    )
    assert response.status_code == 422


def test_generate_analysis_without_provider_synthesizes(client, live_interview, auth_headers):
    recruiter, _, interview_id = live_interview

    response = client.post(f"/interviews/{interview_id}/generate-analysis", headers=auth_headers(recruiter))

    assert response.status_code == 200
    assert 70 <= response.json()["analysis"]["overall_score"] <= 95


def test_student_cannot_generate_analysis(client, live_interview, auth_headers):
    _, student, interview_id = live_interview
    response = client.post(f"/interviews/{interview_id}/generate-analysis", headers=auth_headers(student))
    assert response.status_code == 403


@pytest.mark.parametrize("result,expected", [
    ("selected", "selected"),
    ("rejected", "rejected"),
    ("on-hold", "interview"),
    ("pending", "interview"),
])
def test_decision_writes_back_to_application(client, db, shortlisted, schedule, auth_headers, result, expected):
    recruiter, _, application = shortlisted
    interview_id = schedule(recruiter, application).json()["id"]

    response = client.put(
        f"/interviews/{interview_id}/decision",
        headers=auth_headers(recruiter),
        json={"result": result, "final_feedback": "Strong systems design", "rating": 4},
    )

    assert response.status_code == 200
    assert response.json()["result"] == result
    assert response.json()["rating"] == 4
    db.expire_all()
    refreshed = db.get(Application, application.id)
    assert refreshed.status == expected
    assert refreshed.feedback == "Strong systems design"


def test_decision_by_other_recruiter(client, db, shortlisted, schedule, make_user, auth_headers):
    recruiter, _, application = shortlisted
    interview_id = schedule(recruiter, application).json()["id"]

    response = client.put(
        f"/interviews/{interview_id}/decision",
        headers=auth_headers(make_user(role="recruiter")),
        json={"result": "selected"},
    )

    assert response.status_code == 403
    db.expire_all()
    assert db.get(Application, application.id).status == "interview"


def test_decision_rating_bounds(client, shortlisted, schedule, auth_headers):
    recruiter, _, application = shortlisted
    interview_id = schedule(recruiter, application).json()["id"]

    response = client.put(
        f"/interviews/{interview_id}/decision",
        headers=auth_headers(recruiter),
        json={"result": "selected", "rating": 6},
    )

    assert response.status_code == 422


def test_cancel_and_missed_only_from_scheduled(client, shortlisted, schedule, auth_headers):
    recruiter, student, application = shortlisted
    headers = auth_headers(recruiter)
    interview_id = schedule(recruiter, application).json()["id"]

    cancelled = client.put(f"/interviews/{interview_id}/cancel", headers=headers, json={"reason": "Panel unavailable"})
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"
    assert cancelled.json()["cancellation_reason"] == "Panel unavailable"

    assert client.put(f"/interviews/{interview_id}/missed", headers=headers).status_code == 409
    assert client.put(f"/interviews/{interview_id}/start", headers=auth_headers(student)).status_code == 409


def test_mark_missed(client, shortlisted, schedule, auth_headers):
    recruiter, _, application = shortlisted
    interview_id = schedule(recruiter, application).json()["id"]

    response = client.put(f"/interviews/{interview_id}/missed", headers=auth_headers(recruiter))

    assert response.status_code == 200
    assert response.json()["status"] == "missed"


def test_cancel_in_progress_is_invalid(client, live_interview, auth_headers):
    recruiter, _, interview_id = live_interview
    response = client.put(f"/interviews/{interview_id}/cancel", headers=auth_headers(recruiter))
    assert response.status_code == 409


def test_question_response_and_notes_logs(client, live_interview, auth_headers):
    recruiter, student, interview_id = live_interview

    client.post(
        f"/interviews/{interview_id}/questions",
        headers=auth_headers(recruiter),
        json={"question": "Describe a hard bug you fixed", "category": "behavioral"},
    )
    client.post(
        f"/interviews/{interview_id}/responses",
        headers=auth_headers(student),
        json={"response": "A race in a cache layer", "question_index": 0, "duration": 42.5},
    )
    response = client.put(
        f"/interviews/{interview_id}/notes",
        headers=auth_headers(recruiter),
        json={"notes": "Good depth"},
    )

    data = response.json()
    assert data["questions"][0]["question"] == "Describe a hard bug you fixed"
    assert data["questions"][0]["category"] == "behavioral"
    assert data["questions"][0]["asked_at"]
    assert data["responses"][0]["question_index"] == 0
    assert data["responses"][0]["duration"] == 42.5
    assert data["recruiter_notes"] == "Good depth"


def test_student_cannot_add_questions(client, live_interview, auth_headers):
    _, student, interview_id = live_interview
    response = client.post(
        f"/interviews/{interview_id}/questions",
        headers=auth_headers(student),
        json={"question": "Can I ask one?"},
    )
    assert response.status_code == 403


def test_get_interview_visibility(client, shortlisted, schedule, make_user, auth_headers):
    recruiter, student, application = shortlisted
    created = schedule(recruiter, application).json()
    url = f"/interviews/{created['id']}"

    assert client.get(url, headers=auth_headers(student)).status_code == 200
    assert client.get(url, headers=auth_headers(make_user(role="admin"))).status_code == 200
    assert client.get(url, headers=auth_headers(make_user(role="student"))).status_code == 403

    by_room = client.get(f"/interviews/room/{created['room_id']}", headers=auth_headers(student))
    assert by_room.json()["id"] == created["id"]
    assert client.get("/interviews/room/interview-0-0", headers=auth_headers(student)).status_code == 404


def test_my_interviews(client, shortlisted, schedule, make_user, auth_headers):
    recruiter, student, application = shortlisted
    created = schedule(recruiter, application).json()

    assert [i["id"] for i in client.get("/interviews/my/interviews", headers=auth_headers(student)).json()] == [created["id"]]
    assert [i["id"] for i in client.get("/interviews/my/interviews", headers=auth_headers(recruiter)).json()] == [created["id"]]
    assert client.get("/interviews/my/interviews", headers=auth_headers(make_user(role="student"))).json() == []
