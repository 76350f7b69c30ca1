"""
Tests for resume file upload, AI parsing and stored analyses.
"""
import io
import json

import docx
import fitz
import pytest

from app.core.errors import ProviderError, EmptyDocumentError, UnsupportedFormatError, ValidationError
from app.db.models.resume_analysis import ResumeAnalysis
from app.services import resume_parser
from app.services.resume_parser import extract_text, normalize_content_type, DOCX, PDF, TEXT

RESUME_TEXT = b"Asha Rao\nasha@college.edu\nSkills: Python, SQL\nB.Tech CSE, City College"

PARSED_REPLY = json.dumps({
    "personal_info": {"name": "Asha Rao", "email": "asha@college.edu"},
    "skills": {"technical": ["Python", "SQL"], "soft": [], "languages": [], "tools": []},
    "experience": [],
    "education": [{"degree": "B.Tech", "institution": "City College", "field": "CSE"}],
    "certifications": [],
    "projects": [],
    "analysis": {"strengths": ["Solid fundamentals"], "experience_level": "junior", "overall_score": 72},
    "keywords": {"ats_friendly_keywords": ["python"], "missing_keywords": ["docker"], "ats_score": 64},
})

# trailing commas exercise the cleanup pass
RECOMMENDATIONS_REPLY = """```json
{
  "resume_improvements": [{"section": "Projects", "recommendation": "Add two projects", "priority": "high"},],
  "skill_gaps": [{"skill": "Docker", "importance": "medium"}],
  "certifications": [],
  "job_targets": [{"job_title": "Data Analyst", "match_score": 70}],
}
```"""

COMPARISON_REPLY = json.dumps({
    "overall_match_score": 68,
    "match_breakdown": {"skills_match": {"score": 60, "matched_skills": ["python"], "missing_skills": ["spark"]}},
    "readiness": "needs_preparation",
    "recommendations": ["Learn Spark basics"],
})


@pytest.fixture
def student(make_user):
    return make_user(role="student")


def _upload(client, headers, content=RESUME_TEXT, content_type=TEXT, name="cv.txt"):
    return client.post("/resume-parser/parse", headers=headers, files={"resume": (name, content, content_type)})


@pytest.fixture
def stored_analysis(client, student, auth_headers, fake_llm):
    fake_llm(replies=[PARSED_REPLY, RECOMMENDATIONS_REPLY])
    response = _upload(client, auth_headers(student))
    assert response.status_code == 201
    return response.json()


def test_parse_text_resume(stored_analysis, student):
    assert stored_analysis["student_id"] == student.id
    assert stored_analysis["file_name"] == "cv.txt"
    assert stored_analysis["content_type"] == "text/plain"
    assert stored_analysis["parsed_data"]["personal_info"]["name"] == "Asha Rao"
    assert stored_analysis["parsed_data"]["keywords"]["ats_score"] == 64
    assert stored_analysis["recommendations"]["skill_gaps"][0]["skill"] == "Docker"
    assert stored_analysis["recommendations"]["resume_improvements"][0]["section"] == "Projects"


def test_parse_prompt_carries_resume_text(client, student, auth_headers, fake_llm):
    provider = fake_llm(replies=[PARSED_REPLY, RECOMMENDATIONS_REPLY])

    _upload(client, auth_headers(student))

    assert len(provider.calls) == 2
    assert "Skills: Python, SQL" in provider.calls[0]["messages"][-1]["content"]
    assert "Asha Rao" in provider.calls[1]["messages"][-1]["content"]


def test_history_get_and_delete(client, db, stored_analysis, student, make_user, auth_headers):
    headers = auth_headers(student)
    analysis_id = stored_analysis["id"]

    history = client.get("/resume-parser/history", headers=headers).json()
    assert [item["id"] for item in history] == [analysis_id]
    assert "parsed_data" not in history[0]

    assert client.get(f"/resume-parser/{analysis_id}", headers=headers).status_code == 200
    assert client.get(f"/resume-parser/{analysis_id}", headers=auth_headers(make_user(role="student"))).status_code == 404

    assert client.delete(f"/resume-parser/{analysis_id}", headers=headers).status_code == 200
    assert db.query(ResumeAnalysis).count() == 0
    assert client.get(f"/resume-parser/{analysis_id}", headers=headers).status_code == 404


def test_compare_with_job(client, stored_analysis, student, auth_headers, fake_llm):
    provider = fake_llm(replies=[COMPARISON_REPLY])

    response = client.post(
        f"/resume-parser/compare/{stored_analysis['id']}",
        headers=auth_headers(student),
        json={"job_description": "Data engineer with Spark"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["overall_match_score"] == 68
    assert data["readiness"] == "needs_preparation"
    assert "Data engineer with Spark" in provider.calls[0]["messages"][-1]["content"]


def test_compare_reply_missing_score(client, stored_analysis, student, auth_headers, fake_llm):
    fake_llm(replies=['{"readiness": "ready"}'])

    response = client.post(
        f"/resume-parser/compare/{stored_analysis['id']}",
        headers=auth_headers(student),
        json={"job_description": "Anything"},
    )

    assert response.status_code == 502
    assert response.json()["kind"] == "parse_error"


def test_unsupported_upload(client, student, auth_headers):
    response = _upload(client, auth_headers(student), content=b"\x89PNG...", content_type="image/png", name="cv.png")

    assert response.status_code == 415
    assert response.json()["kind"] == "unsupported_format"


def test_empty_upload(client, student, auth_headers):
    response = _upload(client, auth_headers(student), content=b"   \n  ")

    assert response.status_code == 400
    assert response.json()["kind"] == "empty_document"


def test_provider_failure_stores_nothing(client, db, student, auth_headers, fake_llm):
    fake_llm(error=ProviderError("upstream unavailable", status=503))

    response = _upload(client, auth_headers(student))

    assert response.status_code == 502
    assert response.json()["kind"] == "provider_error"
    assert db.query(ResumeAnalysis).count() == 0


def test_missing_provider_is_a_provider_error(client, db, student, auth_headers):
    response = _upload(client, auth_headers(student))

    assert response.status_code == 502
    assert db.query(ResumeAnalysis).count() == 0


def test_unparseable_reply(client, db, student, auth_headers, fake_llm):
    fake_llm(replies=["Sorry, I can't read that resume."])

    response = _upload(client, auth_headers(student))

    assert response.status_code == 502
    assert response.json()["kind"] == "parse_error"
    assert db.query(ResumeAnalysis).count() == 0


def test_recruiter_cannot_parse(client, make_user, auth_headers):
    response = _upload(client, auth_headers(make_user(role="recruiter")))
    assert response.status_code == 403


# ============================================
# Text extraction
# ============================================

def test_normalize_content_type():
    assert normalize_content_type("Text/Plain; charset=utf-8") == TEXT
    assert normalize_content_type(None) == ""


def test_extract_docx():
    document = docx.Document()
    document.add_paragraph("Asha Rao")
    document.add_paragraph("Python developer")
    buffer = io.BytesIO()
    document.save(buffer)

    assert extract_text(buffer.getvalue(), DOCX) == "Asha Rao\nPython developer"


def test_extract_pdf():
    document = fitz.open()
    page = document.new_page()
    page.insert_text((72, 72), "Asha Rao resume")
    content = document.tobytes()
    document.close()

    assert "Asha Rao resume" in extract_text(content, PDF)


def test_extract_pdf_without_text():
    document = fitz.open()
    document.new_page()
    content = document.tobytes()
    document.close()

    with pytest.raises(EmptyDocumentError):
        extract_text(content, PDF)


def test_extract_corrupt_docx():
    with pytest.raises(ValidationError) as excinfo:
        extract_text(b"not a zip archive", DOCX)
    assert excinfo.value.kind == "validation_error"


def test_extract_rejects_unknown_type():
    with pytest.raises(UnsupportedFormatError):
        extract_text(b"hello", "application/msword")


def test_extract_rejects_oversized(monkeypatch):
    monkeypatch.setattr(resume_parser, "MAX_UPLOAD_BYTES", 10)
    with pytest.raises(ValidationError) as excinfo:
        extract_text(b"x" * 11, TEXT)
    assert "too large" in excinfo.value.message
