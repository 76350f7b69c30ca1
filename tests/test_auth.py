"""
Tests for registration, login, the current-user endpoint and profile edits.
"""
from app.db.models.user import User


def test_register_student_returns_token(client, db):
    """Test successful registration issues a token and stores a lower-cased email."""
    response = client.post("/auth/register", json={
        "name": "Asha Rao",
        "email": "Asha.Rao@College.edu",
        "password": "SecurePass123",
        "role": "student",
    })

    assert response.status_code == 201
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["email"] == "asha.rao@college.edu"
    assert data["user"]["role"] == "student"
    assert "password_hash" not in data["user"]

    user = db.query(User).filter(User.email == "asha.rao@college.edu").first()
    assert user is not None
    assert user.password_hash != "SecurePass123"


def test_register_duplicate_email(client, make_user):
    """Test registering an existing email fails with a validation error."""
    make_user(role="student", email="taken@college.edu")

    response = client.post("/auth/register", json={
        "name": "Someone Else",
        "email": "TAKEN@college.edu",
        "password": "SecurePass123",
        "role": "recruiter",
    })

    assert response.status_code == 400
    assert response.json()["kind"] == "validation_error"


def test_register_cannot_self_assign_admin(client):
    response = client.post("/auth/register", json={
        "name": "Mallory",
        "email": "mallory@college.edu",
        "password": "SecurePass123",
        "role": "admin",
    })
    assert response.status_code == 422


def test_login_success(client, make_user):
    """Test successful login with correct credentials."""
    user = make_user(role="recruiter", email="hr@acme.com")

    response = client.post("/auth/login", json={"email": "hr@acme.com", "password": "testpass123"})

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == user.id
    assert len(data["access_token"]) > 0


def test_login_wrong_password(client, make_user):
    """Test login with wrong password returns 401."""
    make_user(email="student@college.edu")

    response = client.post("/auth/login", json={"email": "student@college.edu", "password": "wrongpassword"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_login_nonexistent_user(client):
    response = client.post("/auth/login", json={"email": "nobody@college.edu", "password": "testpass123"})
    assert response.status_code == 401


def test_login_deactivated_account(client, make_user):
    make_user(email="gone@college.edu", is_active=False)

    response = client.post("/auth/login", json={"email": "gone@college.edu", "password": "testpass123"})

    assert response.status_code == 403
    assert response.json()["kind"] == "permission_denied"


def test_token_form_login(client, make_user):
    """Test the OAuth2 form endpoint used by Swagger."""
    make_user(email="form@college.edu")

    response = client.post(
        "/auth/token",
        data={"username": "form@college.edu", "password": "testpass123"},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401


def test_me_rejects_garbage_token(client):
    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_me_returns_current_user(client, make_user, auth_headers):
    user = make_user(role="student")

    response = client.get("/auth/me", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["id"] == user.id


def test_update_profile_applies_only_role_block(client, db, make_user, auth_headers):
    student = make_user(role="student", student_profile={"roll_number": "CS21-001"})

    response = client.put("/auth/profile", headers=auth_headers(student), json={
        "phone": "9876543210",
        "student_profile": {"department": "CSE", "cgpa": 8.4},
        "recruiter_profile": {"company_name": "Ignored Inc"},
    })

    assert response.status_code == 200
    db.expire_all()
    refreshed = db.get(User, student.id)
    assert refreshed.phone == "9876543210"
    assert refreshed.student_profile == {"roll_number": "CS21-001", "department": "CSE", "cgpa": 8.4}
    assert not refreshed.recruiter_profile


def test_update_profile_rejects_out_of_range_cgpa(client, make_user, auth_headers):
    student = make_user(role="student")
    response = client.put("/auth/profile", headers=auth_headers(student), json={
        "student_profile": {"cgpa": 11},
    })
    assert response.status_code == 422


def test_startup_settings_are_redacted():
    from app.core import config
    from app.core.logging_config import sanitize_log_data

    settings = sanitize_log_data(config.startup_settings())

    assert settings["secret_key"] == "***REDACTED***"
    assert settings["database_url"] == "***REDACTED***"
    assert settings["openai_api_key"] == "***REDACTED***"
    assert settings["analysis_strategy"] == config.ANALYSIS_STRATEGY
