import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from teamup import models
from teamup.api import admin as admin_api
from teamup.api import auth as auth_api
from teamup.api import profile as profile_api
from teamup.crud import profile as profile_crud
from teamup.crud import user as user_crud
from teamup.schemas.auth import LoginRequest, RegisterRequest
from teamup.schemas.user import ProfileUpdate
from teamup.utils.security import require_admin, require_role


@pytest.fixture(autouse=True)
def cheap_hashing(monkeypatch):
    monkeypatch.setattr(auth_api, "get_password_hash", lambda password: f"hashed::{password}")
    monkeypatch.setattr(
        auth_api, "verify_password", lambda plain, hashed: hashed == f"hashed::{plain}"
    )


# ======================
# REGISTRATION / LOGIN
# ======================

def _register(db, email, password="secret123", name="Student"):
    return auth_api.register(
        RegisterRequest(email=email, password=password, display_name=name, college="State U"),
        db=db,
    )


def test_register_rejects_domain_outside_allowlist(db_session):
    with pytest.raises(HTTPException) as exc:
        _register(db_session, "someone@unknown.org")
    assert exc.value.status_code == 400


def test_register_accepts_default_and_table_domains(db_session):
    user_crud.add_allowed_domain(db_session, "StateU.edu", "State University")

    first = _register(db_session, "a@gmail.com")
    second = _register(db_session, "B@stateu.edu", name="Bee")

    user = user_crud.get_user(db_session, second["user_id"])
    assert first["message"] == "Registration successful"
    assert user.email == "b@stateu.edu"
    assert user.college_domain == "stateu.edu"
    assert user.role == "student"
    assert user.profile.display_name == "Bee"
    assert user.profile.open_for == []


def test_deactivated_domain_is_rejected(db_session):
    row = user_crud.add_allowed_domain(db_session, "old.edu")
    user_crud.deactivate_allowed_domain(db_session, row.id)

    with pytest.raises(HTTPException):
        _register(db_session, "x@old.edu")


def test_register_rejects_duplicate_email(db_session):
    _register(db_session, "dup@gmail.com")

    with pytest.raises(HTTPException) as exc:
        _register(db_session, "DUP@gmail.com")
    assert exc.value.detail == "Email already registered"


def test_login_issues_token_and_blocks_blocked_users(db_session):
    _register(db_session, "log@gmail.com", password="secret123")

    token = auth_api.login(LoginRequest(email="log@gmail.com", password="secret123"), db=db_session)
    assert token["token_type"] == "bearer"
    assert token["access_token"]

    with pytest.raises(HTTPException) as bad:
        auth_api.login(LoginRequest(email="log@gmail.com", password="wrong"), db=db_session)
    assert bad.value.status_code == 401

    user = user_crud.get_user_by_email(db_session, "log@gmail.com")
    user.is_blocked = True
    db_session.commit()
    with pytest.raises(HTTPException) as blocked:
        auth_api.login(LoginRequest(email="log@gmail.com", password="secret123"), db=db_session)
    assert blocked.value.status_code == 403


# ======================
# AUTHORIZATION
# ======================

def test_admin_check_uses_persisted_role(db_session, make_user):
    admin = make_user("Boss", role="admin")
    assert require_admin(current_user=admin) is admin

    # Demotion takes effect even though an old token would still claim admin.
    admin.role = "student"
    db_session.commit()
    with pytest.raises(HTTPException) as exc:
        require_admin(current_user=admin)
    assert exc.value.status_code == 403


def test_require_role_is_case_insensitive(make_user):
    user = make_user("Mod", role="Admin")
    assert require_role("ADMIN")(current_user=user) is user


def test_admin_can_block_and_change_roles(db_session, make_user):
    admin = make_user("Boss", role="admin")
    target = make_user("Target")

    blocked = admin_api.block_user(target.id, admin=admin, db=db_session)
    assert blocked["is_blocked"] is True

    promoted = admin_api.change_role(target.id, admin_api.RoleUpdate(role="Admin"), admin=admin, db=db_session)
    assert promoted["role"] == "admin"

    with pytest.raises(HTTPException) as exc:
        admin_api.change_role(target.id, admin_api.RoleUpdate(role="root"), admin=admin, db=db_session)
    assert exc.value.status_code == 400

    stats = admin_api.get_dashboard_stats(admin=admin, db=db_session)
    assert stats["users"] == {"total": 2, "blocked": 1, "verified": 2}


# ======================
# PROFILES
# ======================

def test_profile_update_normalizes_lists_and_creates_vocabulary(db_session, make_user):
    me = make_user("Me")

    updated = profile_api.update_my_profile(
        ProfileUpdate(
            display_name="Me Again",
            branch="CSE",
            open_for=["Hackathons", " hackathons ", "", "Research"],
            skills=["Python", "python", "Rust"],
            interests=["ML"],
        ),
        current_user=me,
        db=db_session,
    )

    assert updated["display_name"] == "Me Again"
    assert updated["open_for"] == ["Hackathons", "Research"]
    assert updated["skills"] == ["Python", "Rust"]
    assert updated["interests"] == ["ML"]
    assert [s.name for s in profile_crud.list_skills(db_session)] == ["Python", "Rust"]


def test_vocabulary_is_shared_case_insensitively(db_session, make_user):
    make_user("A", skills=["Python"])
    b = make_user("B", skills=["PYTHON", "Go"])

    assert [s.name for s in profile_crud.list_skills(db_session)] == ["Go", "Python"]
    assert profile_crud.get_user_skill_names(db_session, b.id) == {"python", "go"}


def test_omitted_lists_are_left_untouched(db_session, make_user):
    me = make_user("Me", skills=["Python"], interests=["ML"])

    profile_api.update_my_profile(ProfileUpdate(bio="hello"), current_user=me, db=db_session)
    record = profile_crud.get_profile_record(db_session, me.id)

    assert record["bio"] == "hello"
    assert record["skills"] == ["Python"]
    assert record["interests"] == ["ML"]


def test_open_for_must_be_a_list():
    with pytest.raises(ValidationError):
        ProfileUpdate(open_for="hackathons")


def test_browse_reports_connection_status(db_session, make_user, connect):
    me = make_user("Me")
    sent = make_user("Sent")
    other = make_user("Other")
    connect(me, sent)

    rows = profile_api.browse_profiles(current_user=me, db=db_session)
    status = {row["user_id"]: row["connection_status"] for row in rows}

    assert status == {sent.id: "SENT", other.id: "NONE"}


def test_missing_profile_is_404(db_session):
    with pytest.raises(HTTPException) as exc:
        profile_api.get_profile(4242, db=db_session)
    assert exc.value.status_code == 404
