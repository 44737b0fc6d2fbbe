from sqlalchemy.exc import OperationalError

from teamup import models
from teamup.ml.cache import JsonFileRecommendationCache
from teamup.scripts import bootstrap_admin as bootstrap_module
from teamup.scripts import generate_recommendations as generate_module
from teamup.services.recommendation_service import RecommendationService


def _use_session(monkeypatch, module, db_session):
    monkeypatch.setattr(module, "SessionLocal", lambda: db_session)


def test_generate_writes_cache_and_exits_zero(monkeypatch, tmp_path, db_session, make_user, capsys):
    alice = make_user("Alice", skills=["python"], interests=["ai"])
    bob = make_user("Bob", skills=["design"], interests=["ai"])
    cache = JsonFileRecommendationCache(tmp_path / "data" / "recommendations.json")
    service = RecommendationService(cache)
    _use_session(monkeypatch, generate_module, db_session)
    monkeypatch.setattr(generate_module, "get_recommendation_service", lambda: service)

    assert generate_module.generate() == 0

    assert cache.path.exists()
    assert cache.load() == {alice.id: [bob.id], bob.id: [alice.id]}
    out = capsys.readouterr().out
    assert "Generated recommendations for 2 users." in out
    assert str(cache.path) in out


def test_generate_failure_exits_nonzero_and_leaves_no_cache(monkeypatch, tmp_path, db_session, capsys):
    def broken_generator(db, top_k):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    cache = JsonFileRecommendationCache(tmp_path / "recommendations.json")
    service = RecommendationService(cache, generator=broken_generator)
    _use_session(monkeypatch, generate_module, db_session)
    monkeypatch.setattr(generate_module, "get_recommendation_service", lambda: service)

    assert generate_module.generate() == 1

    assert not cache.path.exists()
    assert "Error generating recommendations" in capsys.readouterr().err


def _bootstrap_env(monkeypatch, **overrides):
    env = {
        "ENABLE_ADMIN_BOOTSTRAP": "true",
        "ADMIN_BOOTSTRAP_CONFIRM": bootstrap_module.CONFIRM_PHRASE,
        "ADMIN_EMAIL": "Admin@College.edu",
        "ADMIN_PASSWORD": "changeme123",
        "ADMIN_NAME": "",
    }
    env.update(overrides)
    for key, value in env.items():
        if value is None:
            monkeypatch.delenv(key, raising=False)
        else:
            monkeypatch.setenv(key, value)


def test_bootstrap_creates_admin_with_profile(monkeypatch, db_session):
    _bootstrap_env(monkeypatch, ADMIN_NAME="Root")
    _use_session(monkeypatch, bootstrap_module, db_session)
    monkeypatch.setattr(bootstrap_module, "get_password_hash", lambda password: f"hashed:{password}")

    assert bootstrap_module.bootstrap_admin() == 0

    admin = db_session.query(models.User).filter(models.User.email == "admin@college.edu").one()
    assert admin.role == "admin"
    assert admin.is_verified is True
    assert admin.password_hash == "hashed:changeme123"
    assert admin.college_domain == "college.edu"
    assert admin.profile.display_name == "Root"


def test_bootstrap_promotes_existing_user(monkeypatch, db_session, make_user):
    user_id = make_user("Carol").id
    _bootstrap_env(monkeypatch, ADMIN_EMAIL="carol@college.edu", ADMIN_PASSWORD=None)
    _use_session(monkeypatch, bootstrap_module, db_session)

    assert bootstrap_module.bootstrap_admin() == 0

    promoted = db_session.get(models.User, user_id)
    assert promoted.role == "admin"
    assert db_session.query(models.User).count() == 1


def test_bootstrap_refuses_without_enable_flag(monkeypatch, db_session, capsys):
    _bootstrap_env(monkeypatch, ENABLE_ADMIN_BOOTSTRAP=None)
    _use_session(monkeypatch, bootstrap_module, db_session)

    assert bootstrap_module.bootstrap_admin() == 1

    assert db_session.query(models.User).count() == 0
    assert "Bootstrap disabled" in capsys.readouterr().err


def test_bootstrap_refuses_wrong_confirmation(monkeypatch, db_session):
    _bootstrap_env(monkeypatch, ADMIN_BOOTSTRAP_CONFIRM="yes")
    _use_session(monkeypatch, bootstrap_module, db_session)

    assert bootstrap_module.bootstrap_admin() == 1
    assert db_session.query(models.User).count() == 0


def test_bootstrap_rejects_weak_password(monkeypatch, db_session, capsys):
    _bootstrap_env(monkeypatch, ADMIN_PASSWORD="nodigitshere")
    _use_session(monkeypatch, bootstrap_module, db_session)

    assert bootstrap_module.bootstrap_admin() == 1

    assert db_session.query(models.User).count() == 0
    assert "digit" in capsys.readouterr().err
