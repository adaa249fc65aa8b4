"""
Tests for the maintenance scripts, run against the test database.
"""
from app.core.security import verify_password
from app.models.user import User, UserRole
from app.services.profiles import link_teacher

from scripts import reset_admin_password, sync_profiles


def test_reset_admin_password(db_session, make_user, monkeypatch):
    make_user("Admin", UserRole.ADMIN)
    monkeypatch.setattr(reset_admin_password, "SessionLocal", lambda: db_session)

    assert reset_admin_password.reset_admin_password("Fresh123!") is True

    admin = db_session.query(User).filter(User.username == "Admin").one()
    assert verify_password("Fresh123!", admin.password_hash)


def test_reset_admin_password_without_admin(db_session, monkeypatch):
    monkeypatch.setattr(reset_admin_password, "SessionLocal", lambda: db_session)

    assert reset_admin_password.reset_admin_password() is False


def test_sync_profiles_script(db_session, teacher, make_doctor, monkeypatch, capsys):
    doctor = make_doctor()
    link_teacher(db_session, doctor, teacher)
    db_session.commit()
    teacher.profile_image_url = "https://img.test/t.png"
    db_session.commit()
    monkeypatch.setattr(sync_profiles, "SessionLocal", lambda: db_session)

    sync_profiles.main()

    assert "1 doctor(s) updated" in capsys.readouterr().out
