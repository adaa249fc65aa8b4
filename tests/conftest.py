"""
Shared fixtures: an in-memory SQLite database per test and a TestClient
wired to it through the get_db dependency.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.session import Base, get_db
from app.db.init_db import create_tables
from app.models.user import User, UserRole
from app.models.doctor import Doctor
from app.models.review import Review
from app.core.security import get_password_hash, create_access_token

PASSWORD = "Password123"


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make_user(username="student1", role=UserRole.STUDENT, email=None, **kwargs):
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            password_hash=get_password_hash(PASSWORD),
            role=UserRole(role).value,
            is_active=kwargs.pop("is_active", True),
            **kwargs
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_doctor(db_session):
    def _make_doctor(name="Dr. Sarah Johnson", department="Computer Science", **kwargs):
        doctor = Doctor(name=name, department=department, **kwargs)
        db_session.add(doctor)
        db_session.commit()
        db_session.refresh(doctor)
        return doctor
    return _make_doctor


@pytest.fixture
def add_review(db_session):
    def _add_review(doctor, scores=(4, 4, 4, 4, 4), comment=None, reviewer=None):
        teaching_quality, availability, communication, knowledge, fairness = scores
        review = Review(
            doctor_id=doctor.id,
            reviewer_id=reviewer.id if reviewer else None,
            teaching_quality=teaching_quality,
            availability=availability,
            communication=communication,
            knowledge=knowledge,
            fairness=fairness,
            comment=comment,
        )
        db_session.add(review)
        db_session.commit()
        return review
    return _add_review


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}
    return _auth_headers


@pytest.fixture
def student(make_user):
    return make_user("student1", UserRole.STUDENT)


@pytest.fixture
def teacher(make_user):
    return make_user("teacher1", UserRole.TEACHER, first_name="Sarah", last_name="Johnson")


@pytest.fixture
def admin(make_user):
    return make_user("admin1", UserRole.ADMIN)
