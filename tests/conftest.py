"""Shared fixtures: in-memory database, API client and signed-in members."""

import os
import time
from collections import namedtuple

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_JWT_SECRET"] = "test-jwt-secret"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from crewhub.database import Base, SessionLocal, engine
from crewhub.main import app
from crewhub.models import UserProfile
from crewhub.utils.formatting import compute_profile_completion

JWT_SECRET = os.environ["AUTH_JWT_SECRET"]

Member = namedtuple("Member", ["id", "auth_uid", "email", "headers"])


def make_token(sub: str, email: str = None, expires_in: int = 3600, **claims) -> str:
    """Sign a token the way the hosted auth provider does."""
    payload = {"sub": sub, "aud": "authenticated", "exp": int(time.time()) + expires_in}
    if email:
        payload["email"] = email
    payload.update(claims)
    return jwt.encode(payload, JWT_SECRET, algorithm="HS256")


def auth_headers(sub: str, email: str = None, **claims) -> dict:
    return {"Authorization": f"Bearer {make_token(sub, email, **claims)}"}


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_member(db_session):
    """Factory creating a profile plus auth headers for it."""
    counter = {"n": 0}

    def _make(name: str = None, complete: bool = True) -> Member:
        counter["n"] += 1
        n = counter["n"]
        auth_uid = f"auth-user-{n}"
        email = f"member{n}@example.com"
        profile = UserProfile(auth_uid=auth_uid, email=email)
        if complete:
            profile.full_name = name or f"Member {n}"
            profile.handle = f"@member{n}"
            profile.primary_role = "Video Editor"
            profile.bio = "Editor with ten years in short film."
            profile.location = "Dubai"
            profile.avatar_url = "https://cdn.example.com/avatar.png"
            profile.resume_url = "https://cdn.example.com/resume.pdf"
            profile.portfolio_url = "https://portfolio.example.com"
        profile.profile_completion_percentage = compute_profile_completion(profile)
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return Member(profile.id, auth_uid, email, auth_headers(auth_uid, email))

    return _make


@pytest.fixture
def creator(make_member):
    return make_member("Casey Creator")


@pytest.fixture
def crew(make_member):
    return make_member("Robin Crew")
