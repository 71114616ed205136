"""Shared fixtures: in-memory Mongo, fake Firebase tokens, ASGI test client."""

from datetime import datetime, timezone, timedelta

import httpx
import pytest
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import ServerSelectionTimeoutError

import main
import app.deps as deps
from app.routes import analytics as analytics_routes
from app.routes import student as student_routes

TOKENS = {
    "admin-token": {"uid": "admin-1", "email": "admin@example.com", "admin": True},
    "student-token": {"uid": "student-1", "email": "student1@example.com"},
    "other-student-token": {"uid": "student-2", "email": "student2@example.com"},
}

ADMIN = {"Authorization": "Bearer admin-token"}
STUDENT = {"Authorization": "Bearer student-token"}
OTHER_STUDENT = {"Authorization": "Bearer other-student-token"}


def fake_decode_token(token):
    return TOKENS.get(token)


def iso_ago(now=None, **delta):
    now = now or datetime.now(timezone.utc)
    return (now - timedelta(**delta)).isoformat()


def make_question(text, subject="Math", topic=None, askCount=1, upvotes=0,
                  accuracyRating=None, askedBy=None, days_ago=0, now=None):
    asked_at = iso_ago(now, days=days_ago)
    doc = {
        "text": text,
        "subject": subject,
        "answer": f"Answer to: {text}",
        "askCount": askCount,
        "upvotes": upvotes,
        "askedAt": asked_at,
        "createdAt": asked_at,
    }
    if topic is not None:
        doc["topic"] = topic
    if accuracyRating is not None:
        doc["accuracyRating"] = accuracyRating
    if askedBy is not None:
        doc["askedBy"] = askedBy
    return doc


def make_user(email, role="student", hours_ago=1, now=None):
    return {"email": email, "role": role, "lastActive": iso_ago(now, hours=hours_ago)}


class UnavailableCollection:
    """Every operation fails the way Motor does when no server is reachable"""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise ServerSelectionTimeoutError("localhost:27017: [Errno 111] Connection refused")
        return fail


class UnavailableDatabase:
    def __getattr__(self, name):
        return UnavailableCollection()

    def __getitem__(self, name):
        return UnavailableCollection()


@pytest.fixture
def mock_db():
    return AsyncMongoMockClient()["homeworkhelper_test"]


@pytest.fixture
def use_db(monkeypatch):
    """Point the routes at a given database object"""
    def _use(database):
        monkeypatch.setattr(analytics_routes, "db", database)
        monkeypatch.setattr(student_routes, "db", database)
    return _use


@pytest.fixture
async def client(mock_db, use_db, monkeypatch):
    use_db(mock_db)
    monkeypatch.setattr(deps, "AUTH_DISABLED", False)
    monkeypatch.setattr(deps, "decode_token", fake_decode_token)

    transport = httpx.ASGITransport(app=main.app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
