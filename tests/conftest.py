import os
from datetime import datetime, timedelta, timezone

import pytest

# Program calendar relative to the real date: day 1 = yesterday, day 2 = today,
# days 3 and 4 are still in the future.
TODAY = datetime.now(timezone.utc).date()
PROGRAM_START = TODAY - timedelta(days=1)

ADMIN_CODE = "admin-code"
SERVER_SECRET = "test-server-secret"
DAY_TOKENS = {1: "venue-day-one", 2: "venue-day-two", 3: "venue-day-three", 4: ""}

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["QR_SIGNATURE_SECRET"] = SERVER_SECRET
os.environ["ADMIN_PASSWORD"] = ADMIN_CODE
os.environ["PROGRAM_START_DATE"] = PROGRAM_START.isoformat()
os.environ["PROGRAM_TIMEZONE"] = "UTC"
os.environ["APP_URL"] = "https://attend.example.org"
os.environ["STORAGE_URL"] = ""
os.environ["RATE_LIMIT_MAX"] = "10"
os.environ["RATE_LIMIT_WINDOW_SECONDS"] = "60"
for _day, _token in DAY_TOKENS.items():
    os.environ[f"DAY{_day}_TOKEN"] = _token

from fastapi.testclient import TestClient

from database.db import Base, SessionLocal, engine
from main import app
from models.attendees import Attendee
from models.attendance_logs import AttendanceLog
from services.rate_limiter import FixedWindowRateLimiter, get_rate_limiter


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return FixedWindowRateLimiter(limit=10, window_seconds=60, clock=clock)


@pytest.fixture
def client(limiter):
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"X-Admin-Code": ADMIN_CODE}


@pytest.fixture
def make_attendee(db):
    counter = {"n": 0}

    def _make(uid=None, name=None, phone=None, qr_secret="attendee-secret-0001", created_at=None):
        counter["n"] += 1
        n = counter["n"]
        attendee = Attendee(
            uid=uid or f"UID{n:04d}",
            name=name or f"Attendee {n}",
            phone=phone or f"0803000{n:04d}",
            qr_secret=qr_secret,
            created_at=created_at or datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=n),
        )
        db.add(attendee)
        db.commit()
        db.refresh(attendee)
        return attendee

    return _make


@pytest.fixture
def mark_present(db):
    def _mark(attendee, *days, scanned_by="seed"):
        for day in days:
            db.add(AttendanceLog(attendee_id=attendee.id, day=day, status="present", scanned_by=scanned_by))
        db.commit()

    return _mark
