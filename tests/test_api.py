from datetime import datetime

from services.signing import keys_for, sign


def _instant(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _verify_params(attendee, day):
    return {"uid": attendee.uid, "day": day, "sig": sign(attendee.uid, day, keys_for(attendee.qr_secret))}


# ---------------------------------------------------------------------------
# /api/verify
# ---------------------------------------------------------------------------

def test_verify_then_replay(client, make_attendee):
    attendee = make_attendee(uid="A1B2C3", name="Ada")
    params = _verify_params(attendee, 2)

    resp = client.post("/api/verify", params=params, json={"scanned_by": "gate-1"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["attendee_name"] == "Ada"
    assert body["day"] == 2
    assert "X-Latency-Ms" in resp.headers

    replay = client.post("/api/verify", params=params)
    assert replay.status_code == 409
    err = replay.json()
    assert err["success"] is False
    assert err["error"]["code"] == "ALREADY_SCANNED"
    assert err["reason"] == err["error"]["message"]
    assert _instant(err["first_scan_time"]) == _instant(body["scan_time"])


def test_verify_rejections(client, make_attendee):
    attendee = make_attendee(uid="A1B2C3")

    future = client.post("/api/verify", params=_verify_params(attendee, 3))
    assert future.status_code == 400
    assert future.json()["error"]["code"] == "DAY_NOT_OPEN"

    forged = dict(_verify_params(attendee, 2), sig="0" * 64)
    resp = client.post("/api/verify", params=forged)
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_SIGNATURE"

    stranger = dict(_verify_params(attendee, 2), uid="NOBODY")
    resp = client.post("/api/verify", params=stranger)
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "UNREGISTERED"

    missing = client.post("/api/verify", params={"uid": "A1B2C3"})
    assert missing.status_code == 400
    assert missing.json()["error"]["message"] == "Missing required parameters"


def test_verify_non_numeric_day_is_malformed(client):
    resp = client.post("/api/verify", params={"uid": "A1B2C3", "day": "two", "sig": "abc"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"]["code"] == "MALFORMED_REQUEST"
    assert body["fields"][0]["field"] == "day"


def test_verify_rate_limit(client, clock, make_attendee):
    attendee = make_attendee(uid="A1B2C3")
    headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}

    for _ in range(10):
        assert client.post("/api/verify", params={"uid": "A1B2C3"}, headers=headers).status_code == 400

    limited = client.post("/api/verify", params=_verify_params(attendee, 2), headers=headers)
    assert limited.status_code == 429
    assert limited.json()["error"]["code"] == "RATE_LIMITED"
    assert limited.headers["Retry-After"] == "60"

    # another client is unaffected
    other = client.post("/api/verify", params={"uid": "A1B2C3"}, headers={"X-Forwarded-For": "198.51.100.2"})
    assert other.status_code == 400

    clock.advance(61)
    assert client.post("/api/verify", params=_verify_params(attendee, 2), headers=headers).status_code == 200


# ---------------------------------------------------------------------------
# /api/token-check
# ---------------------------------------------------------------------------

def test_token_check_flow(client, make_attendee):
    make_attendee(name="Grace", phone="08031234567")

    first = client.post("/api/token-check", json={"token": "venue-day-two"})
    assert first.status_code == 200
    assert first.json()["requires_phone"] is True
    assert first.json()["day"] == 2

    second = client.post("/api/token-check", json={"token": "venue-day-two", "phone": "08031234567"})
    assert second.status_code == 200
    assert second.json()["attendee_name"] == "Grace"
    assert second.json()["requires_phone"] is False

    again = client.post("/api/token-check", json={"token": "venue-day-two", "phone": "08031234567"})
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "ALREADY_SCANNED"


def test_token_check_errors(client):
    assert client.post("/api/token-check", json={}).json()["error"]["message"] == "Missing QR token"

    bad = client.post("/api/token-check", json={"token": "nope"})
    assert bad.status_code == 400
    assert bad.json()["error"]["code"] == "INVALID_DAY_TOKEN"

    # DAY4_TOKEN is unset in the test environment
    assert client.post("/api/token-check", json={"token": ""}).status_code == 400

    early = client.post("/api/token-check", json={"token": "venue-day-three", "phone": "08031234567"})
    assert early.json()["error"]["code"] == "DAY_NOT_OPEN"


# ---------------------------------------------------------------------------
# registration / retrieval / confirmation
# ---------------------------------------------------------------------------

def test_register_retrieve_confirm(client):
    resp = client.post("/api/register", json={"name": "Ada", "phone": "0803 123 4567"})
    assert resp.status_code == 201
    body = resp.json()
    assert sorted(body["qr_urls"]) == ["day1", "day2", "day3", "day4"]
    assert "qr_secret" not in body["attendee"]
    uid = body["uid"]

    dup = client.post("/api/register", json={"name": "Eve", "phone": "08031234567"})
    assert dup.status_code == 409
    assert dup.json()["error"]["code"] == "DUPLICATE_PHONE"

    retrieved = client.get("/api/attendees/retrieve", params={"phone": "08031234567"})
    assert retrieved.status_code == 200
    assert retrieved.json()["uid"] == uid
    assert retrieved.json()["qr_urls"] == body["qr_urls"]

    day2_url = body["qr_urls"]["day2"]
    query = day2_url.split("?", 1)[1]
    assert client.post(f"/api/verify?{query}").status_code == 200

    confirm = client.get("/api/attendance/confirm", params={"phone": "08031234567"})
    assert confirm.status_code == 200
    attendance = confirm.json()["attendance"]
    assert attendance["day1"] is None
    assert attendance["day2"]["status"] == "present"


def test_register_validation(client):
    resp = client.post("/api/register", json={"name": "Ada"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "MALFORMED_REQUEST"


def test_retrieve_unknown_phone(client):
    resp = client.get("/api/attendees/retrieve", params={"phone": "08000000000"})
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


# ---------------------------------------------------------------------------
# admin
# ---------------------------------------------------------------------------

def test_admin_endpoints_require_code(client):
    for path in ("/api/attendees", "/api/attendance/summary", "/api/admin/day-links"):
        assert client.get(path).status_code == 401
        assert client.get(path, headers={"X-Admin-Code": "wrong"}).status_code == 401


def test_bearer_admin_code_is_accepted(client):
    resp = client.get("/api/attendance/summary", headers={"Authorization": "Bearer admin-code"})
    assert resp.status_code == 200


def test_admin_list_filtered_by_days(client, admin_headers, make_attendee, mark_present):
    alice = make_attendee(name="Alice")
    bob = make_attendee(name="Bob")
    cara = make_attendee(name="Cara")
    mark_present(alice, 1, 3)
    mark_present(bob, 1)
    mark_present(cara, 1, 3)

    resp = client.get("/api/attendees", params={"days": "1,3", "limit": 1}, headers=admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["pagination"] == {"page": 1, "limit": 1, "total": 2, "total_pages": 2}
    [row] = body["attendees"]
    assert row["name"] == "Cara"
    assert row["attendance"] == {"day1": True, "day2": False, "day3": True, "day4": False}

    everyone = client.get("/api/attendees", headers=admin_headers).json()
    assert everyone["pagination"]["total"] == 3

    searched = client.get(
        "/api/attendees", params={"days": "1,3", "search": "ali"}, headers=admin_headers
    ).json()
    assert [row["name"] for row in searched["attendees"]] == ["Alice"]
    assert searched["pagination"]["total"] == 1
    assert searched["pagination"]["total_pages"] == 1

    outside = client.get(
        "/api/attendees", params={"days": "1,3", "search": "bob"}, headers=admin_headers
    ).json()
    assert outside["attendees"] == [] and outside["pagination"]["total"] == 0

    nobody = client.get("/api/attendees", params={"days": "2"}, headers=admin_headers).json()
    assert nobody["attendees"] == []
    assert nobody["pagination"]["total_pages"] == 0


def test_report_and_summary(client, admin_headers, make_attendee, mark_present):
    alice = make_attendee(name="Alice")
    bob = make_attendee(name="Bob")
    mark_present(alice, 1, 2)
    mark_present(bob, 2)

    report = client.get("/api/attendance/report", params={"days": "2"}, headers=admin_headers).json()
    assert report["days"] == [2]
    assert report["count"] == 2
    assert [a["name"] for a in report["attendees"]] == ["Alice", "Bob"]

    bad = client.get("/api/attendance/report", params={"days": "9"}, headers=admin_headers)
    assert bad.status_code == 400

    summary = client.get("/api/attendance/summary", headers=admin_headers).json()["summary"]
    assert summary == {"total_registered": 2, "day1_count": 1, "day2_count": 2, "day3_count": 0, "day4_count": 0}


def test_mark_collected(client, admin_headers, make_attendee):
    attendee = make_attendee()

    resp = client.post(
        "/api/attendees/mark-collected",
        json={"attendee_id": attendee.id, "collected": True},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["attendee"]["voucher_collected"] is True

    missing = client.post(
        "/api/attendees/mark-collected",
        json={"attendee_id": 999, "collected": True},
        headers=admin_headers,
    )
    assert missing.status_code == 404


def test_day_links(client, admin_headers):
    body = client.get("/api/admin/day-links", headers=admin_headers).json()
    assert body["missing"] == ["DAY4_TOKEN"]
    assert body["day_tokens"][1] == {"day": 2, "has_token": True, "env_key": "DAY2_TOKEN", "token": "venue-day-two"}


def test_auth(client):
    assert client.post("/api/auth", json={"code": "admin-code"}).json() == {"success": True}
    assert client.post("/api/auth", json={"code": "nope"}).status_code == 401
    assert client.post("/api/auth", json={"code": ""}).status_code == 400


# ---------------------------------------------------------------------------
# public metadata
# ---------------------------------------------------------------------------

def test_program_calendar(client):
    data = client.get("/api/program").json()["data"]
    assert data["current_day"] == 2
    assert data["past_days"] == [1, 2]
    assert [d["open"] for d in data["days"]] == [True, True, False, False]
    assert data["confirmation_window"] == "4:00 PM - 9:00 PM"


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
    meta = client.get("/api/meta/health").json()
    assert meta["status"] == "ok"
    assert meta["qr_storage"] is False
    assert meta["missing_day_tokens"] == ["DAY4_TOKEN"]
    limits = client.get("/api/meta/limits").json()
    assert limits["verify_rate_limit"] == {"max_requests": 10, "window_seconds": 60}
