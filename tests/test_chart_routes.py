# tests/test_chart_routes.py
from datetime import date

import pytest

from bkchart.models.daily_record import DailyRecord
from bkchart.routes import chart_routes

TODAY = date(2024, 3, 15)


@pytest.fixture(autouse=True)
def fixed_today(monkeypatch):
    monkeypatch.setattr(chart_routes, "chart_today", lambda: TODAY)


def test_points_are_listed_in_catalog_order(client, make_point):
    make_point("second", 2)
    make_point("first", 1)

    resp = client.get("/api/points")

    assert resp.status_code == 200
    assert [p["text"] for p in resp.get_json()["points"]] == ["first", "second"]


def test_record_and_read_back_daily(client, member, points, member_headers):
    resp = client.post(
        f"/api/members/{member.id}/daily",
        json={"date": "2024-03-15", "pointId": points[1].id, "effort": 80},
        headers=member_headers,
    )
    assert resp.status_code == 200
    assert resp.get_json()["record"]["effort"] == 80

    resp = client.get(f"/api/members/{member.id}/daily/2024-03-15", headers=member_headers)
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["efforts"] == {str(points[0].id): 0, str(points[1].id): 80, str(points[2].id): 0}
    assert [e["point_id"] for e in body["entries"]] == [p.id for p in points]


def test_second_report_overwrites(client, member, points, member_headers):
    url = f"/api/members/{member.id}/daily"
    client.post(url, json={"date": "2024-03-15", "pointId": points[0].id, "effort": 40}, headers=member_headers)
    client.post(url, json={"date": "2024-03-15", "pointId": points[0].id, "effort": 90}, headers=member_headers)

    body = client.get(f"/api/members/{member.id}/daily/2024-03-15", headers=member_headers).get_json()
    assert body["efforts"][str(points[0].id)] == 90


def test_completed_flag_is_stored_as_100(client, member, points, member_headers):
    resp = client.post(
        f"/api/members/{member.id}/daily",
        json={"pointId": points[0].id, "completed": True},
        headers=member_headers,
    )
    record = resp.get_json()["record"]

    assert record["effort"] == 100
    # no date in the body means today
    assert record["date"] == "2024-03-15"


def test_unknown_point_is_a_bad_request(client, member, points, member_headers):
    resp = client.post(
        f"/api/members/{member.id}/daily",
        json={"date": "2024-03-15", "pointId": 9999, "effort": 50},
        headers=member_headers,
    )
    assert resp.status_code == 400


@pytest.mark.parametrize(
    "payload",
    [
        {"date": "15/03/2024", "pointId": 1, "effort": 50},
        {"date": "2024-03-15", "pointId": "abc", "effort": 50},
        {"date": "2024-03-15", "pointId": 1},
        {"date": "2024-03-15", "pointId": 1, "effort": "lots"},
    ],
)
def test_invalid_daily_payloads(client, member, points, member_headers, payload):
    resp = client.post(f"/api/members/{member.id}/daily", json=payload, headers=member_headers)
    assert resp.status_code == 400


def test_invalid_daily_date_in_path(client, member, member_headers):
    resp = client.get(f"/api/members/{member.id}/daily/yesterday", headers=member_headers)
    assert resp.status_code == 400


@pytest.mark.parametrize("day", ["2024-03-15garbage", "2024-02-30", "2024-3-15x"])
def test_daily_date_in_path_must_be_exact(client, member, member_headers, day):
    resp = client.get(f"/api/members/{member.id}/daily/{day}", headers=member_headers)
    assert resp.status_code == 400


def test_daily_date_in_body_must_be_exact(client, member, points, member_headers):
    resp = client.post(
        f"/api/members/{member.id}/daily",
        json={"date": "2024-03-15garbage", "pointId": points[0].id, "effort": 50},
        headers=member_headers,
    )
    assert resp.status_code == 400
    assert DailyRecord.query.count() == 0


@pytest.mark.parametrize("raw_effort", ["Infinity", "-Infinity", "NaN", "80.9", str(10 ** 20), "1e300"])
def test_unstorable_effort_is_a_bad_request(client, member, points, member_headers, raw_effort):
    body = f'{{"date": "2024-03-15", "pointId": {points[0].id}, "effort": {raw_effort}}}'
    resp = client.post(
        f"/api/members/{member.id}/daily",
        data=body,
        content_type="application/json",
        headers=member_headers,
    )

    assert resp.status_code == 400
    assert "effort" in resp.get_json()["message"]
    assert DailyRecord.query.count() == 0


def test_integral_float_effort_is_accepted(client, member, points, member_headers):
    resp = client.post(
        f"/api/members/{member.id}/daily",
        json={"date": "2024-03-15", "pointId": points[0].id, "effort": 80.0},
        headers=member_headers,
    )

    assert resp.status_code == 200
    assert resp.get_json()["record"]["effort"] == 80


def test_effort_outside_percent_scale_is_still_stored(client, member, points, member_headers):
    resp = client.post(
        f"/api/members/{member.id}/daily",
        json={"date": "2024-03-15", "pointId": points[0].id, "effort": 150},
        headers=member_headers,
    )

    assert resp.status_code == 200
    assert resp.get_json()["record"]["effort"] == 150


@pytest.mark.parametrize("raw_point", [str(10 ** 20), "Infinity", "2.5", "-1"])
def test_unstorable_point_id_is_a_bad_request(client, member, points, member_headers, raw_point):
    body = f'{{"date": "2024-03-15", "pointId": {raw_point}, "effort": 50}}'
    resp = client.post(
        f"/api/members/{member.id}/daily",
        data=body,
        content_type="application/json",
        headers=member_headers,
    )

    assert resp.status_code == 400
    assert DailyRecord.query.count() == 0


def test_progress_endpoint(client, member, points, member_headers):
    url = f"/api/members/{member.id}/daily"
    client.post(url, json={"date": "2024-03-14", "pointId": points[0].id, "effort": 20}, headers=member_headers)
    client.post(url, json={"date": "2024-03-15", "pointId": points[0].id, "effort": 80}, headers=member_headers)
    client.post(url, json={"date": "2024-03-08", "pointId": points[1].id, "effort": 100}, headers=member_headers)

    resp = client.get(f"/api/members/{member.id}/progress/weekly", headers=member_headers)
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["period"] == "weekly"
    assert body["start"] == "2024-03-09"
    assert body["end"] == "2024-03-15"
    assert [row["percentage"] for row in body["progress"]] == [pytest.approx(50), 0, 0]


def test_progress_unknown_period_uses_daily(client, member, points, member_headers):
    resp = client.get(f"/api/members/{member.id}/progress/decade", headers=member_headers)
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["period"] == "daily"
    assert body["start"] == body["end"] == "2024-03-15"
    assert len(body["progress"]) == len(points)


def test_chart_requires_token(client, member):
    resp = client.get(f"/api/members/{member.id}/progress/weekly")
    assert resp.status_code == 401


def test_member_cannot_read_another_members_chart(client, make_member, member_headers, points):
    other = make_member(mobile="9000000099", name="Other")

    assert client.get(f"/api/members/{other.id}/progress/daily", headers=member_headers).status_code == 403
    resp = client.post(
        f"/api/members/{other.id}/daily",
        json={"pointId": points[0].id, "effort": 10},
        headers=member_headers,
    )
    assert resp.status_code == 403


def test_admin_can_read_any_members_progress(client, member, points, admin_headers):
    resp = client.get(f"/api/members/{member.id}/progress/monthly", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["start"] == "2024-03-01"
