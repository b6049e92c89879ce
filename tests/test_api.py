from __future__ import annotations

import pytest

from punchclock.main import create_app


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(
        settings_overrides={
            "DATABASE_URL": f"sqlite:///{tmp_path / 'api.sqlite'}",
            "AUTO_INIT_DB": True,
            "LOG_LEVEL": "WARNING",
        }
    )
    with app.test_client() as c:
        yield c
    app.extensions["punchclock"].conn.dispose()


def test_add_and_read_day(client):
    resp = client.post("/api/days/2025-01-02/punches", json={"start": "09:00", "end": "17:00"})
    assert resp.status_code == 201
    assert resp.get_json()["day"] == {
        "date": "2025-01-02",
        "position": "O",
        "start": "09:00",
        "end": "17:00",
        "lunch": 0,
    }

    body = client.get("/api/days/2025-01-02").get_json()
    summary = body["summary"]
    assert summary["expected_minutes"] == 510
    assert summary["worked_minutes"] == 480
    assert summary["surplus_minutes"] == -30
    assert summary["surplus"] == "-00:30"
    assert summary["expected_exit"] == "2025-01-02 17:30"
    assert [p["pair"] for p in summary["events"]] == [1, 1]
    assert len(summary["pairs"]) == 1
    assert summary["position_label"] == "Office"


def test_empty_day_is_404(client):
    resp = client.get("/api/days/2025-01-03")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


@pytest.mark.parametrize(
    "url, payload",
    [
        ("/api/days/2025-13-01/punches", {"start": "09:00"}),
        ("/api/days/2025-01-02/punches", {"start": "9am"}),
        ("/api/days/2025-01-02/punches", {"start": "09:00", "position": "M"}),
        ("/api/days/2025-01-02/punches", {"start": "09:00", "position": "Z"}),
        ("/api/days/2025-01-02/punches", {"end": "17:00"}),
        ("/api/days/2025-01-02/punches", {"start": "09:00", "lunch": -5}),
    ],
)
def test_invalid_input_is_400(client, url, payload):
    resp = client.post(url, json=payload)

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_edit_and_delete_pair(client):
    client.post("/api/days/2025-01-02/punches", json={"start": "09:00", "position": "R"})

    resp = client.patch("/api/days/2025-01-02/pairs/1", json={"end": "17:00", "lunch": 45})
    assert resp.status_code == 200
    assert resp.get_json()["day"]["position"] == "R"
    assert resp.get_json()["day"]["lunch"] == 45

    assert client.patch("/api/days/2025-01-02/pairs/2", json={"end": "18:00"}).status_code == 400

    resp = client.delete("/api/days/2025-01-02/pairs/1")
    assert resp.status_code == 200
    assert resp.get_json()["day"] is None
    assert client.delete("/api/days/2025-01-02").status_code == 404


def test_list_days_with_totals(client):
    client.post("/api/days/2025-01-02/punches", json={"start": "09:00", "end": "17:00"})
    client.post("/api/days/2025-01-03/punches", json={"start": "09:00", "end": "18:00", "position": "R"})

    body = client.get("/api/days?range=2025-01").get_json()
    assert [d["date"] for d in body["days"]] == ["2025-01-02", "2025-01-03"]
    assert body["totals"]["surplus_minutes"] == 0

    remote = client.get("/api/days?range=2025-01-01:2025-01-31&position=R").get_json()
    assert [d["date"] for d in remote["days"]] == ["2025-01-03"]

    assert client.get("/api/days?range=2025-1").status_code == 400


def test_log_lists_mutations(client):
    client.post("/api/days/2025-01-02/punches", json={"start": "09:00"})
    client.delete("/api/days/2025-01-02")

    entries = client.get("/api/log").get_json()["entries"]

    assert [e["operation"] for e in entries] == ["del", "add"]


def test_export_csv_and_json(client):
    client.post("/api/days/2025-01-02/punches", json={"start": "09:00", "end": "17:00"})

    resp = client.get("/api/export?format=csv&range=2025-01&kind=events")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    lines = resp.data.decode("utf-8-sig").splitlines()
    assert lines[0] == "date,time,kind,position,lunch,pair,unmatched,source,meta"
    assert len(lines) == 3

    resp = client.get("/api/export?format=json&range=2025&kind=days")
    assert resp.mimetype == "application/json"
    assert resp.get_json()[0]["surplus"] == "-00:30"

    assert client.get("/api/export?format=pdf&range=2025").status_code == 400
