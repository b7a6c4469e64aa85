from datetime import datetime, timedelta

from fastapi.testclient import TestClient

from legal_office.main import app

client = TestClient(app)


def create_appointment(headers, **overrides):
    payload = {"title": "Client meeting", "type": "meeting", "date": "2030-05-01T10:00:00", "location": "Office"}
    payload.update(overrides)
    response = client.post("/api/appointments", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_list_is_ordered_by_date(lawyer_headers):
    create_appointment(lawyer_headers, title="Later", date="2030-06-01T10:00:00")
    create_appointment(lawyer_headers, title="Sooner", date="2030-04-01T10:00:00")
    create_appointment(lawyer_headers, title="Middle", date="2030-05-01T10:00:00")

    response = client.get("/api/appointments", headers=lawyer_headers)
    assert [a["title"] for a in response.json()["data"]] == ["Sooner", "Middle", "Later"]


def test_dates_with_offsets_are_stored_in_utc(lawyer_headers):
    created = create_appointment(lawyer_headers, date="2030-05-01T12:00:00+02:00")
    assert created["date"] == "2030-05-01T10:00:00"


def test_date_range_and_type_filters(lawyer_headers):
    create_appointment(lawyer_headers, title="April", date="2030-04-15T10:00:00")
    create_appointment(lawyer_headers, title="May hearing", type="court", date="2030-05-15T10:00:00")
    create_appointment(lawyer_headers, title="June", date="2030-06-15T10:00:00")

    response = client.get("/api/appointments", params={"from": "2030-05-01T00:00:00", "to": "2030-06-30T00:00:00"},
                          headers=lawyer_headers)
    assert [a["title"] for a in response.json()["data"]] == ["May hearing", "June"]

    response = client.get("/api/appointments", params={"type": "court"}, headers=lawyer_headers)
    assert [a["title"] for a in response.json()["data"]] == ["May hearing"]


def test_upcoming_returns_the_next_days_only(lawyer_headers):
    now = datetime.utcnow()
    create_appointment(lawyer_headers, title="Tomorrow", date=(now + timedelta(days=1)).isoformat())
    create_appointment(lawyer_headers, title="Next month", date=(now + timedelta(days=30)).isoformat())
    create_appointment(lawyer_headers, title="Yesterday", date=(now - timedelta(days=1)).isoformat())

    response = client.get("/api/appointments/upcoming", headers=lawyer_headers)
    assert [a["title"] for a in response.json()["data"]] == ["Tomorrow"]

    response = client.get("/api/appointments/upcoming", params={"days": 60}, headers=lawyer_headers)
    assert [a["title"] for a in response.json()["data"]] == ["Tomorrow", "Next month"]


def test_type_must_be_known(lawyer_headers):
    response = client.post("/api/appointments", json={
        "title": "Party", "type": "party", "date": "2030-05-01T10:00:00",
    }, headers=lawyer_headers)
    assert response.status_code == 422


def test_update_and_delete(lawyer_headers, other_headers):
    created = create_appointment(lawyer_headers)

    response = client.put(f"/api/appointments/{created['id']}", json={"date": "2030-05-02T11:30:00"},
                          headers=lawyer_headers)
    assert response.status_code == 200
    assert response.json()["data"]["date"] == "2030-05-02T11:30:00"
    assert response.json()["data"]["title"] == "Client meeting"

    assert client.delete(f"/api/appointments/{created['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/appointments/{created['id']}", headers=lawyer_headers).status_code == 200
    assert client.get(f"/api/appointments/{created['id']}", headers=lawyer_headers).status_code == 404


def test_case_reference_must_belong_to_the_lawyer(lawyer_headers, other_headers):
    foreign_case = client.post("/api/cases", json={"title": "T", "type": "civil", "court": "C"},
                               headers=other_headers).json()["data"]

    response = client.post("/api/appointments", json={
        "title": "Hearing", "type": "court", "date": "2030-05-01T10:00:00", "case_id": foreign_case["id"],
    }, headers=lawyer_headers)
    assert response.status_code == 422


def test_explicit_null_unlinks_case_and_client(lawyer_headers):
    case = client.post("/api/cases", json={"title": "T", "type": "civil", "court": "C"},
                       headers=lawyer_headers).json()["data"]
    created = create_appointment(lawyer_headers, case_id=case["id"])

    response = client.put(f"/api/appointments/{created['id']}", json={"case_id": None, "client_id": None},
                          headers=lawyer_headers)
    assert response.status_code == 200
    assert response.json()["data"]["case_id"] is None
    assert response.json()["data"]["title"] == "Client meeting"
