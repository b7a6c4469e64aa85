from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from legal_office.main import app

client = TestClient(app)


@pytest.fixture
def client_id(lawyer_headers):
    response = client.post("/api/clients", json={"name": "Nile Trading", "type": "company"}, headers=lawyer_headers)
    return response.json()["data"]["id"]


def create_invoice(headers, **payload):
    response = client.post("/api/invoices", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_amount_is_the_sum_of_items(lawyer_headers, client_id):
    invoice = create_invoice(
        lawyer_headers,
        client_id=client_id,
        date="2030-01-01",
        due_date="2030-01-31",
        amount=1,
        items=[{"description": "Consultation", "amount": 500}, {"description": "Court fees", "amount": 250.5}],
    )
    assert invoice["amount"] == 750.5
    assert invoice["status"] == "unpaid"
    assert sorted(item["description"] for item in invoice["items"]) == ["Consultation", "Court fees"]
    assert invoice["client"] == {"id": client_id, "name": "Nile Trading"}


def test_numbers_follow_the_invoice_year(lawyer_headers, client_id):
    first = create_invoice(lawyer_headers, client_id=client_id, date="2030-01-01", due_date="2030-01-31", amount=10)
    second = create_invoice(lawyer_headers, client_id=client_id, date="2030-02-01", due_date="2030-02-28", amount=10)
    other_year = create_invoice(lawyer_headers, client_id=client_id, date="2031-01-01", due_date="2031-01-31",
                                amount=10)

    assert first["number"] == "INV-2030-001"
    assert second["number"] == "INV-2030-002"
    assert other_year["number"] == "INV-2031-001"


def test_deleted_numbers_are_not_reused(lawyer_headers, client_id):
    create_invoice(lawyer_headers, client_id=client_id, date="2030-01-01", due_date="2030-01-31", amount=10)
    second = create_invoice(lawyer_headers, client_id=client_id, date="2030-01-01", due_date="2030-01-31", amount=10)
    third = create_invoice(lawyer_headers, client_id=client_id, date="2030-01-01", due_date="2030-01-31", amount=10)
    client.delete(f"/api/invoices/{second['id']}", headers=lawyer_headers)

    fourth = create_invoice(lawyer_headers, client_id=client_id, date="2030-01-01", due_date="2030-01-31", amount=10)
    assert third["number"] == "INV-2030-003"
    assert fourth["number"] == "INV-2030-004"


def test_concurrent_creates_get_distinct_numbers(lawyer_headers, client_id):
    payload = {"client_id": client_id, "date": "2030-03-01", "due_date": "2030-03-31", "amount": 10}

    with ThreadPoolExecutor(max_workers=6) as pool:
        responses = list(pool.map(
            lambda _: client.post("/api/invoices", json=payload, headers=lawyer_headers), range(12)
        ))

    assert [r.status_code for r in responses] == [201] * 12
    numbers = sorted(r.json()["data"]["number"] for r in responses)
    assert numbers == [f"INV-2030-{seq:03d}" for seq in range(1, 13)]


def test_invalid_invoices_are_rejected(lawyer_headers, client_id):
    no_amount = client.post("/api/invoices", json={"client_id": client_id, "due_date": "2030-01-31"},
                            headers=lawyer_headers)
    assert no_amount.status_code == 422

    backwards = client.post("/api/invoices", json={
        "client_id": client_id, "date": "2030-02-01", "due_date": "2030-01-01", "amount": 10,
    }, headers=lawyer_headers)
    assert backwards.status_code == 422

    negative = client.post("/api/invoices", json={
        "client_id": client_id, "due_date": "2099-01-01", "items": [{"description": "Refund", "amount": -5}],
    }, headers=lawyer_headers)
    assert negative.status_code == 422


def test_client_must_belong_to_the_lawyer(other_headers, client_id):
    response = client.post("/api/invoices", json={
        "client_id": client_id, "date": "2030-01-01", "due_date": "2030-01-31", "amount": 10,
    }, headers=other_headers)
    assert response.status_code == 422


def test_update_replaces_items(lawyer_headers, client_id):
    invoice = create_invoice(
        lawyer_headers, client_id=client_id, date="2030-01-01", due_date="2030-01-31",
        items=[{"description": "Consultation", "amount": 500}],
    )

    response = client.put(f"/api/invoices/{invoice['id']}", json={
        "items": [{"description": "Drafting", "amount": 200}, {"description": "Filing", "amount": 50}],
    }, headers=lawyer_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["amount"] == 250
    assert sorted(item["description"] for item in data["items"]) == ["Drafting", "Filing"]
    assert data["number"] == invoice["number"]


def test_removing_all_items_requires_an_amount(lawyer_headers, client_id):
    invoice = create_invoice(
        lawyer_headers, client_id=client_id, date="2030-01-01", due_date="2030-01-31",
        items=[{"description": "Consultation", "amount": 5}],
    )
    url = f"/api/invoices/{invoice['id']}"

    response = client.put(url, json={"items": []}, headers=lawyer_headers)
    assert response.status_code == 422
    assert len(client.get(url, headers=lawyer_headers).json()["data"]["items"]) == 1

    response = client.put(url, json={"items": [], "amount": 80}, headers=lawyer_headers)
    assert response.status_code == 200
    assert response.json()["data"]["items"] == []
    assert response.json()["data"]["amount"] == 80


def test_update_status_and_dates(lawyer_headers, client_id):
    invoice = create_invoice(lawyer_headers, client_id=client_id, date="2030-01-01", due_date="2030-01-31",
                             amount=100)

    paid = client.put(f"/api/invoices/{invoice['id']}", json={"status": "paid", "due_date": "2030-03-01"},
                      headers=lawyer_headers)
    assert paid.status_code == 200
    assert paid.json()["data"]["status"] == "paid"
    assert paid.json()["data"]["due_date"] == "2030-03-01"
    assert paid.json()["data"]["amount"] == 100

    backwards = client.put(f"/api/invoices/{invoice['id']}", json={"due_date": "2029-12-01"},
                           headers=lawyer_headers)
    assert backwards.status_code == 422
    unchanged = client.get(f"/api/invoices/{invoice['id']}", headers=lawyer_headers).json()["data"]
    assert unchanged["due_date"] == "2030-03-01"


def test_list_filters_by_status(lawyer_headers, client_id):
    create_invoice(lawyer_headers, client_id=client_id, date="2030-01-01", due_date="2030-01-31", amount=10)
    paid = create_invoice(lawyer_headers, client_id=client_id, date="2030-01-01", due_date="2030-01-31",
                          amount=10, status="paid")

    response = client.get("/api/invoices", params={"status": "paid"}, headers=lawyer_headers)
    assert [i["id"] for i in response.json()["data"]] == [paid["id"]]


def test_mark_overdue_only_touches_past_unpaid_invoices(lawyer_headers, other_headers, client_id):
    today = date.today()
    past = (today - timedelta(days=30)).isoformat()
    due_yesterday = (today - timedelta(days=1)).isoformat()
    due_next_week = (today + timedelta(days=7)).isoformat()

    late = create_invoice(lawyer_headers, client_id=client_id, date=past, due_date=due_yesterday, amount=10)
    paid = create_invoice(lawyer_headers, client_id=client_id, date=past, due_date=due_yesterday, amount=10,
                          status="paid")
    current = create_invoice(lawyer_headers, client_id=client_id, date=past, due_date=due_next_week, amount=10)

    # Another lawyer's call does not reach these invoices
    assert client.post("/api/invoices/mark-overdue", headers=other_headers).json()["data"] == {"updated": 0}

    response = client.post("/api/invoices/mark-overdue", headers=lawyer_headers)
    assert response.json()["data"] == {"updated": 1}

    statuses = {
        i["id"]: i["status"] for i in client.get("/api/invoices", headers=lawyer_headers).json()["data"]
    }
    assert statuses == {late["id"]: "overdue", paid["id"]: "paid", current["id"]: "unpaid"}


def test_delete_invoice(lawyer_headers, other_headers, client_id):
    invoice = create_invoice(lawyer_headers, client_id=client_id, date="2030-01-01", due_date="2030-01-31",
                             items=[{"description": "Consultation", "amount": 500}])

    assert client.delete(f"/api/invoices/{invoice['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/invoices/{invoice['id']}", headers=lawyer_headers).status_code == 200
    assert client.get(f"/api/invoices/{invoice['id']}", headers=lawyer_headers).status_code == 404
