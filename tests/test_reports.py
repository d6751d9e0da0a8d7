from datetime import date, timedelta

import pytest

from conftest import MEALS, SOFTWARE, TRAVEL

from app.utils.calculations import month_bounds


def seed_expenses(client, employee_headers, manager_headers, other, submit):
    submit(employee_headers, category_id=TRAVEL, amount=100.10)
    submit(employee_headers, category_id=TRAVEL, amount=0.20)
    rejected = submit(employee_headers, category_id=MEALS, amount=30.0)
    approved = submit(other, category_id=SOFTWARE, amount=500.0)
    client.post(f"/expenses/{approved['id']}/approve", headers=manager_headers)
    client.post(f"/expenses/{rejected['id']}/reject", headers=manager_headers, json={"reason": "No"})


def test_summary_by_category_for_employee(client, employee_headers, manager_headers, register, submit):
    other = register("other@example.com")
    seed_expenses(client, employee_headers, manager_headers, other, submit)

    body = client.get("/reports/summary", headers=employee_headers).json()
    assert [item["category"] for item in body["items"]] == ["Travel", "Meals"]
    assert body["items"][0]["count"] == 2
    assert body["items"][0]["total"] == pytest.approx(100.30)
    assert body["grand_total"] == sum(item["total"] for item in body["items"])


def test_summary_by_category_for_manager(client, employee_headers, manager_headers, register, submit):
    other = register("other@example.com")
    seed_expenses(client, employee_headers, manager_headers, other, submit)

    body = client.get("/reports/summary", headers=manager_headers).json()
    assert [item["category"] for item in body["items"]] == ["Software", "Travel", "Meals"]
    totals = [item["total"] for item in body["items"]]
    assert totals == sorted(totals, reverse=True)


def test_summary_by_user_is_manager_only(client, employee_headers, manager_headers, register, submit):
    other = register("other@example.com", name="Other Person")
    seed_expenses(client, employee_headers, manager_headers, other, submit)

    res = client.get("/reports/by-user", headers=employee_headers)
    assert res.status_code == 403

    body = client.get("/reports/by-user", headers=manager_headers).json()
    assert [item["user"] for item in body["items"]] == ["Other Person", "Employee User"]
    assert body["items"][0]["email"] == "other@example.com"
    assert body["items"][1]["count"] == 3


def test_summary_by_status(client, employee_headers, manager_headers, register, submit):
    other = register("other@example.com")
    seed_expenses(client, employee_headers, manager_headers, other, submit)

    mine = client.get("/reports/by-status", headers=employee_headers).json()
    assert {item["status"]: item["count"] for item in mine["items"]} == {"pending": 2, "rejected": 1}

    everyone = client.get("/reports/by-status", headers=manager_headers).json()
    assert [item["status"] for item in everyone["items"]] == ["approved", "pending", "rejected"]
    assert everyone["grand_total"] == sum(item["total"] for item in everyone["items"])


def test_default_window_is_current_month(client, employee_headers):
    first, last = month_bounds(date.today())
    body = client.get("/reports/summary", headers=employee_headers).json()
    assert body["from_date"] == first.isoformat()
    assert body["to_date"] == last.isoformat()
    assert body["items"] == []
    assert body["grand_total"] == 0


def test_window_is_inclusive(client, employee_headers, submit):
    today = date.today()
    long_ago = today - timedelta(days=90)
    submit(employee_headers, amount=12.0, receipt_date=long_ago)
    submit(employee_headers, amount=8.0)

    window = f"from_date={long_ago.isoformat()}&to_date={long_ago.isoformat()}"
    body = client.get(f"/reports/summary?{window}", headers=employee_headers).json()
    assert body["grand_total"] == 12.0
    assert body["from_date"] == long_ago.isoformat()
