from datetime import date

from conftest import TRAVEL


def test_manager_approves(client, employee_headers, manager_headers, submit, users):
    manager, _ = users
    expense = submit(employee_headers, amount=100.50)

    res = client.post(f"/expenses/{expense['id']}/approve", headers=manager_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "approved"
    assert body["reviewed_by"] == manager.id
    assert body["reviewer_name"] == "Manager User"
    assert body["reviewed_at"] is not None
    assert body["rejection_reason"] is None


def test_manager_rejects_with_reason(client, employee_headers, manager_headers, submit, users):
    manager, _ = users
    expense = submit(employee_headers)

    res = client.post(
        f"/expenses/{expense['id']}/reject",
        headers=manager_headers,
        json={"reason": "Missing receipt"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "rejected"
    assert body["rejection_reason"] == "Missing receipt"
    assert body["reviewed_by"] == manager.id
    assert body["reviewed_at"] is not None


def test_reject_requires_reason(client, employee_headers, manager_headers, submit):
    expense = submit(employee_headers)
    res = client.post(f"/expenses/{expense['id']}/reject", headers=manager_headers, json={})
    assert res.status_code == 400
    assert "reason" in res.json()["error"]

    res = client.post(f"/expenses/{expense['id']}/reject", headers=manager_headers, json={"reason": "  "})
    assert res.status_code == 400

    assert client.get(f"/expenses/{expense['id']}", headers=manager_headers).json()["status"] == "pending"


def test_second_review_fails_without_mutating(client, employee_headers, manager_headers, submit, register):
    other_manager = register("second.manager@example.com", role="manager", name="Second Manager")
    expense = submit(employee_headers)
    first = client.post(f"/expenses/{expense['id']}/approve", headers=manager_headers).json()

    for headers in (manager_headers, other_manager):
        res = client.post(f"/expenses/{expense['id']}/approve", headers=headers)
        assert res.status_code == 400
        assert res.json()["error"] == "Expense is not pending"

        res = client.post(f"/expenses/{expense['id']}/reject", headers=headers, json={"reason": "Too late"})
        assert res.status_code == 400
        assert res.json()["error"] == "Expense is not pending"

    after = client.get(f"/expenses/{expense['id']}", headers=manager_headers).json()
    assert after == first


def test_approved_expense_is_immutable(client, employee_headers, manager_headers, submit):
    expense = submit(employee_headers)
    client.post(f"/expenses/{expense['id']}/approve", headers=manager_headers)

    res = client.put(
        f"/expenses/{expense['id']}",
        headers=employee_headers,
        json={
            "category_id": TRAVEL,
            "amount": 200.0,
            "description": "Updated",
            "receipt_date": date.today().isoformat(),
        },
    )
    assert res.status_code == 400
    assert res.json()["error"] == "Cannot modify approved or rejected expenses"

    res = client.delete(f"/expenses/{expense['id']}", headers=employee_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "Cannot delete approved or rejected expenses"


def test_rejected_expense_is_immutable(client, employee_headers, manager_headers, submit):
    expense = submit(employee_headers)
    client.post(f"/expenses/{expense['id']}/reject", headers=manager_headers, json={"reason": "No"})

    res = client.delete(f"/expenses/{expense['id']}", headers=employee_headers)
    assert res.status_code == 400
    res = client.post(f"/expenses/{expense['id']}/approve", headers=manager_headers)
    assert res.status_code == 400


def test_manager_cannot_approve_own_expense(client, manager_headers, submit):
    expense = submit(manager_headers)

    res = client.post(f"/expenses/{expense['id']}/approve", headers=manager_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "Cannot approve your own expenses"

    res = client.post(f"/expenses/{expense['id']}/reject", headers=manager_headers, json={"reason": "x"})
    assert res.status_code == 400
    assert res.json()["error"] == "Cannot reject your own expenses"


def test_self_review_reported_before_state(client, manager_headers, register, submit):
    other_manager = register("peer@example.com", role="manager", name="Peer")
    expense = submit(manager_headers)
    client.post(f"/expenses/{expense['id']}/approve", headers=other_manager)

    # both self-review and not-pending apply: self-review wins
    res = client.post(f"/expenses/{expense['id']}/approve", headers=manager_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "Cannot approve your own expenses"


def test_pending_list(client, employee_headers, manager_headers, submit):
    pending = submit(employee_headers)
    approved = submit(employee_headers)
    client.post(f"/expenses/{approved['id']}/approve", headers=manager_headers)

    res = client.get("/expenses/pending", headers=manager_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["total"] == 1
    assert [e["id"] for e in body["items"]] == [pending["id"]]


def test_scenario_submit_approve_then_edit(client, register, submit, users):
    alice = register("alice@example.com", name="Alice")
    bob = register("bob@example.com", role="manager", name="Bob")

    expense = submit(alice, category_id=TRAVEL, amount=100.50)
    assert expense["status"] == "pending"

    approved = client.post(f"/expenses/{expense['id']}/approve", headers=bob).json()
    assert approved["status"] == "approved"
    assert approved["reviewer_name"] == "Bob"

    res = client.put(
        f"/expenses/{expense['id']}",
        headers=alice,
        json={
            "category_id": TRAVEL,
            "amount": 1.0,
            "description": "changed",
            "receipt_date": date.today().isoformat(),
        },
    )
    assert res.status_code == 400
