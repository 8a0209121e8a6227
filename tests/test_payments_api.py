from datetime import timedelta
from decimal import Decimal

from buffet.models import CashFlowEntry, Payment, utcnow


def test_create_pending_payment(auth_client, make_event, db):
    event = make_event(title="Festa A")
    resp = auth_client.post(
        "/api/payments",
        json={"eventId": event["id"], "amount": "750.00", "paymentMethod": "card"},
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["status"] == "pending"
    assert Decimal(body["amount"]) == Decimal("750")
    assert body["event"]["title"] == "Festa A"
    assert body["client"]["id"] == event["clientId"]

    assert db.query(CashFlowEntry).count() == 0


def test_create_paid_payment_writes_income(auth_client, make_event, db):
    event = make_event(title="Festa A")
    resp = auth_client.post(
        "/api/payments",
        json={
            "eventId": event["id"],
            "amount": "1000.00",
            "paymentMethod": "pix",
            "status": "paid",
            "paymentDate": "2024-06-01T12:00:00Z",
        },
    )
    assert resp.status_code == 201

    entry = db.query(CashFlowEntry).one()
    assert entry.type == "income"
    assert entry.amount == Decimal("1000.00")
    assert entry.reference_id == resp.json()["id"]
    assert entry.reference_type == "payment"
    assert entry.description == "Payment received - Festa A"


def test_paid_without_payment_date_writes_no_income(make_payment, db):
    make_payment(status="paid")
    assert db.query(CashFlowEntry).count() == 0


def test_create_payment_validation(auth_client, make_event):
    event = make_event()
    resp = auth_client.post(
        "/api/payments",
        json={"eventId": event["id"], "amount": 0, "paymentMethod": "cheque"},
    )
    assert resp.status_code == 400
    fields = {d["field"] for d in resp.json()["details"]}
    assert fields == {"amount", "paymentMethod"}

    resp = auth_client.post(
        "/api/payments", json={"eventId": "missing", "amount": "10", "paymentMethod": "cash"}
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Event not found"}


def test_mark_as_paid_writes_income_once(auth_client, make_payment, db):
    payment = make_payment(amount="300.00")

    resp = auth_client.put(
        f"/api/payments/{payment['id']}",
        json={"status": "paid", "paymentDate": "2024-06-02T10:00:00Z"},
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "paid"
    assert resp.json()["paymentDate"].startswith("2024-06-02T10:00:00")

    entry = db.query(CashFlowEntry).one()
    assert entry.amount == Decimal("300.00")

    # Already paid: no second ledger entry
    resp = auth_client.put(
        f"/api/payments/{payment['id']}",
        json={"status": "paid", "paymentDate": "2024-06-03T10:00:00Z", "notes": "again"},
    )
    assert resp.status_code == 200
    db.expire_all()
    assert db.query(CashFlowEntry).count() == 1


def test_update_amount_used_for_income(auth_client, make_payment, db):
    payment = make_payment(amount="300.00")
    auth_client.put(
        f"/api/payments/{payment['id']}",
        json={"status": "paid", "paymentDate": "2024-06-02T10:00:00Z", "amount": "320.00"},
    )
    assert db.query(CashFlowEntry).one().amount == Decimal("320.00")


def test_update_payment_rejects_nulls_and_unknown_event(auth_client, make_payment):
    payment = make_payment()
    resp = auth_client.put(f"/api/payments/{payment['id']}", json={"amount": None})
    assert resp.status_code == 400

    resp = auth_client.put(f"/api/payments/{payment['id']}", json={"eventId": "missing"})
    assert resp.status_code == 400

    resp = auth_client.put("/api/payments/missing", json={"notes": "x"})
    assert resp.status_code == 404


def test_delete_payment_removes_ledger_entries(auth_client, make_payment, db):
    payment = make_payment(status="paid", paymentDate="2024-06-01T00:00:00Z")
    assert db.query(CashFlowEntry).count() == 1

    resp = auth_client.delete(f"/api/payments/{payment['id']}")
    assert resp.status_code == 204

    db.expire_all()
    assert db.query(CashFlowEntry).count() == 0
    assert db.query(Payment).count() == 0
    assert auth_client.get(f"/api/payments/{payment['id']}").status_code == 404


def test_list_payments_filters_and_search(auth_client, make_client, make_event, make_payment):
    ana = make_client(name="Ana Souza")
    festa = make_event(client_id=ana["id"], title="Aniversario")
    outra = make_event(title="Casamento", date="2024-07-01T00:00:00Z")

    make_payment(event_id=festa["id"], amount="100", dueDate="2024-05-01T00:00:00Z")
    make_payment(event_id=festa["id"], amount="200", dueDate="2024-06-01T00:00:00Z", paymentMethod="cash")
    make_payment(event_id=outra["id"], amount="300", dueDate="2024-07-01T00:00:00Z", status="overdue")

    resp = auth_client.get("/api/payments")
    assert resp.status_code == 200
    body = resp.json()
    assert [Decimal(p["amount"]) for p in body["items"]] == [100, 200, 300]
    assert body["pagination"]["total"] == 3

    resp = auth_client.get("/api/payments", params={"search": "souza"})
    assert resp.json()["pagination"]["total"] == 2

    resp = auth_client.get("/api/payments", params={"search": "casamento"})
    assert [p["event"]["title"] for p in resp.json()["items"]] == ["Casamento"]

    resp = auth_client.get("/api/payments", params={"paymentMethod": "cash"})
    assert resp.json()["pagination"]["total"] == 1

    resp = auth_client.get("/api/payments", params={"status": "overdue"})
    assert resp.json()["pagination"]["total"] == 1

    resp = auth_client.get("/api/payments", params={"eventId": festa["id"]})
    assert resp.json()["pagination"]["total"] == 2

    resp = auth_client.get(
        "/api/payments",
        params={"dueDateFrom": "2024-05-15T00:00:00Z", "dueDateTo": "2024-06-15T00:00:00Z"},
    )
    assert [Decimal(p["amount"]) for p in resp.json()["items"]] == [200]

    resp = auth_client.get("/api/payments", params={"sortBy": "amount", "sortOrder": "desc"})
    assert [Decimal(p["amount"]) for p in resp.json()["items"]] == [300, 200, 100]


def test_event_payment_summary(auth_client, make_event, make_payment):
    event = make_event()
    make_payment(event_id=event["id"], amount="100", status="paid", paymentDate="2024-06-01T00:00:00Z")
    make_payment(event_id=event["id"], amount="250.50")
    make_payment(event_id=event["id"], amount="49.50", status="overdue")

    resp = auth_client.get(f"/api/payments/event/{event['id']}")
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["payments"]) == 3
    assert body["summary"] == {
        "totalAmount": 400.0,
        "paidAmount": 100.0,
        "pendingAmount": 300.0,
        "totalPayments": 3,
        "paidPayments": 1,
        "pendingPayments": 1,
        "overduePayments": 1,
    }

    assert auth_client.get("/api/payments/event/missing").status_code == 404


def test_analytics_summary(auth_client, make_payment, db):
    make_payment(amount="100", status="paid", paymentDate="2024-06-01T00:00:00Z", paymentMethod="pix")
    make_payment(amount="50", status="paid", paymentDate="2024-06-01T00:00:00Z", paymentMethod="cash")
    make_payment(amount="70", status="overdue", dueDate="2020-01-01T00:00:00Z")

    # Outside the 30 day window
    old = make_payment(amount="999")
    row = db.query(Payment).filter(Payment.id == old["id"]).one()
    row.created_at = utcnow() - timedelta(days=90)
    db.commit()

    resp = auth_client.get("/api/payments/analytics/summary", params={"period": 30})
    assert resp.status_code == 200
    body = resp.json()
    assert body["period"] == "30 days"
    assert body["totalPayments"] == 3
    assert body["paymentsByStatus"] == {
        "paid": {"count": 2, "amount": 150.0},
        "overdue": {"count": 1, "amount": 70.0},
    }
    assert body["paymentsByMethod"] == {
        "pix": {"count": 1, "amount": 100.0},
        "cash": {"count": 1, "amount": 50.0},
    }
    assert body["overduePayments"] == {"count": 1, "totalAmount": 70.0}


def test_detailed_analytics(auth_client, make_client, make_event, make_payment):
    ana = make_client(name="Ana")
    bia = make_client(name="Bia")
    ana_event = make_event(client_id=ana["id"])
    bia_event = make_event(client_id=bia["id"], date="2024-07-01T00:00:00Z")

    make_payment(event_id=ana_event["id"], amount="100", status="paid", paymentDate="2024-06-01T00:00:00Z")
    make_payment(event_id=ana_event["id"], amount="100")
    make_payment(event_id=bia_event["id"], amount="500", paymentMethod="cash")

    resp = auth_client.get("/api/payments/analytics/detailed")
    assert resp.status_code == 200
    body = resp.json()

    assert body["summary"] == {
        "totalPayments": 3,
        "totalAmount": 700.0,
        "paidAmount": 100.0,
        "pendingAmount": 600.0,
        "paymentRate": 14.29,
        "averagePayment": 233.33,
    }
    assert body["distributions"]["byMethod"]["cash"] == {"count": 1, "amount": 500.0}

    top = body["topClients"]
    assert [c["clientName"] for c in top] == ["Bia", "Ana"]
    assert top[1]["paymentRate"] == 50.0
    assert top[1]["eventCount"] == 1
    assert top[1]["paymentCount"] == 2

    assert len(body["monthlyBreakdown"]) == 1
    assert body["monthlyBreakdown"][0]["paymentCount"] == 3
    assert body["filters"]["recordCount"] == 3

    resp = auth_client.get("/api/payments/analytics/detailed", params={"clientId": ana["id"]})
    assert resp.json()["summary"]["totalPayments"] == 2

    resp = auth_client.get("/api/payments/analytics/detailed", params={"clientId": "all"})
    assert resp.json()["summary"]["totalPayments"] == 3
