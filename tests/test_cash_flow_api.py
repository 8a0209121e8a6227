from datetime import timedelta
from decimal import Decimal

from buffet.domain.cash_flow.service import summarize
from buffet.models import CashFlowEntry, utcnow


def _entry(kind, amount, when, description="entry"):
    return CashFlowEntry(
        type=kind, amount=Decimal(amount), description=description, transaction_date=when
    )


def test_summarize_groups_by_day():
    day1 = utcnow().replace(hour=9) - timedelta(days=2)
    day2 = day1 + timedelta(days=1)
    summary = summarize(
        [
            _entry("income", "100.00", day1),
            _entry("income", "50.50", day1.replace(hour=15)),
            _entry("expense", "30.00", day1),
            _entry("expense", "20.00", day2),
        ]
    )
    assert summary["totalIncome"] == 150.5
    assert summary["totalExpenses"] == 50.0
    assert summary["netCashFlow"] == 100.5
    assert summary["chartData"] == [
        {"date": day1.strftime("%Y-%m-%d"), "income": 150.5, "expenses": 30.0, "net": 120.5},
        {"date": day2.strftime("%Y-%m-%d"), "income": 0.0, "expenses": 20.0, "net": -20.0},
    ]


def test_summarize_empty():
    assert summarize([]) == {
        "totalIncome": 0.0,
        "totalExpenses": 0.0,
        "netCashFlow": 0.0,
        "chartData": [],
    }


def test_cash_flow_endpoint(auth_client, make_payment, db):
    recent = (utcnow() - timedelta(days=1)).strftime("%Y-%m-%dT10:00:00Z")
    make_payment(amount="400", status="paid", paymentDate=recent)

    db.add(_entry("expense", "150.00", utcnow() - timedelta(days=2), "Decoration"))
    db.add(_entry("income", "999.00", utcnow() - timedelta(days=60), "Old income"))
    db.commit()

    resp = auth_client.get("/api/cash-flow")
    assert resp.status_code == 200
    body = resp.json()
    assert body["period"] == "30 days"
    assert len(body["entries"]) == 2
    assert body["entries"][0]["description"] == "Decoration"
    assert body["summary"]["totalIncome"] == 400.0
    assert body["summary"]["totalExpenses"] == 150.0
    assert body["summary"]["netCashFlow"] == 250.0
    assert len(body["summary"]["chartData"]) == 2

    resp = auth_client.get("/api/cash-flow", params={"type": "income", "period": 90})
    body = resp.json()
    descriptions = [e["description"] for e in body["entries"]]
    assert descriptions[0] == "Old income"
    assert descriptions[1].startswith("Payment received - ")
    assert len(descriptions) == 2
    assert body["summary"]["totalExpenses"] == 0.0
    assert body["summary"]["totalIncome"] == 1399.0


def test_cash_flow_rejects_bad_type(auth_client):
    resp = auth_client.get("/api/cash-flow", params={"type": "transfer"})
    assert resp.status_code == 400
