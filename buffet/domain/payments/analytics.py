"""Aggregations over payments for the analytics endpoints.

Pure functions over ORM rows; amounts are returned as floats rounded to
cents because they are chart inputs, not ledger values.
"""

from collections import defaultdict
from typing import Iterable

from ...models import Payment

UNKNOWN_CLIENT = "Unknown client"


def _money(value) -> float:
    return round(float(value), 2)


def event_totals(payments: Iterable[Payment]) -> dict:
    payments = list(payments)
    total = sum(float(p.amount) for p in payments)
    paid = sum(float(p.amount) for p in payments if p.status == "paid")
    return {
        "totalAmount": _money(total),
        "paidAmount": _money(paid),
        "pendingAmount": _money(total - paid),
        "totalPayments": len(payments),
        "paidPayments": sum(1 for p in payments if p.status == "paid"),
        "pendingPayments": sum(1 for p in payments if p.status == "pending"),
        "overduePayments": sum(1 for p in payments if p.status == "overdue"),
    }


def distribution(payments: Iterable[Payment], key) -> dict:
    """{bucket: {count, amount}} grouped by key(payment)"""
    buckets = defaultdict(lambda: {"count": 0, "amount": 0.0})
    for payment in payments:
        bucket = buckets[key(payment)]
        bucket["count"] += 1
        bucket["amount"] += float(payment.amount)
    return {k: {"count": v["count"], "amount": _money(v["amount"])} for k, v in buckets.items()}


def top_clients(payments: Iterable[Payment], limit: int = 10) -> list[dict]:
    clients: dict = {}
    for payment in payments:
        event = payment.event
        client = event.client if event else None
        client_id = client.id if client else None

        entry = clients.setdefault(
            client_id,
            {
                "clientId": client_id,
                "clientName": client.name if client else UNKNOWN_CLIENT,
                "totalAmount": 0.0,
                "paidAmount": 0.0,
                "paymentCount": 0,
                "events": set(),
            },
        )
        entry["totalAmount"] += float(payment.amount)
        entry["paymentCount"] += 1
        entry["events"].add(payment.event_id)
        if payment.status == "paid":
            entry["paidAmount"] += float(payment.amount)

    ranked = []
    for entry in clients.values():
        total = entry["totalAmount"]
        ranked.append(
            {
                "clientId": entry["clientId"],
                "clientName": entry["clientName"],
                "totalAmount": _money(total),
                "paidAmount": _money(entry["paidAmount"]),
                "paymentCount": entry["paymentCount"],
                "eventCount": len(entry["events"]),
                "paymentRate": _money(entry["paidAmount"] / total * 100) if total > 0 else 0.0,
                "averagePayment": _money(total / entry["paymentCount"]),
            }
        )
    ranked.sort(key=lambda c: c["totalAmount"], reverse=True)
    return ranked[:limit]


def monthly_breakdown(payments: Iterable[Payment]) -> list[dict]:
    months: dict = {}
    for payment in payments:
        month = payment.created_at.strftime("%Y-%m")
        entry = months.setdefault(
            month,
            {"month": month, "totalAmount": 0.0, "paidAmount": 0.0, "paymentCount": 0, "paidCount": 0},
        )
        entry["totalAmount"] += float(payment.amount)
        entry["paymentCount"] += 1
        if payment.status == "paid":
            entry["paidAmount"] += float(payment.amount)
            entry["paidCount"] += 1

    return [
        {**entry, "totalAmount": _money(entry["totalAmount"]), "paidAmount": _money(entry["paidAmount"])}
        for _, entry in sorted(months.items())
    ]


def detailed_summary(payments: list[Payment]) -> dict:
    total = sum(float(p.amount) for p in payments)
    paid = sum(float(p.amount) for p in payments if p.status == "paid")
    pending = sum(float(p.amount) for p in payments if p.status == "pending")
    return {
        "totalPayments": len(payments),
        "totalAmount": _money(total),
        "paidAmount": _money(paid),
        "pendingAmount": _money(pending),
        "paymentRate": _money(paid / total * 100) if total > 0 else 0.0,
        "averagePayment": _money(total / len(payments)) if payments else 0.0,
    }
