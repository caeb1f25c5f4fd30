from datetime import datetime
from decimal import Decimal


def _ts(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _source(client, name="Bank", type="bank"):
    r = client.post("/api/v1/finance/sources", json={"name": name, "type": type})
    assert r.status_code == 201
    return r.json()["id"]


def test_health(client):
    r = client.get("/api/health/")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert client.get("/").json()["message"] == "OK"


def test_unified_chart(client):
    for d, total in [(1, "100"), (5, "200")]:
        r = client.post("/api/v1/crypto/reports", json={
            "total_value_usd": total,
            "wallets_value_usd": total,
            "timestamp": f"2024-01-0{d}T00:00:00Z",
        })
        assert r.status_code == 201

    sid = _source(client)
    r = client.post(f"/api/v1/finance/sources/{sid}/statements", json={
        "statement_date": "2024-01-03T10:30:00Z",
        "account_balance": "500",
    })
    assert r.status_code == 201

    r = client.get("/api/v1/charts/unified", params={
        "start": "2024-01-01T00:00:00+00:00",
        "end": "2024-01-31T00:00:00+00:00",
    })
    assert r.status_code == 200
    points = r.json()["points"]

    assert [_ts(p["timestamp"]).day for p in points] == [1, 3, 5]
    assert [Decimal(p["crypto"]["total_value_usd"]) for p in points] == [Decimal("100"), Decimal("150"), Decimal("200")]
    assert [Decimal(p["finance"]["total_balance"]) for p in points] == [Decimal("500")] * 3
    assert points[1]["finance"]["source_balances"][0]["source_id"] == sid


def test_unified_chart_crypto_only(client):
    client.post("/api/v1/crypto/reports", json={"total_value_usd": "1", "timestamp": "2024-01-02T00:00:00Z"})
    sid = _source(client)
    client.post(f"/api/v1/finance/sources/{sid}/statements", json={
        "statement_date": "2024-01-03T00:00:00Z", "account_balance": "9",
    })

    r = client.get("/api/v1/charts/unified", params={
        "start": "2024-01-01T00:00:00+00:00", "end": "2024-01-31T00:00:00+00:00", "finance": "false",
    })
    points = r.json()["points"]
    assert len(points) == 1
    assert points[0]["finance"] is None


def test_unified_chart_no_data(client):
    r = client.get("/api/v1/charts/unified", params={
        "start": "2024-01-01T00:00:00+00:00", "end": "2024-01-31T00:00:00+00:00",
    })
    assert r.status_code == 404
    assert r.json()["code"] == "no_data"


def test_unified_chart_bad_range(client):
    r = client.get("/api/v1/charts/unified", params={
        "start": "2024-02-01T00:00:00+00:00", "end": "2024-01-01T00:00:00+00:00",
    })
    assert r.status_code == 422
    assert r.json()["code"] == "invalid_range"


def test_finance_chart(client):
    a, b = _source(client, "A"), _source(client, "B", "broker")
    client.post(f"/api/v1/finance/sources/{a}/statements", json={"statement_date": "2024-01-01T00:00:00Z", "account_balance": "10"})
    client.post(f"/api/v1/finance/sources/{b}/statements", json={"statement_date": "2024-01-02T00:00:00Z", "account_balance": "5"})

    r = client.get("/api/v1/charts/finance", params={
        "start": "2024-01-01T00:00:00+00:00", "end": "2024-01-31T00:00:00+00:00",
    })
    assert r.status_code == 200
    assert [Decimal(p["total_balance"]) for p in r.json()] == [Decimal("10"), Decimal("15")]


def test_crypto_reports(client):
    r = client.get("/api/v1/crypto/reports/latest")
    assert r.status_code == 404

    rid = client.post("/api/v1/crypto/reports", json={
        "total_value_usd": "12.50", "data": {"wallets": ["0xabc"]}, "timestamp": "2024-01-02T00:00:00Z",
    }).json()["id"]
    client.post("/api/v1/crypto/reports", json={"total_value_usd": "13", "timestamp": "2024-01-04T00:00:00Z"})

    got = client.get(f"/api/v1/crypto/reports/{rid}").json()
    assert Decimal(got["total_value_usd"]) == Decimal("12.50")
    assert got["data"] == {"wallets": ["0xabc"]}
    assert Decimal(client.get("/api/v1/crypto/reports/latest").json()["total_value_usd"]) == Decimal("13")

    r = client.delete("/api/v1/crypto/reports", params={"before": "2024-01-03T00:00:00+00:00"})
    assert r.json() == {"deleted": 1}
    assert client.get(f"/api/v1/crypto/reports/{rid}").status_code == 404


def test_finance_sources_crud(client):
    sid = _source(client, "Revolut", "Bank")
    assert client.get(f"/api/v1/finance/sources/{sid}").json()["type"] == "bank"

    r = client.put(f"/api/v1/finance/sources/{sid}", json={"name": "Revolut EUR"})
    assert r.json()["name"] == "Revolut EUR"
    assert [s["id"] for s in client.get("/api/v1/finance/sources").json()] == [sid]

    client.post(f"/api/v1/finance/sources/{sid}/statements", json={
        "statement_date": "2024-01-03T00:00:00Z", "account_balance": "80", "account_balance_usd": "87.20",
    })
    (st,) = client.get(f"/api/v1/finance/sources/{sid}/statements").json()
    assert Decimal(st["account_balance_usd"]) == Decimal("87.20")

    assert client.delete(f"/api/v1/finance/sources/{sid}").status_code == 204
    assert client.get(f"/api/v1/finance/sources/{sid}").status_code == 404


def test_unknown_source_404(client):
    r = client.post("/api/v1/finance/sources/00000000-0000-0000-0000-000000000000/statements", json={
        "statement_date": "2024-01-03T00:00:00Z", "account_balance": "1",
    })
    assert r.status_code == 404


def test_latest_statements_and_balance(client):
    a, b = _source(client, "A"), _source(client, "B", "broker")
    _source(client, "C")
    for sid, date, bal in [(a, "2024-01-01", "10"), (a, "2024-01-05", "12"), (b, "2024-01-03", "5")]:
        client.post(f"/api/v1/finance/sources/{sid}/statements", json={
            "statement_date": f"{date}T00:00:00Z", "account_balance": bal,
        })

    latest = client.get("/api/v1/finance/sources/latest").json()
    assert [(x["source_name"], x["source_type"], Decimal(x["account_balance_usd"])) for x in latest] == [
        ("A", "bank", Decimal("12")),
        ("B", "broker", Decimal("5")),
    ]

    bal = client.get("/api/v1/finance/balance").json()
    assert Decimal(bal["total_balance_usd"]) == Decimal("17")
    assert bal["sources"] == 2


def test_crypto_reports_in_range(client):
    for d in (1, 2, 3):
        client.post("/api/v1/crypto/reports", json={"total_value_usd": str(d), "timestamp": f"2024-01-0{d}T00:00:00Z"})

    r = client.get("/api/v1/crypto/reports", params={
        "start": "2024-01-02T00:00:00+00:00", "end": "2024-01-31T00:00:00+00:00",
    })
    assert r.status_code == 200
    assert [Decimal(x["total_value_usd"]) for x in r.json()] == [Decimal("3"), Decimal("2")]
