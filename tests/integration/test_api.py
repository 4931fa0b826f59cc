"""Integration tests for API endpoints"""

import pytest
from decimal import Decimal
from unittest.mock import patch
from fastapi.testclient import TestClient
from banking_api.domain.exceptions import StorageFailure


def _create(client: TestClient, number: str = "A1", name: str = "Jane"):
    return client.post("/api/account", json={"name": name, "account_number": number})


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_index(client: TestClient):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    _create(client)
    client.post("/api/account/deposit", json={"account_number": "A1", "amount": 100})

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "banking_transactions_total" in response.text
    assert "banking_accounts_created_total" in response.text


def test_request_id_header(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"
    assert client.get("/health").headers["X-Request-ID"]


def test_create_account(client: TestClient):
    response = _create(client)

    assert response.status_code == 201
    data = response.json()
    assert data["code"] == 201
    assert data["message"] == "Account created successfully"
    assert data["data"]["account_number"] == "A1"
    assert data["data"]["name"] == "Jane"
    assert Decimal(data["data"]["balance"]) == 0


def test_create_duplicate_account(client: TestClient):
    _create(client)

    response = _create(client, name="John")

    assert response.status_code == 409
    assert response.json() == {"code": 409, "message": "Account already exists", "data": None}


def test_get_balance(client: TestClient):
    _create(client)
    client.post("/api/account/deposit", json={"account_number": "A1", "amount": 100})

    response = client.get("/api/account/balance/A1")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Balance fetched successfully"
    assert Decimal(data["data"]["balance"]) == Decimal(100)


def test_get_balance_not_found(client: TestClient):
    response = client.get("/api/account/balance/missing")
    assert response.status_code == 404
    assert response.json()["message"] == "Account not found"


def test_deposit(client: TestClient):
    _create(client)

    response = client.post("/api/account/deposit", json={"account_number": "A1", "amount": 100})

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Deposit successful"
    assert data["data"]["type"] == "DEPOSIT"
    assert Decimal(data["data"]["amount"]) == Decimal(100)
    assert data["data"]["account_number"] == "A1"


def test_withdraw(client: TestClient):
    _create(client)
    client.post("/api/account/deposit", json={"account_number": "A1", "amount": 500})

    response = client.post("/api/account/withdraw", json={"account_number": "A1", "amount": 200})

    assert response.status_code == 201
    assert response.json()["message"] == "Withdrawal successful"
    assert response.json()["data"]["type"] == "WITHDRAWAL"
    balance = client.get("/api/account/balance/A1").json()["data"]["balance"]
    assert Decimal(balance) == Decimal(300)


@pytest.mark.parametrize("path", ["/api/account/deposit", "/api/account/withdraw"])
def test_transaction_unknown_account(client: TestClient, store, path):
    response = client.post(path, json={"account_number": "missing", "amount": 100})

    assert response.status_code == 404
    assert response.json()["message"] == "Account not found"
    assert store.transactions_for("missing") == []


def test_deposit_over_limit(client: TestClient):
    _create(client)

    response = client.post("/api/account/deposit", json={"account_number": "A1", "amount": 40001})

    assert response.status_code == 400
    assert response.json()["message"] == "You have exceeded the maximum deposit amount."


def test_withdraw_insufficient_balance(client: TestClient):
    _create(client)
    client.post("/api/account/deposit", json={"account_number": "A1", "amount": 50})

    response = client.post("/api/account/withdraw", json={"account_number": "A1", "amount": 100})

    assert response.status_code == 400
    assert response.json()["message"] == "Insufficient balance."


def test_withdraw_daily_frequency(client: TestClient):
    _create(client)
    client.post("/api/account/deposit", json={"account_number": "A1", "amount": 1000})
    for _ in range(3):
        client.post("/api/account/withdraw", json={"account_number": "A1", "amount": 10})

    response = client.post("/api/account/withdraw", json={"account_number": "A1", "amount": 10})

    assert response.status_code == 400
    assert response.json()["message"] == "You have reached the maximum number of transactions for today."


@pytest.mark.parametrize(
    "body",
    [
        {"account_number": "A1", "amount": 0},
        {"account_number": "A1", "amount": -10},
        {"account_number": "", "amount": 10},
        {"amount": 10},
        {"account_number": "A1"},
    ],
)
def test_invalid_transaction_request(client: TestClient, store, body):
    _create(client)

    response = client.post("/api/account/deposit", json=body)

    assert response.status_code == 400
    assert response.json()["message"] == "Validation error"
    assert response.json()["data"]
    assert store.transactions_for("A1") == []


def test_invalid_account_request(client: TestClient):
    response = client.post("/api/account", json={"name": "", "account_number": "A1"})
    assert response.status_code == 400
    assert response.json()["message"] == "Validation error"


def test_storage_failure_returns_503(client: TestClient, store):
    _create(client)

    with patch.object(store, "commit_transaction", side_effect=StorageFailure("database down")):
        response = client.post("/api/account/deposit", json={"account_number": "A1", "amount": 100})

    assert response.status_code == 503
    assert response.json()["message"].startswith("A system error occurred")
    assert Decimal(client.get("/api/account/balance/A1").json()["data"]["balance"]) == 0


def test_unmatched_paths_share_one_latency_label(client: TestClient):
    client.get("/no-such-route-7f3a")
    client.get("/another/missing/path")

    metrics_text = client.get("/metrics").text

    assert 'endpoint="unmatched"' in metrics_text
    assert "no-such-route-7f3a" not in metrics_text
    assert "another/missing/path" not in metrics_text


def test_latency_label_uses_route_template(client: TestClient):
    _create(client)
    client.get("/api/account/balance/A1")

    metrics_text = client.get("/metrics").text

    assert 'endpoint="/api/account/balance/{account_number}"' in metrics_text
