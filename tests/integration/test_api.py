"""Integration tests for API endpoints"""

import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from domainfolio.api.main import create_app
from domainfolio.config import Settings
from domainfolio.domain.currency import ExchangeRateTable
from domainfolio.domain.exceptions import ExchangeRateAPIError, ExchangeRateUnavailableError

USER_ID = "user_1"
GET_RATES = "domainfolio.infrastructure.clients.exchange_rates.ExchangeRateClient.get_rates"


def _create_domain(client: TestClient, **overrides) -> dict:
    body = {
        "user_id": USER_ID,
        "domain_name": "example.com",
        "purchase_date": "2023-01-01",
        "purchase_cost": 100.0,
        "renewal_cost": 12.0,
    }
    body.update(overrides)
    response = client.post("/v1/domains", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def _create_transaction(client: TestClient, domain_id: str, **overrides) -> dict:
    body = {
        "user_id": USER_ID,
        "domain_id": domain_id,
        "type": "buy",
        "amount": 100.0,
        "date": "2023-01-01",
    }
    body.update(overrides)
    return client.post("/v1/transactions", json=body)


@pytest.fixture
def stored_portfolio(client: TestClient) -> dict:
    """Same three-domain portfolio as the sample_domains fixture, stored through the API"""
    alpha = _create_domain(
        client,
        domain_name="alpha.com",
        purchase_date="2022-06-15",
        purchase_cost=100.0,
        renewal_cost=20.0,
        renewal_count=2,
        status="sold",
        sale_date="2024-03-15",
        sale_price=300.0,
        platform_fee=30.0,
    )
    beta = _create_domain(
        client,
        domain_name="beta.io",
        purchase_date="2023-01-10",
        purchase_cost=50.0,
        renewal_cost=10.0,
        renewal_count=1,
        expiry_date="2025-01-10",
        estimated_value=200.0,
    )
    gamma = _create_domain(
        client,
        domain_name="gamma.net",
        purchase_date="2023-06-01",
        purchase_cost=80.0,
        renewal_cost=15.0,
        status="expired",
        expiry_date="2024-06-01",
    )

    _create_transaction(client, alpha["id"], type="buy", amount=100.0, date="2022-06-15")
    _create_transaction(
        client, alpha["id"], type="sell", amount=300.0, platform_fee=30.0, net_amount=270.0, date="2024-03-15"
    )
    _create_transaction(client, beta["id"], type="renew", amount=10.0, date="2024-01-10")

    return {"alpha": alpha, "beta": beta, "gamma": gamma}


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "domainfolio", "reporting_currency": "USD"}


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "domainfolio_unsupported_fee_type_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_domain_crud(client: TestClient):
    created = _create_domain(client, tags=["brandable"])
    assert created["user_id"] == USER_ID
    assert created["status"] == "active"
    assert created["tags"] == ["brandable"]

    fetched = client.get(f"/v1/domains/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["domain_name"] == "example.com"

    update = {
        "domain_name": "example.com",
        "purchase_date": "2023-01-01",
        "purchase_cost": 100.0,
        "renewal_cost": 12.0,
        "renewal_count": 1,
        "estimated_value": 450.0,
    }
    updated = client.put(f"/v1/domains/{created['id']}", json=update)
    assert updated.status_code == 200
    assert updated.json()["renewal_count"] == 1
    assert updated.json()["estimated_value"] == 450.0

    listed = client.get("/v1/domains", params={"user_id": USER_ID})
    assert [d["id"] for d in listed.json()] == [created["id"]]
    assert client.get("/v1/domains", params={"user_id": "someone_else"}).json() == []

    assert client.delete(f"/v1/domains/{created['id']}").status_code == 204
    assert client.get(f"/v1/domains/{created['id']}").status_code == 404


def test_domain_invalid_id(client: TestClient):
    response = client.get("/v1/domains/not-a-uuid")
    assert response.status_code == 400


def test_domain_rejects_negative_cost(client: TestClient):
    response = client.post(
        "/v1/domains",
        json={"user_id": USER_ID, "domain_name": "x.com", "purchase_date": "2023-01-01", "purchase_cost": -1},
    )
    assert response.status_code == 422


def test_create_transaction_derives_amounts(client: TestClient):
    domain = _create_domain(client)

    response = _create_transaction(client, domain["id"], type="sell", amount=1000.0, platform_fee_percentage=10.0)

    assert response.status_code == 201
    data = response.json()
    assert data["platform_fee"] == pytest.approx(100.0)
    assert data["net_amount"] == pytest.approx(900.0)
    assert data["exchange_rate"] == 1.0
    assert data["base_amount"] == 1000.0


def test_create_installment_transaction(client: TestClient):
    domain = _create_domain(client)

    response = _create_transaction(
        client,
        domain["id"],
        type="sell",
        amount=1200.0,
        payment_plan="installment",
        installment_period=12,
        installment_amount=100.0,
        paid_periods=6,
        installment_status="active",
        platform_fee_type="atom_installment",
    )

    assert response.status_code == 201
    data = response.json()
    assert data["net_amount"] == 600.0
    assert data["platform_fee"] == pytest.approx(600 / 1.065 * 0.10 * 0.35)


@patch(GET_RATES, new_callable=AsyncMock)
def test_create_transaction_converts_currency(mock_rates: AsyncMock, client: TestClient):
    mock_rates.return_value = ExchangeRateTable(base_currency="USD", rates={"EUR": 0.8})
    domain = _create_domain(client)

    response = _create_transaction(client, domain["id"], amount=100.0, currency="eur")

    assert response.status_code == 201
    data = response.json()
    assert data["currency"] == "EUR"
    assert data["exchange_rate"] == pytest.approx(1.25)
    assert data["base_amount"] == pytest.approx(125.0)
    mock_rates.assert_awaited_once()


@patch(GET_RATES, new_callable=AsyncMock)
def test_explicit_exchange_rate_skips_lookup(mock_rates: AsyncMock, client: TestClient):
    domain = _create_domain(client)

    response = _create_transaction(client, domain["id"], amount=100.0, currency="EUR", exchange_rate=1.1)

    assert response.status_code == 201
    assert response.json()["base_amount"] == pytest.approx(110.0)
    mock_rates.assert_not_called()


@patch(GET_RATES, new_callable=AsyncMock)
def test_exchange_rate_service_down(mock_rates: AsyncMock, client: TestClient):
    mock_rates.side_effect = ExchangeRateAPIError("Exchange rate API timeout after 5.0s")
    domain = _create_domain(client)

    response = _create_transaction(client, domain["id"], currency="EUR")

    assert response.status_code == 503
    assert client.get("/v1/transactions", params={"user_id": USER_ID}).json() == []


@patch(GET_RATES, new_callable=AsyncMock)
def test_exchange_rate_missing_currency(mock_rates: AsyncMock, client: TestClient):
    mock_rates.return_value = ExchangeRateTable(base_currency="USD", rates={"EUR": 0.8})
    domain = _create_domain(client)

    response = _create_transaction(client, domain["id"], currency="CHF")

    assert response.status_code == 422


def test_transaction_for_another_users_domain(client: TestClient):
    domain = _create_domain(client, user_id="owner")
    response = _create_transaction(client, domain["id"])
    assert response.status_code == 404


def test_list_and_delete_transactions(client: TestClient):
    first = _create_domain(client, domain_name="first.com")
    second = _create_domain(client, domain_name="second.com")
    txn = _create_transaction(client, first["id"], date="2023-02-01").json()
    _create_transaction(client, second["id"], date="2023-01-15")

    all_txns = client.get("/v1/transactions", params={"user_id": USER_ID}).json()
    assert [t["domain_id"] for t in all_txns] == [second["id"], first["id"]]

    filtered = client.get("/v1/transactions", params={"user_id": USER_ID, "domain_id": first["id"]}).json()
    assert [t["id"] for t in filtered] == [txn["id"]]

    assert client.delete(f"/v1/transactions/{txn['id']}").status_code == 204
    assert client.delete(f"/v1/transactions/{txn['id']}").status_code == 404


def test_deleting_domain_removes_its_transactions(client: TestClient):
    domain = _create_domain(client)
    _create_transaction(client, domain["id"])

    client.delete(f"/v1/domains/{domain['id']}")

    assert client.get("/v1/transactions", params={"user_id": USER_ID}).json() == []


def test_stored_portfolio_report(client: TestClient, stored_portfolio: dict):
    response = client.get(f"/v1/analytics/portfolio/{USER_ID}", params={"as_of": "2024-06-15"})

    assert response.status_code == 200
    data = response.json()
    metrics = data["metrics"]

    assert data["user_id"] == USER_ID
    assert data["as_of"] == "2024-06-15"
    assert metrics["total_investment"] == pytest.approx(280.0)
    assert metrics["total_revenue"] == pytest.approx(270.0)
    assert metrics["max_drawdown"] == pytest.approx(100.0)
    assert metrics["win_rate"] == 100.0
    assert metrics["best_performing_domain"] == "beta.io"
    assert metrics["worst_performing_domain"] == "gamma.net"
    assert metrics["risk_level"] == "High"

    assert [p["domain_name"] for p in data["performance"]] == ["alpha.com", "beta.io", "gamma.net"]
    assert [p["revenue_source"] for p in data["performance"]] == ["sale_price", "estimated_value", "transactions"]
    assert data["success_rate"] == pytest.approx(100 / 3)
    assert data["expired_loss"]["total_loss"] == 80.0
    assert data["expired_loss"]["expired_domains"][0]["domain_name"] == "gamma.net"


def test_empty_stored_portfolio(client: TestClient):
    response = client.get("/v1/analytics/portfolio/nobody", params={"as_of": "2024-06-15"})

    assert response.status_code == 200
    metrics = response.json()["metrics"]
    assert metrics["roi"] == 0
    assert metrics["best_performing_domain"] == "N/A"
    assert metrics["risk_level"] == "Low"


def test_adhoc_portfolio_report(client: TestClient):
    body = {
        "as_of": "2024-06-15",
        "domains": [
            {
                "id": "d-1",
                "domain_name": "solo.com",
                "purchase_date": "2023-06-15",
                "purchase_cost": 100.0,
                "renewal_cost": 10.0,
                "status": "sold",
                "sale_date": "2024-02-01",
                "sale_price": 250.0,
            }
        ],
        "transactions": [
            {"id": "t-1", "domain_id": "d-1", "type": "sell", "amount": 250.0, "date": "2024-02-01"},
        ],
    }

    response = client.post("/v1/analytics/portfolio", json=body)

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] is None
    assert data["metrics"]["total_investment"] == 100.0
    assert data["metrics"]["total_revenue"] == 250.0
    assert data["metrics"]["roi"] == pytest.approx(150.0)
    assert data["performance"][0]["revenue"] == 250.0
    assert data["performance"][0]["revenue_source"] == "sale_price"


def test_renewal_forecast(client: TestClient, stored_portfolio: dict):
    response = client.get(f"/v1/analytics/renewals/{USER_ID}", params={"year": 2024, "years": 2})

    assert response.status_code == 200
    years = response.json()["years"]
    assert [y["year"] for y in years] == [2024, 2025]
    assert years[0]["total_annual_cost"] == 0
    assert years[1]["total_annual_cost"] == 10.0
    assert [d["domain_name"] for d in years[1]["domains_needing_renewal"]] == ["beta.io"]
    assert years[1]["monthly_distribution"]["1"] == 10.0


def test_renewal_forecast_rejects_too_many_years(client: TestClient):
    response = client.get(f"/v1/analytics/renewals/{USER_ID}", params={"years": 11})
    assert response.status_code == 422


def test_platform_fee_endpoint(client: TestClient):
    response = client.post(
        "/v1/platform-fees",
        json={"fee_type": "escrow_installment", "seller_amount": 1000.0, "escrow_fee": 50.0, "domain_holding_fee": 25.0},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["customer_total_amount"] == 1075.0
    assert data["platform_fee"] == 75.0
    assert data["seller_net_amount"] == 1000.0


def test_platform_fee_unsupported_type(client: TestClient):
    response = client.post("/v1/platform-fees", json={"fee_type": "dan_installment", "seller_amount": 1000.0})

    assert response.status_code == 422
    assert response.json()["detail"] == "Unsupported platform fee type: dan_installment"


def test_installment_fee_modes(client: TestClient):
    planned = client.post(
        "/v1/platform-fees/installment",
        json={"fee_type": "afternic_installment", "installment_amount": 100.0, "installment_period": 24},
    )
    paid = client.post(
        "/v1/platform-fees/installment",
        json={
            "fee_type": "afternic_installment",
            "installment_amount": 100.0,
            "installment_period": 24,
            "paid_periods": 12,
            "mode": "paid",
        },
    )

    assert planned.status_code == 200
    assert planned.json()["seller_net_amount"] == 2400.0
    assert planned.json()["breakdown"]["service_fee_rate"] == 0.10
    assert paid.status_code == 200
    assert paid.json()["seller_net_amount"] == 1200.0
    assert paid.json()["platform_fee_rate"] == 0.0


@patch(GET_RATES, new_callable=AsyncMock)
def test_lowercase_reporting_currency_setting(mock_rates: AsyncMock, client: TestClient):
    domain = _create_domain(client)

    with patch("domainfolio.api.v1.transactions.settings", Settings(reporting_currency="usd")):
        response = _create_transaction(client, domain["id"], currency="USD")

    assert response.status_code == 201
    assert response.json()["exchange_rate"] == 1.0
    mock_rates.assert_not_called()


def test_adhoc_report_short_span_flip(client: TestClient):
    body = {
        "as_of": "2024-06-04",
        "domains": [
            {
                "id": "d-flip",
                "domain_name": "flip.com",
                "purchase_date": "2024-06-01",
                "purchase_cost": 10.0,
                "status": "sold",
                "sale_date": "2024-06-03",
                "sale_price": 10000.0,
            }
        ],
        "transactions": [
            {"id": "t-1", "domain_id": "d-flip", "type": "sell", "amount": 10000.0, "date": "2024-06-03"},
        ],
    }

    response = client.post("/v1/analytics/portfolio", json=body)

    assert response.status_code == 200
    metrics = response.json()["metrics"]
    assert metrics["annualized_return"] is None
    assert metrics["roi"] == pytest.approx(99900.0)
    assert metrics["risk_level"] == "High"


def test_platform_fee_rejects_negative_surcharge(client: TestClient):
    response = client.post(
        "/v1/platform-fees",
        json={
            "fee_type": "atom_installment",
            "seller_amount": 1000.0,
            "installment_period": 12,
            "user_input_surcharge_rate": -1 / 0.65,
        },
    )
    assert response.status_code == 422


def test_renewal_forecast_lists_domains_not_due(client: TestClient, stored_portfolio: dict):
    response = client.get(
        f"/v1/analytics/renewals/{USER_ID}",
        params={"year": 2024, "years": 1, "as_of": "2024-06-15"},
    )

    assert response.status_code == 200
    year = response.json()["years"][0]
    assert year["domains_needing_renewal"] == []
    later = year["domains_not_needing_renewal"][0]
    assert later["domain_name"] == "beta.io"
    assert later["next_renewal_date"] == "2025-01-10"
    assert later["years_until_renewal"] == pytest.approx(209 / 365.25)


def test_tax_summary_endpoint(client: TestClient, stored_portfolio: dict):
    response = client.get(f"/v1/analytics/tax/{USER_ID}", params={"year": 2024, "tax_rate": 20})

    assert response.status_code == 200
    data = response.json()
    assert data["total_income"] == 270.0
    assert data["total_deductible_expenses"] == 0
    assert data["total_non_deductible_expenses"] == 10.0
    assert data["estimated_tax"] == pytest.approx(54.0)
    assert data["capital_gains"] == [
        {
            "domain_name": "alpha.com",
            "purchase_price": 100.0,
            "sale_price": 270.0,
            "holding_period": 639,
            "gain": 170.0,
            "is_long_term": True,
        }
    ]


def test_tax_summary_rejects_rate_over_100(client: TestClient):
    response = client.get(f"/v1/analytics/tax/{USER_ID}", params={"tax_rate": 150})
    assert response.status_code == 422


def test_annual_metrics_endpoint(client: TestClient, stored_portfolio: dict):
    response = client.get(f"/v1/analytics/annual/{USER_ID}", params={"year": 2024})

    assert response.status_code == 200
    data = response.json()
    assert data["annual_sales"] == 300.0
    assert data["annual_revenue"] == 270.0
    assert data["annual_costs"] == 10.0
    assert data["annual_profit"] == 260.0
    assert data["annual_platform_fees"] == 30.0
    assert [(s["gross_amount"], s["net_amount"]) for s in data["sales"]] == [(300.0, 270.0)]


def test_unmapped_domain_error_is_a_client_error():
    app = create_app()

    @app.get("/boom")
    def boom():
        raise ExchangeRateUnavailableError("No exchange rate for USD/XYZ")

    response = TestClient(app).get("/boom")

    assert response.status_code == 422
    assert response.json() == {"detail": "No exchange rate for USD/XYZ"}
