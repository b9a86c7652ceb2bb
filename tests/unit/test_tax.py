"""Unit tests for the yearly tax summary"""

import pytest
from datetime import date
from domainfolio.domain.models import Domain, DomainStatus, Transaction, TransactionType
from domainfolio.domain.tax import capital_gains, estimated_tax, tax_impact, tax_summary


def _txn(txn_id: str, txn_type: TransactionType, amount: float, when: date, domain_id: str = "d-1", **overrides) -> Transaction:
    return Transaction(id=txn_id, domain_id=domain_id, type=txn_type, amount=amount, date=when, **overrides)


@pytest.fixture
def sold_domain() -> Domain:
    return Domain(
        id="d-1",
        domain_name="sold.com",
        purchase_date=date(2022, 5, 1),
        purchase_cost=200.0,
        renewal_cost=10.0,
        status=DomainStatus.SOLD,
        sale_price=1000.0,
    )


@pytest.fixture
def year_transactions() -> list[Transaction]:
    return [
        _txn("buy", TransactionType.BUY, 200.0, date(2022, 5, 1), tax_deductible=True),
        _txn("renew", TransactionType.RENEW, 10.0, date(2024, 5, 1), tax_deductible=True, category="Renewals"),
        _txn("ads", TransactionType.ADVERTISING, 30.0, date(2024, 6, 1), tax_deductible=True, category="Marketing"),
        _txn("promo", TransactionType.MARKETING, 20.0, date(2024, 7, 1), tax_deductible=True, category="Marketing"),
        _txn("lunch", TransactionType.FEE, 15.0, date(2024, 8, 1)),
        _txn("sale", TransactionType.SELL, 1000.0, date(2024, 9, 1), net_amount=900.0),
        _txn("transfer", TransactionType.TRANSFER, 5.0, date(2024, 9, 2), tax_deductible=True),
        _txn("last-year", TransactionType.SELL, 400.0, date(2023, 3, 1)),
    ]


def test_tax_impact():
    assert tax_impact(200.0, 25.0, is_deductible=True) == 50.0
    assert tax_impact(200.0, 25.0) == 0


def test_estimated_tax_never_negative():
    assert estimated_tax(1000.0, 20.0) == 200.0
    assert estimated_tax(-500.0, 20.0) == 0


def test_tax_summary(sold_domain, year_transactions):
    summary = tax_summary([sold_domain], year_transactions, year=2024, tax_rate=20.0)

    assert summary.total_income == 900.0
    assert summary.total_deductible_expenses == 60.0
    assert summary.total_non_deductible_expenses == 15.0
    assert summary.net_income == 840.0
    assert summary.estimated_tax == pytest.approx(168.0)
    assert [(e.category, e.amount, e.count) for e in summary.business_expenses] == [
        ("Renewals", 10.0, 1),
        ("Marketing", 50.0, 2),
    ]


def test_tax_summary_defaults(year_transactions):
    summary = tax_summary([], year_transactions, year=2023)

    assert summary.tax_rate == 25.0
    assert summary.total_income == 400.0
    assert summary.estimated_tax == 100.0
    assert summary.capital_gains == []


def test_uncategorized_expenses():
    txns = [_txn("f", TransactionType.FEE, 8.0, date(2024, 1, 1), tax_deductible=True)]
    summary = tax_summary([], txns, year=2024)
    assert [(e.category, e.count) for e in summary.business_expenses] == [("Uncategorized", 1)]


def test_capital_gain_uses_purchase_from_earlier_year(sold_domain, year_transactions):
    gains = capital_gains([sold_domain], year_transactions, 2024)

    assert len(gains) == 1
    gain = gains[0]
    assert gain.purchase_price == 200.0
    assert gain.sale_price == 900.0
    assert gain.gain == 700.0
    assert gain.holding_period == (date(2024, 9, 1) - date(2022, 5, 1)).days
    assert gain.is_long_term is True


def test_capital_gain_requires_sale_in_year(sold_domain, year_transactions):
    assert capital_gains([sold_domain], year_transactions, 2025) == []


def test_capital_gain_short_term():
    domain = Domain(id="d-2", domain_name="quick.io", purchase_date=date(2024, 1, 1), purchase_cost=50.0,
                    renewal_cost=0.0, status=DomainStatus.SOLD)
    txns = [
        _txn("b", TransactionType.BUY, 50.0, date(2024, 1, 1), domain_id="d-2"),
        _txn("s", TransactionType.SELL, 80.0, date(2024, 4, 1), domain_id="d-2"),
    ]

    gain = capital_gains([domain], txns, 2024)[0]

    assert gain.gain == 30.0
    assert gain.is_long_term is False


def test_unsold_domain_has_no_capital_gain(year_transactions):
    held = Domain(id="d-1", domain_name="held.com", purchase_date=date(2022, 5, 1), purchase_cost=200.0,
                  renewal_cost=10.0)
    assert capital_gains([held], year_transactions, 2024) == []
