"""
Yearly tax summary for a domain portfolio.

Income is sell proceeds booked in the year. Expenses are buy, renew, fee,
marketing and advertising transactions, split by their tax_deductible flag.
Only deductible expenses reduce taxable income. Rates are percentages.
"""

from datetime import date
from typing import Dict, List, Optional, Sequence

from domainfolio.domain.models import (
    CapitalGain,
    Domain,
    DomainStatus,
    ExpenseCategory,
    TaxSummary,
    Transaction,
    TransactionType,
)
from domainfolio.domain.transactions import sale_proceeds, transactions_in_year
from domainfolio.utils.date_utils import days_between

DEFAULT_TAX_RATE = 25.0
LONG_TERM_HOLDING_DAYS = 365
UNCATEGORIZED = "Uncategorized"

EXPENSE_TYPES = frozenset(
    {
        TransactionType.BUY,
        TransactionType.RENEW,
        TransactionType.FEE,
        TransactionType.MARKETING,
        TransactionType.ADVERTISING,
    }
)


def tax_impact(amount: float, tax_rate: float = 0.0, is_deductible: bool = False) -> float:
    """Tax saved by a deductible expense; 0 for non-deductible ones"""
    if not is_deductible:
        return 0.0
    return amount * (tax_rate / 100)


def estimated_tax(net_income: float, tax_rate: float) -> float:
    return max(0.0, net_income * (tax_rate / 100))


def _first_of_type(transactions: Sequence[Transaction], txn_type: TransactionType) -> Optional[Transaction]:
    return next((t for t in transactions if t.type == txn_type), None)


def capital_gains(
    domains: Sequence[Domain],
    transactions: Sequence[Transaction],
    year: int,
) -> List[CapitalGain]:
    """
    Gain on each sold domain whose sale transaction falls in `year`.

    The purchase side is the domain's earliest buy transaction in any year.
    Domains missing either side are left out.
    """
    gains: List[CapitalGain] = []

    for domain in domains:
        if domain.status != DomainStatus.SOLD:
            continue

        domain_txns = sorted((t for t in transactions if t.domain_id == domain.id), key=lambda t: t.date)
        purchase = _first_of_type(domain_txns, TransactionType.BUY)
        sale = _first_of_type(transactions_in_year(domain_txns, year), TransactionType.SELL)
        if purchase is None or sale is None:
            continue

        sale_price = sale_proceeds(sale)
        held_days = days_between(purchase.date, sale.date)
        gains.append(
            CapitalGain(
                domain_name=domain.domain_name,
                purchase_price=purchase.amount,
                sale_price=sale_price,
                holding_period=held_days,
                gain=sale_price - purchase.amount,
                is_long_term=held_days > LONG_TERM_HOLDING_DAYS,
            )
        )

    return gains


def business_expenses(deductible: Sequence[Transaction]) -> List[ExpenseCategory]:
    """Deductible spend grouped by category, in order of first appearance"""
    by_category: Dict[str, ExpenseCategory] = {}
    for txn in deductible:
        category = txn.category or UNCATEGORIZED
        entry = by_category.setdefault(category, ExpenseCategory(category=category, amount=0.0, count=0))
        entry.amount += txn.amount
        entry.count += 1
    return list(by_category.values())


def tax_summary(
    domains: Sequence[Domain],
    transactions: Sequence[Transaction],
    year: Optional[int] = None,
    tax_rate: float = DEFAULT_TAX_RATE,
) -> TaxSummary:
    """Income, deductible and non-deductible expenses, estimated tax and capital gains for one year"""
    if year is None:
        year = date.today().year

    year_txns = transactions_in_year(transactions, year)
    expenses = [t for t in year_txns if t.type in EXPENSE_TYPES]
    deductible = [t for t in expenses if t.tax_deductible]

    income = sum(sale_proceeds(t) for t in year_txns if t.type == TransactionType.SELL)
    deductible_total = sum(t.amount for t in deductible)
    net_income = income - deductible_total

    return TaxSummary(
        year=year,
        tax_rate=tax_rate,
        total_income=income,
        total_deductible_expenses=deductible_total,
        total_non_deductible_expenses=sum(t.amount for t in expenses if not t.tax_deductible),
        net_income=net_income,
        estimated_tax=estimated_tax(net_income, tax_rate),
        capital_gains=capital_gains(domains, transactions, year),
        business_expenses=business_expenses(deductible),
    )
