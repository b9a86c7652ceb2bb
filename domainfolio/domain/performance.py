"""Per-domain performance: cost, revenue, profit and ROI for each domain"""

from typing import List, Sequence, Tuple

from domainfolio.domain.holding import domain_holding_cost
from domainfolio.domain.models import (
    Domain,
    DomainPerformance,
    RevenueSource,
    Transaction,
    TransactionType,
)
from domainfolio.domain.transactions import sale_proceeds


def sell_revenue(transactions: Sequence[Transaction]) -> float:
    """Sum of sell transactions' net amounts (gross amount where net is missing)"""
    return sum(sale_proceeds(t) for t in transactions if t.type == TransactionType.SELL)


def resolve_revenue(domain: Domain, domain_transactions: Sequence[Transaction]) -> Tuple[float, RevenueSource]:
    """
    Pick a domain's revenue from the first available source, in this order:

    1. realized sale price
    2. estimated value
    3. summed sell transactions for the domain
    """
    if domain.sale_price is not None:
        return domain.sale_price, RevenueSource.SALE_PRICE
    if domain.estimated_value is not None:
        return domain.estimated_value, RevenueSource.ESTIMATED_VALUE
    return sell_revenue(domain_transactions), RevenueSource.TRANSACTIONS


def domain_performance(domain: Domain, transactions: Sequence[Transaction]) -> DomainPerformance:
    """Performance of one domain; `transactions` may hold other domains' rows too"""
    own = [t for t in transactions if t.domain_id == domain.id]

    total_cost = domain_holding_cost(domain)
    revenue, source = resolve_revenue(domain, own)
    profit = revenue - total_cost
    roi = profit / total_cost * 100 if total_cost > 0 else 0.0

    return DomainPerformance(
        domain=domain,
        total_cost=total_cost,
        revenue=revenue,
        profit=profit,
        roi=roi,
        revenue_source=source,
    )


def calculate_domain_performance(
    domains: Sequence[Domain],
    transactions: Sequence[Transaction],
) -> List[DomainPerformance]:
    return [domain_performance(domain, transactions) for domain in domains]
