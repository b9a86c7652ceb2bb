"""Portfolio aggregator - folds per-domain results and monthly revenue into portfolio metrics"""

from datetime import date
from typing import List, Sequence

from domainfolio.domain import formulas
from domainfolio.domain.holding import domain_holding_cost, expired_domain_loss
from domainfolio.domain.models import (
    AdvancedFinancialMetrics,
    AnnualMetrics,
    BasicFinancialMetrics,
    Domain,
    DomainPerformance,
    PortfolioReport,
    Transaction,
    TransactionType,
)
from domainfolio.domain.performance import calculate_domain_performance, sell_revenue
from domainfolio.domain.transactions import COST_TYPES, sale_proceeds, transactions_in_year
from domainfolio.utils.date_utils import days_between, trailing_months

NO_DOMAIN = "N/A"
DAYS_PER_YEAR = 365
MONTHS_TRACKED = 12


def investment_years(domains: Sequence[Domain], as_of: date | None = None) -> float:
    """Years elapsed since the oldest purchase; 1 for an empty portfolio"""
    if not domains:
        return 1.0
    if as_of is None:
        as_of = date.today()

    oldest = min(d.purchase_date for d in domains)
    return days_between(oldest, as_of) / DAYS_PER_YEAR


def monthly_returns(transactions: Sequence[Transaction], as_of: date | None = None) -> List[float]:
    """Sell revenue per calendar month for the 12 months ending with as_of's month, oldest first"""
    if as_of is None:
        as_of = date.today()

    buckets = {month: 0.0 for month in trailing_months(as_of, MONTHS_TRACKED)}
    for txn in transactions:
        if txn.type != TransactionType.SELL:
            continue
        key = (txn.date.year, txn.date.month)
        if key in buckets:
            buckets[key] += sale_proceeds(txn)

    return list(buckets.values())


def calculate_basic_metrics(
    domains: Sequence[Domain],
    transactions: Sequence[Transaction],
) -> BasicFinancialMetrics:
    """
    Portfolio totals.

    Revenue here is the sum of every sell transaction, which is not the same
    as summing per-domain revenue (that one prefers sale price and estimates).
    """
    total_investment = sum(domain_holding_cost(d) for d in domains)
    total_revenue = sell_revenue(transactions)
    total_profit = total_revenue - total_investment

    return BasicFinancialMetrics(
        total_investment=total_investment,
        total_revenue=total_revenue,
        total_profit=total_profit,
        roi=formulas.roi(total_investment, total_revenue),
        profit_margin=formulas.profit_margin(total_revenue, total_investment),
    )


def annual_metrics(transactions: Sequence[Transaction], year: int) -> AnnualMetrics:
    """
    Sales, revenue, costs and platform fees booked in one calendar year.

    Costs are buy, renew and fee transactions only; marketing and advertising
    spend is left to the tax summary.
    """
    year_txns = transactions_in_year(transactions, year)
    sales = [t for t in year_txns if t.type == TransactionType.SELL]

    revenue = sum(sale_proceeds(t) for t in sales)
    costs = sum(t.amount for t in year_txns if t.type in COST_TYPES)

    return AnnualMetrics(
        year=year,
        annual_sales=sum(t.amount for t in sales),
        annual_revenue=revenue,
        annual_costs=costs,
        annual_profit=revenue - costs,
        annual_platform_fees=sum(t.platform_fee or 0.0 for t in sales),
    )


def best_and_worst(performance: Sequence[DomainPerformance]) -> tuple[str, str]:
    """Names of the highest and lowest ROI domains; ties keep the earlier entry"""
    if not performance:
        return NO_DOMAIN, NO_DOMAIN

    best = worst = performance[0]
    for current in performance[1:]:
        if current.roi > best.roi:
            best = current
        if current.roi < worst.roi:
            worst = current
    return best.domain.domain_name, worst.domain.domain_name


def calculate_advanced_metrics(
    domains: Sequence[Domain],
    transactions: Sequence[Transaction],
    as_of: date | None = None,
    risk_free_rate: float = formulas.DEFAULT_RISK_FREE_RATE,
    performance: Sequence[DomainPerformance] | None = None,
) -> AdvancedFinancialMetrics:
    """
    Basic metrics plus return and risk statistics.

    annualized_return, max_drawdown and volatility are reported in percent;
    the Sharpe ratio and risk level are computed from the unscaled fractions.
    """
    basic = calculate_basic_metrics(domains, transactions)
    years = investment_years(domains, as_of)
    annualized = formulas.annualized_return(basic.total_investment, basic.total_revenue, years)

    monthly = monthly_returns(transactions, as_of)
    vol = formulas.volatility(monthly)
    drawdown = formulas.max_drawdown(monthly)
    sharpe = formulas.sharpe_ratio(annualized, risk_free_rate, vol)

    if performance is None:
        performance = calculate_domain_performance(domains, transactions)
    best, worst = best_and_worst(performance)

    return AdvancedFinancialMetrics(
        total_investment=basic.total_investment,
        total_revenue=basic.total_revenue,
        total_profit=basic.total_profit,
        roi=basic.roi,
        profit_margin=basic.profit_margin,
        annualized_return=annualized * 100,
        sharpe_ratio=sharpe,
        max_drawdown=drawdown * 100,
        volatility=vol * 100,
        win_rate=formulas.win_rate(domains),
        avg_holding_period=formulas.avg_holding_period(domains),
        best_performing_domain=best,
        worst_performing_domain=worst,
        risk_level=formulas.risk_level(vol, drawdown),
    )


def build_portfolio_report(
    domains: Sequence[Domain],
    transactions: Sequence[Transaction],
    as_of: date | None = None,
    risk_free_rate: float = formulas.DEFAULT_RISK_FREE_RATE,
) -> PortfolioReport:
    """Main entry point: metrics, per-domain performance and loss analysis in one pass"""
    if as_of is None:
        as_of = date.today()

    performance = calculate_domain_performance(domains, transactions)
    metrics = calculate_advanced_metrics(
        domains,
        transactions,
        as_of=as_of,
        risk_free_rate=risk_free_rate,
        performance=performance,
    )

    return PortfolioReport(
        metrics=metrics,
        performance=performance,
        success_rate=formulas.success_rate(domains),
        expired_loss=expired_domain_loss(domains, as_of),
    )
