"""Primitive financial formulas - stateless functions over numbers and domain lists"""

import logging
import math
from typing import Iterable, List, Sequence
from scipy import optimize

from domainfolio.domain.holding import domain_holding_cost
from domainfolio.domain.models import Domain, DomainStatus, RiskLevel
from domainfolio.utils.date_utils import days_between

# Risk tier thresholds (fractions, not percentages)
HIGH_RISK_VOLATILITY = 0.3
HIGH_RISK_DRAWDOWN = 0.5
MEDIUM_RISK_VOLATILITY = 0.15
MEDIUM_RISK_DRAWDOWN = 0.2

DEFAULT_RISK_FREE_RATE = 0.02

IRR_MAX_ITERATIONS = 100
IRR_TOLERANCE = 0.0001


def roi(investment: float, revenue: float) -> float:
    """Return on investment in percent; zero investment is defined as 0"""
    if investment == 0:
        return 0.0
    return (revenue - investment) / investment * 100


def profit_margin(revenue: float, cost: float) -> float:
    if revenue == 0:
        return 0.0
    return (revenue - cost) / revenue * 100


def annualized_return(investment: float, revenue: float, years: float) -> float:
    """
    Compound annual growth rate as a fraction.

    Returns 0 for non-positive investment or time span. A portfolio that lost
    everything (or more) compounds to -1 rather than a complex root, and a
    gain too large to represent over a short span is math.inf.
    """
    if years <= 0 or investment <= 0:
        return 0.0

    growth = 1 + (revenue - investment) / investment
    if growth <= 0:
        return -1.0
    try:
        return growth ** (1 / years) - 1
    except OverflowError:
        return math.inf


def volatility(returns: Sequence[float]) -> float:
    """Population standard deviation; 0 for fewer than two observations"""
    if len(returns) < 2:
        return 0.0

    mean = sum(returns) / len(returns)
    variance = sum((r - mean) ** 2 for r in returns) / len(returns)
    return math.sqrt(variance)


def max_drawdown(returns: Sequence[float]) -> float:
    """
    Largest peak-to-point decline in a series, as a fraction of the peak.

    The series fed in by the portfolio aggregator is monthly sell revenue, so
    this measures drawdown of monthly cash inflow. A non-positive peak yields
    no drawdown.
    """
    if not returns:
        return 0.0

    peak = returns[0]
    worst = 0.0
    for value in returns[1:]:
        if value > peak:
            peak = value
        elif peak > 0:
            worst = max(worst, (peak - value) / peak)
    return worst


def sharpe_ratio(annualized: float, risk_free_rate: float, vol: float) -> float:
    if vol == 0:
        return 0.0
    return (annualized - risk_free_rate) / vol


def _sold(domains: Iterable[Domain]) -> List[Domain]:
    return [d for d in domains if d.status == DomainStatus.SOLD]


def win_rate(domains: Iterable[Domain]) -> float:
    """Percentage of sold domains whose sale price beat their holding cost"""
    sold = _sold(domains)
    if not sold:
        return 0.0

    winners = [d for d in sold if (d.sale_price or 0.0) > domain_holding_cost(d)]
    return len(winners) / len(sold) * 100


def avg_holding_period(domains: Iterable[Domain]) -> float:
    """Mean days between purchase and sale over sold domains (missing sale date counts as 0 days)"""
    sold = _sold(domains)
    if not sold:
        return 0.0

    total_days = sum(days_between(d.purchase_date, d.sale_date or d.purchase_date) for d in sold)
    return total_days / len(sold)


def success_rate(domains: Sequence[Domain]) -> float:
    """Share of all domains that have been sold, in percent"""
    if not domains:
        return 0.0
    return len(_sold(domains)) / len(domains) * 100


def risk_level(vol: float, drawdown: float) -> RiskLevel:
    if vol > HIGH_RISK_VOLATILITY or drawdown > HIGH_RISK_DRAWDOWN:
        return RiskLevel.HIGH
    if vol > MEDIUM_RISK_VOLATILITY or drawdown > MEDIUM_RISK_DRAWDOWN:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def npv(cash_flows: Sequence[float], discount_rate: float) -> float:
    """Net present value; cash_flows[0] is undiscounted"""
    return sum(cf / (1 + discount_rate) ** i for i, cf in enumerate(cash_flows))


def _npv_derivative(discount_rate: float, cash_flows: Sequence[float]) -> float:
    return sum(-i * cf / (1 + discount_rate) ** (i + 1) for i, cf in enumerate(cash_flows))


def irr(cash_flows: Sequence[float], guess: float = 0.1) -> float:
    """
    Internal rate of return: the discount rate at which NPV is zero.

    Solved with scipy's Newton-Raphson from `guess`. Returns math.nan when the
    solver does not converge within IRR_MAX_ITERATIONS or hits a flat or
    undefined NPV curve.
    """
    try:
        rate = optimize.newton(
            lambda r: npv(cash_flows, r),
            x0=guess,
            fprime=lambda r: _npv_derivative(r, cash_flows),
            tol=IRR_TOLERANCE,
            maxiter=IRR_MAX_ITERATIONS,
        )
    except (RuntimeError, OverflowError, ZeroDivisionError) as e:
        logging.debug(f"IRR did not converge for {list(cash_flows)}: {e}")
        return math.nan
    return float(rate)
