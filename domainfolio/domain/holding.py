"""Holding-cost model and renewal / expiry analysis for held domains"""

from datetime import date
from typing import Dict, Iterable, List, Optional

from domainfolio.domain.models import (
    AnnualRenewalCost,
    Domain,
    DomainStatus,
    ExpiredDomain,
    ExpiredDomainLoss,
    RenewalInfo,
)
from domainfolio.utils.date_utils import add_years, days_between

DAYS_PER_YEAR = 365.25


def holding_cost(purchase_cost: float, renewal_cost: float, renewal_count: int) -> float:
    """
    Total cost of holding a domain: purchase plus every renewal paid so far.

    Inputs are not validated; negative values are the caller's problem.
    """
    return purchase_cost + renewal_count * renewal_cost


def domain_holding_cost(domain: Domain) -> float:
    return holding_cost(domain.purchase_cost, domain.renewal_cost, domain.renewal_count)


def next_renewal_date(purchase_date: date, renewal_cycle: int, renewal_count: int) -> date:
    return add_years(purchase_date, renewal_count * renewal_cycle + renewal_cycle)


def last_renewal_date(purchase_date: date, renewal_cycle: int, renewal_count: int) -> Optional[date]:
    if renewal_count == 0:
        return None
    return add_years(purchase_date, renewal_count * renewal_cycle)


def years_until(as_of: date, renewal_date: date) -> float:
    """Fractional years from as_of to renewal_date; 0 once the date has passed"""
    return max(0.0, days_between(as_of, renewal_date) / DAYS_PER_YEAR)


def _renewal_info(domain: Domain, target_year: int, as_of: date) -> RenewalInfo:
    # Anything expiring on or before Dec 31 of the target year must be renewed in it
    needs_renewal = domain.expiry_date <= date(target_year, 12, 31)

    if needs_renewal:
        renewal_date = domain.expiry_date
    else:
        renewal_date = next_renewal_date(domain.purchase_date, domain.renewal_cycle, domain.renewal_count)

    return RenewalInfo(
        domain_id=domain.id,
        domain_name=domain.domain_name,
        renewal_cost=domain.renewal_cost,
        renewal_cycle=domain.renewal_cycle,
        next_renewal_date=renewal_date,
        needs_renewal_this_year=needs_renewal,
        years_until_renewal=years_until(as_of, renewal_date),
        last_renewal_date=last_renewal_date(domain.purchase_date, domain.renewal_cycle, domain.renewal_count),
    )


def annual_renewal_cost(
    domains: Iterable[Domain],
    target_year: int,
    as_of: date | None = None,
) -> AnnualRenewalCost:
    """
    Renewal spend for active domains in a calendar year.

    Domains without an expiry date are skipped. Costs are grouped by renewal
    cycle (years) and by the month the renewal falls due. years_until_renewal
    is measured from as_of (default today).
    """
    if as_of is None:
        as_of = date.today()

    needing: List[RenewalInfo] = []
    not_needing: List[RenewalInfo] = []
    cost_by_cycle: Dict[int, float] = {}
    monthly: Dict[int, float] = {month: 0.0 for month in range(1, 13)}

    for domain in domains:
        if domain.status != DomainStatus.ACTIVE or domain.expiry_date is None:
            continue

        info = _renewal_info(domain, target_year, as_of)
        if info.needs_renewal_this_year:
            needing.append(info)
            cost_by_cycle[info.renewal_cycle] = cost_by_cycle.get(info.renewal_cycle, 0.0) + info.renewal_cost
            monthly[info.next_renewal_date.month] += info.renewal_cost
        else:
            not_needing.append(info)

    return AnnualRenewalCost(
        year=target_year,
        total_annual_cost=sum(info.renewal_cost for info in needing),
        domains_needing_renewal=needing,
        domains_not_needing_renewal=not_needing,
        cost_by_cycle=cost_by_cycle,
        monthly_distribution=monthly,
    )


def multi_year_renewal_cost(
    domains: List[Domain],
    years: int = 5,
    start_year: int | None = None,
    as_of: date | None = None,
) -> Dict[int, AnnualRenewalCost]:
    """Annual renewal cost for `years` consecutive years starting at start_year (default: this year)"""
    if as_of is None:
        as_of = date.today()
    if start_year is None:
        start_year = as_of.year
    return {year: annual_renewal_cost(domains, year, as_of) for year in range(start_year, start_year + years)}


def expired_domain_loss(domains: Iterable[Domain], as_of: date | None = None) -> ExpiredDomainLoss:
    """
    Sum the holding cost of domains that lapsed.

    A domain counts as lapsed when its status is expired, or when its expiry
    date has passed and it was never sold. Domains with no expiry date or a
    zero holding cost are ignored.
    """
    if as_of is None:
        as_of = date.today()

    expired: List[ExpiredDomain] = []
    loss_by_year: Dict[int, float] = {}

    for domain in domains:
        if domain.expiry_date is None:
            continue

        if domain.status == DomainStatus.EXPIRED:
            lapsed = True
        else:
            lapsed = domain.expiry_date < as_of and domain.status != DomainStatus.SOLD

        if not lapsed:
            continue

        investment = domain_holding_cost(domain)
        if investment <= 0:
            continue

        year = domain.expiry_date.year
        expired.append(
            ExpiredDomain(
                domain_name=domain.domain_name,
                total_investment=investment,
                expiry_date=domain.expiry_date,
                loss_year=year,
            )
        )
        loss_by_year[year] = loss_by_year.get(year, 0.0) + investment

    return ExpiredDomainLoss(
        total_loss=sum(loss_by_year.values()),
        loss_by_year=dict(sorted(loss_by_year.items())),
        expired_domains=expired,
    )
