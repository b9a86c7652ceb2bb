"""/v1/analytics - portfolio reports, renewal forecasts, annual and tax summaries"""

import time
from dataclasses import asdict
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from domainfolio.api.dependencies import get_request_id
from domainfolio.api.v1.schemas import (
    AdvancedMetricsSchema,
    AnnualMetricsResponse,
    AnnualRenewalSchema,
    DomainPerformanceSchema,
    ExpiredLossSchema,
    PortfolioReportResponse,
    PortfolioRequest,
    RenewalForecastResponse,
    SaleBreakdownSchema,
    TaxSummaryResponse,
)
from domainfolio.config import settings
from domainfolio.domain.holding import multi_year_renewal_cost
from domainfolio.domain.models import PortfolioReport
from domainfolio.domain.portfolio import annual_metrics, build_portfolio_report
from domainfolio.domain.tax import DEFAULT_TAX_RATE, tax_summary
from domainfolio.domain.transactions import analyze_transactions, transactions_in_year
from domainfolio.infrastructure.database.session import get_db
from domainfolio.infrastructure.database.repositories import (
    DomainRepository,
    TransactionRepository,
    to_domain,
    to_transaction,
)
from domainfolio.infrastructure.observability.logging import log_report
from domainfolio.infrastructure.observability.metrics import record_report

router = APIRouter()


def _report_response(report: PortfolioReport, as_of: date, user_id: Optional[str] = None) -> PortfolioReportResponse:
    metrics = asdict(report.metrics)
    metrics["risk_level"] = report.metrics.risk_level.value

    return PortfolioReportResponse(
        user_id=user_id,
        as_of=as_of,
        metrics=AdvancedMetricsSchema(**metrics),
        performance=[DomainPerformanceSchema.from_performance(p) for p in report.performance],
        success_rate=report.success_rate,
        expired_loss=ExpiredLossSchema.model_validate(report.expired_loss, from_attributes=True),
    )


@router.post("/analytics/portfolio", response_model=PortfolioReportResponse)
def analyze_portfolio(request_body: PortfolioRequest, request: Request):
    """
    Compute a portfolio report over domains and transactions supplied in the body.

    Nothing is read from or written to the database.
    """
    start_time = time.time()
    as_of = request_body.as_of or date.today()

    domains = [d.to_domain(d.id) for d in request_body.domains]
    transactions = [t.to_transaction(t.id) for t in request_body.transactions]
    report = build_portfolio_report(domains, transactions, as_of=as_of, risk_free_rate=settings.risk_free_rate)

    risk = report.metrics.risk_level.value
    record_report("adhoc", risk)
    log_report(
        get_request_id(request),
        "anonymous",
        len(domains),
        len(transactions),
        risk,
        (time.time() - start_time) * 1000,
    )
    return _report_response(report, as_of)


@router.get("/analytics/portfolio/{user_id}", response_model=PortfolioReportResponse)
def get_portfolio_report(
    user_id: str,
    request: Request,
    as_of: Optional[date] = Query(None, description="Reporting date (default today)"),
    db: Session = Depends(get_db),
):
    """Compute a portfolio report over a user's stored domains and transactions"""
    start_time = time.time()
    as_of = as_of or date.today()

    domains = [to_domain(r) for r in DomainRepository(db).list_domains(user_id)]
    transactions = [to_transaction(r) for r in TransactionRepository(db).list_transactions(user_id)]
    report = build_portfolio_report(domains, transactions, as_of=as_of, risk_free_rate=settings.risk_free_rate)

    risk = report.metrics.risk_level.value
    record_report("stored", risk)
    log_report(
        get_request_id(request),
        user_id,
        len(domains),
        len(transactions),
        risk,
        (time.time() - start_time) * 1000,
    )
    return _report_response(report, as_of, user_id)


@router.get("/analytics/renewals/{user_id}", response_model=RenewalForecastResponse)
def get_renewal_forecast(
    user_id: str,
    year: Optional[int] = Query(None, description="First forecast year (default this year)"),
    years: int = Query(1, ge=1, le=10, description="Number of years to forecast"),
    as_of: Optional[date] = Query(None, description="Date years_until_renewal is measured from (default today)"),
    db: Session = Depends(get_db),
):
    """Renewal spend per year for the user's active domains"""
    domains = [to_domain(r) for r in DomainRepository(db).list_domains(user_id)]
    forecast = multi_year_renewal_cost(domains, years=years, start_year=year, as_of=as_of)

    return RenewalForecastResponse(
        user_id=user_id,
        years=[AnnualRenewalSchema.model_validate(cost, from_attributes=True) for cost in forecast.values()],
    )


def _load_transactions(db: Session, user_id: str):
    return [to_transaction(r) for r in TransactionRepository(db).list_transactions(user_id)]


@router.get("/analytics/annual/{user_id}", response_model=AnnualMetricsResponse)
def get_annual_metrics(
    user_id: str,
    year: Optional[int] = Query(None, description="Calendar year (default this year)"),
    db: Session = Depends(get_db),
):
    """Sales, revenue, costs and platform fees booked in one calendar year"""
    year = year or date.today().year
    transactions = _load_transactions(db, user_id)

    metrics = annual_metrics(transactions, year)
    sales = analyze_transactions(transactions_in_year(transactions, year)).sales

    return AnnualMetricsResponse(
        user_id=user_id,
        sales=[SaleBreakdownSchema(**asdict(s)) for s in sales],
        **asdict(metrics),
    )


@router.get("/analytics/tax/{user_id}", response_model=TaxSummaryResponse)
def get_tax_summary(
    user_id: str,
    year: Optional[int] = Query(None, description="Tax year (default this year)"),
    tax_rate: float = Query(DEFAULT_TAX_RATE, ge=0, le=100, description="Tax rate in percent"),
    db: Session = Depends(get_db),
):
    """Taxable income, deductible expenses, estimated tax and capital gains for one year"""
    domains = [to_domain(r) for r in DomainRepository(db).list_domains(user_id)]
    summary = tax_summary(domains, _load_transactions(db, user_id), year=year, tax_rate=tax_rate)

    return TaxSummaryResponse(user_id=user_id, **asdict(summary))
