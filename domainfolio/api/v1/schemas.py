"""Pydantic schemas for API request/response validation"""

import math
from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from domainfolio.domain.models import (
    Domain,
    DomainPerformance,
    DomainStatus,
    InstallmentStatus,
    PaymentPlan,
    PlatformFeeResult,
    PlatformFeeType,
    Transaction,
    TransactionType,
)


class DomainFields(BaseModel):
    """Editable domain attributes"""

    domain_name: str = Field(..., min_length=1, description="Fully qualified domain name")
    registrar: Optional[str] = None
    purchase_date: date
    purchase_cost: float = Field(0.0, ge=0)
    renewal_cost: float = Field(0.0, ge=0)
    renewal_cycle: int = Field(1, ge=1, description="Renewal cycle in years")
    renewal_count: int = Field(0, ge=0)
    expiry_date: Optional[date] = None
    status: DomainStatus = DomainStatus.ACTIVE
    sale_date: Optional[date] = None
    sale_price: Optional[float] = Field(None, ge=0)
    platform_fee: Optional[float] = Field(None, ge=0)
    estimated_value: Optional[float] = Field(None, ge=0)
    tags: List[str] = Field(default_factory=list)

    def to_domain(self, domain_id: str) -> Domain:
        return Domain(id=domain_id, **self.model_dump())


class DomainCreateRequest(DomainFields):
    """Request body for POST /v1/domains"""

    user_id: str = Field(..., min_length=1, description="Portfolio owner")


class DomainResponse(DomainFields):
    id: str
    user_id: str


class TransactionFields(BaseModel):
    """Transaction attributes as entered by the user"""

    domain_id: str
    type: TransactionType
    amount: float = Field(..., ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    date: date
    exchange_rate: Optional[float] = Field(None, gt=0)
    base_amount: Optional[float] = None
    platform_fee: Optional[float] = Field(None, ge=0)
    platform_fee_percentage: Optional[float] = Field(None, ge=0, le=100)
    net_amount: Optional[float] = None
    platform: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    tax_deductible: bool = False

    payment_plan: PaymentPlan = PaymentPlan.LUMP_SUM
    installment_period: Optional[int] = Field(None, ge=1)
    downpayment_amount: Optional[float] = Field(None, ge=0)
    installment_amount: Optional[float] = Field(None, ge=0)
    final_payment_amount: Optional[float] = Field(None, ge=0)
    paid_periods: Optional[int] = Field(None, ge=0)
    installment_status: Optional[InstallmentStatus] = None
    platform_fee_type: Optional[PlatformFeeType] = None
    user_input_fee_rate: Optional[float] = Field(None, ge=0, lt=1)
    user_input_surcharge_rate: Optional[float] = Field(None, ge=0)

    def to_transaction(self, transaction_id: str) -> Transaction:
        fields = self.model_dump()
        fields["currency"] = fields["currency"].upper()
        return Transaction(id=transaction_id, **fields)


class TransactionCreateRequest(TransactionFields):
    """Request body for POST /v1/transactions"""

    user_id: str = Field(..., min_length=1)


class TransactionResponse(TransactionFields):
    id: str
    user_id: str


class PortfolioDomain(DomainFields):
    id: str


class PortfolioTransaction(TransactionFields):
    id: str


class PortfolioRequest(BaseModel):
    """Request body for POST /v1/analytics/portfolio"""

    domains: List[PortfolioDomain] = Field(default_factory=list)
    transactions: List[PortfolioTransaction] = Field(default_factory=list)
    as_of: Optional[date] = None


class AdvancedMetricsSchema(BaseModel):
    total_investment: float
    total_revenue: float
    total_profit: float
    roi: float
    profit_margin: float
    annualized_return: Optional[float] = Field(None, description="Percent; null when the growth rate is unbounded")
    sharpe_ratio: Optional[float] = None
    max_drawdown: float
    volatility: float
    win_rate: float
    avg_holding_period: float
    best_performing_domain: str
    worst_performing_domain: str
    risk_level: str

    @field_validator("annualized_return", "sharpe_ratio", mode="before")
    @classmethod
    def _finite_or_null(cls, value: Optional[float]) -> Optional[float]:
        # JSON has no infinity; a huge gain over a few days compounds to math.inf
        return value if value is not None and math.isfinite(value) else None


class DomainPerformanceSchema(BaseModel):
    domain_id: str
    domain_name: str
    total_cost: float
    revenue: float
    profit: float
    roi: float
    revenue_source: str

    @classmethod
    def from_performance(cls, perf: DomainPerformance) -> "DomainPerformanceSchema":
        return cls(
            domain_id=perf.domain.id,
            domain_name=perf.domain.domain_name,
            total_cost=perf.total_cost,
            revenue=perf.revenue,
            profit=perf.profit,
            roi=perf.roi,
            revenue_source=perf.revenue_source.value,
        )


class ExpiredDomainSchema(BaseModel):
    domain_name: str
    total_investment: float
    expiry_date: date
    loss_year: int


class ExpiredLossSchema(BaseModel):
    total_loss: float
    loss_by_year: Dict[int, float]
    expired_domains: List[ExpiredDomainSchema]


class PortfolioReportResponse(BaseModel):
    """Response for the portfolio analytics endpoints"""

    user_id: Optional[str] = None
    as_of: date
    metrics: AdvancedMetricsSchema
    performance: List[DomainPerformanceSchema]
    success_rate: float
    expired_loss: ExpiredLossSchema


class RenewalInfoSchema(BaseModel):
    domain_id: str
    domain_name: str
    renewal_cost: float
    renewal_cycle: int
    next_renewal_date: date
    needs_renewal_this_year: bool
    years_until_renewal: float
    last_renewal_date: Optional[date] = None


class AnnualRenewalSchema(BaseModel):
    year: int
    total_annual_cost: float
    domains_needing_renewal: List[RenewalInfoSchema]
    domains_not_needing_renewal: List[RenewalInfoSchema]
    cost_by_cycle: Dict[int, float]
    monthly_distribution: Dict[int, float]


class RenewalForecastResponse(BaseModel):
    user_id: str
    years: List[AnnualRenewalSchema]


class CapitalGainSchema(BaseModel):
    domain_name: str
    purchase_price: float
    sale_price: float
    holding_period: int
    gain: float
    is_long_term: bool


class ExpenseCategorySchema(BaseModel):
    category: str
    amount: float
    count: int


class TaxSummaryResponse(BaseModel):
    """Response for GET /v1/analytics/tax/{user_id}"""

    user_id: str
    year: int
    tax_rate: float
    total_income: float
    total_deductible_expenses: float
    total_non_deductible_expenses: float
    net_income: float
    estimated_tax: float
    capital_gains: List[CapitalGainSchema]
    business_expenses: List[ExpenseCategorySchema]


class SaleBreakdownSchema(BaseModel):
    transaction_id: str
    domain_id: str
    gross_amount: float
    platform_fee: float
    net_amount: float
    date: date
    platform: Optional[str] = None


class AnnualMetricsResponse(BaseModel):
    """Response for GET /v1/analytics/annual/{user_id}"""

    user_id: str
    year: int
    annual_sales: float
    annual_revenue: float
    annual_costs: float
    annual_profit: float
    annual_platform_fees: float
    sales: List[SaleBreakdownSchema]


class FeeOverrides(BaseModel):
    custom_fee_rate: Optional[float] = Field(None, ge=0, lt=1)
    escrow_fee: Optional[float] = None
    domain_holding_fee: Optional[float] = None
    user_input_fee_rate: Optional[float] = Field(None, ge=0, lt=1)
    user_input_surcharge_rate: Optional[float] = Field(None, ge=0)


class PlatformFeeRequest(FeeOverrides):
    """Request body for POST /v1/platform-fees"""

    fee_type: str = Field(..., description="One of the supported platform fee types")
    installment_period: int = 1
    seller_amount: float


class InstallmentFeeRequest(FeeOverrides):
    """Request body for POST /v1/platform-fees/installment"""

    fee_type: str
    installment_amount: float
    installment_period: int = 1
    paid_periods: int = 0
    mode: Literal["planned", "paid"] = "planned"


class PlatformFeeBreakdownSchema(BaseModel):
    base_amount: float
    fee_amount: float
    surcharge_amount: Optional[float] = None
    surcharge_rate: Optional[float] = None
    service_fee_rate: Optional[float] = None


class PlatformFeeResponse(BaseModel):
    customer_total_amount: float
    platform_fee: float
    platform_fee_rate: float
    seller_net_amount: float
    breakdown: PlatformFeeBreakdownSchema

    @classmethod
    def from_result(cls, result: PlatformFeeResult) -> "PlatformFeeResponse":
        return cls.model_validate(result, from_attributes=True)
