"""Domain models - pure Python dataclasses representing portfolio entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional


class DomainStatus(str, Enum):
    ACTIVE = "active"
    FOR_SALE = "for_sale"
    SOLD = "sold"
    EXPIRED = "expired"


class TransactionType(str, Enum):
    BUY = "buy"
    RENEW = "renew"
    SELL = "sell"
    TRANSFER = "transfer"
    FEE = "fee"
    MARKETING = "marketing"
    ADVERTISING = "advertising"


class PaymentPlan(str, Enum):
    LUMP_SUM = "lump_sum"
    INSTALLMENT = "installment"


class InstallmentStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    PAUSED = "paused"


class PlatformFeeType(str, Enum):
    STANDARD = "standard"
    AFTERNIC_INSTALLMENT = "afternic_installment"
    ATOM_INSTALLMENT = "atom_installment"
    SPACESHIP_INSTALLMENT = "spaceship_installment"
    ESCROW_INSTALLMENT = "escrow_installment"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class RevenueSource(str, Enum):
    """Which branch of the revenue fallback chain produced a domain's revenue"""

    SALE_PRICE = "sale_price"
    ESTIMATED_VALUE = "estimated_value"
    TRANSACTIONS = "transactions"


@dataclass(frozen=True)
class Domain:
    """A held or disposed domain-name asset"""

    id: str
    domain_name: str
    purchase_date: date
    purchase_cost: float
    renewal_cost: float
    renewal_count: int = 0
    renewal_cycle: int = 1  # years
    status: DomainStatus = DomainStatus.ACTIVE
    expiry_date: Optional[date] = None
    sale_date: Optional[date] = None
    sale_price: Optional[float] = None
    platform_fee: Optional[float] = None
    estimated_value: Optional[float] = None
    registrar: Optional[str] = None
    tags: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Transaction:
    """Dated cash movement tied to exactly one domain"""

    id: str
    domain_id: str
    type: TransactionType
    amount: float
    date: date
    currency: str = "USD"
    exchange_rate: Optional[float] = None
    base_amount: Optional[float] = None
    platform_fee: Optional[float] = None
    platform_fee_percentage: Optional[float] = None
    net_amount: Optional[float] = None
    platform: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    tax_deductible: bool = False

    # Installment extension, only meaningful when payment_plan is INSTALLMENT
    payment_plan: PaymentPlan = PaymentPlan.LUMP_SUM
    installment_period: Optional[int] = None
    downpayment_amount: Optional[float] = None
    installment_amount: Optional[float] = None
    final_payment_amount: Optional[float] = None
    paid_periods: Optional[int] = None
    installment_status: Optional[InstallmentStatus] = None
    platform_fee_type: Optional[PlatformFeeType] = None
    user_input_fee_rate: Optional[float] = None
    user_input_surcharge_rate: Optional[float] = None


@dataclass
class BasicFinancialMetrics:
    """Portfolio totals derived from holding costs and sell transactions"""

    total_investment: float
    total_revenue: float
    total_profit: float
    roi: float
    profit_margin: float


@dataclass
class AdvancedFinancialMetrics(BasicFinancialMetrics):
    """Basic metrics plus return, risk and performer statistics (percent-scaled)"""

    annualized_return: float
    sharpe_ratio: float
    max_drawdown: float
    volatility: float
    win_rate: float
    avg_holding_period: float
    best_performing_domain: str
    worst_performing_domain: str
    risk_level: RiskLevel


@dataclass
class DomainPerformance:
    """Profitability of a single domain"""

    domain: Domain
    total_cost: float
    revenue: float
    profit: float
    roi: float
    revenue_source: RevenueSource


@dataclass
class PlatformFeeConfig:
    """Inputs for converting a seller amount into a customer-facing total"""

    fee_type: str
    installment_period: int
    seller_amount: float
    custom_fee_rate: Optional[float] = None
    escrow_fee: Optional[float] = None
    domain_holding_fee: Optional[float] = None
    user_input_fee_rate: Optional[float] = None
    user_input_surcharge_rate: Optional[float] = None


@dataclass
class PlatformFeeBreakdown:
    base_amount: float
    fee_amount: float
    surcharge_amount: Optional[float] = None
    surcharge_rate: Optional[float] = None
    service_fee_rate: Optional[float] = None


@dataclass
class PlatformFeeResult:
    """Output of the platform fee calculator"""

    customer_total_amount: float
    platform_fee: float
    platform_fee_rate: float
    seller_net_amount: float
    breakdown: PlatformFeeBreakdown


@dataclass
class RenewalInfo:
    domain_id: str
    domain_name: str
    renewal_cost: float
    renewal_cycle: int
    next_renewal_date: date
    needs_renewal_this_year: bool
    years_until_renewal: float = 0.0
    last_renewal_date: Optional[date] = None


@dataclass
class AnnualRenewalCost:
    """Renewal spend expected within one calendar year"""

    year: int
    total_annual_cost: float
    domains_needing_renewal: List[RenewalInfo]
    domains_not_needing_renewal: List[RenewalInfo]
    cost_by_cycle: Dict[int, float]
    monthly_distribution: Dict[int, float]  # month (1-12) -> cost


@dataclass
class ExpiredDomain:
    domain_name: str
    total_investment: float
    expiry_date: date
    loss_year: int


@dataclass
class ExpiredDomainLoss:
    """Sunk holding cost of domains that lapsed without being sold"""

    total_loss: float
    loss_by_year: Dict[int, float]
    expired_domains: List[ExpiredDomain]


@dataclass
class PortfolioReport:
    """Everything the analytics views render for one portfolio"""

    metrics: AdvancedFinancialMetrics
    performance: List[DomainPerformance]
    success_rate: float
    expired_loss: ExpiredDomainLoss


@dataclass
class SaleBreakdown:
    """One sell transaction split into gross, platform fee and net"""

    transaction_id: str
    domain_id: str
    gross_amount: float
    platform_fee: float
    net_amount: float
    date: date
    platform: Optional[str] = None


@dataclass
class TransactionAnalysis:
    sales: List[SaleBreakdown]
    costs: List[Transaction]
    total_platform_fees: float
    total_sales: float
    total_revenue: float


@dataclass
class AnnualMetrics:
    """Cash results of one calendar year, from transactions only"""

    year: int
    annual_sales: float
    annual_revenue: float
    annual_costs: float
    annual_profit: float
    annual_platform_fees: float


@dataclass
class CapitalGain:
    domain_name: str
    purchase_price: float
    sale_price: float
    holding_period: int  # days
    gain: float
    is_long_term: bool


@dataclass
class ExpenseCategory:
    category: str
    amount: float
    count: int


@dataclass
class TaxSummary:
    """Income, deductible expenses and estimated tax for one calendar year"""

    year: int
    tax_rate: float  # percent
    total_income: float
    total_deductible_expenses: float
    total_non_deductible_expenses: float
    net_income: float
    estimated_tax: float
    capital_gains: List[CapitalGain]
    business_expenses: List[ExpenseCategory]
