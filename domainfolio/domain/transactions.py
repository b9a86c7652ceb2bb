"""Per-transaction amount helpers: platform fees, net amounts, currency conversion"""

from dataclasses import replace
from typing import Iterable, List, Optional

from domainfolio.domain.models import (
    PaymentPlan,
    PlatformFeeResult,
    SaleBreakdown,
    Transaction,
    TransactionAnalysis,
    TransactionType,
)
from domainfolio.domain.platform_fees import paid_amount_from_installment

# Transaction types that count as the cost of acquiring and keeping domains
COST_TYPES = frozenset({TransactionType.BUY, TransactionType.RENEW, TransactionType.FEE})


def platform_fee_from_percentage(amount: float, percentage: float = 0.0) -> float:
    return amount * (percentage / 100)


def convert_amount(amount: float, exchange_rate: float = 1.0) -> float:
    return amount * exchange_rate


def net_amount(txn: Transaction) -> float:
    """Recorded net amount, else amount minus platform fee"""
    if txn.net_amount is not None:
        return txn.net_amount
    return txn.amount - (txn.platform_fee or 0.0)


def sale_proceeds(txn: Transaction) -> float:
    """Amount a sell transaction contributes to revenue: net_amount when recorded, else gross amount"""
    return txn.net_amount if txn.net_amount is not None else txn.amount


def is_installment(txn: Transaction) -> bool:
    return txn.payment_plan == PaymentPlan.INSTALLMENT


def remaining_installments(txn: Transaction) -> int:
    if not is_installment(txn):
        return 0
    return max(0, (txn.installment_period or 0) - (txn.paid_periods or 0))


def installment_fee(txn: Transaction) -> Optional[PlatformFeeResult]:
    """
    Platform fee earned so far on an installment sale.

    Returns None unless the transaction is an installment with both a fee
    type and a per-period amount. Uses the paid-periods entry point, so the
    fee tier follows how many periods have been paid.
    """
    if not is_installment(txn) or txn.platform_fee_type is None or txn.installment_amount is None:
        return None

    return paid_amount_from_installment(
        installment_amount=txn.installment_amount,
        paid_periods=txn.paid_periods or 0,
        fee_type=txn.platform_fee_type,
        user_input_fee_rate=txn.user_input_fee_rate,
        user_input_surcharge_rate=txn.user_input_surcharge_rate,
    )


def derive_amounts(txn: Transaction, exchange_rate: Optional[float] = None) -> Transaction:
    """
    Fill in platform_fee, net_amount, exchange_rate and base_amount.

    Explicit values on the transaction win over derived ones; an applicable
    installment fee calculation overrides net_amount and platform_fee.
    """
    fee = txn.platform_fee
    if fee is None and txn.platform_fee_percentage is not None:
        fee = platform_fee_from_percentage(txn.amount, txn.platform_fee_percentage)

    net = txn.net_amount
    if net is None:
        net = txn.amount - (fee or 0.0)

    installment = installment_fee(txn)
    if installment is not None:
        fee = installment.platform_fee
        net = installment.seller_net_amount

    rate = txn.exchange_rate if txn.exchange_rate is not None else exchange_rate
    if rate is None:
        rate = 1.0
    base = txn.base_amount if txn.base_amount is not None else convert_amount(txn.amount, rate)

    return replace(txn, platform_fee=fee, net_amount=net, exchange_rate=rate, base_amount=base)


def transactions_in_year(transactions: Iterable[Transaction], year: int) -> List[Transaction]:
    return [t for t in transactions if t.date.year == year]


def analyze_transactions(transactions: Iterable[Transaction]) -> TransactionAnalysis:
    """Split sales into gross / fee / net and collect cost transactions"""
    sales: List[SaleBreakdown] = []
    costs: List[Transaction] = []

    for txn in transactions:
        if txn.type == TransactionType.SELL:
            sales.append(
                SaleBreakdown(
                    transaction_id=txn.id,
                    domain_id=txn.domain_id,
                    gross_amount=txn.amount,
                    platform_fee=txn.platform_fee or 0.0,
                    net_amount=net_amount(txn),
                    date=txn.date,
                    platform=txn.platform,
                )
            )
        elif txn.type in COST_TYPES:
            costs.append(txn)

    return TransactionAnalysis(
        sales=sales,
        costs=costs,
        total_platform_fees=sum(s.platform_fee for s in sales),
        total_sales=sum(s.gross_amount for s in sales),
        total_revenue=sum(s.net_amount for s in sales),
    )
