"""
Platform installment-fee calculator.

Converts between what a seller nets from a sale and what the buyer pays,
under each marketplace's fee rules:

- standard: flat commission, 15% unless a custom rate is given
- afternic_installment: service-fee rate stepped by installment period
- atom_installment: surcharge stepped by period, 65% to seller / 35% to platform
- spaceship_installment: flat 5%
- escrow_installment: fixed escrow fee plus domain holding fee
"""

from typing import List, Optional, Tuple, Union

from domainfolio.domain.exceptions import UnsupportedFeeTypeError
from domainfolio.domain.models import (
    PlatformFeeBreakdown,
    PlatformFeeConfig,
    PlatformFeeResult,
    PlatformFeeType,
)

DEFAULT_STANDARD_FEE_RATE = 0.15
SPACESHIP_FEE_RATE = 0.05

# (max period inclusive, rate); periods beyond the last tier reuse its rate
AFTERNIC_SERVICE_FEE_TIERS: List[Tuple[int, float]] = [
    (12, 0.0),
    (24, 0.10),
    (36, 0.20),
    (60, 0.30),
]
ATOM_SURCHARGE_TIERS: List[Tuple[int, float]] = [
    (12, 0.10),
    (24, 0.15),
    (36, 0.20),
    (48, 0.25),
]
ATOM_SELLER_SURCHARGE_SHARE = 0.65
ATOM_PLATFORM_SURCHARGE_SHARE = 0.35


def tiered_rate(period: int, tiers: List[Tuple[int, float]]) -> float:
    for max_period, rate in tiers:
        if period <= max_period:
            return rate
    return tiers[-1][1]


def afternic_service_fee_rate(installment_period: int) -> float:
    return tiered_rate(installment_period, AFTERNIC_SERVICE_FEE_TIERS)


def atom_surcharge_rate(installment_period: int) -> float:
    return tiered_rate(installment_period, ATOM_SURCHARGE_TIERS)


def _ratio(part: float, whole: float) -> float:
    return part / whole if whole else 0.0


def _standard_fee(seller_amount: float, fee_rate: float) -> PlatformFeeResult:
    customer_total = seller_amount / (1 - fee_rate)
    platform_fee = customer_total - seller_amount

    return PlatformFeeResult(
        customer_total_amount=customer_total,
        platform_fee=platform_fee,
        platform_fee_rate=fee_rate,
        seller_net_amount=seller_amount,
        breakdown=PlatformFeeBreakdown(base_amount=customer_total, fee_amount=platform_fee),
    )


def _afternic_fee(seller_amount: float, installment_period: int, user_rate: Optional[float]) -> PlatformFeeResult:
    rate = user_rate if user_rate is not None else afternic_service_fee_rate(installment_period)
    result = _standard_fee(seller_amount, rate)
    result.breakdown.service_fee_rate = rate
    return result


def _atom_fee(seller_amount: float, installment_period: int, user_rate: Optional[float]) -> PlatformFeeResult:
    rate = user_rate if user_rate is not None else atom_surcharge_rate(installment_period)

    # Seller keeps their share of the surcharge, so solve for the pre-surcharge price
    base_amount = seller_amount / (1 + rate * ATOM_SELLER_SURCHARGE_SHARE)
    surcharge = base_amount * rate
    customer_total = base_amount + surcharge
    platform_fee = surcharge * ATOM_PLATFORM_SURCHARGE_SHARE

    return PlatformFeeResult(
        customer_total_amount=customer_total,
        platform_fee=platform_fee,
        platform_fee_rate=_ratio(platform_fee, customer_total),
        seller_net_amount=seller_amount,
        breakdown=PlatformFeeBreakdown(
            base_amount=base_amount,
            fee_amount=platform_fee,
            surcharge_amount=surcharge,
            surcharge_rate=rate,
        ),
    )


def _escrow_fee(seller_amount: float, escrow_fee: float, domain_holding_fee: float) -> PlatformFeeResult:
    total_fees = escrow_fee + domain_holding_fee
    customer_total = seller_amount + total_fees

    return PlatformFeeResult(
        customer_total_amount=customer_total,
        platform_fee=total_fees,
        platform_fee_rate=_ratio(total_fees, customer_total),
        seller_net_amount=seller_amount,
        breakdown=PlatformFeeBreakdown(base_amount=seller_amount, fee_amount=total_fees),
    )


def parse_fee_type(fee_type: Union[str, PlatformFeeType]) -> PlatformFeeType:
    try:
        return PlatformFeeType(fee_type)
    except ValueError:
        raise UnsupportedFeeTypeError(fee_type) from None


def calculate_platform_fee(config: PlatformFeeConfig) -> PlatformFeeResult:
    """
    Compute what the customer pays and what the platform keeps for a seller amount.

    Raises:
        UnsupportedFeeTypeError: fee_type is not one of PlatformFeeType
    """
    fee_type = parse_fee_type(config.fee_type)

    if fee_type == PlatformFeeType.STANDARD:
        rate = config.custom_fee_rate if config.custom_fee_rate is not None else DEFAULT_STANDARD_FEE_RATE
        return _standard_fee(config.seller_amount, rate)
    elif fee_type == PlatformFeeType.AFTERNIC_INSTALLMENT:
        return _afternic_fee(config.seller_amount, config.installment_period, config.user_input_fee_rate)
    elif fee_type == PlatformFeeType.ATOM_INSTALLMENT:
        return _atom_fee(config.seller_amount, config.installment_period, config.user_input_surcharge_rate)
    elif fee_type == PlatformFeeType.SPACESHIP_INSTALLMENT:
        return _standard_fee(config.seller_amount, SPACESHIP_FEE_RATE)
    else:
        return _escrow_fee(config.seller_amount, config.escrow_fee or 0.0, config.domain_holding_fee or 0.0)


def customer_total_from_installment(
    installment_amount: float,
    installment_period: int,
    fee_type: Union[str, PlatformFeeType],
    custom_fee_rate: Optional[float] = None,
    escrow_fee: Optional[float] = None,
    domain_holding_fee: Optional[float] = None,
    user_input_fee_rate: Optional[float] = None,
    user_input_surcharge_rate: Optional[float] = None,
) -> PlatformFeeResult:
    """Fee structure for the full contracted plan: seller amount = per-period amount x periods"""
    return calculate_platform_fee(
        PlatformFeeConfig(
            fee_type=fee_type,
            installment_period=installment_period,
            seller_amount=installment_amount * installment_period,
            custom_fee_rate=custom_fee_rate,
            escrow_fee=escrow_fee,
            domain_holding_fee=domain_holding_fee,
            user_input_fee_rate=user_input_fee_rate,
            user_input_surcharge_rate=user_input_surcharge_rate,
        )
    )


def paid_amount_from_installment(
    installment_amount: float,
    paid_periods: int,
    fee_type: Union[str, PlatformFeeType],
    custom_fee_rate: Optional[float] = None,
    escrow_fee: Optional[float] = None,
    domain_holding_fee: Optional[float] = None,
    user_input_fee_rate: Optional[float] = None,
    user_input_surcharge_rate: Optional[float] = None,
) -> PlatformFeeResult:
    """
    Fee structure for the periods actually paid so far.

    The rate tier is picked from paid_periods, not the contracted period, so
    the effective rate can step up as more periods are paid. Historical
    reported amounts depend on this.
    """
    return calculate_platform_fee(
        PlatformFeeConfig(
            fee_type=fee_type,
            installment_period=paid_periods,
            seller_amount=installment_amount * paid_periods,
            custom_fee_rate=custom_fee_rate,
            escrow_fee=escrow_fee,
            domain_holding_fee=domain_holding_fee,
            user_input_fee_rate=user_input_fee_rate,
            user_input_surcharge_rate=user_input_surcharge_rate,
        )
    )
