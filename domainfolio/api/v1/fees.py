"""/v1/platform-fees - marketplace fee and installment calculators"""

import logging
from fastapi import APIRouter, HTTPException, Request

from domainfolio.api.dependencies import get_request_id
from domainfolio.api.v1.schemas import InstallmentFeeRequest, PlatformFeeRequest, PlatformFeeResponse
from domainfolio.domain.exceptions import UnsupportedFeeTypeError
from domainfolio.domain.models import PlatformFeeConfig
from domainfolio.domain.platform_fees import (
    calculate_platform_fee,
    customer_total_from_installment,
    paid_amount_from_installment,
)
from domainfolio.infrastructure.observability.metrics import record_fee_calculation, unsupported_fee_type_counter

router = APIRouter()


def _reject_fee_type(e: UnsupportedFeeTypeError, request_id: str) -> HTTPException:
    unsupported_fee_type_counter.inc()
    logging.warning(str(e), extra={"request_id": request_id, "fee_type": str(e.fee_type)})
    return HTTPException(status_code=422, detail=str(e))


@router.post("/platform-fees", response_model=PlatformFeeResponse)
def calculate_fee(request_body: PlatformFeeRequest, request: Request):
    """Customer total, platform fee and seller net for a seller amount"""
    try:
        result = calculate_platform_fee(PlatformFeeConfig(**request_body.model_dump()))
    except UnsupportedFeeTypeError as e:
        raise _reject_fee_type(e, get_request_id(request))

    record_fee_calculation(request_body.fee_type)
    return PlatformFeeResponse.from_result(result)


@router.post("/platform-fees/installment", response_model=PlatformFeeResponse)
def calculate_installment_fee(request_body: InstallmentFeeRequest, request: Request):
    """
    Fee structure for an installment sale.

    mode=planned prices the whole contract from installment_period;
    mode=paid prices only the paid periods, with the rate tier taken from paid_periods.
    """
    overrides = request_body.model_dump(
        include={"custom_fee_rate", "escrow_fee", "domain_holding_fee", "user_input_fee_rate", "user_input_surcharge_rate"}
    )

    try:
        if request_body.mode == "planned":
            result = customer_total_from_installment(
                request_body.installment_amount,
                request_body.installment_period,
                request_body.fee_type,
                **overrides,
            )
        else:
            result = paid_amount_from_installment(
                request_body.installment_amount,
                request_body.paid_periods,
                request_body.fee_type,
                **overrides,
            )
    except UnsupportedFeeTypeError as e:
        raise _reject_fee_type(e, get_request_id(request))

    record_fee_calculation(request_body.fee_type)
    return PlatformFeeResponse.from_result(result)
