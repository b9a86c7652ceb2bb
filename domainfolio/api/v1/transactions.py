"""/v1/transactions - record and list domain cash movements"""

import uuid
import logging
from dataclasses import asdict
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from domainfolio.api.dependencies import get_exchange_rate_client, get_request_id, parse_uuid
from domainfolio.api.v1.schemas import TransactionCreateRequest, TransactionResponse
from domainfolio.config import settings
from domainfolio.domain.exceptions import ExchangeRateAPIError, ExchangeRateUnavailableError
from domainfolio.domain.transactions import derive_amounts
from domainfolio.infrastructure.clients.exchange_rates import ExchangeRateClient
from domainfolio.infrastructure.database.models import TransactionRecord
from domainfolio.infrastructure.database.session import get_db
from domainfolio.infrastructure.database.repositories import DomainRepository, TransactionRepository, to_transaction
from domainfolio.infrastructure.observability.metrics import exchange_rate_fetch_failures_counter

router = APIRouter()


def _to_response(record: TransactionRecord) -> TransactionResponse:
    return TransactionResponse(user_id=record.user_id, **asdict(to_transaction(record)))


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    request_body: TransactionCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    rate_client: ExchangeRateClient = Depends(get_exchange_rate_client),
):
    """
    Record a transaction against one of the user's domains.

    Flow:
    1. Check the domain exists and belongs to the user
    2. Look up an exchange rate into the reporting currency if none was given
    3. Derive platform fee, net amount and base amount
    4. Persist
    """
    request_id = get_request_id(request)

    domain = DomainRepository(db).get_domain(parse_uuid(request_body.domain_id, "domain ID"))
    if not domain or domain.user_id != request_body.user_id:
        raise HTTPException(status_code=404, detail="Domain not found")

    txn = request_body.to_transaction(str(uuid.uuid4()))

    rate: Optional[float] = None
    if txn.exchange_rate is None and txn.currency != settings.reporting_currency:
        try:
            table = await rate_client.get_rates(settings.reporting_currency)
            rate = table.rate(txn.currency, settings.reporting_currency)
        except ExchangeRateAPIError as e:
            exchange_rate_fetch_failures_counter.inc()
            logging.error(f"Exchange rate API error: {e}", extra={"request_id": request_id})
            raise HTTPException(status_code=503, detail="Exchange rate service unavailable")
        except ExchangeRateUnavailableError as e:
            logging.warning(f"Missing exchange rate: {e}", extra={"request_id": request_id})
            raise HTTPException(status_code=422, detail=str(e))

    txn = derive_amounts(txn, exchange_rate=rate)

    try:
        record = TransactionRepository(db).create_transaction(request_body.user_id, txn)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    db.refresh(record)
    return _to_response(record)


@router.get("/transactions", response_model=List[TransactionResponse])
def list_transactions(
    user_id: str = Query(..., description="Portfolio owner"),
    domain_id: Optional[str] = Query(None, description="Restrict to one domain"),
    db: Session = Depends(get_db),
):
    domain_uuid = parse_uuid(domain_id, "domain ID") if domain_id else None
    records = TransactionRepository(db).list_transactions(user_id, domain_uuid)
    return [_to_response(r) for r in records]


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(transaction_id: str, db: Session = Depends(get_db)):
    repo = TransactionRepository(db)
    record = repo.get_transaction(parse_uuid(transaction_id, "transaction ID"))
    if not record:
        raise HTTPException(status_code=404, detail="Transaction not found")

    repo.delete_transaction(record)
    db.commit()
    return Response(status_code=204)
