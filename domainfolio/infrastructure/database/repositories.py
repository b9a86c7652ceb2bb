"""Data access layer for domains and transactions"""

import uuid
from dataclasses import asdict
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from domainfolio.infrastructure.database.models import DomainRecord, TransactionRecord
from domainfolio.domain.models import (
    Domain,
    DomainStatus,
    InstallmentStatus,
    PaymentPlan,
    PlatformFeeType,
    Transaction,
    TransactionType,
)


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def to_domain(record: DomainRecord) -> Domain:
    """Map a stored row onto the engine's Domain dataclass"""
    return Domain(
        id=str(record.id),
        domain_name=record.domain_name,
        registrar=record.registrar,
        purchase_date=record.purchase_date,
        purchase_cost=record.purchase_cost,
        renewal_cost=record.renewal_cost,
        renewal_cycle=record.renewal_cycle,
        renewal_count=record.renewal_count,
        expiry_date=record.expiry_date,
        status=DomainStatus(record.status),
        sale_date=record.sale_date,
        sale_price=record.sale_price,
        platform_fee=record.platform_fee,
        estimated_value=record.estimated_value,
        tags=list(record.tags or []),
    )


def to_transaction(record: TransactionRecord) -> Transaction:
    """Map a stored row onto the engine's Transaction dataclass"""
    return Transaction(
        id=str(record.id),
        domain_id=str(record.domain_id),
        type=TransactionType(record.type),
        amount=record.amount,
        currency=record.currency,
        date=record.date,
        exchange_rate=record.exchange_rate,
        base_amount=record.base_amount,
        platform_fee=record.platform_fee,
        platform_fee_percentage=record.platform_fee_percentage,
        net_amount=record.net_amount,
        platform=record.platform,
        category=record.category,
        notes=record.notes,
        tax_deductible=record.tax_deductible,
        payment_plan=PaymentPlan(record.payment_plan),
        installment_period=record.installment_period,
        downpayment_amount=record.downpayment_amount,
        installment_amount=record.installment_amount,
        final_payment_amount=record.final_payment_amount,
        paid_periods=record.paid_periods,
        installment_status=InstallmentStatus(record.installment_status) if record.installment_status else None,
        platform_fee_type=PlatformFeeType(record.platform_fee_type) if record.platform_fee_type else None,
        user_input_fee_rate=record.user_input_fee_rate,
        user_input_surcharge_rate=record.user_input_surcharge_rate,
    )


class DomainRepository:
    """Repository for domains"""

    def __init__(self, db: Session):
        self.db = db

    def create_domain(self, user_id: str, fields: Dict[str, Any]) -> DomainRecord:
        """Persist a new domain"""
        db_domain = DomainRecord(user_id=user_id, **{k: _enum_value(v) for k, v in fields.items()})
        self.db.add(db_domain)
        self.db.flush()  # Get ID without committing
        return db_domain

    def get_domain(self, domain_id: uuid.UUID) -> Optional[DomainRecord]:
        return self.db.query(DomainRecord).filter(DomainRecord.id == domain_id).first()

    def list_domains(self, user_id: str) -> List[DomainRecord]:
        """All domains for a user, oldest purchase first"""
        return (
            self.db.query(DomainRecord)
            .filter(DomainRecord.user_id == user_id)
            .order_by(DomainRecord.purchase_date.asc(), DomainRecord.created_at.asc())
            .all()
        )

    def update_domain(self, db_domain: DomainRecord, fields: Dict[str, Any]) -> DomainRecord:
        for key, value in fields.items():
            setattr(db_domain, key, _enum_value(value))
        self.db.flush()
        return db_domain

    def delete_domain(self, db_domain: DomainRecord) -> None:
        self.db.delete(db_domain)
        self.db.flush()


class TransactionRepository:
    """Repository for domain transactions"""

    def __init__(self, db: Session):
        self.db = db

    def create_transaction(self, user_id: str, txn: Transaction) -> TransactionRecord:
        """Persist a transaction whose derived amounts are already filled in"""
        fields = {k: _enum_value(v) for k, v in asdict(txn).items()}
        fields["id"] = uuid.UUID(fields["id"])
        fields["domain_id"] = uuid.UUID(fields["domain_id"])

        db_txn = TransactionRecord(user_id=user_id, **fields)
        self.db.add(db_txn)
        self.db.flush()
        return db_txn

    def get_transaction(self, transaction_id: uuid.UUID) -> Optional[TransactionRecord]:
        return self.db.query(TransactionRecord).filter(TransactionRecord.id == transaction_id).first()

    def list_transactions(self, user_id: str, domain_id: Optional[uuid.UUID] = None) -> List[TransactionRecord]:
        """Transactions for a user (optionally one domain), oldest first"""
        query = self.db.query(TransactionRecord).filter(TransactionRecord.user_id == user_id)
        if domain_id is not None:
            query = query.filter(TransactionRecord.domain_id == domain_id)
        return query.order_by(TransactionRecord.date.asc(), TransactionRecord.created_at.asc()).all()

    def delete_transaction(self, db_txn: TransactionRecord) -> None:
        self.db.delete(db_txn)
        self.db.flush()
