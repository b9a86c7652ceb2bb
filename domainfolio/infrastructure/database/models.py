"""SQLAlchemy ORM models for stored portfolios"""

import uuid
from sqlalchemy import Column, Text, Float, Boolean, Date, DateTime, Integer, ForeignKey, JSON, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class DomainRecord(Base):
    """Domain-name asset owned by a user"""

    __tablename__ = "domain"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    domain_name = Column(Text, nullable=False)
    registrar = Column(Text, nullable=True)
    purchase_date = Column(Date, nullable=False)
    purchase_cost = Column(Float, nullable=False, default=0.0)
    renewal_cost = Column(Float, nullable=False, default=0.0)
    renewal_cycle = Column(Integer, nullable=False, default=1)
    renewal_count = Column(Integer, nullable=False, default=0)
    expiry_date = Column(Date, nullable=True)
    status = Column(Text, nullable=False, default="active")
    sale_date = Column(Date, nullable=True)
    sale_price = Column(Float, nullable=True)
    platform_fee = Column(Float, nullable=True)
    estimated_value = Column(Float, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    transactions = relationship("TransactionRecord", back_populates="domain", cascade="all, delete-orphan")


class TransactionRecord(Base):
    """Cash movement tied to one domain"""

    __tablename__ = "domain_transaction"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    domain_id = Column(Uuid(as_uuid=True), ForeignKey("domain.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Text, nullable=False, index=True)
    type = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    currency = Column(Text, nullable=False, default="USD")
    date = Column(Date, nullable=False)
    exchange_rate = Column(Float, nullable=True)
    base_amount = Column(Float, nullable=True)
    platform_fee = Column(Float, nullable=True)
    platform_fee_percentage = Column(Float, nullable=True)
    net_amount = Column(Float, nullable=True)
    platform = Column(Text, nullable=True)
    category = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    tax_deductible = Column(Boolean, nullable=False, default=False)

    payment_plan = Column(Text, nullable=False, default="lump_sum")
    installment_period = Column(Integer, nullable=True)
    downpayment_amount = Column(Float, nullable=True)
    installment_amount = Column(Float, nullable=True)
    final_payment_amount = Column(Float, nullable=True)
    paid_periods = Column(Integer, nullable=True)
    installment_status = Column(Text, nullable=True)
    platform_fee_type = Column(Text, nullable=True)
    user_input_fee_rate = Column(Float, nullable=True)
    user_input_surcharge_rate = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    domain = relationship("DomainRecord", back_populates="transactions")
