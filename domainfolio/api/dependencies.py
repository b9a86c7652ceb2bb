"""Dependency injection for FastAPI endpoints"""

import uuid
from fastapi import HTTPException, Request
from domainfolio.infrastructure.clients.exchange_rates import ExchangeRateClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_exchange_rate_client() -> ExchangeRateClient:
    """Provide exchange rate API client instance"""
    return ExchangeRateClient()


def parse_uuid(value: str, label: str = "ID") -> uuid.UUID:
    """Parse a path/query identifier, rejecting malformed values with 400"""
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} format")
