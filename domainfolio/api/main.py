"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domainfolio.api import ops
from domainfolio.api.dependencies import get_request_id
from domainfolio.api.middleware import RequestIDMiddleware, MetricsMiddleware
from domainfolio.api.v1 import analytics, domains, fees, transactions
from domainfolio.domain.exceptions import DomainException
from domainfolio.infrastructure.observability.logging import setup_logging
from domainfolio.config import settings

setup_logging(settings.log_level)

# (router, tag) pairs mounted under /v1
V1_ROUTERS = (
    (domains.router, "domains"),
    (transactions.router, "transactions"),
    (analytics.router, "analytics"),
    (fees.router, "platform-fees"),
)


async def domain_error_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Engine errors a router did not map itself are client errors, not 500s"""
    logging.warning(f"Unhandled domain error: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Domainfolio",
        description="Domain-name portfolio tracking and financial analytics service",
        version="0.1.0",
    )

    # Request IDs must exist before latency is recorded, so it is added last (runs first)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(DomainException, domain_error_handler)

    app.include_router(ops.router, tags=["ops"])
    for router, tag in V1_ROUTERS:
        app.include_router(router, prefix="/v1", tags=[tag])

    return app


app = create_app()
