"""Prometheus metrics for report volume, fee calculations and exchange-rate fetches"""

from prometheus_client import Counter, Histogram

# Analytics metrics
report_counter = Counter(
    "domainfolio_reports_total",
    "Portfolio reports computed",
    ["kind", "risk_level"],  # kind: stored | adhoc
)

fee_calculation_counter = Counter(
    "domainfolio_platform_fee_calculations_total",
    "Platform fee calculations by fee type",
    ["fee_type"],
)

unsupported_fee_type_counter = Counter(
    "domainfolio_unsupported_fee_type_total",
    "Fee calculations rejected for an unknown platform fee type",
)

# Exchange rate API metrics
exchange_rate_fetch_failures_counter = Counter(
    "exchange_rate_fetch_failures_total",
    "Failed exchange rate API calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_report(kind: str, risk_level: str) -> None:
    report_counter.labels(kind=kind, risk_level=risk_level).inc()


def record_fee_calculation(fee_type: str) -> None:
    fee_calculation_counter.labels(fee_type=fee_type).inc()
