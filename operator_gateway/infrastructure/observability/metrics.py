"""Prometheus metrics for monitoring transaction outcomes, commissions and step failures"""

from decimal import Decimal

from prometheus_client import Counter, Histogram

# Transaction metrics
transaction_counter = Counter(
    "operator_transactions_total",
    "Total transactions executed",
    ["operator", "type", "outcome"],  # outcome: success | failed
)

commission_histogram = Histogram(
    "operator_commission_amount",
    "Total commission charged per transaction (currency units)",
    buckets=[0, 100, 500, 1000, 5000, 10000, 50000, 100000],
)

step_failure_counter = Counter(
    "operator_step_failures_total",
    "Failed execution steps",
    ["step"],
)

# Capability resolver
resolver_lookup_counter = Counter(
    "operator_resolver_lookups_total",
    "Capability bundle lookups",
    ["operator", "outcome"],  # resolved | unsupported
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transaction(operator: str, transaction_type: str, success: bool, total_commission: Decimal) -> None:
    """Record outcome and commission of one executed transaction"""
    outcome = "success" if success else "failed"
    transaction_counter.labels(operator=operator, type=transaction_type, outcome=outcome).inc()
    if success:
        commission_histogram.observe(float(total_commission))
