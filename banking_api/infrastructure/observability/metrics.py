"""Prometheus metrics for monitoring transaction outcomes and request latency"""

from prometheus_client import Counter, Histogram

# Transaction metrics
transaction_counter = Counter(
    "banking_transactions_total",
    "Deposit and withdrawal requests by outcome",
    ["type", "outcome"],  # committed | account_not_found | transaction_limit | ...
)

transaction_amount_histogram = Histogram(
    "banking_transaction_amount",
    "Amounts of committed transactions",
    ["type"],
    buckets=[100, 1_000, 5_000, 10_000, 20_000, 40_000, 100_000],
)

# Account metrics
account_created_counter = Counter(
    "banking_accounts_created_total",
    "Account creation requests by outcome",
    ["outcome"],  # created | conflict
)

storage_failure_counter = Counter(
    "banking_storage_failures_total",
    "Ledger store operations that failed",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transaction(transaction_type: str, outcome: str, amount: int | None = None) -> None:
    """Record outcome counters, and the amount distribution for committed transactions"""
    transaction_counter.labels(type=transaction_type, outcome=outcome).inc()
    if outcome == "committed" and amount is not None:
        transaction_amount_histogram.labels(type=transaction_type).observe(amount)


def record_account_created(created: bool) -> None:
    account_created_counter.labels(outcome="created" if created else "conflict").inc()
