"""Prometheus metrics for dues collection, loan activity and rule rejections"""

from decimal import Decimal
from prometheus_client import Counter, Histogram

# Dues metrics
payment_marked_counter = Counter(
    "ledger_payments_marked_total",
    "Dues records marked paid or unpaid",
    ["status"],  # paid | unpaid
)

# Loan metrics
loan_granted_counter = Counter(
    "ledger_loans_granted_total",
    "Loans granted to members",
)

loan_principal_histogram = Histogram(
    "ledger_loan_principal",
    "Principal of granted loans",
    buckets=[500, 1000, 2500, 5000, 10000, 25000, 50000],
)

interest_payment_counter = Counter(
    "ledger_interest_payments_total",
    "Interest settlements recorded",
)

interest_collected_counter = Counter(
    "ledger_interest_collected",
    "Interest amount collected",
)

loan_closed_counter = Counter(
    "ledger_loans_closed_total",
    "Loans fully closed (principal and interest settled)",
)

# Rejections
rule_rejection_counter = Counter(
    "ledger_rule_rejections_total",
    "Operations rejected by a ledger rule",
    ["reason"],  # unpaid_interest | already_paid | already_closed | no_interest_due
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payment_marked(paid: bool) -> None:
    payment_marked_counter.labels(status="paid" if paid else "unpaid").inc()


def record_loan_granted(principal: Decimal) -> None:
    loan_granted_counter.inc()
    loan_principal_histogram.observe(float(principal))


def record_interest_payment(amount: Decimal, closed: bool) -> None:
    """Record an interest settlement; a closing payment also counts the closure"""
    interest_payment_counter.inc()
    interest_collected_counter.inc(float(amount))
    if closed:
        loan_closed_counter.inc()
