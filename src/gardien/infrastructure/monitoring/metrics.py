"""
Prometheus metrics collection.
"""

from prometheus_client import Counter, Gauge, Histogram

# ============================================================
# HTTP Metrics
# ============================================================

http_requests_total = Counter(
    "gardien_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

# ============================================================
# Challenge Metrics
# ============================================================

challenges_issued_total = Counter(
    "gardien_challenges_issued_total",
    "Total challenges issued",
)

challenges_consumed_total = Counter(
    "gardien_challenges_consumed_total",
    "Total challenge consumption attempts",
    ["outcome"],
)

challenges_swept_total = Counter(
    "gardien_challenges_swept_total",
    "Total outstanding challenges invalidated by expiry sweeps",
)

outstanding_challenges = Gauge(
    "gardien_outstanding_challenges",
    "Challenges issued and not yet consumed or swept",
)

# ============================================================
# Verification Metrics
# ============================================================

verifications_total = Counter(
    "gardien_verifications_total",
    "Total verification attempts",
    ["outcome"],
)

verification_duration_seconds = Histogram(
    "gardien_verification_duration_seconds",
    "Verification duration in seconds",
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

# ============================================================
# Blockchain Metrics
# ============================================================

rpc_requests_total = Counter(
    "gardien_rpc_requests_total",
    "Total JSON-RPC requests",
    ["method", "status"],
)
