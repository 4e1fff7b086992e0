"""
Prometheus Metrics for the sync engine.

DEPENDENCY:
    pip install prometheus-client

METRIC TYPES:
    - Gauge: Value goes up/down (current count, e.g., active subscriptions)
    - Counter: Value only goes up (total count, e.g., fetches)
    - Histogram: Distribution (for percentiles like P95, e.g., fetch latency)

The embedding application exposes them with prometheus_client's
start_http_server() or generate_latest(); the engine only records.
"""

from prometheus_client import Counter, Gauge, Histogram


# =============================================================================
# METRICS DEFINITIONS
# =============================================================================
ACTIVE_SUBSCRIPTIONS = Gauge(
    "chatsync_active_subscriptions", "Number of live cache subscriptions"
)

FETCHES_TOTAL = Counter(
    "chatsync_fetches_total",
    "Total number of backend fetches by entity class and outcome",
    ["entity", "outcome"],  # outcome: success, failure, superseded
)

FETCH_LATENCY = Histogram(
    "chatsync_fetch_latency_seconds",
    "Latency of backend fetches in seconds",
    ["entity"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10],
)

MUTATIONS_TOTAL = Counter(
    "chatsync_mutations_total",
    "Total number of mutations by kind and outcome",
    ["kind", "outcome"],  # outcome: committed, rolled_back, refused
)

ROLLBACKS_SUPPRESSED_TOTAL = Counter(
    "chatsync_rollbacks_suppressed_total",
    "Rollbacks skipped because a later mutation superseded the snapshot",
)
