"""
Prometheus Metrics Module

Provides instrumentation for the voting service:
- API requests and durations
- Vote submissions by outcome
- Record store failures

Usage:
    from server.metrics import metrics
    metrics.votes_submitted.labels(outcome="accepted").inc()
"""

from prometheus_client import Counter, Histogram, generate_latest, REGISTRY


class VotingMetrics:
    """Centralized metrics for the voting API"""

    def __init__(self):
        self.api_requests = Counter(
            'voting_api_requests_total',
            'Total API requests',
            ['endpoint', 'method', 'status_code']
        )

        self.api_request_duration = Histogram(
            'voting_api_request_duration_seconds',
            'API request duration',
            ['endpoint', 'method'],
            buckets=[0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10]
        )

        # outcome: accepted, invalid, duplicate, invalid_contestant, error
        self.votes_submitted = Counter(
            'voting_votes_submitted_total',
            'Vote submissions by outcome',
            ['outcome']
        )

        self.store_errors = Counter(
            'voting_store_errors_total',
            'Record store failures surfaced to callers',
            ['table', 'operation']
        )

    def record_store_error(self, error) -> None:
        """Count a StoreError by its table/operation context"""
        self.store_errors.labels(
            table=getattr(error, "table", None) or "unknown",
            operation=getattr(error, "operation", None) or "unknown",
        ).inc()


metrics = VotingMetrics()


def get_metrics_text() -> bytes:
    """Render all registered metrics in Prometheus text format"""
    return generate_latest(REGISTRY)
