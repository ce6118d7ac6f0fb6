from prometheus_client import CollectorRegistry, Counter, write_to_textfile

REGISTRY = CollectorRegistry()

DEPLOYMENT_COUNTER = Counter(
    'stackdeploy_runs_total',
    'Deployment runs by outcome',
    ['outcome'],
    registry=REGISTRY,
)

HEALTH_CHECK_ATTEMPTS = Counter(
    'stackdeploy_health_check_attempts_total',
    'HTTP health check attempts by endpoint and result',
    ['endpoint', 'result'],
    registry=REGISTRY,
)


def write_metrics(path: str) -> None:
    """Dump the registry in node-exporter textfile format."""
    write_to_textfile(path, REGISTRY)
