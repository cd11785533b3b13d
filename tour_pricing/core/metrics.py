"""Prometheus metrics for monitoring"""
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry
import time
from functools import wraps
from typing import Callable

registry = CollectorRegistry()

request_count = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status'],
    registry=registry
)

request_duration = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    registry=registry
)

quotes_total = Counter(
    'quotes_total',
    'Total pricing quotes by outcome',
    ['outcome'],
    registry=registry
)

quote_duration = Histogram(
    'quote_duration_seconds',
    'Time spent pricing a quote in seconds',
    registry=registry
)

rate_lookups = Counter(
    'rate_lookups_total',
    'Total rate table lookups',
    ['table', 'status'],
    registry=registry
)

rate_lookup_duration = Histogram(
    'rate_lookup_duration_seconds',
    'Rate table lookup duration in seconds',
    ['table'],
    registry=registry
)

rule_defaults_applied = Counter(
    'rule_defaults_applied_total',
    'Rule lookups that fell back to the built-in default',
    ['category'],
    registry=registry
)

cache_hits = Counter(
    'cache_hits_total',
    'Total cache hits',
    ['cache_key'],
    registry=registry
)

cache_misses = Counter(
    'cache_misses_total',
    'Total cache misses',
    ['cache_key'],
    registry=registry
)

redis_connected = Gauge(
    'redis_connected',
    'Redis connection status (1=connected, 0=disconnected)',
    registry=registry
)

db_connected = Gauge(
    'db_connected',
    'Database connection status (1=connected, 0=disconnected)',
    registry=registry
)


def track_rate_lookup(table: str):
    """Decorator to track rate table lookup metrics"""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = await func(*args, **kwargs)
                rate_lookups.labels(table=table, status='success').inc()
                return result
            except Exception:
                rate_lookups.labels(table=table, status='error').inc()
                raise
            finally:
                rate_lookup_duration.labels(table=table).observe(time.time() - start_time)
        return wrapper
    return decorator


def get_metrics_text() -> str:
    """Generate Prometheus metrics in text format"""
    from prometheus_client import generate_latest
    return generate_latest(registry).decode('utf-8')
