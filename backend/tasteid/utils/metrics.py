"""Prometheus metrics configuration"""

from prometheus_client import Counter, Info
from prometheus_fastapi_instrumentator import Instrumentator

from ..config import settings

# Application info
app_info = Info('tasteid', 'TasteID backend information')
app_info.info({
    'version': settings.VERSION,
    'service': 'tasteid-backend'
})

# Grid metrics
collections_created_total = Counter(
    'tasteid_collections_created_total',
    'Total collections created',
    ['origin']
)

collections_deleted_total = Counter(
    'tasteid_collections_deleted_total',
    'Total collections deleted'
)

collection_capacity_rejections_total = Counter(
    'tasteid_collection_capacity_rejections_total',
    'Collection creations rejected because all grid slots were taken'
)

item_writes_total = Counter(
    'tasteid_item_writes_total',
    'Item writes by operation',
    ['operation']
)

item_positions_rewritten_total = Counter(
    'tasteid_item_positions_rewritten_total',
    'Item rows whose position changed during a reindex'
)

# Swipe saves
saved_items_total = Counter(
    'tasteid_saved_items_total',
    'Items saved from the swiper',
    ['outcome']
)

# Search metrics
search_requests_total = Counter(
    'tasteid_search_requests_total',
    'Search provider requests',
    ['provider', 'outcome']
)

cache_hits_total = Counter(
    'tasteid_cache_hits_total',
    'Total cache hits',
    ['cache_type']
)

cache_misses_total = Counter(
    'tasteid_cache_misses_total',
    'Total cache misses',
    ['cache_type']
)


def setup_metrics(app):
    """
    Setup Prometheus metrics for FastAPI app

    Args:
        app: FastAPI application instance
    """
    instrumentator = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        should_respect_env_var=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics"],
        env_var_name="ENABLE_METRICS",
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True
    )

    instrumentator.instrument(app).expose(app, endpoint="/metrics")

    return instrumentator


def record_collection_created(origin: str = "user"):
    """Record a collection creation (user, likes, onboarding)"""
    collections_created_total.labels(origin=origin).inc()


def record_item_write(operation: str):
    """Record an item add or remove"""
    item_writes_total.labels(operation=operation).inc()


def record_saved_item(outcome: str):
    """Record a swipe save (created or existing)"""
    saved_items_total.labels(outcome=outcome).inc()


def record_search(provider: str, outcome: str):
    """Record a search request (ok, fallback, error)"""
    search_requests_total.labels(provider=provider, outcome=outcome).inc()


def increment_cache_hit(cache_type: str = "redis"):
    """Increment cache hit counter"""
    cache_hits_total.labels(cache_type=cache_type).inc()


def increment_cache_miss(cache_type: str = "redis"):
    """Increment cache miss counter"""
    cache_misses_total.labels(cache_type=cache_type).inc()
