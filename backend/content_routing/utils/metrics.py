"""Prometheus metrics for content resolution and feeds."""

from prometheus_client import Counter, Histogram

content_resolution_total = Counter(
    "content_resolution_total",
    "Inbound (locale, slug) resolutions by outcome",
    ["kind", "outcome"],
)

content_resolution_latency_ms = Histogram(
    "content_resolution_latency_ms",
    "Resolution latency in milliseconds",
    ["kind", "outcome"],
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000],
)

translation_fallback_total = Counter(
    "translation_fallback_total",
    "Views served with base-locale content because no complete translation existed",
    ["kind", "locale"],
)

feed_pages_total = Counter(
    "feed_pages_total",
    "Feed pages served",
    ["kind"],
)


class PrometheusContentMetrics:
    """Prometheus-based content metrics implementation."""

    def record_resolution(self, kind: str, outcome: str, latency_ms: float) -> None:
        """Count a resolution and record its latency."""
        content_resolution_total.labels(kind=kind, outcome=outcome).inc()
        content_resolution_latency_ms.labels(kind=kind, outcome=outcome).observe(latency_ms)

    def inc_fallback(self, kind: str, locale: str) -> None:
        """Increment fallback counter."""
        translation_fallback_total.labels(kind=kind, locale=locale).inc()

    def inc_feed_page(self, kind: str) -> None:
        """Increment feed page counter."""
        feed_pages_total.labels(kind=kind).inc()
