"""Structured logging for content resolution."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredResolutionLogger:
    """Structured logger for (locale, slug) resolutions."""

    def log_resolution(
        self,
        *,
        kind: str,
        locale: str,
        slug: str,
        outcome: str,
        latency_ms: float,
        canonical_slug: str | None = None,
        is_fallback: bool | None = None,
    ) -> None:
        """Log one resolution with structured data.

        Not-found is an expected outcome and is logged at INFO.
        """
        log_data: dict[str, Any] = {
            "kind": kind,
            "locale": locale,
            "slug": slug,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if canonical_slug is not None:
            log_data["canonical_slug"] = canonical_slug
        if is_fallback is not None:
            log_data["is_fallback"] = is_fallback

        log_msg = f"Content resolution: {kind}/{locale} - {outcome}"
        logger.info(log_msg, extra={"structured": log_data})

    def log_storage_failure(self, *, kind: str, locale: str, slug: str, error: Exception) -> None:
        """Log a storage failure that aborted a resolution."""
        logger.error(
            f"Content resolution: {kind}/{locale} - storage_error",
            extra={
                "structured": {
                    "kind": kind,
                    "locale": locale,
                    "slug": slug,
                    "outcome": "storage_error",
                    "error_reason": type(error).__name__,
                }
            },
            exc_info=error,
        )
