"""
Shared utilities used by both services.
"""

from clinic.core.shared.logger import (
    ColoredFormatter,
    CorrelationIdFilter,
    JSONFormatter,
    configure_logging,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

__all__ = [
    "ColoredFormatter",
    "CorrelationIdFilter",
    "JSONFormatter",
    "configure_logging",
    "get_correlation_id",
    "reset_correlation_id",
    "set_correlation_id",
]
