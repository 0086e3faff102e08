"""Observability package for fluxui-docs."""

from .logging import (
    setup_logging,
    get_logger,
    get_structured_logger,
    log_performance,
    JSONFormatter,
    ColoredFormatter
)

__all__ = [
    'setup_logging',
    'get_logger',
    'get_structured_logger',
    'log_performance',
    'JSONFormatter',
    'ColoredFormatter'
]
