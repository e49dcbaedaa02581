"""Observability — structured logging and MLflow tracing."""

from imsakiyah.observability.logging import correlation_scope, get_correlation_id, setup_logging
from imsakiyah.observability.tracing import set_tag, start_span, trace

__all__ = ["correlation_scope", "get_correlation_id", "set_tag", "setup_logging", "start_span", "trace"]
