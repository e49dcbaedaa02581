"""Thin MLflow tracing wrappers for the resolution pipeline.

Tracing is a diagnostic side channel. Opening a span, recording span
inputs/outputs and tagging the trace are logged at DEBUG on failure and
never change a resolution outcome.

    from imsakiyah.observability.tracing import trace, start_span, set_tag

    @trace(name="reverse_geocode", span_type="TOOL")
    async def reverse_geocode(...): ...

    with start_span("resolve_city") as span:
        span.set_inputs({...})
"""

import logging
from contextlib import ExitStack, contextmanager

import mlflow

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Decorators
# ---------------------------------------------------------------------------

def trace(name: str | None = None, **kwargs):
    """Decorator: wraps a sync or async function in an MLflow trace span."""
    return mlflow.trace(name=name, **kwargs) if name else mlflow.trace(**kwargs)


# ---------------------------------------------------------------------------
# Context managers
# ---------------------------------------------------------------------------

class _GuardedSpan:
    """Span proxy whose input/output recording never raises into the pipeline."""

    def __init__(self, span=None):
        self._span = span

    def set_inputs(self, inputs: dict) -> None:
        self._record("set_inputs", inputs)

    def set_outputs(self, outputs: dict) -> None:
        self._record("set_outputs", outputs)

    def _record(self, method: str, data: dict) -> None:
        if self._span is None:
            return
        try:
            getattr(self._span, method)(data)
        except Exception as e:
            logger.debug("Span %s failed: %s", method, e)


@contextmanager
def start_span(name: str = "span", **kwargs):
    """Context manager: MLflow span around a pipeline step.

    If MLflow cannot open the span the block still runs, with a span that
    records nothing. Exceptions raised by the block itself propagate.
    """
    with ExitStack() as stack:
        try:
            span = stack.enter_context(mlflow.start_span(name=name, **kwargs))
        except Exception as e:
            logger.debug("Could not start span %s: %s", name, e)
            span = None
        yield _GuardedSpan(span)


# ---------------------------------------------------------------------------
# Tagging / setup
# ---------------------------------------------------------------------------

def set_tag(key: str, value: str) -> None:
    """Tag the active trace. Outside a trace this is a no-op."""
    try:
        mlflow.update_current_trace(tags={key: value})
    except Exception as e:
        logger.debug("Could not set trace tag %s: %s", key, e)


def set_tracking_uri(uri: str) -> None:
    mlflow.set_tracking_uri(uri)


def set_experiment(name: str) -> None:
    mlflow.set_experiment(name)


def enable_async_logging() -> None:
    mlflow.config.enable_async_logging()
