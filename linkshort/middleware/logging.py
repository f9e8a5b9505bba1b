"""Request logging middleware."""

import logging
import time
from typing import Callable, Optional

from opentelemetry import metrics, trace
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its status and duration.

    Each request also opens an ``http`` span, increments the
    ``linkshort.requests`` counter and records its duration in the
    ``linkshort.request.duration`` histogram.
    """

    def __init__(
        self,
        app,
        logger: Optional[logging.Logger] = None,
        tracer: Optional[trace.Tracer] = None,
        meter: Optional[metrics.Meter] = None,
    ):
        super().__init__(app)
        self.logger = logger or logging.getLogger("linkshort.http")
        self.tracer = tracer or trace.NoOpTracer()
        meter = meter or metrics.NoOpMeter("linkshort")
        self.request_counter = meter.create_counter(
            "linkshort.requests",
            unit="1",
            description="Number of HTTP requests received",
        )
        self.request_duration = meter.create_histogram(
            "linkshort.request.duration",
            unit="ms",
            description="Time taken to answer HTTP requests",
        )

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.perf_counter()
        self.logger.debug(f"Request received: {request.method} {request.url.path}")

        with self.tracer.start_as_current_span(
            "http",
            kind=trace.SpanKind.SERVER,
            attributes={
                "http.request.method": request.method,
                "url.full": str(request.url),
                "url.path": request.url.path,
            },
        ) as span:
            response = await call_next(request)
            span.set_attribute("http.response.status_code", response.status_code)

        duration_ms = (time.perf_counter() - start_time) * 1000
        attributes = {
            "http.request.method": request.method,
            "http.response.status_code": response.status_code,
        }
        self.request_counter.add(1, attributes)
        self.request_duration.record(duration_ms, attributes)

        self.logger.debug(
            f"Response written: {request.method} {request.url.path} - "
            f"Status: {response.status_code} - Duration: {duration_ms:.2f}ms"
        )
        return response
