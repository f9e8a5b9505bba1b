"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from linkshort.core.config import Settings
from linkshort.core.database import MemoryLinkStore, SQLiteLinkStore
from linkshort.main import create_app


@pytest.fixture
def settings():
    """Settings for an app that never touches postgres."""
    return Settings(database_backend="memory", log_level="DEBUG")


@pytest.fixture
def store():
    """Create an in-memory link store."""
    return MemoryLinkStore()


@pytest.fixture
def client(store, settings):
    """Create a test client serving from the in-memory store."""
    app = create_app(store=store, settings=settings)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def sqlite_client():
    """Create a test client backed by an in-memory SQLite store."""
    settings = Settings(database_backend="sqlite", create_schema=True)
    store = SQLiteLinkStore(":memory:", read_timeout=5.0, write_timeout=5.0)
    app = create_app(store=store, settings=settings)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def span_exporter():
    """Collect finished spans in memory."""
    return InMemorySpanExporter()


@pytest.fixture
def tracer(span_exporter):
    """Create a tracer that exports to the in-memory exporter."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider.get_tracer("linkshort.tests")


@pytest.fixture
def metric_reader():
    """Collect metrics on demand."""
    return InMemoryMetricReader()


@pytest.fixture
def meter(metric_reader):
    provider = MeterProvider(metric_readers=[metric_reader])
    return provider.get_meter("linkshort.tests")


@pytest.fixture
def traced_store(tracer):
    """Create an in-memory link store reporting to the test tracer."""
    return MemoryLinkStore(tracer=tracer)


@pytest.fixture
def traced_client(traced_store, settings, tracer, meter):
    """Create a test client wired to the test tracer and meter."""
    app = create_app(store=traced_store, settings=settings, tracer=tracer, meter=meter)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
