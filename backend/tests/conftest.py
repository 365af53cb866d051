"""Shared fixtures: an in-memory configuration store per test."""
import pytest

from kea_config.services.store import create_store, init_schema


@pytest.fixture
def store():
    engine = create_store("sqlite://")
    init_schema(engine)
    yield engine
    engine.dispose()
