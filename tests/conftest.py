"""Pytest fixtures for combinedata tests."""

import logging

import numpy as np
import pytest

from combinedata.repository import DataEvents, InMemoryRepository


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: unit tests (no repository wiring)")
    config.addinivalue_line("markers", "integration: end-to-end combine workflows")


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


class RecordingSink:
    """Data-changed sink that remembers every notification."""

    def __init__(self):
        self.notified = []

    def notify_dataset_data_changed(self, dataset):
        self.notified.append(dataset)


@pytest.fixture
def events() -> DataEvents:
    return DataEvents()


@pytest.fixture
def repo(events) -> InMemoryRepository:
    return InMemoryRepository(events=events)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_points(repo):
    """Factory: make_points(name, n_points, n_dims, values=None, names=None)."""

    def _make(name, n_points=0, n_dims=2, values=None, names=None, dtype=np.float32):
        ds = repo.create_dataset(name)
        if values is None:
            values = np.arange(n_points * n_dims, dtype=dtype)
        ds.set_data(np.asarray(values, dtype=dtype), n_dims)
        if names is not None:
            ds.set_dimension_names(names)
        return ds

    return _make


@pytest.fixture(autouse=True)
def reset_combinedata_logger():
    logger = logging.getLogger("combinedata")
    original_handlers = logger.handlers[:]
    original_level = logger.level
    original_propagate = logger.propagate
    yield
    logger.handlers = original_handlers
    logger.level = original_level
    logger.propagate = original_propagate
