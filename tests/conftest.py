"""Pytest configuration and shared fixtures."""
import pytest

from defbind import (
    DataObject,
    DiagnosticRegistry,
    reset_engine_config,
)


@pytest.fixture(autouse=True)
def reset_engine_state():
    """Reset engine config and diagnostic callbacks around each test."""
    reset_engine_config()
    DiagnosticRegistry.clear_callbacks()

    yield

    reset_engine_config()
    DiagnosticRegistry.clear_callbacks()


@pytest.fixture
def diagnostics():
    """Collect every diagnostic emitted during the test."""
    recorded = []
    DiagnosticRegistry.add_callback(recorded.append)
    yield recorded
    DiagnosticRegistry.remove_callback(recorded.append)


@pytest.fixture
def customer_data():
    """Data array with an order (index 0) and its customer (index 1)."""
    order = DataObject({
        'id': 'O-1',
        'status': 'open',
        'note': None,
        'positions': [
            DataObject({'name': 'Pen', 'amount': 3}),
            DataObject({'name': 'Paper', 'amount': 0}),
        ],
    })
    customer = DataObject({
        'name': 'Ada',
        'email': '',
        'address': DataObject({'city': 'Berlin', 'zip': '10115'}),
    })
    return [order, customer]

