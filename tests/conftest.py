"""
Pytest Configuration for Business Query Assistant Tests
=======================================================
Shared fixtures and configuration for all test modules.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def flags():
    """Default feature flags, independent of the environment"""
    from config.feature_flags import FeatureFlags
    return FeatureFlags()


@pytest.fixture
def sample_tables():
    """Raw sheet tables for all three data sets"""
    from tests.fixtures.sample_tables import SAMPLE_TABLES
    return SAMPLE_TABLES


@pytest.fixture
def data_store():
    """In-memory data store serving the sample tables"""
    from tests.fixtures.sample_tables import FakeDataStore
    return FakeDataStore()


@pytest.fixture
def pipeline(data_store, flags):
    """Query pipeline bound to the in-memory data store"""
    from src.business_query import QueryPipeline
    return QueryPipeline(data_store=data_store, flags=flags)


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection based on markers"""
    for item in items:
        if "client" in item.fixturenames:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
