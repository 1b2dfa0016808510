import pytest
import random
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Hypothesis configuration for property-based testing
from hypothesis import settings
from tests.helpers.fake_server import TEST_SESSION, FakeWavepipeServer

# Register Hypothesis profiles
settings.register_profile("fast", max_examples=50, deadline=None)
settings.register_profile("thorough", max_examples=1000, deadline=None)
settings.load_profile("fast")  # Default to fast profile


def pytest_collection_modifyitems(items):
    """Automatically order tests: unit tests first, then property tests, then E2E tests.

    Individual tests marked with @pytest.mark.order("last") will run at the very end.
    """
    for item in items:
        # Skip if item already has explicit order marker
        if hasattr(item, 'get_closest_marker') and item.get_closest_marker('order'):
            continue

        # Assign order based on test file name
        test_file = str(item.fspath)
        if 'test_unit_' in test_file:
            item.add_marker(pytest.mark.order(1))
        elif 'test_props_' in test_file:
            item.add_marker(pytest.mark.order(2))
        elif 'test_e2e_' in test_file:
            item.add_marker(pytest.mark.order(3))


@pytest.fixture
def seeded_rng():
    """Deterministic random source for reproducible nonces."""
    return random.Random(1234)


@pytest.fixture
def login_body():
    """Login response as the server returns it."""
    return {'error': None, 'session': dict(TEST_SESSION)}


@pytest.fixture
def wavepipe_server():
    """Start a fake wavepipe server on a free local port.

    Yields:
        FakeWavepipeServer: The running server
    """
    server = FakeWavepipeServer().start()
    yield server
    server.stop()
