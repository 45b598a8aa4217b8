"""Test configuration for pytest.

This module imports fixtures that should be available to all tests.
"""

# Import fixtures
from tests.fixtures.common import (  # noqa
    alchemy_keys,
    fetch_config,
    no_keys,
    recording_factory,
    registry,
    relay_config,
)
