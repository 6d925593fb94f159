"""
Pytest configuration and shared fixtures for braking-simulation tests.
"""

import pytest
import os
import sys

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)


@pytest.fixture(scope="session")
def repo_path():
    """Get the repository root path."""
    return project_root


@pytest.fixture(scope="session")
def tables_path(repo_path):
    """Get the path of the constant tables file."""
    return os.path.join(repo_path, "brakingsim", "input", "braking_tables.ini")


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
