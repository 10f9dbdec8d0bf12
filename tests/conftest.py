"""
Shared fixtures for the test suite.
"""
import os
import sys

import pytest

# Add parent directory to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import config  # noqa: E402
from config import Config  # noqa: E402


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Fake credentials so no test can reach a real account."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')


@pytest.fixture(autouse=True)
def reset_config():
    """Reset the global config singleton around each test."""
    config._config = None
    yield
    config._config = None


@pytest.fixture
def test_config():
    """Config that talks to the real AWS endpoint shape (intercepted by moto)."""
    return Config(
        aws_region='us-east-1',
        s3_endpoint_url=None,
        s3_access_key_id=None,
        s3_secret_access_key=None,
        s3_force_path_style=False,
    )
