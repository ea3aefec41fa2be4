"""Pytest configuration and shared fixtures."""

import pytest

from tests.factories import make_repository


@pytest.fixture
def sample_config():
    """Sample agent configuration dictionary."""
    return {
        "policies": {
            "yum": {
                "repo_file": "/etc/yum.repos.d/google_osconfig_managed.repo",
                "file_mode": "0644",
            },
        },
        "logging": {
            "dir": "/var/log/google-osconfig-agent",
            "level": "INFO",
        },
    }


@pytest.fixture
def repo_file(tmp_path):
    """Destination path for a managed repo file."""
    return tmp_path / "google_osconfig_managed.repo"


@pytest.fixture
def two_repos():
    """Two repositories, one with a single key and one with two keys."""
    return [
        make_repository(
            id="id1",
            display_name="displayName1",
            gpg_keys=["https://url/key"],
        ),
        make_repository(
            id="id2",
            display_name="displayName2",
            gpg_keys=["https://url/key1", "https://url/key2"],
        ),
    ]
