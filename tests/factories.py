"""Builders for repository descriptors used across tests.

Usage::

    from tests.factories import make_repository

    def test_something():
        repo = make_repository(id="epel", gpg_keys=["https://url/key"])
"""

from typing import Iterable, Optional

from osconfig_agent.policies.base import RepositoryDescriptor


_counter = 0


def _next_id() -> int:
    """Return a monotonically increasing integer for unique default values."""
    global _counter
    _counter += 1
    return _counter


def make_repository(
    *,
    id: Optional[str] = None,
    base_url: str = "http://repo1-url/",
    display_name: str = "",
    gpg_keys: Iterable[str] = (),
) -> RepositoryDescriptor:
    return RepositoryDescriptor(
        id=id or f"repo{_next_id()}",
        base_url=base_url,
        display_name=display_name,
        gpg_keys=tuple(gpg_keys),
    )
