"""Repository policies applied by the agent.

Each policy renders a package manager's repository definition file from
the repositories assigned to this host.
"""

from .base import (
    CancelToken,
    RepoFileError,
    RepoFileResult,
    RepoFileStage,
    RepoFileStatus,
    RepositoryDescriptor,
    parse_repository_descriptor,
    parse_repository_descriptors,
)
from .atomic import LocalFileSystem, atomic_write_text
from .yum import render_yum_repo_file, yum_repositories

__all__ = [
    "CancelToken",
    "LocalFileSystem",
    "RepoFileError",
    "RepoFileResult",
    "RepoFileStage",
    "RepoFileStatus",
    "RepositoryDescriptor",
    "atomic_write_text",
    "parse_repository_descriptor",
    "parse_repository_descriptors",
    "render_yum_repo_file",
    "yum_repositories",
]
