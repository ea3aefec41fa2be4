"""Base data structures for repository policies.

Defines the repository descriptor consumed by the policy renderers, the
result returned to the agent, and the cancellation token checked before
any filesystem work starts.
"""

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple


class RepoFileStage(Enum):
    """Stage of a repo file update."""

    CANCELLED = "cancelled"
    PREPARE = "prepare"  # temp file creation in the destination directory
    WRITE = "write"
    COMMIT = "commit"  # rename onto the destination


class RepoFileStatus(Enum):
    """Outcome of a repo file update."""

    SUCCESS = "success"
    FAILED = "failed"


class RepoFileError(RuntimeError):
    """Raised when a repo file cannot be committed.

    The destination is untouched whenever this is raised.
    """

    def __init__(self, stage: RepoFileStage, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.stage = stage
        self.path = path


@dataclass(frozen=True)
class RepositoryDescriptor:
    """A single package repository to configure."""

    id: str
    base_url: str
    display_name: str = ""
    gpg_keys: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        """Display name, falling back to the repository id."""
        return self.display_name or self.id


@dataclass
class RepoFileResult:
    """Result of writing a managed repo file."""

    status: RepoFileStatus
    path: str
    repositories: int = 0
    bytes_written: int = 0
    stage: Optional[RepoFileStage] = None
    error_message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Check if the repo file was committed."""
        return self.status == RepoFileStatus.SUCCESS


class CancelToken:
    """Cancellation signal passed into a policy run.

    A token is cancelled explicitly with cancel() or implicitly once its
    deadline (seconds after creation) has passed.
    """

    def __init__(
        self,
        deadline: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._event = threading.Event()
        self._clock = clock
        self._expires_at = clock() + deadline if deadline is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._expires_at is not None and self._clock() >= self._expires_at:
            self._event.set()
            return True
        return False


def _first(mapping: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in mapping and mapping[key] is not None:
            return mapping[key]
    return default


def parse_repository_descriptor(repo_dict: Dict[str, Any]) -> RepositoryDescriptor:
    """Parse a repository descriptor from a policy mapping.

    Both snake_case and the control plane's camelCase keys are accepted.
    Ids are taken verbatim; uniqueness and characters are not checked.

    Args:
        repo_dict: Repository mapping

    Returns:
        RepositoryDescriptor instance
    """
    gpg_keys = _first(repo_dict, "gpg_keys", "gpgKeys", default=())
    if isinstance(gpg_keys, str):
        gpg_keys = (gpg_keys,)

    return RepositoryDescriptor(
        id=str(_first(repo_dict, "id", default="")),
        base_url=str(_first(repo_dict, "base_url", "baseUrl", default="")),
        display_name=str(_first(repo_dict, "display_name", "displayName", default="")),
        gpg_keys=tuple(str(key) for key in gpg_keys),
    )


def parse_repository_descriptors(repos: Any) -> List[RepositoryDescriptor]:
    """Parse an ordered list of repository descriptors.

    Raises:
        TypeError: If repos is not a list of mappings
    """
    if not isinstance(repos, list):
        raise TypeError(f"Repositories must be a list, got {type(repos).__name__}")

    descriptors = []
    for repo in repos:
        if not isinstance(repo, dict):
            raise TypeError(f"Repository entry must be a mapping, got {type(repo).__name__}")
        descriptors.append(parse_repository_descriptor(repo))
    return descriptors
