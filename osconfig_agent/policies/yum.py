"""Yum repository policy.

Renders the agent-managed yum .repo file from an ordered list of
repository descriptors and commits it atomically. The file is always
written in full; existing content at the destination is replaced.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..common.logger import get_logger
from .atomic import LocalFileSystem, atomic_write_text
from .base import (
    CancelToken,
    RepoFileError,
    RepoFileResult,
    RepoFileStage,
    RepoFileStatus,
    RepositoryDescriptor,
)

logger = get_logger("yum_policy")

HEADER = "# Repo file managed by Google OSConfig agent"
GPGKEY_PREFIX = "gpgkey="


def _render_section(repo: RepositoryDescriptor) -> List[str]:
    lines = [
        f"[{repo.id}]",
        f"name={repo.name}",
        f"baseurl={repo.base_url}",
        "enabled=1",
        "gpgcheck=1",
    ]
    if repo.gpg_keys:
        first, *rest = repo.gpg_keys
        lines.append(f"{GPGKEY_PREFIX}{first}")
        # Continuation lines line up under the first key.
        indent = " " * len(GPGKEY_PREFIX)
        lines.extend(f"{indent}{key}" for key in rest)
    return lines


def render_yum_repo_file(repos: Sequence[RepositoryDescriptor]) -> str:
    """Serialize repositories into yum .repo file text.

    Sections appear in input order after the [main] section. Ids are
    written verbatim, so duplicate ids give duplicate sections.

    Args:
        repos: Ordered repository descriptors (may be empty)

    Returns:
        Complete file content ending in a single newline
    """
    lines = [HEADER, "[main]", "gpgcheck=1"]
    for repo in repos:
        lines.append("")
        lines.extend(_render_section(repo))
    return "\n".join(lines) + "\n"


def yum_repositories(
    repos: Sequence[RepositoryDescriptor],
    repo_file: Union[str, Path],
    cancel: Optional[CancelToken] = None,
    fs: Optional[LocalFileSystem] = None,
    mode: int = 0o644,
) -> RepoFileResult:
    """Write the managed yum repo file for the given repositories.

    Args:
        repos: Ordered repository descriptors
        repo_file: Destination .repo path
        cancel: Optional cancellation token, checked before any I/O
        fs: Filesystem implementation (LocalFileSystem by default)
        mode: Permission bits of the written file

    Returns:
        RepoFileResult. On failure, stage names the step that failed and
        repo_file is unchanged.
    """
    path = str(repo_file)

    if cancel is not None and cancel.cancelled:
        logger.warning(f"Yum repository update of {path} cancelled before start")
        return RepoFileResult(
            status=RepoFileStatus.FAILED,
            path=path,
            stage=RepoFileStage.CANCELLED,
            error_message="cancelled before any I/O",
        )

    content = render_yum_repo_file(repos)
    logger.debug(f"Rendered {len(repos)} yum repositories ({len(content)} chars)")

    try:
        written = atomic_write_text(path, content, fs=fs, cancel=cancel, mode=mode)
    except RepoFileError as e:
        logger.error(f"Failed to write yum repo file {path} at {e.stage.value} stage: {e}")
        return RepoFileResult(
            status=RepoFileStatus.FAILED,
            path=path,
            repositories=len(repos),
            stage=e.stage,
            error_message=str(e),
        )

    logger.info(f"Wrote {len(repos)} yum repositories to {path}")
    return RepoFileResult(
        status=RepoFileStatus.SUCCESS,
        path=path,
        repositories=len(repos),
        bytes_written=written,
    )
