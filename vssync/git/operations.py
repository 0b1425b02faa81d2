# VSSYNC Git Operations
# Git command execution for namespace discovery

import subprocess
from pathlib import Path
from typing import Optional

from vssync.errors import VssyncError


class GitError(VssyncError):
    """Raised when a git command fails or git is missing."""

    def __init__(self, message: str, returncode: int = 1, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


def _run_git(*args: str, cwd: Optional[Path] = None) -> subprocess.CompletedProcess[str]:
    """
    Run a git command with captured output.

    Args:
        *args: Git command arguments.
        cwd: Working directory.

    Returns:
        CompletedProcess with result.

    Raises:
        GitError: If git is missing or exits non-zero.
    """
    cmd = ["git", *args]
    try:
        result = subprocess.run(cmd, cwd=cwd, check=False, capture_output=True, text=True)
    except FileNotFoundError:
        raise GitError("git command not found. Is git installed?")
    if result.returncode != 0:
        raise GitError(
            f"Git command failed: {' '.join(cmd)}",
            returncode=result.returncode,
            stderr=result.stderr.strip() if result.stderr else "",
        )
    return result


def get_remotes(path: Optional[Path] = None) -> list[str]:
    """
    List configured remote names in configuration order.

    Args:
        path: Repository path.

    Returns:
        Remote names, empty if not a repository or no remotes exist.
    """
    try:
        result = _run_git("remote", cwd=path)
    except GitError:
        return []
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]
