# VSSYNC Git Module
# Git operations for namespace discovery

from vssync.git.operations import GitError, get_remotes

__all__ = [
    "GitError",
    "get_remotes",
]
