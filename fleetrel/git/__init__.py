"""Git operations module."""

from fleetrel.git.repository import GitCheckout, GitError, Repository

__all__ = [
    "GitCheckout",
    "GitError",
    "Repository",
]
