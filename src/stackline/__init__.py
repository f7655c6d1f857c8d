"""stackline: branch classification for stacked-branch git workflows.

Groups branch pointers by commit and answers which branches sit on a stack,
which depend on a base, and which protected branch anchors the stack root.
See `stackline --help` for the CLI.
"""

from stackline.branches import BranchIndex, find_protected_base, find_protected_bases
from stackline.errors import InvariantViolationError
from stackline.gateway.repo.types import Branch, Commit, CommitId

__all__ = [
    "Branch",
    "BranchIndex",
    "Commit",
    "CommitId",
    "InvariantViolationError",
    "find_protected_base",
    "find_protected_bases",
]
