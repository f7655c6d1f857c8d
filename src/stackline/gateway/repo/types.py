"""Value types exchanged with the repository gateway."""

from dataclasses import dataclass

# Hex commit SHA. Plain string ordering is the total order used by BranchIndex.
CommitId = str


@dataclass(frozen=True)
class Branch:
    """A branch name bound to the commit it points at.

    Several branches may share the same commit id.
    """

    id: CommitId
    name: str


@dataclass(frozen=True)
class Commit:
    """A commit yielded by an ancestor walk."""

    id: CommitId
    summary: str = ""
