"""Production repository implementation driving the git executable."""

import subprocess
from collections.abc import Iterator
from pathlib import Path

from stackline.gateway.repo.abc import Repository
from stackline.gateway.repo.types import Branch, Commit, CommitId
from stackline.subprocess_utils import run_subprocess_with_context


def discover_repo_root(cwd: Path) -> Path | None:
    """Find the top-level directory of the git repository containing cwd.

    Returns:
        Repository root, or None if cwd is not inside a git work tree
    """
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        return None
    if result.returncode != 0:
        return None
    return Path(result.stdout.strip())


class RealRepository(Repository):
    """Production implementation of repository queries using subprocess.

    Every query runs an actual git command in `repo_root`.
    """

    def __init__(self, repo_root: Path) -> None:
        self._repo_root = repo_root

    @property
    def repo_root(self) -> Path:
        return self._repo_root

    # ============================================================================
    # Ancestry Queries
    # ============================================================================

    def merge_base(self, a: CommitId, b: CommitId) -> CommitId | None:
        """Get the merge base via `git merge-base`."""
        result = subprocess.run(
            ["git", "merge-base", a, b],
            cwd=self._repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        # Exit status 1 with empty output means unrelated histories
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def ancestors_from(self, start: CommitId) -> Iterator[Commit]:
        """Stream `git log --topo-order` lazily, one commit per line.

        The git process is started on first iteration and terminated when the
        caller stops consuming the iterator.
        """
        cmd = ["git", "log", "--topo-order", "--format=%H%x09%s", start, "--"]
        process = subprocess.Popen(
            cmd,
            cwd=self._repo_root,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            bufsize=1,  # Line buffered
        )
        assert process.stdout is not None
        try:
            for line in process.stdout:
                line = line.rstrip("\n")
                if not line:
                    continue
                commit_id, _, summary = line.partition("\t")
                yield Commit(id=commit_id, summary=summary)
        finally:
            if process.poll() is None:
                process.terminate()
            process.stdout.close()
            process.wait()

    # ============================================================================
    # Ref Queries
    # ============================================================================

    def resolve(self, ref: str) -> CommitId | None:
        """Resolve a ref with `git rev-parse --verify <ref>^{commit}`."""
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"],
            cwd=self._repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def head_commit(self) -> CommitId | None:
        return self.resolve("HEAD")

    def current_branch(self) -> str | None:
        """Get the currently checked-out branch."""
        result = subprocess.run(
            ["git", "symbolic-ref", "--quiet", "--short", "HEAD"],
            cwd=self._repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def list_branches(self) -> list[Branch]:
        """List local branches via git for-each-ref."""
        result = run_subprocess_with_context(
            cmd=[
                "git",
                "for-each-ref",
                "--format=%(objectname)\t%(refname:short)",
                "refs/heads/",
            ],
            operation_context="list local branches",
            cwd=self._repo_root,
        )
        branches: list[Branch] = []
        for line in result.stdout.strip().split("\n"):
            if not line.strip():
                continue
            commit_id, _, name = line.partition("\t")
            branches.append(Branch(id=commit_id.strip(), name=name.strip()))
        return branches

    def get_config_values(self, key: str) -> list[str]:
        """Read every value of a multi-valued git config key.

        Returns:
            Values in config order; empty when the key is unset
        """
        result = subprocess.run(
            ["git", "config", "--get-all", key],
            cwd=self._repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        # Exit status 1 means the key is not set
        if result.returncode != 0:
            return []
        return [line.strip() for line in result.stdout.split("\n") if line.strip()]
